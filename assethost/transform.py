import re

from .config import HTML_EXTENSIONS

HTML_MIME_TYPE = "text/html"

_HEAD_CLOSE = re.compile(r"</head\s*>", re.IGNORECASE)
_BODY_OPEN = re.compile(r"<body(?:\s[^>]*)?>", re.IGNORECASE)


def is_html(rel_path: str, mime_type: str) -> bool:
    if mime_type != HTML_MIME_TYPE:
        return False
    return rel_path.lower().endswith(tuple("." + ext for ext in HTML_EXTENSIONS))


def inject_payload(content: bytes, payload: str) -> bytes:
    """Splice ``payload`` into an HTML document exactly once.

    Goes right before ``</head>``, else right after the opening ``<body>``
    tag, else in front of the whole document.
    """
    text = content.decode("utf-8", errors="replace")

    match = _HEAD_CLOSE.search(text)
    if match:
        at = match.start()
    else:
        match = _BODY_OPEN.search(text)
        at = match.end() if match else 0

    return (text[:at] + payload + text[at:]).encode("utf-8")


def transform_asset(rel_path: str, mime_type: str, content: bytes, payload) -> bytes:
    if payload is None or not is_html(rel_path, mime_type):
        return content
    return inject_payload(content, payload)
