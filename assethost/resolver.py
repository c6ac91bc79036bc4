import re
from urllib.parse import unquote, urlsplit

from .config import DEFAULT_DOCUMENT
from .errors import MalformedTarget

_INVALID_TARGET_CHARS = re.compile(r"[\x00-\x20\x7f-\uffff]")


def target_path(target: str) -> str:
    """Return the raw path component of a request target.

    Accepts origin-form ("/a/b?q"), absolute-form ("http://host/a/b") and
    asterisk-form ("*"). Query and fragment are discarded.
    """
    if not target:
        raise MalformedTarget(target, "empty target")
    match = _INVALID_TARGET_CHARS.search(target)
    if match:
        raise MalformedTarget(target, f"invalid character {match.group()!r}")
    if target == "*":
        return target

    try:
        parts = urlsplit(target)
    except ValueError as e:
        raise MalformedTarget(target, str(e)) from e

    if target.startswith("/"):
        if target.startswith("//"):
            # urlsplit reads a leading "//" as an authority; keep it as path
            return target.split("?", 1)[0].split("#", 1)[0]
        return parts.path
    if parts.scheme and parts.netloc:
        return parts.path or "/"
    raise MalformedTarget(target, "not an origin-form or absolute URI")


def resolve_target(target: str) -> str:
    """Turn a raw request target into a path relative to the asset root."""
    path = unquote(target_path(target), errors="replace")

    if path == "/":
        path = "/" + DEFAULT_DOCUMENT

    if path.startswith("/"):
        path = path[1:]

    return path or DEFAULT_DOCUMENT
