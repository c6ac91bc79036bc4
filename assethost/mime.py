import os

DEFAULT_MIME_TYPE = "application/octet-stream"

MIME_TYPES = {
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "json": "application/json",
    "txt": "text/plain",
    "xml": "application/xml",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "ico": "image/x-icon",
    "woff": "font/woff",
    "woff2": "font/woff2",
    "ttf": "font/ttf",
    "otf": "font/otf",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "m4a": "audio/mp4",
    "aac": "audio/aac",
    "mp4": "video/mp4",
    "webm": "video/webm",
    # Encrypted RPG Maker MV assets, typed as what they decrypt to.
    "rpgmvo": "audio/ogg",
    "rpgmvm": "audio/mp4",
    "rpgmvp": "image/png",
    "rpgmvw": "audio/wav",
}


def mime_for_extension(extension: str) -> str:
    ext = (extension or "").lower()
    if ext.startswith("."):
        ext = ext[1:]
    return MIME_TYPES.get(ext, DEFAULT_MIME_TYPE)


def guess_mime_type(path: str) -> str:
    _, ext = os.path.splitext(path)
    return mime_for_extension(ext)
