from dataclasses import dataclass
from typing import Callable, Optional

DEFAULT_HOST = "127.0.0.1"
DEFAULT_DOCUMENT = "index.html"
SAVE_SUFFIX = "rpgsave"
HTML_EXTENSIONS = ("html", "htm")
CACHE_CONTROL = "public, max-age=31536000"


@dataclass(frozen=True)
class ServerConfig:
    host: str = DEFAULT_HOST
    port: int = 0
    root: str = "."
    # Called as on_request(request, response) once per served asset.
    on_request: Optional[Callable] = None
    inject_payload: Optional[str] = None
    backlog: int = 128
    recv_timeout: float = 2.0
    accept_timeout: float = 1.0
    max_header_bytes: int = 65536
    max_body_bytes: int = 1024 * 1024
    chunk_size: int = 64 * 1024
