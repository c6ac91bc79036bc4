from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class Request:
    method: str
    target: str
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def url(self) -> str:
        return self.target


@dataclass(frozen=True)
class RequestView:
    """What the request hook may read about a request."""

    url: str


class Response:
    """Header set of an outgoing asset response, open to the request hook.

    Keys are stored as given; setting an existing key replaces its value.
    """

    def __init__(self) -> None:
        self.headers: Dict[str, str] = {}

    def add_header(self, name: str, value: str) -> None:
        self.headers[str(name)] = str(value)


@dataclass(frozen=True)
class AssetRecord:
    content: bytes
    mime_type: str


@dataclass(frozen=True)
class ResponseSpec:
    status: int
    reason: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
