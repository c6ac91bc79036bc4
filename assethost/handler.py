import logging
from typing import Callable, Optional

from .config import CACHE_CONTROL
from .loader import load_asset
from .models import Request, RequestView, Response, ResponseSpec
from .resolver import resolve_target
from .transform import transform_asset

logger = logging.getLogger(__name__)

PLAIN_TEXT = "text/plain"


class AssetHandler:
    def __init__(
        self,
        root: str,
        on_request: Optional[Callable[[RequestView, Response], None]] = None,
        inject_payload: Optional[str] = None,
    ) -> None:
        self.root = root
        self.on_request = on_request
        self.inject_payload = inject_payload

    def handle(self, req: Request) -> ResponseSpec:
        # MalformedTarget propagates; the engine answers it with a 500.
        rel_path = resolve_target(req.target)

        asset = load_asset(self.root, rel_path)
        if asset is None:
            logger.debug("Not found: %s", rel_path)
            return not_found()

        body = transform_asset(rel_path, asset.mime_type, asset.content, self.inject_payload)

        response = Response()
        response.add_header("Content-Type", asset.mime_type)
        response.add_header("Access-Control-Allow-Origin", "*")
        response.add_header("Access-Control-Allow-Methods", "GET, POST, OPTIONS")
        response.add_header("Access-Control-Allow-Headers", "Content-Type")
        if asset.mime_type.startswith(("audio/", "image/")):
            response.add_header("Cache-Control", CACHE_CONTROL)

        if self.on_request is not None:
            self.on_request(RequestView(url=req.url), response)

        return ResponseSpec(200, "OK", headers=response.headers, body=body)


def not_found() -> ResponseSpec:
    return ResponseSpec(404, "Not Found", headers={"Content-Type": PLAIN_TEXT}, body=b"Not Found")


def uri_parse_error() -> ResponseSpec:
    return ResponseSpec(
        500,
        "Internal Server Error",
        headers={"Content-Type": PLAIN_TEXT},
        body=b"Internal Server Error - URI Parse Error",
    )
