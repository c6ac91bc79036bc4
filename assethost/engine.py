import logging
import re
import socket
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

from .errors import BadRequest, MalformedTarget
from .handler import AssetHandler, uri_parse_error
from .models import Request, ResponseSpec

logger = logging.getLogger(__name__)

_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


class HTTPEngine:
    def __init__(self, config, request_handler: AssetHandler, server_name=None) -> None:
        self.config = config
        self.request_handler = request_handler
        if server_name is None:
            server_name = "assethost"
        self.server_name = server_name

    def handle_connection(self, conn: socket.socket) -> None:
        try:
            self.process(conn)
        finally:
            try:
                conn.close()
            except OSError:
                pass

    def process(self, conn: socket.socket) -> None:
        method = "GET"
        try:
            raw = self._read_headers(conn)
            if raw is None:
                return

            req, rest = self._parse_request(raw)
            method = req.method
            self._discard_body(conn, req, rest)

            resp = self.request_handler.handle(req)
            logger.debug("%s %s -> %d", req.method, req.target, resp.status)
            self._send(conn, method, resp)

        except (socket.timeout, TimeoutError):
            return
        except MalformedTarget as e:
            logger.warning("URI parse error: %s", e)
            self._send(conn, method, uri_parse_error())
        except BadRequest as e:
            logger.warning("Bad request: %s", e)
            self._send(conn, method, self._simple_response(400, "Bad Request"))
        except OSError as e:
            logger.debug("Connection error: %s", e)
        except Exception:
            logger.exception("Unhandled error while serving request")
            self._send(conn, method, self._simple_response(500, "Internal Server Error"))

    def _read_headers(self, conn: socket.socket) -> Optional[bytes]:
        buf = bytearray()
        while True:
            if b"\r\n\r\n" in buf:
                return bytes(buf)
            if len(buf) > self.config.max_header_bytes:
                return bytes(buf)
            chunk = conn.recv(self.config.chunk_size)
            if chunk == b"":
                return bytes(buf) if buf else None
            buf.extend(chunk)

    def _parse_request(self, raw: bytes) -> Tuple[Request, bytes]:
        head, _, rest = raw.partition(b"\r\n\r\n")
        lines = head.split(b"\r\n")

        request_line = lines[0].decode("iso-8859-1")
        parts = request_line.split(" ")
        if len(parts) != 3:
            raise BadRequest(f"bad request line: {request_line!r}")

        method, target, version = parts
        if not method or not version.startswith("HTTP/"):
            raise BadRequest(f"bad request line: {request_line!r}")

        headers: Dict[str, str] = {}
        for bline in lines[1:]:
            if not bline:
                continue
            line = bline.decode("iso-8859-1", errors="ignore")
            if ":" not in line:
                continue
            k, v = line.split(":", 1)
            headers[k.strip().lower()] = v.strip()

        return Request(method=method, target=target, version=version, headers=headers), rest

    def _discard_body(self, conn: socket.socket, req: Request, rest: bytes) -> None:
        try:
            remaining = int(req.headers.get("content-length", "0")) - len(rest)
        except ValueError:
            return
        remaining = min(remaining, self.config.max_body_bytes)
        while remaining > 0:
            chunk = conn.recv(min(remaining, self.config.chunk_size))
            if not chunk:
                return
            remaining -= len(chunk)

    def _send(self, conn: socket.socket, method: str, resp: ResponseSpec) -> None:
        head_only = method.upper() == "HEAD"

        # Framing is ours; Date and Server only fill in what the response lacks.
        headers = {k: v for k, v in resp.headers.items() if str(k).lower() not in ("connection", "content-length")}
        present = {str(k).lower() for k in headers}
        if "date" not in present:
            headers["Date"] = self._http_date()
        if "server" not in present:
            headers["Server"] = self.server_name
        headers["Connection"] = "close"
        headers["Content-Length"] = str(len(resp.body))

        block = bytearray(f"HTTP/1.1 {resp.status} {resp.reason}\r\n".encode("ascii"))
        for k, v in headers.items():
            line = encode_header(k, v)
            if line is None:
                logger.debug("Dropping invalid header %r", k)
                continue
            block.extend(line)
        block.extend(b"\r\n")

        if not head_only:
            block.extend(resp.body)
        conn.sendall(bytes(block))

    def _simple_response(self, status: int, reason: str) -> ResponseSpec:
        return ResponseSpec(
            status=status,
            reason=reason,
            headers={"Content-Type": "text/plain"},
            body=reason.encode("ascii"),
        )

    @staticmethod
    def _http_date() -> str:
        dt = datetime.now(timezone.utc)
        return dt.strftime("%a, %d %b %Y %H:%M:%S GMT")


def encode_header(name, value) -> Optional[bytes]:
    """Serialize one header line, or None when it cannot go on the wire."""
    if not isinstance(name, str) or not isinstance(value, str):
        return None
    if not _TOKEN.match(name) or any(c in value for c in "\r\n\0"):
        return None
    try:
        return f"{name}: {value}\r\n".encode("ascii")
    except UnicodeEncodeError:
        return None
