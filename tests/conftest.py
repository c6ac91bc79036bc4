import http.client
import socket

import pytest

from assethost.config import ServerConfig
from assethost.server import AssetServer

INDEX_HTML = b"<html><head><title>Game</title></head><body>hi</body></html>"
PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


@pytest.fixture
def asset_root(tmp_path):
    root = tmp_path / "Game_Contents"
    (root / "img" / "pictures").mkdir(parents=True)
    (root / "audio").mkdir()
    (root / "data").mkdir()
    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "img" / "pictures" / "a b.png").write_bytes(PNG_BYTES)
    (root / "img" / "pictures" / "Title.rpgmvp").write_bytes(b"encrypted")
    (root / "audio" / "theme.ogg").write_bytes(b"OggS")
    (root / "data" / "System.json").write_bytes(b'{"gameTitle": "Game"}')
    return root


@pytest.fixture
def start_server(asset_root):
    servers = []

    def start(**kwargs):
        kwargs.setdefault("root", str(asset_root))
        kwargs.setdefault("recv_timeout", 1.0)
        kwargs.setdefault("accept_timeout", 0.1)
        server = AssetServer(ServerConfig(port=0, **kwargs))
        server.start()
        assert server.wait_until_bound(timeout=5)
        servers.append(server)
        return server

    yield start
    for server in servers:
        server.stop()


def _fetch(server, target, method="GET", headers=None, body=None):
    host, port = server.address
    conn = http.client.HTTPConnection(host, port, timeout=5)
    try:
        conn.request(method, target, body=body, headers=headers or {})
        resp = conn.getresponse()
        return resp.status, dict(resp.getheaders()), resp.read()
    finally:
        conn.close()


@pytest.fixture
def fetch():
    return _fetch


def raw_exchange(server, data: bytes) -> bytes:
    with socket.create_connection(server.address, timeout=5) as sock:
        sock.sendall(data)
        chunks = []
        while True:
            chunk = sock.recv(65536)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


@pytest.fixture
def exchange():
    return raw_exchange
