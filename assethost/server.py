import logging
import socket
import threading
from typing import Optional, Tuple

from .config import ServerConfig
from .engine import HTTPEngine
from .handler import AssetHandler

logger = logging.getLogger(__name__)


class AssetServer:
    """Serves the asset root over loopback HTTP, one request at a time.

    ``start()`` runs the listener on a daemon thread and returns at once;
    callers that need the socket to be bound use ``wait_until_bound()``.
    """

    def __init__(self, config: ServerConfig) -> None:
        self.config = config
        self.engine = HTTPEngine(
            config,
            AssetHandler(config.root, config.on_request, config.inject_payload),
        )

        # Created on serve()
        self._listen_sock: Optional[socket.socket] = None
        self._thread: Optional[threading.Thread] = None
        self.address: Optional[Tuple[str, int]] = None

        self.bound = False
        self._ready = threading.Event()
        self._stop_event = threading.Event()

    @property
    def url(self) -> Optional[str]:
        if self.address is None:
            return None
        return f"http://{self.address[0]}:{self.address[1]}/"

    def start(self) -> threading.Thread:
        if self._thread is None:
            self._thread = threading.Thread(target=self.serve, name="asset-server", daemon=True)
            self._thread.start()
        return self._thread

    def wait_until_bound(self, timeout: Optional[float] = None) -> bool:
        """True once listening; False on timeout or when binding failed."""
        self._ready.wait(timeout)
        return self.bound

    def serve(self) -> None:
        try:
            try:
                self._listen_sock = self._create_listen_socket()
            except OSError as e:
                logger.error("Failed to create server on %s:%s: %s", self.config.host, self.config.port, e)
                return

            self.address = self._listen_sock.getsockname()[:2]
            logger.info("Serving %s on %s", self.config.root, self.url)
            self.bound = True
            self._ready.set()

            try:
                self._accept_loop()
            finally:
                self.bound = False
                self._cleanup()
        finally:
            self._ready.set()

    def stop(self) -> None:
        self._stop_event.set()

        # unblock accept() immediately
        if self._listen_sock is not None:
            try:
                self._listen_sock.close()
            except OSError:
                pass

        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=5)

    def _cleanup(self) -> None:
        if self._listen_sock is not None:
            try:
                self._listen_sock.close()
            except OSError:
                pass
        self._listen_sock = None

    def _create_listen_socket(self) -> socket.socket:
        """
        Create/bind/listen.
        Uses SO_REUSEADDR to make restarts easier during development.
        """
        family = socket.AF_INET6 if ":" in self.config.host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.config.host, self.config.port))
            sock.listen(self.config.backlog)
            sock.settimeout(self.config.accept_timeout)
        except OSError:
            sock.close()
            raise
        return sock

    def _accept_loop(self) -> None:
        """
        Accept connections and answer each one before accepting the next.
        Exits when stop_event is set or listen socket is closed.
        """
        assert self._listen_sock is not None

        while not self._stop_event.is_set():
            try:
                conn, addr = self._listen_sock.accept()
            except socket.timeout:
                continue
            except OSError:
                # socket was likely closed during stop()
                break

            try:
                conn.settimeout(self.config.recv_timeout)
                conn.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            except OSError:
                try:
                    conn.close()
                except OSError:
                    pass
                continue

            try:
                self.engine.handle_connection(conn)
            except (socket.timeout, TimeoutError):
                continue
            except Exception:
                logger.exception("Unhandled exception while handling %s", addr)
