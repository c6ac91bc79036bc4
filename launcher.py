import argparse
import logging
import socket
import sys

from assethost.bridge import Commands
from assethost.config import DEFAULT_HOST, ServerConfig
from assethost.saves import SaveStore
from assethost.server import AssetServer

logger = logging.getLogger("assethost.launcher")


def pick_unused_port(host: str = DEFAULT_HOST) -> int:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    with socket.socket(family, socket.SOCK_STREAM) as sock:
        sock.bind((host, 0))
        return sock.getsockname()[1]


def read_payload(path):
    if path is None:
        return None
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def serve_commands(commands: Commands, stdin=sys.stdin, stdout=sys.stdout) -> None:
    for line in stdin:
        line = line.strip()
        if not line:
            continue
        stdout.write(commands.dispatch_json(line) + "\n")
        stdout.flush()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Serve a game's asset bundle over loopback HTTP")
    parser.add_argument("--host", "-H", type=str, default=DEFAULT_HOST, help="host to listen on")
    parser.add_argument("--port", "-p", type=int, default=0, help="port to listen on (0 picks a free one)")
    parser.add_argument("--root", "-r", type=str, default="Game_Contents", help="asset directory to serve")
    parser.add_argument("--saves", "-s", type=str, default="saves", help="save file directory")
    parser.add_argument("--inject", "-i", type=str, default=None, help="file whose text is injected into HTML pages")
    parser.add_argument("--bridge", "-b", action="store_true", help="answer JSON commands on stdin")
    parser.add_argument("--debug", "-D", action="store_true", help="enable debug mode")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    port = args.port or pick_unused_port(args.host)
    config = ServerConfig(
        host=args.host,
        port=port,
        root=args.root,
        inject_payload=read_payload(args.inject),
    )
    logger.info("Starting server on port %d serving from %s, saves in %s", port, args.root, args.saves)

    server = AssetServer(config)
    thread = server.start()

    try:
        if args.bridge:
            serve_commands(Commands(SaveStore(args.saves), args.root))
        else:
            thread.join()
    except KeyboardInterrupt:
        pass
    finally:
        server.stop()


if __name__ == "__main__":
    main()
