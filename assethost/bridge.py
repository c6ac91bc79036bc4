"""Commands the rendered game calls through the host's invoke bridge.

Every command either returns a JSON-friendly result or raises
:class:`CommandError`, whose message is what the caller sees.
``dispatch`` and ``dispatch_json`` turn both outcomes into reply objects.
"""
import json
import logging
import os
from typing import Any, Dict, List, Optional

from .errors import CommandError, GameFileNotFound, StorageError, UnknownCommand, WindowNotFound
from .saves import SaveStore

logger = logging.getLogger(__name__)


class Commands:
    names = (
        "list_saves",
        "read_save",
        "write_save",
        "delete_save",
        "file_exists",
        "read_game_file",
        "show_dev_tools",
    )

    def __init__(self, saves: SaveStore, game_root: str, window=None) -> None:
        self.saves = saves
        self.game_root = game_root
        # Host window; anything with an open_devtools() method.
        self.window = window

    def list_saves(self) -> List[str]:
        return self.saves.list()

    def read_save(self, filename: str) -> str:
        return self.saves.read(filename)

    def write_save(self, filename: str, data: str) -> None:
        self.saves.write(filename, data)

    def delete_save(self, filename: str) -> None:
        self.saves.delete(filename)

    def file_exists(self, filepath: str) -> bool:
        try:
            return os.path.exists(os.path.join(self.game_root, filepath))
        except (TypeError, ValueError):
            return False

    def read_game_file(self, filepath: str) -> str:
        path = os.path.join(self.game_root, filepath)
        if not os.path.exists(path):
            raise GameFileNotFound()
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError("read file", e) from e

    def show_dev_tools(self) -> None:
        if self.window is None:
            raise WindowNotFound()
        self.window.open_devtools()

    def dispatch(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            if name not in self.names:
                raise UnknownCommand(name)
            arguments = arguments or {}
            for key, value in arguments.items():
                # Every command argument is text.
                if not isinstance(value, str):
                    raise CommandError(f"Invalid arguments for {name}: {key} must be a string")
            try:
                result = getattr(self, name)(**arguments)
            except TypeError as e:
                raise CommandError(f"Invalid arguments for {name}: {e}") from e
        except CommandError as e:
            logger.warning("%s failed: %s", name, e)
            return {"ok": False, "error": str(e)}
        return {"ok": True, "result": result}

    def dispatch_json(self, message: str) -> str:
        """Handle one ``{"id": ..., "command": ..., "args": {...}}`` message."""
        try:
            payload = json.loads(message)
        except ValueError as e:
            return json.dumps({"ok": False, "error": f"Invalid message: {e}"})
        if not isinstance(payload, dict) or not isinstance(payload.get("command"), str):
            return json.dumps({"ok": False, "error": "Message must be an object with a 'command' string"})

        arguments = payload.get("args") or {}
        if isinstance(arguments, dict):
            reply = self.dispatch(payload["command"], arguments)
        else:
            reply = {"ok": False, "error": "'args' must be an object"}

        if "id" in payload:
            reply["id"] = payload["id"]
        return json.dumps(reply)
