import logging
import os
from typing import List

from .config import SAVE_SUFFIX
from .errors import SaveNotFound, StorageError

logger = logging.getLogger(__name__)


class SaveStore:
    """Named save records kept as files in one directory.

    The directory is created on first need. Writes are not atomic and
    nothing is locked: concurrent writers to a key race, last one wins.
    """

    def __init__(self, directory: str, suffix: str = SAVE_SUFFIX) -> None:
        self.directory = directory
        self.suffix = suffix

    def filename(self, key: str) -> str:
        ext = "." + self.suffix
        return key if key.endswith(ext) else key + ext

    def path(self, key: str) -> str:
        return os.path.join(self.directory, self.filename(key))

    def _ensure_directory(self) -> None:
        try:
            os.makedirs(self.directory, exist_ok=True)
        except OSError as e:
            raise StorageError("create save directory", e) from e

    def list(self) -> List[str]:
        self._ensure_directory()
        ext = "." + self.suffix
        try:
            with os.scandir(self.directory) as entries:
                return [e.name for e in entries if os.path.splitext(e.name)[1] == ext]
        except OSError as e:
            raise StorageError("list save directory", e) from e

    def read(self, key: str) -> str:
        path = self.path(key)
        if not os.path.exists(path):
            raise SaveNotFound()
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except FileNotFoundError as e:
            raise SaveNotFound() from e
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError("read save file", e) from e

    def write(self, key: str, content: str) -> None:
        if not isinstance(content, str):
            raise TypeError(f"save content must be str, not {type(content).__name__}")
        self._ensure_directory()
        path = self.path(key)
        try:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise StorageError("write save file", e) from e
        logger.debug("Wrote %d chars to %s", len(content), path)

    def delete(self, key: str) -> None:
        path = self.path(key)
        try:
            os.remove(path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageError("delete save file", e) from e
