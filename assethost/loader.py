import os
from typing import Optional

from .mime import guess_mime_type
from .models import AssetRecord


def load_asset(root: str, rel_path: str) -> Optional[AssetRecord]:
    """Read an asset under ``root``.

    Returns None when the path is missing, is not a regular file, or
    cannot be read, without telling those cases apart.
    """
    abs_path = os.path.join(root, rel_path)

    try:
        if not os.path.isfile(abs_path):
            return None
        with open(abs_path, "rb") as f:
            content = f.read()
    except (OSError, ValueError):
        return None

    return AssetRecord(content=content, mime_type=guess_mime_type(abs_path))
