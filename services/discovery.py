from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

SUPPORTED_EXTENSIONS = (".jpg", ".jpeg", ".jxl", ".heic")


def discover_photos(directory: Path, extensions: Iterable[str] = SUPPORTED_EXTENSIONS) -> List[Path]:
    """List supported photos directly inside ``directory``, sorted by name."""
    wanted = {extension.lower() for extension in extensions}
    photos = [
        path
        for path in directory.iterdir()
        if path.is_file() and path.suffix.lower() in wanted
    ]
    return sorted(photos, key=lambda path: path.name)
