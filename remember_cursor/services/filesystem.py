"""File-system access used by the position store.

Paths are workspace-relative strings with "/" separators, the same form
used for document ids and the ``dbFileName`` setting.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class FileSystem(Protocol):
    """Minimal file primitives the store needs from its host."""

    def exists(self, path: str) -> bool:
        ...

    def read(self, path: str) -> str:
        ...

    def write(self, path: str, text: str) -> None:
        ...

    def mkdir(self, path: str) -> None:
        """Create a directory; a no-op if it already exists."""
        ...


class LocalFileSystem:
    """FileSystem rooted at a workspace directory on local disk."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def resolve(self, path: str) -> Path:
        return self.root / path

    def exists(self, path: str) -> bool:
        return self.resolve(path).exists()

    def read(self, path: str) -> str:
        return self.resolve(path).read_text(encoding="utf-8")

    def write(self, path: str, text: str) -> None:
        # Write next to the target and swap, so readers never see half a file
        target = self.resolve(path)
        tmp_path = target.with_name(target.name + ".tmp")
        tmp_path.write_text(text, encoding="utf-8")
        os.replace(tmp_path, target)

    def mkdir(self, path: str) -> None:
        self.resolve(path).mkdir(parents=True, exist_ok=True)


def parent_dir(path: str) -> str:
    """Directory part of a workspace-relative path ("" for the root)."""
    return path.rsplit("/", 1)[0] if "/" in path else ""
