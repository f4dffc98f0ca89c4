"""An in-memory directory of file contents keyed by virtual path."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Union

__all__ = ["VirtualFile", "VirtualDir"]

_log = logging.getLogger(__name__)


@dataclass
class VirtualFile:
    """The bytes of one virtual file."""

    contents: bytes = b""

    @property
    def data(self) -> bytes:
        return self.contents

    @property
    def size(self) -> int:
        return len(self.contents)


@dataclass
class VirtualDir:
    """Virtual files by path. Adding an existing path keeps the first file."""

    files: dict[str, VirtualFile] = field(default_factory=dict)

    def add_file(self, path: str, data: Union[bytes, bytearray, memoryview]) -> VirtualFile:
        """Store a copy of ``data`` under ``path`` and return the stored file."""
        return self.files.setdefault(path, VirtualFile(bytes(data)))

    def read_file(
        self, virtual_path: str, real_path: Union[str, os.PathLike]
    ) -> Optional[VirtualFile]:
        """Load ``real_path`` from disk under ``virtual_path``.

        Returns ``None`` when the file cannot be read or is empty.
        """
        try:
            with open(real_path, "rb") as handle:
                contents = handle.read()
        except OSError:
            contents = b""
        if not contents:
            _log.error("Failed to read file '%s'!", os.fspath(real_path))
            return None
        return self.files.setdefault(virtual_path, VirtualFile(contents))