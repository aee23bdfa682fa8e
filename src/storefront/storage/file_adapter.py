"""File-backed client storage — one file per key under a directory.

Writes land in a temporary sibling file first and are then moved into place
with ``os.replace``, so a reader never sees a half-written snapshot.
"""

import os
import re
import tempfile
from pathlib import Path

from storefront.storage.port import ClientStorage

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class FileClientStorage(ClientStorage):
    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{_UNSAFE_CHARS.sub('_', key)}.json"

    def get(self, key):
        try:
            return self._path(key).read_bytes()
        except FileNotFoundError:
            return None

    def set(self, key, value):
        target = self._path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{target.stem}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(value)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
