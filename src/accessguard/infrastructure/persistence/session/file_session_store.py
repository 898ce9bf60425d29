"""File session store - one file per key, survives process restarts."""

import hashlib
import os
import tempfile
from pathlib import Path


class FileSessionStore:
    """SessionStore keeping records under directory/<namespace digest>/<key>.

    Namespaces isolate operators sharing one directory. Writes go through a
    temporary file and os.replace so a reader never sees a partial record.
    """

    def __init__(self, directory: str | Path, namespace: str = "default") -> None:
        digest = hashlib.sha256(namespace.encode("utf-8")).hexdigest()
        self._root = Path(directory) / digest
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def get(self, key: str) -> str | None:
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        target = self._path(key)
        fd, tmp = tempfile.mkstemp(dir=self._root, prefix=".tmp-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp, target)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid session store key: {key!r}")
        return self._root / key
