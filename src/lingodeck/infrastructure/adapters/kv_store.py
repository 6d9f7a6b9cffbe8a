"""Key-value store adapters backing the ledger persistence port."""

import logging
import os
import re
import shutil
import tempfile
from pathlib import Path

from lingodeck.domain.ports import KeyValueStore

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class MemoryKeyValueStore(KeyValueStore):
    """Process-local store. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def copy(self, key: str, new_key: str) -> bool:
        if key not in self._data:
            return False
        self._data[new_key] = self._data[key]
        return True

    def keys(self) -> list[str]:
        return list(self._data)


class FileKeyValueStore(KeyValueStore):
    """
    Stores each key as `<data_dir>/<key>.json`.

    Writes go to a temp file in the same directory and are moved into place
    with `os.replace`, so a crashed write never leaves a truncated ledger.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = data_dir
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug(f"[store] wrote {path.name} ({len(value)} bytes)")

    def copy(self, key: str, new_key: str) -> bool:
        source = self._path_for(key)
        if not source.exists():
            return False
        shutil.copyfile(source, self._path_for(new_key))
        return True
