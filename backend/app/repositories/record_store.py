import json
import logging
import os
from typing import List

from filelock import FileLock

log = logging.getLogger("catalog.store")


class JsonRecordStore:
    """
    A whole collection of records kept as one JSON array on disk.

    Reads never raise: a missing, unreadable or corrupt file reads as an
    empty collection. Writes replace the whole file and raise on failure.
    The file lock only keeps two writers from interleaving bytes; a
    load-modify-save cycle is not atomic.
    """

    def __init__(self, path: str, lock_timeout: float = 10):
        self.path = path
        self.lock_timeout = lock_timeout
        self._lock = FileLock(f"{path}.lock")

    def load_all(self) -> List[dict]:
        if not os.path.exists(self.path):
            return []
        try:
            with self._lock.acquire(timeout=self.lock_timeout):
                with open(self.path, "r", encoding="utf-8") as f:
                    raw = f.read() or "[]"
            data = json.loads(raw)
        except (OSError, ValueError) as e:
            log.error("could not read %s: %s", self.path, e)
            return []
        if not isinstance(data, list):
            log.error("could not read %s: expected a JSON array", self.path)
            return []
        return data

    def save_all(self, records: List[dict]) -> None:
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        body = json.dumps(records, indent=2, ensure_ascii=False)
        with self._lock.acquire(timeout=self.lock_timeout):
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(body)
