"""
Record Store - flat work-item rows persisted as one JSON array

Every write rewrites the whole file through a temporary sibling and
os.replace, so a failed write never leaves a partial file behind.
"""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Callable, List, Tuple, TypeVar, Union

from ..errors import StoreCorruptedError, StoreNotFoundError
from ..models import WorkItemRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

StoreVersion = Tuple[int, int, int]


class RecordStore:
    """JSON-file backed row store with in-process write serialisation."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.RLock()
        self._generation = 0

    def exists(self) -> bool:
        return self.path.is_file()

    def version(self) -> StoreVersion:
        """
        ``(st_mtime_ns, st_size, write_generation)``; changes after every
        write made through this store, and after any external edit that
        touches mtime or size.
        """
        with self._lock:
            try:
                stat = self.path.stat()
            except FileNotFoundError:
                return (0, -1, self._generation)
            return (stat.st_mtime_ns, stat.st_size, self._generation)

    def read_all(self, missing_ok: bool = True) -> List[WorkItemRecord]:
        """
        Load every row in stored order.

        Args:
            missing_ok: return [] for an absent file instead of raising

        Raises:
            StoreNotFoundError: file absent and ``missing_ok`` is False
            StoreCorruptedError: content is not a JSON array of objects
        """
        with self._lock:
            try:
                text = self.path.read_text(encoding="utf-8")
            except FileNotFoundError:
                if missing_ok:
                    return []
                raise StoreNotFoundError(
                    "Database file not found",
                    hint=f"Expected record store at {self.path}",
                )

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Record store is not valid JSON: {self.path}: {e}")
            raise StoreCorruptedError(
                "Record store is not valid JSON",
                hint=f"line {e.lineno}, column {e.colno}",
            ) from e

        if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
            raise StoreCorruptedError(
                "Record store must be a JSON array of objects",
                hint=str(self.path),
            )
        return [WorkItemRecord.from_dict(row) for row in data]

    def write_all(self, records: List[WorkItemRecord]) -> None:
        """Replace the stored collection atomically."""
        payload = json.dumps([r.to_dict() for r in records], ensure_ascii=False, indent=2)
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, self.path)
            except OSError:
                logger.error(f"Record store write failed: {self.path}")
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
            self._generation += 1
        logger.info(f"Record store written: {len(records)} rows -> {self.path}")

    def mutate(
        self,
        fn: Callable[[List[WorkItemRecord]], Tuple[List[WorkItemRecord], T]],
        missing_ok: bool = True,
    ) -> T:
        """
        Read-modify-write under the store lock.

        ``fn`` receives the current rows and returns ``(new rows, result)``;
        the new rows are written only if ``fn`` returns normally.
        """
        with self._lock:
            rows = self.read_all(missing_ok=missing_ok)
            updated, result = fn(rows)
            self.write_all(updated)
            return result
