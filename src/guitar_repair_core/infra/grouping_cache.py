"""
Grouping Cache - grouped cases memoised against the record store version
"""

import logging
import threading
from typing import List, Optional

from ..engine.case_grouping import group_cases
from ..models import Case
from .record_store import RecordStore, StoreVersion

logger = logging.getLogger(__name__)


class GroupingCache:
    """Holds ``(last seen version, grouped cases)``; recomputes on any version change."""

    def __init__(self):
        self._lock = threading.Lock()
        self._version: Optional[StoreVersion] = None
        self._cases: List[Case] = []

    def get(self, store: RecordStore) -> List[Case]:
        with self._lock:
            version = store.version()
            if self._version is not None and version == self._version:
                return self._cases

            cases = group_cases(store.read_all(missing_ok=True))
            self._version = version
            self._cases = cases
            logger.info(f"Cached {len(cases)} grouped records")
            return cases

    def invalidate(self) -> None:
        with self._lock:
            self._version = None
            self._cases = []

    @property
    def version(self) -> Optional[StoreVersion]:
        return self._version
