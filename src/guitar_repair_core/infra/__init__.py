"""
Guitar Repair Infrastructure Module
Record storage and caching
"""

from .grouping_cache import GroupingCache
from .record_store import RecordStore

__all__ = [
    "GroupingCache",
    "RecordStore",
]
