"""
Guitar Repair Storage Module
Process-wide record store and grouped-case cache
"""
import logging

from guitar_repair_core.infra import GroupingCache, RecordStore

from api.config import config

logger = logging.getLogger(__name__)

record_store = RecordStore(config.REPAIR_DB_PATH)
grouping_cache = GroupingCache()


def check_storage_health() -> dict:
    """Report whether the record store file is present and parseable."""
    if not record_store.exists():
        return {"status": "empty", "path": str(record_store.path)}
    try:
        rows = record_store.read_all(missing_ok=False)
    except Exception as e:
        logger.error(f"Storage health check failed: {e}")
        return {"status": "error", "path": str(record_store.path), "error": str(e)}
    return {"status": "ok", "path": str(record_store.path), "rows": len(rows)}
