"""
Repair Service - case listing and case-granular save / update / delete
"""
import logging
from typing import Any, Dict, List, Optional

from guitar_repair_core.engine import case_builder, case_query, price_table
from guitar_repair_core.engine.case_builder import CaseInput
from guitar_repair_core.infra import GroupingCache, RecordStore
from guitar_repair_core.models import Case

from api.storage import grouping_cache, record_store

logger = logging.getLogger(__name__)

SCOPE_ID = "id"
SCOPE_RAW_TEXT = "raw_text"


class RepairService:
    """Repair record operations over one record store"""

    def __init__(self, store: RecordStore, cache: GroupingCache):
        self.store = store
        self.cache = cache

    def grouped_cases(self) -> List[Case]:
        return self.cache.get(self.store)

    def list_cases(
        self,
        q: str = "",
        sort: str = case_query.SORT_DESC,
        page: int = 1,
        limit: int = 50,
    ) -> Dict[str, Any]:
        result = case_query.query_cases(self.grouped_cases(), q=q, sort=sort, page=page, limit=limit)
        result["items"] = [c.to_dict() for c in result["items"]]
        return result

    def save_case(self, case: CaseInput, trace_id: str = "") -> Dict[str, Any]:
        case_id = case_builder.new_case_id()
        new_rows = self.store.mutate(
            lambda rows: case_builder.add_case(rows, case, case_id),
            missing_ok=True,
        )
        logger.info(f"[{trace_id}] Saved case {case_id}: {len(new_rows)} work items")
        return {"success": True, "count": len(new_rows), "id": case_id}

    def update_case(self, case_id: str, case: CaseInput, trace_id: str = "") -> Dict[str, Any]:
        # validate before touching the store so a bad body never reaches disk
        case_builder.validate_case_input(case)
        new_rows = self.store.mutate(
            lambda rows: case_builder.replace_case(rows, case_id, case),
            missing_ok=False,
        )
        logger.info(f"[{trace_id}] Updated case {case_id}: {len(new_rows)} work items")
        return {"success": True, "count": len(new_rows)}

    def delete_case(self, case_id: str, scope: str = SCOPE_ID, trace_id: str = "") -> Dict[str, Any]:
        remove = (
            case_builder.remove_case_by_raw_text if scope == SCOPE_RAW_TEXT else case_builder.remove_case
        )
        removed = self.store.mutate(lambda rows: remove(rows, case_id), missing_ok=False)
        logger.info(f"[{trace_id}] Deleted case {case_id} (scope={scope}): {removed} rows")
        return {"success": True, "count": removed}

    def price_table(
        self,
        search: str = "",
        category: Optional[str] = None,
        page: int = 1,
        limit: int = price_table.DEFAULT_PAGE_SIZE,
    ) -> Dict[str, Any]:
        table = price_table.build_price_table(self.grouped_cases())
        return price_table.query_price_table(table, search=search, category=category, page=page, limit=limit)

    def price_examples(self, name: str) -> Dict[str, Any]:
        examples = price_table.work_examples(self.grouped_cases(), name)
        return {"name": name, "count": len(examples), "items": examples}


repair_service = RepairService(record_store, grouping_cache)


def get_repair_service() -> RepairService:
    return repair_service
