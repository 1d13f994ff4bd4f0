"""
Estimate Service - similar-case price ranges and rule-based calculation
"""
import logging
from typing import Any, Dict, List

from guitar_repair_core.engine import market_rates, rule_estimator
from guitar_repair_core.engine.case_search import search_similar_cases
from guitar_repair_core.engine.rule_estimator import Condition, Specs
from guitar_repair_core.infra import RecordStore

from api.storage import record_store

logger = logging.getLogger(__name__)


class EstimateService:
    """Estimation over the historical record store and the fixed rule table"""

    def __init__(self, store: RecordStore):
        self.store = store

    def similar_cases(self, query: str, trace_id: str = "") -> Dict[str, Any]:
        """
        Price range from the five most similar historical cases.

        Raises:
            StoreNotFoundError: record store file is absent
        """
        records = self.store.read_all(missing_ok=False)
        result = search_similar_cases(query, records)
        logger.info(
            f"[{trace_id}] Similar case query over {len(records)} rows: "
            f"{len(result['similarCases'])} cases"
        )
        return result

    def calculate(
        self,
        instrument_type: str,
        specs: Specs,
        condition: Condition,
        selected_work_ids: List[str],
        trace_id: str = "",
    ) -> Dict[str, Any]:
        result = rule_estimator.calculate_estimate(instrument_type, specs, condition, selected_work_ids)
        logger.info(
            f"[{trace_id}] Calculated estimate: type={instrument_type}, "
            f"works={len(selected_work_ids)}, total={result.total_price}"
        )
        return result.to_dict()

    def catalog(self) -> Dict[str, Any]:
        return rule_estimator.catalog()

    def market_rates(self, query: str = "") -> Dict[str, Any]:
        items = market_rates.lookup(query)
        return {"query": query, "count": len(items), "items": items}


estimate_service = EstimateService(record_store)


def get_estimate_service() -> EstimateService:
    return estimate_service
