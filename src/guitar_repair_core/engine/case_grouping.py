"""
Case Grouping - fold flat work-item rows into logical repair cases

Phase 1 builds one accumulator per grouping key in first-seen order.
Phase 2 finalizes totals once every row of every group has been seen.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List

from ..models import Case, WorkItemRecord, WorkLine
from .text_extract import resolve_customer_name, resolve_date, resolve_serial_number

logger = logging.getLogger(__name__)

KEY_PREFIX_CHARS = 50


def grouping_key(raw_text: str) -> str:
    """``<length>_<first 50 chars>`` of the raw text block."""
    raw_text = raw_text or ""
    return f"{len(raw_text)}_{raw_text[:KEY_PREFIX_CHARS]}"


@dataclass
class _CaseAccumulator:
    case: Case

    def add(self, record: WorkItemRecord) -> None:
        self.case.work_items.append(WorkLine(name=record.detailed_work, price=record.price))
        for category in record.categories:
            if category not in self.case.categories:
                self.case.categories.append(category)
        # Last positive override wins; summation is deferred to finalize()
        if record.case_total_price and record.case_total_price > 0:
            self.case.total_price = record.case_total_price

    def finalize(self) -> Case:
        if self.case.total_price == 0:
            self.case.total_price = sum(w.price for w in self.case.work_items)
        return self.case


def _open_case(record: WorkItemRecord) -> Case:
    raw_text = record.raw_text
    return Case(
        id=record.id,
        date=resolve_date(record.date, raw_text),
        customer_name=resolve_customer_name(record.customer_name, raw_text),
        model=record.model,
        symptoms=record.symptoms,
        total_price=0,
        work_items=[],
        raw_text=raw_text,
        is_new_entry=bool(record.date),
        serial_number=resolve_serial_number(record.serial_number, raw_text),
        categories=[],
        brand=record.brand or "",
        request_details=record.request_details or "",
        proposal_content=record.proposal_content or "",
    )


def group_cases(records: Iterable[WorkItemRecord]) -> List[Case]:
    """
    Group rows into cases.

    Args:
        records: rows in store order

    Returns:
        Cases in order of their first row. A case total is the last positive
        ``case_total_price`` seen in the group, else the sum of its item prices.
    """
    groups: Dict[str, _CaseAccumulator] = {}

    for record in records:
        key = grouping_key(record.raw_text)
        acc = groups.get(key)
        if acc is None:
            acc = _CaseAccumulator(case=_open_case(record))
            groups[key] = acc
        acc.add(record)

    cases = [acc.finalize() for acc in groups.values()]
    logger.debug(f"Grouped rows into {len(cases)} cases")
    return cases
