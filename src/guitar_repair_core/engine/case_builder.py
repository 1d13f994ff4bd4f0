"""
Case Builder - turn structured case input into stored rows

Covers the write side of the record store: validation, canonical raw
text synthesis, and the case-granular save / update / delete edits.
"""

import uuid
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from ..errors import CaseNotFoundError, CaseValidationError
from ..models import WorkItemRecord, WorkLine

NEW_ENTRY_CATEGORY = "新規登録"

REQUIRED_FIELDS = ("date", "customer_name", "model", "symptoms")


@dataclass
class CaseInput:
    date: str
    customer_name: str
    model: str
    symptoms: str
    work_items: List[WorkLine] = field(default_factory=list)
    brand: Optional[str] = None
    serial_number: Optional[str] = None
    request_details: Optional[str] = None
    proposal_content: Optional[str] = None


def validate_case_input(case: CaseInput) -> None:
    missing = [name for name in REQUIRED_FIELDS if not str(getattr(case, name) or "").strip()]
    if not case.work_items:
        missing.append("work_items")
    if missing:
        raise CaseValidationError(
            "Missing required fields",
            hint=f"Required: {', '.join(missing)}",
        )
    negative = [w.name for w in case.work_items if w.price < 0]
    if negative:
        raise CaseValidationError(
            "Work item prices cannot be negative",
            hint=f"Check: {', '.join(negative)}",
        )


def build_raw_text(case: CaseInput) -> str:
    """Canonical text block for a structured case; optional lines stay blank."""
    lines = [
        f"Date: {case.date}",
        f"Customer: {case.customer_name} 様",
        f"Brand: {case.brand}" if case.brand else "",
        f"Model: {case.model}",
        f"Serial: {case.serial_number}" if case.serial_number else "",
        f"Symptoms: {case.symptoms}",
        f"Request: {case.request_details}" if case.request_details else "",
        f"Proposal: {case.proposal_content}" if case.proposal_content else "",
        "Work Items:",
    ]
    lines.extend(f"- {w.name}: {w.price}" for w in case.work_items)
    lines.append(f"Total: {sum(w.price for w in case.work_items)}")
    return "\n".join(lines).strip()


def build_rows(case: CaseInput, case_id: str) -> List[WorkItemRecord]:
    """One row per work item, all sharing ``case_id`` and the synthesized raw text."""
    validate_case_input(case)
    raw_text = build_raw_text(case)
    return [
        WorkItemRecord(
            id=case_id,
            category=NEW_ENTRY_CATEGORY,
            categories=[NEW_ENTRY_CATEGORY],
            symptoms=case.symptoms,
            detailed_work=work.name,
            price=work.price,
            model=case.model,
            raw_text=raw_text,
            date=case.date,
            customer_name=case.customer_name,
            brand=case.brand or "",
            serial_number=case.serial_number or "",
            request_details=case.request_details or "",
            proposal_content=case.proposal_content or "",
        )
        for work in case.work_items
    ]


def new_case_id() -> str:
    return str(uuid.uuid4())


def add_case(rows: List[WorkItemRecord], case: CaseInput, case_id: Optional[str] = None) -> Tuple[List[WorkItemRecord], List[WorkItemRecord]]:
    """Prepend a new case. Returns ``(updated rows, new rows)``."""
    new_rows = build_rows(case, case_id or new_case_id())
    return new_rows + list(rows), new_rows


def replace_case(rows: List[WorkItemRecord], case_id: str, case: CaseInput) -> Tuple[List[WorkItemRecord], List[WorkItemRecord]]:
    """Drop every row of ``case_id`` and prepend freshly built rows with the same id."""
    new_rows = build_rows(case, case_id)
    kept = [r for r in rows if r.id != case_id]
    if len(kept) == len(rows):
        raise CaseNotFoundError(f"Case not found: {case_id}")
    return new_rows + kept, new_rows


def remove_case(rows: List[WorkItemRecord], case_id: str) -> Tuple[List[WorkItemRecord], int]:
    """Delete every row carrying ``case_id``. Returns ``(kept rows, removed count)``."""
    kept = [r for r in rows if r.id != case_id]
    removed = len(rows) - len(kept)
    if removed == 0:
        raise CaseNotFoundError(f"Case not found: {case_id}")
    return kept, removed


def remove_case_by_raw_text(rows: List[WorkItemRecord], case_id: str) -> Tuple[List[WorkItemRecord], int]:
    """
    Delete every row sharing the raw text of ``case_id``.

    Legacy cases may span rows without a shared id; matching on raw text
    removes the whole case, including rows under other ids.
    """
    raw_texts: Set[str] = {r.raw_text for r in rows if r.id == case_id}
    if not raw_texts:
        raise CaseNotFoundError(f"Case not found: {case_id}")
    kept = [r for r in rows if r.raw_text not in raw_texts]
    return kept, len(rows) - len(kept)
