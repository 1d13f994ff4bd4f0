"""
Case Query - list filtering, date ordering and pagination over grouped cases
"""

import math
import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from ..models import Case
from .text_extract import UNKNOWN

SORT_ASC = "asc"
SORT_DESC = "desc"

_YMD = re.compile(r"^\s*(\d{4})[./\-](\d{1,2})[./\-](\d{1,2})")


def parse_case_date(value: Optional[str]) -> Optional[date]:
    """Parse ``2021.3.14`` / ``2021/3/14`` / ``2021-03-14`` style dates; None when unknown."""
    if not value or value == UNKNOWN:
        return None
    match = _YMD.match(value)
    try:
        if match:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        return datetime.fromisoformat(value.strip()).date()
    except ValueError:
        return None


def matches_filter(case: Case, q: str) -> bool:
    return (
        q in case.customer_name.lower()
        or q in case.model.lower()
        or q in case.symptoms.lower()
        or q in case.date
        or q in case.serial_number.lower()
    )


def sort_by_date(cases: List[Case], order: str = SORT_DESC) -> List[Case]:
    """Order by case date; unknown dates always go last, in their original order."""
    known = [(parse_case_date(c.date), c) for c in cases]
    dated = [(d, c) for d, c in known if d is not None]
    undated = [c for d, c in known if d is None]
    dated.sort(key=lambda pair: pair[0], reverse=(order != SORT_ASC))
    return [c for _, c in dated] + undated


def query_cases(
    cases: List[Case],
    q: str = "",
    sort: str = SORT_DESC,
    page: int = 1,
    limit: int = 50,
) -> Dict[str, Any]:
    """
    Filter, sort and slice grouped cases.

    Returns:
        ``{items, total, totalPages, page, limit}`` with items as Case objects
    """
    needle = (q or "").lower().strip()
    selected = [c for c in cases if matches_filter(c, needle)] if needle else list(cases)
    selected = sort_by_date(selected, sort)

    total = len(selected)
    page = max(page, 1)
    offset = (page - 1) * limit
    return {
        "items": selected[offset:offset + limit],
        "total": total,
        "totalPages": math.ceil(total / limit) if limit else 0,
        "page": page,
        "limit": limit,
    }
