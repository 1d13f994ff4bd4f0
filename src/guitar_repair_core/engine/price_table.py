"""Historical price table: per work-item price statistics across all cases."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import polars as pl

from ..models import Case

ALL_CATEGORIES = "All"
MIN_NAME_LENGTH = 2
DEFAULT_PAGE_SIZE = 100

_LEADING_MARKS = re.compile(r"^[●・\s]+")
_TRAILING_NOTE = re.compile(r"＞＞＞|>>>")


def normalize_work_name(text: str) -> str:
    """Strip bullet marks and anything after a ``>>>`` note."""
    name = _LEADING_MARKS.sub("", text or "").strip()
    return _TRAILING_NOTE.split(name)[0].strip()


@dataclass
class WorkPriceStats:
    name: str
    min_price: int
    max_price: int
    avg_price: int
    count: int
    categories: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "minPrice": self.min_price,
            "maxPrice": self.max_price,
            "avgPrice": self.avg_price,
            "count": self.count,
            "categories": list(self.categories),
        }


def _occurrences_frame(cases: List[Case]) -> pl.DataFrame:
    rows = [
        {"name": normalize_work_name(w.name), "price": int(w.price)}
        for case in cases
        for w in case.work_items
    ]
    frame = pl.DataFrame(rows, schema={"name": pl.Utf8, "price": pl.Int64})
    return frame.filter(pl.col("name").str.len_chars() >= MIN_NAME_LENGTH)


def build_price_table(cases: List[Case]) -> List[WorkPriceStats]:
    """
    Aggregate work-item prices by normalized name.

    min / max / avg consider positive prices only (0 when a name was never
    priced); count includes every occurrence. Sorted by count, descending.
    """
    categories: Dict[str, List[str]] = {}
    for case in cases:
        for work in case.work_items:
            name = normalize_work_name(work.name)
            if len(name) < MIN_NAME_LENGTH:
                continue
            bucket = categories.setdefault(name, [])
            for category in case.categories:
                if category not in bucket:
                    bucket.append(category)

    frame = _occurrences_frame(cases)
    if frame.is_empty():
        return []

    positive = pl.col("price").filter(pl.col("price") > 0)
    stats = (
        frame.group_by("name", maintain_order=True)
        .agg(
            pl.len().alias("count"),
            positive.min().alias("min_price"),
            positive.max().alias("max_price"),
            positive.sum().alias("valid_sum"),
            (pl.col("price") > 0).sum().alias("valid_count"),
        )
        .with_columns(pl.col("min_price").fill_null(0), pl.col("max_price").fill_null(0))
        .sort("count", descending=True, maintain_order=True)
    )

    table = []
    for row in stats.iter_rows(named=True):
        valid_count = int(row["valid_count"] or 0)
        valid_sum = int(row["valid_sum"] or 0)
        # half-up rounding of the mean, in integers
        avg = (2 * valid_sum + valid_count) // (2 * valid_count) if valid_count else 0
        table.append(
            WorkPriceStats(
                name=row["name"],
                min_price=int(row["min_price"]),
                max_price=int(row["max_price"]),
                avg_price=avg,
                count=int(row["count"]),
                categories=categories.get(row["name"], []),
            )
        )
    return table


def query_price_table(
    table: List[WorkPriceStats],
    search: str = "",
    category: Optional[str] = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> Dict[str, Any]:
    needle = (search or "").lower()
    selected = [
        s for s in table
        if needle in s.name.lower()
        and (not category or category == ALL_CATEGORIES or category in s.categories)
    ]
    total = len(selected)
    page = max(page, 1)
    offset = (page - 1) * limit
    all_categories = sorted({c for s in table for c in s.categories})
    return {
        "items": [s.to_dict() for s in selected[offset:offset + limit]],
        "total": total,
        "totalPages": math.ceil(total / limit) if limit else 0,
        "page": page,
        "limit": limit,
        "categories": [ALL_CATEGORIES] + all_categories,
    }


def work_examples(cases: List[Case], name: str) -> List[Dict[str, Any]]:
    """Every occurrence of a normalized work name, highest price first."""
    examples = []
    for case in cases:
        for work in case.work_items:
            if normalize_work_name(work.name) != name:
                continue
            examples.append({
                "id": case.id,
                "model": case.model,
                "customerName": case.customer_name,
                "symptoms": case.symptoms,
                "price": work.price,
                "categories": list(case.categories),
                "detailedWork": work.name,
                "rawText": case.raw_text,
            })
    examples.sort(key=lambda e: e["price"], reverse=True)
    return examples
