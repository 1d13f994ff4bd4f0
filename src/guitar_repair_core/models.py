"""
Repair record models

A WorkItemRecord is one stored row (a single work item). A Case is the
logical repair job that groups one or more rows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Persisted key order, kept stable so rewritten files diff cleanly
_KNOWN_KEYS = (
    "id",
    "category",
    "categories",
    "symptoms",
    "detailed_work",
    "price",
    "case_total_price",
    "model",
    "raw_text",
    "date",
    "customer_name",
    "brand",
    "serial_number",
    "request_details",
    "proposal_content",
)


def to_int(value: Any, default: int = 0) -> int:
    """Coerce a stored amount to int; blanks and junk become ``default``."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        return int(float(str(value).replace(",", "").strip()))
    except (TypeError, ValueError):
        return default


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass
class WorkItemRecord:
    """One stored work-item row."""

    id: Optional[str] = None
    category: str = ""
    categories: List[str] = field(default_factory=list)
    symptoms: str = ""
    detailed_work: str = ""
    price: int = 0
    case_total_price: Optional[int] = None
    model: str = ""
    raw_text: str = ""
    date: Optional[str] = None
    customer_name: Optional[str] = None
    brand: Optional[str] = None
    serial_number: Optional[str] = None
    request_details: Optional[str] = None
    proposal_content: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    # Row as loaded; written back unchanged so legacy values survive rewrites
    source: Optional[Dict[str, Any]] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkItemRecord":
        categories = data.get("categories") or []
        if not isinstance(categories, list):
            categories = [categories]
        case_total = data.get("case_total_price")
        return cls(
            id=_opt_str(data.get("id")) or None,
            category=str(data.get("category") or ""),
            categories=[str(c) for c in categories],
            symptoms=str(data.get("symptoms") or ""),
            detailed_work=str(data.get("detailed_work") or ""),
            price=to_int(data.get("price")),
            case_total_price=to_int(case_total) if case_total is not None else None,
            model=str(data.get("model") or ""),
            raw_text=str(data.get("raw_text") or ""),
            date=_opt_str(data.get("date")),
            customer_name=_opt_str(data.get("customer_name")),
            brand=_opt_str(data.get("brand")),
            serial_number=_opt_str(data.get("serial_number")),
            request_details=_opt_str(data.get("request_details")),
            proposal_content=_opt_str(data.get("proposal_content")),
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
            source=dict(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Persisted form; loaded rows come back exactly as they were read."""
        if self.source is not None:
            return dict(self.source)
        out: Dict[str, Any] = {}
        for key in _KNOWN_KEYS:
            value = getattr(self, key)
            if value is None:
                continue
            out[key] = list(value) if key == "categories" else value
        out.update(self.extra)
        return out


@dataclass
class WorkLine:
    """A named work item with its price, as shown inside a case."""

    name: str
    price: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "price": self.price}


@dataclass
class Case:
    """A logical repair job assembled from one or more rows."""

    id: Optional[str]
    date: str
    customer_name: str
    model: str
    symptoms: str
    total_price: int
    work_items: List[WorkLine]
    raw_text: str
    is_new_entry: bool
    serial_number: str
    categories: List[str]
    brand: str = ""
    request_details: str = ""
    proposal_content: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """camelCase view used by the HTTP layer"""
        return {
            "id": self.id,
            "date": self.date,
            "customerName": self.customer_name,
            "model": self.model,
            "symptoms": self.symptoms,
            "totalPrice": self.total_price,
            "workItems": [w.to_dict() for w in self.work_items],
            "rawText": self.raw_text,
            "isNewEntry": self.is_new_entry,
            "serialNumber": self.serial_number,
            "categories": list(self.categories),
            "brand": self.brand,
            "requestDetails": self.request_details,
            "proposalContent": self.proposal_content,
        }
