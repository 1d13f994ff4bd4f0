"""
Case Search - keyword scoring over stored rows and price range estimation

Scoring rules (per row, summed per case):
- token found anywhere in the searchable text: +10
- token also found in symptoms: +5
- token also found in detailed work: +5
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple

from ..models import WorkItemRecord
from .case_grouping import KEY_PREFIX_CHARS
from .text_extract import UNKNOWN

logger = logging.getLogger(__name__)

TOKEN_SPLIT = re.compile(r"[\s,、。./\-]+")

BASE_MATCH_SCORE = 10
SYMPTOM_BONUS = 5
WORK_BONUS = 5
TOP_N = 5

UNKNOWN_ID = "unknown"
UNKNOWN_MODEL = "Unknown Model"
NO_SYMPTOMS = "詳細なし"


def tokenize(query: str) -> List[str]:
    """Split on whitespace and ``,、。./-``; drop empty tokens. No case folding."""
    return [t for t in TOKEN_SPLIT.split(query or "") if t]


def score_record(record: WorkItemRecord, tokens: List[str]) -> Tuple[int, List[str]]:
    """Return ``(score, matched tokens)`` for a single row."""
    symptoms = record.symptoms.lower()
    work = record.detailed_work.lower()
    searchable = " ".join(
        [record.symptoms, record.detailed_work, record.category, record.model, record.raw_text]
    ).lower()

    score = 0
    reasons: List[str] = []
    for token in tokens:
        needle = token.lower()
        if needle not in searchable:
            continue
        score += BASE_MATCH_SCORE
        if needle in symptoms:
            score += SYMPTOM_BONUS
        if needle in work:
            score += WORK_BONUS
        reasons.append(token)
    return score, reasons


def case_key(record: WorkItemRecord) -> str:
    return record.id or record.raw_text[:KEY_PREFIX_CHARS]


@dataclass
class ScoredCase:
    key: str
    score: int = 0
    records: List[WorkItemRecord] = field(default_factory=list)
    match_reasons: List[str] = field(default_factory=list)

    def add(self, record: WorkItemRecord, score: int, reasons: List[str]) -> None:
        self.records.append(record)
        self.score += score
        for reason in reasons:
            if reason not in self.match_reasons:
                self.match_reasons.append(reason)

    @property
    def total_price(self) -> int:
        total = sum(r.price for r in self.records)
        if total == 0 and self.records[0].case_total_price:
            total = self.records[0].case_total_price
        return total

    @property
    def categories(self) -> List[str]:
        merged: List[str] = []
        for record in self.records:
            for category in record.categories:
                if category not in merged:
                    merged.append(category)
        return merged

    def to_dict(self) -> Dict[str, Any]:
        first = self.records[0]
        return {
            "id": first.id or UNKNOWN_ID,
            "date": first.date or UNKNOWN,
            "model": first.model or UNKNOWN_MODEL,
            "symptoms": first.symptoms or NO_SYMPTOMS,
            "totalPrice": self.total_price,
            "categories": self.categories,
            "workItems": [{"name": r.detailed_work, "price": r.price} for r in self.records],
            "matchScore": self.score,
            "matchReasons": list(self.match_reasons),
        }


@dataclass(frozen=True)
class EstimateRange:
    min: int
    max: int
    avg: int

    def to_dict(self) -> Dict[str, int]:
        return {"min": self.min, "max": self.max, "avg": self.avg}


def estimate_range(totals: Iterable[int]) -> EstimateRange:
    """min / max / floor(mean) over strictly positive totals, zeros when none."""
    valid = [t for t in totals if t > 0]
    if not valid:
        return EstimateRange(0, 0, 0)
    return EstimateRange(min(valid), max(valid), sum(valid) // len(valid))


def rank_cases(records: Iterable[WorkItemRecord], tokens: List[str], top_n: int = TOP_N) -> List[ScoredCase]:
    """Score every row, merge by case key, return the best ``top_n`` cases."""
    scored: Dict[str, ScoredCase] = {}
    for record in records:
        score, reasons = score_record(record, tokens)
        if score <= 0:
            continue
        key = case_key(record)
        if key not in scored:
            scored[key] = ScoredCase(key=key)
        scored[key].add(record, score, reasons)

    # sorted() is stable: ties keep encounter order
    ranked = sorted(scored.values(), key=lambda c: c.score, reverse=True)
    return ranked[:top_n]


def search_similar_cases(query: str, records: Iterable[WorkItemRecord], top_n: int = TOP_N) -> Dict[str, Any]:
    """
    Estimate a price range from the historical cases most similar to ``query``.

    Returns:
        ``{"estimate": {min, max, avg} | None, "similarCases": [...]}``.
        ``estimate`` is None only when nothing matched.
    """
    tokens = tokenize(query)
    if not tokens:
        return {"estimate": None, "similarCases": []}

    top_cases = rank_cases(records, tokens, top_n)
    if not top_cases:
        logger.info(f"No similar cases for tokens={tokens}")
        return {"estimate": None, "similarCases": []}

    estimate = estimate_range(c.total_price for c in top_cases)
    logger.info(
        f"Similar case search: tokens={tokens}, cases={len(top_cases)}, "
        f"range={estimate.min}-{estimate.max}"
    )
    return {
        "estimate": estimate.to_dict(),
        "similarCases": [c.to_dict() for c in top_cases],
    }
