"""
Rule-Based Estimator - itemized repair price from a fixed catalog and surcharge rules

Pure and deterministic: the same inputs always give the same breakdown in
the same order (work items, paint, binding, joint work, rust, repair
traces, dirt, instrument multiplier, strings, minimum charge).
"""

import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Union

from ..errors import CaseValidationError

INSTRUMENT_TYPES = ("acoustic", "electric", "bass", "ukulele", "archtop", "vintage", "other")
PAINT_TYPES = ("lacquer", "poly", "oil")
BINDING_TYPES = ("none", "normal", "gibson")
JOINT_TYPES = ("bolt-on", "set-neck", "through-neck")
JOINT_WORK_TYPES = ("none", "okita", "reset-angle")
WORK_CATEGORIES = ("neck", "body", "electric", "other")


@dataclass(frozen=True)
class CatalogItem:
    id: str
    name: str
    base_price: int
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "basePrice": self.base_price, "category": self.category}


WORK_ITEMS = (
    CatalogItem("adjust_rod", "トラスロッド調整", 3000, "neck"),
    CatalogItem("nut_exchange", "ナット交換", 10000, "neck"),
    CatalogItem("saddle_exchange_acoustic", "サドル交換 (アコギ)", 5000, "body"),
    CatalogItem("refret", "フレット交換", 40000, "neck"),
    CatalogItem("fret_dress", "フレットすり合わせ", 8000, "neck"),
    CatalogItem("jack_exchange", "ジャック交換", 3000, "electric"),
    # add-on anchor, priced through joint work
    CatalogItem("neck_reset", "ネックリセット", 0, "neck"),
)

PRICES = {
    "nut_with_refret": 8000,
    "poly_paint": 10000,
    "gibson_binding": 20000,
    "joint_okita": 40000,
    "joint_reset_angle": 80000,
    "rust_heat": 1000,
    "rust_rescue_per_screw": 2000,
    "rust_replace_per_screw": 3000,
    "trace_professional": 10000,
    "special_cleaning": 5000,
    "strings": 1500,
    "minimum_charge": 3000,
}

ROUND_UNIT = 100

INSTRUMENT_MULTIPLIERS = {
    "vintage": Decimal("1.2"),
    "bass": Decimal("1.2"),
    "ukulele": Decimal("1.2"),
    "archtop": Decimal("1.5"),
}

BINDING_WORK_IDS = ("refret", "fret_dress", "nut_exchange")
STRUCTURE_CATEGORIES = ("neck", "body")

AMATEUR_TRACE_WARNING = (
    "素人修理痕があるため、工賃が通常の2倍に設定されています。"
    "状態によってはお断りする可能性があります。"
)

Number = Union[int, float]


@dataclass(frozen=True)
class Specs:
    paint: str = "lacquer"
    binding: str = "none"
    joint: str = "bolt-on"
    joint_work: str = "none"


@dataclass(frozen=True)
class Condition:
    rust_level: int = 1
    repair_trace_level: int = 1
    is_dirty: bool = False
    rescue_screw_count: Optional[int] = None
    replace_screw_count: Optional[int] = None


@dataclass
class BreakdownLine:
    label: str
    amount: Number
    note: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "amount": self.amount, "note": self.note}


@dataclass
class CalculationResult:
    total_price: int
    breakdown: List[BreakdownLine] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalPrice": self.total_price,
            "breakdown": [line.to_dict() for line in self.breakdown],
            "warnings": list(self.warnings),
        }


def _plain(value: Decimal) -> Number:
    """Render a Decimal amount as int when integral, else float."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _check_choice(name: str, value: Any, allowed: Iterable[Any]) -> None:
    allowed = tuple(allowed)
    if value not in allowed:
        raise CaseValidationError(
            f"Invalid {name}: {value!r}",
            hint=f"Expected one of {', '.join(str(a) for a in allowed)}",
        )


def validate_inputs(instrument_type: str, specs: Specs, condition: Condition) -> None:
    _check_choice("instrumentType", instrument_type, INSTRUMENT_TYPES)
    _check_choice("paint", specs.paint, PAINT_TYPES)
    _check_choice("binding", specs.binding, BINDING_TYPES)
    _check_choice("joint", specs.joint, JOINT_TYPES)
    _check_choice("jointWork", specs.joint_work, JOINT_WORK_TYPES)
    _check_choice("rustLevel", condition.rust_level, range(1, 6))
    _check_choice("repairTraceLevel", condition.repair_trace_level, range(1, 4))
    for name, count in (
        ("rescueScrewCount", condition.rescue_screw_count),
        ("replaceScrewCount", condition.replace_screw_count),
    ):
        if count is not None and count < 0:
            raise CaseValidationError(f"Invalid {name}: {count}", hint="Screw counts cannot be negative")


def calculate_estimate(
    instrument_type: str,
    specs: Specs,
    condition: Condition,
    selected_work_ids: Iterable[str],
) -> CalculationResult:
    """
    Compute an itemized estimate.

    Args:
        instrument_type: one of INSTRUMENT_TYPES
        specs: paint / binding / joint / joint work
        condition: rust, repair trace and dirt levels
        selected_work_ids: catalog ids; unknown ids are ignored

    Returns:
        CalculationResult with the total rounded up to the next 100
    """
    validate_inputs(instrument_type, specs, condition)

    selected = set(selected_work_ids)
    works = [w for w in WORK_ITEMS if w.id in selected]
    breakdown: List[BreakdownLine] = []
    warnings: List[str] = []
    subtotal = Decimal(0)

    def add(label: str, amount: Decimal, note: str = "") -> None:
        nonlocal subtotal
        breakdown.append(BreakdownLine(label, _plain(amount), note))
        subtotal += amount

    # Work items, with the nut + refret bundle price
    for work in works:
        price = work.base_price
        note = ""
        if work.id == "nut_exchange" and "refret" in selected:
            price = PRICES["nut_with_refret"]
            note = "セット割引適用 (フレット交換同時)"
        add(work.name, Decimal(price), note)

    # Paint
    if specs.paint == "poly":
        has_structure_work = (
            any(w.category in STRUCTURE_CATEGORIES for w in works) or specs.joint_work != "none"
        )
        if has_structure_work:
            add("塗装割増 (ポリウレタン)", Decimal(PRICES["poly_paint"]), "硬質塗装加工費")
        else:
            add("塗装割増 (ポリウレタン)", Decimal(0), "※木工・塗装関連の作業時に加算")

    # Binding
    if specs.binding == "gibson":
        if any(work_id in selected for work_id in BINDING_WORK_IDS):
            add("バインディング (セル山残し)", Decimal(PRICES["gibson_binding"]), "高難易度加工")
        else:
            add("バインディング (セル山残し)", Decimal(0), "※フレット・ナット関連作業時に加算")

    # Joint work
    if specs.joint_work == "okita":
        add("簡易角度調整 (沖田式)", Decimal(PRICES["joint_okita"]))
    elif specs.joint_work == "reset-angle":
        add("ネックリセット (角度調整)", Decimal(PRICES["joint_reset_angle"]))

    # Rust
    if condition.rust_level == 3:
        add("固着対応 (加熱処理)", Decimal(PRICES["rust_heat"]), "ヒートガン処理等")
    elif condition.rust_level == 4:
        count = condition.rescue_screw_count or 1
        add("ネジ救出オペ", Decimal(PRICES["rust_rescue_per_screw"] * count), f"{count}本")
    elif condition.rust_level == 5:
        count = condition.replace_screw_count or 1
        add("ネジ全交換", Decimal(PRICES["rust_replace_per_screw"] * count), f"{count}本")

    # Repair traces
    if condition.repair_trace_level == 2:
        add("修正工賃 (プロ施工痕)", Decimal(PRICES["trace_professional"]))
    elif condition.repair_trace_level == 3:
        add("修正工賃 (素人/雑)", subtotal, "工数2倍適用")
        warnings.append(AMATEUR_TRACE_WARNING)

    # Dirt
    if condition.is_dirty:
        add("特別クリーニング", Decimal(PRICES["special_cleaning"]), "ヤニ・汚れ除去")

    # Instrument multiplier applies to the work subtotal only
    multiplier = INSTRUMENT_MULTIPLIERS.get(instrument_type, Decimal(1))
    adjusted = subtotal * multiplier
    if multiplier != 1:
        breakdown.append(
            BreakdownLine(
                f"楽器特性補正 (x{multiplier})",
                _plain(adjusted - subtotal),
                f"{instrument_type} 係数適用",
            )
        )

    strings = Decimal(PRICES["strings"])
    breakdown.append(BreakdownLine("弦代", _plain(strings)))
    final_total = adjusted + strings

    minimum = Decimal(PRICES["minimum_charge"])
    if final_total < minimum:
        breakdown.append(
            BreakdownLine("最低工賃補正", _plain(minimum - final_total), f"最低{PRICES['minimum_charge']:,}円")
        )
        final_total = minimum

    return CalculationResult(
        total_price=round_up(final_total),
        breakdown=breakdown,
        warnings=warnings,
    )


def round_up(amount: Union[Decimal, Number], unit: int = ROUND_UNIT) -> int:
    """Ceiling to the next multiple of ``unit``."""
    return int(math.ceil(Decimal(amount) / unit)) * unit


def catalog() -> Dict[str, Any]:
    return {
        "workItems": [w.to_dict() for w in WORK_ITEMS],
        "instrumentTypes": list(INSTRUMENT_TYPES),
        "paintTypes": list(PAINT_TYPES),
        "bindingTypes": list(BINDING_TYPES),
        "jointTypes": list(JOINT_TYPES),
        "jointWorkTypes": list(JOINT_WORK_TYPES),
    }
