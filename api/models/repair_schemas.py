"""
Repair API Pydantic schemas
Request bodies accept camelCase or snake_case keys
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from guitar_repair_core.engine.case_builder import CaseInput
from guitar_repair_core.engine.rule_estimator import Condition, Specs
from guitar_repair_core.models import WorkLine


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# === Requests ===

class WorkItemIn(CamelModel):
    """Single work item of a case"""
    name: str = Field("", description="Work item name")
    price: int = Field(0, description="Price in yen")


class CaseRequest(CamelModel):
    """Save / update case body"""
    date: str = Field("", description="Case date, e.g. 2024.5.1")
    customer_name: str = Field("", description="Customer name without honorific")
    model: str = Field("", description="Instrument model")
    symptoms: str = Field("", description="Reported problem")
    brand: Optional[str] = None
    serial_number: Optional[str] = None
    request_details: Optional[str] = None
    proposal_content: Optional[str] = None
    work_items: List[WorkItemIn] = Field(default_factory=list)

    def to_case_input(self) -> CaseInput:
        return CaseInput(
            date=self.date,
            customer_name=self.customer_name,
            model=self.model,
            symptoms=self.symptoms,
            work_items=[WorkLine(w.name, w.price) for w in self.work_items],
            brand=self.brand,
            serial_number=self.serial_number,
            request_details=self.request_details,
            proposal_content=self.proposal_content,
        )

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "date": "2024.5.1",
                "customerName": "山田",
                "model": "Fender Stratocaster",
                "symptoms": "ナットの溝が減って開放弦がビビる",
                "workItems": [{"name": "ナット交換", "price": 10000}],
            }
        },
    )


class SpecsIn(CamelModel):
    paint: str = "lacquer"
    binding: str = "none"
    joint: str = "bolt-on"
    joint_work: str = "none"


class ConditionIn(CamelModel):
    rust_level: int = 1
    repair_trace_level: int = 1
    is_dirty: bool = False
    rescue_screw_count: Optional[int] = None
    replace_screw_count: Optional[int] = None


class CalculateRequest(CamelModel):
    """Rule-based estimate body"""
    instrument_type: str = Field("electric", description="acoustic / electric / bass / ...")
    specs: SpecsIn = Field(default_factory=SpecsIn)
    condition: ConditionIn = Field(default_factory=ConditionIn)
    selected_work_ids: List[str] = Field(default_factory=list)

    def to_specs(self) -> Specs:
        return Specs(**self.specs.model_dump())

    def to_condition(self) -> Condition:
        return Condition(**self.condition.model_dump())


# === Responses ===

class MutationResponse(BaseModel):
    success: bool
    count: int
    id: Optional[str] = None


class EstimateRange(BaseModel):
    min: int
    max: int
    avg: int


class SimilarCase(BaseModel):
    id: str
    date: str
    model: str
    symptoms: str
    totalPrice: int
    categories: List[str]
    workItems: List[WorkItemIn]
    matchScore: int
    matchReasons: List[str]


class SimilarCasesResponse(BaseModel):
    estimate: Optional[EstimateRange] = None
    similarCases: List[SimilarCase]
