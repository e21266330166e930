from datetime import date, datetime
from typing import Dict, Generic, List, Literal, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from regimeniq.text import normalize_name


Category = Literal["medication", "supplement", "therapy", "other"]
Severity = Literal["high", "moderate", "low"]
DisplaySeverity = Literal["high", "moderate", "low", "unknown"]

T = TypeVar("T")


# ----------------------------------------------------------
# REGIMEN
# ----------------------------------------------------------
class RegimenItemCreate(BaseModel):
    name: str
    category: Category
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    source: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool = True


class RegimenItemUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[Category] = None
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    source: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class RegimenItem(RegimenItemCreate):
    id: str
    user_id: str
    patient_id: str
    created_at: datetime
    updated_at: datetime


# ----------------------------------------------------------
# INTERACTION RULES
# ----------------------------------------------------------
class InteractionSource(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    url: str


class InteractionRule(BaseModel):
    """A known interaction between anything named like terms[0] and
    anything named like terms[1]."""

    model_config = ConfigDict(frozen=True)

    terms: Tuple[str, str]
    severity: Severity
    description: str
    sources: Tuple[InteractionSource, ...] = ()

    @field_validator("terms")
    @classmethod
    def _normalize_terms(cls, terms: Tuple[str, str]) -> Tuple[str, str]:
        first, second = (normalize_name(t) for t in terms)
        if not first or not second:
            raise ValueError("interaction terms must be non-empty")
        if first == second:
            raise ValueError(f"interaction terms must differ, got {first!r} twice")
        return first, second


# ----------------------------------------------------------
# DETECTED / SAVED INTERACTIONS
# ----------------------------------------------------------
class DetectedInteraction(BaseModel):
    item_ids: List[str] = Field(..., min_length=2, max_length=2)
    items: List[RegimenItem] = Field(..., min_length=2, max_length=2)
    severity: Severity
    description: str
    sources: List[InteractionSource] = []

    @field_validator("item_ids")
    @classmethod
    def _distinct_ids(cls, item_ids: List[str]) -> List[str]:
        if item_ids[0] == item_ids[1]:
            raise ValueError("an interaction needs two distinct items")
        return item_ids


class SavedInteraction(BaseModel):
    id: str
    user_id: str
    patient_id: str
    item_ids: List[str]
    severity: DisplaySeverity = "unknown"
    description: str
    sources: List[InteractionSource] = []
    discussed_with_clinician: bool = False
    discussion_notes: str = ""
    created_at: datetime
    updated_at: datetime


class InteractionUpdate(BaseModel):
    severity: Optional[DisplaySeverity] = None
    description: Optional[str] = None
    sources: Optional[List[InteractionSource]] = None
    discussed_with_clinician: Optional[bool] = None
    discussion_notes: Optional[str] = None


# ----------------------------------------------------------
# DISPLAY
# ----------------------------------------------------------
class SeverityDisplay(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    color: str
    bg_color: str
    border_color: str
    description: str


# ----------------------------------------------------------
# RESULT ENVELOPE
# ----------------------------------------------------------
class Result(BaseModel, Generic[T]):
    """Outcome of a boundary call: `data` on success, `error` otherwise."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "Result[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "Result[T]":
        return cls(success=False, error=error)


class PatientCheckSummary(BaseModel):
    total_interactions: int
    results: Dict[str, Result[List[DetectedInteraction]]]
