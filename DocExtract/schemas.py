"""
schemas.py

Pydantic models for extraction records.

Records serialize with camelCase aliases (``rawText``, ``extractedAt``, ...)
so API callers receive the same shape whether they consume the model
directly or its JSON dump.
"""

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DocumentCategoryEnum = Literal["court_decision", "contract", "other"]

ConfidenceEnum = Literal["high", "medium", "low"]

DowryStatusEnum = Literal["paid", "unpaid"]

AttendanceEnum = Literal[
    "حضوري",                                          # Attended
    "غيابي",                                          # In absentia
    "وجاهي للمدعية وبمثابة الوجاهي للمدعى عليه",      # Attended for plaintiff, absentia for defendant
]


class RecordModel(BaseModel):
    """Shared model configuration: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExtractionQuality(RecordModel):
    """Derived completeness score plus human-readable issue notes."""

    score: int = Field(default=0, ge=0, le=100, description="Completeness score")
    issues: List[str] = Field(
        default_factory=list, description="Ordered notes on missing or doubtful fields"
    )


class BaseRecord(RecordModel):
    """Fields common to every extraction result."""

    document_category: DocumentCategoryEnum = Field(
        ..., description="court_decision, contract or other"
    )
    document_type: Optional[str] = Field(
        default=None, description="Human-readable subtype label"
    )
    extracted_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    raw_text: str = Field(default="", description="Acquired text echoed back")
    confidence: ConfidenceEnum = Field(default="low", description="Coarse confidence")
    extraction_quality: ExtractionQuality = Field(default_factory=ExtractionQuality)


# -----------------------------
# Court decisions
# -----------------------------
class Plaintiff(RecordModel):
    name: str
    lawyer: Optional[str] = None


class Defendant(RecordModel):
    name: str
    address: Optional[str] = None


class Dowry(RecordModel):
    """Marriage payment split into immediate and deferred portions."""

    immediate: Optional[str] = None
    deferred: Optional[str] = None
    status: DowryStatusEnum = "paid"


class CourtDecisionRecord(BaseRecord):
    document_category: DocumentCategoryEnum = "court_decision"

    court: Optional[str] = None
    case_number: Optional[str] = Field(default=None, description="<number>/<year>")
    decision_number: Optional[str] = Field(default=None, description="<number>/<year>")
    judge: Optional[str] = None
    plaintiff: Optional[Plaintiff] = None
    defendant: Optional[Defendant] = None
    case_type: Optional[str] = None
    verdict: Optional[str] = Field(default=None, max_length=200)
    verdict_summary: Optional[str] = None
    attendance_status: Optional[AttendanceEnum] = None
    appealable: Optional[bool] = Field(
        default=None, description="None when the document carries no marker"
    )
    decision_date: Optional[str] = None
    next_session_date: Optional[str] = None
    dowry: Optional[Dowry] = None
    marriage_date: Optional[str] = None
    witnesses: List[str] = Field(default_factory=list)


# -----------------------------
# Contracts
# -----------------------------
class ContractParty(RecordModel):
    name: str
    role: str
    birth_date: Optional[str] = None


class VehicleDetails(RecordModel):
    plate_number: Optional[str] = None
    type: Optional[str] = Field(default=None, description="Make / model")
    color: Optional[str] = None
    registration_location: Optional[str] = None
    route: Optional[str] = Field(default=None, description="Service line (rentals)")
    additional_id: Optional[str] = None


class PropertyDetails(RecordModel):
    type: Optional[str] = None
    identifier: Optional[str] = None
    plot_number: Optional[str] = None
    location: Optional[str] = None
    area: Optional[str] = None
    registry_zone: Optional[str] = None


class ContractRecord(BaseRecord):
    document_category: DocumentCategoryEnum = "contract"

    first_party: Optional[ContractParty] = None
    second_party: Optional[ContractParty] = None
    contract_amount: Optional[str] = None
    contract_currency: Optional[str] = None
    down_payment: Optional[str] = None
    security_deposit: Optional[str] = None
    contract_date: Optional[str] = None
    contract_duration: Optional[str] = None
    vehicle_details: Optional[VehicleDetails] = None
    property_details: Optional[PropertyDetails] = None
    contract_terms: List[str] = Field(default_factory=list)
