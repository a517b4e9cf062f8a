"""
Pydantic Schemas for LegalPro Lite
==================================

Explicit request/response shapes for every endpoint.
Wire format is camelCase JSON; Python attributes stay snake_case.

Request models reject unknown fields (422) instead of passing arbitrary JSON
through to storage. Update models are partial: only fields present in the body
are applied, and required columns may not be nulled.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, ClassVar, Dict, List, Optional, Tuple

from pydantic import AfterValidator, BaseModel, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .auth import MAX_PASSWORD_BYTES, MIN_PASSWORD_LENGTH
from .db.models import (
    AlertType, CasePriority, CaseStatus, HearingStatus, HearingType, InvoiceStatus, UserRole,
)


def _to_naive_utc(value: datetime) -> datetime:
    # Stored datetimes are naive UTC
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


UtcDateTime = Annotated[datetime, AfterValidator(_to_naive_utc)]
ClockTime = Annotated[str, Field(pattern=r"^(\d{1,2}:\d{2}(:\d{2})?)?$")]


# =============================================================================
# BASE MODELS
# =============================================================================

class RequestModel(BaseModel):
    """Base for request bodies"""

    # Fields that may be omitted on update but never set to null
    non_nullable: ClassVar[Tuple[str, ...]] = ()
    # Fields stored in JSON columns (dumped in JSON mode)
    json_fields: ClassVar[Tuple[str, ...]] = ()

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "forbid"

    @model_validator(mode="after")
    def reject_nulls(self):
        for name in self.non_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self

    def to_record(self, partial: bool = False) -> Dict[str, Any]:
        """Column values for this payload. Partial dumps keep only fields sent by the client."""
        data = self.model_dump(exclude_unset=partial, exclude_none=not partial)
        for name in self.json_fields:
            if data.get(name) is not None:
                data[name] = self.model_dump(mode="json", include={name})[name]
        return data


class ResponseModel(BaseModel):
    """Base for response bodies built from ORM rows"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class RecordResponse(ResponseModel):
    id: str
    version: int = 1
    created_at: datetime
    updated_at: Optional[datetime] = None


class OkResponse(BaseModel):
    ok: bool = True


# =============================================================================
# AUTH
# =============================================================================

def _check_password(value: str) -> str:
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password too long (max {MAX_PASSWORD_BYTES} bytes)")
    return value


class RegisterRequest(RequestModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str
    role: Optional[UserRole] = None
    bar_number: Optional[str] = Field(None, max_length=100)
    firm: Optional[str] = Field(None, max_length=255)

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, value: str) -> str:
        return _check_password(value)


class LoginRequest(RequestModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ForgotPasswordRequest(RequestModel):
    email: str = Field(..., min_length=1)


class ResetPasswordRequest(RequestModel):
    token: str = Field(..., min_length=1)
    password: str

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, value: str) -> str:
        return _check_password(value)


class UserPublic(ResponseModel):
    """Public user projection (never includes the password hash)"""
    id: str
    name: str
    email: str
    role: UserRole
    bar_number: Optional[str] = None
    firm: Optional[str] = None


class RegisterResponse(BaseModel):
    id: str


class LoginResponse(BaseModel):
    token: str
    user: UserPublic


class MeResponse(BaseModel):
    user: UserPublic


class ForgotPasswordResponse(BaseModel):
    ok: bool = True
    token: Optional[str] = None


# =============================================================================
# CASES
# =============================================================================

class CaseFields(RequestModel):
    case_number: Optional[str] = Field(None, min_length=1, max_length=100)
    client_name: Optional[str] = Field(None, min_length=1, max_length=255)
    opposing_party: Optional[str] = Field(None, max_length=255)
    court_name: Optional[str] = Field(None, min_length=1, max_length=255)
    judge_name: Optional[str] = Field(None, max_length=255)
    hearing_date: Optional[UtcDateTime] = None
    hearing_time: Optional[ClockTime] = None
    status: Optional[CaseStatus] = None
    priority: Optional[CasePriority] = None
    case_type: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    next_hearing: Optional[UtcDateTime] = None
    documents: Optional[List[str]] = None
    notes: Optional[str] = None
    client_id: Optional[str] = None


class CaseCreate(CaseFields):
    case_number: str = Field(..., min_length=1, max_length=100)
    client_name: str = Field(..., min_length=1, max_length=255)
    court_name: str = Field(..., min_length=1, max_length=255)


class CaseUpdate(CaseFields):
    non_nullable = ("case_number", "client_name", "court_name", "status", "priority", "documents")


class CaseResponse(RecordResponse):
    case_number: str
    client_name: str
    opposing_party: Optional[str] = None
    court_name: str
    judge_name: Optional[str] = None
    hearing_date: Optional[datetime] = None
    hearing_time: Optional[str] = None
    status: CaseStatus
    priority: CasePriority
    case_type: Optional[str] = None
    description: Optional[str] = None
    next_hearing: Optional[datetime] = None
    documents: List[str] = []
    notes: Optional[str] = None
    client_id: Optional[str] = None


class AffectedCase(ResponseModel):
    id: str
    case_number: str
    client_name: str


class ConflictResponse(ResponseModel):
    type: str
    severity: str
    message: str
    affected_case: AffectedCase


# =============================================================================
# HEARINGS
# =============================================================================

class Attendance(RequestModel):
    client_present: bool = False
    opposing_party_present: bool = False
    witnesses_present: List[str] = []


class HearingOrder(RequestModel):
    order_type: str = Field(..., min_length=1)
    order_details: Optional[str] = None
    order_date: Optional[UtcDateTime] = None


class HearingFields(RequestModel):
    json_fields = ("attendance", "orders")

    case_id: Optional[str] = None
    hearing_date: Optional[UtcDateTime] = None
    hearing_time: Optional[ClockTime] = None
    court_name: Optional[str] = Field(None, max_length=255)
    judge_name: Optional[str] = Field(None, max_length=255)
    hearing_type: Optional[HearingType] = None
    status: Optional[HearingStatus] = None
    purpose: Optional[str] = None
    court_instructions: Optional[str] = None
    documents_to_bring: Optional[List[str]] = None
    proceedings: Optional[str] = None
    next_hearing_date: Optional[UtcDateTime] = None
    next_hearing_time: Optional[ClockTime] = None
    adjournment_reason: Optional[str] = None
    attendance: Optional[Attendance] = None
    orders: Optional[List[HearingOrder]] = None
    notes: Optional[str] = None


class HearingCreate(HearingFields):
    case_id: str = Field(..., min_length=1)
    hearing_date: UtcDateTime


class HearingUpdate(HearingFields):
    non_nullable = (
        "case_id", "hearing_date", "hearing_type", "status",
        "documents_to_bring", "attendance", "orders",
    )


class HearingResponse(RecordResponse):
    case_id: str
    hearing_date: datetime
    hearing_time: Optional[str] = None
    court_name: Optional[str] = None
    judge_name: Optional[str] = None
    hearing_type: HearingType
    status: HearingStatus
    purpose: Optional[str] = None
    court_instructions: Optional[str] = None
    documents_to_bring: List[str] = []
    proceedings: Optional[str] = None
    next_hearing_date: Optional[datetime] = None
    next_hearing_time: Optional[str] = None
    adjournment_reason: Optional[str] = None
    attendance: Attendance = Attendance()
    orders: List[HearingOrder] = []
    notes: Optional[str] = None


# =============================================================================
# ALERTS
# =============================================================================

class AlertFields(RequestModel):
    case_id: Optional[str] = None
    type: Optional[AlertType] = None
    message: Optional[str] = Field(None, min_length=1)
    alert_time: Optional[UtcDateTime] = None
    is_read: Optional[bool] = None


class AlertCreate(AlertFields):
    case_id: str = Field(..., min_length=1)
    type: AlertType
    message: str = Field(..., min_length=1)
    alert_time: UtcDateTime
    is_read: bool = False


class AlertUpdate(AlertFields):
    non_nullable = ("case_id", "type", "message", "alert_time", "is_read")


class AlertResponse(RecordResponse):
    case_id: str
    type: AlertType
    message: str
    alert_time: datetime
    is_read: bool = False


class ReadAllResponse(BaseModel):
    updated: int


# =============================================================================
# CLIENTS
# =============================================================================

class ClientFields(RequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    pan_number: Optional[str] = Field(None, max_length=20)
    aadhar_number: Optional[str] = Field(None, max_length=20)
    cases: Optional[List[str]] = None
    documents: Optional[List[str]] = None
    notes: Optional[str] = None


class ClientCreate(ClientFields):
    name: str = Field(..., min_length=1, max_length=255)


class ClientUpdate(ClientFields):
    non_nullable = ("name", "cases", "documents")


class ClientResponse(RecordResponse):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    pan_number: Optional[str] = None
    aadhar_number: Optional[str] = None
    cases: List[str] = []
    documents: List[str] = []
    notes: Optional[str] = None


# =============================================================================
# INVOICES
# =============================================================================

class InvoiceItem(RequestModel):
    description: str = Field(..., min_length=1)
    quantity: float = Field(1, ge=0)
    unit_price: float = Field(0, ge=0)
    amount: float = Field(0, ge=0)


class InvoiceFields(RequestModel):
    json_fields = ("items",)

    client_id: Optional[str] = None
    case_id: Optional[str] = None
    invoice_number: Optional[str] = Field(None, min_length=1, max_length=100)
    issue_date: Optional[UtcDateTime] = None
    due_date: Optional[UtcDateTime] = None
    status: Optional[InvoiceStatus] = None
    currency: Optional[str] = Field(None, min_length=1, max_length=8)
    items: Optional[List[InvoiceItem]] = None
    subtotal: Optional[float] = Field(None, ge=0)
    tax_rate: Optional[float] = Field(None, ge=0)
    tax_amount: Optional[float] = Field(None, ge=0)
    discount_amount: Optional[float] = Field(None, ge=0)
    total: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    terms: Optional[str] = None


class InvoiceCreate(InvoiceFields):
    client_id: str = Field(..., min_length=1)
    invoice_number: str = Field(..., min_length=1, max_length=100)


class InvoiceUpdate(InvoiceFields):
    non_nullable = ("client_id", "invoice_number", "status", "currency", "items")


class InvoiceResponse(RecordResponse):
    client_id: Optional[str] = None
    case_id: Optional[str] = None
    invoice_number: str
    issue_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    status: InvoiceStatus
    currency: str = "INR"
    items: List[InvoiceItem] = []
    subtotal: float = 0.0
    tax_rate: float = 0.0
    tax_amount: float = 0.0
    discount_amount: float = 0.0
    total: float = 0.0
    notes: Optional[str] = None
    terms: Optional[str] = None


class InvoiceSendRequest(RequestModel):
    to: Optional[EmailStr] = None
    subject: Optional[str] = Field(None, max_length=255)
    message: Optional[str] = None


class InvoiceSendResponse(BaseModel):
    ok: bool = True
    to: str


# =============================================================================
# TIME ENTRIES
# =============================================================================

class TimeEntryFields(RequestModel):
    case_id: Optional[str] = None
    description: Optional[str] = Field(None, min_length=1)
    duration: Optional[int] = Field(None, ge=0, description="Minutes")
    hourly_rate: Optional[float] = Field(None, ge=0)
    date: Optional[UtcDateTime] = None
    billable: Optional[bool] = None


class TimeEntryCreate(TimeEntryFields):
    case_id: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    duration: int = Field(..., ge=0, description="Minutes")


class TimeEntryUpdate(TimeEntryFields):
    non_nullable = ("case_id", "description", "duration", "date", "billable")


class TimeEntryResponse(RecordResponse):
    case_id: str
    description: str
    duration: int
    hourly_rate: float = 0.0
    date: datetime
    billable: bool = True


# =============================================================================
# FOLDERS & DOCUMENTS
# =============================================================================

class FolderCreate(RequestModel):
    """Create folder request"""
    name: str = Field(..., min_length=1, max_length=255)
    parent_id: Optional[str] = None


class FolderUpdate(RequestModel):
    """Rename folder request"""
    name: str = Field(..., min_length=1, max_length=255)


class FolderResponse(ResponseModel):
    id: str
    name: str
    parent_id: Optional[str] = None
    created_at: datetime


class DocumentUpdate(RequestModel):
    """Document metadata update"""
    non_nullable = ("name", "tags")

    name: Optional[str] = Field(None, min_length=1, max_length=500)
    tags: Optional[List[str]] = None
    folder_id: Optional[str] = None


class DocumentResponse(ResponseModel):
    id: str
    name: str
    mime_type: Optional[str] = None
    size: int = 0
    url: str
    folder_id: Optional[str] = None
    tags: List[str] = []
    version: int = 1
    created_at: datetime


class FolderEnvelope(BaseModel):
    folder: FolderResponse


class FolderListEnvelope(BaseModel):
    folders: List[FolderResponse]


class DocumentEnvelope(BaseModel):
    file: DocumentResponse


class DocumentListEnvelope(BaseModel):
    files: List[DocumentResponse]


# =============================================================================
# HEALTH
# =============================================================================

class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    database: str
