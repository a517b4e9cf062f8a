"""
Typed client-side records.

API payloads (camelCase JSON) become dataclasses with snake_case attributes,
ISO timestamps parsed to datetime and missing lists defaulted to [].
The conflict, reminder, notification and dashboard helpers accept these
records as well as ORM rows.
"""

from dataclasses import MISSING, dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from pydantic.alias_generators import to_camel


def parse_datetime(value: Any) -> Optional[datetime]:
    """ISO-8601 string to naive UTC datetime"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


@dataclass
class Record:
    id: str
    version: int = 1
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    datetime_fields: ClassVar[Tuple[str, ...]] = ()

    @classmethod
    def from_api(cls, raw: Dict[str, Any]):
        values: Dict[str, Any] = {}
        parsed_dates = ("created_at", "updated_at") + cls.datetime_fields
        for f in fields(cls):
            value = raw.get(to_camel(f.name), raw.get(f.name))
            if f.name in parsed_dates:
                value = parse_datetime(value)
            if value is None:
                if f.default_factory is not MISSING:
                    value = f.default_factory()
                elif f.default is not MISSING:
                    value = f.default
            values[f.name] = value
        return cls(**values)


@dataclass
class CaseRecord(Record):
    case_number: str = ""
    client_name: str = ""
    opposing_party: Optional[str] = None
    court_name: str = ""
    judge_name: Optional[str] = None
    hearing_date: Optional[datetime] = None
    hearing_time: Optional[str] = None
    status: str = "active"
    priority: str = "medium"
    case_type: Optional[str] = None
    description: Optional[str] = None
    next_hearing: Optional[datetime] = None
    documents: List[str] = field(default_factory=list)
    notes: Optional[str] = None
    client_id: Optional[str] = None

    datetime_fields: ClassVar[Tuple[str, ...]] = ("hearing_date", "next_hearing")


@dataclass
class ClientRecord(Record):
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    pan_number: Optional[str] = None
    aadhar_number: Optional[str] = None
    cases: List[str] = field(default_factory=list)
    documents: List[str] = field(default_factory=list)
    notes: Optional[str] = None


@dataclass
class AlertRecord(Record):
    case_id: str = ""
    type: str = "hearing"
    message: str = ""
    alert_time: Optional[datetime] = None
    is_read: bool = False

    datetime_fields: ClassVar[Tuple[str, ...]] = ("alert_time",)


@dataclass
class TimeEntryRecord(Record):
    case_id: str = ""
    description: str = ""
    duration: int = 0  # minutes
    hourly_rate: float = 0.0
    date: Optional[datetime] = None
    billable: bool = True

    datetime_fields: ClassVar[Tuple[str, ...]] = ("date",)


@dataclass
class Attendance:
    client_present: bool = False
    opposing_party_present: bool = False
    witnesses_present: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, raw: Optional[Dict[str, Any]]) -> "Attendance":
        raw = raw or {}
        return cls(
            client_present=bool(raw.get("clientPresent", False)),
            opposing_party_present=bool(raw.get("opposingPartyPresent", False)),
            witnesses_present=list(raw.get("witnessesPresent") or []),
        )


@dataclass
class HearingOrder:
    order_type: str
    order_details: Optional[str] = None
    order_date: Optional[datetime] = None

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "HearingOrder":
        return cls(
            order_type=raw.get("orderType", ""),
            order_details=raw.get("orderDetails"),
            order_date=parse_datetime(raw.get("orderDate")),
        )


@dataclass
class HearingRecord(Record):
    case_id: str = ""
    hearing_date: Optional[datetime] = None
    hearing_time: Optional[str] = None
    court_name: Optional[str] = None
    judge_name: Optional[str] = None
    hearing_type: str = "other"
    status: str = "scheduled"
    purpose: Optional[str] = None
    court_instructions: Optional[str] = None
    documents_to_bring: List[str] = field(default_factory=list)
    proceedings: Optional[str] = None
    next_hearing_date: Optional[datetime] = None
    next_hearing_time: Optional[str] = None
    adjournment_reason: Optional[str] = None
    attendance: Attendance = field(default_factory=Attendance)
    orders: List[HearingOrder] = field(default_factory=list)
    notes: Optional[str] = None

    datetime_fields: ClassVar[Tuple[str, ...]] = ("hearing_date", "next_hearing_date")

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "HearingRecord":
        record = super().from_api(raw)
        record.attendance = Attendance.from_api(raw.get("attendance"))
        record.orders = [HearingOrder.from_api(o) for o in raw.get("orders") or []]
        return record


@dataclass
class InvoiceItem:
    description: str
    quantity: float = 1
    unit_price: float = 0.0
    amount: float = 0.0


@dataclass
class InvoiceRecord(Record):
    client_id: Optional[str] = None
    case_id: Optional[str] = None
    invoice_number: str = ""
    issue_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    status: str = "draft"
    currency: str = "INR"
    items: List[InvoiceItem] = field(default_factory=list)
    subtotal: float = 0.0
    tax_rate: float = 0.0
    tax_amount: float = 0.0
    discount_amount: float = 0.0
    total: float = 0.0
    notes: Optional[str] = None
    terms: Optional[str] = None

    datetime_fields: ClassVar[Tuple[str, ...]] = ("issue_date", "due_date")

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "InvoiceRecord":
        record = super().from_api(raw)
        record.items = [
            InvoiceItem(
                description=item.get("description", ""),
                quantity=item.get("quantity", 1),
                unit_price=item.get("unitPrice", 0.0),
                amount=item.get("amount", 0.0),
            )
            for item in raw.get("items") or []
        ]
        return record
