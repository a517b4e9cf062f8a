"""
SQLAlchemy Models for Database
==============================

Schema for legal practice management:
- User accounts (credentials, role, password reset state)
- Cases, hearings and alerts
- Clients, invoices and time entries
- Folder system and uploaded documents

Every domain record carries an owner_id; queries are always filtered by it.
Supports both PostgreSQL and SQLite via SQLAlchemy.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Column, String, Text, Integer, Float, Boolean, DateTime, Enum, ForeignKey,
    Index, JSON
)
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


# =============================================================================
# ENUMS
# =============================================================================

class UserRole(str, enum.Enum):
    """Account role"""
    LAWYER = "lawyer"
    ASSISTANT = "assistant"
    ADMIN = "admin"


class CaseStatus(str, enum.Enum):
    """Case lifecycle status"""
    ACTIVE = "active"
    PENDING = "pending"
    CLOSED = "closed"
    WON = "won"
    LOST = "lost"


class CasePriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class HearingType(str, enum.Enum):
    """Kind of court hearing"""
    FIRST = "first_hearing"
    INTERIM = "interim_hearing"
    FINAL = "final_hearing"
    EVIDENCE = "evidence_hearing"
    ARGUMENT = "argument_hearing"
    JUDGMENT = "judgment_hearing"
    OTHER = "other"


class HearingStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    ADJOURNED = "adjourned"
    CANCELLED = "cancelled"


class AlertType(str, enum.Enum):
    """What an alert is about"""
    HEARING = "hearing"
    DEADLINE = "deadline"
    PAYMENT = "payment"
    DOCUMENT = "document"


class InvoiceStatus(str, enum.Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"


# =============================================================================
# USER MODEL
# =============================================================================

class User(Base):
    """User account"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)  # Stored lowercase
    password_hash = Column(String(255), nullable=True)
    role = Column(Enum(UserRole), default=UserRole.LAWYER, nullable=False)
    bar_number = Column(String(100), nullable=True)
    firm = Column(String(255), nullable=True)
    reset_token_hash = Column(String(64), nullable=True, index=True)  # sha256 of the emailed token
    reset_token_expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class OwnedMixin:
    """Columns shared by every owner-scoped record."""
    id = Column(String(36), primary_key=True, default=generate_uuid)
    version = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


# =============================================================================
# CASE MODELS
# =============================================================================

class Case(OwnedMixin, Base):
    """Court case tracked by a lawyer"""
    __tablename__ = "cases"

    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="SET NULL"), nullable=True)
    case_number = Column(String(100), nullable=False)
    client_name = Column(String(255), nullable=False)
    opposing_party = Column(String(255), nullable=True)
    court_name = Column(String(255), nullable=False)
    judge_name = Column(String(255), nullable=True)
    hearing_date = Column(DateTime, nullable=True)
    hearing_time = Column(String(8), nullable=True)  # "HH:MM"
    status = Column(Enum(CaseStatus), default=CaseStatus.ACTIVE, nullable=False)
    priority = Column(Enum(CasePriority), default=CasePriority.MEDIUM, nullable=False)
    case_type = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    next_hearing = Column(DateTime, nullable=True)
    documents = Column(JSON, default=list)
    notes = Column(Text, nullable=True)

    __table_args__ = (
        Index("ix_case_owner_created", "owner_id", "created_at"),
    )

    # Relationships
    hearings = relationship("Hearing", back_populates="case", cascade="all, delete-orphan")
    alerts = relationship("Alert", back_populates="case", cascade="all, delete-orphan")
    time_entries = relationship("TimeEntry", back_populates="case", cascade="all, delete-orphan")


class Hearing(OwnedMixin, Base):
    """Scheduled or past hearing of a case"""
    __tablename__ = "hearings"

    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    case_id = Column(String(36), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False)
    hearing_date = Column(DateTime, nullable=False)
    hearing_time = Column(String(8), nullable=True)
    court_name = Column(String(255), nullable=True)
    judge_name = Column(String(255), nullable=True)
    hearing_type = Column(Enum(HearingType), default=HearingType.OTHER, nullable=False)
    status = Column(Enum(HearingStatus), default=HearingStatus.SCHEDULED, nullable=False)
    purpose = Column(Text, nullable=True)
    court_instructions = Column(Text, nullable=True)
    documents_to_bring = Column(JSON, default=list)
    proceedings = Column(Text, nullable=True)
    next_hearing_date = Column(DateTime, nullable=True)
    next_hearing_time = Column(String(8), nullable=True)
    adjournment_reason = Column(Text, nullable=True)
    attendance = Column(JSON, default=dict)  # client_present, opposing_party_present, witnesses_present
    orders = Column(JSON, default=list)  # [{order_type, order_details, order_date}]
    notes = Column(Text, nullable=True)

    __table_args__ = (
        Index("ix_hearing_owner_case", "owner_id", "case_id"),
    )

    case = relationship("Case", back_populates="hearings")


class Alert(OwnedMixin, Base):
    """Reminder or notification attached to a case"""
    __tablename__ = "alerts"

    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    case_id = Column(String(36), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False)
    type = Column(Enum(AlertType), nullable=False)
    message = Column(Text, nullable=False)
    alert_time = Column(DateTime, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index("ix_alert_owner_case", "owner_id", "case_id"),
    )

    case = relationship("Case", back_populates="alerts")


# =============================================================================
# CLIENT & BILLING MODELS
# =============================================================================

class Client(OwnedMixin, Base):
    """Client of the practice"""
    __tablename__ = "clients"

    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    pan_number = Column(String(20), nullable=True)
    aadhar_number = Column(String(20), nullable=True)
    cases = Column(JSON, default=list)  # case ids
    documents = Column(JSON, default=list)
    notes = Column(Text, nullable=True)


class Invoice(OwnedMixin, Base):
    """Invoice issued to a client"""
    __tablename__ = "invoices"

    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="SET NULL"), nullable=True)
    case_id = Column(String(36), ForeignKey("cases.id", ondelete="SET NULL"), nullable=True)
    invoice_number = Column(String(100), nullable=False)
    issue_date = Column(DateTime, nullable=True)
    due_date = Column(DateTime, nullable=True)
    status = Column(Enum(InvoiceStatus), default=InvoiceStatus.DRAFT, nullable=False)
    currency = Column(String(8), default="INR", nullable=False)
    items = Column(JSON, default=list)  # [{description, quantity, unit_price, amount}]
    subtotal = Column(Float, default=0.0)
    tax_rate = Column(Float, default=0.0)
    tax_amount = Column(Float, default=0.0)
    discount_amount = Column(Float, default=0.0)
    total = Column(Float, default=0.0)
    notes = Column(Text, nullable=True)
    terms = Column(Text, nullable=True)


class TimeEntry(OwnedMixin, Base):
    """Time spent on a case"""
    __tablename__ = "time_entries"

    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    case_id = Column(String(36), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False)
    description = Column(Text, nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    hourly_rate = Column(Float, default=0.0)
    date = Column(DateTime, nullable=False, default=datetime.utcnow)
    billable = Column(Boolean, default=True, nullable=False)

    case = relationship("Case", back_populates="time_entries")


# =============================================================================
# FOLDER & DOCUMENT MODELS
# =============================================================================

class Folder(OwnedMixin, Base):
    """Folder for organizing documents"""
    __tablename__ = "folders"

    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    parent_id = Column(String(36), ForeignKey("folders.id", ondelete="CASCADE"), nullable=True)
    name = Column(String(255), nullable=False)

    documents = relationship("Document", back_populates="folder")


class Document(OwnedMixin, Base):
    """Uploaded file"""
    __tablename__ = "documents"

    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    folder_id = Column(String(36), ForeignKey("folders.id", ondelete="SET NULL"), nullable=True)
    name = Column(String(500), nullable=False)
    mime_type = Column(String(100), nullable=True)
    size = Column(Integer, default=0)
    storage_key = Column(String(500), nullable=False, unique=True)
    url = Column(String(600), nullable=False)
    tags = Column(JSON, default=list)

    folder = relationship("Folder", back_populates="documents")
