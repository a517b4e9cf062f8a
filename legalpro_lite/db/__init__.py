"""
Database Package - SQLAlchemy
=============================

Persistence layer for users and their owner-scoped practice records.
"""

from .models import (
    Base,
    User,
    Case, Hearing, Alert,
    Client, Invoice, TimeEntry,
    Folder, Document,
    UserRole, CaseStatus, CasePriority, HearingType, HearingStatus,
    AlertType, InvoiceStatus,
)
from .session import get_db, get_db_session, init_db, get_engine, reset_engine

__all__ = [
    # Base
    "Base",
    # Accounts
    "User",
    # Cases
    "Case", "Hearing", "Alert",
    # Clients & billing
    "Client", "Invoice", "TimeEntry",
    # Documents
    "Folder", "Document",
    # Enums
    "UserRole", "CaseStatus", "CasePriority", "HearingType", "HearingStatus",
    "AlertType", "InvoiceStatus",
    # Session
    "get_db", "get_db_session", "init_db", "get_engine", "reset_engine",
]
