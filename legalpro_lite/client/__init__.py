"""
LegalPro Client
===============

Async API client and the in-memory data store built on it.
"""

from .api_client import ApiError, LegalProClient, StaleRecordError
from .records import (
    AlertRecord,
    CaseRecord,
    ClientRecord,
    HearingRecord,
    InvoiceRecord,
    TimeEntryRecord,
)
from .store import LegalDataStore

__all__ = [
    "ApiError",
    "StaleRecordError",
    "LegalProClient",
    "LegalDataStore",
    "CaseRecord",
    "ClientRecord",
    "AlertRecord",
    "TimeEntryRecord",
    "HearingRecord",
    "InvoiceRecord",
]
