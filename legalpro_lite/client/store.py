"""
Client Data Cache
=================

In-memory copy of one user's practice data, kept in sync with the API.

- load() fetches every collection in parallel; a collection that fails to
  load is logged and left empty.
- add_*/update_*/delete_* call the API first and patch the cache only from
  the record the server returns.
- Updates send the cached version (If-Match); a concurrent change surfaces as
  StaleRecordError.

Usage:
    store = LegalDataStore(client)
    await store.load()
    case = await store.add_case({"case_number": "CS-1", ...})
"""

import asyncio
import dataclasses
import enum
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Set

from pydantic.alias_generators import to_camel

from ..conflicts import Conflict, detect_conflicts
from ..dashboard import BillingSummary, DashboardStats, billing_summary, dashboard_stats
from ..notifications import RECENT_ALERTS_LIMIT, filter_alerts, recent_alerts, unread_count
from ..reminders import generate_hearing_reminders
from .api_client import LegalProClient
from .records import (
    AlertRecord,
    CaseRecord,
    ClientRecord,
    HearingRecord,
    InvoiceRecord,
    Record,
    TimeEntryRecord,
)

logger = logging.getLogger(__name__)

COLLECTIONS = {
    "cases": CaseRecord,
    "clients": ClientRecord,
    "alerts": AlertRecord,
    "time_entries": TimeEntryRecord,
    "hearings": HearingRecord,
    "invoices": InvoiceRecord,
}


def to_wire(value: Any) -> Any:
    """snake_case Python values to the API's camelCase JSON"""
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_wire(dataclasses.asdict(value))
    if isinstance(value, dict):
        return {to_camel(key): to_wire(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_wire(item) for item in value]
    return value


class LegalDataStore:
    """Cached collections plus the operations that keep them current"""

    def __init__(self, client: LegalProClient):
        self.client = client
        self.cases: List[CaseRecord] = []
        self.clients: List[ClientRecord] = []
        self.alerts: List[AlertRecord] = []
        self.time_entries: List[TimeEntryRecord] = []
        self.hearings: List[HearingRecord] = []
        self.invoices: List[InvoiceRecord] = []
        self.loaded = False
        self._busy_alerts: Set[str] = set()

    async def load(self) -> None:
        names = list(COLLECTIONS)
        results = await asyncio.gather(
            *(self.client.list_records(name) for name in names),
            return_exceptions=True,
        )
        for name, result in zip(names, results):
            if isinstance(result, Exception):
                logger.error(f"Failed to load {name}: {result}")
                setattr(self, name, [])
                continue
            setattr(self, name, [COLLECTIONS[name].from_api(raw) for raw in result])
        self.loaded = True

    # =========================================================================
    # Generic mutations
    # =========================================================================

    def _find(self, collection: str, record_id: str) -> Optional[Record]:
        return next((r for r in getattr(self, collection) if r.id == record_id), None)

    def _replace(self, collection: str, record: Record) -> None:
        items = getattr(self, collection)
        setattr(self, collection, [record if r.id == record.id else r for r in items])

    async def _add(self, collection: str, data: Dict[str, Any]) -> Record:
        raw = await self.client.create(collection, to_wire(data))
        record = COLLECTIONS[collection].from_api(raw)
        getattr(self, collection).insert(0, record)
        return record

    async def _update(self, collection: str, record_id: str, changes: Dict[str, Any]) -> Record:
        cached = self._find(collection, record_id)
        version = cached.version if cached is not None else None
        raw = await self.client.update(collection, record_id, to_wire(changes), version=version)
        record = COLLECTIONS[collection].from_api(raw)
        self._replace(collection, record)
        return record

    async def _delete(self, collection: str, record_id: str) -> None:
        await self.client.delete(collection, record_id)
        setattr(self, collection, [r for r in getattr(self, collection) if r.id != record_id])

    # =========================================================================
    # Cases
    # =========================================================================

    async def add_case(self, data: Dict[str, Any]) -> CaseRecord:
        return await self._add("cases", data)

    async def update_case(self, case_id: str, changes: Dict[str, Any]) -> CaseRecord:
        return await self._update("cases", case_id, changes)

    async def delete_case(self, case_id: str) -> None:
        await self._delete("cases", case_id)
        # Server removes the case's hearings, alerts and time entries with it
        self.hearings = [h for h in self.hearings if h.case_id != case_id]
        self.alerts = [a for a in self.alerts if a.case_id != case_id]
        self.time_entries = [t for t in self.time_entries if t.case_id != case_id]

    # =========================================================================
    # Clients
    # =========================================================================

    async def add_client(self, data: Dict[str, Any]) -> ClientRecord:
        return await self._add("clients", data)

    async def update_client(self, client_id: str, changes: Dict[str, Any]) -> ClientRecord:
        return await self._update("clients", client_id, changes)

    async def delete_client(self, client_id: str) -> None:
        await self._delete("clients", client_id)

    # =========================================================================
    # Hearings
    # =========================================================================

    async def add_hearing(self, data: Dict[str, Any]) -> HearingRecord:
        return await self._add("hearings", data)

    async def update_hearing(self, hearing_id: str, changes: Dict[str, Any]) -> HearingRecord:
        return await self._update("hearings", hearing_id, changes)

    async def delete_hearing(self, hearing_id: str) -> None:
        await self._delete("hearings", hearing_id)

    # =========================================================================
    # Time entries
    # =========================================================================

    async def add_time_entry(self, data: Dict[str, Any]) -> TimeEntryRecord:
        return await self._add("time_entries", data)

    async def update_time_entry(self, entry_id: str, changes: Dict[str, Any]) -> TimeEntryRecord:
        return await self._update("time_entries", entry_id, changes)

    async def delete_time_entry(self, entry_id: str) -> None:
        await self._delete("time_entries", entry_id)

    # =========================================================================
    # Invoices
    # =========================================================================

    async def add_invoice(self, data: Dict[str, Any]) -> InvoiceRecord:
        return await self._add("invoices", data)

    async def update_invoice(self, invoice_id: str, changes: Dict[str, Any]) -> InvoiceRecord:
        return await self._update("invoices", invoice_id, changes)

    async def delete_invoice(self, invoice_id: str) -> None:
        await self._delete("invoices", invoice_id)

    async def send_invoice(
        self,
        invoice_id: str,
        to: Optional[str] = None,
        subject: Optional[str] = None,
        message: Optional[str] = None,
    ) -> str:
        """Email an invoice; returns the recipient address."""
        return await self.client.send_invoice(invoice_id, to=to, subject=subject, message=message)

    # =========================================================================
    # Alerts
    # =========================================================================

    async def add_alert(self, data: Dict[str, Any]) -> AlertRecord:
        return await self._add("alerts", data)

    async def update_alert(self, alert_id: str, changes: Dict[str, Any]) -> AlertRecord:
        return await self._update("alerts", alert_id, changes)

    async def mark_alert_as_read(self, alert_id: str) -> Optional[AlertRecord]:
        """Mark one alert read. Returns None while a change to it is in flight."""
        if alert_id in self._busy_alerts:
            return None
        self._busy_alerts.add(alert_id)
        try:
            record = AlertRecord.from_api(await self.client.mark_alert_read(alert_id))
            self._replace("alerts", record)
            return record
        finally:
            self._busy_alerts.discard(alert_id)

    async def mark_all_alerts_as_read(self) -> int:
        pending = [a.id for a in self.alerts if not a.is_read and a.id not in self._busy_alerts]
        self._busy_alerts.update(pending)
        try:
            updated = await self.client.mark_all_alerts_read()
            for alert in self.alerts:
                if not alert.is_read:
                    alert.is_read = True
                    alert.version += 1
            return updated
        finally:
            self._busy_alerts.difference_update(pending)

    async def delete_alert(self, alert_id: str) -> bool:
        """Delete an alert. Returns False while a change to it is in flight."""
        if alert_id in self._busy_alerts:
            return False
        self._busy_alerts.add(alert_id)
        try:
            await self._delete("alerts", alert_id)
            return True
        finally:
            self._busy_alerts.discard(alert_id)

    def is_alert_busy(self, alert_id: str) -> bool:
        return alert_id in self._busy_alerts

    # =========================================================================
    # Derived views
    # =========================================================================

    def get_case_by_id(self, case_id: str) -> Optional[CaseRecord]:
        return self._find("cases", case_id)

    def get_hearings_by_case_id(self, case_id: str) -> List[HearingRecord]:
        hearings = [h for h in self.hearings if h.case_id == case_id]
        return sorted(hearings, key=lambda h: h.hearing_date or datetime.min)

    def conflicts_for(self, case: CaseRecord) -> List[Conflict]:
        return detect_conflicts(case, self.cases)

    async def generate_hearing_reminders(self, now: Optional[datetime] = None) -> List[AlertRecord]:
        """Create the missing hearing reminder alerts; returns the created alerts."""
        created: List[AlertRecord] = []
        for draft in generate_hearing_reminders(self.cases, self.alerts, now=now):
            created.append(await self.add_alert({
                "case_id": draft.case_id,
                "type": draft.type,
                "message": draft.message,
                "alert_time": draft.alert_time,
                "is_read": False,
            }))
        if created:
            logger.info(f"Created {len(created)} hearing reminder(s)")
        return created

    def filter_alerts(self, search: Optional[str] = None, status: str = "all") -> List[AlertRecord]:
        return filter_alerts(self.alerts, self.cases, search=search, status=status)

    def unread_alert_count(self) -> int:
        return unread_count(self.alerts)

    def recent_alerts(self, limit: int = RECENT_ALERTS_LIMIT) -> List[AlertRecord]:
        return recent_alerts(self.alerts, limit=limit)

    def dashboard_stats(self, today: Optional[date] = None) -> DashboardStats:
        return dashboard_stats(self.cases, self.alerts, today=today)

    def billing_summary(self) -> BillingSummary:
        return billing_summary(self.invoices, self.time_entries)
