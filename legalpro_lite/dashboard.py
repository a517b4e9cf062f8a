"""
Dashboard & Billing Summaries
=============================

Aggregates shown on the practice overview and billing pages.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from .db.models import CasePriority, CaseStatus, InvoiceStatus


@dataclass
class DashboardStats:
    """Practice overview for one day"""
    total_cases: int
    active_cases: int
    todays_cases: List[Any] = field(default_factory=list)
    urgent_cases: List[Any] = field(default_factory=list)
    unread_alerts: int = 0
    status_counts: Dict[str, int] = field(default_factory=dict)


@dataclass
class BillingSummary:
    total_billed: float = 0.0
    paid_amount: float = 0.0
    pending_amount: float = 0.0  # sent + overdue
    total_minutes: int = 0
    billable_minutes: int = 0
    billable_value: float = 0.0  # billable time priced at each entry's hourly rate

    @property
    def total_hours(self) -> float:
        return round(self.total_minutes / 60, 2)


def _value(enum_or_str) -> str:
    return getattr(enum_or_str, "value", enum_or_str)


def _day(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def dashboard_stats(cases: Iterable[Any], alerts: Iterable[Any], today: Optional[date] = None) -> DashboardStats:
    today = today or datetime.utcnow().date()
    cases = list(cases)

    return DashboardStats(
        total_cases=len(cases),
        active_cases=sum(1 for c in cases if c.status == CaseStatus.ACTIVE),
        todays_cases=[c for c in cases if _day(c.hearing_date) == today],
        urgent_cases=[c for c in cases if c.priority == CasePriority.URGENT],
        unread_alerts=sum(1 for a in alerts if not a.is_read),
        status_counts=dict(Counter(_value(c.status) for c in cases)),
    )


def billing_summary(invoices: Iterable[Any], time_entries: Iterable[Any]) -> BillingSummary:
    summary = BillingSummary()

    for invoice in invoices:
        total = float(invoice.total or 0)
        summary.total_billed += total
        if invoice.status == InvoiceStatus.PAID:
            summary.paid_amount += total
        elif invoice.status in (InvoiceStatus.SENT, InvoiceStatus.OVERDUE):
            summary.pending_amount += total

    for entry in time_entries:
        minutes = int(entry.duration or 0)
        summary.total_minutes += minutes
        if entry.billable:
            summary.billable_minutes += minutes
            summary.billable_value += minutes / 60 * float(entry.hourly_rate or 0)

    summary.billable_value = round(summary.billable_value, 2)
    return summary
