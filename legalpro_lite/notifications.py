"""
Notification helpers over alert lists.

Search, read/unread/type filtering and "recent" views. Pure functions; the
data store and API feed them alert objects (ORM rows or client records).
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from .db.models import AlertType

FILTER_ALL = "all"
FILTER_UNREAD = "unread"
FILTER_READ = "read"
ALERT_FILTERS = (FILTER_ALL, FILTER_UNREAD, FILTER_READ) + tuple(t.value for t in AlertType)

RECENT_ALERTS_LIMIT = 10


def _type_value(alert) -> str:
    return getattr(alert.type, "value", alert.type)


def _matches_filter(alert, status: str) -> bool:
    if status == FILTER_ALL:
        return True
    if status == FILTER_UNREAD:
        return not alert.is_read
    if status == FILTER_READ:
        return bool(alert.is_read)
    return _type_value(alert) == status


def filter_alerts(
    alerts: Iterable[Any],
    cases: Iterable[Any] = (),
    search: Optional[str] = None,
    status: str = FILTER_ALL,
) -> List[Any]:
    """
    Alerts matching a search term and a status/type filter.

    The search term matches the alert message or the case number of the
    alert's case, ignoring case.
    """
    if status not in ALERT_FILTERS:
        raise ValueError(f"Unknown alert filter: {status}")

    case_numbers: Dict[str, str] = {c.id: (c.case_number or "") for c in cases}
    term = (search or "").strip().lower()

    results = []
    for alert in alerts:
        if term:
            in_message = term in (alert.message or "").lower()
            in_case = term in case_numbers.get(alert.case_id, "").lower()
            if not (in_message or in_case):
                continue
        if _matches_filter(alert, status):
            results.append(alert)
    return results


def unread_count(alerts: Iterable[Any]) -> int:
    return sum(1 for alert in alerts if not alert.is_read)


def sort_newest_first(alerts: Iterable[Any]) -> List[Any]:
    return sorted(alerts, key=lambda a: a.created_at or datetime.min, reverse=True)


def recent_alerts(alerts: Iterable[Any], limit: int = RECENT_ALERTS_LIMIT) -> List[Any]:
    return sort_newest_first(alerts)[:limit]
