"""
Hearing Reminder Generation
===========================

For every case with a hearing date, proposes "hearing" alerts 24, 6 and 1
hours before the hearing. Offsets already in the past are skipped, and so is
any offset that already has a hearing alert for the same case within 60
seconds of it. Re-running with the same alert list creates nothing new.

Pure function: callers persist the returned drafts.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable, List, Optional, Tuple

from .conflicts import parse_clock_time
from .db.models import AlertType

REMINDER_OFFSETS_HOURS = (24, 6, 1)
DEDUP_WINDOW = timedelta(seconds=60)


@dataclass(frozen=True)
class ReminderDraft:
    """An alert that should be created"""
    case_id: str
    type: AlertType
    message: str
    alert_time: datetime


def hearing_moment(case) -> Optional[datetime]:
    """
    When the hearing starts.

    A date-only (or midnight) hearing date combined with hearing_time gives the
    start; otherwise the hearing date itself is used. With no hearing_time a
    midnight date stays at midnight, unlike conflict checks which assume 10:00.
    """
    value = case.hearing_date
    if value is None:
        return None
    if not isinstance(value, datetime):
        if not isinstance(value, date):
            return None
        value = datetime(value.year, value.month, value.day)

    if value.hour == 0 and value.minute == 0 and value.second == 0 and case.hearing_time:
        minutes = parse_clock_time(case.hearing_time)
        if minutes is not None:
            value = value + timedelta(minutes=minutes)
    return value


def reminder_message(case, hours: int) -> str:
    unit = "hour" if hours == 1 else "hours"
    return f"Hearing reminder: {case.case_number} - {case.client_name} at {case.court_name} in {hours} {unit}"


def _is_duplicate(case_id: str, alert_time: datetime, taken: List[Tuple[str, datetime]]) -> bool:
    return any(
        existing_case == case_id and abs(existing_time - alert_time) < DEDUP_WINDOW
        for existing_case, existing_time in taken
    )


def generate_hearing_reminders(
    cases: Iterable[Any],
    alerts: Iterable[Any],
    now: Optional[datetime] = None,
) -> List[ReminderDraft]:
    """
    Reminder drafts not yet covered by existing alerts.

    Args:
        cases: Cases (need id, case_number, client_name, court_name, hearing_date, hearing_time)
        alerts: Existing alerts (need case_id, type, alert_time)
        now: Current naive-UTC time (defaults to utcnow)
    """
    now = now or datetime.utcnow()
    taken = [
        (alert.case_id, alert.alert_time)
        for alert in alerts
        if alert.type == AlertType.HEARING and alert.alert_time is not None
    ]

    drafts: List[ReminderDraft] = []
    for case in cases:
        moment = hearing_moment(case)
        if moment is None:
            continue

        for hours in REMINDER_OFFSETS_HOURS:
            alert_time = moment - timedelta(hours=hours)
            if alert_time <= now:
                continue
            if _is_duplicate(case.id, alert_time, taken):
                continue

            drafts.append(ReminderDraft(
                case_id=case.id,
                type=AlertType.HEARING,
                message=reminder_message(case, hours),
                alert_time=alert_time,
            ))
            taken.append((case.id, alert_time))

    return drafts
