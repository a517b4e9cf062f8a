"""
Case Conflict Detection
=======================

Compares one case against the rest of a case list and reports scheduling and
ethical overlaps. Four independent rules, each contributing at most one
conflict per compared pair:

- time:           same hearing day, hearing times less than 2 hours apart
                  (high under 1 hour, otherwise medium; unset time = 10:00)
- client:         same client name and both cases active (medium)
- opposing-party: same non-empty opposing party (high)
- court:          same court on the same hearing day (low)

Name comparisons ignore case. Empty client and court names never match; only
a filled-in name can identify the same client or court. A case is never
compared with itself and a pair may yield several conflicts at once.

Works on any objects exposing the case attributes (ORM rows or client records).
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, List, Optional

from .db.models import CaseStatus

DEFAULT_HEARING_TIME = "10:00"
TIME_CONFLICT_MINUTES = 120
HIGH_SEVERITY_MINUTES = 60


class ConflictType(str, Enum):
    TIME = "time"
    CLIENT = "client"
    OPPOSING_PARTY = "opposing-party"
    COURT = "court"


class ConflictSeverity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Conflict:
    """A detected overlap between the candidate case and affected_case"""
    type: ConflictType
    severity: ConflictSeverity
    message: str
    affected_case: Any

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "message": self.message,
            "affected_case": {
                "id": self.affected_case.id,
                "case_number": self.affected_case.case_number,
                "client_name": self.affected_case.client_name,
            },
        }


def _norm(value: Optional[str]) -> str:
    return (value or "").lower()


def _calendar_day(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def parse_clock_time(value: Optional[str]) -> Optional[int]:
    """Parse "HH:MM" (seconds ignored). Unset means 10:00, garbage means unknown."""
    text = (value or "").strip() or DEFAULT_HEARING_TIME
    parts = text.split(":")
    try:
        hours, minutes = int(parts[0]), int(parts[1])
    except (IndexError, ValueError):
        return None
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        return None
    return hours * 60 + minutes


def format_day(day: date) -> str:
    return f"{day.day}/{day.month}/{day.year}"


def _is_active(case) -> bool:
    return case.status == CaseStatus.ACTIVE


def _time_conflict(current, other, day: Optional[date], other_day: Optional[date]) -> Optional[Conflict]:
    if day is None or other_day is None or day != other_day:
        return None

    current_minutes = parse_clock_time(current.hearing_time)
    other_minutes = parse_clock_time(other.hearing_time)
    if current_minutes is None or other_minutes is None:
        return None

    diff = abs(current_minutes - other_minutes)
    if diff >= TIME_CONFLICT_MINUTES:
        return None

    severity = ConflictSeverity.HIGH if diff < HIGH_SEVERITY_MINUTES else ConflictSeverity.MEDIUM
    return Conflict(
        type=ConflictType.TIME,
        severity=severity,
        message=f"Time conflict with {other.case_number} on {format_day(other_day)}",
        affected_case=other,
    )


def _client_conflict(current, other) -> Optional[Conflict]:
    name = _norm(current.client_name)
    if not name or name != _norm(other.client_name):
        return None
    if not (_is_active(current) and _is_active(other)):
        return None
    return Conflict(
        type=ConflictType.CLIENT,
        severity=ConflictSeverity.MEDIUM,
        message=f"Multiple active cases for client: {current.client_name}",
        affected_case=other,
    )


def _opposing_party_conflict(current, other) -> Optional[Conflict]:
    party = _norm(current.opposing_party)
    if not party or party != _norm(other.opposing_party):
        return None
    return Conflict(
        type=ConflictType.OPPOSING_PARTY,
        severity=ConflictSeverity.HIGH,
        message=f"Conflict of interest: Same opposing party ({current.opposing_party})",
        affected_case=other,
    )


def _court_conflict(current, other, day: Optional[date], other_day: Optional[date]) -> Optional[Conflict]:
    court = _norm(current.court_name)
    if not court or court != _norm(other.court_name):
        return None
    if day is None or day != other_day:
        return None
    return Conflict(
        type=ConflictType.COURT,
        severity=ConflictSeverity.LOW,
        message=f"Multiple cases at {current.court_name} on {format_day(day)}",
        affected_case=other,
    )


def detect_conflicts(current_case, cases: Iterable[Any]) -> List[Conflict]:
    """
    Conflicts between current_case and every other case in cases.

    Args:
        current_case: The case being checked
        cases: Full case list (may include current_case itself)

    Returns:
        One Conflict per matching (rule, pair), in case-list order
    """
    conflicts: List[Conflict] = []
    day = _calendar_day(current_case.hearing_date)

    for other in cases:
        if other.id == current_case.id:
            continue

        other_day = _calendar_day(other.hearing_date)
        for conflict in (
            _time_conflict(current_case, other, day, other_day),
            _client_conflict(current_case, other),
            _opposing_party_conflict(current_case, other),
            _court_conflict(current_case, other, day, other_day),
        ):
            if conflict is not None:
                conflicts.append(conflict)

    return conflicts
