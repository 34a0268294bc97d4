"""Attendance ledger service and days-stayed aggregation.

Days stayed for a billing period is the number of present records whose date
falls inside the period's literal [start_date, end_date] range. Periods are
not aligned to calendar months, so records are never grouped by a month label
here. A day without a record counts as absent.
"""

import logging
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, NamedTuple, Protocol

from sqlalchemy.orm import Session

from dormitory.errors import NotFoundError
from dormitory.models.attendance import AttendanceRecord
from dormitory.models.occupant import Occupant
from dormitory.services.period_service import month_bounds, validate_range

logger = logging.getLogger(__name__)


class DateRange(Protocol):
    start_date: date
    end_date: date


class AttendanceDay(NamedTuple):
    """One calendar cell for an occupant."""

    date: date
    is_present: bool
    note: str | None


class AttendanceSummary(NamedTuple):
    """Days stayed by one occupant within a billing period."""

    occupant_id: int
    occupant_name: str
    days_stayed: int
    total_days: int
    attendance_rate: int


class MonthlyAttendance(NamedTuple):
    """Calendar-month attendance for one occupant, with rent estimate."""

    occupant_id: int
    occupant_name: str
    room: str
    month: str
    days_stayed: int
    total_days: int
    attendance_rate: int
    notes: list[str]
    monthly_rent: Decimal
    estimated_rent_share: Decimal


def _latest_by_date(records: Iterable[AttendanceRecord]) -> dict[date, AttendanceRecord]:
    # Later entries for the same day replace earlier ones (last write wins)
    by_date: dict[date, AttendanceRecord] = {}
    for record in records:
        by_date[record.attendance_date] = record
    return by_date


def count_days_stayed(
    occupant_id: int,
    start_date: date,
    end_date: date,
    records: Iterable[AttendanceRecord],
) -> int:
    """Count present days for an occupant within [start_date, end_date].

    Args:
        occupant_id: Occupant whose records are counted; others are ignored
        start_date: First day of the period (inclusive)
        end_date: Last day of the period (inclusive)
        records: Attendance snapshot (sparse; missing days are absent)

    Returns:
        Number of distinct present days inside the range
    """
    validate_range(start_date, end_date)
    own = (r for r in records if r.occupant_id == occupant_id)
    return sum(
        1
        for day, record in _latest_by_date(own).items()
        if start_date <= day <= end_date and record.is_present
    )


def attendance_rate(days_stayed: int, total_days: int) -> int:
    """Rounded percentage of days present."""
    if total_days <= 0:
        return 0
    rate = Decimal(days_stayed * 100) / Decimal(total_days)
    return int(rate.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def build_calendar(
    start_date: date,
    end_date: date,
    records: Iterable[AttendanceRecord],
) -> list[AttendanceDay]:
    """One entry per day of the range, filling missing days as absent."""
    validate_range(start_date, end_date)
    by_date = _latest_by_date(records)
    days = []
    current = start_date
    while current <= end_date:
        record = by_date.get(current)
        days.append(
            AttendanceDay(
                date=current,
                is_present=bool(record and record.is_present),
                note=record.note if record else None,
            )
        )
        current += timedelta(days=1)
    return days


class AttendanceService:
    """Service for attendance ledger reads, upserts and summaries."""

    def __init__(self, db_session: Session):
        self.db = db_session

    def _require_occupant(self, occupant_id: int) -> Occupant:
        occupant = self.db.get(Occupant, occupant_id)
        if occupant is None:
            raise NotFoundError("Occupant", occupant_id)
        return occupant

    def get_record(self, occupant_id: int, attendance_date: date) -> AttendanceRecord | None:
        return (
            self.db.query(AttendanceRecord)
            .filter(
                AttendanceRecord.occupant_id == occupant_id,
                AttendanceRecord.attendance_date == attendance_date,
            )
            .first()
        )

    def upsert_attendance(
        self,
        occupant_id: int,
        attendance_date: date,
        is_present: bool,
        note: str | None = None,
    ) -> AttendanceRecord:
        """Create or overwrite the record for (occupant, date).

        Safe to retry: repeating the call leaves a single record holding the
        last written values.

        Raises:
            NotFoundError: If the occupant does not exist
        """
        self._require_occupant(occupant_id)

        record = self.get_record(occupant_id, attendance_date)
        if record is None:
            record = AttendanceRecord(occupant_id=occupant_id, attendance_date=attendance_date)
            self.db.add(record)
        record.is_present = is_present
        record.note = note.strip() if note and note.strip() else None

        self.db.commit()
        self.db.refresh(record)
        logger.debug(
            "attendance upsert: occupant_id=%d date=%s present=%s",
            occupant_id,
            attendance_date,
            is_present,
        )
        return record

    def toggle_attendance(self, occupant_id: int, attendance_date: date) -> AttendanceRecord:
        """Flip presence for a day, keeping any existing note."""
        record = self.get_record(occupant_id, attendance_date)
        is_present = not record.is_present if record else True
        note = record.note if record else None
        return self.upsert_attendance(occupant_id, attendance_date, is_present, note)

    def list_attendance(
        self,
        occupant_id: int,
        start_date: date,
        end_date: date,
    ) -> list[AttendanceRecord]:
        """Records for one occupant within [start_date, end_date], by date."""
        validate_range(start_date, end_date)
        self._require_occupant(occupant_id)
        return (
            self.db.query(AttendanceRecord)
            .filter(
                AttendanceRecord.occupant_id == occupant_id,
                AttendanceRecord.attendance_date >= start_date,
                AttendanceRecord.attendance_date <= end_date,
            )
            .order_by(AttendanceRecord.attendance_date)
            .all()
        )

    def days_stayed(self, occupant_id: int, period: DateRange) -> int:
        records = self.list_attendance(occupant_id, period.start_date, period.end_date)
        return count_days_stayed(occupant_id, period.start_date, period.end_date, records)

    def days_stayed_for_occupants(
        self,
        occupant_ids: list[int],
        period: DateRange,
    ) -> dict[int, int]:
        """Days stayed per occupant for a period, in a single query."""
        validate_range(period.start_date, period.end_date)
        if not occupant_ids:
            return {}

        records = (
            self.db.query(AttendanceRecord)
            .filter(
                AttendanceRecord.occupant_id.in_(occupant_ids),
                AttendanceRecord.attendance_date >= period.start_date,
                AttendanceRecord.attendance_date <= period.end_date,
            )
            .all()
        )
        return {
            occupant_id: count_days_stayed(
                occupant_id, period.start_date, period.end_date, records
            )
            for occupant_id in occupant_ids
        }

    def calendar(self, occupant_id: int, period: DateRange) -> list[AttendanceDay]:
        records = self.list_attendance(occupant_id, period.start_date, period.end_date)
        return build_calendar(period.start_date, period.end_date, records)

    def period_summary(self, period: DateRange) -> list[AttendanceSummary]:
        """Days stayed by every active occupant, most days first."""
        occupants = (
            self.db.query(Occupant)
            .filter(Occupant.is_active.is_(True))
            .order_by(Occupant.name)
            .all()
        )
        total_days = (period.end_date - period.start_date).days + 1
        counts = self.days_stayed_for_occupants([o.id for o in occupants], period)

        summaries = [
            AttendanceSummary(
                occupant_id=occupant.id,
                occupant_name=occupant.name,
                days_stayed=counts[occupant.id],
                total_days=total_days,
                attendance_rate=attendance_rate(counts[occupant.id], total_days),
            )
            for occupant in occupants
        ]
        return sorted(summaries, key=lambda s: s.days_stayed, reverse=True)

    def monthly_history(
        self,
        month: str,
        occupant_id: int | None = None,
    ) -> list[MonthlyAttendance]:
        """Calendar-month attendance with notes and estimated rent share.

        The month is turned into its literal date range before querying.

        Raises:
            ValidationError: If month is not YYYY-MM
            NotFoundError: If occupant_id is given and does not exist
        """
        bounds = month_bounds(month)
        if occupant_id is not None:
            occupants = [self._require_occupant(occupant_id)]
        else:
            occupants = self.db.query(Occupant).order_by(Occupant.room, Occupant.name).all()

        history = []
        for occupant in occupants:
            records = self.list_attendance(occupant.id, bounds.start_date, bounds.end_date)
            days = count_days_stayed(occupant.id, bounds.start_date, bounds.end_date, records)
            rent = Decimal(occupant.monthly_rent)
            estimated = (rent * days / bounds.length_days).quantize(
                Decimal(1), rounding=ROUND_HALF_UP
            )
            history.append(
                MonthlyAttendance(
                    occupant_id=occupant.id,
                    occupant_name=occupant.name,
                    room=occupant.room,
                    month=month,
                    days_stayed=days,
                    total_days=bounds.length_days,
                    attendance_rate=attendance_rate(days, bounds.length_days),
                    notes=[r.note for r in records if r.note],
                    monthly_rent=rent,
                    estimated_rent_share=estimated,
                )
            )

        return sorted(history, key=lambda h: h.days_stayed, reverse=True)


__all__ = [
    "AttendanceService",
    "AttendanceDay",
    "AttendanceSummary",
    "MonthlyAttendance",
    "attendance_rate",
    "build_calendar",
    "count_days_stayed",
]
