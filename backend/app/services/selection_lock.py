"""
Selection Lock Governor: may a team still edit its roster for a fixture?

Deadline: the Friday at lock_hour (17:00 by default) before the match, in the
season's configured time zone. offset(Sunday)=2, offset(Saturday)=1, any other
weekday W (Sunday=0 .. Saturday=6) uses W+2 days.

States:
    OPEN           before the deadline, or the caller is a platform admin
    OVERRIDE_OPEN  past the deadline but an admin override is running
                   (all teams) or the team's scratch notice was acknowledged
    LOCKED         otherwise

Nothing is stored: the state is recomputed from (now, match date, override
timestamp, acknowledgement) on every access.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Optional
from zoneinfo import ZoneInfo

from sqlmodel import Session, select

from app.models.fixture import Fixture
from app.models.scratch_notice import ScratchNotice
from app.models.season import Season

DEFAULT_LOCK_HOUR = 17


class SelectionLockedError(Exception):
    """Raised when a roster edit is attempted while the selection is locked"""

    pass


class LockState(str, Enum):
    OPEN = "OPEN"
    LOCKED = "LOCKED"
    OVERRIDE_OPEN = "OVERRIDE_OPEN"


# Reasons reported alongside the state
REASON_ADMIN = "admin"
REASON_BEFORE_DEADLINE = "before_deadline"
REASON_ADMIN_OVERRIDE = "admin_override"
REASON_SCRATCH_EXCEPTION = "scratch_exception"
REASON_DEADLINE_PASSED = "deadline_passed"


@dataclass(frozen=True)
class SelectionLockStatus:
    state: LockState
    reason: str
    deadline: datetime
    override_until: Optional[datetime] = None

    @property
    def editable(self) -> bool:
        return self.state != LockState.LOCKED


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes (as stored by the database) are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def lock_offset_days(match_date: date) -> int:
    weekday = (match_date.weekday() + 1) % 7  # Sunday=0 .. Saturday=6
    if weekday == 0:
        return 2
    if weekday == 6:
        return 1
    return weekday + 2


def selection_deadline(match_date: date, tz: ZoneInfo, lock_hour: int = DEFAULT_LOCK_HOUR) -> datetime:
    """Aware deadline: the Friday at lock_hour before *match_date*, local to *tz*."""
    deadline_day = match_date - timedelta(days=lock_offset_days(match_date))
    return datetime.combine(deadline_day, time(hour=lock_hour), tzinfo=tz)


def evaluate_selection_lock(
    now: datetime,
    match_date: date,
    tz: ZoneInfo,
    override_until: Optional[datetime] = None,
    scratch_acknowledged: bool = False,
    is_admin: bool = False,
    lock_hour: int = DEFAULT_LOCK_HOUR,
) -> SelectionLockStatus:
    deadline = selection_deadline(match_date, tz, lock_hour)
    now = _as_utc(now)
    override = _as_utc(override_until) if override_until is not None else None

    if is_admin:
        return SelectionLockStatus(LockState.OPEN, REASON_ADMIN, deadline, override)
    if now < deadline:
        return SelectionLockStatus(LockState.OPEN, REASON_BEFORE_DEADLINE, deadline, override)
    if override is not None and now < override:
        return SelectionLockStatus(LockState.OVERRIDE_OPEN, REASON_ADMIN_OVERRIDE, deadline, override)
    if scratch_acknowledged:
        return SelectionLockStatus(LockState.OVERRIDE_OPEN, REASON_SCRATCH_EXCEPTION, deadline, override)
    return SelectionLockStatus(LockState.LOCKED, REASON_DEADLINE_PASSED, deadline, override)


# =============================================================================
# Session helpers
# =============================================================================


def has_acknowledged_scratch(session: Session, fixture_id: int, team_id: int) -> bool:
    notices = session.exec(
        select(ScratchNotice).where(ScratchNotice.fixture_id == fixture_id, ScratchNotice.team_id == team_id)
    ).all()
    return any(notice.is_acknowledged for notice in notices)


def get_selection_lock_status(
    session: Session,
    fixture: Fixture,
    team_id: int,
    now: Optional[datetime] = None,
    is_admin: bool = False,
) -> SelectionLockStatus:
    season = session.get(Season, fixture.season_id)
    tz = ZoneInfo(season.timezone)
    return evaluate_selection_lock(
        now=now or datetime.now(timezone.utc),
        match_date=fixture.match_date,
        tz=tz,
        override_until=fixture.selection_override_until,
        scratch_acknowledged=has_acknowledged_scratch(session, fixture.id, team_id),
        is_admin=is_admin,
        lock_hour=season.lock_hour,
    )


def require_selection_editable(
    session: Session,
    fixture: Fixture,
    team_id: int,
    now: Optional[datetime] = None,
    is_admin: bool = False,
) -> SelectionLockStatus:
    """
    Require that the team may edit its selection for the fixture.

    Returns:
        The lock status (OPEN or OVERRIDE_OPEN)

    Raises:
        SelectionLockedError: the deadline has passed and no exception applies
    """
    status = get_selection_lock_status(session, fixture, team_id, now=now, is_admin=is_admin)
    if not status.editable:
        raise SelectionLockedError(
            f"Selection for fixture {fixture.id} locked since {status.deadline.isoformat()}"
        )
    return status
