"""
Tests for the selection lock governor.
"""
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from sqlmodel import Session

from app.models.scratch_notice import ScratchNotice
from app.services.selection_lock import (
    REASON_ADMIN,
    REASON_ADMIN_OVERRIDE,
    REASON_BEFORE_DEADLINE,
    REASON_DEADLINE_PASSED,
    REASON_SCRATCH_EXCEPTION,
    LockState,
    SelectionLockedError,
    evaluate_selection_lock,
    get_selection_lock_status,
    has_acknowledged_scratch,
    lock_offset_days,
    require_selection_editable,
    selection_deadline,
)
from tests.factories import make_fixture, make_season, make_teams

PARIS = ZoneInfo("Europe/Paris")
FRIDAY = 4  # date.weekday()

# Sunday 2026-06-07; its deadline is Friday 2026-06-05 17:00 Paris (15:00 UTC)
MATCH_DAY = date(2026, 6, 7)


@pytest.mark.parametrize("offset", range(7))
def test_deadline_is_always_a_friday(offset):
    match_date = date(2026, 6, 1) + timedelta(days=offset)
    deadline = selection_deadline(match_date, PARIS)

    assert deadline.weekday() == FRIDAY
    assert deadline.hour == 17
    assert deadline.date() < match_date
    assert (match_date - deadline.date()).days <= 7


def test_lock_offsets():
    assert lock_offset_days(date(2026, 6, 7)) == 2  # Sunday
    assert lock_offset_days(date(2026, 6, 6)) == 1  # Saturday
    assert lock_offset_days(date(2026, 6, 3)) == 5  # Wednesday
    assert lock_offset_days(date(2026, 6, 5)) == 7  # Friday locks the week before


def test_deadline_uses_season_timezone():
    deadline = selection_deadline(MATCH_DAY, PARIS)
    assert deadline.astimezone(timezone.utc) == datetime(2026, 6, 5, 15, 0, tzinfo=timezone.utc)

    custom = selection_deadline(MATCH_DAY, ZoneInfo("America/New_York"), lock_hour=12)
    assert custom.astimezone(timezone.utc) == datetime(2026, 6, 5, 16, 0, tzinfo=timezone.utc)


def test_open_before_deadline():
    now = datetime(2026, 6, 5, 14, 59, tzinfo=timezone.utc)
    status = evaluate_selection_lock(now, MATCH_DAY, PARIS)

    assert status.state == LockState.OPEN
    assert status.reason == REASON_BEFORE_DEADLINE
    assert status.editable


def test_locked_at_deadline():
    now = datetime(2026, 6, 5, 15, 0, tzinfo=timezone.utc)
    status = evaluate_selection_lock(now, MATCH_DAY, PARIS)

    assert status.state == LockState.LOCKED
    assert status.reason == REASON_DEADLINE_PASSED
    assert not status.editable


def test_naive_now_is_utc():
    status = evaluate_selection_lock(datetime(2026, 6, 5, 14, 0), MATCH_DAY, PARIS)
    assert status.state == LockState.OPEN


def test_admin_always_open():
    now = datetime(2026, 6, 8, 9, 0, tzinfo=timezone.utc)
    status = evaluate_selection_lock(now, MATCH_DAY, PARIS, is_admin=True)

    assert status.state == LockState.OPEN
    assert status.reason == REASON_ADMIN


def test_override_reopens_until_expiry():
    now = datetime(2026, 6, 6, 10, 0, tzinfo=timezone.utc)
    until = datetime(2026, 6, 6, 12, 0)  # naive UTC, as stored

    status = evaluate_selection_lock(now, MATCH_DAY, PARIS, override_until=until)
    assert status.state == LockState.OVERRIDE_OPEN
    assert status.reason == REASON_ADMIN_OVERRIDE

    later = evaluate_selection_lock(now + timedelta(hours=3), MATCH_DAY, PARIS, override_until=until)
    assert later.state == LockState.LOCKED


def test_acknowledged_scratch_reopens():
    now = datetime(2026, 6, 6, 10, 0, tzinfo=timezone.utc)
    status = evaluate_selection_lock(now, MATCH_DAY, PARIS, scratch_acknowledged=True)

    assert status.state == LockState.OVERRIDE_OPEN
    assert status.reason == REASON_SCRATCH_EXCEPTION


def test_session_status_reads_season_and_notices(session: Session):
    season = make_season(session)
    team1, team2 = make_teams(session, season, 2)
    fixture = make_fixture(session, season, team1, team2, match_date=MATCH_DAY)
    after_deadline = datetime(2026, 6, 6, 8, 0, tzinfo=timezone.utc)

    assert get_selection_lock_status(session, fixture, team1.id, now=after_deadline).state == LockState.LOCKED
    with pytest.raises(SelectionLockedError):
        require_selection_editable(session, fixture, team1.id, now=after_deadline)

    # Unacknowledged notice does not reopen
    notice = ScratchNotice(fixture_id=fixture.id, team_id=team1.id, message="Player injured")
    session.add(notice)
    session.commit()
    assert get_selection_lock_status(session, fixture, team1.id, now=after_deadline).state == LockState.LOCKED

    notice.acknowledged_at = datetime(2026, 6, 6, 7, 0)
    session.add(notice)
    session.commit()

    assert get_selection_lock_status(session, fixture, team1.id, now=after_deadline).state == LockState.OVERRIDE_OPEN
    # The exception is per team
    assert get_selection_lock_status(session, fixture, team2.id, now=after_deadline).state == LockState.LOCKED


def test_any_acknowledged_notice_counts(session: Session):
    season = make_season(session)
    team1, team2 = make_teams(session, season, 2)
    fixture = make_fixture(session, season, team1, team2, match_date=MATCH_DAY)
    session.add(ScratchNotice(fixture_id=fixture.id, team_id=team1.id, message="First notice"))
    session.commit()
    assert not has_acknowledged_scratch(session, fixture.id, team1.id)

    session.add(
        ScratchNotice(
            fixture_id=fixture.id,
            team_id=team1.id,
            message="Second notice",
            acknowledged_at=datetime(2026, 6, 5, 9, 0),
            acknowledged_by="admin",
        )
    )
    session.commit()

    assert has_acknowledged_scratch(session, fixture.id, team1.id)
    assert not has_acknowledged_scratch(session, fixture.id, team2.id)
