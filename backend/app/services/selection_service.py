"""
Captain roster submission and the admin controls around the selection lock.

A submission replaces the team's whole selection for the fixture and then
regenerates the fixture's pairings from both current selections.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from sqlmodel import Session, select

from app.models.division import FIXTURE_COMPLETED
from app.models.fixture import Fixture
from app.models.player import Player
from app.models.scratch_notice import ScratchNotice
from app.models.selection import Selection
from app.models.team import Team
from app.services.pairing_generator import KNOCKOUT_ROSTER_SIZE, REGULAR_ROSTER_SIZE
from app.services.pairing_service import regenerate_pairings
from app.services.selection_lock import require_selection_editable

logger = logging.getLogger(__name__)


class SelectionError(Exception):
    """Raised when a submitted selection is rejected before the lock check"""

    pass


def roster_size(fixture: Fixture) -> int:
    return KNOCKOUT_ROSTER_SIZE if fixture.is_knockout else REGULAR_ROSTER_SIZE


def _validate_players(session: Session, fixture: Fixture, team_id: int, player_ids: Sequence[int]) -> None:
    limit = roster_size(fixture)
    if len(player_ids) > limit:
        raise SelectionError(f"At most {limit} players may be selected for this fixture, got {len(player_ids)}")
    if len(set(player_ids)) != len(player_ids):
        raise SelectionError("A player can only be selected once")
    if fixture.is_knockout and len(player_ids) % 2 != 0:
        raise SelectionError("Foursome selections are made of pairs; submit an even number of players")

    team = session.get(Team, team_id)
    players = session.exec(select(Player).where(Player.id.in_(list(player_ids)))).all() if player_ids else []
    found = {p.id: p for p in players}
    missing = [pid for pid in player_ids if pid not in found]
    if missing:
        raise SelectionError(f"Unknown players: {missing}")
    foreign = [pid for pid in player_ids if found[pid].club_id != team.club_id]
    if foreign:
        raise SelectionError(f"Players {foreign} do not belong to the team's club")


def submit_selection(
    session: Session,
    fixture_id: int,
    team_id: int,
    player_ids: Sequence[int],
    now: Optional[datetime] = None,
    is_admin: bool = False,
) -> Dict:
    """
    Replace a team's ordered selection for a fixture and regenerate pairings.

    Order of *player_ids* is the submission order (selection_order 1..n). An
    empty list clears the selection.

    Returns:
        Dict with selection_count, lock_state and the pairing summary

    Raises:
        SelectionError: team not on the fixture, roster too long, duplicate or
            foreign players, odd foursome roster
        SelectionLockedError: the lock governor refuses the edit
    """
    fixture = session.get(Fixture, fixture_id)
    if not fixture:
        raise SelectionError(f"Fixture {fixture_id} not found")
    if team_id not in (fixture.team1_id, fixture.team2_id):
        raise SelectionError(f"Team {team_id} does not play fixture {fixture_id}")

    if fixture.status == FIXTURE_COMPLETED:
        raise SelectionError(f"Fixture {fixture_id} is completed; selections can no longer change")

    status = require_selection_editable(session, fixture, team_id, now=now, is_admin=is_admin)
    _validate_players(session, fixture, team_id, player_ids)

    try:
        current = session.exec(
            select(Selection).where(Selection.fixture_id == fixture_id, Selection.team_id == team_id)
        ).all()
        for row in current:
            session.delete(row)
        session.flush()

        for order, player_id in enumerate(player_ids, start=1):
            session.add(
                Selection(fixture_id=fixture_id, team_id=team_id, player_id=player_id, selection_order=order)
            )
        session.flush()

        # Pairings are rebuilt in the same transaction; regenerate_pairings commits
        pairing = regenerate_pairings(session, fixture_id)
    except Exception:
        session.rollback()
        raise

    logger.info(
        "Team %d submitted %d players for fixture %d (%s)", team_id, len(player_ids), fixture_id, status.reason
    )
    return {
        "selection_count": len(player_ids),
        "lock_state": status.state.value,
        **pairing,
    }


def get_selection(session: Session, fixture_id: int, team_id: int) -> List[Selection]:
    return session.exec(
        select(Selection)
        .where(Selection.fixture_id == fixture_id, Selection.team_id == team_id)
        .order_by(Selection.selection_order)
    ).all()


def set_selection_override(session: Session, fixture_id: int, override_until: Optional[datetime]) -> Fixture:
    """Open (or, with None, revoke) the admin override for every team on the fixture.

    Aware timestamps are stored as naive UTC.
    """
    fixture = session.get(Fixture, fixture_id)
    if not fixture:
        raise SelectionError(f"Fixture {fixture_id} not found")
    if override_until is not None and override_until.tzinfo is not None:
        override_until = override_until.astimezone(timezone.utc).replace(tzinfo=None)
    fixture.selection_override_until = override_until
    session.add(fixture)
    session.commit()
    session.refresh(fixture)
    logger.info("Fixture %d selection override set to %s", fixture.id, override_until)
    return fixture


def submit_scratch_notice(session: Session, fixture_id: int, team_id: int, message: str) -> ScratchNotice:
    fixture = session.get(Fixture, fixture_id)
    if not fixture:
        raise SelectionError(f"Fixture {fixture_id} not found")
    if team_id not in (fixture.team1_id, fixture.team2_id):
        raise SelectionError(f"Team {team_id} does not play fixture {fixture.id}")
    if not message.strip():
        raise SelectionError("Scratch notice message must not be empty")

    notice = ScratchNotice(fixture_id=fixture.id, team_id=team_id, message=message.strip())
    session.add(notice)
    session.commit()
    session.refresh(notice)
    logger.info("Scratch notice %d raised by team %d on fixture %d", notice.id, team_id, fixture.id)
    return notice


def acknowledge_scratch_notice(session: Session, notice_id: int, acknowledged_by: Optional[str]) -> ScratchNotice:
    """Grant the notice's team a standing edit permission for that fixture. Idempotent."""
    notice = session.get(ScratchNotice, notice_id)
    if not notice:
        raise SelectionError(f"Scratch notice {notice_id} not found")
    if notice.acknowledged_at is None:
        notice.acknowledged_at = datetime.utcnow()
        notice.acknowledged_by = acknowledged_by
        session.add(notice)
        session.commit()
        session.refresh(notice)
        logger.info("Scratch notice %d acknowledged by %s", notice.id, acknowledged_by)
    return notice
