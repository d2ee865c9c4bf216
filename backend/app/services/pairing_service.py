"""
Materialize individual matches for a fixture from both teams' current selections.

Regeneration replaces every IndividualMatch row of the fixture in one
transaction. A slot whose players are unchanged on both sides keeps the result
and points already recorded for it; every other slot starts over.
"""

import logging
from typing import Dict, List, Optional, Tuple

from sqlmodel import Session, select

from app.models.division import FIXTURE_COMPLETED
from app.models.fixture import Fixture
from app.models.individual_match import RESULT_PENDING, IndividualMatch
from app.models.player import Player
from app.models.selection import Selection
from app.services.pairing_generator import (
    BothPresent,
    NoneDesignated,
    OneForfeited,
    PairingError,
    PairingSide,
    PairingSlot,
    RosterEntry,
    generate_pairings,
)

logger = logging.getLogger(__name__)

SlotKey = Tuple[Optional[int], Optional[int], Optional[int], Optional[int]]


def load_roster(session: Session, fixture_id: int, team_id: int) -> List[RosterEntry]:
    """A team's selection for the fixture, in submission order, with handicaps."""
    rows = session.exec(
        select(Selection, Player)
        .join(Player, Player.id == Selection.player_id)
        .where(Selection.fixture_id == fixture_id, Selection.team_id == team_id)
        .order_by(Selection.selection_order)
    ).all()
    return [
        RosterEntry(player_id=player.id, handicap_index=player.handicap_index, selection_order=sel.selection_order)
        for sel, player in rows
    ]


def _side_ids(side: Optional[PairingSide]) -> Tuple[Optional[int], Optional[int]]:
    if side is None:
        return (None, None)
    ids = side.player_ids
    return (ids[0], ids[1] if len(ids) > 1 else None)


def slot_to_individual_match(fixture_id: int, slot: PairingSlot) -> IndividualMatch:
    """Map a generated slot onto a fresh IndividualMatch row."""
    outcome = slot.outcome
    row = IndividualMatch(fixture_id=fixture_id, match_order=slot.match_order, result=RESULT_PENDING)

    if isinstance(outcome, BothPresent):
        row.team1_player_id, row.team1_player2_id = _side_ids(outcome.side1)
        row.team2_player_id, row.team2_player2_id = _side_ids(outcome.side2)
        row.team1_handicap = outcome.side1.handicap
        row.team2_handicap = outcome.side2.handicap
        row.strokes_given = outcome.allowance.strokes_given
        row.strokes_receiver = outcome.allowance.receiver
    elif isinstance(outcome, OneForfeited):
        if outcome.present_side == 1:
            row.team1_player_id, row.team1_player2_id = _side_ids(outcome.present)
            row.team1_handicap = outcome.present.handicap
        else:
            row.team2_player_id, row.team2_player2_id = _side_ids(outcome.present)
            row.team2_handicap = outcome.present.handicap
        row.team1_points, row.team2_points = outcome.points
        row.forfeit_reason = outcome.reason
    elif isinstance(outcome, NoneDesignated):
        pass
    else:
        raise TypeError(f"Unknown slot outcome: {outcome!r}")

    return row


def _slot_key(row: IndividualMatch) -> SlotKey:
    return row.side_player_ids(1) + row.side_player_ids(2)


def recompute_fixture_points(session: Session, fixture: Fixture) -> None:
    """Re-sum the fixture's team points from its individual matches (no commit)."""
    rows = session.exec(select(IndividualMatch).where(IndividualMatch.fixture_id == fixture.id)).all()
    fixture.team1_points = sum(r.team1_points for r in rows)
    fixture.team2_points = sum(r.team2_points for r in rows)
    session.add(fixture)


def regenerate_pairings(session: Session, fixture_id: int) -> Dict[str, int]:
    """
    Rebuild all individual matches of a fixture from both current selections.

    Returns:
        Dict with:
        - matchups_generated: number of slots written (8 regular, 5 knockout)
        - results_preserved: recorded results carried over to unchanged slots
        - results_discarded: recorded results dropped because players changed

    Raises:
        PairingError: fixture missing or completed, or a selection is invalid
    """
    fixture = session.get(Fixture, fixture_id)
    if not fixture:
        raise PairingError(f"Fixture {fixture_id} not found")
    if fixture.status == FIXTURE_COMPLETED:
        raise PairingError(f"Fixture {fixture_id} is completed; pairings can no longer change")

    roster1 = load_roster(session, fixture.id, fixture.team1_id)
    roster2 = load_roster(session, fixture.id, fixture.team2_id)
    slots = generate_pairings(fixture.is_knockout, roster1, roster2)

    try:
        existing = session.exec(select(IndividualMatch).where(IndividualMatch.fixture_id == fixture.id)).all()
        recorded = {
            row.match_order: (_slot_key(row), row.result, row.team1_points, row.team2_points)
            for row in existing
            if row.result != RESULT_PENDING
        }

        for row in existing:
            session.delete(row)
        session.flush()

        preserved = 0
        new_rows = [slot_to_individual_match(fixture.id, slot) for slot in slots]
        for row in new_rows:
            previous = recorded.get(row.match_order)
            if previous is not None and previous[0] == _slot_key(row):
                del recorded[row.match_order]
                row.result, row.team1_points, row.team2_points = previous[1:]
                preserved += 1
            session.add(row)
        session.flush()

        # Anything left in `recorded` sat on a slot whose players changed
        discarded = len(recorded)
        recompute_fixture_points(session, fixture)
        session.commit()
    except Exception:
        session.rollback()
        raise

    if discarded:
        logger.warning(
            "Fixture %d: %d recorded result(s) discarded after selection change (slots %s)",
            fixture.id,
            discarded,
            sorted(recorded.keys()),
        )
    logger.info(
        "Fixture %d: generated %d matchups (%d side1 players, %d side2 players, %d results kept)",
        fixture.id,
        len(new_rows),
        len(roster1),
        len(roster2),
        preserved,
    )
    return {
        "matchups_generated": len(new_rows),
        "results_preserved": preserved,
        "results_discarded": discarded,
    }
