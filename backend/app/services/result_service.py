"""
Individual match results and fixture completion.

Points per contested slot: side win 1-0, tie 0.5-0.5, pending 0-0. Forfeit
slots carry the 1-0 the pairing generator gave them. Fixture team points are
always the sum of its individual matches.
"""

import logging
from typing import Dict, Tuple

from sqlmodel import Session, select

from app.models.division import FIXTURE_COMPLETED
from app.models.fixture import Fixture
from app.models.individual_match import (
    RESULT_PENDING,
    RESULT_SIDE1,
    RESULT_SIDE2,
    RESULT_TIE,
    RESULTS,
    IndividualMatch,
)
from app.services.pairing_service import recompute_fixture_points

logger = logging.getLogger(__name__)

RESULT_POINTS: Dict[str, Tuple[float, float]] = {
    RESULT_PENDING: (0.0, 0.0),
    RESULT_SIDE1: (1.0, 0.0),
    RESULT_SIDE2: (0.0, 1.0),
    RESULT_TIE: (0.5, 0.5),
}


class ResultEntryError(Exception):
    """Raised when a result cannot be recorded"""

    pass


def record_individual_result(session: Session, individual_match_id: int, result: str) -> IndividualMatch:
    """
    Record the outcome of one contested slot and re-sum the fixture totals.

    Raises:
        ResultEntryError: unknown result, missing row, fixture completed, or
            the slot is a forfeit / has no designated players
    """
    if result not in RESULTS:
        raise ResultEntryError(f"Invalid result '{result}'; expected one of {', '.join(RESULTS)}")

    row = session.get(IndividualMatch, individual_match_id)
    if not row:
        raise ResultEntryError(f"Individual match {individual_match_id} not found")
    fixture = session.get(Fixture, row.fixture_id)
    if fixture.status == FIXTURE_COMPLETED:
        raise ResultEntryError(f"Fixture {fixture.id} is completed; results are read-only")
    if not row.is_contested:
        raise ResultEntryError(
            f"Slot {row.match_order} of fixture {fixture.id} is not contested "
            f"({row.forfeit_reason or 'no players designated'})"
        )

    row.result = result
    row.team1_points, row.team2_points = RESULT_POINTS[result]
    session.add(row)
    session.flush()
    recompute_fixture_points(session, fixture)
    session.commit()
    session.refresh(row)
    return row


def complete_fixture(session: Session, fixture_id: int) -> Fixture:
    """
    Mark a fixture completed once every contested slot has a result.

    Raises:
        ResultEntryError: fixture missing or already completed, no pairings,
            slots with no designated players, or contested slots still pending
    """
    fixture = session.get(Fixture, fixture_id)
    if not fixture:
        raise ResultEntryError(f"Fixture {fixture_id} not found")
    if fixture.status == FIXTURE_COMPLETED:
        raise ResultEntryError(f"Fixture {fixture_id} is already completed")

    rows = session.exec(
        select(IndividualMatch).where(IndividualMatch.fixture_id == fixture_id).order_by(IndividualMatch.match_order)
    ).all()
    if not rows:
        raise ResultEntryError(f"Fixture {fixture_id} has no individual matches")
    undesignated = [r.match_order for r in rows if r.team1_player_id is None and r.team2_player_id is None]
    if undesignated:
        raise ResultEntryError(f"Fixture {fixture_id} has slots with no designated players: {undesignated}")
    pending = [r.match_order for r in rows if r.is_contested and r.result == RESULT_PENDING]
    if pending:
        raise ResultEntryError(f"Fixture {fixture_id} still has pending slots: {pending}")

    recompute_fixture_points(session, fixture)
    fixture.status = FIXTURE_COMPLETED
    session.add(fixture)
    session.commit()
    session.refresh(fixture)
    logger.info(
        "Fixture %d completed %.1f - %.1f", fixture.id, fixture.team1_points, fixture.team2_points
    )
    return fixture
