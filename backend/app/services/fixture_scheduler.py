"""
Fixture Scheduler: round-robin calendar for one division.

Circle method: the first team is fixed, the others rotate one position per
round. An odd team count gets a synthetic BYE; pairings against it are
dropped, so that team sits out the round. Only as many rounds as there are
round descriptors (at most 5) are produced; pairings of unscheduled rounds are
simply never played.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from sqlmodel import Session, select

from app.models.division import (
    FIXTURE_SCHEDULED,
    REGULAR_ROUND_COUNT,
    Division,
    MatchType,
)
from app.models.fixture import Fixture
from app.models.season import Season, SeasonRoundDate
from app.models.team import Team
from app.utils.fixture_cleanup import delete_fixtures

logger = logging.getLogger(__name__)


class SchedulingError(Exception):
    """Raised when a division calendar cannot be generated"""

    pass


@dataclass(frozen=True)
class TeamEntry:
    team_id: int
    club_id: int


@dataclass(frozen=True)
class RoundDate:
    round_number: int
    match_date: date
    host_club_id: Optional[int] = None


@dataclass(frozen=True)
class ScheduledFixture:
    round_number: int
    match_date: date
    host_club_id: int
    team1_id: int
    team2_id: int


def circle_rounds(team_count: int) -> List[List[Tuple[int, int]]]:
    """
    Round-robin index pairings for *team_count* entries.

    Returns one list per round of (idx_1, idx_2) 0-based positions; idx_1 is
    listed first (team1). Pairings against the BYE are omitted.

    Even n: n-1 rounds of n/2 pairings. Odd n: n rounds of (n-1)/2 pairings.
    """
    if team_count < 2:
        return []

    n2 = team_count + 1 if team_count % 2 == 1 else team_count
    bye_idx = team_count if team_count % 2 == 1 else -1
    half = n2 // 2

    positions = list(range(n2))
    rounds: List[List[Tuple[int, int]]] = []
    for _ in range(n2 - 1):
        pairings: List[Tuple[int, int]] = []
        for i in range(half):
            a, b = positions[i], positions[n2 - 1 - i]
            if a == bye_idx or b == bye_idx:
                continue
            pairings.append((a, b))
        rounds.append(pairings)
        # Keep position 0, move the last entry to position 1, shift the rest
        positions = [positions[0]] + [positions[-1]] + positions[1:-1]

    return rounds


def schedule_round_robin(teams: Sequence[TeamEntry], round_dates: Sequence[RoundDate]) -> List[ScheduledFixture]:
    """
    Bind the circle-method rounds to the supplied round descriptors.

    Args:
        teams: Ordered team list for one division
        round_dates: Ordered round descriptors, at most 5

    Returns:
        Fixtures for min(N-1, len(round_dates)) rounds; empty when fewer than
        2 teams are given

    Raises:
        SchedulingError: duplicate teams or more than 5 round descriptors
    """
    if len(round_dates) > REGULAR_ROUND_COUNT:
        raise SchedulingError(
            f"At most {REGULAR_ROUND_COUNT} regular rounds can be scheduled, got {len(round_dates)} round dates"
        )
    team_ids = [t.team_id for t in teams]
    if len(set(team_ids)) != len(team_ids):
        raise SchedulingError("Team list contains duplicates")

    # N-1 rounds at most, for odd N as well: the last bye rotation is not played
    rounds = circle_rounds(len(teams))[: max(len(teams) - 1, 0)]
    scheduled: List[ScheduledFixture] = []
    for round_pairings, round_date in zip(rounds, round_dates):
        for idx_1, idx_2 in round_pairings:
            team1, team2 = teams[idx_1], teams[idx_2]
            host = round_date.host_club_id if round_date.host_club_id is not None else team1.club_id
            scheduled.append(
                ScheduledFixture(
                    round_number=round_date.round_number,
                    match_date=round_date.match_date,
                    host_club_id=host,
                    team1_id=team1.team_id,
                    team2_id=team2.team_id,
                )
            )
    return scheduled


# =============================================================================
# Persistence
# =============================================================================


def generate_fixtures(session: Session, season_id: int, division: Division) -> Dict[str, int]:
    """
    Regenerate the regular-round calendar of one division.

    Deletes the division's previous regular fixtures (round <= 5) with their
    individual matches, selections and scratch notices, then inserts the new
    calendar. Finals and the other division are untouched. Runs as a single
    transaction.

    Returns:
        Dict with fixtures_created and rounds_scheduled

    Raises:
        SchedulingError: season missing or fewer than 2 teams in the division
    """
    division = Division(division)
    season = session.get(Season, season_id)
    if not season:
        raise SchedulingError(f"Season {season_id} not found")

    teams = session.exec(
        select(Team).where(Team.season_id == season_id, Team.division == division.value).order_by(Team.id)
    ).all()
    if len(teams) < 2:
        raise SchedulingError(
            f"Division {division.value} needs at least 2 teams to schedule, found {len(teams)}"
        )

    round_rows = session.exec(
        select(SeasonRoundDate)
        .where(
            SeasonRoundDate.season_id == season_id,
            SeasonRoundDate.division == division.value,
            SeasonRoundDate.round_number <= REGULAR_ROUND_COUNT,
        )
        .order_by(SeasonRoundDate.round_number)
    ).all()

    scheduled = schedule_round_robin(
        [TeamEntry(team_id=t.id, club_id=t.club_id) for t in teams],
        [RoundDate(round_number=r.round_number, match_date=r.planned_date, host_club_id=r.host_club_id) for r in round_rows],
    )

    try:
        existing = session.exec(
            select(Fixture).where(
                Fixture.season_id == season_id,
                Fixture.division == division.value,
                Fixture.match_type == MatchType.regular.value,
                Fixture.round_number <= REGULAR_ROUND_COUNT,
            )
        ).all()
        deleted = delete_fixtures(session, existing)

        for item in scheduled:
            session.add(
                Fixture(
                    season_id=season_id,
                    division=division.value,
                    round_number=item.round_number,
                    match_date=item.match_date,
                    host_club_id=item.host_club_id,
                    team1_id=item.team1_id,
                    team2_id=item.team2_id,
                    status=FIXTURE_SCHEDULED,
                    match_type=MatchType.regular.value,
                )
            )
        session.commit()
    except Exception:
        session.rollback()
        raise

    rounds_scheduled = len({item.round_number for item in scheduled})
    logger.info(
        "Generated %d fixtures over %d rounds for season %d %s (%d teams, %d replaced)",
        len(scheduled),
        rounds_scheduled,
        season_id,
        division.value,
        len(teams),
        deleted,
    )
    return {"fixtures_created": len(scheduled), "rounds_scheduled": rounds_scheduled}
