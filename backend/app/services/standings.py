"""
Standings Calculator and Finals Seeding.

Fixture outcome points: strict win 2, tie 1 each, loss 0 (decided on the
fixture's accumulated team points). A win is a home win when the fixture was
hosted by the team's own club, otherwise an away win.

Ranking: points descending, then away wins descending. Teams still level keep
their input order; no further tie-break is applied.

Finals: the top 6 play 1v2 (final_1st), 3v4 (final_3rd), 5v6 (final_5th).
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence

from sqlmodel import Session, select

from app.models.division import (
    FINALS_ROUND_NUMBER,
    FIXTURE_COMPLETED,
    FIXTURE_SCHEDULED,
    Division,
    MatchType,
)
from app.models.fixture import Fixture
from app.models.team import Team
from app.utils.fixture_cleanup import delete_fixtures

logger = logging.getLogger(__name__)

WIN_POINTS = 2
TIE_POINTS = 1
FINALS_TEAM_COUNT = 6

FINALS_BRACKET = (
    (MatchType.final_1st, 0, 1),
    (MatchType.final_3rd, 2, 3),
    (MatchType.final_5th, 4, 5),
)


class FinalsSeedingError(Exception):
    """Raised when finals cannot be seeded"""

    pass


class FinalsAlreadyExistError(FinalsSeedingError):
    """Raised when a division already has finals fixtures"""

    pass


@dataclass(frozen=True)
class StandingTeam:
    team_id: int
    club_id: int


@dataclass(frozen=True)
class FixtureOutcome:
    """The parts of a completed fixture the standings need."""

    team1_id: int
    team2_id: int
    team1_points: float
    team2_points: float
    host_club_id: Optional[int]


@dataclass
class Standing:
    team_id: int
    club_id: int
    rank: int = 0
    points: int = 0
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    home_wins: int = 0
    away_wins: int = 0
    points_for: float = 0.0
    points_against: float = 0.0


@dataclass(frozen=True)
class FinalsPairing:
    match_type: MatchType
    team1_id: int
    team2_id: int


def _credit(standing: Standing, scored: float, conceded: float, host_club_id: Optional[int]) -> None:
    standing.played += 1
    standing.points_for += scored
    standing.points_against += conceded
    if scored > conceded:
        standing.wins += 1
        standing.points += WIN_POINTS
        if host_club_id == standing.club_id:
            standing.home_wins += 1
        else:
            standing.away_wins += 1
    elif scored == conceded:
        standing.draws += 1
        standing.points += TIE_POINTS
    else:
        standing.losses += 1


def compute_standings(teams: Sequence[StandingTeam], fixtures: Sequence[FixtureOutcome]) -> List[Standing]:
    """
    Fold completed fixtures into a ranked table.

    Args:
        teams: Division teams, in the order used for unresolved ties
        fixtures: Completed fixtures; sides not in *teams* are ignored

    Returns:
        One Standing per team, ranked 1..N
    """
    table: Dict[int, Standing] = {t.team_id: Standing(team_id=t.team_id, club_id=t.club_id) for t in teams}

    for fx in fixtures:
        if fx.team1_id in table:
            _credit(table[fx.team1_id], fx.team1_points, fx.team2_points, fx.host_club_id)
        if fx.team2_id in table:
            _credit(table[fx.team2_id], fx.team2_points, fx.team1_points, fx.host_club_id)

    # sorted() is stable: teams level on both criteria keep input order
    ranked = sorted(table.values(), key=lambda s: (-s.points, -s.away_wins))
    for position, standing in enumerate(ranked, start=1):
        standing.rank = position
    return ranked


def seed_finals(standings: Sequence[Standing]) -> List[FinalsPairing]:
    """
    Pair the top 6 ranked teams for the three finals.

    Raises:
        FinalsSeedingError: fewer than 6 ranked teams
    """
    if len(standings) < FINALS_TEAM_COUNT:
        raise FinalsSeedingError(
            f"Finals need {FINALS_TEAM_COUNT} ranked teams, only {len(standings)} available"
        )
    top = sorted(standings, key=lambda s: s.rank)[:FINALS_TEAM_COUNT]
    return [
        FinalsPairing(match_type=match_type, team1_id=top[hi].team_id, team2_id=top[lo].team_id)
        for match_type, hi, lo in FINALS_BRACKET
    ]


# =============================================================================
# Persistence
# =============================================================================


def compute_division_standings(session: Session, season_id: int, division: Division) -> List[Standing]:
    """Standings of a division from its completed regular fixtures."""
    division = Division(division)
    teams = session.exec(
        select(Team).where(Team.season_id == season_id, Team.division == division.value).order_by(Team.id)
    ).all()
    fixtures = session.exec(
        select(Fixture)
        .where(
            Fixture.season_id == season_id,
            Fixture.division == division.value,
            Fixture.match_type == MatchType.regular.value,
            Fixture.status == FIXTURE_COMPLETED,
        )
        .order_by(Fixture.round_number, Fixture.id)
    ).all()
    return compute_standings(
        [StandingTeam(team_id=t.id, club_id=t.club_id) for t in teams],
        [
            FixtureOutcome(
                team1_id=f.team1_id,
                team2_id=f.team2_id,
                team1_points=f.team1_points,
                team2_points=f.team2_points,
                host_club_id=f.host_club_id,
            )
            for f in fixtures
        ],
    )


def _finals_fixtures(session: Session, season_id: int, division: Division) -> List[Fixture]:
    return session.exec(
        select(Fixture).where(
            Fixture.season_id == season_id,
            Fixture.division == division.value,
            Fixture.match_type != MatchType.regular.value,
        )
    ).all()


def generate_finals(
    session: Session, season_id: int, division: Division, finals_date: date, host_club_id: int
) -> Dict[str, int]:
    """
    Create the three knockout fixtures from the current standings.

    Raises:
        FinalsSeedingError: fewer than 6 ranked teams
        FinalsAlreadyExistError: the division already has finals (delete them first)
    """
    division = Division(division)
    if _finals_fixtures(session, season_id, division):
        raise FinalsAlreadyExistError(f"Finals already exist for {division.value}; delete them before regenerating")

    pairings = seed_finals(compute_division_standings(session, season_id, division))

    try:
        for pairing in pairings:
            session.add(
                Fixture(
                    season_id=season_id,
                    division=division.value,
                    round_number=FINALS_ROUND_NUMBER,
                    match_date=finals_date,
                    host_club_id=host_club_id,
                    team1_id=pairing.team1_id,
                    team2_id=pairing.team2_id,
                    status=FIXTURE_SCHEDULED,
                    match_type=pairing.match_type.value,
                )
            )
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info("Generated finals for season %d %s on %s", season_id, division.value, finals_date)
    return {"fixtures_created": len(pairings)}


def delete_finals(session: Session, season_id: int, division: Division) -> Dict[str, int]:
    """Remove the division's finals with their selections, pairings and notices."""
    division = Division(division)
    try:
        deleted = delete_fixtures(session, _finals_fixtures(session, season_id, division))
        session.commit()
    except Exception:
        session.rollback()
        raise
    logger.info("Deleted %d finals fixtures for season %d %s", deleted, season_id, division.value)
    return {"fixtures_deleted": deleted}
