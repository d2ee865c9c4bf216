"""
Tests for standings and finals seeding.
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from app.models.division import FIXTURE_COMPLETED, Division, MatchType
from app.models.fixture import Fixture
from app.models.individual_match import IndividualMatch
from app.services.standings import (
    FinalsAlreadyExistError,
    FinalsSeedingError,
    FixtureOutcome,
    Standing,
    StandingTeam,
    compute_division_standings,
    compute_standings,
    delete_finals,
    generate_finals,
    seed_finals,
)
from tests.factories import make_fixture, make_season, make_teams

FINALS_DATE = date(2026, 9, 20)


# ============================================================================
# Pure standings
# ============================================================================


def test_points_and_record():
    teams = [StandingTeam(1, 10), StandingTeam(2, 20)]
    fixtures = [
        FixtureOutcome(1, 2, 5.0, 3.0, host_club_id=10),
        FixtureOutcome(2, 1, 4.0, 4.0, host_club_id=20),
    ]

    table = {s.team_id: s for s in compute_standings(teams, fixtures)}

    assert table[1].points == 3
    assert (table[1].wins, table[1].draws, table[1].losses) == (1, 1, 0)
    assert table[1].home_wins == 1
    assert table[1].points_for == 9.0
    assert table[1].points_against == 7.0
    assert table[2].points == 1
    assert table[2].played == 2
    assert table[1].rank == 1


def test_tie_on_points_broken_by_away_wins():
    # Team 2 is listed first but team 1 won away
    teams = [StandingTeam(2, 20), StandingTeam(1, 10), StandingTeam(3, 30), StandingTeam(4, 40)]
    fixtures = [
        FixtureOutcome(1, 3, 6.0, 2.0, host_club_id=30),  # away win for 1
        FixtureOutcome(2, 4, 5.0, 3.0, host_club_id=20),  # home win for 2
        FixtureOutcome(1, 2, 4.0, 4.0, host_club_id=10),
    ]

    ranked = compute_standings(teams, fixtures)

    assert [s.team_id for s in ranked[:2]] == [1, 2]
    assert ranked[0].points == ranked[1].points == 3
    assert ranked[0].away_wins == 1
    assert ranked[1].away_wins == 0
    assert [s.rank for s in ranked] == [1, 2, 3, 4]


def test_full_tie_keeps_input_order():
    teams = [StandingTeam(7, 70), StandingTeam(3, 30), StandingTeam(5, 50)]

    ranked = compute_standings(teams, [])

    assert [s.team_id for s in ranked] == [7, 3, 5]
    assert all(s.points == 0 for s in ranked)


def test_seed_finals_pairs_top_six():
    standings = [Standing(team_id=100 + r, club_id=r, rank=r) for r in range(8, 0, -1)]

    pairings = seed_finals(standings)

    assert [(p.match_type, p.team1_id, p.team2_id) for p in pairings] == [
        (MatchType.final_1st, 101, 102),
        (MatchType.final_3rd, 103, 104),
        (MatchType.final_5th, 105, 106),
    ]


def test_seed_finals_needs_six_teams():
    with pytest.raises(FinalsSeedingError):
        seed_finals([Standing(team_id=i, club_id=i, rank=i) for i in range(1, 6)])


# ============================================================================
# Persistence
# ============================================================================


def _played(session, season, team1, team2, points1, points2, host_club_id=None, status=FIXTURE_COMPLETED):
    fixture = make_fixture(session, season, team1, team2, match_date=date(2026, 4, 5), host_club_id=host_club_id)
    fixture.team1_points = points1
    fixture.team2_points = points2
    fixture.status = status
    session.add(fixture)
    session.commit()
    return fixture


def _ranked_division(session: Session, count: int = 6):
    """Teams where team i beats every team after it; rank follows creation order."""
    season = make_season(session)
    teams = make_teams(session, season, count)
    for i, team in enumerate(teams):
        for other in teams[i + 1:]:
            _played(session, season, team, other, 5.0, 3.0)
    return season, teams


def test_division_standings_ignore_unplayed_and_finals(session: Session):
    season = make_season(session)
    a, b, c = make_teams(session, season, 3)
    _played(session, season, a, b, 6.0, 2.0)
    _played(session, season, b, c, 8.0, 0.0, status="scheduled")
    final = make_fixture(session, season, c, a, match_type=MatchType.final_1st, round_number=6)
    final.team1_points, final.team2_points, final.status = 5.0, 0.0, FIXTURE_COMPLETED
    session.add(final)
    session.commit()

    table = {s.team_id: s for s in compute_division_standings(session, season.id, Division.champe1)}

    assert table[a.id].points == 2
    assert table[b.id].played == 1
    assert table[c.id].played == 0


def test_generate_finals_creates_three_fixtures(session: Session):
    season, teams = _ranked_division(session, 7)

    summary = generate_finals(session, season.id, Division.champe1, FINALS_DATE, teams[0].club_id)

    assert summary == {"fixtures_created": 3}
    finals = session.exec(
        select(Fixture).where(Fixture.round_number == 6).order_by(Fixture.id)
    ).all()
    assert [(f.match_type, f.team1_id, f.team2_id) for f in finals] == [
        (MatchType.final_1st.value, teams[0].id, teams[1].id),
        (MatchType.final_3rd.value, teams[2].id, teams[3].id),
        (MatchType.final_5th.value, teams[4].id, teams[5].id),
    ]
    assert all(f.match_date == FINALS_DATE for f in finals)
    assert all(f.host_club_id == teams[0].club_id for f in finals)


def test_generate_finals_refuses_five_teams(session: Session):
    season, teams = _ranked_division(session, 5)

    with pytest.raises(FinalsSeedingError):
        generate_finals(session, season.id, Division.champe1, FINALS_DATE, teams[0].club_id)
    assert session.exec(select(Fixture).where(Fixture.round_number == 6)).all() == []


def test_generate_finals_twice_refused_until_deleted(session: Session):
    season, teams = _ranked_division(session)
    generate_finals(session, season.id, Division.champe1, FINALS_DATE, teams[0].club_id)

    with pytest.raises(FinalsAlreadyExistError):
        generate_finals(session, season.id, Division.champe1, FINALS_DATE, teams[0].club_id)

    final = session.exec(select(Fixture).where(Fixture.round_number == 6)).first()
    session.add(IndividualMatch(fixture_id=final.id, match_order=1))
    session.commit()

    assert delete_finals(session, season.id, Division.champe1) == {"fixtures_deleted": 3}
    assert session.exec(select(IndividualMatch)).all() == []
    assert len(session.exec(select(Fixture)).all()) == 15

    assert generate_finals(session, season.id, Division.champe1, FINALS_DATE, teams[0].club_id) == {
        "fixtures_created": 3
    }


# ============================================================================
# Endpoints
# ============================================================================


def test_standings_endpoint(client: TestClient, session: Session):
    season, teams = _ranked_division(session, 4)

    response = client.get(f"/api/seasons/{season.id}/divisions/champe1/standings")

    assert response.status_code == 200
    data = response.json()
    assert [row["team_id"] for row in data] == [t.id for t in teams]
    assert [row["rank"] for row in data] == [1, 2, 3, 4]
    assert data[0]["points"] == 6
    assert data[-1]["losses"] == 3


def test_finals_endpoints(client: TestClient, session: Session):
    season, teams = _ranked_division(session)
    url = f"/api/seasons/{season.id}/divisions/champe1/finals"
    body = {"finals_date": FINALS_DATE.isoformat(), "host_club_id": teams[2].club_id}

    response = client.post(f"{url}/generate", json=body)
    assert response.status_code == 201
    assert response.json() == {"fixtures_created": 3}

    assert client.post(f"{url}/generate", json=body).status_code == 409

    response = client.delete(url)
    assert response.status_code == 200
    assert response.json() == {"fixtures_deleted": 3}

    assert client.post(f"{url}/generate", json={**body, "host_club_id": 9999}).status_code == 404


def test_finals_endpoint_refuses_small_division(client: TestClient, session: Session):
    season, teams = _ranked_division(session, 5)

    response = client.post(
        f"/api/seasons/{season.id}/divisions/champe1/finals/generate",
        json={"finals_date": FINALS_DATE.isoformat(), "host_club_id": teams[0].club_id},
    )

    assert response.status_code == 400
