"""
Tests for pairing materialization: IndividualMatch rows, points and result merge.
"""
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from app.models.division import MatchType
from app.models.individual_match import RESULT_PENDING, RESULT_SIDE1, RESULT_SIDE2, IndividualMatch
from app.models.selection import Selection
from app.services.pairing_generator import PairingError
from app.services.pairing_service import regenerate_pairings
from app.services.result_service import complete_fixture, record_individual_result
from app.services.selection_service import submit_selection
from tests.factories import make_fixture, make_players, make_season, make_teams, select_players

HANDICAPS_1 = [18.2, 3.1, 25.0, 9.9, 12.0, 0.5, 30.0, 7.7]
HANDICAPS_2 = [11.0, 14.0, 2.0, 28.0, 19.5, 6.0, 4.4, 22.0]


@pytest.fixture(name="fixture_setup")
def fixture_setup_fixture(session: Session):
    season = make_season(session)
    team1, team2 = make_teams(session, season, 2)
    fixture = make_fixture(session, season, team1, team2)
    players1 = make_players(session, team1.club_id, HANDICAPS_1)
    players2 = make_players(session, team2.club_id, HANDICAPS_2)
    return season, team1, team2, fixture, players1, players2


def _rows(session: Session, fixture_id: int):
    return session.exec(
        select(IndividualMatch).where(IndividualMatch.fixture_id == fixture_id).order_by(IndividualMatch.match_order)
    ).all()


def test_regenerate_writes_eight_rows(session: Session, fixture_setup):
    _, team1, team2, fixture, players1, players2 = fixture_setup
    select_players(session, fixture, team1, players1)
    select_players(session, fixture, team2, players2)

    summary = regenerate_pairings(session, fixture.id)

    assert summary == {"matchups_generated": 8, "results_preserved": 0, "results_discarded": 0}
    rows = _rows(session, fixture.id)
    assert [r.match_order for r in rows] == list(range(1, 9))
    assert all(r.result == RESULT_PENDING for r in rows)
    assert all(r.team1_player2_id is None for r in rows)
    handicaps = [r.team1_handicap for r in rows]
    assert handicaps == sorted(handicaps)
    # Slot 1: 0.5 rounds to 1 against 2.0, gap 1 * 0.75 rounds to 1 stroke for side 2
    assert rows[0].strokes_given == 1
    assert rows[0].strokes_receiver == 2


def test_regenerate_is_idempotent(session: Session, fixture_setup):
    _, team1, team2, fixture, players1, players2 = fixture_setup
    select_players(session, fixture, team1, players1)
    select_players(session, fixture, team2, players2)

    regenerate_pairings(session, fixture.id)
    first = [(r.team1_player_id, r.team2_player_id, r.strokes_given) for r in _rows(session, fixture.id)]
    regenerate_pairings(session, fixture.id)
    second = [(r.team1_player_id, r.team2_player_id, r.strokes_given) for r in _rows(session, fixture.id)]

    assert first == second
    assert len(_rows(session, fixture.id)) == 8


def test_forfeit_rows_carry_points(session: Session, fixture_setup):
    _, team1, _, fixture, players1, _ = fixture_setup
    select_players(session, fixture, team1, players1)

    regenerate_pairings(session, fixture.id)

    rows = _rows(session, fixture.id)
    assert len(rows) == 8
    for row in rows:
        assert row.team2_player_id is None
        assert (row.team1_points, row.team2_points) == (1.0, 0.0)
        assert row.forfeit_reason.startswith("Forfeit")
        assert row.result == RESULT_PENDING
    session.refresh(fixture)
    assert (fixture.team1_points, fixture.team2_points) == (8.0, 0.0)


def test_no_selections_gives_empty_slots(session: Session, fixture_setup):
    fixture = fixture_setup[3]

    regenerate_pairings(session, fixture.id)

    rows = _rows(session, fixture.id)
    assert len(rows) == 8
    assert all(r.team1_player_id is None and r.team2_player_id is None for r in rows)
    assert all((r.team1_points, r.team2_points) == (0.0, 0.0) for r in rows)


def test_results_survive_unchanged_slots(session: Session, fixture_setup):
    _, team1, team2, fixture, players1, players2 = fixture_setup
    select_players(session, fixture, team1, players1)
    select_players(session, fixture, team2, players2)
    regenerate_pairings(session, fixture.id)

    rows = _rows(session, fixture.id)
    record_individual_result(session, rows[0].id, RESULT_SIDE1)
    record_individual_result(session, rows[7].id, RESULT_SIDE1)

    # Replace team 1's highest handicap player (slot 8) with a new one
    replacement = make_players(session, team1.club_id, [29.0])[0]
    last = session.exec(
        select(Selection).where(
            Selection.fixture_id == fixture.id,
            Selection.team_id == team1.id,
            Selection.player_id == players1[6].id,
        )
    ).one()
    last.player_id = replacement.id
    session.add(last)
    session.commit()

    summary = regenerate_pairings(session, fixture.id)

    assert summary["results_preserved"] == 1
    assert summary["results_discarded"] == 1
    rows = _rows(session, fixture.id)
    assert rows[0].result == RESULT_SIDE1
    assert rows[7].result == RESULT_PENDING
    session.refresh(fixture)
    assert fixture.team1_points == 1.0


def test_resubmitted_selection_reports_discarded_result(session: Session, fixture_setup):
    _, team1, team2, fixture, players1, players2 = fixture_setup
    select_players(session, fixture, team1, players1)
    select_players(session, fixture, team2, players2)
    regenerate_pairings(session, fixture.id)
    record_individual_result(session, _rows(session, fixture.id)[2].id, RESULT_SIDE2)

    # players1[7] (7.7) plays slot 3; an 8.0 replacement takes the same slot
    replacement = make_players(session, team1.club_id, [8.0])[0]
    ids = [replacement.id if p is players1[7] else p.id for p in players1]
    summary = submit_selection(session, fixture.id, team1.id, ids)

    assert summary["results_preserved"] == 0
    assert summary["results_discarded"] == 1
    row = _rows(session, fixture.id)[2]
    assert row.team1_player_id == replacement.id
    assert row.result == RESULT_PENDING
    session.refresh(fixture)
    assert fixture.team2_points == 0.0


def test_knockout_fixture_uses_foursomes(session: Session, fixture_setup):
    season, team1, team2, _, players1, players2 = fixture_setup
    final = make_fixture(session, season, team1, team2, match_type=MatchType.final_1st, round_number=6)
    extra1 = make_players(session, team1.club_id, [15.0, 16.0])
    extra2 = make_players(session, team2.club_id, [13.0, 17.0])
    select_players(session, final, team1, players1 + extra1)
    select_players(session, final, team2, players2 + extra2)

    summary = regenerate_pairings(session, final.id)

    assert summary["matchups_generated"] == 5
    rows = _rows(session, final.id)
    assert all(r.team1_player2_id is not None and r.team2_player2_id is not None for r in rows)


def test_completed_fixture_refuses_regeneration(session: Session, fixture_setup):
    _, team1, _, fixture, players1, _ = fixture_setup
    select_players(session, fixture, team1, players1)
    regenerate_pairings(session, fixture.id)
    complete_fixture(session, fixture.id)

    with pytest.raises(PairingError):
        regenerate_pairings(session, fixture.id)


def test_pairings_endpoints(client: TestClient, session: Session, fixture_setup):
    _, team1, team2, fixture, players1, players2 = fixture_setup
    select_players(session, fixture, team1, players1)
    select_players(session, fixture, team2, players2[:5])

    response = client.post(f"/api/fixtures/{fixture.id}/pairings/generate")
    assert response.status_code == 200
    assert response.json()["matchups_generated"] == 8

    response = client.get(f"/api/fixtures/{fixture.id}/pairings")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 8
    assert sum(1 for m in data if m["forfeit_reason"]) == 3

    assert client.post("/api/fixtures/9999/pairings/generate").status_code == 404
    assert client.get("/api/fixtures/9999/pairings").status_code == 404
