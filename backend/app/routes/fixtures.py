"""
Fixture calendar API routes.
Generates and lists the regular-round fixtures of a division.
"""

from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from sqlmodel import Session, select

from app.database import get_session
from app.models.division import Division
from app.models.fixture import Fixture
from app.models.season import Season
from app.services.fixture_scheduler import SchedulingError, generate_fixtures

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class FixturesGenerateResponse(BaseModel):
    fixtures_created: int
    rounds_scheduled: int


class FixtureResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    season_id: int
    division: str
    round_number: int
    match_date: date
    host_club_id: Optional[int] = None
    team1_id: int
    team2_id: int
    team1_points: float
    team2_points: float
    status: str
    match_type: str
    selection_override_until: Optional[datetime] = None


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "/seasons/{season_id}/divisions/{division}/fixtures/generate",
    response_model=FixturesGenerateResponse,
)
def generate_division_fixtures(season_id: int, division: Division, session: Session = Depends(get_session)):
    """
    Regenerate the round-robin calendar of a division.

    Replaces the division's regular fixtures (and their selections, pairings
    and scratch notices). Finals are untouched.
    """
    if not session.get(Season, season_id):
        raise HTTPException(status_code=404, detail="Season not found")

    try:
        return generate_fixtures(session, season_id, division)
    except SchedulingError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/seasons/{season_id}/divisions/{division}/fixtures", response_model=List[FixtureResponse])
def list_division_fixtures(season_id: int, division: Division, session: Session = Depends(get_session)):
    """All fixtures of a division (regular rounds then finals), ordered by round then id."""
    if not session.get(Season, season_id):
        raise HTTPException(status_code=404, detail="Season not found")

    return session.exec(
        select(Fixture)
        .where(Fixture.season_id == season_id, Fixture.division == division.value)
        .order_by(Fixture.round_number, Fixture.id)
    ).all()
