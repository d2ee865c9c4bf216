"""
Standings and finals API routes.
"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from app.database import get_session
from app.models.club import Club
from app.models.division import Division
from app.models.season import Season
from app.services.standings import (
    FinalsAlreadyExistError,
    FinalsSeedingError,
    compute_division_standings,
    delete_finals,
    generate_finals,
)

router = APIRouter()


class StandingResponse(BaseModel):
    rank: int
    team_id: int
    club_id: int
    points: int
    played: int
    wins: int
    draws: int
    losses: int
    home_wins: int
    away_wins: int
    points_for: float
    points_against: float


class FinalsGenerateRequest(BaseModel):
    finals_date: date
    host_club_id: int


class FinalsGenerateResponse(BaseModel):
    fixtures_created: int


class FinalsDeleteResponse(BaseModel):
    fixtures_deleted: int


def _require_season(session: Session, season_id: int) -> Season:
    season = session.get(Season, season_id)
    if not season:
        raise HTTPException(status_code=404, detail="Season not found")
    return season


@router.get("/seasons/{season_id}/divisions/{division}/standings", response_model=List[StandingResponse])
def get_standings(season_id: int, division: Division, session: Session = Depends(get_session)):
    """
    Ranked table from completed regular fixtures.

    Order: points descending, then away wins descending.
    """
    _require_season(session, season_id)
    standings = compute_division_standings(session, season_id, division)
    return [StandingResponse(**vars(s)) for s in standings]


@router.post(
    "/seasons/{season_id}/divisions/{division}/finals/generate",
    response_model=FinalsGenerateResponse,
    status_code=201,
)
def generate_division_finals(
    season_id: int,
    division: Division,
    request: FinalsGenerateRequest,
    session: Session = Depends(get_session),
):
    """Seed the top 6 into 1v2, 3v4 and 5v6 knockout fixtures."""
    _require_season(session, season_id)
    if not session.get(Club, request.host_club_id):
        raise HTTPException(status_code=404, detail="Host club not found")

    try:
        return generate_finals(session, season_id, division, request.finals_date, request.host_club_id)
    except FinalsAlreadyExistError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except FinalsSeedingError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/seasons/{season_id}/divisions/{division}/finals", response_model=FinalsDeleteResponse)
def delete_division_finals(season_id: int, division: Division, session: Session = Depends(get_session)):
    _require_season(session, season_id)
    return delete_finals(session, season_id, division)
