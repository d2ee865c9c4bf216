"""
Pairing API routes: regenerate and read a fixture's individual matches.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from sqlmodel import Session, select

from app.database import get_session
from app.models.fixture import Fixture
from app.models.individual_match import IndividualMatch
from app.services.pairing_generator import PairingError
from app.services.pairing_service import regenerate_pairings

router = APIRouter()


class PairingsGenerateResponse(BaseModel):
    matchups_generated: int
    results_preserved: int
    results_discarded: int


class IndividualMatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    fixture_id: int
    match_order: int
    team1_player_id: Optional[int] = None
    team1_player2_id: Optional[int] = None
    team2_player_id: Optional[int] = None
    team2_player2_id: Optional[int] = None
    team1_handicap: Optional[float] = None
    team2_handicap: Optional[float] = None
    strokes_given: int
    strokes_receiver: Optional[int] = None
    result: str
    team1_points: float
    team2_points: float
    forfeit_reason: Optional[str] = None


@router.post("/fixtures/{fixture_id}/pairings/generate", response_model=PairingsGenerateResponse)
def generate_fixture_pairings(fixture_id: int, session: Session = Depends(get_session)):
    """Rebuild the fixture's individual matches from both teams' current selections."""
    if not session.get(Fixture, fixture_id):
        raise HTTPException(status_code=404, detail="Fixture not found")

    try:
        return regenerate_pairings(session, fixture_id)
    except PairingError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/fixtures/{fixture_id}/pairings", response_model=List[IndividualMatchResponse])
def list_fixture_pairings(fixture_id: int, session: Session = Depends(get_session)):
    if not session.get(Fixture, fixture_id):
        raise HTTPException(status_code=404, detail="Fixture not found")

    return session.exec(
        select(IndividualMatch).where(IndividualMatch.fixture_id == fixture_id).order_by(IndividualMatch.match_order)
    ).all()
