"""
Result entry: individual match outcomes and fixture completion.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from app.database import get_session
from app.models.fixture import Fixture
from app.models.individual_match import IndividualMatch
from app.routes.fixtures import FixtureResponse
from app.routes.pairings import IndividualMatchResponse
from app.services.result_service import ResultEntryError, complete_fixture, record_individual_result

router = APIRouter()


class IndividualMatchResultUpdate(BaseModel):
    result: str  # pending | side1 | side2 | tie


@router.patch("/individual-matches/{individual_match_id}", response_model=IndividualMatchResponse)
def update_individual_match_result(
    individual_match_id: int,
    request: IndividualMatchResultUpdate,
    session: Session = Depends(get_session),
):
    if not session.get(IndividualMatch, individual_match_id):
        raise HTTPException(status_code=404, detail="Individual match not found")

    try:
        return record_individual_result(session, individual_match_id, request.result)
    except ResultEntryError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/fixtures/{fixture_id}/complete", response_model=FixtureResponse)
def complete_fixture_endpoint(fixture_id: int, session: Session = Depends(get_session)):
    """Mark a fixture completed; every contested slot needs a result first."""
    if not session.get(Fixture, fixture_id):
        raise HTTPException(status_code=404, detail="Fixture not found")

    try:
        return complete_fixture(session, fixture_id)
    except ResultEntryError as e:
        raise HTTPException(status_code=400, detail=str(e))
