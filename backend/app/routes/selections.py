"""
Selection API Routes
Captain roster submission, lock status, admin override and scratch notices.

Admin identity is resolved upstream; the `as_admin` flag carries it here.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict
from sqlmodel import Session

from app.database import get_session
from app.models.fixture import Fixture
from app.models.scratch_notice import ScratchNotice
from app.services.pairing_generator import PairingError
from app.services.selection_lock import SelectionLockedError, get_selection_lock_status
from app.services.selection_service import (
    SelectionError,
    acknowledge_scratch_notice,
    get_selection,
    set_selection_override,
    submit_scratch_notice,
    submit_selection,
)

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class SelectionLockResponse(BaseModel):
    fixture_id: int
    team_id: int
    state: str
    reason: str
    editable: bool
    deadline: datetime
    override_until: Optional[datetime] = None


class SelectionSubmitRequest(BaseModel):
    player_ids: List[int]
    as_admin: bool = False


class SelectionSubmitResponse(BaseModel):
    selection_count: int
    lock_state: str
    matchups_generated: int
    results_preserved: int
    results_discarded: int


class SelectionEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    player_id: int
    selection_order: int


class SelectionOverrideRequest(BaseModel):
    override_until: Optional[datetime] = None  # None revokes the override


class SelectionOverrideResponse(BaseModel):
    fixture_id: int
    selection_override_until: Optional[datetime] = None


class ScratchNoticeCreateRequest(BaseModel):
    message: str


class ScratchNoticeAcknowledgeRequest(BaseModel):
    acknowledged_by: Optional[str] = None


class ScratchNoticeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    fixture_id: int
    team_id: int
    message: str
    created_at: datetime
    acknowledged_at: Optional[datetime] = None
    acknowledged_by: Optional[str] = None


def _get_fixture_or_404(session: Session, fixture_id: int) -> Fixture:
    fixture = session.get(Fixture, fixture_id)
    if not fixture:
        raise HTTPException(status_code=404, detail="Fixture not found")
    return fixture


# ============================================================================
# Selection Endpoints
# ============================================================================


@router.get("/fixtures/{fixture_id}/teams/{team_id}/selection-lock", response_model=SelectionLockResponse)
def get_lock_status(
    fixture_id: int,
    team_id: int,
    as_admin: bool = Query(False),
    session: Session = Depends(get_session),
):
    """Current lock state of a team's selection (recomputed on every call)."""
    fixture = _get_fixture_or_404(session, fixture_id)
    if team_id not in (fixture.team1_id, fixture.team2_id):
        raise HTTPException(status_code=404, detail="Team does not play this fixture")

    status = get_selection_lock_status(session, fixture, team_id, is_admin=as_admin)
    return SelectionLockResponse(
        fixture_id=fixture_id,
        team_id=team_id,
        state=status.state.value,
        reason=status.reason,
        editable=status.editable,
        deadline=status.deadline,
        override_until=status.override_until,
    )


@router.get("/fixtures/{fixture_id}/teams/{team_id}/selection", response_model=List[SelectionEntryResponse])
def read_selection(fixture_id: int, team_id: int, session: Session = Depends(get_session)):
    _get_fixture_or_404(session, fixture_id)
    return get_selection(session, fixture_id, team_id)


@router.put("/fixtures/{fixture_id}/teams/{team_id}/selection", response_model=SelectionSubmitResponse)
def put_selection(
    fixture_id: int,
    team_id: int,
    request: SelectionSubmitRequest,
    session: Session = Depends(get_session),
):
    """
    Replace a team's ordered roster for a fixture.

    Pairings are regenerated from both teams' selections in the same
    transaction. Refused with 409 once the selection is locked.
    """
    _get_fixture_or_404(session, fixture_id)

    try:
        return submit_selection(session, fixture_id, team_id, request.player_ids, is_admin=request.as_admin)
    except SelectionLockedError as e:
        raise HTTPException(status_code=409, detail=f"SELECTION_LOCKED: {e}")
    except (SelectionError, PairingError) as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/fixtures/{fixture_id}/selection-override", response_model=SelectionOverrideResponse)
def put_selection_override(
    fixture_id: int,
    request: SelectionOverrideRequest,
    session: Session = Depends(get_session),
):
    """Admin: keep both teams' selections editable until `override_until`."""
    _get_fixture_or_404(session, fixture_id)
    fixture = set_selection_override(session, fixture_id, request.override_until)
    return SelectionOverrideResponse(
        fixture_id=fixture.id, selection_override_until=fixture.selection_override_until
    )


# ============================================================================
# Scratch Notice Endpoints
# ============================================================================


@router.post(
    "/fixtures/{fixture_id}/teams/{team_id}/scratch-notices",
    response_model=ScratchNoticeResponse,
    status_code=201,
)
def create_scratch_notice(
    fixture_id: int,
    team_id: int,
    request: ScratchNoticeCreateRequest,
    session: Session = Depends(get_session),
):
    _get_fixture_or_404(session, fixture_id)
    try:
        return submit_scratch_notice(session, fixture_id, team_id, request.message)
    except SelectionError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/scratch-notices/{notice_id}/acknowledge", response_model=ScratchNoticeResponse)
def acknowledge_notice(
    notice_id: int,
    request: ScratchNoticeAcknowledgeRequest,
    session: Session = Depends(get_session),
):
    """Admin: acknowledging a notice reopens that team's selection for the fixture."""
    if not session.get(ScratchNotice, notice_id):
        raise HTTPException(status_code=404, detail="Scratch notice not found")
    return acknowledge_scratch_notice(session, notice_id, request.acknowledged_by)
