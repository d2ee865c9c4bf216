from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.fixture import Fixture

RESULT_PENDING = "pending"
RESULT_SIDE1 = "side1"
RESULT_SIDE2 = "side2"
RESULT_TIE = "tie"

RESULTS = (RESULT_PENDING, RESULT_SIDE1, RESULT_SIDE2, RESULT_TIE)


class IndividualMatch(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("fixture_id", "match_order", name="uq_individual_match_slot"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    fixture_id: int = Field(foreign_key="fixture.id", index=True)
    match_order: int  # Slot index: 1..8 regular, 1..5 knockout

    # Side 1 belongs to fixture.team1, side 2 to fixture.team2.
    # The *_player2_id columns are only set for foursome (knockout) slots.
    team1_player_id: Optional[int] = Field(default=None, foreign_key="player.id")
    team1_player2_id: Optional[int] = Field(default=None, foreign_key="player.id")
    team2_player_id: Optional[int] = Field(default=None, foreign_key="player.id")
    team2_player2_id: Optional[int] = Field(default=None, foreign_key="player.id")

    # Handicap figure used for the stroke calculation (single capped index or pair average)
    team1_handicap: Optional[float] = Field(default=None)
    team2_handicap: Optional[float] = Field(default=None)
    strokes_given: int = Field(default=0)
    strokes_receiver: Optional[int] = Field(default=None)  # 1 | 2 | None

    result: str = Field(default=RESULT_PENDING)  # pending | side1 | side2 | tie
    team1_points: float = Field(default=0.0)
    team2_points: float = Field(default=0.0)
    forfeit_reason: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    fixture: "Fixture" = Relationship(back_populates="individual_matches")

    def side_player_ids(self, side: int) -> tuple:
        if side == 1:
            return (self.team1_player_id, self.team1_player2_id)
        return (self.team2_player_id, self.team2_player2_id)

    @property
    def is_contested(self) -> bool:
        return self.team1_player_id is not None and self.team2_player_id is not None
