from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, SQLModel


class Selection(SQLModel, table=True):
    """One player of a team's ordered roster for one fixture."""

    __table_args__ = (
        SAUniqueConstraint("fixture_id", "team_id", "player_id", name="uq_selection_player"),
        SAUniqueConstraint("fixture_id", "team_id", "selection_order", name="uq_selection_order"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    fixture_id: int = Field(foreign_key="fixture.id", index=True)
    team_id: int = Field(foreign_key="team.id", index=True)
    player_id: int = Field(foreign_key="player.id")
    selection_order: int  # Dense 1..K in submission order
    created_at: datetime = Field(default_factory=datetime.utcnow)
