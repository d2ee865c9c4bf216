from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.club import Club


class Player(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    club_id: int = Field(foreign_key="club.id", index=True)
    first_name: str
    last_name: str
    handicap_index: float  # Lower is stronger
    gender: str  # "M" | "F"
    is_junior: bool = Field(default=False)
    is_validated: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    club: "Club" = Relationship(back_populates="players")
