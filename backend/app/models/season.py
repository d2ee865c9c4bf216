from datetime import date, datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Column, Field, Relationship, SQLModel

from app.models.division import Division

if TYPE_CHECKING:
    from app.models.fixture import Fixture
    from app.models.team import Team


class Season(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    timezone: str  # IANA name; selection lock deadlines are computed in this zone
    lock_hour: int = Field(default=17)  # Hour of the Friday lock deadline
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    round_dates: List["SeasonRoundDate"] = Relationship(back_populates="season")
    teams: List["Team"] = Relationship(back_populates="season")
    fixtures: List["Fixture"] = Relationship(back_populates="season")


class SeasonRoundDate(SQLModel, table=True):
    """Round descriptor for one division: the date and optional explicit host club."""

    __table_args__ = (
        SAUniqueConstraint("season_id", "division", "round_number", name="uq_season_division_round"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    season_id: int = Field(foreign_key="season.id", index=True)
    division: Division = Field(sa_column=Column(String, nullable=False))
    round_number: int  # 1..5
    planned_date: date
    host_club_id: Optional[int] = Field(default=None, foreign_key="club.id")

    season: "Season" = Relationship(back_populates="round_dates")
