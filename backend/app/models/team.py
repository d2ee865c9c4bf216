from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Column, Field, Relationship, SQLModel

from app.models.division import Division

if TYPE_CHECKING:
    from app.models.club import Club
    from app.models.fixture import Fixture
    from app.models.season import Season


class Team(SQLModel, table=True):
    __table_args__ = (
        # A club fields at most one team per division in a season
        SAUniqueConstraint("season_id", "club_id", "division", name="uq_season_club_division"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    season_id: int = Field(foreign_key="season.id", index=True)
    club_id: int = Field(foreign_key="club.id", index=True)
    division: Division = Field(sa_column=Column(String, nullable=False))
    name: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    season: "Season" = Relationship(back_populates="teams")
    club: "Club" = Relationship(back_populates="teams")
    fixtures_as_team1: List["Fixture"] = Relationship(
        back_populates="team1", sa_relationship_kwargs={"foreign_keys": "Fixture.team1_id"}
    )
    fixtures_as_team2: List["Fixture"] = Relationship(
        back_populates="team2", sa_relationship_kwargs={"foreign_keys": "Fixture.team2_id"}
    )
