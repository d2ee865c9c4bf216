from datetime import date, datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, String
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Column, Field, Relationship, SQLModel

from app.models.division import FIXTURE_SCHEDULED, Division, MatchType

if TYPE_CHECKING:
    from app.models.individual_match import IndividualMatch
    from app.models.season import Season
    from app.models.team import Team


class Fixture(SQLModel, table=True):
    __table_args__ = (
        SAUniqueConstraint(
            "season_id", "division", "round_number", "team1_id", "team2_id", name="uq_fixture_round_teams"
        ),
        CheckConstraint("team1_id <> team2_id", name="ck_fixture_distinct_teams"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    season_id: int = Field(foreign_key="season.id", index=True)
    division: Division = Field(sa_column=Column(String, nullable=False, index=True))
    round_number: int  # 1..5 regular, 6 finals
    match_date: date
    host_club_id: Optional[int] = Field(default=None, foreign_key="club.id")

    # team1/team2 order matters: points and individual-match sides are attributed by it
    team1_id: int = Field(foreign_key="team.id")
    team2_id: int = Field(foreign_key="team.id")
    team1_points: float = Field(default=0.0)
    team2_points: float = Field(default=0.0)

    status: str = Field(default=FIXTURE_SCHEDULED)  # "scheduled" | "completed"
    match_type: MatchType = Field(default=MatchType.regular, sa_column=Column(String, nullable=False))

    # Admin override: selections stay editable for both teams while now < this (UTC)
    selection_override_until: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    season: "Season" = Relationship(back_populates="fixtures")
    team1: "Team" = Relationship(
        back_populates="fixtures_as_team1", sa_relationship_kwargs={"foreign_keys": "Fixture.team1_id"}
    )
    team2: "Team" = Relationship(
        back_populates="fixtures_as_team2", sa_relationship_kwargs={"foreign_keys": "Fixture.team2_id"}
    )
    individual_matches: List["IndividualMatch"] = Relationship(back_populates="fixture")

    @property
    def is_knockout(self) -> bool:
        return MatchType(self.match_type) != MatchType.regular
