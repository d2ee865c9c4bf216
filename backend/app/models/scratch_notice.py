from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class ScratchNotice(SQLModel, table=True):
    """Incident notice (injured or unavailable player) raised by a team for one fixture.

    Once acknowledged by an administrator, the team may edit its selection for
    that fixture regardless of the lock deadline.
    """

    id: Optional[int] = Field(default=None, primary_key=True)
    fixture_id: int = Field(foreign_key="fixture.id", index=True)
    team_id: int = Field(foreign_key="team.id", index=True)
    message: str
    created_at: datetime = Field(default_factory=datetime.utcnow)
    acknowledged_at: Optional[datetime] = Field(default=None)
    acknowledged_by: Optional[str] = None

    @property
    def is_acknowledged(self) -> bool:
        return self.acknowledged_at is not None
