"""
Fixture deletion helpers shared by calendar regeneration and finals removal.
"""

from typing import Sequence

from sqlmodel import Session, select

from app.models.fixture import Fixture
from app.models.individual_match import IndividualMatch
from app.models.scratch_notice import ScratchNotice
from app.models.selection import Selection


def delete_fixtures(session: Session, fixtures: Sequence[Fixture]) -> int:
    """Delete fixtures and their child rows in child→parent order.

    Deletes: IndividualMatches, Selections, ScratchNotices → Fixtures.
    Flushes but does not commit; the caller owns the transaction.

    Returns:
        Number of fixtures deleted
    """
    fixture_ids = [f.id for f in fixtures if f.id is not None]
    if not fixture_ids:
        return 0

    for model in (IndividualMatch, Selection, ScratchNotice):
        children = session.exec(select(model).where(model.fixture_id.in_(fixture_ids))).all()
        for child in children:
            session.delete(child)

    # Flush children before deleting fixtures so FK constraints are satisfied
    session.flush()

    for fixture in fixtures:
        session.delete(fixture)
    session.flush()

    return len(fixture_ids)
