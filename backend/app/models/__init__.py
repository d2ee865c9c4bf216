from app.models.club import Club
from app.models.division import Division, MatchType
from app.models.fixture import Fixture
from app.models.individual_match import IndividualMatch
from app.models.player import Player
from app.models.scratch_notice import ScratchNotice
from app.models.season import Season, SeasonRoundDate
from app.models.selection import Selection
from app.models.team import Team

__all__ = [
    "Season",
    "SeasonRoundDate",
    "Club",
    "Team",
    "Player",
    "Division",
    "MatchType",
    "Fixture",
    "Selection",
    "IndividualMatch",
    "ScratchNotice",
]
