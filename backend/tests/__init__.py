# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from app.models.club import Club  # noqa: F401
from app.models.fixture import Fixture  # noqa: F401
from app.models.individual_match import IndividualMatch  # noqa: F401
from app.models.player import Player  # noqa: F401
from app.models.scratch_notice import ScratchNotice  # noqa: F401
from app.models.season import Season, SeasonRoundDate  # noqa: F401
from app.models.selection import Selection  # noqa: F401
from app.models.team import Team  # noqa: F401
