from enum import Enum


class Division(str, Enum):
    champe1 = "champe1"
    champe2 = "champe2"


class MatchType(str, Enum):
    regular = "regular"
    final_1st = "final_1st"
    final_3rd = "final_3rd"
    final_5th = "final_5th"


# Regular rounds are numbered 1..REGULAR_ROUND_COUNT; finals share the round after.
REGULAR_ROUND_COUNT = 5
FINALS_ROUND_NUMBER = 6

FIXTURE_SCHEDULED = "scheduled"
FIXTURE_COMPLETED = "completed"
