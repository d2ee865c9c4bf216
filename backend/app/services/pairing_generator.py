"""
Pairing Generator: individual matchups for one fixture.

Turns the two teams' submitted, ordered rosters into slot-by-slot matchups:

- Regular fixtures: 8 singles slots. Each roster is stable-sorted by handicap
  index and slot i pairs the i-th lowest handicap of each side.
- Knockout fixtures: 5 foursome slots. Each roster of 10 is cut into 5
  consecutive pairs as submitted (partners chosen by the captain); pairs are
  stable-sorted by average handicap and slot i pairs the i-th pair of each side.

Every slot resolves to exactly one of BothPresent, OneForfeited or
NoneDesignated. Incomplete or absent rosters are never an error.

Pure module: no session, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence, Tuple, Union

REGULAR_ROSTER_SIZE = 8
KNOCKOUT_ROSTER_SIZE = 10  # 5 foursome pairs

HANDICAP_CAP = 30.0
SINGLES_MULTIPLIER = Decimal("0.75")
FOURSOME_MULTIPLIER = Decimal("0.375")

FORFEIT_POINTS = 1.0


class PairingError(Exception):
    """Raised when a roster cannot be turned into pairings"""

    pass


@dataclass(frozen=True)
class RosterEntry:
    player_id: int
    handicap_index: float
    selection_order: int


@dataclass(frozen=True)
class PairingSide:
    """One side of a slot: a single player or a foursome pair."""

    players: Tuple[RosterEntry, ...]
    handicap: float  # Figure used for strokes (capped, pair-averaged when foursome)
    raw_handicap: float  # Pre-cap, pre-round figure; decides who receives strokes

    @property
    def player_ids(self) -> Tuple[int, ...]:
        return tuple(p.player_id for p in self.players)


@dataclass(frozen=True)
class StrokeAllowance:
    strokes_given: int
    receiver: Optional[int]  # 1 | 2 | None when the gap rounds to zero


@dataclass(frozen=True)
class BothPresent:
    side1: PairingSide
    side2: PairingSide
    allowance: StrokeAllowance


@dataclass(frozen=True)
class OneForfeited:
    present_side: int  # 1 | 2
    present: PairingSide
    reason: str

    @property
    def points(self) -> Tuple[float, float]:
        return (FORFEIT_POINTS, 0.0) if self.present_side == 1 else (0.0, FORFEIT_POINTS)


@dataclass(frozen=True)
class NoneDesignated:
    pass


SlotOutcome = Union[BothPresent, OneForfeited, NoneDesignated]


@dataclass(frozen=True)
class PairingSlot:
    match_order: int
    outcome: SlotOutcome


# =============================================================================
# Numeric rules
# =============================================================================


def round_half_away(value: Union[float, Decimal]) -> int:
    """Round to the nearest integer, halves away from zero (4.5 -> 5, -4.5 -> -5)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def capped(handicap_index: float) -> float:
    return min(handicap_index, HANDICAP_CAP)


def pair_handicap(first: float, second: float) -> float:
    """Foursome figure: each partner capped and rounded independently, then averaged."""
    return (round_half_away(capped(first)) + round_half_away(capped(second))) / 2


def stroke_allowance(side1: PairingSide, side2: PairingSide, foursome: bool) -> StrokeAllowance:
    """
    Strokes given for one slot.

    d = |round(h1) - round(h2)|, strokes = round(d * m) with m = 0.75 for
    singles and 0.375 for foursomes. The side with the higher raw figure
    receives; a zero gap yields no receiver.
    """
    gap = abs(round_half_away(side1.handicap) - round_half_away(side2.handicap))
    if gap == 0:
        return StrokeAllowance(strokes_given=0, receiver=None)

    multiplier = FOURSOME_MULTIPLIER if foursome else SINGLES_MULTIPLIER
    strokes = round_half_away(Decimal(gap) * multiplier)

    if side1.raw_handicap != side2.raw_handicap:
        receiver = 1 if side1.raw_handicap > side2.raw_handicap else 2
    else:
        receiver = 1 if side1.handicap > side2.handicap else 2
    return StrokeAllowance(strokes_given=strokes, receiver=receiver)


# =============================================================================
# Roster handling
# =============================================================================


def validate_roster(roster: Sequence[RosterEntry], knockout: bool, label: str) -> None:
    """Reject rosters that break the Selection invariants."""
    limit = KNOCKOUT_ROSTER_SIZE if knockout else REGULAR_ROSTER_SIZE
    if len(roster) > limit:
        raise PairingError(f"{label} selection has {len(roster)} players; at most {limit} allowed")

    player_ids = [entry.player_id for entry in roster]
    if len(set(player_ids)) != len(player_ids):
        raise PairingError(f"{label} selection lists the same player more than once")

    orders = sorted(entry.selection_order for entry in roster)
    if orders != list(range(1, len(roster) + 1)):
        raise PairingError(f"{label} selection orders must run 1..{len(roster)}, got {orders}")

    if knockout and len(roster) % 2 != 0:
        raise PairingError(
            f"{label} foursome selection has {len(roster)} players; partners are picked in pairs"
        )


def singles_sides(roster: Sequence[RosterEntry]) -> List[PairingSide]:
    # sorted() is stable: equal handicaps keep submission order
    by_order = sorted(roster, key=lambda e: e.selection_order)
    ranked = sorted(by_order, key=lambda e: e.handicap_index)
    return [
        PairingSide(players=(entry,), handicap=capped(entry.handicap_index), raw_handicap=entry.handicap_index)
        for entry in ranked
    ]


def foursome_sides(roster: Sequence[RosterEntry]) -> List[PairingSide]:
    by_order = sorted(roster, key=lambda e: e.selection_order)
    pairs: List[PairingSide] = []
    for i in range(0, len(by_order), 2):
        first, second = by_order[i], by_order[i + 1]
        pairs.append(
            PairingSide(
                players=(first, second),
                handicap=pair_handicap(first.handicap_index, second.handicap_index),
                raw_handicap=(first.handicap_index + second.handicap_index) / 2,
            )
        )
    return sorted(pairs, key=lambda side: side.raw_handicap)


def _forfeit_reason(absent_side: int, match_order: int, knockout: bool) -> str:
    unit = "pair" if knockout else "player"
    return f"Forfeit: side {absent_side} has no {unit} designated for slot {match_order}"


# =============================================================================
# Entry point
# =============================================================================


def generate_pairings(
    knockout: bool,
    roster1: Sequence[RosterEntry],
    roster2: Sequence[RosterEntry],
) -> List[PairingSlot]:
    """
    Build every slot of a fixture from the two rosters.

    Args:
        knockout: True for finals fixtures (foursomes), False for regular rounds
        roster1: Selection of fixture.team1 (may be empty or incomplete)
        roster2: Selection of fixture.team2 (may be empty or incomplete)

    Returns:
        8 slots (regular) or 5 slots (knockout), ordered by match_order

    Raises:
        PairingError: roster too long, duplicated players, non-dense orders,
            or an odd-length foursome roster
    """
    validate_roster(roster1, knockout, "Side 1")
    validate_roster(roster2, knockout, "Side 2")

    if knockout:
        sides1, sides2 = foursome_sides(roster1), foursome_sides(roster2)
        slot_count = KNOCKOUT_ROSTER_SIZE // 2
    else:
        sides1, sides2 = singles_sides(roster1), singles_sides(roster2)
        slot_count = REGULAR_ROSTER_SIZE

    slots: List[PairingSlot] = []
    for index in range(slot_count):
        match_order = index + 1
        side1 = sides1[index] if index < len(sides1) else None
        side2 = sides2[index] if index < len(sides2) else None

        outcome: SlotOutcome
        if side1 is not None and side2 is not None:
            outcome = BothPresent(side1=side1, side2=side2, allowance=stroke_allowance(side1, side2, knockout))
        elif side1 is not None:
            outcome = OneForfeited(present_side=1, present=side1, reason=_forfeit_reason(2, match_order, knockout))
        elif side2 is not None:
            outcome = OneForfeited(present_side=2, present=side2, reason=_forfeit_reason(1, match_order, knockout))
        else:
            outcome = NoneDesignated()
        slots.append(PairingSlot(match_order=match_order, outcome=outcome))

    return slots
