"""Round resolution: compare every player's top card on one statistic.

Resolution is pure. It reads top cards and never moves them; the room
engine applies the outcome on commit.
"""
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from pmtrumps.models import Card, Room
from .catalog import CATEGORICAL_STAT

# Highest rank first; the first matching substring wins
PEERAGE_RANKS = (
    ('duke', 6),
    ('marquess', 5),
    ('earl', 4),
    ('viscount', 3),
    ('baron', 2),
    ('knight', 1),
)

ABSENT_SCORE = -math.inf

_LEADING_NUMBER = re.compile(r'^\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)')


class ValueKind(str, Enum):
    VALID = 'valid'
    INVALID = 'invalid'
    ABSENT = 'absent'


@dataclass(frozen=True)
class StatValue:
    kind: ValueKind
    value: float = 0.0

    @property
    def score(self) -> float:
        """Comparison value: absent players sit below everything, invalid fields count as 0."""
        if self.kind is ValueKind.ABSENT:
            return ABSENT_SCORE
        if self.kind is ValueKind.INVALID:
            return 0.0
        return self.value


ABSENT = StatValue(ValueKind.ABSENT, ABSENT_SCORE)


@dataclass(frozen=True)
class Outcome:
    winner_index: Optional[int]
    tied: bool
    values: Tuple[StatValue, ...]

    @property
    def scores(self) -> Tuple[float, ...]:
        return tuple(v.score for v in self.values)

    @property
    def decisive(self) -> bool:
        return self.winner_index is not None


def peerage_rank(title) -> int:
    if not title:
        return 0
    normalized = str(title).lower()
    for needle, rank in PEERAGE_RANKS:
        if needle in normalized:
            return rank
    return 0


def parse_number(raw) -> Optional[float]:
    """Leading-number parse, so '70 years' reads as 70. None when nothing parses."""
    if raw is None:
        return None
    if isinstance(raw, (int, float)):
        return None if math.isnan(raw) else float(raw)
    match = _LEADING_NUMBER.match(str(raw))
    if not match:
        return None
    return float(match.group(1))


def stat_value(card: Optional[Card], stat_id: str) -> StatValue:
    if card is None:
        return ABSENT
    raw = card.stat(stat_id)
    if raw is None:
        return StatValue(ValueKind.INVALID, 0.0)
    if stat_id == CATEGORICAL_STAT:
        # A blank or unrecognised title is a commoner, the legitimate lowest rank
        return StatValue(ValueKind.VALID, float(peerage_rank(raw)))
    number = parse_number(raw)
    if number is None:
        return StatValue(ValueKind.INVALID, 0.0)
    return StatValue(ValueKind.VALID, number)


def compare_cards(top_cards: Sequence[Optional[Card]], stat_id: str) -> Outcome:
    values = tuple(stat_value(card, stat_id) for card in top_cards)
    scores = [v.score for v in values]
    max_score = max(scores, default=ABSENT_SCORE)
    if max_score == ABSENT_SCORE:
        return Outcome(winner_index=None, tied=False, values=values)

    leaders = [i for i, score in enumerate(scores) if score == max_score]
    if len(leaders) > 1:
        return Outcome(winner_index=None, tied=True, values=values)
    return Outcome(winner_index=leaders[0], tied=False, values=values)


def resolve_round(room: Room, stat_id: str) -> Outcome:
    return compare_cards([p.top_card for p in room.players], stat_id)
