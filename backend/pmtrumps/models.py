from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional


@dataclass(frozen=True, eq=False)
class Card:
    """One catalog entry. Cards are shared by reference and never copied."""
    name: str
    image: str
    stats: Mapping[str, str] = field(default_factory=dict)

    def stat(self, stat_id: str) -> Optional[str]:
        return self.stats.get(stat_id)

    def to_dict(self) -> Dict[str, str]:
        # Same flat shape as a catalog row so clients can read stats by column name
        data = dict(self.stats)
        data['Name'] = self.name
        data['ImageFileName'] = self.image
        return data


@dataclass
class Player:
    id: int
    name: str
    deck: List[Card] = field(default_factory=list)

    @property
    def top_card(self) -> Optional[Card]:
        return self.deck[0] if self.deck else None

    def to_dict(self, include_deck=True):
        data = {'id': self.id, 'name': self.name}
        if include_deck:
            data['deck'] = [card.to_dict() for card in self.deck]
        return data


class RoomPhase(str, Enum):
    OPEN = 'open'
    AWAITING_COMMIT = 'awaiting_commit'


@dataclass(frozen=True)
class PendingOutcome:
    winner_index: Optional[int]
    stat: str
    tied: bool = False


@dataclass
class Room:
    code: str
    players: List[Player] = field(default_factory=list)
    tie_pile: List[Card] = field(default_factory=list)
    unused_pile: List[Card] = field(default_factory=list)
    current_turn: int = 0
    pending_outcome: Optional[PendingOutcome] = None
    total_dealt: int = 0
    dealt: bool = False
    pending_rebalance: bool = False
    champion_id: Optional[int] = None

    @property
    def phase(self) -> RoomPhase:
        if self.pending_outcome is None:
            return RoomPhase.OPEN
        return RoomPhase.AWAITING_COMMIT

    @property
    def finished(self) -> bool:
        return self.champion_id is not None

    def player_by_id(self, player_id) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def card_count(self) -> int:
        return sum(len(p.deck) for p in self.players) + len(self.tie_pile) + len(self.unused_pile)

    def to_dict(self):
        return {
            'code': self.code,
            'players': [p.to_dict() for p in self.players],
            'currentPlayer': self.current_turn,
            'phase': self.phase.value,
            'awaitNextRound': self.phase is RoomPhase.AWAITING_COMMIT,
            'tiePile': len(self.tie_pile),
            'unusedPile': len(self.unused_pile),
            'totalDealt': self.total_dealt,
            'finished': self.finished,
            'champion': self.champion_id,
        }
