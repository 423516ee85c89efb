import logging
from typing import List, Optional, Sequence

from pmtrumps.errors import InvalidTransition
from pmtrumps.models import Card, Player, Room, RoomPhase
from .shuffle import Shuffler

logger = logging.getLogger(__name__)


def deal_round_robin(cards: Sequence[Card], players: Sequence[Player]) -> List[Card]:
    """Append an equal share of ``cards`` to each player's deck in seat order.

    Card ``i`` goes to player ``i % len(players)``. Returns the cards that
    did not divide evenly.
    """
    if not players:
        return list(cards)
    per_player = len(cards) // len(players)
    to_deal = per_player * len(players)
    for i in range(to_deal):
        players[i % len(players)].deck.append(cards[i])
    return list(cards[to_deal:])


class Dealer:
    def __init__(self, shuffler: Optional[Shuffler] = None):
        self.shuffler = shuffler or Shuffler()

    def deal_initial(self, room: Room, catalog: Sequence[Card]) -> None:
        """Shuffle the catalog and split it evenly between the room's players."""
        if not room.players:
            return
        for player in room.players:
            player.deck = []
        shuffled = self.shuffler.shuffled(catalog)
        room.unused_pile = deal_round_robin(shuffled, room.players)
        room.total_dealt = len(shuffled) - len(room.unused_pile)
        room.dealt = True
        logger.info(
            f"[deal] room={room.code} players={len(room.players)} "
            f"per_player={room.total_dealt // len(room.players)} unused={len(room.unused_pile)}"
        )

    def rebalance(self, room: Room) -> None:
        """Redistribute cards after a late join, keeping every top card in place.

        Players without a top card (the newcomer, or anyone who ran out) get
        one from the shuffled pool first. Cards in the tie pile stay there.
        """
        if room.phase is RoomPhase.AWAITING_COMMIT:
            raise InvalidTransition(f'Cannot rebalance room {room.code} while a round awaits commit')

        tops = []
        pool = []
        for player in room.players:
            tops.append(player.deck[0] if player.deck else None)
            pool.extend(player.deck[1:])
            player.deck = []
        pool.extend(room.unused_pile)
        room.unused_pile = []
        pool = self.shuffler.shuffled(pool)

        for player, top in zip(room.players, tops):
            if top is None and pool:
                top = pool.pop(0)
            if top is not None:
                player.deck.append(top)

        room.unused_pile = deal_round_robin(pool, room.players)
        # Tie pile cards are still in play and will be won back
        room.total_dealt = sum(len(p.deck) for p in room.players) + len(room.tie_pile)
        room.pending_rebalance = False
        logger.info(
            f"[rebalance] room={room.code} players={len(room.players)} "
            f"counts={[len(p.deck) for p in room.players]} unused={len(room.unused_pile)}"
        )
