import logging
import threading
from typing import Iterable, List, Optional, Sequence

from pmtrumps.errors import GameFinished, RoomFull
from pmtrumps.models import Card, PendingOutcome, Player, Room, RoomPhase
from . import events
from .catalog import STAT_LABELS, stat_label
from .dealer import Dealer
from .resolver import resolve_round

logger = logging.getLogger(__name__)

DEFAULT_MAX_PLAYERS = 6


def find_champion(room: Room) -> Optional[Player]:
    """Return the game winner, or None while the game is still going.

    The game ends when one player holds every dealt card, or when only one
    player has cards left.
    """
    if room.total_dealt > 0:
        for player in room.players:
            if len(player.deck) == room.total_dealt:
                return player
    active = [p for p in room.players if p.deck]
    if len(active) == 1:
        return active[0]
    return None


class RoomStateMachine:
    """Owns one room and serializes every transition on it.

    Rounds are two-phase: ``select_stat`` announces the outcome without
    moving cards, ``commit`` moves them. Each public method holds the room
    lock for its whole read-modify-write and returns the events to
    broadcast once it has returned.
    """

    def __init__(
        self,
        room: Room,
        catalog: Sequence[Card],
        dealer: Optional[Dealer] = None,
        stats: Optional[Iterable[str]] = None,
        max_players: int = DEFAULT_MAX_PLAYERS,
    ):
        self.room = room
        self.catalog = tuple(catalog)
        self.dealer = dealer or Dealer()
        self.stats = frozenset(stats if stats is not None else STAT_LABELS)
        self.max_players = max_players
        self._lock = threading.RLock()

    @property
    def code(self) -> str:
        return self.room.code

    @property
    def finished(self) -> bool:
        with self._lock:
            return self.room.finished

    def add_player(self, name: Optional[str] = None) -> Player:
        with self._lock:
            room = self.room
            if room.finished:
                raise GameFinished(room.code)
            if len(room.players) >= self.max_players:
                raise RoomFull(room.code, self.max_players)

            player_id = len(room.players) + 1
            player = Player(id=player_id, name=name or f'Player {player_id}')
            room.players.append(player)

            if not room.dealt:
                self.dealer.deal_initial(room, self.catalog)
            elif room.phase is RoomPhase.AWAITING_COMMIT:
                # Top cards are mid-comparison; redistribute once the round commits
                room.pending_rebalance = True
                logger.info(f"[rebalance-deferred] room={room.code} player={player_id}")
            else:
                self.dealer.rebalance(room)
            logger.info(f"[join] room={room.code} player={player_id} name={player.name!r} count={len(room.players)}")
            return player

    def rename_player(self, player_id: int, name: str) -> Optional[Player]:
        with self._lock:
            player = self.room.player_by_id(player_id)
            if player and name:
                player.name = name
            return player

    def select_stat(self, stat: str) -> List[events.Event]:
        with self._lock:
            room = self.room
            if room.finished:
                return [self._game_over_event()]
            if room.phase is RoomPhase.AWAITING_COMMIT:
                logger.debug(f"[duplicate-select] room={room.code} stat={stat}")
                return [events.round_result(room, events.MSG_COMMIT_FIRST)]
            if stat not in self.stats:
                logger.warning(f"[invalid-stat] room={room.code} stat={stat!r}")
                return [events.round_result(room, f'Unknown statistic: {stat}')]

            outcome = resolve_round(room, stat)
            room.pending_outcome = PendingOutcome(outcome.winner_index, stat, outcome.tied)

            winner = None
            if outcome.decisive:
                room.current_turn = outcome.winner_index
                winner = room.players[outcome.winner_index]
                message = f'{winner.name} wins - {stat_label(stat)}'
            elif outcome.tied:
                # The attacker chooses again
                message = events.MSG_TIE
            else:
                room.current_turn = (room.current_turn + 1) % len(room.players)
                message = events.MSG_NO_WINNER

            logger.info(
                f"[round-announced] room={room.code} stat={stat} "
                f"winner={winner.id if winner else None} tied={outcome.tied} scores={outcome.scores} turn={room.current_turn}"
            )
            return [events.round_result(room, message, stat=stat, winner=winner)]

    def commit(self) -> List[events.Event]:
        with self._lock:
            room = self.room
            if room.finished:
                return [self._game_over_event()]
            pending = room.pending_outcome
            if pending is None:
                logger.debug(f"[duplicate-commit] room={room.code}")
                return [events.round_result(room, events.MSG_ALREADY_OPEN)]

            if pending.tied:
                for player in room.players:
                    if player.deck:
                        room.tie_pile.append(player.deck.pop(0))
            elif pending.winner_index is not None:
                taken = [p.deck.pop(0) for p in room.players if p.deck]
                taken.extend(room.tie_pile)
                room.tie_pile = []
                room.players[pending.winner_index].deck.extend(taken)

            room.pending_outcome = None
            logger.info(
                f"[round-committed] room={room.code} stat={pending.stat} tied={pending.tied} "
                f"counts={[len(p.deck) for p in room.players]} tie_pile={len(room.tie_pile)} cards={room.card_count()}"
            )
            out = [events.round_result(room, events.MSG_NEXT_ROUND)]

            if room.pending_rebalance:
                self.dealer.rebalance(room)
                out.extend([events.room_state(room), events.player_list(room)])

            champion = find_champion(room)
            if champion is not None:
                room.champion_id = champion.id
                logger.info(f"[game-over] room={room.code} champion={champion.id} name={champion.name!r}")
                out.append(events.game_over(room, champion))
            return out

    def state_events(self) -> List[events.Event]:
        with self._lock:
            return [events.room_state(self.room), events.player_list(self.room)]

    def snapshot(self):
        with self._lock:
            return self.room.to_dict()

    def players_snapshot(self):
        with self._lock:
            return [p.to_dict() for p in self.room.players]

    def _game_over_event(self) -> events.Event:
        return events.game_over(self.room, self.room.player_by_id(self.room.champion_id))
