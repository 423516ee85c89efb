"""Outbound event payloads.

The room engine returns these; the Socket.IO layer delivers them.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from pmtrumps.models import Player, Room

ROOM_STATE = 'room-state'
PLAYER_LIST = 'player-list'
ROUND_RESULT = 'round-result'
GAME_OVER = 'game-over'

MSG_TIE = "It's a tie. Attacker chooses again"
MSG_NO_WINNER = 'No winner this round.'
MSG_COMMIT_FIRST = 'Click Next Round to continue'
MSG_ALREADY_OPEN = 'Round already in progress'
MSG_NEXT_ROUND = 'Next round started'


@dataclass(frozen=True)
class Event:
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)


def room_state(room: Room) -> Event:
    return Event(ROOM_STATE, {
        'code': room.code,
        'players': [p.to_dict() for p in room.players],
        'currentPlayer': room.current_turn,
    })


def player_list(room: Room) -> Event:
    return Event(PLAYER_LIST, {
        'players': [p.to_dict(include_deck=False) for p in room.players],
    })


def round_result(room: Room, message: str, stat: Optional[str] = None, winner: Optional[Player] = None) -> Event:
    return Event(ROUND_RESULT, {
        'code': room.code,
        'stat': stat,
        'players': [p.to_dict() for p in room.players],
        'winner': winner.id if winner else None,
        'message': message,
        'currentPlayer': room.current_turn,
        'awaitNextRound': room.pending_outcome is not None,
    })


def game_over(room: Room, champion: Player) -> Event:
    return Event(GAME_OVER, {
        'code': room.code,
        'winner': champion.id,
        'message': f'{champion.name} is the new Prime Minister!',
    })
