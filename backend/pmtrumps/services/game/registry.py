import csv
import logging
import random
import string
import threading
from typing import Dict, Optional, Sequence, Tuple

from pmtrumps.errors import RoomNotFound
from pmtrumps.models import Card, Room
from .catalog import catalog_stats, load_catalog
from .dealer import Dealer
from .room import DEFAULT_MAX_PLAYERS, RoomStateMachine
from .shuffle import Shuffler, make_rng

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
DEFAULT_CODE_LENGTH = 5


def normalize_code(code) -> str:
    return str(code or '').strip().upper()


class RoomRegistry:
    """Maps room codes to their state machines.

    The registry lock only guards the code map. Game transitions are
    serialized by each room's own lock.
    """

    def __init__(
        self,
        app=None,
        catalog: Sequence[Card] = (),
        rng: Optional[random.Random] = None,
        max_players: int = DEFAULT_MAX_PLAYERS,
        code_length: int = DEFAULT_CODE_LENGTH,
    ):
        self._lock = threading.Lock()
        self._rooms: Dict[str, RoomStateMachine] = {}
        self.configure(catalog=catalog, rng=rng, max_players=max_players, code_length=code_length)
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> None:
        path = app.config.get('CARDS_CSV_PATH')
        try:
            catalog = load_catalog(path) if path else ()
        except (OSError, ValueError, csv.Error) as exc:
            app.logger.error(f"[catalog] failed to load {path}: {exc}")
            catalog = ()
        self.configure(
            catalog=catalog,
            rng=make_rng(app.config.get('SHUFFLE_SEED')),
            max_players=int(app.config.get('MAX_PLAYERS', DEFAULT_MAX_PLAYERS)),
            code_length=int(app.config.get('ROOM_CODE_LENGTH', DEFAULT_CODE_LENGTH)),
        )
        app.extensions['room_registry'] = self

    def configure(self, catalog=(), rng=None, max_players=DEFAULT_MAX_PLAYERS, code_length=DEFAULT_CODE_LENGTH) -> None:
        """Reset the registry with a new catalog and random source. Existing rooms are dropped."""
        with self._lock:
            self.catalog = tuple(catalog)
            self.rng = rng or make_rng()
            self.max_players = max_players
            self.code_length = code_length
            self._rooms = {}

    def generate_code(self) -> str:
        """Short code not used by any active room. Call with the registry lock held."""
        while True:
            code = ''.join(self.rng.choices(CODE_ALPHABET, k=self.code_length))
            if code not in self._rooms:
                return code
            logger.warning(f"[room-code] collision on {code}, regenerating")

    def create_room(self, name: Optional[str] = None) -> Tuple[str, RoomStateMachine]:
        with self._lock:
            code = self.generate_code()
            machine = RoomStateMachine(
                Room(code=code),
                self.catalog,
                dealer=Dealer(Shuffler(self.rng)),
                stats=catalog_stats(self.catalog),
                max_players=self.max_players,
            )
            machine.add_player(name or 'Player 1')
            self._rooms[code] = machine
        logger.info(f"[room-created] room={code} cards={len(self.catalog)}")
        return code, machine

    def join_room(self, code, name: Optional[str] = None) -> Tuple[int, RoomStateMachine]:
        machine = self.get(code)
        player = machine.add_player(name)
        return player.id, machine

    def find(self, code) -> Optional[RoomStateMachine]:
        with self._lock:
            return self._rooms.get(normalize_code(code))

    def get(self, code) -> RoomStateMachine:
        machine = self.find(code)
        if machine is None:
            raise RoomNotFound(normalize_code(code))
        return machine

    def remove(self, code) -> Optional[RoomStateMachine]:
        with self._lock:
            machine = self._rooms.pop(normalize_code(code), None)
        if machine is not None:
            logger.info(f"[room-removed] room={machine.code}")
        return machine

    def __contains__(self, code) -> bool:
        return self.find(code) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)
