import threading
from typing import Dict, Optional, Set, Tuple

Binding = Tuple[str, Optional[int]]


class ConnectionRegistry:
    """Tracks which socket session is attached to which room and player.

    Connections are transport state. Game logic never reads them, and they
    can be attached or detached without taking a room lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._by_sid: Dict[str, Binding] = {}
        self._by_room: Dict[str, Set[str]] = {}

    def attach(self, sid: str, code: str, player_id: Optional[int]) -> None:
        with self._lock:
            self._forget(sid)
            self._by_sid[sid] = (code, player_id)
            self._by_room.setdefault(code, set()).add(sid)

    def detach(self, sid: str) -> Optional[Binding]:
        with self._lock:
            return self._forget(sid)

    def count(self, code: str) -> int:
        with self._lock:
            return len(self._by_room.get(code, set()))

    def clear(self) -> None:
        with self._lock:
            self._by_sid.clear()
            self._by_room.clear()

    def _forget(self, sid: str) -> Optional[Binding]:
        binding = self._by_sid.pop(sid, None)
        if binding:
            members = self._by_room.get(binding[0])
            if members is not None:
                members.discard(sid)
                if not members:
                    self._by_room.pop(binding[0], None)
        return binding
