"""Game errors shared by the room engine and the transport layer."""


class TrumpsError(Exception):
    """Base class for every game error."""


class RoomNotFound(TrumpsError):
    def __init__(self, code):
        self.code = code
        super().__init__(f'Room {code} not found')


class RoomFull(TrumpsError):
    def __init__(self, code, max_players):
        self.code = code
        self.max_players = max_players
        super().__init__(f'Room is full (max {max_players} players)')


class GameFinished(TrumpsError):
    def __init__(self, code):
        self.code = code
        super().__init__(f'Game in room {code} has already finished')


class InvalidTransition(TrumpsError):
    """A room operation was attempted in a phase that does not allow it."""


class MalformedMessage(TrumpsError):
    """An inbound socket message could not be decoded."""
