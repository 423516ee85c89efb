"""Game domain services: catalog, dealing, round resolution and rooms.

This package contains the in-memory game engine imported by HTTP routes
and socket handlers, keeping transport concerns separated from core game
mechanics. Nothing here performs network I/O.
"""
from .registry import RoomRegistry, normalize_code
from .room import RoomStateMachine, find_champion

__all__ = ['RoomRegistry', 'RoomStateMachine', 'find_champion', 'normalize_code']
