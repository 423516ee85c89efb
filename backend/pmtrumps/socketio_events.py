import json
from typing import Any, Dict, Iterable

from flask import current_app, request
from flask_socketio import emit, join_room
from pmtrumps import connections, registry, socketio
from pmtrumps.errors import MalformedMessage
from pmtrumps.services.game.events import Event

NAMESPACE = '/ws'


def room_channel(code: str) -> str:
    return f"room:{code}"


def broadcast(code: str, events: Iterable[Event], namespace: str = NAMESPACE) -> None:
    """Deliver engine events to every socket in the room, in order."""
    for event in events:
        socketio.emit(event.name, event.payload, to=room_channel(code), namespace=namespace)


def decode_message(data) -> Dict[str, Any]:
    """Accept a dict or a JSON object string carrying a room ``code``."""
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except ValueError as exc:
            raise MalformedMessage(f'Undecodable message: {exc}') from exc
    if not isinstance(data, dict):
        raise MalformedMessage('Message must be an object')
    if not data.get('code'):
        raise MalformedMessage('Message is missing a room code')
    return data


def _get_sid() -> str:
    return request.sid  # type: ignore[attr-defined]


def _as_player_id(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _locate(data):
    """Decode ``data`` and find its room. Returns (message, machine) or (None, None) to drop it."""
    try:
        message = decode_message(data)
    except MalformedMessage as exc:
        current_app.logger.debug(f"[drop] sid={_get_sid()} malformed: {exc}")
        return None, None
    machine = registry.find(message['code'])
    if machine is None:
        current_app.logger.debug(f"[drop] sid={_get_sid()} unknown room={message['code']!r}")
        return None, None
    return message, machine


def handle_connect(auth=None):
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(reason=None):
    binding = connections.detach(_get_sid())
    if not binding:
        return
    code = binding[0]
    machine = registry.find(code)
    # Finished rooms are dropped once their last connection leaves
    if machine is not None and machine.finished and connections.count(code) == 0:
        registry.remove(code)


def handle_join_room(data=None):
    message, machine = _locate(data)
    if machine is None:
        return
    code = machine.code
    player_id = _as_player_id(message.get('playerId'))
    name = (message.get('name') or '').strip() if isinstance(message.get('name'), str) else ''

    join_room(room_channel(code))
    player = machine.rename_player(player_id, name) if player_id is not None else None
    connections.attach(_get_sid(), code, player.id if player else None)
    current_app.logger.info(f"[socket-join] room={code} player={player.id if player else None} sid={_get_sid()}")
    broadcast(code, machine.state_events(), namespace=request.namespace)


def handle_play_round(data=None):
    message, machine = _locate(data)
    if machine is None:
        return
    stat = message.get('stat')
    if not isinstance(stat, str) or not stat:
        current_app.logger.debug(f"[drop] room={machine.code} play-round without a stat")
        return
    broadcast(machine.code, machine.select_stat(stat), namespace=request.namespace)


def handle_next_round(data=None):
    message, machine = _locate(data)
    if machine is None:
        return
    broadcast(machine.code, machine.commit(), namespace=request.namespace)


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = [NAMESPACE, '/'] if testing else [NAMESPACE]
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
        socketio.on_event('join-room', handle_join_room, namespace=namespace)
        socketio.on_event('play-round', handle_play_round, namespace=namespace)
        socketio.on_event('next-round', handle_next_round, namespace=namespace)
