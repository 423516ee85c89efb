from flask import Blueprint, jsonify, request, current_app
from pmtrumps import registry
from pmtrumps.errors import GameFinished, RoomFull, RoomNotFound
from pmtrumps.socketio_events import broadcast

rooms = Blueprint('rooms', __name__)


@rooms.route('', methods=['POST'])
def create_room():
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip() or None
    code, machine = registry.create_room(name)
    current_app.logger.info(f"[create] room={code} by={name or 'Player 1'}")
    return jsonify({
        'code': code,
        'players': machine.players_snapshot(),
    }), 201


@rooms.route('/join', methods=['POST'])
def join_room():
    data = request.get_json(silent=True) or {}
    code = data.get('code')
    name = (data.get('name') or '').strip() or None
    if not code:
        return jsonify({'error': 'Room code is required'}), 400

    try:
        player_id, machine = registry.join_room(code, name)
    except RoomNotFound:
        return jsonify({'error': 'Room not found'}), 404
    except RoomFull as exc:
        return jsonify({'error': str(exc)}), 400
    except GameFinished:
        return jsonify({'error': 'This game has already finished'}), 403

    # Deliver only after the join transition has released the room lock
    broadcast(machine.code, machine.state_events())
    return jsonify({
        'playerId': player_id,
        'code': machine.code,
        'players': machine.players_snapshot(),
    }), 201


@rooms.route('/<string:code>/state', methods=['GET'])
def get_room_state(code):
    machine = registry.find(code)
    if machine is None:
        return jsonify({'error': 'Room not found'}), 404
    return jsonify(machine.snapshot())
