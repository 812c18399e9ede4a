import os

from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


def _relay():
    return current_app.extensions['fishing_relay']


@main.route('/')
def index():
    static_folder = current_app.static_folder
    if static_folder and os.path.isfile(os.path.join(static_folder, 'index.html')):
        return current_app.send_static_file('index.html')
    return jsonify({'message': 'Welcome to the fishing relay server!'})


@main.route('/health')
def health():
    relay = _relay()
    with relay.dispatcher.lock:
        return jsonify({
            'status': 'ok',
            'rooms': len(relay.directory),
            'connections': len(relay.registry),
        })


@main.route('/api/rooms/<string:room_id>')
def room_state(room_id):
    relay = _relay()
    with relay.dispatcher.lock:
        room = relay.directory.get(room_id)
        if room is None:
            return jsonify({'error': 'Room not found'}), 404
        return jsonify({
            'roomId': room.id,
            'createdAt': room.created_at,
            'players': room.snapshot(),
        })
