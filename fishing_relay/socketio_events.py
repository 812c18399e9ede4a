import logging

from flask import current_app, request

from fishing_relay import socketio
from fishing_relay.dispatcher import RelayDispatcher

logger = logging.getLogger(__name__)


def _get_sid() -> str:
    return request.sid  # type: ignore


def _dispatcher() -> RelayDispatcher:
    return current_app.extensions['fishing_relay'].dispatcher


def handle_connect():
    logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(*args):
    logger.info(f"[disconnect] sid={_get_sid()}")
    _dispatcher().disconnect(_get_sid())


def handle_join_room(data=None):
    _dispatcher().join_room(_get_sid(), data)


def handle_update_player_state(data=None):
    _dispatcher().update_player_state(_get_sid(), data)


def handle_fish_caught(data=None):
    _dispatcher().fish_caught(_get_sid(), data)


def handle_send_chat_message(data=None):
    _dispatcher().send_chat_message(_get_sid(), data)


def handle_player_cast(data=None):
    _dispatcher().player_cast(_get_sid(), data)


def handle_spawn_fish(data=None):
    _dispatcher().spawn_fish(_get_sid(), data)


EVENT_HANDLERS = {
    'connect': handle_connect,
    'disconnect': handle_disconnect,
    'joinRoom': handle_join_room,
    'updatePlayerState': handle_update_player_state,
    'fishCaught': handle_fish_caught,
    'sendChatMessage': handle_send_chat_message,
    'playerCast': handle_player_cast,
    'spawnFish': handle_spawn_fish,
}


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the relay's Socket.IO event handlers on ``namespace``."""
    for event, handler in EVENT_HANDLERS.items():
        socketio.on_event(event, handler, namespace=namespace)
