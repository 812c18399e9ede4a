import logging
import threading
from typing import Any, Callable, Dict, Optional

from fishing_relay.models import is_number
from fishing_relay.registry import ConnectionRegistry
from fishing_relay.rooms import Emitter, Room, RoomDirectory

logger = logging.getLogger(__name__)

# schedule(delay_sec, fn, *args)
Scheduler = Callable[..., None]


class RelayDispatcher:
    """Routes inbound Socket.IO events to the sender's room.

    Every handler runs under ``lock`` so an event, including all of its
    broadcasts, completes before the next one touches room state. Events
    from connections without a resolvable room are dropped with no reply.
    """

    def __init__(self, directory: RoomDirectory, registry: ConnectionRegistry,
                 emit: Emitter, schedule: Optional[Scheduler] = None,
                 fish_spawn_ttl_sec: float = 30):
        self.directory = directory
        self.registry = registry
        self.lock = threading.RLock()
        self._emit = emit
        self._schedule = schedule
        self.fish_spawn_ttl_sec = fish_spawn_ttl_sec

    def _member_room(self, sid: str, event: str) -> Optional[Room]:
        room_id = self.registry.resolve(sid)
        room = self.directory.get(room_id) if room_id is not None else None
        if room is None or sid not in room:
            logger.debug(f"[drop] event={event} sid={sid} room={room_id}")
            return None
        return room

    def join_room(self, sid: str, data: Optional[Dict[str, Any]]) -> None:
        data = data if isinstance(data, dict) else {}
        room_id = data.get('roomId')
        player_name = data.get('playerName')
        if room_id is None:
            self._emit('error', {'message': 'roomId is required'}, to=sid)
            return
        if isinstance(room_id, bool) or not isinstance(room_id, (str, int)):
            self._emit('error', {'message': 'roomId must be a string or number'}, to=sid)
            return
        with self.lock:
            current = self.registry.resolve(sid)
            if current is not None:
                self._emit('error', {'message': f'Already in room {current}'}, to=sid)
                return
            room = self.directory.get_or_create(room_id)
            result = room.join(sid, player_name)
            if not result.accepted:
                logger.info(f"[room-full] room={room_id} sid={sid}")
                self._emit('roomFull', None, to=sid)
                return
            self.registry.bind(sid, room_id)
            self._emit('roomJoined', {
                'roomId': room_id,
                'players': room.snapshot(),
                'playerId': sid,
            }, to=sid)

    def update_player_state(self, sid: str, data: Optional[Dict[str, Any]]) -> None:
        if not isinstance(data, dict):
            return
        with self.lock:
            room = self._member_room(sid, 'updatePlayerState')
            if room:
                room.apply_state_update(sid, data)

    def fish_caught(self, sid: str, data: Optional[Dict[str, Any]]) -> None:
        data = data if isinstance(data, dict) else {}
        fish_value = data.get('fishValue')
        with self.lock:
            room = self._member_room(sid, 'fishCaught')
            if room is None:
                return
            if not is_number(fish_value):
                logger.warning(f"[drop] event=fishCaught sid={sid} bad fishValue={fish_value!r}")
                return
            room.record_catch(sid, data.get('fishName'), fish_value)

    def send_chat_message(self, sid: str, data: Optional[Dict[str, Any]]) -> None:
        data = data if isinstance(data, dict) else {}
        with self.lock:
            room = self._member_room(sid, 'sendChatMessage')
            if room:
                room.broadcast_chat(sid, data.get('message'))

    def player_cast(self, sid: str, data: Any = None) -> None:
        with self.lock:
            room = self._member_room(sid, 'playerCast')
            if room:
                room.broadcast_cast(sid)

    def spawn_fish(self, sid: str, data: Optional[Dict[str, Any]]) -> None:
        fish_data = data if isinstance(data, dict) else {}
        with self.lock:
            room = self._member_room(sid, 'spawnFish')
            if room is None:
                return
            spawn = room.spawn_fish(fish_data)
        if self._schedule is not None:
            self._schedule(self.fish_spawn_ttl_sec, self.expire_fish, room.id, spawn['id'])

    def expire_fish(self, room_id: str, spawn_id: str) -> None:
        with self.lock:
            room = self.directory.get(room_id)
            # Room may be gone or the spawn already removed
            if room is not None and room.expire_fish(spawn_id):
                logger.debug(f"[fish-expire] room={room_id} spawn={spawn_id}")

    def disconnect(self, sid: str) -> None:
        with self.lock:
            room_id = self.registry.release(sid)
            if room_id is None:
                return
            room = self.directory.get(room_id)
            if room is None:
                return
            room.leave(sid)
            self.directory.remove_if_empty(room_id)
