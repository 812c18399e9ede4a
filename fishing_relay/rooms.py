import logging
import time
import uuid
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from fishing_relay.constants import (
    DEFAULT_MAX_PLAYERS_PER_ROOM,
    PLAYER_BASE_X,
    PLAYER_SPACING_X,
    ROOM_FULL,
)
from fishing_relay.models import Player

logger = logging.getLogger(__name__)

# emit(event, data, to=sid)
Emitter = Callable[..., None]


def now_ms() -> int:
    return int(time.time() * 1000)


def layout_x(index: int) -> int:
    return PLAYER_BASE_X + index * PLAYER_SPACING_X


class JoinResult(NamedTuple):
    accepted: bool
    reason: Optional[str] = None


class Room:
    """A group of up to ``max_players`` anglers sharing broadcast scope.

    The room holds a back-reference (the sid) to each member's connection
    and sends through ``emit``; the transport owns the connections.
    """

    def __init__(self, room_id: str, emit: Emitter,
                 max_players: int = DEFAULT_MAX_PLAYERS_PER_ROOM,
                 clock: Callable[[], int] = now_ms):
        self.id = room_id
        self.players: Dict[str, Player] = {}
        self.fish_spawns: List[Dict[str, Any]] = []
        self.max_players = max_players
        self._emit = emit
        self._clock = clock
        self.created_at = clock()

    def __len__(self):
        return len(self.players)

    def __contains__(self, sid):
        return sid in self.players

    @property
    def is_empty(self) -> bool:
        return not self.players

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.max_players

    # -------------------- Membership -------------------- #

    def join(self, sid: str, name: Optional[str]) -> JoinResult:
        if self.is_full:
            return JoinResult(False, ROOM_FULL)
        self.players[sid] = Player(sid, name, x=layout_x(len(self.players)))
        logger.info(f"[room-join] room={self.id} sid={sid} name={name} size={len(self.players)}")
        self.broadcast_to_others(sid, 'playerJoined', {
            'playerId': sid,
            'playerName': name,
            'players': self.snapshot(),
        })
        return JoinResult(True)

    def leave(self, sid: str) -> None:
        if self.players.pop(sid, None) is None:
            return
        # Full re-layout: every survivor shifts to its new index
        for index, player in enumerate(self.players.values()):
            player.x = layout_x(index)
        logger.info(f"[room-leave] room={self.id} sid={sid} size={len(self.players)}")
        self.broadcast('playerLeft', {
            'playerId': sid,
            'players': self.snapshot(),
        })

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        return {sid: player.to_dict() for sid, player in self.players.items()}

    # -------------------- Relayed events -------------------- #

    def apply_state_update(self, sid: str, fields: Dict[str, Any]) -> None:
        player = self.players.get(sid)
        if player is None:
            return
        player.merge(fields)
        payload = dict(fields)
        payload['playerId'] = sid
        self.broadcast_to_others(sid, 'playerStateUpdate', payload)

    def record_catch(self, sid: str, fish_name: Any, fish_value: float) -> None:
        """Add a catch to the player's counters and announce it to everyone.

        The client is trusted: the value is not checked against any fish
        table and repeated calls are counted every time.
        """
        player = self.players.get(sid)
        if player is None:
            return
        player.score += fish_value
        player.fish_count += 1
        self.broadcast('playerCaughtFish', {
            'playerId': sid,
            'playerName': player.name,
            'fishName': fish_name,
            'fishValue': fish_value,
            'newScore': player.score,
            'newFishCount': player.fish_count,
        })

    def broadcast_chat(self, sid: str, message: Any) -> None:
        player = self.players.get(sid)
        if player is None:
            return
        self.broadcast('chatMessage', {
            'playerId': sid,
            'playerName': player.name,
            'message': message,
            'timestamp': self._clock(),
        })

    def broadcast_cast(self, sid: str) -> None:
        if sid not in self.players:
            return
        self.broadcast_to_others(sid, 'playerCast', {'playerId': sid})

    # -------------------- Fish spawns -------------------- #

    def spawn_fish(self, fish_data: Dict[str, Any]) -> Dict[str, Any]:
        spawn = dict(fish_data)
        spawn['id'] = uuid.uuid4().hex[:9]
        spawn['spawnTime'] = self._clock()
        self.fish_spawns.append(spawn)
        self.broadcast('fishSpawned', spawn)
        return spawn

    def expire_fish(self, spawn_id: str) -> bool:
        before = len(self.fish_spawns)
        self.fish_spawns = [f for f in self.fish_spawns if f['id'] != spawn_id]
        return len(self.fish_spawns) != before

    # -------------------- Broadcasting helpers -------------------- #

    def broadcast(self, event: str, data: Any = None) -> None:
        for sid in list(self.players):
            self._emit(event, data, to=sid)

    def broadcast_to_others(self, exclude_sid: str, event: str, data: Any = None) -> None:
        for sid in list(self.players):
            if sid != exclude_sid:
                self._emit(event, data, to=sid)

    def __repr__(self):
        return f'<Room {self.id} players={len(self.players)}>'


class RoomDirectory:
    """Process-wide mapping of room id to :class:`Room`.

    Rooms are created lazily on first join and removed either right after
    the last member leaves or by the idle reaper. Removal is idempotent so
    both paths can race without error.
    """

    def __init__(self, emit: Emitter,
                 max_players: int = DEFAULT_MAX_PLAYERS_PER_ROOM,
                 clock: Callable[[], int] = now_ms):
        self.rooms: Dict[str, Room] = {}
        self.max_players = max_players
        self._emit = emit
        self._clock = clock

    def __len__(self):
        return len(self.rooms)

    def __contains__(self, room_id):
        return room_id in self.rooms

    def ids(self) -> List[str]:
        return list(self.rooms)

    def get(self, room_id: str) -> Optional[Room]:
        return self.rooms.get(room_id)

    def get_or_create(self, room_id: str) -> Room:
        room = self.rooms.get(room_id)
        if room is None:
            room = Room(room_id, self._emit, max_players=self.max_players, clock=self._clock)
            self.rooms[room_id] = room
            logger.info(f"[room-create] room={room_id}")
        return room

    def remove(self, room_id: str) -> bool:
        if self.rooms.pop(room_id, None) is None:
            return False
        logger.info(f"[room-delete] room={room_id}")
        return True

    def remove_if_empty(self, room_id: str) -> bool:
        room = self.rooms.get(room_id)
        if room is None or not room.is_empty:
            return False
        return self.remove(room_id)

    def sweep_idle(self, retention_ms: int, now: int) -> List[str]:
        """Remove empty rooms created more than ``retention_ms`` before ``now``.

        Age is measured from room creation, not from when the room emptied.
        """
        stale = [
            room_id for room_id, room in self.rooms.items()
            if room.is_empty and now - room.created_at > retention_ms
        ]
        for room_id in stale:
            self.remove(room_id)
        return stale
