from typing import Dict, Optional


class ConnectionRegistry:
    """Tracks which room each live connection (sid) has joined."""

    def __init__(self):
        self._sid_to_room: Dict[str, str] = {}

    def __len__(self):
        return len(self._sid_to_room)

    def __contains__(self, sid):
        return sid in self._sid_to_room

    def bind(self, sid: str, room_id: str) -> None:
        self._sid_to_room[sid] = room_id

    def resolve(self, sid: str) -> Optional[str]:
        return self._sid_to_room.get(sid)

    def release(self, sid: str) -> Optional[str]:
        return self._sid_to_room.pop(sid, None)
