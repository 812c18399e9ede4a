from numbers import Number
from typing import Any, Dict, Optional

from fishing_relay.constants import INITIAL_BOBBER_Y, INITIAL_GAME_STATE, PLAYER_Y


# Wire key -> attribute name for the public player fields
PUBLIC_FIELDS = {
    'name': 'name',
    'x': 'x',
    'y': 'y',
    'score': 'score',
    'fishCount': 'fish_count',
    'gameState': 'game_state',
    'fishingLine': 'fishing_line',
}

# Server-side counters only take numbers
NUMERIC_FIELDS = {'score', 'fishCount'}


def is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


class Player:
    """An angler seated in a room, keyed by its connection id."""

    def __init__(self, sid: str, name: Optional[str], x: int, y: int = PLAYER_Y):
        self.id = sid
        self.name = name
        self.x = x
        self.y = y
        self.score = 0
        self.fish_count = 0
        self.game_state = INITIAL_GAME_STATE
        self.fishing_line: Any = {'cast': False, 'bobberY': INITIAL_BOBBER_Y}
        # Client-reported fields outside the public set
        self.extra: Dict[str, Any] = {}

    def merge(self, fields: Dict[str, Any]) -> None:
        """Shallow-merge client-reported fields into this record.

        There is no schema: every key overwrites the previous value. The
        only exceptions are ``id``, which always stays the connection id,
        and the score counters, which ignore non-numeric values.
        """
        for key, value in fields.items():
            if key == 'id':
                continue
            if key in NUMERIC_FIELDS and not is_number(value):
                continue
            attr = PUBLIC_FIELDS.get(key)
            if attr:
                setattr(self, attr, value)
            else:
                self.extra[key] = value

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'x': self.x,
            'y': self.y,
            'score': self.score,
            'fishCount': self.fish_count,
            'gameState': self.game_state,
            'fishingLine': self.fishing_line,
        }

    def __repr__(self):
        return f'<Player {self.id} {self.name!r} x={self.x}>'
