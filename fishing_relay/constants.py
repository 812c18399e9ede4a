"""Gameplay constants shared by the room and player models."""

# Horizontal layout of anglers on the dock
PLAYER_BASE_X = 200
PLAYER_SPACING_X = 50
PLAYER_Y = 100

INITIAL_GAME_STATE = 'ready'
INITIAL_BOBBER_Y = 400

DEFAULT_MAX_PLAYERS_PER_ROOM = 4

# Join rejection reasons
ROOM_FULL = 'ROOM_FULL'

__all__ = [
    'PLAYER_BASE_X',
    'PLAYER_SPACING_X',
    'PLAYER_Y',
    'INITIAL_GAME_STATE',
    'INITIAL_BOBBER_Y',
    'DEFAULT_MAX_PLAYERS_PER_ROOM',
    'ROOM_FULL',
]
