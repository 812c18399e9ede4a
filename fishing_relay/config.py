import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    # Comma separated list, '*' allows any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    STATIC_FOLDER = os.environ.get('STATIC_FOLDER', 'public')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    MAX_PLAYERS_PER_ROOM = int(os.environ.get('MAX_PLAYERS_PER_ROOM', '4'))
    # Empty rooms older than this (ms since creation) are reaped
    ROOM_RETENTION_MS = int(os.environ.get('ROOM_RETENTION_MS', '300000'))
    REAPER_INTERVAL_SEC = int(os.environ.get('REAPER_INTERVAL_SEC', '60'))
    # Uncaught fish spawns are dropped after this many seconds
    FISH_SPAWN_TTL_SEC = int(os.environ.get('FISH_SPAWN_TTL_SEC', '30'))
