import logging
import threading
from contextlib import nullcontext
from typing import Callable, List, Optional

from fishing_relay import socketio
from fishing_relay.rooms import RoomDirectory, now_ms

logger = logging.getLogger(__name__)


class IdleReaper:
    """Periodically deletes rooms that sat empty past the retention window.

    - ``sweep`` can be called directly (tests, admin hooks)
    - ``start`` runs the sweep every ``interval_sec`` as a Socket.IO background task
    - Shares the dispatcher lock so a sweep never interleaves with an event
    """

    def __init__(self, directory: RoomDirectory, retention_ms: int = 300000,
                 interval_sec: float = 60, lock: Optional[threading.RLock] = None,
                 clock: Callable[[], int] = now_ms):
        self.directory = directory
        self.retention_ms = retention_ms
        self.interval_sec = interval_sec
        self._lock = lock
        self._clock = clock
        self._stopped = threading.Event()
        self._task = None

    def sweep(self) -> List[str]:
        with self._lock if self._lock is not None else nullcontext():
            removed = self.directory.sweep_idle(self.retention_ms, self._clock())
        for room_id in removed:
            logger.info(f"[reaper-sweep] cleaned up old room={room_id}")
        return removed

    def _run(self, stopped: threading.Event) -> None:
        logger.info(f"[reaper-start] interval={self.interval_sec}s retention={self.retention_ms}ms")
        while not stopped.is_set():
            socketio.sleep(self.interval_sec)
            if stopped.is_set():
                break
            self.sweep()
        logger.info("[reaper-stop]")

    def start(self) -> None:
        if self._task is not None:
            return
        # Each run owns its stop event so a stopped loop never resumes
        self._stopped = threading.Event()
        self._task = socketio.start_background_task(self._run, self._stopped)

    def stop(self) -> None:
        self._stopped.set()
        self._task = None
