"""
Debounced rebuild trigger for watch mode.

Every filesystem event restarts a short timer; only when the timer runs out
with no further events does a rebuild fire. Events arriving while a rebuild is
running are remembered and produce exactly one more rebuild once it finishes.
"""

import logging
import os
import threading

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)

from .errors import BuildError

WATCHED_EVENTS = (EVENT_TYPE_CREATED, EVENT_TYPE_MODIFIED, EVENT_TYPE_DELETED, EVENT_TYPE_MOVED)


def is_hidden(path, roots=()) -> bool:
    """True if any component of path below its watched root starts with a dot."""
    path = os.path.abspath(os.fsdecode(path))
    for root in roots:
        root = os.path.abspath(root)
        if os.path.commonpath([path, root]) == root:
            path = os.path.relpath(path, root)
            break
    parts = os.path.normpath(path).split(os.sep)
    return any(part.startswith('.') and part not in ('.', '..') for part in parts)


class DebouncedRebuilder(FileSystemEventHandler):
    def __init__(self, quire, delay_seconds: float, roots=()) -> None:
        super().__init__()
        self.roots = list(roots)
        self.quire = quire
        self.delay_seconds = delay_seconds
        self.logger = logging.getLogger('Quire.Watcher')
        self._lock = threading.Lock()
        self._timer = None
        self._running = False
        self._queued = False
        self._generation = 0

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type not in WATCHED_EVENTS:
            return
        if event.is_directory and event.event_type == EVENT_TYPE_MODIFIED:
            return
        if is_hidden(event.src_path, self.roots):
            return
        self.logger.info(f"File {event.event_type}: {os.fsdecode(event.src_path)}")
        self.schedule()

    def schedule(self) -> None:
        """Request a rebuild, restarting the debounce timer."""
        with self._lock:
            self._queued = True
            self.quire.mark_pending()
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._timer = threading.Timer(self.delay_seconds, self._on_timer, args=(self._generation,))
            self._timer.daemon = True
            self._timer.start()

    def _on_timer(self, generation) -> None:
        with self._lock:
            # A timer cancelled too late to stop must not clear its successor
            if generation != self._generation:
                return
            self._timer = None
        self._drain()

    def _drain(self) -> None:
        while True:
            with self._lock:
                if self._running or not self._queued or self._timer is not None:
                    return
                self._queued = False
                self._running = True

            try:
                self.logger.info("Rebuilding after changes...")
                self.quire.build()
            except BuildError as e:
                self.logger.error(f"Build failed: {e}")
            except Exception:
                self.logger.exception("Unexpected error during rebuild")
            finally:
                with self._lock:
                    self._running = False
                    rerun = self._queued and self._timer is None
            if not rerun:
                return

    def shutdown(self) -> None:
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._queued = False
