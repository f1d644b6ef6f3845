"""
Mods Directory Watcher Service for Modsync.

Uses watchdog to monitor the local mods directory and report when jar
files appear, change or disappear, so the caller can reconcile again.
"""
import logging
import os
import time
from pathlib import Path
from typing import Callable, Optional

from watchdog.observers import Observer
from watchdog.events import FileSystemEvent, FileSystemEventHandler

from core.inventory import is_archive_name
from core.jar_name import ARCHIVE_SUFFIX

logger = logging.getLogger(__name__)

SETTLE_DELAY = 0.5


class JarFileHandler(FileSystemEventHandler):
    """
    Handles file system events for mod jars.

    A jar change is forwarded to the callback once per on-disk state:
    repeated events for the same path and mtime are skipped.
    """

    def __init__(
        self,
        on_change: Callable[[str], None],
        extension: str = ARCHIVE_SUFFIX,
        settle_delay: float = SETTLE_DELAY
    ):
        """
        Initialize handler.

        Args:
            on_change: Callback with the path of the jar that changed
            extension: Archive extension to react to
            settle_delay: Seconds to wait after a create so the copy can finish
        """
        self.on_change = on_change
        self.extension = extension
        self.settle_delay = settle_delay
        self._seen_states = {}  # abs path -> last handled state

    def on_created(self, event: FileSystemEvent):
        if self._is_relevant(event, event.src_path):
            # Small delay to ensure file is fully written
            time.sleep(self.settle_delay)
            self._handle(event, event.src_path)

    def on_modified(self, event: FileSystemEvent):
        if self._is_relevant(event, event.src_path):
            self._handle(event, event.src_path)

    def on_deleted(self, event: FileSystemEvent):
        if self._is_relevant(event, event.src_path):
            self._handle(event, event.src_path)

    def on_moved(self, event: FileSystemEvent):
        # Renaming foo.jar.part -> foo.jar only matches on the destination
        if self._is_relevant(event, event.dest_path):
            self._handle(event, event.dest_path)

    def _is_jar_file(self, path: str) -> bool:
        return is_archive_name(Path(path).name, self.extension)

    def _is_relevant(self, event: FileSystemEvent, path: str) -> bool:
        return not event.is_directory and self._is_jar_file(path)

    def _file_state(self, abs_path: str) -> str:
        try:
            return f"{os.path.getmtime(abs_path)}"
        except OSError:
            return "missing"

    def _handle(self, event: FileSystemEvent, path: str):
        abs_path = os.path.abspath(path)
        state = self._file_state(abs_path)

        # Skip if this version was already handled
        if self._seen_states.get(abs_path) == state:
            return
        self._seen_states[abs_path] = state

        logger.info(f"Jar {event.event_type}: {path}")
        try:
            self.on_change(path)
        except Exception as e:
            logger.error(f"Error handling change of {path}: {e}")


class ModsDirectoryWatcher:
    """
    Watches a mods directory for jar changes.

    Usage:
        watcher = ModsDirectoryWatcher("/path/to/mods", callback)
        watcher.start()
        # ... later
        watcher.stop()
    """

    def __init__(
        self,
        watch_path: str,
        on_change: Callable[[str], None],
        extension: str = ARCHIVE_SUFFIX,
        settle_delay: float = SETTLE_DELAY
    ):
        self.watch_path = Path(watch_path)
        self.on_change = on_change
        self.extension = extension
        self.settle_delay = settle_delay

        self._observer: Optional[Observer] = None
        self._handler: Optional[JarFileHandler] = None
        self._running = False

    def start(self):
        """Start watching the directory."""
        if self._running:
            logger.warning("Watcher already running")
            return

        if not self.watch_path.is_dir():
            logger.error(f"Watch path does not exist: {self.watch_path}")
            raise FileNotFoundError(f"Watch path not found: {self.watch_path}")

        logger.info(f"Starting mods watcher on: {self.watch_path}")

        self._handler = JarFileHandler(self.on_change, self.extension, self.settle_delay)
        self._observer = Observer()
        self._observer.schedule(self._handler, str(self.watch_path), recursive=False)
        self._observer.start()
        self._running = True

    def stop(self):
        """Stop watching the directory."""
        if not self._running:
            return

        logger.info("Stopping mods watcher")

        if self._observer:
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None

        self._handler = None
        self._running = False

    def is_running(self) -> bool:
        return self._running
