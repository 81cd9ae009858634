"""
Filesystem change notifier for the ingestion loop.

Uses watchdog to wake the loop as soon as something appears in the input
directory instead of waiting out the full poll interval. It only signals; the
loop still does the listing, dedup and dispatch itself.
"""

import threading
from pathlib import Path

from loguru import logger
from watchdog.events import DirModifiedEvent, FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer


class ChangeEventHandler(FileSystemEventHandler):
    """Sets a flag whenever a file is created, modified or moved in."""

    def __init__(self, changed: threading.Event):
        super().__init__()
        self.changed = changed

    def on_created(self, event: FileSystemEvent):
        """Handle file creation."""
        if event.is_directory:
            return
        logger.debug(f"Created: {event.src_path}")
        self.changed.set()

    def on_modified(self, event: FileSystemEvent):
        """Handle file modification."""
        # Directory modifications are noisy and always accompany a create
        if isinstance(event, DirModifiedEvent):
            return
        self.changed.set()

    def on_moved(self, event: FileSystemEvent):
        """Handle rename/move into the directory."""
        logger.debug(f"Moved: {event.src_path} -> {event.dest_path}")
        self.changed.set()


class ChangeNotifier:
    """Watchdog observer wrapper exposing a blocking ``wait``."""

    def __init__(self, watch_dir: Path):
        self.watch_dir = Path(watch_dir)
        self.changed = threading.Event()
        self.event_handler = ChangeEventHandler(self.changed)
        self.observer = Observer()

    def start(self):
        """Start watching the directory."""
        self.observer.schedule(self.event_handler, str(self.watch_dir), recursive=False)
        self.observer.daemon = True
        self.observer.start()
        logger.success(f"Started watching: {self.watch_dir}")

    def stop(self):
        """Stop watching."""
        self.observer.stop()
        self.observer.join()
        logger.info("File system observer stopped")

    def wake(self):
        """End any pending wait immediately."""
        self.changed.set()

    def wait(self, timeout: float, stop_event: threading.Event = None) -> bool:
        """
        Block until a change is reported or ``timeout`` elapses.

        Returns:
            True if a change was reported
        """
        if stop_event is not None and stop_event.is_set():
            return False
        fired = self.changed.wait(timeout)
        self.changed.clear()
        return fired
