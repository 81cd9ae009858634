"""
Directory scan loop for Screen Scribe.

Lists the input directory, claims new screenshots through the FileGate and
runs each through the pipeline, one at a time.
"""

import threading
from pathlib import Path
from typing import Callable, List, Optional

from loguru import logger

from app.utils.helpers import IMAGE_SUFFIXES, has_suffix
from domains.screen_ingest.errors import DirectoryListingError
from domains.screen_ingest.gate import FileGate


class IngestionLoop:
    """Scan/idle state machine that feeds new images into the pipeline."""

    def __init__(
        self,
        input_dir: Path,
        gate: FileGate,
        process: Callable[[Path], object],
        poll_interval: float = 0.1,
        case_sensitive: bool = True,
        notifier=None,
        stop_event: Optional[threading.Event] = None,
    ):
        """
        Initialize ingestion loop.

        Args:
            input_dir: Directory to watch
            gate: Dedup tracker owned by this loop
            process: Per-file pipeline entry point, called with the image path
            poll_interval: Idle wait between scans, in seconds
            case_sensitive: Whether suffix matching is case-sensitive
            notifier: Optional change notifier that can end the idle wait early
            stop_event: Event that ends ``run`` when set
        """
        self.input_dir = Path(input_dir)
        self.gate = gate
        self.process = process
        self.poll_interval = poll_interval
        self.case_sensitive = case_sensitive
        self.notifier = notifier
        self.stop_event = stop_event or threading.Event()

    def list_entries(self) -> List[Path]:
        """
        List the input directory in name order.

        Raises:
            DirectoryListingError: If the directory cannot be read
        """
        try:
            return sorted(self.input_dir.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise DirectoryListingError(f"Error reading directory {self.input_dir}: {e}") from e

    def is_eligible(self, entry: Path) -> bool:
        """Check directory/suffix eligibility without touching the gate."""
        try:
            if entry.is_dir():
                return False
        except OSError as e:
            logger.warning(f"Cannot inspect {entry.name}, skipping: {e}")
            return False
        return has_suffix(entry.name, IMAGE_SUFFIXES, case_sensitive=self.case_sensitive)

    def scan_once(self) -> List[str]:
        """
        Run one scan cycle.

        Returns:
            Identities dispatched during this cycle
        """
        dispatched = []

        for entry in self.list_entries():
            if not self.is_eligible(entry):
                logger.debug(f"Skipping {entry.name}")
                continue

            # Mark before processing: a failed file is not retried
            if not self.gate.try_dispatch(entry.name):
                continue

            dispatched.append(entry.name)
            self.process(entry)

            if self.stop_event.is_set():
                break

        return dispatched

    def wait(self):
        """Idle until the poll interval elapses, a change is reported, or stop is requested."""
        if self.notifier is not None:
            self.notifier.wait(self.poll_interval, self.stop_event)
        else:
            self.stop_event.wait(self.poll_interval)

    def stop(self):
        """Request the loop to stop after the current file."""
        self.stop_event.set()
        if self.notifier is not None:
            self.notifier.wake()

    def run(self):
        """
        Run until stopped.

        Raises:
            DirectoryListingError: If a scan cannot list the input directory
        """
        logger.info(f"Watching directory: {self.input_dir}")

        while not self.stop_event.is_set():
            dispatched = self.scan_once()
            if dispatched:
                logger.info(f"Scan cycle dispatched {len(dispatched)} file(s)")
            self.wait()

        logger.info("Ingestion loop stopped")
