"""
Dedup tracker for discovered files.

Remembers which file names have already been dispatched to the pipeline.
State lives in memory only: a restart forgets everything, and every matching
file still in the input directory is dispatched again.
"""

import threading
from typing import Dict


class FileGate:
    """Set of file identities already claimed for processing."""

    def __init__(self):
        self._dispatched: Dict[str, bool] = {}
        self._lock = threading.Lock()

    def is_new(self, identity: str) -> bool:
        with self._lock:
            return not self._dispatched.get(identity, False)

    def mark_dispatched(self, identity: str) -> None:
        with self._lock:
            self._dispatched[identity] = True

    def try_dispatch(self, identity: str) -> bool:
        """
        Atomically claim ``identity``.

        Returns:
            True if the identity was new and is now marked, False if it was
            already dispatched
        """
        with self._lock:
            if self._dispatched.get(identity, False):
                return False
            self._dispatched[identity] = True
            return True

    def __contains__(self, identity: object) -> bool:
        with self._lock:
            return bool(self._dispatched.get(identity, False))

    def __len__(self) -> int:
        with self._lock:
            return len(self._dispatched)
