"""
FRKN Trial - idempotency gate
One trial per email for the lifetime of the process.
"""

import threading
from datetime import datetime
from enum import Enum
from typing import Dict, Optional


class AdmitResult(Enum):
    ADMITTED = "admitted"
    ALREADY_PRESENT = "already_present"


class IdempotencyGate:
    """Process-wide email -> first-grant timestamp map"""

    def __init__(self, index: Optional[Dict[str, datetime]] = None):
        """
        Args:
            index: pre-existing grants, usually ``TrialJournal.load()``
        """
        self._index: Dict[str, datetime] = dict(index or {})
        self._lock = threading.Lock()

    def try_admit(self, email: str, now: datetime) -> AdmitResult:
        """
        Atomically test and set ``email``

        An email that is already present is left untouched, so the stored
        timestamp is always the first admission.
        """
        with self._lock:
            if email in self._index:
                return AdmitResult.ALREADY_PRESENT
            self._index[email] = now
            return AdmitResult.ADMITTED

    def first_seen(self, email: str) -> Optional[datetime]:
        with self._lock:
            return self._index.get(email)

    def __contains__(self, email: object) -> bool:
        with self._lock:
            return email in self._index

    def __len__(self) -> int:
        with self._lock:
            return len(self._index)
