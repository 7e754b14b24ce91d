#!/usr/bin/env python3
"""
FRKN Trial - trial journal
Append-only CSV record of granted trials. It is the audit trail and the
source the idempotency index is rebuilt from at startup.
"""

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, NamedTuple, Optional

from ..config import CSV_FILE

logger = logging.getLogger(__name__)

# Characters that would break the one-entry-per-line layout
_FORBIDDEN = str.maketrans("", "", ",\r\n")


class JournalEntry(NamedTuple):
    """One granted trial"""
    timestamp: datetime
    email: str
    telegram: str
    sub_id: str
    env: str

    def to_line(self) -> str:
        """Render the entry as a single CSV line (with trailing newline)"""
        fields = (
            self.timestamp.isoformat(),
            self.email,
            self.telegram,
            self.sub_id,
            self.env,
        )
        return ",".join(sanitize_field(f) for f in fields) + "\n"


def sanitize_field(value: Optional[str]) -> str:
    """
    Strip commas and line breaks; the journal performs no quoting.
    Text that cannot be encoded as UTF-8 (lone surrogates) becomes ``?``.
    """
    if not value:
        return ""
    value = value.encode("utf-8", "replace").decode("utf-8")
    return value.translate(_FORBIDDEN)


def parse_timestamp(raw: str) -> datetime:
    """
    Parse an RFC3339 timestamp

    Args:
        raw: e.g. ``2026-01-05T10:00:00.123456789+00:00`` or ``...Z``

    Returns:
        timezone-aware datetime (naive values are taken as UTC)

    Raises:
        ValueError: if the value is not a timestamp
    """
    parsed = datetime.fromisoformat(raw.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class TrialJournal:
    """Journal file access - no locking, writes rely on O_APPEND"""

    def __init__(self, path: str = CSV_FILE):
        """
        Args:
            path: CSV file location; created on first append
        """
        self.path = Path(path)

    def load(self) -> Dict[str, datetime]:
        """
        Build the idempotency index from the journal

        Lines with fewer than two fields or an unparsable timestamp are
        skipped. When an email occurs more than once the earliest line wins.

        Returns:
            mapping email -> timestamp of the first grant
        """
        index: Dict[str, datetime] = {}

        if not self.path.exists():
            logger.info("journal %s not found, starting with an empty index", self.path)
            return index

        skipped = 0
        with open(self.path, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                fields = line.rstrip("\r\n").split(",")
                if len(fields) < 2 or not fields[1]:
                    skipped += 1
                    continue
                try:
                    timestamp = parse_timestamp(fields[0])
                except ValueError:
                    skipped += 1
                    continue
                index.setdefault(fields[1], timestamp)

        logger.info(
            "loaded %d trial(s) from %s (%d malformed line(s) skipped)",
            len(index), self.path, skipped,
        )
        return index

    def append(self, entry: JournalEntry) -> None:
        """
        Append one entry and flush it to disk

        Raises:
            OSError: on any filesystem failure
        """
        line = entry.to_line()
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line)
            f.flush()
            os.fsync(f.fileno())
