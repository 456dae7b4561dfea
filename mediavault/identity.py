# Filename: mediavault/identity.py
"""
Stored-name identity.

A stored file is named ``<millis>-<display name>`` where ``millis`` is the
upload time in milliseconds since the epoch. The display name is recovered
by stripping that numeric prefix.
"""
import re
import threading
import time
from datetime import datetime
from pathlib import PureWindowsPath
from typing import Optional, Union

_PREFIX = re.compile(r"^\d+-")


def _to_millis(now: Union[datetime, int, float]) -> int:
    if isinstance(now, datetime):
        return int(now.timestamp() * 1000)
    return int(now)


def encode(display_name: str, now: Union[datetime, int, float]) -> str:
    """Build the stored name for ``display_name`` uploaded at ``now``.

    ``now`` is either a datetime or an integer millisecond timestamp.
    """
    return f"{_to_millis(now)}-{display_name}"


def decode(stored_name: str) -> str:
    """Return the display name; names without a timestamp prefix pass through."""
    return _PREFIX.sub("", stored_name, count=1)


def display_name_from_upload(filename: Optional[str]) -> str:
    # PureWindowsPath splits on both "/" and "\"
    return PureWindowsPath(filename or "").name


class MillisClock:
    """Millisecond clock that never returns the same value twice."""

    def __init__(self, source=time.time):
        self._source = source
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            now = int(self._source() * 1000)
            value = max(now, self._last + 1)
            self._last = value
            return value


clock = MillisClock()


def next_stored_name(display_name: str) -> str:
    return encode(display_name, clock.next())
