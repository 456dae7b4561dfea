# Filename: mediavault/ranges.py
"""
Byte-range resolution for ``GET /api/stream/{filename}``.

Only a single ``bytes=<start>-[<end>]`` range is honoured. An ``end`` past
the last byte is clamped; anything else that cannot be served (no start,
several ranges, start beyond the file, start after end) is refused with 416.
Types that are not streamable always get the whole file.
"""
import re
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from fastapi import status

from .errors import RangeNotSatisfiable

_BYTES_RANGE = re.compile(r"^bytes=(\d+)-(\d*)$")


@dataclass(frozen=True)
class ByteWindow:
    start: int
    end: int
    total_size: int
    partial: bool
    accept_ranges: bool = False

    @property
    def length(self) -> int:
        return self.end - self.start + 1 if self.total_size else 0

    @property
    def status_code(self) -> int:
        return status.HTTP_206_PARTIAL_CONTENT if self.partial else status.HTTP_200_OK

    def headers(self) -> Dict[str, str]:
        headers = {"Content-Length": str(self.length)}
        if self.partial:
            headers["Content-Range"] = f"bytes {self.start}-{self.end}/{self.total_size}"
        if self.partial or self.accept_ranges:
            headers["Accept-Ranges"] = "bytes"
        return headers


def is_streamable(media_type: Optional[str], prefixes: Iterable[str] = ("video/",)) -> bool:
    return bool(media_type) and any(media_type.startswith(p) for p in prefixes)


def full_content(total_size: int, accept_ranges: bool = False) -> ByteWindow:
    return ByteWindow(0, max(total_size - 1, 0), total_size, partial=False, accept_ranges=accept_ranges)


def resolve_range(total_size: int, range_header: Optional[str], streamable: bool = True) -> ByteWindow:
    """Work out which bytes of a ``total_size`` byte file to send back."""
    if not streamable:
        return full_content(total_size)
    if range_header is None or not range_header.strip():
        return full_content(total_size, accept_ranges=True)

    match = _BYTES_RANGE.match(range_header.strip().replace(" ", ""))
    if not match:
        raise RangeNotSatisfiable(total_size)

    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else total_size - 1
    if start >= total_size or start > end:
        raise RangeNotSatisfiable(total_size)
    end = min(end, total_size - 1)
    return ByteWindow(start, end, total_size, partial=True)
