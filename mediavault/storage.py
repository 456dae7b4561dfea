# Filename: mediavault/storage.py
import asyncio
import logging
import mimetypes
import os
import stat
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator, Dict, Iterable, List, Optional

import aiofiles
import aiofiles.os
from fastapi import Request

from . import identity
from .errors import FileTooLarge, InvalidFilename, StoredFileNotFound, UnsupportedType
from .utils import ensure_safe_filename, is_safe_filename

logger = logging.getLogger("mediavault.storage")

mimetypes.add_type("video/mp4", ".mp4")
mimetypes.add_type("video/webm", ".webm")
mimetypes.add_type("video/quicktime", ".mov")
mimetypes.add_type("audio/ogg", ".ogg")


def extension_of(name: str) -> str:
    return os.path.splitext(name)[1].lower()


def media_type_for(name: str) -> Optional[str]:
    return mimetypes.guess_type(name)[0]


@dataclass(frozen=True)
class StoredFile:
    stored_name: str
    display_name: str
    size_bytes: int
    created_at: datetime
    media_type: Optional[str]


@dataclass(frozen=True)
class StoredFileHandle:
    """A stored file opened for reading. Each handle reads with its own cursor."""

    path: Path
    stored_name: str
    size: int
    media_type: Optional[str]

    async def iter_bytes(self, start: int = 0, end: Optional[int] = None, chunk_size: int = 64 * 1024) -> AsyncIterator[bytes]:
        """Yield bytes ``start`` through ``end`` inclusive."""
        end = self.size - 1 if end is None else end
        remaining = end - start + 1
        async with aiofiles.open(self.path, "rb") as f:
            await f.seek(start)
            while remaining > 0:
                chunk = await f.read(min(chunk_size, remaining))
                if not chunk:
                    break
                remaining -= len(chunk)
                yield chunk


class _NameLocks:
    """One asyncio.Lock per stored name, dropped once nobody holds or waits on it."""

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, name: str):
        lock = self._locks.setdefault(name, asyncio.Lock())
        self._users[name] = self._users.get(name, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[name] -= 1
            if not self._users[name]:
                del self._users[name]
                del self._locks[name]

    def __contains__(self, name: str) -> bool:
        return name in self._locks


class MediaStorage:
    """
    Owns the storage root. Every listing, write and removal goes through here;
    metadata is always read back from the filesystem.
    """

    def __init__(
        self,
        root: Path,
        allowed_extensions: Iterable[str],
        max_upload_bytes: int,
        chunk_size: int = 1024 * 1024,
    ):
        self.root = Path(root)
        self.allowed_extensions = frozenset(e.lower() for e in allowed_extensions)
        self.max_upload_bytes = max_upload_bytes
        self.chunk_size = chunk_size
        self._locks = _NameLocks()

    @classmethod
    def from_settings(cls, settings) -> "MediaStorage":
        return cls(
            settings.storage_path,
            settings.extension_allow_list,
            settings.max_upload_bytes,
            chunk_size=settings.upload_chunk_size,
        )

    def ensure_root(self) -> None:
        if not self.root.is_dir():
            self.root.mkdir(parents=True, exist_ok=True)
            logger.info("Created storage directory: %s", self.root.resolve())

    def is_allowed(self, name: str) -> bool:
        return extension_of(name) in self.allowed_extensions

    def _path_for(self, stored_name: str) -> Path:
        ensure_safe_filename(stored_name)
        if not self.is_allowed(stored_name):
            raise StoredFileNotFound()
        return self.root / stored_name

    def _describe(self, stored_name: str, st: os.stat_result) -> StoredFile:
        created = getattr(st, "st_birthtime", None) or st.st_mtime
        return StoredFile(
            stored_name=stored_name,
            display_name=identity.decode(stored_name),
            size_bytes=st.st_size,
            created_at=datetime.fromtimestamp(created, tz=timezone.utc),
            media_type=media_type_for(stored_name),
        )

    def list_files(self) -> List[StoredFile]:
        """All allow-listed files, newest first."""
        files = []
        with os.scandir(self.root) as entries:
            for entry in entries:
                if not self.is_allowed(entry.name):
                    continue
                try:
                    if not entry.is_file():
                        continue
                    st = entry.stat()
                except FileNotFoundError:
                    # removed between scandir and stat
                    continue
                files.append(self._describe(entry.name, st))
        files.sort(key=lambda f: (f.created_at, f.stored_name), reverse=True)
        logger.debug("Listed %d files in %s", len(files), self.root)
        return files

    async def store(self, display_name: str, source, size: Optional[int] = None) -> StoredFile:
        """
        Write the bytes read from ``source`` (anything with an async ``read(n)``)
        under a fresh stored name for ``display_name``.

        Nothing is written for a disallowed extension or an oversized declared
        ``size``. If the ceiling is crossed while writing, the partial file is
        removed before FileTooLarge is raised.
        """
        if not is_safe_filename(display_name):
            raise InvalidFilename()
        ext = extension_of(display_name)
        if ext not in self.allowed_extensions:
            raise UnsupportedType(ext)
        if size is not None and size > self.max_upload_bytes:
            raise FileTooLarge(self.max_upload_bytes)

        while True:
            stored_name = identity.next_stored_name(display_name)
            async with self._locks.hold(stored_name):
                try:
                    written = await self._write_new(self.root / stored_name, source)
                except FileExistsError:
                    logger.warning("Stored name %s already taken, retrying", stored_name)
                    continue
                st = await aiofiles.os.stat(self.root / stored_name)
            break

        logger.info("Stored %s (%d bytes)", stored_name, written)
        return self._describe(stored_name, st)

    async def _write_new(self, path: Path, source) -> int:
        size = 0
        try:
            async with aiofiles.open(path, "xb") as out:
                while True:
                    chunk = await source.read(self.chunk_size)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_upload_bytes:
                        raise FileTooLarge(self.max_upload_bytes)
                    await out.write(chunk)
        except FileTooLarge:
            await aiofiles.os.unlink(path)
            raise
        return size

    async def remove(self, stored_name: str) -> None:
        path = self._path_for(stored_name)
        async with self._locks.hold(stored_name):
            if not await aiofiles.os.path.isfile(path):
                raise StoredFileNotFound()
            try:
                await aiofiles.os.unlink(path)
            except FileNotFoundError:
                raise StoredFileNotFound()
        logger.info("Removed %s", stored_name)

    async def open(self, stored_name: str) -> StoredFileHandle:
        path = self._path_for(stored_name)
        try:
            st = await aiofiles.os.stat(path)
        except FileNotFoundError:
            raise StoredFileNotFound()
        if not stat.S_ISREG(st.st_mode):
            raise StoredFileNotFound()
        return StoredFileHandle(path, stored_name, st.st_size, media_type_for(stored_name))


def get_storage(request: Request) -> MediaStorage:
    """Storage instance of the running app (dependency)."""
    return request.app.state.storage
