# Filename: mediavault/routers/files.py
from fastapi import APIRouter, Depends, File, Header, UploadFile
from fastapi.responses import StreamingResponse
from typing import List, Optional
from urllib.parse import quote
import logging

from ..config import Settings, get_settings
from ..errors import MissingFile, ServerError
from ..identity import display_name_from_upload
from ..ranges import is_streamable, resolve_range
from ..schemas import ErrorOut, MessageOut, StoredFileOut, UploadOut
from ..storage import MediaStorage, StoredFile, get_storage

router = APIRouter(prefix="/api", tags=["files"])
logger = logging.getLogger("mediavault.files")


def _errors(*codes: int) -> dict:
    return {code: {"model": ErrorOut} for code in codes}


def _public_url(settings: Settings, stored_name: str) -> str:
    return f"{settings.public_prefix.rstrip('/')}/{quote(stored_name)}"


def _file_out(f: StoredFile, settings: Settings) -> StoredFileOut:
    return StoredFileOut(
        filename=f.stored_name,
        original_name=f.display_name,
        size=f.size_bytes,
        upload_date=f.created_at,
        url=_public_url(settings, f.stored_name),
        mime_type=f.media_type,
    )


@router.get("/files", response_model=List[StoredFileOut], responses=_errors(500))
@router.get("/videos", response_model=List[StoredFileOut], include_in_schema=False)
def list_files(storage: MediaStorage = Depends(get_storage), settings: Settings = Depends(get_settings)):
    try:
        files = storage.list_files()
    except OSError:
        logger.exception("Error reading files")
        raise ServerError("Failed to read files")
    return [_file_out(f, settings) for f in files]


@router.post("/upload", response_model=UploadOut, responses=_errors(400, 500))
async def upload_file(
    file: Optional[UploadFile] = File(None),
    storage: MediaStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    if file is None or not file.filename:
        raise MissingFile()

    display_name = display_name_from_upload(file.filename)
    logger.info("Receiving upload: %s (%s bytes)", display_name, file.size)
    try:
        stored = await storage.store(display_name, file, size=file.size)
    except OSError:
        logger.exception("Upload error for %s", display_name)
        raise ServerError("Upload failed")
    finally:
        await file.close()

    return UploadOut(
        message="File uploaded successfully",
        filename=stored.stored_name,
        original_name=stored.display_name,
        size=stored.size_bytes,
        url=_public_url(settings, stored.stored_name),
        mime_type=stored.media_type,
    )


@router.delete("/files/{filename}", response_model=MessageOut, responses=_errors(400, 404, 500))
@router.delete("/videos/{filename}", response_model=MessageOut, include_in_schema=False)
async def delete_file(filename: str, storage: MediaStorage = Depends(get_storage)):
    try:
        await storage.remove(filename)
    except OSError:
        logger.exception("Delete error for %s", filename)
        raise ServerError("Failed to delete file")
    return MessageOut(message="File deleted successfully")


@router.get("/stream/{filename}", responses=_errors(400, 404, 416, 500))
async def stream_file(
    filename: str,
    range_header: Optional[str] = Header(None, alias="Range"),
    storage: MediaStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    """
    Send a stored file, honouring a single byte range for streamable types
    (206 with Content-Range). Other types always get the whole body.
    """
    try:
        handle = await storage.open(filename)
    except OSError:
        logger.exception("Stream error for %s", filename)
        raise ServerError("Failed to stream file")

    streamable = is_streamable(handle.media_type, settings.streamable_type_prefixes)
    window = resolve_range(handle.size, range_header, streamable=streamable)
    logger.debug("Streaming %s bytes %d-%d/%d", filename, window.start, window.end, window.total_size)

    return StreamingResponse(
        handle.iter_bytes(window.start, window.end, chunk_size=settings.stream_chunk_size),
        status_code=window.status_code,
        media_type=handle.media_type or "application/octet-stream",
        headers=window.headers(),
    )
