"""
Blob storage for voice-note attachments.

Tasks only keep an opaque reference; the store owns the bytes and knows how
to turn a reference into a URL the client can fetch.
"""

import logging
import mimetypes
import os
import uuid
from pathlib import Path

from app.core.config import settings
from app.core.exceptions import StorageError

logger = logging.getLogger(__name__)

# browsers record webm/ogg, uploads from files are usually wav/mp3
AUDIO_EXTENSIONS = {
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/wave": ".wav",
    "audio/webm": ".webm",
    "audio/ogg": ".ogg",
    "audio/mpeg": ".mp3",
    "audio/mp4": ".m4a",
}


class BlobStore:
    """Interface for a store of opaque audio blobs."""

    def save(self, data: bytes, content_type: str) -> str:
        raise NotImplementedError

    def delete(self, ref: str) -> None:
        raise NotImplementedError

    def url_for(self, ref: str) -> str:
        raise NotImplementedError


class LocalBlobStore(BlobStore):
    """Stores each blob as a file in one directory, served as static files."""

    def __init__(self, directory: str, url_prefix: str):
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, ref: str) -> Path:
        # refs are generated by save(), anything with a path component is foreign
        if not ref or os.path.basename(ref) != ref:
            raise StorageError("Invalid blob reference")
        return self.directory / ref

    def save(self, data: bytes, content_type: str) -> str:
        mime = content_type.split(";")[0].strip().lower()
        extension = AUDIO_EXTENSIONS.get(mime) or mimetypes.guess_extension(mime) or ".bin"
        ref = f"{uuid.uuid4().hex}{extension}"
        try:
            self._path(ref).write_bytes(data)
        except OSError as e:
            logger.error(f"Could not write blob {ref}: {e}")
            raise StorageError("Could not store voice note") from e
        logger.debug(f"Stored blob {ref} ({len(data)} bytes)")
        return ref

    def delete(self, ref: str) -> None:
        try:
            self._path(ref).unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Could not delete blob {ref}: {e}")
            raise StorageError("Could not delete voice note") from e

    def url_for(self, ref: str) -> str:
        return f"{self.url_prefix}/{ref}"


_default_store = None


def get_blob_store() -> BlobStore:
    """FastAPI dependency returning the process-wide blob store."""
    global _default_store
    if _default_store is None:
        _default_store = LocalBlobStore(settings.VOICE_NOTE_DIR, settings.VOICE_NOTE_URL_PREFIX)
    return _default_store
