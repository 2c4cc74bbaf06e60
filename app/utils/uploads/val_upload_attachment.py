import logging
import os
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi.concurrency import run_in_threadpool
from slugify import slugify

from app.constants.constants import (
    ALLOWED_UPLOAD_EXTENSIONS,
    MAX_UPLOAD_SIZE,
    UPLOAD_SLOT_LABELS,
    UploadSlot,
)

logger = logging.getLogger(__name__)


class UploadRejected(ValueError):
    """A file part that breaks the extension or size rule of its slot."""


@dataclass
class PendingUpload:
    """A file part read from the request, not yet written to disk."""
    slot: UploadSlot
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def extension(self) -> str:
        return Path(self.filename).suffix.lower()


@dataclass
class StoredAttachment:
    """An upload persisted in the uploads directory."""
    slot: UploadSlot
    original_filename: str
    stored_name: str
    path: str

    @property
    def public_path(self) -> str:
        return f"/uploads/{self.stored_name}"


def validate_attachment(upload: PendingUpload) -> None:
    """
    Check an upload against the allow-list and size cap of its slot.
    Raises UploadRejected with a message naming the slot and the failed rule.
    """
    label = UPLOAD_SLOT_LABELS[upload.slot]
    allowed = ALLOWED_UPLOAD_EXTENSIONS[upload.slot]

    if upload.extension not in allowed:
        allowed_list = ", ".join(sorted(ext.lstrip(".") for ext in allowed))
        raise UploadRejected(
            f"Invalid {label} type '{upload.extension or upload.filename}'. Allowed: {allowed_list}"
        )

    if len(upload.content) > MAX_UPLOAD_SIZE:
        raise UploadRejected(f"{label} size exceeds 5MB limit")


def build_stored_name(filename: str) -> str:
    """<slug>-<epoch ms>-<random><ext>, unique without any locking."""
    path = Path(filename)
    stem = slugify(path.stem, max_length=80) or "upload"
    suffix = path.suffix.lower()
    unique_suffix = f"{int(time.time() * 1000)}-{secrets.randbelow(10 ** 9)}"
    return f"{stem}-{unique_suffix}{suffix}"


def _write_new_file(path: str, content: bytes):
    # "xb" refuses to overwrite an existing file
    with open(path, "xb") as handle:
        handle.write(content)


async def store_attachment(upload: PendingUpload, uploads_dir: str) -> StoredAttachment:
    """
    Persist a validated upload into uploads_dir
    Returns the stored attachment reference
    """
    os.makedirs(uploads_dir, exist_ok=True)

    while True:
        stored_name = build_stored_name(upload.filename)
        path = os.path.join(uploads_dir, stored_name)
        try:
            await run_in_threadpool(_write_new_file, path, upload.content)
            break
        except FileExistsError:
            logger.warning(f"⚠️ Upload name collision on {stored_name}, regenerating")

    logger.info(f"📎 Stored {UPLOAD_SLOT_LABELS[upload.slot]}: {upload.filename} -> {stored_name}")
    return StoredAttachment(
        slot=upload.slot,
        original_filename=upload.filename,
        stored_name=stored_name,
        path=os.path.abspath(path),
    )
