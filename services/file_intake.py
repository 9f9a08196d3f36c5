"""
Resume upload intake.

Picks the single resume out of a multipart form, checks its type and size,
and writes it under the upload directory with a generated name.
"""

import os
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import Request
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile

from errors import FileSizeError, FileTypeError, UploadError
from logger import get_logger

logger = get_logger(__name__)

RESUME_FIELD = "resume"
PDF_CONTENT_TYPE = "application/pdf"
MAX_RESUME_BYTES = 5 * 1024 * 1024
CHUNK_SIZE = 64 * 1024
DEFAULT_EXTENSION = ".pdf"


def generate_filename(original_name: Optional[str], now: Optional[float] = None) -> str:
    """<epoch-millis>-<random hex><original extension>"""
    millis = int((time.time() if now is None else now) * 1000)
    extension = os.path.splitext(os.path.basename(original_name or ""))[1].lower()
    return f"{millis}-{secrets.token_hex(6)}{extension or DEFAULT_EXTENSION}"


@dataclass(frozen=True)
class StoredFile:
    filename: str
    path: Path
    size: int


def pick_resume(form: FormData) -> Optional[UploadFile]:
    """Return the uploaded resume, or None when the form carries no file."""
    resumes = []
    for key, value in form.multi_items():
        if not isinstance(value, UploadFile):
            continue
        if key != RESUME_FIELD:
            raise UploadError(f"unexpected file field {key!r}")
        resumes.append(value)

    if len(resumes) > 1:
        raise UploadError("more than one resume uploaded")
    return resumes[0] if resumes else None


class FileIntake:
    def __init__(self, upload_dir: Path, max_bytes: int = MAX_RESUME_BYTES):
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes

    def ensure_directory(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def _check(self, upload: UploadFile) -> None:
        if upload.content_type != PDF_CONTENT_TYPE:
            raise FileTypeError(f"rejected content type {upload.content_type!r}")
        if upload.size is not None and upload.size > self.max_bytes:
            raise FileSizeError(f"upload of {upload.size} bytes exceeds {self.max_bytes}")

    def _open_unique(self, original_name: Optional[str]):
        while True:
            filename = generate_filename(original_name)
            path = self.upload_dir / filename
            try:
                return filename, path, open(path, "xb")
            except FileExistsError:
                logger.warning("Generated filename %s already exists, retrying", filename)

    async def accept(self, upload: UploadFile) -> StoredFile:
        self._check(upload)

        filename, path, handle = await run_in_threadpool(self._open_unique, upload.filename)
        written = 0
        try:
            try:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise FileSizeError(f"upload exceeds {self.max_bytes} bytes")
                    await run_in_threadpool(handle.write, chunk)
            finally:
                await run_in_threadpool(handle.close)
        except BaseException:
            path.unlink(missing_ok=True)
            raise

        logger.info("Stored resume %s (%d bytes)", filename, written)
        return StoredFile(filename=filename, path=path, size=written)

    def discard(self, stored: StoredFile) -> None:
        try:
            stored.path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Error deleting file %s: %s", stored.path, exc)
        else:
            logger.info("Removed resume %s after failed submission", stored.filename)


def get_intake(request: Request) -> FileIntake:
    return request.app.state.intake
