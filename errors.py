"""
Error types raised by the store, file intake and handlers.

Every error carries an ErrorKind tag; the response layer turns the tag into
an HTTP status through a single table (see middleware.STATUS_BY_KIND).
"""

from enum import Enum
from typing import Iterable, List


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    FILE_TYPE = "file_type"
    FILE_SIZE = "file_size"
    UPLOAD = "upload"
    MISSING_FILE = "missing_file"
    PERSISTENCE = "persistence"
    UNHANDLED = "unhandled"


GENERIC_ERROR_MESSAGE = "Something broke!"


class SubmissionError(Exception):
    """Root of every error the service maps to a response."""

    kind: ErrorKind = ErrorKind.UNHANDLED
    public_message: str = GENERIC_ERROR_MESSAGE

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.public_message)


class RecordValidationError(SubmissionError):
    """One or more record fields are missing or malformed."""

    kind = ErrorKind.VALIDATION

    def __init__(self, messages: Iterable[str]) -> None:
        self.messages: List[str] = list(messages)
        super().__init__(self.public_message)

    @property
    def public_message(self) -> str:  # type: ignore[override]
        return ". ".join(self.messages)


class UploadError(SubmissionError):
    """The multipart upload could not be accepted."""

    kind = ErrorKind.UPLOAD
    public_message = "Error uploading file"


class FileTypeError(UploadError):
    kind = ErrorKind.FILE_TYPE
    public_message = "Only PDF files are allowed!"


class FileSizeError(UploadError):
    kind = ErrorKind.FILE_SIZE
    public_message = "File is too large. Maximum size is 5MB"


class MissingFileError(SubmissionError):
    kind = ErrorKind.MISSING_FILE
    public_message = "Please upload a resume"


class PersistenceError(SubmissionError):
    """The record store could not be reached or refused a write."""

    kind = ErrorKind.PERSISTENCE
