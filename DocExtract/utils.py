"""
utils.py

Error types, input validation, and file I/O helpers for the extraction module.

Handles:
- Buffer validation (emptiness, PDF signature, size limit)
- File path sanitization against path traversal (command line use)
- Loading a PDF from disk as a byte buffer
"""

import logging
from pathlib import Path
from typing import Union

from DocExtract import config

logger = logging.getLogger(__name__)

PDF_SIGNATURE = b"%PDF"


class DocExtractError(Exception):
    """Base class for all errors raised by the extraction pipeline."""

    pass


class InvalidDocumentError(DocExtractError):
    """Raised when the input buffer cannot be a processable PDF."""

    pass


class AcquisitionError(DocExtractError):
    """Raised when no usable text could be acquired from a document."""

    pass


class DocExtractSecurityError(DocExtractError):
    """Raised when a security check fails (e.g., path traversal)."""

    pass


def validate_buffer(buffer: bytes) -> None:
    """
    Validate a raw PDF buffer before any processing.

    Args:
        buffer: Uploaded document bytes.

    Raises:
        InvalidDocumentError: If the buffer is empty, not a PDF, or too large.
    """
    if not isinstance(buffer, (bytes, bytearray)):
        raise InvalidDocumentError(
            f"Expected a bytes buffer, got {type(buffer).__name__}"
        )

    if len(buffer) == 0:
        raise InvalidDocumentError("Document buffer is empty")

    # Some generators emit a few junk bytes before the header
    if PDF_SIGNATURE not in bytes(buffer[:1024]):
        raise InvalidDocumentError("Buffer does not look like a PDF document")

    size_mb = len(buffer) / (1024 * 1024)
    if size_mb > config.MAX_FILE_SIZE_MB:
        raise InvalidDocumentError(
            f"Document too large: {size_mb:.1f}MB exceeds "
            f"limit of {config.MAX_FILE_SIZE_MB}MB"
        )


def sanitize_path(file_path: Union[str, Path]) -> Path:
    """
    Validate and sanitize a file path.

    Rejects paths containing '..', symlinks, or anything that
    is not an existing regular file.

    Raises:
        DocExtractSecurityError: If path traversal is detected.
        InvalidDocumentError: If the file does not exist or is not a file.
    """
    raw = str(file_path)
    if ".." in raw:
        raise DocExtractSecurityError(f"Path traversal detected in: {raw}")

    unresolved = Path(file_path)
    if unresolved.is_symlink():
        raise DocExtractSecurityError(f"Symlinks are not allowed: {unresolved}")

    path = unresolved.resolve()
    if not path.exists():
        raise InvalidDocumentError(f"File not found: {path}")

    if not path.is_file():
        raise InvalidDocumentError(f"Not a regular file: {path}")

    return path


def load_pdf_bytes(file_path: Union[str, Path]) -> bytes:
    """
    Read a PDF from disk after path and extension checks.

    Returns:
        The file contents, already validated with ``validate_buffer``.
    """
    path = sanitize_path(file_path)

    ext = path.suffix.lower()
    if ext not in config.ALLOWED_EXTENSIONS:
        raise InvalidDocumentError(
            f"Unsupported file extension '{ext}'. "
            f"Allowed: {config.ALLOWED_EXTENSIONS}"
        )

    buffer = path.read_bytes()
    validate_buffer(buffer)
    logger.info("Loaded file: %s (%d bytes)", path.name, len(buffer))
    return buffer
