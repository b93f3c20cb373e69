"""
File type validation for uploaded documents.
Classifies a candidate by its extension without touching its content.
"""

import logging
from typing import Optional

from .models.documents import UploadCandidate, ValidationResult

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = ("pdf", "doc", "docx", "txt")

EXTENSION_KINDS = {
    "pdf": "pdf",
    "doc": "word",
    "docx": "word",
    "txt": "text",
}

EXTENSION_CONTENT_TYPES = {
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "txt": "text/plain",
}

# Prefixes of validation-class reasons; used to tell them apart from upload failures
MISSING_EXTENSION = "Missing file extension"
UNSUPPORTED_TYPE = "Unsupported file type"
FILE_TOO_LARGE = "File too large"


def get_extension(filename: str) -> Optional[str]:
    """Return the lower-cased extension of ``filename``, or None if it has none."""
    _, dot, ext = filename.rpartition(".")
    if not dot or not ext:
        return None
    return ext.lower()


class FileValidator:
    """Check uploaded files against the extension allow-list."""

    def __init__(self, max_file_size: Optional[int] = None):
        self.max_file_size = max_file_size

    def validate(self, candidate: UploadCandidate) -> ValidationResult:
        """
        Classify a candidate by its extension.

        Args:
            candidate: File to check

        Returns:
            ValidationResult; never raises
        """
        name = candidate.name or ""
        ext = get_extension(name)

        if ext is None:
            return ValidationResult(
                accepted=False,
                error_reason=f"{MISSING_EXTENSION} for {name}",
            )

        if ext not in ALLOWED_EXTENSIONS:
            return ValidationResult(
                accepted=False,
                extension=ext,
                error_reason=(
                    f"{UNSUPPORTED_TYPE} (.{ext}) for {name}. "
                    f"Allowed types: {', '.join(ALLOWED_EXTENSIONS)}"
                ),
            )

        if self.max_file_size is not None and candidate.size > self.max_file_size:
            return ValidationResult(
                accepted=False,
                extension=ext,
                error_reason=(
                    f"{FILE_TOO_LARGE}: {name}. "
                    f"Maximum size: {self.max_file_size // (1024 * 1024)}MB"
                ),
            )

        kind = EXTENSION_KINDS[ext]
        logger.info(f"Validated type for {name}: {kind} (.{ext})")
        return ValidationResult(
            accepted=True,
            detected_kind=kind,
            extension=ext,
            content_type=EXTENSION_CONTENT_TYPES[ext],
        )
