"""
Pydantic models for batch document uploads.
"""

from enum import Enum
from typing import List, Optional, Literal

from pydantic import BaseModel, ConfigDict, Field


DocumentKind = Literal["pdf", "word", "text", "unknown"]
ErrorCategory = Literal["validation", "persistence"]


class AggregateStatus(str, Enum):
    """Single classification of a whole upload batch."""
    FULL_SUCCESS = "full_success"
    PARTIAL_SUCCESS = "partial_success"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"

    @property
    def http_status(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    AggregateStatus.FULL_SUCCESS: 200,
    AggregateStatus.PARTIAL_SUCCESS: 207,
    AggregateStatus.CLIENT_ERROR: 400,
    AggregateStatus.SERVER_ERROR: 500,
}


class UploadCandidate(BaseModel):
    """A file received by the HTTP layer, read into memory once."""
    model_config = ConfigDict(frozen=True)

    name: str
    content: bytes = b""
    declared_size: Optional[int] = None

    @property
    def size(self) -> int:
        if self.declared_size is not None:
            return self.declared_size
        return len(self.content)


class ValidationResult(BaseModel):
    """Result of classifying a single candidate by its extension."""
    model_config = ConfigDict(frozen=True)

    accepted: bool
    detected_kind: DocumentKind = "unknown"
    extension: Optional[str] = None
    content_type: Optional[str] = None
    error_reason: Optional[str] = None


class FileOutcome(BaseModel):
    """What happened to one file of a batch."""
    model_config = ConfigDict(frozen=True)

    name: str
    accepted: bool
    detected_kind: DocumentKind = "unknown"
    error_reason: Optional[str] = None
    error_category: Optional[ErrorCategory] = None


class BatchResult(BaseModel):
    """Aggregate result of one upload batch."""
    model_config = ConfigDict(frozen=True)

    total_count: int
    accepted_count: int
    outcomes: List[FileOutcome]
    aggregate_status: AggregateStatus
    message: str

    @property
    def http_status(self) -> int:
        return self.aggregate_status.http_status

    @property
    def errors(self) -> List[str]:
        return [o.error_reason for o in self.outcomes if o.error_reason]


class StorageResult(BaseModel):
    """Response of a Storage collaborator's put()."""
    ok: bool
    status_code: int = 200
    status_text: str = ""


class UploadResponse(BaseModel):
    """Response body of the batch upload endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    message: str
    processed_files: int = Field(alias="processedFiles")
    uploaded_files: Optional[int] = Field(default=None, alias="uploadedFiles")
    errors: Optional[List[str]] = None

    @classmethod
    def from_batch(cls, result: BatchResult) -> "UploadResponse":
        return cls(
            message=result.message,
            processed_files=result.total_count,
            uploaded_files=result.accepted_count or None,
            errors=result.errors or None,
        )
