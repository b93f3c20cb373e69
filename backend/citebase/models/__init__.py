from .documents import (
    AggregateStatus,
    BatchResult,
    FileOutcome,
    StorageResult,
    UploadCandidate,
    UploadResponse,
    ValidationResult,
)
from .queries import (
    AgentRunResult,
    CreateAgentRequest,
    CreateMemoryRequest,
    GroundedPrompt,
    ProvisioningOutcome,
    QueryErrorKind,
    QueryOutcome,
    QueryRequest,
    QueryResponse,
    RetrievedChunk,
)

__all__ = [
    "AggregateStatus",
    "BatchResult",
    "FileOutcome",
    "StorageResult",
    "UploadCandidate",
    "UploadResponse",
    "ValidationResult",
    "AgentRunResult",
    "CreateAgentRequest",
    "CreateMemoryRequest",
    "GroundedPrompt",
    "ProvisioningOutcome",
    "QueryErrorKind",
    "QueryOutcome",
    "QueryRequest",
    "QueryResponse",
    "RetrievedChunk",
]
