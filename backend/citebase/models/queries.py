"""
Pydantic models for retrieval-augmented queries and provisioning.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Literal

from pydantic import BaseModel, ConfigDict, Field


class QueryErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    UPSTREAM_FAILURE = "upstream_failure"
    UNKNOWN = "unknown"


class RetrievedChunk(BaseModel):
    """A passage returned by the memory store, with where it came from."""
    model_config = ConfigDict(frozen=True)

    text: str
    source_id: Optional[str] = None


class GroundedPrompt(BaseModel):
    """System prompt built from retrieved chunks."""
    model_config = ConfigDict(frozen=True)

    body: str
    context: str = ""
    sources: Dict[str, int] = Field(default_factory=dict)


class AgentRunResult(BaseModel):
    """Result of a non-streaming agent (pipe) run."""
    completion: Optional[str] = None
    error_message: Optional[str] = None
    status_code: Optional[int] = None


class QueryOutcome(BaseModel):
    """Final result of a query, success or classified failure."""
    model_config = ConfigDict(frozen=True)

    completion: Optional[str] = None
    context_chunks: List[RetrievedChunk] = Field(default_factory=list)
    error_kind: Optional[QueryErrorKind] = None
    error_message: Optional[str] = None
    http_status: int = 200

    @property
    def succeeded(self) -> bool:
        return self.error_kind is None


class QueryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    query: str
    # Anything that is not a positive integer falls back to the default
    top_k: Optional[Any] = Field(default=None, alias="topK")


class QueryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    response: str
    context_chunks: List[Dict[str, Any]] = Field(alias="contextChunks")


class CreateMemoryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    description: Optional[str] = None


class CreateAgentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")


class ProvisioningOutcome(BaseModel):
    """Result of creating a memory or an agent for a user."""
    resource: Literal["memory", "agent"]
    name: str
    created: bool
    http_status: int
    message: str
    payload: Optional[Dict[str, Any]] = None
