"""
Langbase API client.
Thin httpx wrapper over the memory, document and pipe endpoints.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import Settings
from .errors import LangbaseError
from .models.documents import StorageResult
from .models.queries import AgentRunResult

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Pull a human-readable message out of an error response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if body.get("message"):
            return str(body["message"])

    return response.text or response.reason_phrase or f"HTTP {response.status_code}"


class LangbaseClient:
    """Client for one Langbase account, constructed once per process."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.langbase.com",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not api_key:
            raise ValueError("Missing Langbase API key. Set LANGBASE_API_KEY in your .env file.")
        self._http = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"Authorization": f"Bearer {api_key}"},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "LangbaseClient":
        return cls(
            api_key=settings.langbase_api_key,
            base_url=settings.langbase_base_url,
            timeout=settings.request_timeout_seconds,
        )

    def close(self):
        self._http.close()

    def _post(self, path: str, payload: Dict[str, Any]) -> Any:
        try:
            response = self._http.post(path, json=payload)
        except httpx.TimeoutException as e:
            raise LangbaseError(f"Request to Langbase timed out: {path}") from e
        except httpx.HTTPError as e:
            raise LangbaseError(f"Could not reach Langbase: {e}") from e

        if response.is_error:
            raise LangbaseError(_error_message(response), status_code=response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise LangbaseError(f"Malformed response from Langbase: {path}") from e

    # ------------------------------------------------------------------
    # Memories
    # ------------------------------------------------------------------

    def create_memory(self, name: str, description: str, embedding_model: str) -> Dict[str, Any]:
        """Create a memory (knowledge namespace)."""
        return self._post(
            "/v1/memory",
            {"name": name, "description": description, "embedding_model": embedding_model},
        )

    def retrieve(self, memory_name: str, query: str, top_k: int) -> Any:
        """
        Retrieve the top-K chunks for a query from one memory.

        Returns whatever the API sent back; normally a list of
        ``{"text": ..., "meta": {...}}`` dicts.
        """
        return self._post(
            "/v1/memory/retrieve",
            {"query": query, "memory": [{"name": memory_name}], "topK": top_k},
        )

    def upload_document(
        self,
        memory_name: str,
        document_name: str,
        content: bytes,
        content_type: str,
        meta: Dict[str, str],
    ) -> StorageResult:
        """
        Upload a document to a memory.

        Langbase hands out a signed URL first, then the raw bytes are PUT to it.
        """
        signed = self._post(
            "/v1/memory/documents",
            {"memoryName": memory_name, "documentName": document_name, "meta": meta},
        )
        signed_url = signed.get("signedUrl") if isinstance(signed, dict) else None
        if not signed_url:
            raise LangbaseError("Langbase did not return a signed upload URL")

        # The signed URL carries its own credentials
        request = self._http.build_request(
            "PUT", signed_url, content=content, headers={"Content-Type": content_type}
        )
        del request.headers["Authorization"]
        try:
            response = self._http.send(request)
        except httpx.HTTPError as e:
            raise LangbaseError(f"Document upload failed: {e}") from e

        return StorageResult(
            ok=not response.is_error,
            status_code=response.status_code,
            status_text=response.reason_phrase,
        )

    # ------------------------------------------------------------------
    # Pipes (agents)
    # ------------------------------------------------------------------

    def create_pipe(self, name: str, description: str, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        """Create a pipe (chat agent)."""
        return self._post(
            "/v1/pipes",
            {"name": name, "description": description, "messages": messages},
        )

    def run_pipe(self, name: str, messages: List[Dict[str, str]]) -> AgentRunResult:
        """
        Run a pipe without streaming.

        API errors come back as an AgentRunResult carrying the error message
        and status instead of being raised.
        """
        try:
            body = self._post("/v1/pipes/run", {"name": name, "messages": messages, "stream": False})
        except LangbaseError as e:
            return AgentRunResult(error_message=e.message, status_code=e.status_code)

        completion = body.get("completion") if isinstance(body, dict) else None
        if completion is None:
            return AgentRunResult(error_message="Failed to get completion from agent pipe.")
        return AgentRunResult(completion=completion)
