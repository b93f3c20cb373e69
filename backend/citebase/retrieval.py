"""
Context retrieval from a user's memory.
"""

import logging
from typing import Any, List, Optional

from .models.queries import RetrievedChunk

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 4


def normalize_top_k(value: Any, default: int = DEFAULT_TOP_K) -> int:
    """Return ``value`` if it is a positive integer, else ``default``."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value > 0 else default
    if isinstance(value, float) and value.is_integer() and value > 0:
        return int(value)
    return default


def _source_id(item: dict) -> Optional[str]:
    meta = item.get("meta") or item.get("metadata") or {}
    if not isinstance(meta, dict):
        return None
    return meta.get("originalFilename") or meta.get("url") or None


class ContextRetriever:
    """Fetch the top-K passages for a query from a memory store."""

    def __init__(self, memory_store, default_top_k: int = DEFAULT_TOP_K):
        # memory_store: anything with retrieve(memory_name, query, top_k)
        self.memory_store = memory_store
        self.default_top_k = default_top_k

    def retrieve(self, query: str, namespace: str, top_k: Any = None) -> List[RetrievedChunk]:
        """
        Retrieve chunks for ``query`` from the memory named ``namespace``.

        No matches, or a payload that is not a list, gives an empty list.
        Errors raised by the memory store propagate.
        """
        k = normalize_top_k(top_k, self.default_top_k)
        logger.info(f"Retrieving context for query: \"{query}\" from memory: {namespace} (topK={k})")
        payload = self.memory_store.retrieve(namespace, query, k)

        if not isinstance(payload, list):
            logger.info(f"Memory '{namespace}' returned no chunk list")
            return []

        chunks = [
            RetrievedChunk(text=str(item.get("text") or ""), source_id=_source_id(item))
            for item in payload
            if isinstance(item, dict)
        ]
        if not chunks:
            logger.info(f"No relevant context found in memory '{namespace}' for query.")
        return chunks
