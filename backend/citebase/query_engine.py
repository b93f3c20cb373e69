"""
Query Engine
Retrieves context from a user's memory, builds a cited prompt and runs the
user's agent over it.
"""

import logging
from typing import Any, Optional

from .citations import CitationAssembler
from .errors import UpstreamError
from .models.queries import AgentRunResult, QueryErrorKind, QueryOutcome
from .retrieval import ContextRetriever

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def classify_failure(message: str, status_code: Optional[int] = None) -> QueryOutcome:
    """
    Turn a collaborator error into a failed QueryOutcome.

    A missing agent and a missing memory both only show up as "not found"
    in the message text, so both become 404.
    """
    if "not found" in (message or "").lower():
        return QueryOutcome(
            error_kind=QueryErrorKind.NOT_FOUND,
            error_message=message,
            http_status=404,
        )
    return QueryOutcome(
        error_kind=QueryErrorKind.UPSTREAM_FAILURE,
        error_message=message,
        http_status=status_code or 500,
    )


class QueryOrchestrator:
    """Answer a user's question from their own documents."""

    def __init__(self, retriever: ContextRetriever, agent, assembler: Optional[CitationAssembler] = None):
        # agent: anything with run_pipe(name, messages) -> AgentRunResult
        self.retriever = retriever
        self.agent = agent
        self.assembler = assembler or CitationAssembler()

    def answer(self, user_id: str, query: str, top_k: Any = None) -> QueryOutcome:
        """
        Main entry point: run retrieval, prompt assembly and completion.

        Args:
            user_id: Names both the memory and the agent to use
            query: The user's question
            top_k: Number of chunks to retrieve; invalid values use the default

        Returns:
            QueryOutcome with the completion and retrieved chunks, or a
            classified failure without chunks
        """
        try:
            chunks = self.retriever.retrieve(query, namespace=user_id, top_k=top_k)
            prompt = self.assembler.assemble(chunks)

            logger.info(f"Running pipe '{user_id}' for query: \"{query}\" with {len(chunks)} chunks")
            result: AgentRunResult = self.agent.run_pipe(
                user_id,
                [
                    {"role": "system", "content": prompt.body},
                    {"role": "user", "content": query},
                ],
            )
        except UpstreamError as e:
            logger.error(f"Agent execution failed for userId \"{user_id}\": {e.message}")
            return classify_failure(e.message, e.status_code)
        except Exception as e:
            logger.exception(f"Unexpected error for userId \"{user_id}\", query \"{query}\"")
            return QueryOutcome(
                error_kind=QueryErrorKind.UNKNOWN,
                error_message=f"Agent execution failed: {e}",
                http_status=500,
            )

        if result.completion is None:
            message = result.error_message or "Failed to get completion from agent pipe."
            logger.error(f"Error or no completion running pipe '{user_id}': {message}")
            return classify_failure(message, result.status_code)

        logger.info(f"Agent response generated successfully from pipe '{user_id}'.")
        return QueryOutcome(completion=result.completion, context_chunks=chunks, http_status=200)
