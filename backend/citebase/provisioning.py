"""
Creates the per-user memory and agent (pipe) on Langbase.
"""

import logging
from typing import Optional

from .config import Settings
from .errors import LangbaseError
from .langbase_client import LangbaseClient
from .models.queries import ProvisioningOutcome

logger = logging.getLogger(__name__)

AGENT_DESCRIPTION = "An AI agent to support users with their queries."
AGENT_SYSTEM_PROMPT = """You're a helpful AI assistant.
You will assist users with their queries.
Always ensure that you provide accurate and to the point information."""


def _is_conflict(message: str) -> bool:
    text = (message or "").lower()
    return "already exists" in text or "duplicate" in text


class ProvisioningService:
    def __init__(self, client: LangbaseClient, settings: Settings):
        self.client = client
        self.settings = settings

    def _failure(self, resource: str, name: str, error: LangbaseError) -> ProvisioningOutcome:
        label = "Memory" if resource == "memory" else "Pipe"
        if _is_conflict(error.message):
            return ProvisioningOutcome(
                resource=resource,
                name=name,
                created=False,
                http_status=409,
                message=f"{label} '{name}' already exists.",
            )
        return ProvisioningOutcome(
            resource=resource,
            name=name,
            created=False,
            http_status=500,
            message=f"Failed to create {label.lower()} '{name}': {error.message or 'Unknown error'}",
        )

    def create_memory(self, user_id: str, description: Optional[str] = None) -> ProvisioningOutcome:
        """Create the memory named after ``user_id``."""
        description = (description or "").strip() or f"{self.settings.memory_description} for {user_id}"
        logger.info(f"Attempting to create Langbase memory: {user_id}")
        try:
            memory = self.client.create_memory(
                name=user_id,
                description=description,
                embedding_model=self.settings.memory_embedding_model,
            )
        except LangbaseError as e:
            logger.error(f"Error creating Langbase memory '{user_id}': {e.message}")
            return self._failure("memory", user_id, e)

        return ProvisioningOutcome(
            resource="memory",
            name=user_id,
            created=True,
            http_status=201,
            message=f"Memory '{user_id}' created successfully.",
            payload=memory if isinstance(memory, dict) else None,
        )

    def create_agent(self, user_id: str) -> ProvisioningOutcome:
        """Create the pipe named after ``user_id``."""
        logger.info(f"Attempting to create Langbase pipe: {user_id}")
        try:
            pipe = self.client.create_pipe(
                name=user_id,
                description=AGENT_DESCRIPTION,
                messages=[{"role": "system", "content": AGENT_SYSTEM_PROMPT}],
            )
        except LangbaseError as e:
            logger.error(f"Error creating Langbase pipe '{user_id}': {e.message}")
            return self._failure("agent", user_id, e)

        return ProvisioningOutcome(
            resource="agent",
            name=user_id,
            created=True,
            http_status=201,
            message=f"Pipe '{user_id}' created successfully.",
            payload=pipe if isinstance(pipe, dict) else None,
        )
