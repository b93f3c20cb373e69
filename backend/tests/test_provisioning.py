"""
Tests for memory and agent provisioning.
"""
from citebase.config import Settings
from citebase.errors import LangbaseError
from citebase.provisioning import AGENT_SYSTEM_PROMPT, ProvisioningService


def service(client):
    return ProvisioningService(client, Settings())


class TestCreateMemory:
    def test_created(self, mock_langbase):
        outcome = service(mock_langbase).create_memory("user-1")

        assert outcome.created
        assert outcome.http_status == 201
        assert outcome.payload == {"name": "user-1"}
        mock_langbase.create_memory.assert_called_once_with(
            name="user-1",
            description="User-specific knowledge base for user-1",
            embedding_model="openai:text-embedding-3-large",
        )

    def test_custom_description(self, mock_langbase):
        service(mock_langbase).create_memory("user-1", "  My resume  ")
        assert mock_langbase.create_memory.call_args.kwargs["description"] == "My resume"

    def test_already_exists_is_conflict(self, mock_langbase):
        mock_langbase.create_memory.side_effect = LangbaseError("Memory already exists", 400)

        outcome = service(mock_langbase).create_memory("user-1")

        assert not outcome.created
        assert outcome.http_status == 409
        assert outcome.message == "Memory 'user-1' already exists."

    def test_other_failure_is_500(self, mock_langbase):
        mock_langbase.create_memory.side_effect = LangbaseError("bad gateway", 502)

        outcome = service(mock_langbase).create_memory("user-1")

        assert outcome.http_status == 500
        assert "bad gateway" in outcome.message


class TestCreateAgent:
    def test_created_with_system_prompt(self, mock_langbase):
        outcome = service(mock_langbase).create_agent("user-1")

        assert outcome.http_status == 201
        kwargs = mock_langbase.create_pipe.call_args.kwargs
        assert kwargs["name"] == "user-1"
        assert kwargs["messages"] == [{"role": "system", "content": AGENT_SYSTEM_PROMPT}]

    def test_duplicate_is_conflict(self, mock_langbase):
        mock_langbase.create_pipe.side_effect = LangbaseError("Duplicate pipe name")
        assert service(mock_langbase).create_agent("user-1").http_status == 409
