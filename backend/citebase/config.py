from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Langbase (memories, pipes, document uploads)
    langbase_api_key: str = ""
    langbase_base_url: str = "https://api.langbase.com"
    request_timeout_seconds: float = 30.0

    # Where uploaded documents are persisted: "langbase" or "gcs"
    storage_backend: str = "langbase"

    # GCP Settings (only used by the "gcs" storage backend)
    gcp_project_id: str = "citebase"
    gcs_bucket: str = "citebase-documents"
    documents_prefix: str = "documents"

    # Upload limits
    max_batch_files: int = 5
    max_file_size_bytes: int = 50 * 1024 * 1024

    # Retrieval
    default_top_k: int = 4

    # Provisioning defaults
    memory_embedding_model: str = "openai:text-embedding-3-large"
    memory_description: str = "User-specific knowledge base"

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
