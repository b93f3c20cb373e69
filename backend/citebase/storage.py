"""
Document storage backends.
Each backend persists one uploaded document under a per-user namespace.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

from google.api_core import exceptions as gcp_exceptions
from google.cloud import storage, firestore

from .config import Settings
from .langbase_client import LangbaseClient
from .models.documents import StorageResult

logger = logging.getLogger(__name__)

# Langbase memories only take a handful of MIME types; Word files go up as plain text
LANGBASE_CONTENT_TYPES = {
    "application/pdf": "application/pdf",
    "text/plain": "text/plain",
    "application/msword": "text/plain",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "text/plain",
}


class DocumentStorage:
    """Interface shared by all storage backends."""

    def put(
        self,
        namespace: str,
        document_name: str,
        content: bytes,
        content_type: str,
        metadata: Dict[str, str],
    ) -> StorageResult:
        raise NotImplementedError


class LangbaseDocumentStorage(DocumentStorage):
    """Store documents in the user's Langbase memory."""

    def __init__(self, client: LangbaseClient):
        self.client = client

    def put(self, namespace, document_name, content, content_type, metadata):
        upload_type = LANGBASE_CONTENT_TYPES.get(content_type, "text/plain")
        logger.info(f"Uploading {document_name} (as {upload_type}) to Langbase memory: {namespace}")
        result = self.client.upload_document(
            memory_name=namespace,
            document_name=document_name,
            content=content,
            content_type=upload_type,
            meta=metadata,
        )
        if not result.ok:
            logger.error(
                f"Langbase upload failed for {document_name} to memory '{namespace}'. "
                f"Status: {result.status_code}, StatusText: {result.status_text}"
            )
        return result


class GCSDocumentStorage(DocumentStorage):
    """Store original documents in Cloud Storage with metadata in Firestore."""

    def __init__(
        self,
        settings: Settings,
        storage_client: Optional[storage.Client] = None,
        db: Optional[firestore.Client] = None,
    ):
        self.settings = settings
        self.storage_client = storage_client or storage.Client(project=settings.gcp_project_id)
        self.bucket = self.storage_client.bucket(settings.gcs_bucket)
        self.db = db or firestore.Client(project=settings.gcp_project_id)

    def put(self, namespace, document_name, content, content_type, metadata):
        """
        Upload a document to GCS and record it in Firestore.

        Args:
            namespace: User namespace; documents live under ``<prefix>/<namespace>/``
            document_name: Original filename
            content: Raw file bytes
            content_type: MIME type to store the blob with
            metadata: Custom metadata attached to the blob and the Firestore record

        Returns:
            StorageResult; GCP API errors are reported, not raised
        """
        document_id = str(uuid.uuid4())
        blob_path = f"{self.settings.documents_prefix}/{namespace}/{document_id}/{document_name}"
        blob = self.bucket.blob(blob_path)
        blob.metadata = dict(metadata)

        try:
            blob.upload_from_string(content, content_type=content_type)
            gcs_uri = f"gs://{self.settings.gcs_bucket}/{blob_path}"
            logger.info(f"Uploaded original document to {gcs_uri}")

            self.db.collection("documents").document(document_id).set({
                "document_id": document_id,
                "namespace": namespace,
                "filename": document_name,
                "content_type": content_type,
                "size_bytes": len(content),
                "gcs_uri": gcs_uri,
                "upload_date": datetime.now(timezone.utc).isoformat(),
                "metadata": dict(metadata),
            })
            logger.info(f"Saved metadata for document {document_id}")
        except gcp_exceptions.GoogleAPICallError as e:
            logger.error(f"Error storing {document_name} in GCS: {e}")
            return StorageResult(ok=False, status_code=int(e.code or 500), status_text=e.message)

        return StorageResult(ok=True, status_code=200, status_text="OK")


def build_storage(settings: Settings, client: Optional[LangbaseClient] = None) -> DocumentStorage:
    """Pick the storage backend named in the settings."""
    if settings.storage_backend == "gcs":
        return GCSDocumentStorage(settings)
    if settings.storage_backend == "langbase":
        if client is None:
            raise ValueError("The langbase storage backend needs a LangbaseClient")
        return LangbaseDocumentStorage(client)
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
