"""
Batch Upload Engine
Validates, classifies and stores a batch of documents for one user,
then folds the per-file outcomes into a single response.
"""

import logging
from typing import List, Optional, Sequence

from .errors import BatchTooLargeError
from .models.documents import (
    AggregateStatus,
    BatchResult,
    FileOutcome,
    UploadCandidate,
)
from .storage import DocumentStorage
from .validation import FileValidator

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_MAX_BATCH = 5


def aggregate_status(outcomes: Sequence[FileOutcome]) -> AggregateStatus:
    """
    Classify a batch from its outcomes.

    Depends only on the counts and the error categories present, so the
    order outcomes arrive in never changes the answer.
    """
    total = len(outcomes)
    accepted = sum(1 for o in outcomes if o.accepted)

    if total == 0:
        return AggregateStatus.CLIENT_ERROR
    if accepted == total:
        return AggregateStatus.FULL_SUCCESS
    if accepted == 0:
        if all(o.error_category == "validation" for o in outcomes):
            return AggregateStatus.CLIENT_ERROR
        return AggregateStatus.SERVER_ERROR
    return AggregateStatus.PARTIAL_SUCCESS


def build_message(user_id: str, outcomes: Sequence[FileOutcome]) -> str:
    total = len(outcomes)
    accepted = sum(1 for o in outcomes if o.accepted)
    errors = [o.error_reason for o in outcomes if o.error_reason]

    if total == 0:
        return f"No files provided for memory '{user_id}'. Processed 0 files. Uploaded 0."
    if not errors:
        return (
            f"Successfully uploaded {accepted} document(s) for user {user_id}. "
            f"Processed {total} files. Uploaded {accepted}."
        )
    return (
        f"Processed {total} files for memory '{user_id}'. Uploaded {accepted}. "
        f"Errors/Skipped: {'; '.join(errors)}"
    )


class BatchUploadCoordinator:
    """Runs one upload batch against a storage backend."""

    def __init__(self, storage: DocumentStorage, validator: Optional[FileValidator] = None):
        self.storage = storage
        self.validator = validator or FileValidator()

    def upload_file(self, user_id: str, candidate: UploadCandidate) -> FileOutcome:
        """
        Validate and store a single file.

        Args:
            user_id: Owner of the file; also the storage namespace
            candidate: File to process

        Returns:
            FileOutcome, with a validation or persistence error category on failure
        """
        validation = self.validator.validate(candidate)
        if not validation.accepted:
            logger.warning(f"Rejected {candidate.name}: {validation.error_reason}")
            return FileOutcome(
                name=candidate.name,
                accepted=False,
                detected_kind=validation.detected_kind,
                error_reason=validation.error_reason,
                error_category="validation",
            )

        metadata = {
            "userId": user_id,
            "originalFilename": candidate.name,
            "detectedType": validation.detected_kind,
        }

        try:
            result = self.storage.put(
                namespace=user_id,
                document_name=candidate.name,
                content=candidate.content,
                content_type=validation.content_type,
                metadata=metadata,
            )
        except Exception as e:
            logger.error(f"Error during upload process for file {candidate.name}: {e}")
            return FileOutcome(
                name=candidate.name,
                accepted=False,
                detected_kind=validation.detected_kind,
                error_reason=f"Failed to upload {candidate.name}: {e}",
                error_category="persistence",
            )

        if not result.ok:
            detail = result.status_text or "Unknown error"
            return FileOutcome(
                name=candidate.name,
                accepted=False,
                detected_kind=validation.detected_kind,
                error_reason=f"Failed to upload {candidate.name}: {detail} (status {result.status_code})",
                error_category="persistence",
            )

        logger.info(f"Successfully uploaded {candidate.name} to memory '{user_id}'")
        return FileOutcome(
            name=candidate.name,
            accepted=True,
            detected_kind=validation.detected_kind,
        )

    def process(
        self,
        user_id: str,
        candidates: Sequence[UploadCandidate],
        max_batch: int = DEFAULT_MAX_BATCH,
    ) -> BatchResult:
        """
        Main entry point: upload a batch of files for a user.

        Every file is attempted; a failure never stops the rest of the batch
        and earlier uploads are not rolled back.

        Raises:
            BatchTooLargeError: more than ``max_batch`` files were given
        """
        if len(candidates) > max_batch:
            raise BatchTooLargeError(len(candidates), max_batch)

        logger.info(f"Upload request for user: {user_id}, files: {len(candidates)}")
        outcomes: List[FileOutcome] = [self.upload_file(user_id, c) for c in candidates]

        status = aggregate_status(outcomes)
        result = BatchResult(
            total_count=len(outcomes),
            accepted_count=sum(1 for o in outcomes if o.accepted),
            outcomes=outcomes,
            aggregate_status=status,
            message=build_message(user_id, outcomes),
        )
        logger.info(
            f"Batch for {user_id} finished: {result.accepted_count}/{result.total_count} "
            f"uploaded ({status.value})"
        )
        return result
