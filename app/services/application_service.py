"""
Application Submission Service - Best Outgoing Student Award Portal
app/services/application_service.py

Deadline check, duplicate check and persistence of new applications.
Transient connection failures on insert are retried with exponential backoff.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from app.config import get_settings
from app.core.exceptions import (
    DatabaseConnectionException,
    DuplicateEntityException,
    SubmissionClosedException,
)
from app.models.applicant import ApplicantRecord, ApplicationSubmission
from app.repositories.applicant_repository import ApplicantRepository

logger = logging.getLogger(__name__)


def parse_deadline(value: Optional[str]) -> Optional[datetime]:
    """ISO date/datetime, naive values read as UTC. None when unusable."""
    if not value:
        return None
    try:
        deadline = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Ignoring unparseable deadline {value!r}")
        return None
    if deadline.tzinfo is None:
        deadline = deadline.replace(tzinfo=timezone.utc)
    return deadline


class ApplicationService:
    """Accepts new applications into the repository."""

    def __init__(
        self,
        repository: ApplicantRepository,
        max_retries: Optional[int] = None,
        backoff_seconds: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        settings = get_settings()
        self.repository = repository
        self.max_retries = max_retries if max_retries is not None else settings.SUBMIT_MAX_RETRIES
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.SUBMIT_RETRY_BACKOFF_SECONDS
        self._sleep = sleep

    def is_open(self, now: Optional[datetime] = None) -> bool:
        deadline = parse_deadline(self.repository.get_deadline())
        if deadline is None:
            return True
        return (now or datetime.now(timezone.utc)) <= deadline

    def submit(self, submission: ApplicationSubmission, now: Optional[datetime] = None) -> ApplicantRecord:
        """
        Store a validated submission.

        Raises:
            SubmissionClosedException: deadline has passed
            DuplicateEntityException: register number, email or mobile already used
            DatabaseConnectionException: storage still unreachable after retries
        """
        now = now or datetime.now(timezone.utc)
        if not self.is_open(now):
            raise SubmissionClosedException(self.repository.get_deadline() or "")

        details = submission.personal_details
        clash = self.repository.find_existing_submission(
            details.register_number,
            emails=[details.personal_email or "", details.srm_email or ""],
            mobile=details.mobile_number or "",
        )
        if clash:
            raise DuplicateEntityException(
                f"An application with this {clash} already exists",
                field=clash,
            )

        record = submission.model_copy(update={
            "submitted_at": now.isoformat(),
            "faculty_score": None,
            "verified": False,
            "discarded_items": [],
        })
        self._append_with_retry(record)
        logger.info(f"Application submitted: {record.register_number}")
        return record

    def _append_with_retry(self, record: ApplicantRecord) -> None:
        attempt = 1
        while True:
            try:
                self.repository.append(record)
                return
            except DatabaseConnectionException as e:
                if attempt >= self.max_retries:
                    logger.error(f"Giving up on {record.register_number} after {attempt} attempts: {e}")
                    raise
                delay = self.backoff_seconds * (2 ** (attempt - 1))
                logger.warning(f"Attempt {attempt} failed for {record.register_number}, retrying in {delay:.2f}s")
                self._sleep(delay)
                attempt += 1
