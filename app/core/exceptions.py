"""
Custom Exceptions - Best Outgoing Student Award Portal
app/core/exceptions.py

Custom exception classes for repository and evaluation operations.
"""

from typing import Iterable


class RepositoryException(Exception):
    """Base exception for repository operations."""

    pass


class EntityNotFoundException(RepositoryException):
    """Entity not found in storage."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with ID {entity_id} not found")


class DuplicateEntityException(RepositoryException):
    """Duplicate entity violation."""

    def __init__(self, message: str = "Entity already exists", field: str = ""):
        self.message = message
        self.field = field
        super().__init__(message)


class DatabaseConnectionException(RepositoryException):
    """Database connection failure."""

    def __init__(self, message: str = "Database connection failed"):
        self.message = message
        super().__init__(message)


class EvaluationSaveException(RepositoryException):
    """Faculty evaluations could not be persisted."""

    def __init__(self, failed: Iterable[str], message: str = "Failed to save evaluations"):
        self.failed = sorted(failed)
        self.message = message
        super().__init__(f"{message}: {', '.join(self.failed)}")


class SubmissionClosedException(Exception):
    """Application deadline has passed."""

    def __init__(self, deadline: str):
        self.deadline = deadline
        super().__init__(f"Applications closed at {deadline}")
