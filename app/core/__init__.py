"""
Core Package - Best Outgoing Student Award Portal
app/core/__init__.py

Core infrastructure: dependencies, exceptions, admin tokens, logging.
"""

from app.core.dependencies import (
    get_applicant_repository,
    get_application_service,
    get_ranking_weights,
    require_admin,
)
from app.core.exceptions import (
    DatabaseConnectionException,
    DuplicateEntityException,
    EntityNotFoundException,
    EvaluationSaveException,
    RepositoryException,
    SubmissionClosedException,
)

__all__ = [
    # Dependencies
    "get_applicant_repository",
    "get_application_service",
    "get_ranking_weights",
    "require_admin",
    # Exceptions
    "DatabaseConnectionException",
    "DuplicateEntityException",
    "EntityNotFoundException",
    "EvaluationSaveException",
    "RepositoryException",
    "SubmissionClosedException",
]
