"""
Repositories Package - Best Outgoing Student Award Portal
app/repositories/__init__.py

Data access layer for Snowflake database operations.
"""

from app.repositories.base import ApplicantStore, BaseRepository
from app.repositories.applicant_repository import ApplicantRepository

__all__ = [
    "ApplicantStore",
    "BaseRepository",
    "ApplicantRepository",
]
