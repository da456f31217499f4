"""
Applicant Repository - Snowflake persistence
app/repositories/applicant_repository.py

Tables:
  - applications  one row per application: summary columns, faculty
                  evaluation columns and the full record as JSON
  - app_settings  key/value settings (submission DEADLINE)

Evaluation columns (FACULTY_SCORE, VERIFIED, DISCARDED_ITEMS) are written
independently of the JSON blob, so they take precedence when a row is read.
The full applicant list is cached in Redis for a short TTL and invalidated
on every write.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ValidationError

from app.config import get_settings
from app.core.exceptions import RepositoryException
from app.models.applicant import ApplicantRecord
from app.models.evaluation import EvaluationUpdate
from app.repositories.base import BaseRepository
from app.services.cache import TTL_APPLICANTS, get_cache

logger = logging.getLogger(__name__)

CACHE_KEY_APPLICANTS_ALL = "applicants:all"
CACHE_PATTERN_APPLICANTS = "applicants:*"
DEADLINE_KEY = "DEADLINE"
BATCH_CHUNK_SIZE = 100

_COLUMNS = [
    "register_number",
    "name",
    "department",
    "personal_email",
    "srm_email",
    "mobile_number",
    "cgpa",
    "arrears",
    "submitted_at",
    "faculty_score",
    "verified",
    "discarded_items",
    "json_full_data",
]


class ApplicantList(BaseModel):
    """Cache envelope for the full applicant list."""
    items: List[ApplicantRecord]


# =====================================================================
# Row <-> record conversion
# =====================================================================

def record_to_row(record: ApplicantRecord) -> Dict[str, Any]:
    """Flatten a record into the applications table columns."""
    details = record.personal_details
    academic = record.academic_record
    return {
        "register_number": details.register_number,
        "name": details.name,
        "department": details.department,
        "personal_email": details.personal_email or "",
        "srm_email": details.srm_email or "",
        "mobile_number": details.mobile_number or "",
        "cgpa": academic.cgpa,
        "arrears": f"Yes ({academic.number_of_arrears})" if academic.history_of_arrears else "No",
        "submitted_at": record.submitted_at or datetime.now(timezone.utc).isoformat(),
        "faculty_score": record.faculty_score,
        "verified": record.verified,
        "discarded_items": json.dumps(record.discarded_items),
        "json_full_data": json.dumps(record.to_json_payload()),
    }


def row_to_record(row: Dict[str, Any]) -> Optional[ApplicantRecord]:
    """
    Rebuild a record from a table row.

    Returns None for rows without usable JSON or without a register number.
    """
    row = {k.lower(): v for k, v in row.items()}
    raw = row.get("json_full_data")
    if not raw:
        return None
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if not isinstance(payload, dict):
        return None

    # Evaluation columns are newer than the JSON blob
    if row.get("faculty_score") not in (None, ""):
        payload["facultyScore"] = row["faculty_score"]
    if row.get("discarded_items"):
        payload["discardedItems"] = row["discarded_items"]
    if row.get("verified") is not None:
        payload["verified"] = row["verified"]

    try:
        record = ApplicantRecord.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Skipping unreadable application row: {e}")
        return None
    if not record.register_number:
        return None
    return record


class ApplicantRepository(BaseRepository):
    """Repository for applications and portal settings in Snowflake."""

    def __init__(self, table: Optional[str] = None, settings_table: Optional[str] = None):
        settings = get_settings()
        self.table = table or settings.APPLICATIONS_TABLE
        self.settings_table = settings_table or settings.SETTINGS_TABLE
        self.cache_ttl = TTL_APPLICANTS

    # =====================================================================
    # Schema
    # =====================================================================

    def create_tables(self) -> None:
        """Create the applications and settings tables if missing."""
        self.execute_query(
            f"""
            CREATE TABLE IF NOT EXISTS {self.table} (
                register_number VARCHAR(64) NOT NULL UNIQUE,
                name VARCHAR(255),
                department VARCHAR(255),
                personal_email VARCHAR(255),
                srm_email VARCHAR(255),
                mobile_number VARCHAR(32),
                cgpa FLOAT,
                arrears VARCHAR(32),
                submitted_at VARCHAR(64),
                faculty_score FLOAT,
                verified BOOLEAN DEFAULT FALSE,
                discarded_items VARCHAR,
                json_full_data VARCHAR,
                updated_at TIMESTAMP_TZ DEFAULT CURRENT_TIMESTAMP()
            )
            """,
            commit=True,
        )
        self.execute_query(
            f"""
            CREATE TABLE IF NOT EXISTS {self.settings_table} (
                setting_key VARCHAR(64) NOT NULL UNIQUE,
                setting_value VARCHAR
            )
            """,
            commit=True,
        )
        logger.info(f"Ensured tables {self.table}, {self.settings_table}")

    def clear_all(self) -> int:
        """Delete every application row. Settings are kept."""
        deleted = self.execute_query(f"DELETE FROM {self.table}", commit=True)
        cache = get_cache()
        if cache:
            try:
                cache.delete_pattern(CACHE_PATTERN_APPLICANTS)
            except Exception as e:
                logger.warning(f"Applicant cache flush failed: {e}")
        logger.info(f"Cleared {deleted} application rows")
        return deleted or 0

    # =====================================================================
    # Reads
    # =====================================================================

    def get_all(self) -> List[ApplicantRecord]:
        """All readable applications, oldest submission first."""
        cache = get_cache()
        if cache:
            try:
                cached = cache.get(CACHE_KEY_APPLICANTS_ALL, ApplicantList)
                if cached is not None:
                    return cached.items
            except Exception as e:
                logger.warning(f"Applicant cache read failed: {e}")

        rows = self.execute_query(
            f"SELECT {', '.join(_COLUMNS)} FROM {self.table} ORDER BY submitted_at",
            fetch_all=True,
        ) or []
        records = [record for record in (row_to_record(r) for r in rows) if record is not None]

        if cache:
            try:
                cache.set(CACHE_KEY_APPLICANTS_ALL, ApplicantList(items=records), self.cache_ttl)
            except Exception as e:
                logger.warning(f"Applicant cache write failed: {e}")
        return records

    def get_by_register_number(self, register_number: str) -> Optional[ApplicantRecord]:
        """Case-insensitive lookup by register number."""
        wanted = register_number.strip().upper()
        for record in self.get_all():
            if record.register_number.upper() == wanted:
                return record
        return None

    def find_existing_submission(
        self,
        register_number: str,
        emails: Sequence[str] = (),
        mobile: str = "",
    ) -> Optional[str]:
        """
        Name of the field that clashes with an existing application
        ("Register Number", "Email Address", "Mobile Number"), or None.
        """
        reg = register_number.strip().upper()
        wanted_emails = {e.strip().lower() for e in emails if e and e.strip()}
        mobile = mobile.strip()
        for record in self.get_all():
            details = record.personal_details
            if details.register_number.upper() == reg:
                return "Register Number"
            existing = {(details.personal_email or "").strip().lower(), (details.srm_email or "").strip().lower()}
            if wanted_emails & (existing - {""}):
                return "Email Address"
            if mobile and (details.mobile_number or "").strip() == mobile:
                return "Mobile Number"
        return None

    # =====================================================================
    # Writes
    # =====================================================================

    def append(self, record: ApplicantRecord) -> None:
        """Insert one application."""
        row = record_to_row(record)
        placeholders = ", ".join(["%s"] * len(_COLUMNS))
        self.execute_query(
            f"INSERT INTO {self.table} ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
            tuple(row[c] for c in _COLUMNS),
            commit=True,
        )
        self._invalidate_cache()
        logger.info(f"Stored application {record.register_number}")

    def append_batch(self, records: Sequence[ApplicantRecord]) -> int:
        """Insert many applications in chunks of BATCH_CHUNK_SIZE."""
        if not records:
            return 0
        placeholders = ", ".join(["%s"] * len(_COLUMNS))
        sql = f"INSERT INTO {self.table} ({', '.join(_COLUMNS)}) VALUES ({placeholders})"
        rows = [tuple(record_to_row(r)[c] for c in _COLUMNS) for r in records]

        inserted = 0
        with self.get_cursor(dict_cursor=False) as cursor:
            for start in range(0, len(rows), BATCH_CHUNK_SIZE):
                chunk = rows[start:start + BATCH_CHUNK_SIZE]
                logger.info(f"Pushing chunk {start // BATCH_CHUNK_SIZE + 1} ({len(chunk)} rows)")
                cursor.executemany(sql, chunk)
                cursor.connection.commit()
                inserted += len(chunk)
        self._invalidate_cache()
        return inserted

    def update_evaluation(
        self,
        register_number: str,
        faculty_score: float,
        verified: bool,
        discarded_items: Sequence[str],
    ) -> bool:
        """Persist one faculty evaluation. Returns False on failure."""
        results = self.batch_update_evaluations([
            EvaluationUpdate(
                register_number=register_number,
                faculty_score=faculty_score,
                verified=verified,
                discarded_items=list(discarded_items),
            )
        ])
        return results.get(register_number.strip(), False)

    def batch_update_evaluations(self, updates: Sequence[EvaluationUpdate]) -> Dict[str, bool]:
        """
        Persist evaluations, one independent UPDATE per applicant.

        Each statement is committed on its own, so one failure never rolls
        back another applicant. Only the evaluation columns are touched.

        Returns:
            register_number -> True when the row was updated
        """
        results: Dict[str, bool] = {u.register_number: False for u in updates}
        if not updates:
            return results

        sql = (
            f"UPDATE {self.table} "
            f"SET FACULTY_SCORE = %s, VERIFIED = %s, DISCARDED_ITEMS = %s, UPDATED_AT = CURRENT_TIMESTAMP() "
            f"WHERE UPPER(REGISTER_NUMBER) = UPPER(%s)"
        )
        try:
            with self.get_cursor(dict_cursor=False) as cursor:
                for update in updates:
                    try:
                        cursor.execute(sql, (
                            update.faculty_score,
                            update.verified,
                            json.dumps(list(update.discarded_items)),
                            update.register_number,
                        ))
                        cursor.connection.commit()
                        results[update.register_number] = cursor.rowcount > 0
                        if cursor.rowcount == 0:
                            logger.warning(f"No application found for {update.register_number}")
                    except Exception as e:
                        logger.error(f"Failed to update evaluation for {update.register_number}: {e}")
        except RepositoryException as e:
            logger.error(f"Evaluation batch update failed: {e}")

        if any(results.values()):
            self._invalidate_cache()
        logger.info(f"Updated {sum(results.values())}/{len(results)} evaluations")
        return results

    # =====================================================================
    # Settings
    # =====================================================================

    def get_deadline(self) -> Optional[str]:
        row = self.execute_query(
            f"SELECT setting_value FROM {self.settings_table} WHERE setting_key = %s",
            (DEADLINE_KEY,),
            fetch_one=True,
        )
        value = self.row_to_dict(row).get("setting_value")
        return value or None

    def set_deadline(self, value: str) -> None:
        self.execute_query(
            f"""
            MERGE INTO {self.settings_table} t
            USING (SELECT %s AS setting_key, %s AS setting_value) s
            ON t.setting_key = s.setting_key
            WHEN MATCHED THEN UPDATE SET setting_value = s.setting_value
            WHEN NOT MATCHED THEN INSERT (setting_key, setting_value)
                VALUES (s.setting_key, s.setting_value)
            """,
            (DEADLINE_KEY, value),
            commit=True,
        )
        logger.info(f"Deadline set to {value!r}")

    # =====================================================================

    def _invalidate_cache(self) -> None:
        cache = get_cache()
        if cache:
            try:
                cache.delete(CACHE_KEY_APPLICANTS_ALL)
            except Exception as e:
                logger.warning(f"Applicant cache invalidation failed: {e}")
