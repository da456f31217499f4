"""
Bulk-load applications from a JSON file.

The file holds either a list of application documents or an object with an
"applications" list, in the same camelCase shape the submission form posts.

Usage:
    python -m app.scripts.seed_applicants seed.json            # add new applications
    python -m app.scripts.seed_applicants seed.json --reset    # clear the table first
"""

import sys
import json
import logging
import argparse
from pathlib import Path

logging.basicConfig(level=logging.INFO, format='%(asctime)s | %(levelname)-8s | %(message)s', datefmt='%H:%M:%S')
logger = logging.getLogger(__name__)


def load_documents(path: Path) -> list:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("applications", [])
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of applications")
    return data


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Seed the applications table from a JSON file")
    ap.add_argument("file", help="JSON file with application documents")
    ap.add_argument("--reset", action="store_true", help="Delete all stored applications before seeding")
    args = ap.parse_args(argv)

    from pydantic import ValidationError

    from app.core.exceptions import RepositoryException
    from app.models.applicant import ApplicationSubmission
    from app.repositories.applicant_repository import ApplicantRepository

    try:
        documents = load_documents(Path(args.file))
    except (OSError, ValueError) as e:
        logger.error(f"Could not read {args.file}: {e}")
        return 1

    repo = ApplicantRepository()
    try:
        if args.reset:
            logger.info(f"Removed {repo.clear_all()} existing application(s)")
        existing = {r.register_number.upper() for r in repo.get_all()}

        records = []
        for i, doc in enumerate(documents, start=1):
            try:
                record = ApplicationSubmission.model_validate(doc)
            except ValidationError as e:
                logger.warning(f"Skipping entry {i}: {e.errors()[0].get('msg')}")
                continue
            reg = record.register_number.upper()
            if reg in existing:
                logger.warning(f"Skipping entry {i}: {record.register_number} already stored")
                continue
            existing.add(reg)
            records.append(record)

        inserted = repo.append_batch(records)
    except RepositoryException as e:
        logger.error(f"Seeding failed: {e}")
        return 1

    logger.info(f"Seeded {inserted} of {len(documents)} application(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
