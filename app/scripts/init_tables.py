"""
Create the applications and settings tables in Snowflake.

Usage:
    python -m app.scripts.init_tables            # create tables if missing
    python -m app.scripts.init_tables --reset    # also delete every application row
"""

import sys
import logging
import argparse

logging.basicConfig(level=logging.INFO, format='%(asctime)s | %(levelname)-8s | %(message)s', datefmt='%H:%M:%S')
logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Create (or reset) the award portal tables")
    ap.add_argument("--reset", action="store_true", help="Delete all stored applications after creating tables")
    args = ap.parse_args(argv)

    from app.core.exceptions import RepositoryException
    from app.repositories.applicant_repository import ApplicantRepository

    repo = ApplicantRepository()
    try:
        repo.create_tables()
        if args.reset:
            deleted = repo.clear_all()
            logger.info(f"Reset complete: {deleted} application(s) removed")
    except RepositoryException as e:
        logger.error(f"Table setup failed: {e}")
        return 1

    logger.info(f"Tables ready: {repo.table}, {repo.settings_table}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
