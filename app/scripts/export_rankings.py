"""
Export the current ranking to CSV.

Usage:
    python -m app.scripts.export_rankings                          # writes bo_student_rankings.csv
    python -m app.scripts.export_rankings --out ranks.csv
    python -m app.scripts.export_rankings --department "Computer Science"
"""

import sys
import logging
import argparse
from pathlib import Path

logging.basicConfig(level=logging.INFO, format='%(asctime)s | %(levelname)-8s | %(message)s', datefmt='%H:%M:%S')
logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    from app.services.export import EXPORT_FILENAME

    ap = argparse.ArgumentParser(description="Export applicant rankings as CSV")
    ap.add_argument("--out", default=EXPORT_FILENAME, help="Output file path")
    ap.add_argument("--department", default=None, help="Only export one department (ranks stay global)")
    args = ap.parse_args(argv)

    from app.config import get_settings
    from app.core.exceptions import RepositoryException
    from app.repositories.applicant_repository import ApplicantRepository
    from app.scoring.overrides import EvaluationSession
    from app.services.export import filter_entries, rankings_to_csv

    try:
        records = ApplicantRepository().get_all()
    except RepositoryException as e:
        logger.error(f"Could not load applications: {e}")
        return 1

    ranked = EvaluationSession(records, get_settings().ranking_weights).ranked()
    entries = filter_entries(ranked, department=args.department)

    out = Path(args.out)
    out.write_text(rankings_to_csv(entries), encoding="utf-8")
    logger.info(f"Wrote {len(entries)} of {len(ranked)} ranked applicant(s) to {out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
