"""
Ranking Export - Best Outgoing Student Award Portal
app/services/export.py

Flattens ranked entries into a pandas DataFrame and CSV text.
"""

from collections import Counter
from io import StringIO
from typing import Dict, Iterable, List, Optional

import pandas as pd

from app.models.enumerations import Category
from app.models.ranking import RankedEntry

EXPORT_FILENAME = "bo_student_rankings.csv"

CATEGORY_LABELS: Dict[Category, str] = {
    Category.CGPA: "CGPA",
    Category.INTERNSHIPS: "Internships",
    Category.PROJECTS: "Projects",
    Category.HACKATHONS: "Hackathons",
    Category.RESEARCH: "Research",
    Category.ENTREPRENEURSHIP: "Entrepreneurship",
    Category.CERTIFICATIONS: "Certifications",
    Category.COMPETITIVE_EXAMS: "Competitive Exams",
    Category.SPORTS_OR_CULTURAL: "Sports / Cultural",
    Category.VOLUNTEERING: "Volunteering",
    Category.SCHOLARSHIPS: "Scholarships",
    Category.CLUB_ACTIVITIES: "Club Activities",
    Category.DEPARTMENT_CONTRIBUTIONS: "Department Contributions",
    Category.REFERENCES: "References",
}

EXPORT_COLUMNS: List[str] = (
    ["Rank", "Register Number", "Name", "Department"]
    + [CATEGORY_LABELS[c] for c in Category]
    + ["Computed Score", "Faculty Score", "Effective Score", "Verified"]
)


def rankings_to_dataframe(entries: Iterable[RankedEntry]) -> pd.DataFrame:
    """One row per ranked entry, columns in EXPORT_COLUMNS order."""
    rows = []
    for entry in entries:
        row = {
            "Rank": entry.rank,
            "Register Number": entry.register_number,
            "Name": entry.name,
            "Department": entry.department,
        }
        for category in Category:
            row[CATEGORY_LABELS[category]] = entry.breakdown.get(category.value, 0.0)
        row["Computed Score"] = entry.computed_score
        row["Faculty Score"] = entry.faculty_score
        row["Effective Score"] = entry.total_score
        row["Verified"] = "Yes" if entry.verified else "No"
        rows.append(row)
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def rankings_to_csv(entries: Iterable[RankedEntry]) -> str:
    """CSV text with a header row; missing faculty scores are left blank."""
    buf = StringIO()
    rankings_to_dataframe(entries).to_csv(buf, index=False, float_format="%.2f")
    return buf.getvalue()


def filter_entries(
    entries: Iterable[RankedEntry],
    search: Optional[str] = None,
    department: Optional[str] = None,
) -> List[RankedEntry]:
    """Search by name/register number and department. Ranks are kept as-is."""
    needle = (search or "").strip().lower()
    result = []
    for entry in entries:
        if department and entry.department != department:
            continue
        if needle and needle not in entry.name.lower() and needle not in entry.register_number.lower():
            continue
        result.append(entry)
    return result


def department_counts(entries: Iterable[RankedEntry]) -> Dict[str, int]:
    """Applicants per department, largest first."""
    counts = Counter(entry.department or "Unknown" for entry in entries)
    return dict(sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])))
