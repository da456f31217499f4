"""
Applicant Models - Best Outgoing Student Award Portal
app/models/applicant.py

Pydantic models for one submitted application. Storage and the API speak
camelCase JSON; attributes are snake_case.

Parsing is lenient: stored records were written by several generations of
the submission form, so missing or malformed numbers read as zero, missing
collections read as empty, and unknown top-level sections are kept verbatim
in ``extension_data`` instead of being dropped.
"""

import json
import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.models.enumerations import Category


def lenient_float(value: Any) -> float:
    """Parse a number, returning 0.0 for anything unusable."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def lenient_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        # Sheet exports render the arrears flag as "Yes (2)"
        return text in {"true", "y", "1"} or text.startswith("yes")
    return False


class PortalModel(BaseModel):
    """Base model: camelCase aliases, item-level extra keys preserved."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="allow",
    )


# ---------------------------------------------------------------------------
# Achievement items
# ---------------------------------------------------------------------------

class AchievementItem(PortalModel):
    """Common base: every item carries an id unique within its category."""

    id: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> str:
        return "" if value is None else str(value)


class Internship(AchievementItem):
    company: Optional[str] = None
    role: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    certificate_link: Optional[str] = None
    description: Optional[str] = None


class Project(AchievementItem):
    title: Optional[str] = None
    description: Optional[str] = None
    tech_stack: Optional[str] = None
    github_link: Optional[str] = None
    deployed_link: Optional[str] = None
    proof_link: Optional[str] = None


class Hackathon(AchievementItem):
    name: Optional[str] = None
    project_built: Optional[str] = None
    team_size: float = 0
    position: Optional[str] = None
    proof_link: Optional[str] = None

    @field_validator("team_size", mode="before")
    @classmethod
    def parse_team_size(cls, value: Any) -> float:
        return lenient_float(value)


class Research(AchievementItem):
    title: Optional[str] = None
    journal_or_conference: Optional[str] = None
    index_status: Optional[str] = None
    publication_status: Optional[str] = None
    link: Optional[str] = None

    @field_validator("index_status", "publication_status", mode="before")
    @classmethod
    def normalize_status(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(getattr(value, "value", value)).strip().lower()


class Entrepreneurship(AchievementItem):
    startup_name: Optional[str] = None
    registration_details: Optional[str] = None
    revenue_or_funding_status: Optional[str] = None
    description: Optional[str] = None
    proof_link: Optional[str] = None


class Certification(AchievementItem):
    provider: Optional[str] = None
    certificate_name: Optional[str] = None
    validation_id: Optional[str] = None
    proof_link: Optional[str] = None


class CompetitiveExam(AchievementItem):
    exam_name: Optional[str] = None
    score_or_rank: Optional[str] = None
    proof_link: Optional[str] = None


class SportsOrCultural(AchievementItem):
    event_name: Optional[str] = None
    level: Optional[str] = None
    position_won: Optional[str] = None
    proof_link: Optional[str] = None

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(getattr(value, "value", value)).strip().lower()


class Volunteering(AchievementItem):
    organization: Optional[str] = None
    role: Optional[str] = None
    hours_served: Optional[float] = None
    impact: Optional[str] = None
    proof_link: Optional[str] = None

    @field_validator("hours_served", mode="before")
    @classmethod
    def parse_hours(cls, value: Any) -> Optional[float]:
        return None if value in (None, "") else lenient_float(value)


class Scholarship(AchievementItem):
    name: Optional[str] = None
    awarding_body: Optional[str] = None
    amount_or_prestige: Optional[str] = None
    proof_link: Optional[str] = None


class ClubActivity(AchievementItem):
    club_name: Optional[str] = None
    position: Optional[str] = None
    key_events_organized: Optional[str] = None
    impact_description: Optional[str] = None
    proof_link: Optional[str] = None


class DepartmentContribution(AchievementItem):
    event_name: Optional[str] = None
    role: Optional[str] = None
    contribution_description: Optional[str] = None
    proof_link: Optional[str] = None


class Reference(AchievementItem):
    faculty_name: Optional[str] = None
    contact: Optional[str] = None
    lor_link: Optional[str] = None


# ---------------------------------------------------------------------------
# Record sections
# ---------------------------------------------------------------------------

class PersonalDetails(PortalModel):
    name: str = ""
    register_number: str = ""
    department: str = ""
    specialization: Optional[str] = None
    section: Optional[str] = None
    faculty_advisor: Optional[str] = None
    personal_email: Optional[str] = None
    srm_email: Optional[str] = None
    mobile_number: Optional[str] = None
    profile_photo_url: Optional[str] = None

    @field_validator("name", "register_number", "department", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()


class AcademicRecord(PortalModel):
    cgpa: float = 0.0
    tenth_percentage: float = 0.0
    twelfth_percentage: float = 0.0
    history_of_arrears: bool = False
    number_of_arrears: int = 0

    @field_validator("cgpa", "tenth_percentage", "twelfth_percentage", mode="before")
    @classmethod
    def parse_number(cls, value: Any) -> float:
        return lenient_float(value)

    @field_validator("number_of_arrears", mode="before")
    @classmethod
    def parse_count(cls, value: Any) -> int:
        return int(lenient_float(value))

    @field_validator("history_of_arrears", mode="before")
    @classmethod
    def parse_flag(cls, value: Any) -> bool:
        return lenient_bool(value)


class PostCollegeStatus(PortalModel):
    status: Optional[str] = None
    placed_company: Optional[str] = None
    offer_letter_link: Optional[str] = None
    university_name: Optional[str] = None
    admit_card_link: Optional[str] = None
    other_details: Optional[str] = None


class SocialMedia(PortalModel):
    linkedin: Optional[str] = None
    github: Optional[str] = None
    twitter: Optional[str] = None
    instagram: Optional[str] = None
    website: Optional[str] = None
    others: List[Dict[str, Any]] = Field(default_factory=list)


class FutureGoal(PortalModel):
    description: Optional[str] = None


# Category -> attribute holding its items
COLLECTION_FIELDS: Dict[Category, str] = {
    Category.INTERNSHIPS: "internships",
    Category.PROJECTS: "projects",
    Category.HACKATHONS: "hackathons",
    Category.RESEARCH: "research",
    Category.ENTREPRENEURSHIP: "entrepreneurship",
    Category.CERTIFICATIONS: "certifications",
    Category.COMPETITIVE_EXAMS: "competitive_exams",
    Category.SPORTS_OR_CULTURAL: "sports_or_cultural",
    Category.VOLUNTEERING: "volunteering",
    Category.SCHOLARSHIPS: "scholarships",
    Category.CLUB_ACTIVITIES: "club_activities",
    Category.DEPARTMENT_CONTRIBUTIONS: "department_contributions",
    Category.REFERENCES: "references",
}


class ApplicantRecord(PortalModel):
    """One submitted award application."""

    model_config = ConfigDict(extra="ignore")

    personal_details: PersonalDetails = Field(default_factory=PersonalDetails)
    academic_record: AcademicRecord = Field(default_factory=AcademicRecord)
    post_college_status: PostCollegeStatus = Field(default_factory=PostCollegeStatus)

    internships: List[Internship] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)
    hackathons: List[Hackathon] = Field(default_factory=list)
    research: List[Research] = Field(default_factory=list)
    entrepreneurship: List[Entrepreneurship] = Field(default_factory=list)
    certifications: List[Certification] = Field(default_factory=list)
    competitive_exams: List[CompetitiveExam] = Field(default_factory=list)
    sports_or_cultural: List[SportsOrCultural] = Field(default_factory=list)
    volunteering: List[Volunteering] = Field(default_factory=list)
    scholarships: List[Scholarship] = Field(default_factory=list)
    club_activities: List[ClubActivity] = Field(default_factory=list)
    department_contributions: List[DepartmentContribution] = Field(default_factory=list)
    references: List[Reference] = Field(default_factory=list)

    social_media: SocialMedia = Field(default_factory=SocialMedia)
    future_goal: FutureGoal = Field(default_factory=FutureGoal)
    video_pitch_url: Optional[str] = None
    master_proof_folder_url: Optional[str] = None
    consent_given: bool = False
    submitted_at: Optional[str] = None

    # Faculty evaluation state
    faculty_score: Optional[float] = None
    verified: bool = False
    discarded_items: List[str] = Field(default_factory=list)

    # Sections this model does not know about (custom awards, memberships, ...)
    extension_data: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def collect_extension_data(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        known = set()
        for name, info in cls.model_fields.items():
            known.add(name)
            if info.alias:
                known.add(info.alias)
        data = dict(data)
        extension = dict(data.pop("extensionData", None) or {})
        extension.update(data.pop("extension_data", None) or {})
        for key in [k for k in data if k not in known]:
            extension[key] = data.pop(key)
        data["extensionData"] = extension
        return data

    @field_validator(*COLLECTION_FIELDS.values(), mode="before")
    @classmethod
    def drop_malformed_items(cls, value: Any) -> list:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, (dict, BaseModel))]

    @field_validator("personal_details", "academic_record", "post_college_status",
                     "social_media", "future_goal", mode="before")
    @classmethod
    def default_missing_section(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, BaseModel)) else {}

    @field_validator("faculty_score", mode="before")
    @classmethod
    def parse_faculty_score(cls, value: Any) -> Optional[float]:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        return number if math.isfinite(number) else None

    @field_validator("verified", "consent_given", mode="before")
    @classmethod
    def parse_flag(cls, value: Any) -> bool:
        return lenient_bool(value)

    @field_validator("discarded_items", mode="before")
    @classmethod
    def parse_discarded_items(cls, value: Any) -> List[str]:
        if isinstance(value, str):
            try:
                value = json.loads(value) if value.strip() else []
            except json.JSONDecodeError:
                return []
        if not isinstance(value, (list, tuple, set)):
            return []
        return [str(key) for key in value if key]

    # ------------------------------------------------------------------

    @property
    def register_number(self) -> str:
        return self.personal_details.register_number

    @property
    def name(self) -> str:
        return self.personal_details.name

    @property
    def department(self) -> str:
        return self.personal_details.department

    def items_for(self, category: Category) -> list:
        """Items of one achievement category (empty for cgpa)."""
        field_name = COLLECTION_FIELDS.get(Category(category))
        return list(getattr(self, field_name)) if field_name else []

    def to_json_payload(self) -> Dict[str, Any]:
        """Full camelCase document, extension sections restored to the top level."""
        payload = self.model_dump(by_alias=True, mode="json", exclude={"extension_data"})
        for key, value in self.extension_data.items():
            payload.setdefault(key, value)
        return payload


class ApplicationSubmission(ApplicantRecord):
    """Application as received from the submission form."""

    @model_validator(mode="after")
    def validate_required_fields(self):
        if not self.personal_details.register_number:
            raise ValueError("Register number is required")
        if not self.personal_details.name:
            raise ValueError("Name is required")
        if not self.personal_details.department:
            raise ValueError("Department is required")
        if not 0 <= self.academic_record.cgpa <= 10:
            raise ValueError("CGPA must be between 0 and 10")
        if not self.consent_given:
            raise ValueError("Consent is required to submit an application")
        return self

    @model_validator(mode="after")
    def assign_item_ids(self):
        """Every item needs an id unique within its category; blank ids are assigned."""
        for category in COLLECTION_FIELDS:
            items = self.items_for(category)
            seen = set()
            for item in items:
                if not item.id.strip():
                    continue
                item.id = item.id.strip()
                if item.id in seen:
                    raise ValueError(f"Duplicate item id '{item.id}' in {category.value}")
                seen.add(item.id)
            counter = 0
            for item in items:
                if item.id.strip():
                    continue
                counter += 1
                while f"{category.value}-{counter}" in seen:
                    counter += 1
                item.id = f"{category.value}-{counter}"
                seen.add(item.id)
        return self
