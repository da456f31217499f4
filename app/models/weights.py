from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RankingWeights(BaseModel):
    """
    Category weights for the composite score (out of 100 by convention).

    Keys accept either the camelCase category name (``competitiveExams``)
    or the snake_case attribute name. Unspecified categories keep their
    default weight.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    cgpa: float = Field(default=20.0, ge=0)
    internships: float = Field(default=10.0, ge=0)
    projects: float = Field(default=10.0, ge=0)
    hackathons: float = Field(default=8.0, ge=0)
    research: float = Field(default=12.0, ge=0)
    entrepreneurship: float = Field(default=8.0, ge=0)
    certifications: float = Field(default=5.0, ge=0)
    competitive_exams: float = Field(default=5.0, ge=0)
    sports_or_cultural: float = Field(default=5.0, ge=0)
    volunteering: float = Field(default=5.0, ge=0)
    scholarships: float = Field(default=4.0, ge=0)
    club_activities: float = Field(default=4.0, ge=0)
    department_contributions: float = Field(default=2.0, ge=0)
    references: float = Field(default=2.0, ge=0)

    @classmethod
    def from_mapping(cls, weights: Optional[Mapping[str, float]]) -> "RankingWeights":
        """Build weights from a plain mapping, merging over the defaults."""
        if weights is None:
            return cls()
        if isinstance(weights, cls):
            return weights
        return cls.model_validate(dict(weights))

    def as_dict(self) -> Dict[str, float]:
        """Weights keyed by category name."""
        return self.model_dump(by_alias=True)

    @property
    def total(self) -> float:
        return sum(self.as_dict().values())


DEFAULT_WEIGHTS = RankingWeights()
