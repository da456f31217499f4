from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RankedEntry(BaseModel):
    """
    One row of the ranking. Derived on every request and never stored;
    ``rank`` is the 1-based position in the sorted sequence.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    rank: int = Field(default=0, ge=0)
    register_number: str
    name: str = ""
    department: str = ""
    total_score: float = Field(..., description="Effective score used for ordering")
    breakdown: Dict[str, float] = Field(default_factory=dict)
    computed_score: float = Field(..., description="Scorer total, ignoring any faculty override")
    faculty_score: Optional[float] = None
    verified: bool = False
    unsaved: bool = Field(default=False, description="Reviewer changes not yet persisted")


class RankingResponse(BaseModel):
    """Ranked list plus dashboard analytics."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    entries: List[RankedEntry]
    total: int
    departments: Dict[str, int] = Field(default_factory=dict)
    has_unsaved_changes: bool = False
