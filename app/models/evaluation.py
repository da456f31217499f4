from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class EvaluationBase(BaseModel):
    """
    Base Pydantic model for a faculty evaluation of one applicant.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    register_number: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("registerNumber", "regNo", "register_number"),
        description="Register number of the evaluated applicant"
    )

    @field_validator("register_number")
    @classmethod
    def strip_register_number(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Register number is required")
        return value


class EvaluationUpdate(EvaluationBase):
    """
    Final evaluation persisted for one applicant.
    """

    faculty_score: float = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Score stored as the faculty override"
    )

    verified: bool = Field(
        default=False,
        description="Whether faculty verified the submission"
    )

    discarded_items: List[str] = Field(
        default_factory=list,
        description="Discard keys (registerNumber::section::itemId)"
    )


class EvaluationOverlay(EvaluationBase):
    """
    Unsaved reviewer adjustments for one applicant. Omitted fields are left
    as they are; ``clear_faculty_score`` drops an existing override.
    """

    faculty_score: Optional[float] = Field(
        default=None,
        ge=0,
        allow_inf_nan=False,
        description="Manual score replacing the computed total"
    )

    clear_faculty_score: bool = Field(
        default=False,
        description="Remove the current faculty override"
    )

    discarded_items: Optional[List[str]] = Field(
        default=None,
        description="Complete set of discard keys for this applicant"
    )

    verified: Optional[bool] = Field(
        default=None,
        description="Verification flag"
    )


class EvaluationBatchRequest(BaseModel):
    """Overlays for every applicant changed in the dashboard."""
    overlays: List[EvaluationOverlay] = Field(default_factory=list)


class SaveReport(BaseModel):
    """Outcome of a batch save."""
    saved: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed
