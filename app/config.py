"""Application configuration with comprehensive validation."""
from typing import Optional, Literal
from functools import lru_cache
from pydantic import Field, model_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.models.weights import RankingWeights


class Settings(BaseSettings):
    """Application settings with production-grade validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Best Outgoing Student Award Portal"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"

    # API
    API_V1_PREFIX: str = "/api/v1"

    # Admin session
    ADMIN_PASSWORD: Optional[SecretStr] = None
    ADMIN_SECRET: SecretStr = SecretStr("bo-student-admin-secret-key-2026")
    ADMIN_TOKEN_TTL_HOURS: int = Field(default=8, ge=1, le=72)
    ADMIN_COOKIE_NAME: str = "admin_token"

    # Snowflake
    SNOWFLAKE_ACCOUNT: Optional[str] = None
    SNOWFLAKE_USER: Optional[str] = None
    SNOWFLAKE_PASSWORD: Optional[SecretStr] = None
    SNOWFLAKE_DATABASE: Optional[str] = None
    SNOWFLAKE_SCHEMA: Optional[str] = None
    SNOWFLAKE_WAREHOUSE: Optional[str] = None
    SNOWFLAKE_ROLE: Optional[str] = None
    APPLICATIONS_TABLE: str = "applications"
    SETTINGS_TABLE: str = "app_settings"

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_TTL_APPLICANTS: int = Field(default=30, ge=1, le=3600)

    # Submission persistence
    SUBMIT_MAX_RETRIES: int = Field(default=3, ge=1, le=10)
    SUBMIT_RETRY_BACKOFF_SECONDS: float = Field(default=0.5, ge=0.0, le=10.0)

    # Ranking weights (out of 100)
    W_CGPA: float = Field(default=20.0, ge=0.0)
    W_INTERNSHIPS: float = Field(default=10.0, ge=0.0)
    W_PROJECTS: float = Field(default=10.0, ge=0.0)
    W_HACKATHONS: float = Field(default=8.0, ge=0.0)
    W_RESEARCH: float = Field(default=12.0, ge=0.0)
    W_ENTREPRENEURSHIP: float = Field(default=8.0, ge=0.0)
    W_CERTIFICATIONS: float = Field(default=5.0, ge=0.0)
    W_COMPETITIVE_EXAMS: float = Field(default=5.0, ge=0.0)
    W_SPORTS_OR_CULTURAL: float = Field(default=5.0, ge=0.0)
    W_VOLUNTEERING: float = Field(default=5.0, ge=0.0)
    W_SCHOLARSHIPS: float = Field(default=4.0, ge=0.0)
    W_CLUB_ACTIVITIES: float = Field(default=4.0, ge=0.0)
    W_DEPARTMENT_CONTRIBUTIONS: float = Field(default=2.0, ge=0.0)
    W_REFERENCES: float = Field(default=2.0, ge=0.0)

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure production has required security settings."""
        if self.APP_ENV == "production":
            if self.DEBUG:
                raise ValueError("DEBUG must be False in production")
            if len(self.ADMIN_SECRET.get_secret_value()) < 32:
                raise ValueError("ADMIN_SECRET must be ≥32 characters in production")
            if self.ADMIN_PASSWORD is None:
                raise ValueError("ADMIN_PASSWORD is required in production")
        return self

    @property
    def ranking_weights(self) -> RankingWeights:
        """Get the configured category weights."""
        return RankingWeights(
            cgpa=self.W_CGPA,
            internships=self.W_INTERNSHIPS,
            projects=self.W_PROJECTS,
            hackathons=self.W_HACKATHONS,
            research=self.W_RESEARCH,
            entrepreneurship=self.W_ENTREPRENEURSHIP,
            certifications=self.W_CERTIFICATIONS,
            competitive_exams=self.W_COMPETITIVE_EXAMS,
            sports_or_cultural=self.W_SPORTS_OR_CULTURAL,
            volunteering=self.W_VOLUNTEERING,
            scholarships=self.W_SCHOLARSHIPS,
            club_activities=self.W_CLUB_ACTIVITIES,
            department_contributions=self.W_DEPARTMENT_CONTRIBUTIONS,
            references=self.W_REFERENCES,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
