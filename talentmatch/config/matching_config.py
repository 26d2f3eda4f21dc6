from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from talentmatch.core.constants import ProcessingLimits, ScoringDefaults

from .base_config import BaseConfig
from .config_validator import ConfigurationError, get_config


class MatchWeights(BaseModel):
    """Composite score weights. Non-negative and summing to 1.0 keeps scores in [0, 100]."""

    model_config = ConfigDict(frozen=True)

    skills: float = Field(ScoringDefaults.SKILLS_WEIGHT, ge=0)
    experience: float = Field(ScoringDefaults.EXPERIENCE_WEIGHT, ge=0)
    location: float = Field(ScoringDefaults.LOCATION_WEIGHT, ge=0)
    salary: float = Field(ScoringDefaults.SALARY_WEIGHT, ge=0)

    @model_validator(mode="after")
    def check_total(self) -> "MatchWeights":
        total = self.skills + self.experience + self.location + self.salary
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Match weights must sum to 1.0, got {total:.4f}")
        return self


class MatchingConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Scoring policy
    weights: MatchWeights = MatchWeights()
    experience_grace_years: int = Field(ScoringDefaults.EXPERIENCE_GRACE_YEARS, gt=0)
    salary_tolerance_ratio: float = Field(ScoringDefaults.SALARY_TOLERANCE_RATIO, gt=0)
    partial_location_score: int = Field(ScoringDefaults.PARTIAL_LOCATION_SCORE, ge=0, le=100)

    # Batch matching
    default_top_n: int = Field(20, gt=0)
    max_top_n: int = Field(500, gt=0)
    max_concurrency: int = Field(ProcessingLimits.DEFAULT_MAX_CONCURRENCY, gt=0)
    chunk_size: int = Field(ProcessingLimits.DEFAULT_CHUNK_SIZE, gt=0)

    # "Match job for all users" persistence
    persist_results: bool = True
    persist_min_score: int = Field(0, ge=0, le=100)

    @model_validator(mode="after")
    def check_top_n(self) -> "MatchingConfig":
        if self.default_top_n > self.max_top_n:
            raise ValueError("default_top_n cannot exceed max_top_n")
        return self

    @classmethod
    def from_settings(cls, config: BaseConfig) -> "MatchingConfig":
        return cls(
            weights=MatchWeights(
                skills=config.MATCH_SKILLS_WEIGHT,
                experience=config.MATCH_EXPERIENCE_WEIGHT,
                location=config.MATCH_LOCATION_WEIGHT,
                salary=config.MATCH_SALARY_WEIGHT,
            ),
            experience_grace_years=config.MATCH_EXPERIENCE_GRACE_YEARS,
            salary_tolerance_ratio=config.MATCH_SALARY_TOLERANCE_RATIO,
            partial_location_score=config.MATCH_PARTIAL_LOCATION_SCORE,
            default_top_n=config.MATCH_DEFAULT_TOP_N,
            max_top_n=config.MATCH_MAX_TOP_N,
            max_concurrency=config.MATCH_MAX_CONCURRENCY,
            chunk_size=config.MATCH_CHUNK_SIZE,
            persist_results=config.MATCH_PERSIST_RESULTS,
            persist_min_score=config.MATCH_PERSIST_MIN_SCORE,
        )


@lru_cache()
def get_matching_config() -> MatchingConfig:
    try:
        return MatchingConfig.from_settings(get_config())
    except ValidationError as e:
        raise ConfigurationError(f"Invalid matching configuration: {e}") from e
