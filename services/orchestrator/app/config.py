"""Application configuration using Pydantic settings."""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalyzerTuning(BaseModel):
    min_description_length: int = Field(default=10, ge=1)
    primary_category_limit: int = Field(default=3, ge=1)
    category_weight: float = Field(default=1.0, ge=0)
    keyword_weight: float = Field(default=0.5, ge=0)
    high_signal_weight: float = Field(default=2.0, ge=0)
    # (exclusive upper length, score) pairs; longer descriptions get length_bucket_max
    length_buckets: list[tuple[int, float]] = Field(default=[(120, 0.0), (300, 1.0), (600, 2.0)])
    length_bucket_max: float = Field(default=3.0, ge=0)
    low_below: float = 2.0
    medium_below: float = 5.0
    high_up_to: float = 7.0


class SelectionTuning(BaseModel):
    hours_per_specialist: float = Field(default=2.0, ge=0)
    high_multiplier: float = Field(default=1.5, ge=1)
    very_high_multiplier: float = Field(default=2.0, ge=1)
    hours_per_day: int = Field(default=8, ge=1)
    medium_floor_count: int = 4
    high_floor_count: int = 7
    deep_files_per_specialist: int = Field(default=2, ge=0)


class PlanTuning(BaseModel):
    minutes_per_step: int = Field(default=45, ge=1)
    primary_step_duration: str = "30-60 min"
    deep_step_duration: str = "45-90 min"


class RegistrySettings(BaseModel):
    path: str | None = Field(default=None, description="Optional JSON registry override document")


class ObservabilitySettings(BaseModel):
    otel_service_name: str = "specialist-orchestrator"
    otel_exporter_otlp_endpoint: str | None = None
    log_level: str = "INFO"
    log_json: bool = False


class OrchestratorSettings(BaseSettings):
    analyzer: AnalyzerTuning = AnalyzerTuning()
    selection: SelectionTuning = SelectionTuning()
    planner: PlanTuning = PlanTuning()
    registry: RegistrySettings = RegistrySettings()
    observability: ObservabilitySettings = ObservabilitySettings()
    environment: Literal["dev", "qa", "prod"] | str = "dev"

    model_config = SettingsConfigDict(env_nested_delimiter="__", env_prefix="ORCHESTRATOR_", case_sensitive=False)


@lru_cache(maxsize=1)
def get_settings(**kwargs: Any) -> OrchestratorSettings:
    """Return cached settings instance."""
    return OrchestratorSettings(**kwargs)


__all__ = [
    "AnalyzerTuning",
    "ObservabilitySettings",
    "OrchestratorSettings",
    "PlanTuning",
    "RegistrySettings",
    "SelectionTuning",
    "get_settings",
]
