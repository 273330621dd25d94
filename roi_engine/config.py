"""
Application configuration.

Settings are read from environment variables prefixed with ``ROI_ENGINE_``;
nested sections use ``__`` as delimiter, e.g. ``ROI_ENGINE_EDITOR__ZOOM_MAX=8``.
"""

from functools import lru_cache
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from roi_engine.core.constants import (
    APIConstants,
    EditorConstants,
    MeasurementConstants,
    SessionConstants,
    SystemConstants,
    ViewConstants,
)


class EditorSettings(BaseModel):
    """Tool defaults for the annotation editor"""

    zoom_min: float = Field(ViewConstants.ZOOM_MIN, ge=1.0)
    zoom_max: float = Field(ViewConstants.ZOOM_MAX, ge=1.0)
    zoom_step: float = Field(ViewConstants.ZOOM_STEP, gt=0)
    base_hit_threshold: float = Field(ViewConstants.BASE_HIT_THRESHOLD, gt=0)
    base_handle_radius: float = Field(ViewConstants.BASE_HANDLE_RADIUS, gt=0)
    mm_per_unit: float = Field(MeasurementConstants.MM_PER_UNIT, gt=0)
    default_label: str = EditorConstants.DEFAULT_LABEL
    intensity_low: int = MeasurementConstants.INTENSITY_LOW
    intensity_high: int = MeasurementConstants.INTENSITY_HIGH
    intensity_seed: Optional[int] = None

    @model_validator(mode="after")
    def check_ranges(self) -> "EditorSettings":
        if self.zoom_max < self.zoom_min:
            raise ValueError("zoom_max must be >= zoom_min")
        if self.intensity_high <= self.intensity_low:
            raise ValueError("intensity_high must be > intensity_low")
        return self


class SessionSettings(BaseModel):
    max_sessions: int = Field(SessionConstants.DEFAULT_MAX_SESSIONS, ge=1)


class SystemSettings(BaseModel):
    log_level: str = SystemConstants.LOG_LEVEL_DEFAULT
    debug: bool = False

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


class APISettings(BaseModel):
    host: str = APIConstants.DEFAULT_HOST
    port: int = APIConstants.DEFAULT_PORT
    cors_enabled: bool = True
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


class Settings(BaseSettings):
    """Root settings object"""

    model_config = SettingsConfigDict(
        env_prefix="ROI_ENGINE_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    environment: str = "development"
    editor: EditorSettings = Field(default_factory=EditorSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)
    system: SystemSettings = Field(default_factory=SystemSettings)
    api: APISettings = Field(default_factory=APISettings)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
