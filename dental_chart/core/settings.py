from __future__ import annotations

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("dental_chart.config")

KNOWN_DESIGNS = {"traditional", "anatomical", "interactive", "minimalist", "clinical"}


class Settings(BaseSettings):
    app_env: str = "development"
    database_url: str = "sqlite:///./dental_chart.db"
    design_preference_key: str = Field(
        default="odontogram-design-preference", alias="DESIGN_PREFERENCE_KEY"
    )
    default_design: str = Field(default="traditional", alias="DEFAULT_DESIGN")
    arc_radius: float = Field(default=120.0, alias="ARC_RADIUS")
    feature_chart_pdf_export: bool = Field(default=True, alias="FEATURE_CHART_PDF_EXPORT")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    @field_validator("arc_radius", mode="before")
    @classmethod
    def _coerce_empty_radius(cls, value, info):
        if value in {"", None}:
            return cls.model_fields[info.field_name].default
        return value


def _is_production(app_env: str) -> bool:
    return app_env.strip().lower() in {"prod", "production"}


def _is_memory_database(url: str) -> bool:
    lowered = url.strip().lower()
    return lowered in {"sqlite://", "sqlite:///:memory:"}


def validate_settings(settings: Settings) -> None:
    production = _is_production(settings.app_env)
    failures: list[str] = []
    warnings: list[str] = []

    default_design = settings.default_design.strip().lower()
    if default_design not in KNOWN_DESIGNS:
        warnings.append(
            f"DEFAULT_DESIGN {settings.default_design!r} is not a known layout; using traditional"
        )
        default_design = "traditional"
    settings.default_design = default_design

    if settings.arc_radius <= 0:
        warnings.append(f"ARC_RADIUS must be positive (got {settings.arc_radius}); using 120")
        settings.arc_radius = 120.0

    if _is_memory_database(settings.database_url):
        msg = "DATABASE_URL points at an in-memory database; design preferences will not persist"
        if production:
            failures.append(msg)
        else:
            warnings.append(msg)

    for warning in warnings:
        logger.warning("Config warning: %s", warning)

    if failures:
        raise RuntimeError("Config validation failed: " + "; ".join(failures))


settings = Settings()
