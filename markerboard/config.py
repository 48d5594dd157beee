"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific configs (dev, staging, prod)
- Validation at startup (fail fast)
- Type safety with Pydantic
- Defaults reproduce the dashboard's reference behavior
"""

import os
from functools import lru_cache
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

from markerboard.domain.models import GroupOrder, SortMode

# Load environment variables from .env file
load_dotenv()


class ScoringConfig(BaseModel):
    """Points each tracked marker contributes to the health score."""

    normal_points: int = Field(
        default=100, ge=0, le=100, description="Points for a marker inside its range"
    )
    abnormal_points: int = Field(
        default=50, ge=0, le=100, description="Points for a low or high marker"
    )

    @model_validator(mode="after")
    def abnormal_not_above_normal(self) -> "ScoringConfig":
        if self.abnormal_points > self.normal_points:
            raise ValueError("abnormal_points cannot exceed normal_points")
        return self


class PresentationConfig(BaseModel):
    """Defaults for the grouped marker list and charts."""

    default_sort_mode: SortMode = Field(
        default=SortMode.ATTENTION_FIRST, description="Sort mode when the caller passes none"
    )
    default_group_order: GroupOrder = Field(
        default=GroupOrder.ATTENTION, description="Order of category groups"
    )
    uncategorized_label: str = Field(
        default="Other", min_length=1, description="Group name for markers without category"
    )
    sparkline_points: int = Field(
        default=6, gt=0, le=50, description="Readings shown in a card sparkline"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    presentation: PresentationConfig = Field(default_factory=PresentationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        v = val.strip().upper()
        return cast(
            Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
        )

    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    scoring_config = ScoringConfig(
        normal_points=int(os.getenv("SCORE_NORMAL_POINTS", "100")),
        abnormal_points=int(os.getenv("SCORE_ABNORMAL_POINTS", "50")),
    )

    presentation_config = PresentationConfig(
        default_sort_mode=SortMode(os.getenv("DEFAULT_SORT_MODE", "attention-first")),
        default_group_order=GroupOrder(os.getenv("DEFAULT_GROUP_ORDER", "attention")),
        uncategorized_label=os.getenv("UNCATEGORIZED_LABEL", "Other"),
        sparkline_points=int(os.getenv("SPARKLINE_POINTS", "6")),
    )

    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if debug else "json",
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        scoring=scoring_config,
        presentation=presentation_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()


def validate_config() -> None:
    """Validate configuration at startup."""
    try:
        config = get_config()
        print(f"✅ Configuration loaded for {config.environment} environment")
    except Exception as e:
        print(f"❌ Configuration validation failed: {e}")
        raise


def print_config_summary() -> None:
    """Print configuration summary for debugging."""
    config = get_config()

    print("\n🔧 CONFIGURATION SUMMARY")
    print(f"Environment: {config.environment}")
    print(f"Debug Mode: {config.debug}")
    print(f"Log Level: {config.logging.level}")

    print("\n📊 SCORING")
    print(f"Normal marker: {config.scoring.normal_points} points")
    print(f"Low/high marker: {config.scoring.abnormal_points} points")

    print("\n🗂️ PRESENTATION")
    print(f"Sort Mode: {config.presentation.default_sort_mode.value}")
    print(f"Group Order: {config.presentation.default_group_order.value}")
    print(f"Uncategorized Label: {config.presentation.uncategorized_label}")


if __name__ == "__main__":
    validate_config()
    print_config_summary()
