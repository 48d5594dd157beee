"""
Tests for configuration management in `markerboard/config.py`.

Covers:
- Environment parsing and debug defaults
- Logging level coercion to the expected Literal
- Scoring points and presentation defaults from the environment
- get_config cache behavior
- AppConfig validation (debug only allowed in development)
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from pydantic import ValidationError

from markerboard.config import (
    AppConfig,
    LoggingConfig,
    PresentationConfig,
    ScoringConfig,
    get_config,
    load_config_from_env,
)
from markerboard.domain.models import GroupOrder, SortMode

_ENV_VARS = (
    "ENVIRONMENT",
    "LOG_LEVEL",
    "SCORE_NORMAL_POINTS",
    "SCORE_ABNORMAL_POINTS",
    "DEFAULT_SORT_MODE",
    "DEFAULT_GROUP_ORDER",
    "UNCATEGORIZED_LABEL",
    "SPARKLINE_POINTS",
)


@pytest.fixture(autouse=True)
def clear_config_cache(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test from a clean environment and an empty get_config cache."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


def test_load_config_dev_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "development")

    config = load_config_from_env()

    assert config.environment == "development"
    assert config.debug is True
    assert config.logging.format == "console"
    assert config.scoring.normal_points == 100
    assert config.scoring.abnormal_points == 50
    assert config.presentation.default_sort_mode == SortMode.ATTENTION_FIRST
    assert config.presentation.default_group_order == GroupOrder.ATTENTION
    assert config.presentation.uncategorized_label == "Other"
    assert config.presentation.sparkline_points == 6


def test_production_logs_json_without_debug(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "prod")

    config = load_config_from_env()

    assert config.environment == "production"
    assert config.debug is False
    assert config.logging.format == "json"


def test_environment_aliases(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "stage")
    assert load_config_from_env().environment == "staging"

    monkeypatch.setenv("ENVIRONMENT", "dev")
    assert load_config_from_env().environment == "development"


def test_logging_level_literal_coercion(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "staging")

    # Unknown level should coerce to INFO
    monkeypatch.setenv("LOG_LEVEL", "unknown")
    assert load_config_from_env().logging.level == "INFO"

    # Known level should pass through
    monkeypatch.setenv("LOG_LEVEL", "error")
    assert load_config_from_env().logging.level == "ERROR"


def test_presentation_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEFAULT_SORT_MODE", "alphabetical")
    monkeypatch.setenv("DEFAULT_GROUP_ORDER", "first-seen")
    monkeypatch.setenv("UNCATEGORIZED_LABEL", "Övrigt")
    monkeypatch.setenv("SPARKLINE_POINTS", "10")

    presentation = load_config_from_env().presentation

    assert presentation.default_sort_mode == SortMode.ALPHABETICAL
    assert presentation.default_group_order == GroupOrder.FIRST_SEEN
    assert presentation.uncategorized_label == "Övrigt"
    assert presentation.sparkline_points == 10


def test_invalid_sort_mode_fails_fast(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEFAULT_SORT_MODE", "random")

    with pytest.raises(ValueError):
        load_config_from_env()


def test_scoring_points_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SCORE_NORMAL_POINTS", "90")
    monkeypatch.setenv("SCORE_ABNORMAL_POINTS", "30")

    scoring = load_config_from_env().scoring

    assert scoring == ScoringConfig(normal_points=90, abnormal_points=30)


def test_scoring_points_out_of_bounds(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SCORE_NORMAL_POINTS", "150")

    with pytest.raises(ValidationError):
        load_config_from_env()


def test_get_config_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "development")

    # First call populates cache
    c1 = get_config()
    c2 = get_config()
    assert c1 is c2  # same object due to lru_cache


def test_app_config_debug_only_in_dev_validation() -> None:
    with pytest.raises(ValueError, match="debug mode is only allowed"):
        AppConfig(
            environment="production",
            debug=True,
            scoring=ScoringConfig(),
            presentation=PresentationConfig(),
            logging=LoggingConfig(),
        )


def test_empty_uncategorized_label_is_rejected() -> None:
    with pytest.raises(ValidationError):
        PresentationConfig(uncategorized_label="")
