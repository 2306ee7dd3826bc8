"""Pydantic settings for the BUMBA routing framework.

This module defines the main BumbaSettings class that loads configuration from
environment variables and .env files. It uses pydantic-settings for automatic
environment variable parsing and validation.

Settings Categories:
    - Core: Framework-level settings (debug mode, log level)
    - Routing: Scoring constants, mode thresholds, routing memory, table location
    - Models: Model assigned to managers and to each specialist task-type tier

The scoring constants are empirical tuning values. Only their ordering
matters to callers (e.g. a fix request scores below a build request), so
they are exposed here rather than hard-coded in the analyzer.

Environment Variables:
    BUMBA_DEBUG: Log at DEBUG level regardless of BUMBA_LOG_LEVEL (default: false)
    BUMBA_LOG_LEVEL: Logging level (default: INFO)
    BUMBA_ROUTING__ENABLE_LEARNING: Reuse remembered plans (default: false)
    BUMBA_ROUTING__TABLES_DIR: Directory with custom routing tables
    BUMBA_MODELS__MANAGER_MODEL: Model used by department managers

Usage:
    from bumba.config.settings import get_settings
    from bumba.routing.schemas import TaskType

    settings = get_settings()
    print(settings.routing.executive_threshold)
    print(settings.models.model_for_task_type(TaskType.CODING))
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from bumba.routing.schemas import TaskType


# =============================================================================
# Default Constants
# =============================================================================

DEFAULT_MANAGER_MODEL = "claude-max"
"""Premium model tier reserved for department managers."""

DEFAULT_REASONING_MODEL = "deepseek/deepseek-r1"
"""Model for reasoning-heavy specialists."""

DEFAULT_CODING_MODEL = "qwen/qwen-2.5-coder-32b-instruct"
"""Model for coding-heavy specialists."""

DEFAULT_GENERAL_MODEL = "gemini-pro"
"""Model for general-purpose specialists."""


# =============================================================================
# Nested Settings Models
# =============================================================================


class RoutingSettings(BaseModel):
    """Settings for intent scoring and routing plan construction.

    Attributes:
        department_increment: Complexity added per matched department beyond the first.
        enterprise_increment: Complexity added for enterprise-scope vocabulary.
        diversity_increment: Complexity added per step of description diversity.
        long_description_tokens: Distinct tokens that make up one diversity step.
        max_diversity_steps: Cap on the number of diversity steps counted.
        executive_threshold: Complexity at or above which an intent is executive-level.
        confidence_base: Confidence before any signal fires.
        confidence_increment: Confidence added per independent signal.
        specialist_confidence_floor: Minimum confidence for trigger-suggested specialists.
        min_agent_confidence: Specialists below this get no agent in the plan.
        moderate_min: Lowest complexity routed in moderate mode.
        complex_min: Lowest complexity routed in complex mode.
        executive_min: Lowest complexity routed in executive mode.
        low_confidence_threshold: Plans below this confidence carry suggestions.
        enable_learning: Reuse remembered plans for near-identical tasks.
        memory_similarity_threshold: Similarity above which remembered tasks count as similar.
        memory_reuse_threshold: Similarity above which a remembered plan is reused.
        tables_dir: Directory holding keywords.json and capabilities.json overrides.
    """

    department_increment: float = Field(default=0.2, ge=0.0, le=1.0)
    enterprise_increment: float = Field(default=0.3, ge=0.0, le=1.0)
    diversity_increment: float = Field(default=0.1, ge=0.0, le=1.0)
    long_description_tokens: int = Field(default=12, ge=1)
    max_diversity_steps: int = Field(default=2, ge=0)
    executive_threshold: float = Field(default=0.7, ge=0.0, le=1.0)

    confidence_base: float = Field(default=0.2, ge=0.0, le=1.0)
    confidence_increment: float = Field(default=0.15, ge=0.0, le=1.0)

    specialist_confidence_floor: float = Field(default=0.8, ge=0.0, le=1.0)
    min_agent_confidence: float = Field(default=0.3, ge=0.0, le=1.0)

    moderate_min: float = Field(default=0.3, ge=0.0, le=1.0)
    complex_min: float = Field(default=0.6, ge=0.0, le=1.0)
    executive_min: float = Field(default=0.85, ge=0.0, le=1.0)

    low_confidence_threshold: float = Field(default=0.6, ge=0.0, le=1.0)

    enable_learning: bool = Field(
        default=False,
        description="Reuse remembered plans for near-identical tasks"
    )
    memory_similarity_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    memory_reuse_threshold: float = Field(default=0.8, ge=0.0, le=1.0)

    tables_dir: Optional[Path] = Field(
        default=None,
        description="Directory with keywords.json and capabilities.json"
    )

    @field_validator("tables_dir", mode="before")
    @classmethod
    def convert_to_path(cls, v: Any) -> Any:
        """Convert string paths to Path objects."""
        if isinstance(v, str):
            return Path(v) if v.strip() else None
        return v

    @model_validator(mode="after")
    def validate_mode_thresholds(self) -> "RoutingSettings":
        """Mode thresholds must partition [0, 1] in increasing order."""
        if not self.moderate_min < self.complex_min < self.executive_min:
            raise ValueError(
                "Mode thresholds must be strictly increasing: "
                f"moderate_min={self.moderate_min}, complex_min={self.complex_min}, "
                f"executive_min={self.executive_min}"
            )
        return self


class ModelSettings(BaseModel):
    """Model assignment policy for routing plan agents.

    Managers always use the premium tier. Specialists are tiered by the
    task type declared in the capability table.

    Attributes:
        manager_model: Model for every department manager.
        reasoning_model: Model for reasoning-heavy specialists.
        coding_model: Model for coding-heavy specialists.
        general_model: Model for everything else.
    """

    manager_model: str = Field(default=DEFAULT_MANAGER_MODEL)
    reasoning_model: str = Field(default=DEFAULT_REASONING_MODEL)
    coding_model: str = Field(default=DEFAULT_CODING_MODEL)
    general_model: str = Field(default=DEFAULT_GENERAL_MODEL)

    def model_for_task_type(self, task_type: Union[TaskType, str, None]) -> str:
        """Look up the model for a specialist task type.

        Accepts a TaskType or its value. Unknown or missing task types fall
        back to the general tier.
        """
        if isinstance(task_type, Enum):
            task_type = task_type.value
        tiers = {
            "reasoning": self.reasoning_model,
            "coding": self.coding_model,
            "general": self.general_model,
        }
        return tiers.get(task_type or "general", self.general_model)


# =============================================================================
# Main Settings Class
# =============================================================================


class BumbaSettings(BaseSettings):
    """Main settings class for BUMBA configuration.

    Environment variables use the BUMBA_ prefix; nested groups use a double
    underscore (BUMBA_ROUTING__ENABLE_LEARNING=true).

    Attributes:
        debug: Log at DEBUG level, overriding log_level.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        routing: Scoring and plan construction configuration.
        models: Model tier configuration.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUMBA_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    debug: bool = Field(
        default=False,
        description="Log at DEBUG level"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    routing: RoutingSettings = Field(
        default_factory=RoutingSettings,
        description="Routing configuration"
    )
    models: ModelSettings = Field(
        default_factory=ModelSettings,
        description="Model tier configuration"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        normalized = v.upper()
        if normalized not in valid_levels:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: {', '.join(sorted(valid_levels))}"
            )
        return normalized

    def to_dict(self) -> dict[str, Any]:
        """Export settings as a dictionary."""
        return self.model_dump(mode="json")


# =============================================================================
# Singleton Pattern
# =============================================================================

_settings_instance: Optional[BumbaSettings] = None


def get_settings() -> BumbaSettings:
    """Get the cached settings instance.

    The settings are created once and cached for subsequent calls to avoid
    repeated .env parsing.

    Returns:
        The cached BumbaSettings instance.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = BumbaSettings()
    return _settings_instance


def reload_settings() -> BumbaSettings:
    """Reload settings from environment, clearing the cache.

    Returns:
        A fresh BumbaSettings instance.
    """
    global _settings_instance
    _settings_instance = BumbaSettings()
    return _settings_instance


def clear_settings_cache() -> None:
    """Clear the settings cache without creating a new instance."""
    global _settings_instance
    _settings_instance = None


__all__ = [
    "BumbaSettings",
    "RoutingSettings",
    "ModelSettings",
    "get_settings",
    "reload_settings",
    "clear_settings_cache",
    "DEFAULT_MANAGER_MODEL",
    "DEFAULT_REASONING_MODEL",
    "DEFAULT_CODING_MODEL",
    "DEFAULT_GENERAL_MODEL",
]
