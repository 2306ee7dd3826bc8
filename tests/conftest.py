"""Shared pytest fixtures for BUMBA tests.

This module provides common fixtures used across all test modules:
- Settings cache and environment isolation
- Routing tables and the three routing components
- A Router built from clean default settings
- Cleanup of the CLI logging handlers
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import pytest

from bumba.config.settings import BumbaSettings, RoutingSettings, clear_settings_cache
from bumba.routing import (
    IntentAnalyzer,
    Router,
    RoutingStrategyBuilder,
    SpecialistResolver,
    load_default_tables,
    reset_default_router,
)


# -----------------------------------------------------------------------------
# Test Isolation Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def clean_settings_cache():
    """Clear settings cache and the shared router before and after each test."""
    clear_settings_cache()
    reset_default_router()
    yield
    clear_settings_cache()
    reset_default_router()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Provide a clean environment by removing BUMBA_ env vars.

    Also changes into an empty directory so pydantic-settings does not pick
    up a .env file from the project.
    """
    for key in [k for k in os.environ if k.startswith("BUMBA_")]:
        monkeypatch.delenv(key, raising=False)

    (tmp_path / ".env").write_text("")
    monkeypatch.chdir(tmp_path)
    yield tmp_path


@pytest.fixture
def reset_bumba_logger():
    """Remove handlers installed by setup_cli_logging after the test."""
    yield
    logger = logging.getLogger("bumba")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


# -----------------------------------------------------------------------------
# Routing Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def tables():
    """The routing tables bundled with the package."""
    return load_default_tables()


@pytest.fixture
def routing_settings():
    """Default routing settings."""
    return RoutingSettings()


@pytest.fixture
def analyzer(tables, routing_settings):
    return IntentAnalyzer(tables, routing_settings)


@pytest.fixture
def resolver(tables, routing_settings):
    return SpecialistResolver(tables, routing_settings)


@pytest.fixture
def builder(tables, routing_settings):
    return RoutingStrategyBuilder(tables, routing_settings)


@pytest.fixture
def settings(clean_env):
    """BumbaSettings with defaults only."""
    return BumbaSettings()


@pytest.fixture
def router(settings, tables):
    """Router with default settings and bundled tables."""
    return Router(tables=tables, settings=settings)


@pytest.fixture
def learning_router(clean_env, tables):
    """Router with routing memory enabled."""
    settings = BumbaSettings(routing=RoutingSettings(enable_learning=True))
    return Router(tables=tables, settings=settings)


# -----------------------------------------------------------------------------
# Table Data Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def minimal_keywords() -> dict:
    """A small but complete keywords.json document."""
    return {
        "intents": [
            {"intent": "build", "keywords": ["build*", "implement*"]},
            {"intent": "analyze", "keywords": ["analy*"]},
        ],
        "intent_complexity": {"build": 0.4, "analyze": 0.2, "other": 0.05},
        "departments": {
            "technical": ["api", "database"],
            "experience": ["ui"],
            "strategic": ["roadmap"],
        },
        "specialist_triggers": [
            {"keywords": ["database"], "specialists": ["db-expert"]},
        ],
        "languages": [
            {"language": "python", "aliases": ["python", "py"]},
        ],
        "patterns": [
            {"name": "api-build", "groups": [["api"], ["build*"]]},
        ],
        "enterprise_keywords": ["enterprise"],
    }


@pytest.fixture
def minimal_capabilities() -> dict:
    """A small capabilities.json document."""
    return {
        "db-expert": {"keywords": ["database", "sql"], "department": "technical", "task_type": "coding"},
        "api-expert": {"keywords": ["api", "rest"], "department": "technical", "taskType": "reasoning"},
        "ui-expert": {"keywords": ["ui"], "department": "experience"},
    }


@pytest.fixture
def tables_dir(tmp_path, minimal_keywords, minimal_capabilities) -> Path:
    """Directory holding the minimal table documents."""
    directory = tmp_path / "tables"
    directory.mkdir()
    (directory / "keywords.json").write_text(json.dumps(minimal_keywords), encoding="utf-8")
    (directory / "capabilities.json").write_text(json.dumps(minimal_capabilities), encoding="utf-8")
    return directory
