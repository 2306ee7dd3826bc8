"""Declarative routing tables and the keyword matching engine.

The classifier's vocabulary lives in two JSON documents shipped with the
package (``bumba/routing/data``) rather than in code:

    keywords.json
        intents              Ordered verb rules, first match wins
        intent_complexity    Complexity baseline per primary intent
        departments          Department keyword sets
        specialist_triggers  Ordered keyword -> specialist rules
        languages            Ordered language alias rules
        patterns             Named multi-keyword patterns (groups of alternatives)
        enterprise_keywords  Enterprise-scope vocabulary

    capabilities.json
        { specialist_id: { keywords, department, task_type } }
        Declaration order is the resolver's tie-break order.

Keyword Syntax:
    A keyword matches where it starts a word. A plain keyword must also end
    on a word boundary, allowing a plural "s"/"es" ("api" matches "apis" but
    not "apiary"). A trailing "*" makes it a prefix ("vulnerab*" matches
    "vulnerability" and "vulnerabilities"). Multi-word keywords match as
    phrases.

    Language aliases must be whole words with no plural suffix. They may be
    joined to a neighbour by "-" or "/" ("python-based", "python/flask"),
    except aliases shorter than three characters, which must stand alone
    so "go-to-market" does not name go.

Usage:
    from bumba.routing.tables import load_default_tables, RoutingTables

    tables = load_default_tables()
    custom = RoutingTables.from_directory("config/routing")
"""

from __future__ import annotations

import functools
import json
import logging
import re
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from bumba.core.exceptions import RoutingTableError
from bumba.routing.schemas import Department, PrimaryIntent, TaskType


# =============================================================================
# Module Logger
# =============================================================================

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

KEYWORDS_FILE = "keywords.json"
CAPABILITIES_FILE = "capabilities.json"

_TOKEN_PATTERN = re.compile(r"[a-z0-9][a-z0-9+#._/-]*")
_WHITESPACE = re.compile(r"\s+")

# Characters that continue a word for matching purposes
_WORD_CHARS = "a-z0-9_"

# Shorter language aliases (go, js, py) only match as standalone words
_JOINABLE_ALIAS_LENGTH = 3


# =============================================================================
# Text Helpers
# =============================================================================


def normalize_text(text: str) -> str:
    """Lower-case text and collapse whitespace."""
    return _WHITESPACE.sub(" ", text.lower()).strip()


def tokenize(text: str) -> list[str]:
    """Split normalized text into tokens.

    Tokens keep inner punctuation used in tech names ("node.js", "ci/cd",
    "c++") and drop trailing sentence punctuation.

    Example:
        >>> tokenize("Build a node.js API.")
        ['build', 'a', 'node.js', 'api']
    """
    tokens = []
    for raw in _TOKEN_PATTERN.findall(text.lower()):
        token = raw.rstrip("._/-")
        if token:
            tokens.append(token)
    return tokens


def _compile_keyword(keyword: str) -> re.Pattern:
    if keyword.endswith("*"):
        stem = re.escape(keyword[:-1])
        return re.compile(rf"(?<![{_WORD_CHARS}]){stem}")
    return re.compile(
        rf"(?<![{_WORD_CHARS}]){re.escape(keyword)}(?:s|es)?(?![{_WORD_CHARS}])"
    )


def _compile_alias(alias: str) -> re.Pattern:
    if len(alias) < _JOINABLE_ALIAS_LENGTH:
        return re.compile(
            rf"(?<![{_WORD_CHARS}])(?<![{_WORD_CHARS}][-/]){re.escape(alias)}"
            rf"(?![{_WORD_CHARS}])(?![-/][{_WORD_CHARS}])"
        )
    return re.compile(rf"(?<![{_WORD_CHARS}]){re.escape(alias)}(?![{_WORD_CHARS}])")


class KeywordMatcher:
    """Compiled matcher for an ordered keyword list.

    Attributes:
        keywords: Keywords in declaration order.
    """

    def __init__(
        self,
        keywords: tuple[str, ...],
        compile_keyword: Callable[[str], re.Pattern] = _compile_keyword,
    ) -> None:
        self.keywords = keywords
        self._compiled = tuple((kw, compile_keyword(kw)) for kw in keywords)

    def __len__(self) -> int:
        return len(self.keywords)

    def matches(self, text: str) -> bool:
        """Return True if any keyword occurs in text."""
        return any(pattern.search(text) for _, pattern in self._compiled)

    def first_match(self, text: str) -> Optional[tuple[str, re.Match]]:
        """Return the first keyword (declaration order) found in text."""
        for keyword, pattern in self._compiled:
            match = pattern.search(text)
            if match:
                return keyword, match
        return None

    def matched_keywords(self, text: str) -> list[str]:
        """Return every keyword that occurs in text, in declaration order."""
        return [kw for kw, pattern in self._compiled if pattern.search(text)]


# =============================================================================
# Table Schemas
# =============================================================================


def _clean_keywords(values: tuple[str, ...]) -> tuple[str, ...]:
    cleaned = tuple(v.strip().lower() for v in values if v and v.strip())
    if not cleaned:
        raise ValueError("keyword list must contain at least one non-empty keyword")
    return cleaned


class IntentRule(BaseModel):
    """Verb rule mapping keywords to a primary intent."""

    model_config = ConfigDict(frozen=True)

    intent: PrimaryIntent
    keywords: tuple[str, ...]

    @field_validator("keywords")
    @classmethod
    def normalize_keywords(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _clean_keywords(v)


class SpecialistTrigger(BaseModel):
    """Keyword rule that suggests one or more specialists."""

    model_config = ConfigDict(frozen=True)

    keywords: tuple[str, ...]
    specialists: tuple[str, ...] = Field(min_length=1)

    @field_validator("keywords")
    @classmethod
    def normalize_keywords(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _clean_keywords(v)


class LanguageRule(BaseModel):
    """Word-bounded aliases for one programming language."""

    model_config = ConfigDict(frozen=True)

    language: str
    aliases: tuple[str, ...]

    @field_validator("aliases")
    @classmethod
    def normalize_aliases(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _clean_keywords(v)


class PatternDefinition(BaseModel):
    """Named pattern: every group needs at least one keyword present."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    groups: tuple[tuple[str, ...], ...] = Field(min_length=1)

    @field_validator("groups")
    @classmethod
    def validate_groups(cls, v: tuple[tuple[str, ...], ...]) -> tuple[tuple[str, ...], ...]:
        return tuple(_clean_keywords(group) for group in v)


class KeywordTable(BaseModel):
    """Schema of keywords.json."""

    model_config = ConfigDict(frozen=True)

    intents: tuple[IntentRule, ...]
    intent_complexity: dict[PrimaryIntent, float]
    departments: dict[Department, tuple[str, ...]]
    specialist_triggers: tuple[SpecialistTrigger, ...] = Field(default_factory=tuple)
    languages: tuple[LanguageRule, ...] = Field(default_factory=tuple)
    patterns: tuple[PatternDefinition, ...] = Field(default_factory=tuple)
    enterprise_keywords: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("intent_complexity")
    @classmethod
    def validate_intent_complexity(cls, v: dict[PrimaryIntent, float]) -> dict[PrimaryIntent, float]:
        if PrimaryIntent.OTHER not in v:
            raise ValueError("intent_complexity must define a baseline for 'other'")
        for intent, value in v.items():
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Baseline for '{intent.value}' must be 0.0-1.0, got {value}")
        return v

    @field_validator("departments")
    @classmethod
    def validate_departments(cls, v: dict[Department, tuple[str, ...]]) -> dict[Department, tuple[str, ...]]:
        return {dept: _clean_keywords(keywords) for dept, keywords in v.items()}


class SpecialistCapability(BaseModel):
    """One entry of the capability table."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    keywords: tuple[str, ...]
    department: Department
    task_type: TaskType = Field(
        default=TaskType.GENERAL,
        validation_alias=AliasChoices("task_type", "taskType"),
    )

    @field_validator("keywords")
    @classmethod
    def normalize_keywords(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _clean_keywords(v)


_CAPABILITY_ADAPTER = TypeAdapter(dict[str, SpecialistCapability])


# =============================================================================
# Routing Tables
# =============================================================================


class RoutingTables:
    """Validated, read-only routing tables with precompiled matchers.

    Instances are built once and shared; nothing here changes after
    construction, so one instance can serve concurrent routing calls.

    Attributes:
        keyword_table: The validated keywords.json content.
        capabilities: Specialist id -> capability, in declaration order.
    """

    def __init__(
        self,
        keyword_table: KeywordTable,
        capabilities: Mapping[str, SpecialistCapability],
    ) -> None:
        self.keyword_table = keyword_table
        self.capabilities: Mapping[str, SpecialistCapability] = MappingProxyType(dict(capabilities))

        self.intent_matchers: tuple[tuple[PrimaryIntent, KeywordMatcher], ...] = tuple(
            (rule.intent, KeywordMatcher(rule.keywords)) for rule in keyword_table.intents
        )
        self.department_matchers: Mapping[Department, KeywordMatcher] = MappingProxyType({
            dept: KeywordMatcher(keywords)
            for dept, keywords in keyword_table.departments.items()
        })
        self.trigger_matchers: tuple[tuple[KeywordMatcher, tuple[str, ...]], ...] = tuple(
            (KeywordMatcher(trigger.keywords), trigger.specialists)
            for trigger in keyword_table.specialist_triggers
        )
        self.pattern_matchers: tuple[tuple[str, tuple[KeywordMatcher, ...]], ...] = tuple(
            (pattern.name, tuple(KeywordMatcher(group) for group in pattern.groups))
            for pattern in keyword_table.patterns
        )
        self.language_matchers: tuple[tuple[str, KeywordMatcher], ...] = tuple(
            (rule.language, KeywordMatcher(rule.aliases, compile_keyword=_compile_alias))
            for rule in keyword_table.languages
        )
        self.enterprise_matcher = KeywordMatcher(keyword_table.enterprise_keywords)
        self.capability_matchers: Mapping[str, KeywordMatcher] = MappingProxyType({
            specialist_id: KeywordMatcher(capability.keywords)
            for specialist_id, capability in self.capabilities.items()
        })
        self._capability_order = {sid: index for index, sid in enumerate(self.capabilities)}

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    @property
    def languages(self) -> tuple[LanguageRule, ...]:
        return self.keyword_table.languages

    def intent_complexity(self, intent: PrimaryIntent) -> float:
        """Complexity baseline for an intent ('other' when not listed)."""
        baselines = self.keyword_table.intent_complexity
        return baselines.get(intent, baselines[PrimaryIntent.OTHER])

    def capability_order(self, specialist_id: str) -> Optional[int]:
        """Declaration index of a specialist, or None if it is not in the table."""
        return self._capability_order.get(specialist_id)

    def task_type_for(self, specialist_id: str) -> TaskType:
        capability = self.capabilities.get(specialist_id)
        return capability.task_type if capability else TaskType.GENERAL

    def specialists_for_department(self, department: Department) -> list[str]:
        return [
            sid for sid, capability in self.capabilities.items()
            if capability.department == department
        ]

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_dicts(
        cls,
        keywords: dict[str, Any],
        capabilities: dict[str, Any],
        source: Optional[str] = None,
    ) -> "RoutingTables":
        """Build tables from already-parsed JSON documents.

        Raises:
            RoutingTableError: If either document fails validation.
        """
        try:
            keyword_table = KeywordTable.model_validate(keywords)
        except ValidationError as e:
            raise RoutingTableError(
                f"Invalid keyword table: {e.error_count()} validation error(s)",
                table="keywords",
                source=source,
                validation_details=str(e),
            ) from e
        try:
            capability_table = _CAPABILITY_ADAPTER.validate_python(capabilities)
        except ValidationError as e:
            raise RoutingTableError(
                f"Invalid capability table: {e.error_count()} validation error(s)",
                table="capabilities",
                source=source,
                validation_details=str(e),
            ) from e
        return cls(keyword_table, capability_table)

    @classmethod
    def from_directory(cls, directory: Union[str, Path]) -> "RoutingTables":
        """Load keywords.json and capabilities.json from a directory.

        Raises:
            RoutingTableError: If a file is missing, unreadable or invalid.
        """
        directory = Path(directory)
        keywords = _read_json(directory / KEYWORDS_FILE, "keywords")
        capabilities = _read_json(directory / CAPABILITIES_FILE, "capabilities")
        tables = cls.from_dicts(keywords, capabilities, source=str(directory))
        logger.debug(
            "Loaded routing tables from %s (%d specialists)",
            directory,
            len(tables.capabilities),
        )
        return tables


def _read_json(path: Any, table: str) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise RoutingTableError(
            f"Could not read {table} table: {e}",
            table=table,
            source=str(path),
        ) from e
    if not isinstance(data, dict):
        raise RoutingTableError(
            f"The {table} table must be a JSON object",
            table=table,
            source=str(path),
        )
    return data


@functools.lru_cache(maxsize=1)
def load_default_tables() -> RoutingTables:
    """Load the tables bundled with the package (cached)."""
    data_dir = resources.files("bumba.routing") / "data"
    keywords = _read_json(data_dir / KEYWORDS_FILE, "keywords")
    capabilities = _read_json(data_dir / CAPABILITIES_FILE, "capabilities")
    return RoutingTables.from_dicts(keywords, capabilities, source="bumba.routing/data")


__all__ = [
    "normalize_text",
    "tokenize",
    "KeywordMatcher",
    "IntentRule",
    "SpecialistTrigger",
    "LanguageRule",
    "PatternDefinition",
    "KeywordTable",
    "SpecialistCapability",
    "RoutingTables",
    "load_default_tables",
    "KEYWORDS_FILE",
    "CAPABILITIES_FILE",
]
