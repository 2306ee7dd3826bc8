"""Intent analysis for the BUMBA routing core.

Turns a command verb plus free-text arguments into a structured Intent:
primary intent, departments, keyword-triggered specialists, explicit
language, named patterns, complexity and confidence.

The analyzer is fail-open. Empty or unrecognised descriptions produce a
low-confidence Intent routed to the default department; only wrongly
typed arguments raise (InvalidInputError), at the API boundary.

Scoring:
    complexity = intent baseline
               + department_increment per matched department beyond the first
               + enterprise_increment for enterprise-scope vocabulary
               + diversity_increment per long_description_tokens distinct tokens
                 (at most max_diversity_steps steps)

    confidence = confidence_base
               + confidence_increment per independent signal:
                 recognised intent verb, department keyword, specialist
                 trigger, explicit language, named pattern

    Both are clamped to 0.0-1.0 and computed independently.

Example:
    >>> analyzer = IntentAnalyzer(load_default_tables())
    >>> intent = analyzer.analyze("implement", ["python flask API with JWT auth"])
    >>> intent.explicit_language
    'python'
    >>> intent.pattern_names
    ['api-development']
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Union

from pydantic import ValidationError

from bumba.config.settings import RoutingSettings
from bumba.core.exceptions import InvalidInputError
from bumba.routing.schemas import (
    DEPARTMENT_ORDER,
    Department,
    Intent,
    PatternMatch,
    PrimaryIntent,
    RoutingContext,
)
from bumba.routing.tables import RoutingTables, normalize_text, tokenize


# =============================================================================
# Module Logger
# =============================================================================

logger = logging.getLogger(__name__)

ContextLike = Union[RoutingContext, Mapping[str, Any], None]


# =============================================================================
# Input Validation
# =============================================================================


def validate_request(
    command: Any,
    args: Any,
    context: Any,
) -> tuple[str, list[str], RoutingContext]:
    """Check argument types at the API boundary.

    Args:
        command: Command verb; must be a string.
        args: Description fragments; None, or a list/tuple of strings.
        context: None, a mapping, or a RoutingContext.

    Returns:
        Tuple of (command, args, context) in canonical form.

    Raises:
        InvalidInputError: If any argument has the wrong type.
    """
    if not isinstance(command, str):
        raise InvalidInputError(
            "command must be a string",
            field="command",
            expected="str",
            received=type(command).__name__,
        )

    if args is None:
        args = []
    elif isinstance(args, str) or not isinstance(args, Sequence):
        raise InvalidInputError(
            "args must be a list of strings",
            field="args",
            expected="list[str]",
            received=type(args).__name__,
        )
    for index, arg in enumerate(args):
        if not isinstance(arg, str):
            raise InvalidInputError(
                f"args[{index}] must be a string",
                field=f"args[{index}]",
                expected="str",
                received=type(arg).__name__,
            )

    if context is None:
        context = RoutingContext()
    elif isinstance(context, Mapping):
        try:
            context = RoutingContext.model_validate(dict(context))
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            raise InvalidInputError(
                f"Invalid routing context: {first.get('msg', 'validation failed')}",
                field=f"context.{location}" if location else "context",
                expected="RoutingContext fields",
                received=type(first.get("input")).__name__,
            ) from e
    elif not isinstance(context, RoutingContext):
        raise InvalidInputError(
            "context must be a mapping or RoutingContext",
            field="context",
            expected="Mapping | RoutingContext | None",
            received=type(context).__name__,
        )

    return command, list(args), context


# =============================================================================
# Intent Analyzer
# =============================================================================


class IntentAnalyzer:
    """Rule-based analyzer producing an Intent from a task request.

    All vocabulary comes from the injected RoutingTables; all scoring
    constants come from RoutingSettings. The analyzer holds no other state,
    so one instance can serve concurrent calls.

    Attributes:
        tables: Routing tables with precompiled matchers.
        settings: Scoring configuration.
    """

    def __init__(self, tables: RoutingTables, settings: Optional[RoutingSettings] = None) -> None:
        self.tables = tables
        self.settings = settings or RoutingSettings()

    def analyze(
        self,
        command: str,
        args: Optional[Sequence[str]] = None,
        context: ContextLike = None,
    ) -> Intent:
        """Analyze a task request.

        Args:
            command: Short verb or phrase (e.g. "implement", "analyze").
            args: Free-text fragments joined into the task description.
            context: Optional routing hints (RoutingContext or dict).

        Returns:
            The Intent for the request. Never raises for odd content.

        Raises:
            InvalidInputError: If an argument has the wrong type.
        """
        command, args, context = validate_request(command, args, context)

        command_text = normalize_text(command)
        description = normalize_text(f"{command} {' '.join(args)}")
        tokens = tokenize(description)

        primary_intent = self.detect_primary_intent(command_text, description)

        matched_departments = self.detect_departments(description)
        if matched_departments:
            departments = matched_departments
        elif context.department_hints:
            departments = _ordered_departments(context.department_hints)
        else:
            departments = [Department.TECHNICAL]

        triggered = self.detect_specialists(description)
        explicit_language = self.detect_language(description)
        specialists = list(triggered)
        if explicit_language:
            _append_unique(specialists, f"{explicit_language}-specialist")
        for hint in context.specialist_hints:
            _append_unique(specialists, hint)

        patterns = self.match_patterns(description)
        is_enterprise = self.tables.enterprise_matcher.matches(description)

        complexity = self.calculate_complexity(
            primary_intent,
            matched_department_count=len(matched_departments),
            is_enterprise=is_enterprise,
            distinct_tokens=len(set(tokens)),
        )
        confidence = self.calculate_confidence(
            intent_recognised=primary_intent != PrimaryIntent.OTHER,
            department_matched=bool(matched_departments),
            specialist_triggered=bool(triggered),
            language_detected=explicit_language is not None,
            pattern_matched=bool(patterns),
        )

        intent = Intent(
            primary_intent=primary_intent,
            departments=tuple(departments),
            specialists=tuple(specialists),
            complexity=complexity,
            is_executive_level=complexity >= self.settings.executive_threshold or is_enterprise,
            explicit_language=explicit_language or context.language_hint,
            patterns=tuple(patterns),
            confidence=confidence,
            description=description,
        )

        logger.debug(
            "Intent analysis: intent=%s, departments=%s, specialists=%s, "
            "complexity=%.2f, confidence=%.2f, language=%s, patterns=%s",
            intent.primary_intent.value,
            [d.value for d in intent.departments],
            list(intent.specialists),
            intent.complexity,
            intent.confidence,
            intent.explicit_language,
            intent.pattern_names,
        )
        return intent

    # -------------------------------------------------------------------------
    # Detection steps
    # -------------------------------------------------------------------------

    def detect_primary_intent(self, command: str, description: str) -> PrimaryIntent:
        """Map the command verb, then the description, to a primary intent.

        Rules are checked in table order and the first match wins, so ties
        cannot occur.
        """
        for text in (command, description):
            if not text:
                continue
            for intent, matcher in self.tables.intent_matchers:
                if matcher.matches(text):
                    return intent
        return PrimaryIntent.OTHER

    def detect_departments(self, description: str) -> list[Department]:
        """Return every department with a keyword in the description.

        The result follows DEPARTMENT_ORDER regardless of where in the text
        each keyword appeared. May be empty; the caller applies defaults.
        """
        return [
            dept for dept in DEPARTMENT_ORDER
            if dept in self.tables.department_matchers
            and self.tables.department_matchers[dept].matches(description)
        ]

    def detect_specialists(self, description: str) -> list[str]:
        """Collect keyword-triggered specialists in first-seen order."""
        specialists: list[str] = []
        for matcher, suggested in self.tables.trigger_matchers:
            if matcher.matches(description):
                for specialist in suggested:
                    _append_unique(specialists, specialist)
        return specialists

    def detect_language(self, description: str) -> Optional[str]:
        """Return the first language with an alias in the description.

        Aliases must be whole words but may be joined to a neighbour by
        punctuation ("python-based", "python/flask").
        """
        for language, matcher in self.tables.language_matchers:
            if matcher.matches(description):
                return language
        return None

    def match_patterns(self, description: str) -> list[PatternMatch]:
        """Return the named patterns whose keyword groups are all satisfied."""
        matches: list[PatternMatch] = []
        for name, groups in self.tables.pattern_matchers:
            found = []
            for group in groups:
                hit = group.first_match(description)
                if hit is None:
                    break
                found.append(hit)
            else:
                start = min(m.start() for _, m in found)
                end = max(m.end() for _, m in found)
                matches.append(PatternMatch(
                    name=name,
                    keywords=tuple(keyword for keyword, _ in found),
                    trigger=description[start:end],
                ))
        return matches

    # -------------------------------------------------------------------------
    # Scoring
    # -------------------------------------------------------------------------

    def calculate_complexity(
        self,
        primary_intent: PrimaryIntent,
        matched_department_count: int,
        is_enterprise: bool,
        distinct_tokens: int,
    ) -> float:
        """Score how multi-faceted a task is (0.0-1.0)."""
        s = self.settings
        complexity = self.tables.intent_complexity(primary_intent)
        complexity += s.department_increment * max(matched_department_count - 1, 0)
        if is_enterprise:
            complexity += s.enterprise_increment
        diversity_steps = min(distinct_tokens // s.long_description_tokens, s.max_diversity_steps)
        complexity += s.diversity_increment * diversity_steps
        return _clamp(complexity)

    def calculate_confidence(
        self,
        intent_recognised: bool,
        department_matched: bool,
        specialist_triggered: bool,
        language_detected: bool,
        pattern_matched: bool,
    ) -> float:
        """Score how many independent signals agree (0.0-1.0)."""
        signals = sum((
            intent_recognised,
            department_matched,
            specialist_triggered,
            language_detected,
            pattern_matched,
        ))
        return _clamp(self.settings.confidence_base + self.settings.confidence_increment * signals)


# =============================================================================
# Helpers
# =============================================================================


def _clamp(value: float) -> float:
    return round(min(max(value, 0.0), 1.0), 3)


def _append_unique(items: list[str], item: str) -> None:
    if item not in items:
        items.append(item)


def _ordered_departments(departments: Sequence[Department]) -> list[Department]:
    return [dept for dept in DEPARTMENT_ORDER if dept in departments]


__all__ = [
    "IntentAnalyzer",
    "validate_request",
]
