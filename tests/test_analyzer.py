"""Tests for the intent analyzer.

Test Coverage:
- Primary intent detection from the command verb and description
- Department detection, ordering and defaults
- Specialist triggers, explicit language and named patterns
- Complexity and confidence scoring
- Routing context hints
- Type validation at the API boundary

Note: The analyzer is rule-based; none of these tests need network access.
"""

from __future__ import annotations

import pytest

from bumba.config.settings import RoutingSettings
from bumba.core.exceptions import InvalidInputError
from bumba.routing import (
    Department,
    IntentAnalyzer,
    PrimaryIntent,
    RoutingContext,
)


# =============================================================================
# Test: Primary Intent
# =============================================================================


class TestPrimaryIntent:
    """Test mapping of verbs to primary intents."""

    @pytest.mark.parametrize(
        "command,expected",
        [
            ("implement", PrimaryIntent.BUILD),
            ("Build", PrimaryIntent.BUILD),
            ("analyze", PrimaryIntent.ANALYZE),
            ("review", PrimaryIntent.ANALYZE),
            ("design", PrimaryIntent.DESIGN),
            ("test", PrimaryIntent.TEST),
            ("document", PrimaryIntent.DOCUMENT),
            ("plan", PrimaryIntent.PLAN),
            ("harden", PrimaryIntent.SECURE),
            ("optimize", PrimaryIntent.OPTIMIZE),
            ("research", PrimaryIntent.RESEARCH),
        ],
    )
    def test_command_verbs(self, analyzer, command, expected):
        assert analyzer.analyze(command).primary_intent == expected

    def test_unrecognised_verb_is_other(self, analyzer):
        assert analyzer.analyze("fix", ["typo"]).primary_intent == PrimaryIntent.OTHER

    def test_command_wins_over_description(self, analyzer):
        intent = analyzer.analyze("test", ["build pipeline"])
        assert intent.primary_intent == PrimaryIntent.TEST

    def test_description_used_when_command_unrecognised(self, analyzer):
        intent = analyzer.analyze("please", ["refactor the billing module"])
        assert intent.primary_intent == PrimaryIntent.OPTIMIZE

    def test_empty_request(self, analyzer):
        intent = analyzer.analyze("")
        assert intent.primary_intent == PrimaryIntent.OTHER
        assert intent.departments == (Department.TECHNICAL,)
        assert intent.specialists == ()
        assert intent.patterns == ()


# =============================================================================
# Test: Departments
# =============================================================================


class TestDepartments:
    """Test department detection."""

    def test_technical(self, analyzer):
        assert analyzer.analyze("build", ["a database migration"]).departments == (Department.TECHNICAL,)

    def test_experience(self, analyzer):
        assert analyzer.analyze("create", ["a landing page layout"]).departments == (Department.EXPERIENCE,)

    def test_strategic(self, analyzer):
        assert analyzer.analyze("write", ["pricing for the business"]).departments == (Department.STRATEGIC,)

    def test_multi_department_order_is_fixed(self, analyzer):
        intent = analyzer.analyze("prepare", ["roadmap for ui and database"])
        assert intent.departments == (
            Department.TECHNICAL,
            Department.EXPERIENCE,
            Department.STRATEGIC,
        )

    def test_default_department(self, analyzer):
        assert analyzer.analyze("fix", ["typo"]).departments == (Department.TECHNICAL,)

    def test_department_hint_used_when_nothing_matches(self, analyzer):
        intent = analyzer.analyze("fix", ["typo"], {"department_hints": ["strategic", "experience"]})
        assert intent.departments == (Department.EXPERIENCE, Department.STRATEGIC)

    def test_department_hint_ignored_when_keywords_match(self, analyzer):
        intent = analyzer.analyze("build", ["an api"], {"department_hints": ["strategic"]})
        assert intent.departments == (Department.TECHNICAL,)


# =============================================================================
# Test: Specialists, Language, Patterns
# =============================================================================


class TestSignals:
    """Test specialist triggers, language detection and patterns."""

    def test_trigger_specialists_in_first_seen_order(self, analyzer):
        intent = analyzer.analyze("build", ["react component with jwt auth"])
        assert intent.specialists[:3] == ("security-specialist", "frontend-specialist", "react-specialist")

    def test_specialists_are_unique(self, analyzer):
        intent = analyzer.analyze("build", ["react frontend in react"])
        assert intent.specialists.count("frontend-specialist") == 1

    @pytest.mark.parametrize(
        "args,language",
        [
            (["python flask service"], "python"),
            (["a django admin"], "python"),
            (["golang worker"], "golang"),
            (["node.js api"], "javascript"),
            (["a service in rust"], "rust"),
            (["spring boot app"], "java"),
        ],
    )
    def test_explicit_language(self, analyzer, args, language):
        intent = analyzer.analyze("build", args)
        assert intent.explicit_language == language
        assert f"{language}-specialist" in intent.specialists

    def test_language_alias_must_be_whole_word(self, analyzer):
        intent = analyzer.analyze("build", ["a trusty google integration"])
        assert intent.explicit_language is None

    @pytest.mark.parametrize(
        "args,language",
        [
            (["a python-based etl service"], "python"),
            (["python/flask backend"], "python"),
            (["a rust-powered cli"], "rust"),
        ],
    )
    def test_language_joined_by_punctuation(self, analyzer, args, language):
        intent = analyzer.analyze("build", args)
        assert intent.explicit_language == language
        assert f"{language}-specialist" in intent.specialists

    def test_language_hint_is_fallback(self, analyzer):
        intent = analyzer.analyze("build", ["a csv importer"], {"language_hint": "Rust"})
        assert intent.explicit_language == "rust"

        named = analyzer.analyze("build", ["a python csv importer"], {"language_hint": "rust"})
        assert named.explicit_language == "python"

    def test_specialist_hints_appended(self, analyzer):
        intent = analyzer.analyze("build", ["an api"], RoutingContext(specialist_hints=("ML-Engineer",)))
        assert intent.specialists[-1] == "ml-engineer"

    def test_pattern_match(self, analyzer):
        intent = analyzer.analyze("analyze", ["security vulnerabilities in payment API"])
        assert intent.pattern_names == ["security-audit"]
        pattern = intent.patterns[0]
        assert pattern.keywords == ("security", "analy*")
        assert pattern.trigger == "analyze security"

    def test_pattern_requires_every_group(self, analyzer):
        intent = analyzer.analyze("document", ["the api"])
        assert "api-development" not in intent.pattern_names

    def test_multiple_patterns(self, analyzer):
        intent = analyzer.analyze("build", ["api endpoints and a test automation suite"])
        assert "api-development" in intent.pattern_names
        assert "test-automation" in intent.pattern_names


# =============================================================================
# Test: Scoring
# =============================================================================


class TestComplexity:
    """Test complexity scoring."""

    def test_baseline_by_intent(self, analyzer):
        assert analyzer.analyze("fix", ["typo"]).complexity == pytest.approx(0.1)
        assert analyzer.analyze("implement", ["user authentication"]).complexity == pytest.approx(0.3)

    def test_extra_departments_increase_complexity(self, analyzer):
        single = analyzer.analyze("build", ["an api"])
        multi = analyzer.analyze("build", ["an api with a dashboard"])
        assert multi.complexity == pytest.approx(single.complexity + 0.2)

    def test_enterprise_vocabulary_increases_complexity(self, analyzer):
        plain = analyzer.analyze("build", ["an api"])
        enterprise = analyzer.analyze("build", ["an enterprise api"])
        assert enterprise.complexity > plain.complexity
        assert enterprise.is_executive_level

    def test_long_descriptions_increase_complexity(self, analyzer):
        assert analyzer.calculate_complexity(PrimaryIntent.OTHER, 1, False, 11) == pytest.approx(0.1)
        assert analyzer.calculate_complexity(PrimaryIntent.OTHER, 1, False, 12) == pytest.approx(0.2)
        assert analyzer.calculate_complexity(PrimaryIntent.OTHER, 1, False, 100) == pytest.approx(0.3)

    def test_complexity_is_clamped(self, analyzer):
        assert analyzer.calculate_complexity(PrimaryIntent.BUILD, 3, True, 100) == 1.0

    def test_executive_threshold(self, analyzer):
        intent = analyzer.analyze("prepare", ["roadmap for ui and database"])
        assert intent.complexity >= 0.7
        assert intent.is_executive_level


class TestConfidence:
    """Test confidence scoring."""

    def test_no_signals(self, analyzer):
        assert analyzer.analyze("fix", ["typo"]).confidence == pytest.approx(0.2)

    def test_all_signals(self, analyzer):
        intent = analyzer.analyze("implement", ["python flask API with JWT auth"])
        assert intent.confidence == pytest.approx(0.95)

    def test_confidence_independent_of_complexity(self, analyzer):
        intent = analyzer.analyze("fix", ["typo in the enterprise platform"])
        assert intent.is_executive_level
        assert intent.confidence < 0.5

    def test_custom_increments(self, tables):
        settings = RoutingSettings(confidence_base=0.0, confidence_increment=0.5)
        intent = IntentAnalyzer(tables, settings).analyze("implement", ["python flask API"])
        assert intent.confidence == 1.0


class TestDeterminism:
    """The analyzer is a pure function of its inputs."""

    def test_same_input_same_intent(self, analyzer):
        first = analyzer.analyze("design", ["accessible dashboard UI"])
        second = analyzer.analyze("design", ["accessible dashboard UI"])
        assert first == second

    def test_description_is_normalized(self, analyzer):
        intent = analyzer.analyze("Design", ["  Accessible   Dashboard UI "])
        assert intent.description == "design accessible dashboard ui"

    def test_intent_is_frozen(self, analyzer):
        intent = analyzer.analyze("build", ["an api"])
        with pytest.raises(Exception):
            intent.complexity = 0.9


# =============================================================================
# Test: Input Validation
# =============================================================================


class TestInputValidation:
    """Only wrong types raise; odd content never does."""

    @pytest.mark.parametrize("command", [None, 42, ["build"]])
    def test_command_must_be_string(self, analyzer, command):
        with pytest.raises(InvalidInputError) as exc_info:
            analyzer.analyze(command)
        assert exc_info.value.field == "command"

    @pytest.mark.parametrize("args", ["build an api", 42, {"a": "b"}])
    def test_args_must_be_list(self, analyzer, args):
        with pytest.raises(InvalidInputError) as exc_info:
            analyzer.analyze("build", args)
        assert exc_info.value.field == "args"

    def test_args_items_must_be_strings(self, analyzer):
        with pytest.raises(InvalidInputError) as exc_info:
            analyzer.analyze("build", ["an api", 3])
        assert exc_info.value.field == "args[1]"

    def test_tuple_args_accepted(self, analyzer):
        assert analyzer.analyze("build", ("an", "api")).departments == (Department.TECHNICAL,)

    def test_context_must_be_mapping(self, analyzer):
        with pytest.raises(InvalidInputError) as exc_info:
            analyzer.analyze("build", [], "technical")
        assert exc_info.value.field == "context"

    def test_invalid_context_field(self, analyzer):
        with pytest.raises(InvalidInputError) as exc_info:
            analyzer.analyze("build", [], {"department_hints": ["finance"]})
        assert exc_info.value.field.startswith("context.department_hints")
        assert exc_info.value.code == "INVALID_INPUT"

    def test_unknown_context_keys_ignored(self, analyzer):
        intent = analyzer.analyze("build", ["an api"], {"user": "someone", "priority": 5})
        assert intent.departments == (Department.TECHNICAL,)

    def test_empty_context_accepted(self, analyzer):
        assert analyzer.analyze("build", ["an api"], {}) == analyzer.analyze("build", ["an api"], None)
