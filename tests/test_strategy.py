"""Tests for the routing strategy builder.

Test Coverage:
- Mode quantization boundaries and executive promotion
- Manager and specialist agents with model tiering
- Priority, recommendations and suggestions
"""

from __future__ import annotations

import pytest

from bumba.config.settings import (
    DEFAULT_CODING_MODEL,
    DEFAULT_GENERAL_MODEL,
    DEFAULT_MANAGER_MODEL,
    DEFAULT_REASONING_MODEL,
    ModelSettings,
    RoutingSettings,
)
from bumba.routing import (
    AgentRole,
    Department,
    ExecutionMode,
    Intent,
    PrimaryIntent,
    RankedSpecialist,
    RoutingStrategyBuilder,
    calculate_priority,
    quantize_mode,
)


# =============================================================================
# Test: Mode Quantization
# =============================================================================


class TestQuantizeMode:
    """Ranges are inclusive at the low end, exclusive at the high end."""

    @pytest.mark.parametrize(
        "complexity,mode",
        [
            (0.0, ExecutionMode.SIMPLE),
            (0.29, ExecutionMode.SIMPLE),
            (0.3, ExecutionMode.MODERATE),
            (0.59, ExecutionMode.MODERATE),
            (0.6, ExecutionMode.COMPLEX),
            (0.84, ExecutionMode.COMPLEX),
            (0.85, ExecutionMode.EXECUTIVE),
            (1.0, ExecutionMode.EXECUTIVE),
        ],
    )
    def test_boundaries(self, complexity, mode):
        assert quantize_mode(complexity) == mode

    def test_custom_thresholds(self):
        settings = RoutingSettings(moderate_min=0.1, complex_min=0.2, executive_min=0.3)
        assert quantize_mode(0.25, settings) == ExecutionMode.COMPLEX

    def test_executive_level_promoted(self, builder):
        intent = Intent(complexity=0.2, is_executive_level=True, departments=(Department.STRATEGIC,))
        assert builder.build(intent, []).mode == ExecutionMode.EXECUTIVE

    def test_mode_follows_complexity(self, builder):
        intent = Intent(complexity=0.65, departments=(Department.TECHNICAL,))
        assert builder.build(intent, []).mode == ExecutionMode.COMPLEX


# =============================================================================
# Test: Agents
# =============================================================================


class TestAgents:
    """Test execution plan construction."""

    def test_one_manager_per_department(self, builder):
        intent = Intent(departments=(Department.TECHNICAL, Department.EXPERIENCE))
        plan = builder.build(intent, [])
        managers = plan.execution.managers
        assert [m.name for m in managers] == ["technical-manager", "experience-manager"]
        assert all(m.model == DEFAULT_MANAGER_MODEL for m in managers)
        assert all(m.using_claude_max for m in managers)
        assert all(m.role == AgentRole.MANAGER for m in managers)

    def test_specialists_use_task_type_tier(self, builder):
        ranked = [
            RankedSpecialist(id="security-specialist", confidence=0.8),
            RankedSpecialist(id="python-specialist", confidence=0.8),
            RankedSpecialist(id="technical-writer", confidence=0.5),
            RankedSpecialist(id="quantum-specialist", confidence=0.8),
        ]
        plan = builder.build(Intent(departments=(Department.TECHNICAL,)), ranked)
        models = {a.name: a.model for a in plan.execution.specialists}
        assert models == {
            "security-specialist": DEFAULT_REASONING_MODEL,
            "python-specialist": DEFAULT_CODING_MODEL,
            "technical-writer": DEFAULT_GENERAL_MODEL,
            "quantum-specialist": DEFAULT_GENERAL_MODEL,
        }
        assert not any(a.using_claude_max for a in plan.execution.specialists)

    def test_managers_before_specialists(self, builder):
        ranked = [RankedSpecialist(id="qa-engineer", confidence=0.9)]
        plan = builder.build(Intent(departments=(Department.TECHNICAL,)), ranked)
        assert [a.role for a in plan.execution.agents] == [AgentRole.MANAGER, AgentRole.SPECIALIST]

    def test_low_confidence_specialists_get_no_agent(self, builder):
        ranked = [
            RankedSpecialist(id="qa-engineer", confidence=0.3),
            RankedSpecialist(id="backend-engineer", confidence=0.29),
        ]
        plan = builder.build(Intent(departments=(Department.TECHNICAL,)), ranked)
        assert [a.name for a in plan.execution.specialists] == ["qa-engineer"]
        assert plan.specialist_ids == ["qa-engineer", "backend-engineer"]

    def test_missing_departments_default_to_technical(self, builder):
        plan = builder.build(Intent(), [])
        assert plan.departments == (Department.TECHNICAL,)
        assert plan.execution.agents[0].name == "technical-manager"
        assert plan.intent.departments == plan.departments

    def test_custom_models(self, tables):
        models = ModelSettings(manager_model="house-large", coding_model="house-coder")
        builder = RoutingStrategyBuilder(tables, models=models)
        ranked = [RankedSpecialist(id="python-specialist", confidence=0.8)]
        plan = builder.build(Intent(departments=(Department.TECHNICAL,)), ranked)
        assert [a.model for a in plan.execution.agents] == ["house-large", "house-coder"]


# =============================================================================
# Test: Plan Metadata
# =============================================================================


class TestPriority:
    def test_executive_is_max(self):
        intent = Intent(complexity=0.1, confidence=0.2, is_executive_level=True)
        assert calculate_priority(intent, [Department.STRATEGIC]) == 100

    def test_weighted_sum(self):
        intent = Intent(complexity=0.5, confidence=0.5)
        assert calculate_priority(intent, [Department.TECHNICAL]) == 50

    def test_capped(self):
        intent = Intent(complexity=1.0, confidence=1.0)
        departments = [Department.TECHNICAL, Department.EXPERIENCE, Department.STRATEGIC]
        assert calculate_priority(intent, departments) == 100


class TestRecommendationsAndSuggestions:
    def test_recommendations(self, builder):
        intent = Intent(is_executive_level=True, departments=(Department.STRATEGIC,), confidence=0.8)
        ranked = [RankedSpecialist(id="strategy-consultant", confidence=0.5)]
        plan = builder.build(intent, ranked)
        assert plan.recommendations == (
            "Route to the strategic manager for executive handling",
            "Engage departments: strategic",
            "Spawn specialists: strategy-consultant",
        )

    def test_no_suggestions_when_confident(self, builder):
        intent = Intent(primary_intent=PrimaryIntent.BUILD, confidence=0.6, departments=(Department.TECHNICAL,))
        assert builder.build(intent, []).suggestions == ()

    def test_language_suggestion_for_build(self, builder):
        intent = Intent(primary_intent=PrimaryIntent.BUILD, confidence=0.35, departments=(Department.TECHNICAL,))
        suggestions = builder.build(intent, []).suggestions
        assert any("programming language" in s for s in suggestions)

    def test_multi_department_suggestion(self, builder):
        intent = Intent(
            confidence=0.5,
            departments=(Department.TECHNICAL, Department.EXPERIENCE, Department.STRATEGIC),
        )
        suggestions = builder.build(intent, []).suggestions
        assert any("multiple departments" in s for s in suggestions)

    def test_executive_mode_suggestion(self, builder):
        intent = Intent(complexity=0.82, confidence=0.5, departments=(Department.TECHNICAL,))
        suggestions = builder.build(intent, []).suggestions
        assert any("executive mode" in s for s in suggestions)

    def test_generic_suggestion(self, builder):
        intent = Intent(confidence=0.2, departments=(Department.TECHNICAL,))
        assert len(builder.build(intent, []).suggestions) == 1

    def test_plan_source(self, builder):
        assert builder.build(Intent(), []).source == "analysis"
        assert builder.build(Intent(), [], source="memory").source == "memory"
