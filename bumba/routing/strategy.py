"""Routing strategy: turn an Intent and ranked specialists into a RoutingPlan.

The builder decides three things:

1. Execution mode, by quantizing complexity:

       [0.0, moderate_min)         simple
       [moderate_min, complex_min) moderate
       [complex_min, executive_min) complex
       [executive_min, 1.0]        executive

   Executive-level intents are always promoted to executive mode.

2. Agents, managers first:

       <department>-manager   manager tier model, using_claude_max=True
       <specialist-id>        model from the specialist's task-type tier

   Specialists below min_agent_confidence stay in the ranked list but do
   not get an agent.

3. Scheduling metadata: priority, recommendations and, for low-confidence
   intents, suggestions for a better request.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

from bumba.config.settings import ModelSettings, RoutingSettings
from bumba.routing.schemas import (
    AgentDescriptor,
    AgentRole,
    Department,
    ExecutionMode,
    ExecutionPlan,
    Intent,
    PrimaryIntent,
    RankedSpecialist,
    RoutingPlan,
)
from bumba.routing.tables import RoutingTables


logger = logging.getLogger(__name__)

EXECUTIVE_PRIORITY = 100
MAX_PRIORITY = 100


def quantize_mode(complexity: float, settings: Optional[RoutingSettings] = None) -> ExecutionMode:
    """Map a complexity score to an execution mode.

    Ranges are inclusive at the low end and exclusive at the high end.

    Example:
        >>> quantize_mode(0.3)
        <ExecutionMode.MODERATE: 'moderate'>
    """
    settings = settings or RoutingSettings()
    if complexity < settings.moderate_min:
        return ExecutionMode.SIMPLE
    if complexity < settings.complex_min:
        return ExecutionMode.MODERATE
    if complexity < settings.executive_min:
        return ExecutionMode.COMPLEX
    return ExecutionMode.EXECUTIVE


def calculate_priority(intent: Intent, departments: Sequence[Department]) -> int:
    """Scheduling priority in 0-100; executive-level work always gets 100."""
    if intent.is_executive_level:
        return EXECUTIVE_PRIORITY
    score = intent.complexity * 50 + intent.confidence * 30 + len(departments) * 10
    return min(int(round(score)), MAX_PRIORITY)


class RoutingStrategyBuilder:
    """Build RoutingPlans.

    Attributes:
        tables: Routing tables, used for specialist task types.
        settings: Routing thresholds.
        models: Model tier configuration.
    """

    def __init__(
        self,
        tables: RoutingTables,
        settings: Optional[RoutingSettings] = None,
        models: Optional[ModelSettings] = None,
    ) -> None:
        self.tables = tables
        self.settings = settings or RoutingSettings()
        self.models = models or ModelSettings()

    def build(
        self,
        intent: Intent,
        specialists: Sequence[RankedSpecialist],
        source: str = "analysis",
    ) -> RoutingPlan:
        """Build the plan for an intent and its ranked specialists.

        Args:
            intent: Output of the analyzer.
            specialists: Output of the resolver, highest confidence first.
            source: Provenance recorded on the plan.

        Returns:
            The finished RoutingPlan.
        """
        departments = tuple(intent.departments) or (Department.TECHNICAL,)
        if not intent.departments:
            intent = intent.model_copy(update={"departments": departments})

        mode = quantize_mode(intent.complexity, self.settings)
        if intent.is_executive_level:
            mode = ExecutionMode.EXECUTIVE

        execution = ExecutionPlan(agents=tuple(self.build_agents(departments, specialists)))

        plan = RoutingPlan(
            mode=mode,
            departments=departments,
            specialists=tuple(specialists),
            execution=execution,
            intent=intent,
            priority=calculate_priority(intent, departments),
            recommendations=tuple(self.recommendations(intent, departments, specialists)),
            suggestions=tuple(self.suggestions(intent, departments)),
            source=source,
        )

        logger.debug(
            "Routing plan: mode=%s, departments=%s, agents=%s, priority=%d",
            plan.mode.value,
            [d.value for d in plan.departments],
            [a.name for a in execution.agents],
            plan.priority,
        )
        return plan

    def build_agents(
        self,
        departments: Sequence[Department],
        specialists: Sequence[RankedSpecialist],
    ) -> list[AgentDescriptor]:
        agents = [
            AgentDescriptor(
                name=f"{department.value}-manager",
                role=AgentRole.MANAGER,
                model=self.models.manager_model,
                using_claude_max=True,
            )
            for department in departments
        ]
        for specialist in specialists:
            if specialist.confidence < self.settings.min_agent_confidence:
                continue
            task_type = self.tables.task_type_for(specialist.id)
            agents.append(AgentDescriptor(
                name=specialist.id,
                role=AgentRole.SPECIALIST,
                model=self.models.model_for_task_type(task_type),
                using_claude_max=False,
            ))
        return agents

    def recommendations(
        self,
        intent: Intent,
        departments: Sequence[Department],
        specialists: Sequence[RankedSpecialist],
    ) -> list[str]:
        notes = []
        if intent.is_executive_level:
            notes.append("Route to the strategic manager for executive handling")
        notes.append(f"Engage departments: {', '.join(d.value for d in departments)}")
        if specialists:
            notes.append(f"Spawn specialists: {', '.join(s.id for s in specialists)}")
        return notes

    def suggestions(self, intent: Intent, departments: Sequence[Department]) -> list[str]:
        """Hints for improving a request; empty unless confidence is low."""
        if intent.confidence >= self.settings.low_confidence_threshold:
            return []

        hints = []
        if intent.explicit_language is None and intent.primary_intent == PrimaryIntent.BUILD:
            hints.append("Consider specifying the programming language for more accurate routing")
        if len(departments) >= 3:
            hints.append(
                "This task touches multiple departments. "
                "Consider breaking it into smaller, focused tasks"
            )
        if intent.complexity > 0.8 and not intent.is_executive_level:
            hints.append(
                "This appears to be a complex task. "
                "Consider using executive mode for better orchestration"
            )
        if not hints:
            hints.append("Add detail about the domain or technology to improve routing accuracy")
        return hints


__all__ = [
    "RoutingStrategyBuilder",
    "quantize_mode",
    "calculate_priority",
]
