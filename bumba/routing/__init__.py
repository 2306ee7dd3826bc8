"""Routing module for the BUMBA framework.

Turns a task request (command verb, free-text description, optional hints)
into a RoutingPlan naming the departments, specialists and agents that
should handle it.

Key Components:
    IntentAnalyzer: Builds an Intent from a request using keyword tables.
    SpecialistResolver: Ranks specialists from the capability table.
    RoutingStrategyBuilder: Picks the execution mode and assigns agents.
    Router: Service chaining the three, with statistics and optional memory.
    RoutingTables: Validated keyword and capability tables.

Usage:
    from bumba.routing import Router

    router = Router()
    plan = router.route("analyze", ["security vulnerabilities in payment API"])

    print(plan.mode)             # ExecutionMode.MODERATE
    print(plan.pattern_names)    # ['security-audit']
    print(plan.specialist_ids)   # ['security-specialist', 'api-architect', ...]
    for agent in plan.execution.agents:
        print(agent.name, agent.model)

    # Module-level shortcuts use a shared default router
    from bumba.routing import route
    plan = route("fix", ["typo"])
"""

from bumba.routing.analyzer import IntentAnalyzer, validate_request
from bumba.routing.memory import RememberedRouting, RoutingMemory
from bumba.routing.resolver import SpecialistResolver
from bumba.routing.router import (
    FALLBACK_CONFIDENCE,
    Router,
    RoutingStatistics,
    analyze_intent,
    build_routing_plan,
    get_default_router,
    reset_default_router,
    resolve_specialists,
    route,
)
from bumba.routing.schemas import (
    DEPARTMENT_ORDER,
    AgentDescriptor,
    AgentRole,
    Department,
    ExecutionMode,
    ExecutionPlan,
    Intent,
    PatternMatch,
    PrimaryIntent,
    RankedSpecialist,
    RoutingContext,
    RoutingPlan,
    TaskType,
)
from bumba.routing.strategy import RoutingStrategyBuilder, calculate_priority, quantize_mode
from bumba.routing.tables import RoutingTables, load_default_tables

__all__ = [
    # Service
    "Router",
    "RoutingStatistics",
    "FALLBACK_CONFIDENCE",
    "get_default_router",
    "reset_default_router",
    "analyze_intent",
    "resolve_specialists",
    "build_routing_plan",
    "route",
    # Components
    "IntentAnalyzer",
    "SpecialistResolver",
    "RoutingStrategyBuilder",
    "RoutingMemory",
    "RememberedRouting",
    "RoutingTables",
    "load_default_tables",
    "validate_request",
    "quantize_mode",
    "calculate_priority",
    # Schemas
    "PrimaryIntent",
    "Department",
    "DEPARTMENT_ORDER",
    "ExecutionMode",
    "AgentRole",
    "TaskType",
    "RoutingContext",
    "PatternMatch",
    "Intent",
    "RankedSpecialist",
    "AgentDescriptor",
    "ExecutionPlan",
    "RoutingPlan",
]
