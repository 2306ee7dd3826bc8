"""Routing service for the BUMBA framework.

The Router ties the three routing stages together:

    command + args + context
        -> IntentAnalyzer.analyze()          Intent
        -> SpecialistResolver.resolve()      ranked specialists
        -> RoutingStrategyBuilder.build()    RoutingPlan

Routing is fail-open. Wrongly typed arguments raise InvalidInputError; any
other failure inside the pipeline is logged and answered with a fallback
plan (technical department, simple mode) so the caller always gets work
assigned.

Key Components:
    Router: Explicitly constructed service holding tables and components.
    RoutingStatistics: Counters kept by a Router across calls.
    analyze_intent, resolve_specialists, build_routing_plan, route:
        Module-level shortcuts backed by a lazily created default Router.

Usage:
    from bumba.routing import Router

    router = Router()
    plan = router.route("implement", ["python flask API with JWT auth"])
    print(plan.mode, plan.specialist_ids)

Example:
    >>> router = Router()
    >>> plan = router.route("plan", ["enterprise platform transformation"])
    >>> plan.mode
    <ExecutionMode.EXECUTIVE: 'executive'>
    >>> plan.priority
    100
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from bumba.config.settings import get_settings
from bumba.core.exceptions import InvalidInputError
from bumba.routing.analyzer import ContextLike, IntentAnalyzer, validate_request
from bumba.routing.memory import RoutingMemory
from bumba.routing.resolver import SpecialistResolver
from bumba.routing.schemas import (
    AgentDescriptor,
    AgentRole,
    Department,
    ExecutionMode,
    ExecutionPlan,
    Intent,
    RankedSpecialist,
    RoutingPlan,
)
from bumba.routing.strategy import RoutingStrategyBuilder
from bumba.routing.tables import RoutingTables, load_default_tables

if TYPE_CHECKING:
    from bumba.config.settings import BumbaSettings


# =============================================================================
# Module Logger
# =============================================================================

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

FALLBACK_CONFIDENCE = 0.3
"""Confidence reported on the fail-open plan."""

SOURCE_ANALYSIS = "analysis"
SOURCE_MEMORY = "memory"
SOURCE_FALLBACK = "fallback"


# =============================================================================
# Statistics
# =============================================================================


@dataclass
class RoutingStatistics:
    """Counters collected by a Router.

    Attributes:
        total_routings: Plans returned by route().
        fallback_routings: Plans that came from the fail-open path.
        memory_hits: Plans reused from routing memory.
        average_confidence: Running mean of plan confidence.
        by_department: Plans per department (a plan counts once per department).
        by_mode: Plans per execution mode.
    """

    total_routings: int = 0
    fallback_routings: int = 0
    memory_hits: int = 0
    average_confidence: float = 0.0
    by_department: dict[str, int] = field(default_factory=dict)
    by_mode: dict[str, int] = field(default_factory=dict)

    @property
    def successful_routings(self) -> int:
        return self.total_routings - self.fallback_routings

    def record(self, plan: RoutingPlan) -> None:
        self.total_routings += 1
        if plan.source == SOURCE_FALLBACK:
            self.fallback_routings += 1
        elif plan.source == SOURCE_MEMORY:
            self.memory_hits += 1

        previous_total = self.average_confidence * (self.total_routings - 1)
        self.average_confidence = (previous_total + plan.confidence) / self.total_routings

        for department in plan.departments:
            self.by_department[department.value] = self.by_department.get(department.value, 0) + 1
        self.by_mode[plan.mode.value] = self.by_mode.get(plan.mode.value, 0) + 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_routings": self.total_routings,
            "successful_routings": self.successful_routings,
            "fallback_routings": self.fallback_routings,
            "memory_hits": self.memory_hits,
            "average_confidence": round(self.average_confidence, 3),
            "by_department": dict(self.by_department),
            "by_mode": dict(self.by_mode),
        }


# =============================================================================
# Router
# =============================================================================


class Router:
    """Routing service that turns task requests into RoutingPlans.

    Analyzer, resolver and builder are stateless and share one set of
    read-only tables. The statistics and the optional routing memory are
    the only mutable state; both are guarded by locks, so one Router can be
    shared across threads.

    Attributes:
        settings: The BumbaSettings in use.
        tables: Routing tables shared by all components.
        analyzer: IntentAnalyzer instance.
        resolver: SpecialistResolver instance.
        builder: RoutingStrategyBuilder instance.
        memory: RoutingMemory when learning is enabled, else None.

    Example:
        >>> router = Router()
        >>> plan = router.route("design", ["accessible dashboard ui"])
        >>> plan.departments
        (<Department.EXPERIENCE: 'experience'>,)
    """

    def __init__(
        self,
        tables: Optional[RoutingTables] = None,
        settings: Optional["BumbaSettings"] = None,
    ) -> None:
        """Initialize the router.

        Args:
            tables: Routing tables. Defaults to settings.routing.tables_dir
                when set, else the tables bundled with the package.
            settings: Settings instance. Defaults to get_settings().

        Raises:
            RoutingTableError: If the configured tables cannot be loaded.
        """
        self.settings = settings or get_settings()
        routing_settings = self.settings.routing

        if tables is None:
            if routing_settings.tables_dir is not None:
                tables = RoutingTables.from_directory(routing_settings.tables_dir)
            else:
                tables = load_default_tables()
        self.tables = tables

        self.analyzer = IntentAnalyzer(tables, routing_settings)
        self.resolver = SpecialistResolver(tables, routing_settings)
        self.builder = RoutingStrategyBuilder(tables, routing_settings, self.settings.models)
        self.memory: Optional[RoutingMemory] = (
            RoutingMemory(similarity_threshold=routing_settings.memory_similarity_threshold)
            if routing_settings.enable_learning
            else None
        )

        self._stats = RoutingStatistics()
        self._stats_lock = threading.Lock()

        logger.debug(
            "Router initialized with %d specialists, learning=%s",
            len(tables.capabilities),
            routing_settings.enable_learning,
        )

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def analyze(
        self,
        command: str,
        args: Optional[Sequence[str]] = None,
        context: ContextLike = None,
    ) -> Intent:
        """Analyze a request without resolving or planning."""
        return self.analyzer.analyze(command, args, context)

    def resolve(self, intent: Intent) -> list[RankedSpecialist]:
        """Rank specialists for an intent."""
        return self.resolver.resolve(intent)

    def build_plan(
        self,
        intent: Intent,
        specialists: Sequence[RankedSpecialist],
    ) -> RoutingPlan:
        """Build a plan from an intent and its ranked specialists."""
        return self.builder.build(intent, specialists)

    # -------------------------------------------------------------------------
    # Routing
    # -------------------------------------------------------------------------

    def route(
        self,
        command: str,
        args: Optional[Sequence[str]] = None,
        context: ContextLike = None,
    ) -> RoutingPlan:
        """Route a task request to a plan.

        Args:
            command: Command verb (e.g. "implement").
            args: Free-text description fragments.
            context: Optional RoutingContext or dict of hints.

        Returns:
            The RoutingPlan. source is "analysis", "memory" or "fallback".

        Raises:
            InvalidInputError: If an argument has the wrong type.
        """
        command, args, context = validate_request(command, args, context)
        task = " ".join([command, *args]).strip()

        # Hinted requests bypass memory, which is keyed on task text alone
        use_memory = self.memory is not None and not context.has_hints

        try:
            plan = self._recall(task) if use_memory else None
            if plan is None:
                intent = self.analyzer.analyze(command, args, context)
                plan = self.builder.build(intent, self.resolver.resolve(intent))
                if use_memory:
                    self.memory.remember(task, plan)
        except InvalidInputError:
            raise
        except Exception:
            logger.exception("Routing failed for task '%s'; using fallback plan", task)
            plan = self.fallback_plan(task)

        with self._stats_lock:
            self._stats.record(plan)
        return plan

    def _recall(self, task: str) -> Optional[RoutingPlan]:
        if self.memory is None:
            return None
        similar = self.memory.get_similar(task)
        if not similar or similar[0].similarity <= self.settings.routing.memory_reuse_threshold:
            return None
        logger.debug(
            "Reusing remembered plan for '%s' (similarity %.2f)",
            similar[0].task,
            similar[0].similarity,
        )
        return similar[0].plan.model_copy(update={"source": SOURCE_MEMORY})

    def fallback_plan(self, task: str = "") -> RoutingPlan:
        """Build the fail-open plan used when routing raises unexpectedly.

        Built directly from the schemas so it does not depend on the tables
        or on any routing stage.
        """
        department = Department.TECHNICAL
        intent = Intent(
            departments=(department,),
            confidence=FALLBACK_CONFIDENCE,
            description=task.lower(),
        )
        manager = AgentDescriptor(
            name=f"{department.value}-manager",
            role=AgentRole.MANAGER,
            model=self.settings.models.manager_model,
            using_claude_max=True,
        )
        return RoutingPlan(
            mode=ExecutionMode.SIMPLE,
            departments=(department,),
            execution=ExecutionPlan(agents=(manager,)),
            intent=intent,
            priority=int(round(FALLBACK_CONFIDENCE * 30 + 10)),
            recommendations=(f"Engage departments: {department.value}",),
            suggestions=("Routing analysis failed; rephrase the task or route it manually",),
            source=SOURCE_FALLBACK,
        )

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def get_statistics(self) -> RoutingStatistics:
        """Return a snapshot of the routing counters."""
        with self._stats_lock:
            return RoutingStatistics(
                total_routings=self._stats.total_routings,
                fallback_routings=self._stats.fallback_routings,
                memory_hits=self._stats.memory_hits,
                average_confidence=self._stats.average_confidence,
                by_department=dict(self._stats.by_department),
                by_mode=dict(self._stats.by_mode),
            )

    def reset_statistics(self) -> None:
        with self._stats_lock:
            self._stats = RoutingStatistics()


# =============================================================================
# Module-level Shortcuts
# =============================================================================

_default_router: Optional[Router] = None
_default_router_lock = threading.Lock()


def get_default_router() -> Router:
    """Get the shared Router, creating it from get_settings() on first use."""
    global _default_router
    with _default_router_lock:
        if _default_router is None:
            _default_router = Router()
        return _default_router


def reset_default_router() -> None:
    """Drop the shared Router so the next call rebuilds it from settings."""
    global _default_router
    with _default_router_lock:
        _default_router = None


def analyze_intent(
    command: str,
    args: Optional[Sequence[str]] = None,
    context: ContextLike = None,
) -> Intent:
    return get_default_router().analyze(command, args, context)


def resolve_specialists(intent: Intent) -> list[RankedSpecialist]:
    return get_default_router().resolve(intent)


def build_routing_plan(intent: Intent, specialists: Sequence[RankedSpecialist]) -> RoutingPlan:
    return get_default_router().build_plan(intent, specialists)


def route(
    command: str,
    args: Optional[Sequence[str]] = None,
    context: ContextLike = None,
) -> RoutingPlan:
    return get_default_router().route(command, args, context)


__all__ = [
    "Router",
    "RoutingStatistics",
    "FALLBACK_CONFIDENCE",
    "get_default_router",
    "reset_default_router",
    "analyze_intent",
    "resolve_specialists",
    "build_routing_plan",
    "route",
]
