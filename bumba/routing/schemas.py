"""Value objects for the BUMBA routing core.

Every routing call builds these once and hands them on; none of them is
mutated afterwards, so all models are frozen.

Classes:
    PrimaryIntent: What the task asks for (build, analyze, design, ...)
    Department: Top-level functional grouping that owns a task
    ExecutionMode: Quantized complexity of a routing plan
    AgentRole: Manager or specialist
    TaskType: Specialist task type used for model tiering
    RoutingContext: Optional hints supplied by the caller
    PatternMatch: A named multi-keyword pattern found in a task
    Intent: Structured interpretation of one task request
    RankedSpecialist: Specialist id with a resolution confidence
    AgentDescriptor: One agent of an execution plan
    ExecutionPlan: Ordered agents handed to the execution layer
    RoutingPlan: The finished routing decision

Constants:
    DEPARTMENT_ORDER: Fixed multi-department ordering
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Enumerations
# =============================================================================


class PrimaryIntent(str, Enum):
    """Primary intent of a task request.

    OTHER covers requests with no recognised verb, including small fixes.
    """

    BUILD = "build"
    ANALYZE = "analyze"
    DESIGN = "design"
    TEST = "test"
    DOCUMENT = "document"
    PLAN = "plan"
    SECURE = "secure"
    OPTIMIZE = "optimize"
    RESEARCH = "research"
    OTHER = "other"


class Department(str, Enum):
    """Department that can own a task.

    Attributes:
        STRATEGIC: Product, business and market work
        EXPERIENCE: Design, UI/UX and frontend work
        TECHNICAL: Backend, infrastructure, security and data work
    """

    STRATEGIC = "strategic"
    EXPERIENCE = "experience"
    TECHNICAL = "technical"


# Order used whenever several departments match the same task
DEPARTMENT_ORDER: tuple[Department, ...] = (
    Department.TECHNICAL,
    Department.EXPERIENCE,
    Department.STRATEGIC,
)


class ExecutionMode(str, Enum):
    """How much orchestration a routing plan needs."""

    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"
    EXECUTIVE = "executive"


class AgentRole(str, Enum):
    MANAGER = "manager"
    SPECIALIST = "specialist"


class TaskType(str, Enum):
    """Specialist task type, used to pick a model tier."""

    REASONING = "reasoning"
    CODING = "coding"
    GENERAL = "general"


# =============================================================================
# Input Context
# =============================================================================


class RoutingContext(BaseModel):
    """Optional hints that accompany a routing request.

    Every field the analyzer reads is listed here; unknown keys in a plain
    dict context are ignored.

    Attributes:
        department_hints: Departments to use when no department keyword matches.
        language_hint: Language to report when none is named in the task.
        specialist_hints: Specialists to add after the keyword-triggered ones.

    Example:
        ```python
        context = RoutingContext(language_hint="python")
        intent = analyzer.analyze("implement", ["a csv importer"], context)
        ```
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    department_hints: tuple[Department, ...] = Field(default_factory=tuple)
    language_hint: Optional[str] = None
    specialist_hints: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("language_hint")
    @classmethod
    def normalize_language(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        normalized = v.strip().lower()
        return normalized or None

    @field_validator("specialist_hints")
    @classmethod
    def normalize_specialists(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(s.strip().lower() for s in v if s and s.strip())

    @property
    def has_hints(self) -> bool:
        return bool(self.department_hints or self.language_hint or self.specialist_hints)


# =============================================================================
# Intent
# =============================================================================


class PatternMatch(BaseModel):
    """A named pattern found in a task description.

    Attributes:
        name: Pattern name (e.g. 'api-development')
        keywords: The keyword that satisfied each required group, in group order
        trigger: Substring of the description spanning the matched keywords
    """

    model_config = ConfigDict(frozen=True)

    name: str
    keywords: tuple[str, ...] = Field(default_factory=tuple)
    trigger: str = ""


class Intent(BaseModel):
    """Structured interpretation of one task request.

    Complexity and confidence are computed independently: a one-line fix in
    an enterprise codebase can be low on both.

    Attributes:
        primary_intent: What the task asks for.
        departments: Departments that plausibly own the task, in the fixed
            technical, experience, strategic order.
        specialists: Specialists suggested directly by keyword triggers.
        complexity: How multi-faceted the task is (0.0-1.0).
        is_executive_level: Whether the task needs executive handling.
        explicit_language: Programming language named in the task, if any.
        patterns: Named patterns found in the task.
        confidence: How certain the classification is (0.0-1.0).
        description: Normalized task description the intent was computed from.
    """

    model_config = ConfigDict(frozen=True)

    primary_intent: PrimaryIntent = PrimaryIntent.OTHER
    departments: tuple[Department, ...] = Field(default_factory=tuple)
    specialists: tuple[str, ...] = Field(default_factory=tuple)
    complexity: float = Field(default=0.0, ge=0.0, le=1.0)
    is_executive_level: bool = False
    explicit_language: Optional[str] = None
    patterns: tuple[PatternMatch, ...] = Field(default_factory=tuple)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    description: str = ""

    @property
    def pattern_names(self) -> list[str]:
        return [p.name for p in self.patterns]


# =============================================================================
# Resolution and Plan
# =============================================================================


class RankedSpecialist(BaseModel):
    """A resolved specialist and how strongly the task calls for it."""

    model_config = ConfigDict(frozen=True)

    id: str
    confidence: float = Field(ge=0.0, le=1.0)


class AgentDescriptor(BaseModel):
    """One agent the execution layer should spawn.

    Attributes:
        name: '<department>-manager' for managers, the specialist id otherwise.
        role: Manager or specialist.
        model: Model identifier assigned to the agent.
        using_claude_max: Whether the agent runs on the premium tier.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    role: AgentRole
    model: str
    using_claude_max: bool = False


class ExecutionPlan(BaseModel):
    """Agents to spawn, managers first."""

    model_config = ConfigDict(frozen=True)

    agents: tuple[AgentDescriptor, ...] = Field(default_factory=tuple)

    @property
    def managers(self) -> list[AgentDescriptor]:
        return [a for a in self.agents if a.role == AgentRole.MANAGER]

    @property
    def specialists(self) -> list[AgentDescriptor]:
        return [a for a in self.agents if a.role == AgentRole.SPECIALIST]


class RoutingPlan(BaseModel):
    """The finished routing decision for one task.

    Attributes:
        mode: Execution mode derived from complexity.
        departments: Departments carried over from the intent.
        specialists: Resolved specialists, highest confidence first.
        execution: Agents for the execution layer.
        intent: The intent the plan was built from.
        priority: Scheduling priority (0-100).
        recommendations: Human-readable routing notes.
        suggestions: Hints for improving a low-confidence request.
        source: 'analysis', 'memory' or 'fallback'.

    Example:
        ```python
        plan = router.route("analyze", ["security vulnerabilities in payment API"])
        print(plan.mode, plan.pattern_names)
        for agent in plan.execution.agents:
            print(agent.name, agent.model)
        ```
    """

    model_config = ConfigDict(frozen=True)

    mode: ExecutionMode
    departments: tuple[Department, ...]
    specialists: tuple[RankedSpecialist, ...] = Field(default_factory=tuple)
    execution: ExecutionPlan = Field(default_factory=ExecutionPlan)
    intent: Intent = Field(default_factory=Intent)
    priority: int = Field(default=0, ge=0, le=100)
    recommendations: tuple[str, ...] = Field(default_factory=tuple)
    suggestions: tuple[str, ...] = Field(default_factory=tuple)
    source: str = "analysis"

    @property
    def primary_intent(self) -> PrimaryIntent:
        return self.intent.primary_intent

    @property
    def complexity(self) -> float:
        return self.intent.complexity

    @property
    def confidence(self) -> float:
        return self.intent.confidence

    @property
    def is_executive_level(self) -> bool:
        return self.intent.is_executive_level

    @property
    def explicit_language(self) -> Optional[str]:
        return self.intent.explicit_language

    @property
    def patterns(self) -> tuple[PatternMatch, ...]:
        return self.intent.patterns

    @property
    def pattern_names(self) -> list[str]:
        return self.intent.pattern_names

    @property
    def specialist_ids(self) -> list[str]:
        return [s.id for s in self.specialists]

    def get_specialist(self, specialist_id: str) -> Optional[RankedSpecialist]:
        """Return the ranked entry for a specialist, or None."""
        for specialist in self.specialists:
            if specialist.id == specialist_id:
                return specialist
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert the plan to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")


__all__ = [
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
