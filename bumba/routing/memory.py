"""Routing memory: remember past plans and find them again for similar tasks.

Tasks are reduced to a key of their sorted, unique, lower-cased words, and
compared with Jaccard similarity (shared words / all words). Word order and
punctuation therefore do not matter:

    "build user api"  ->  "api-build-user"
    "API: build user" ->  "api-build-user"   (similarity 1.0)

The memory is only consulted when routing.enable_learning is set.
"""

from __future__ import annotations

import logging
import re
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone

from bumba.routing.schemas import RoutingPlan


logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"[^\w\s]")

DEFAULT_MAX_ENTRIES = 1000


def task_key(task: str) -> str:
    """Build the memory key for a task.

    Example:
        >>> task_key("Build the user API, then build tests")
        'api-build-tests-the-then-user'
    """
    words = _NON_WORD.sub("", task.lower()).split()
    return "-".join(sorted(set(words)))


def key_similarity(key1: str, key2: str) -> float:
    """Jaccard similarity between two task keys."""
    words1 = set(key1.split("-")) - {""}
    words2 = set(key2.split("-")) - {""}
    union = words1 | words2
    if not union:
        return 0.0
    return len(words1 & words2) / len(union)


@dataclass
class RememberedRouting:
    """A stored plan and how closely it matched a lookup.

    Attributes:
        task: The task text as it was routed.
        key: Memory key derived from the task.
        plan: The plan that was produced.
        timestamp: When the plan was stored (UTC).
        similarity: Similarity to the lookup task; 1.0 when stored.
    """

    task: str
    key: str
    plan: RoutingPlan
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    similarity: float = 1.0


class RoutingMemory:
    """Thread-safe store of past routing plans.

    Entries are keyed by task key, so re-routing an equivalent task replaces
    the earlier plan. Once max_entries is reached the oldest entry is dropped.

    Attributes:
        similarity_threshold: Lookups return entries strictly above this value.
        max_entries: Upper bound on stored plans.

    Example:
        ```python
        memory = RoutingMemory()
        memory.remember("implement user authentication", plan)
        best = memory.get_similar("implement authentication for user")[0]
        assert best.similarity == 1.0
        ```
    """

    def __init__(
        self,
        similarity_threshold: float = 0.7,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self.similarity_threshold = similarity_threshold
        self.max_entries = max_entries
        self._entries: OrderedDict[str, RememberedRouting] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def remember(self, task: str, plan: RoutingPlan) -> None:
        """Store the plan produced for a task."""
        key = task_key(task)
        if not key:
            return
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = RememberedRouting(task=task, key=key, plan=plan)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
        logger.debug("Remembered routing for key '%s'", key)

    def get_similar(self, task: str) -> list[RememberedRouting]:
        """Return remembered routings similar to a task, most similar first."""
        key = task_key(task)
        if not key:
            return []
        with self._lock:
            entries = list(self._entries.values())

        similar = []
        for entry in entries:
            similarity = key_similarity(key, entry.key)
            if similarity > self.similarity_threshold:
                similar.append(RememberedRouting(
                    task=entry.task,
                    key=entry.key,
                    plan=entry.plan,
                    timestamp=entry.timestamp,
                    similarity=similarity,
                ))
        similar.sort(key=lambda e: e.similarity, reverse=True)
        return similar

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


__all__ = [
    "RoutingMemory",
    "RememberedRouting",
    "task_key",
    "key_similarity",
]
