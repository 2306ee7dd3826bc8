"""Specialist resolution.

Scores every specialist in the capability table against an Intent and
returns a ranked list. Specialists the analyzer already named via keyword
triggers keep a high floor; everything else must earn a place through
keyword overlap.
"""

from __future__ import annotations

import logging
from typing import Optional

from bumba.config.settings import RoutingSettings
from bumba.routing.schemas import Intent, RankedSpecialist
from bumba.routing.tables import KeywordMatcher, RoutingTables


logger = logging.getLogger(__name__)


class SpecialistResolver:
    """Rank specialists for an Intent.

    Scoring:
        overlap = matched keywords / keywords declared for the specialist

        A specialist suggested by the intent scores
        max(specialist_confidence_floor, overlap). Other specialists need a
        non-zero overlap to be listed. Suggested ids missing from the
        capability table keep the floor and rank after table entries with
        the same score.

    Ordering is by descending confidence, then table declaration order, so
    resolving the same intent twice gives the same list.
    """

    def __init__(self, tables: RoutingTables, settings: Optional[RoutingSettings] = None) -> None:
        self.tables = tables
        self.settings = settings or RoutingSettings()

    def resolve(self, intent: Intent) -> list[RankedSpecialist]:
        floor = self.settings.specialist_confidence_floor
        suggested = list(dict.fromkeys(intent.specialists))
        scored: list[tuple[float, int, str]] = []

        for order, (specialist_id, matcher) in enumerate(self.tables.capability_matchers.items()):
            overlap = self.keyword_overlap(specialist_id, intent.description, matcher)
            if specialist_id in suggested:
                score = max(floor, overlap)
            elif overlap > 0.0:
                score = overlap
            else:
                continue
            scored.append((score, order, specialist_id))

        # Unknown ids sort after every table entry with an equal score
        offset = len(self.tables.capabilities)
        for position, specialist_id in enumerate(suggested):
            if self.tables.capability_order(specialist_id) is None:
                logger.debug("Specialist '%s' is not in the capability table", specialist_id)
                scored.append((floor, offset + position, specialist_id))

        scored.sort(key=lambda entry: (-entry[0], entry[1]))
        ranked = [
            RankedSpecialist(id=specialist_id, confidence=round(score, 3))
            for score, _, specialist_id in scored
        ]

        logger.debug(
            "Resolved specialists: %s",
            [(r.id, r.confidence) for r in ranked],
        )
        return ranked

    def keyword_overlap(
        self,
        specialist_id: str,
        description: str,
        matcher: Optional[KeywordMatcher] = None,
    ) -> float:
        """Fraction of a specialist's keywords present in the description."""
        matcher = matcher or self.tables.capability_matchers.get(specialist_id)
        if matcher is None or not len(matcher) or not description:
            return 0.0
        return len(matcher.matched_keywords(description)) / len(matcher)


__all__ = ["SpecialistResolver"]
