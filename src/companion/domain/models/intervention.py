"""
Intervention Domain Model

Therapeutic activities offered during and after a session, and the
immutable catalog they are drawn from.

ARCHITECTURE: The catalog is reference data loaded once at process
start and injected into the selector. It is never mutated at runtime,
so sessions may share one instance.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional


GENERAL_WELLBEING: str = "general-wellbeing"
"""Focus area used when no rule fires and the profile has no goals."""


@dataclass(frozen=True)
class Intervention:
    """
    A concrete therapeutic activity or technique.

    Attributes:
        id: Stable identifier (keys effectiveness scores)
        category: Focus-area tag this entry belongs to
        title: Display title
        duration: Duration estimate (e.g. "5 min")
        content: Narrative instructions
        follow_up: Optional follow-up prompt
        activity_type: exercise, meditation, journaling, reading or technique
    """

    id: str
    category: str
    title: str
    duration: str
    content: str
    follow_up: Optional[str] = None
    activity_type: str = "technique"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category": self.category,
            "title": self.title,
            "duration": self.duration,
            "content": self.content,
            "follow_up": self.follow_up,
            "type": self.activity_type,
        }

    def to_suggestion(self) -> dict:
        """Short form used for session-start suggestions."""
        return {
            "id": self.id,
            "type": self.activity_type,
            "name": self.title,
            "duration": self.duration,
        }


class InterventionCatalog:
    """
    Immutable table of interventions keyed by focus-area tag.

    Entry order within a focus area is significant: it breaks
    selection ties.

    Usage:
        catalog = InterventionCatalog({"anxiety-management": [...]})
        candidates = catalog.for_focus("anxiety-management")
    """

    def __init__(self, entries: Mapping[str, Iterable[Intervention]]) -> None:
        table: dict[str, tuple[Intervention, ...]] = {}
        for focus, interventions in entries.items():
            items = tuple(interventions)
            for item in items:
                if item.category != focus:
                    raise ValueError(
                        f"Intervention {item.id} has category {item.category}, filed under {focus}"
                    )
            table[focus] = items
        self._entries = MappingProxyType(table)

    @property
    def focus_areas(self) -> tuple[str, ...]:
        """Catalogued focus areas in definition order."""
        return tuple(self._entries)

    def for_focus(self, focus_area: str) -> tuple[Intervention, ...]:
        """Interventions for one focus area (empty if none)."""
        return self._entries.get(focus_area, ())

    def all(self) -> Iterator[Intervention]:
        """Every intervention in catalog order."""
        for interventions in self._entries.values():
            yield from interventions

    def get(self, intervention_id: str) -> Optional[Intervention]:
        """Look up an intervention by ID."""
        for intervention in self.all():
            if intervention.id == intervention_id:
                return intervention
        return None

    def __len__(self) -> int:
        return sum(len(items) for items in self._entries.values())

    def __contains__(self, focus_area: object) -> bool:
        return focus_area in self._entries


@dataclass(frozen=True)
class HomeActivity:
    """Activity suggested for practice between sessions."""

    activity: Intervention
    instructions: str
    recommendation: str

    def to_dict(self) -> dict:
        return {
            "activity": {
                "id": self.activity.id,
                "name": self.activity.title,
                "type": self.activity.activity_type,
                "duration": self.activity.duration,
            },
            "instructions": self.instructions,
            "recommendation": self.recommendation,
        }
