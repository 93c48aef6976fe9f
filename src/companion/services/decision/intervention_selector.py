"""
Intervention Selector

Chooses focus areas and therapeutic interventions for a turn.

ARCHITECTURE: Rule-based focus selection, then effectiveness-weighted
intervention selection with a per-session cool-down. The catalog is
injected, read-only reference data; randomness comes from an injected
random source so tests can force determinism.

CLINICAL_REVIEW_REQUIRED: Thresholds and focus-area rules need
clinical validation.
"""

import random
from typing import Callable, Iterable, Mapping, Optional, Sequence

from companion.config.logging_config import get_logger
from companion.domain.enums.emotion import JourneyTrend
from companion.domain.errors import CatalogExhausted
from companion.domain.models.emotional_state import EmotionalState
from companion.domain.models.intervention import (
    GENERAL_WELLBEING,
    HomeActivity,
    Intervention,
    InterventionCatalog,
)
from companion.domain.models.user import UserProfile

logger = get_logger(__name__)


class InterventionSelector:
    """
    Focus-area and intervention selection.

    Focus rules (accumulating, in order):
    1. anxiety > 6 -> anxiety-management
    2. depression > 5 -> mood-improvement
    3. Nothing fired -> first profile goal (or general-wellbeing)

    Intervention rules:
    - Candidates come from the catalog for each focus area, in order
    - Interventions offered in the last N turns are cooling down
    - Remaining candidates are drawn with probability proportional to
      the profile's effectiveness score (0.5 when unknown)
    - If everything is cooling down, the highest-weighted candidate wins
    """

    ANXIETY_THRESHOLD: float = 6.0
    DEPRESSION_THRESHOLD: float = 5.0
    DEFAULT_WEIGHT: float = 0.5
    MAX_SUGGESTIONS: int = 3

    def __init__(
        self,
        catalog: InterventionCatalog,
        rng: Optional[random.Random] = None,
        cooldown_turns: int = 3,
        focus_history_window: int = 3,
    ) -> None:
        """
        Initialize selector.

        Args:
            catalog: Intervention reference data
            rng: Random source for weighted selection
            cooldown_turns: Turns before an intervention may repeat
            focus_history_window: Recent focus areas avoided when alternatives exist
        """
        if cooldown_turns < 0:
            raise ValueError(f"cooldown_turns must be >= 0, got {cooldown_turns}")
        if focus_history_window < 1:
            raise ValueError(f"focus_history_window must be >= 1, got {focus_history_window}")
        self._catalog = catalog
        self._rng = rng or random.Random()
        self._cooldown_turns = cooldown_turns
        self._window = focus_history_window

    @property
    def catalog(self) -> InterventionCatalog:
        return self._catalog

    def select_focus_areas(
        self,
        profile: UserProfile,
        state: EmotionalState,
        recent_focus: Sequence[str] = (),
    ) -> tuple[str, ...]:
        """
        Choose focus areas for the current state.

        Areas assigned within the recent window are skipped when another
        viable area remains, so the same area is not repeated back-to-back
        unless it is the only option.

        Returns:
            Non-empty ordered focus-area tags
        """
        window = set(list(recent_focus)[-self._window:])

        candidates: list[str] = []
        if state.anxiety > self.ANXIETY_THRESHOLD:
            candidates.append("anxiety-management")
        if state.depression > self.DEPRESSION_THRESHOLD:
            candidates.append("mood-improvement")

        if candidates:
            fresh = [area for area in candidates if area not in window]
            return tuple(fresh or candidates)

        goals = profile.therapeutic_goals or (GENERAL_WELLBEING,)
        for goal in goals:
            if goal not in window:
                return (goal,)
        return (goals[0],)

    def select_intervention(
        self,
        focus_areas: Sequence[str],
        profile: UserProfile,
        effectiveness: Optional[Mapping[str, float]] = None,
        recent_interventions: Sequence[str] = (),
    ) -> Intervention:
        """
        Choose an intervention for the focus areas.

        The cool-down counts offered interventions, not turns: the last
        `cooldown_turns` IDs in `recent_interventions` are skipped. Safety
        and informational turns offer nothing, so they neither start nor
        shorten a cool-down.

        Args:
            focus_areas: Focus areas for this turn
            profile: User profile
            effectiveness: Intervention ID -> score (defaults to the profile's)
            recent_interventions: IDs offered earlier in the session, oldest first

        Returns:
            Selected intervention

        Raises:
            CatalogExhausted: If no focus area has catalogued interventions
        """
        scores = profile.intervention_effectiveness if effectiveness is None else effectiveness
        candidates = self._candidates(focus_areas)
        if not candidates:
            raise CatalogExhausted(focus_areas)

        def weight(intervention: Intervention) -> float:
            return max(0.0, scores.get(intervention.id, self.DEFAULT_WEIGHT))

        cooling = (
            set(list(recent_interventions)[-self._cooldown_turns:])
            if self._cooldown_turns
            else set()
        )
        available = [c for c in candidates if c.id not in cooling]

        if not available:
            # Cool-down relaxed; max() keeps the first of equal weights
            selected = max(candidates, key=weight)
            logger.debug(
                "All candidates cooling down, relaxing cool-down",
                intervention_id=selected.id,
                candidate_count=len(candidates),
            )
            return selected

        return self._weighted_choice(available, weight)

    def suggest_activities(
        self,
        focus_areas: Sequence[str],
        limit: int = MAX_SUGGESTIONS,
    ) -> tuple[Intervention, ...]:
        """Session-start suggestions: catalog entries for the focus areas."""
        return tuple(self._candidates(focus_areas)[:limit])

    def suggest_home_activity(
        self,
        profile: UserProfile,
        focus_areas: Sequence[str],
        trend: JourneyTrend,
    ) -> HomeActivity:
        """
        Suggest an activity to practice before the next session.

        Prefers the profile's preferred activity type among the focus
        areas' entries; otherwise any type. Among equals, the highest
        effectiveness score wins (catalog order breaks ties).

        Raises:
            CatalogExhausted: If the catalog is empty
        """
        pool = self._candidates(focus_areas) or list(self._catalog.all())
        if not pool:
            raise CatalogExhausted(focus_areas)

        preferred = [c for c in pool if c.activity_type == profile.preferred_activity_type]
        activity = max(
            preferred or pool,
            key=lambda c: profile.effectiveness_of(c.id, self.DEFAULT_WEIGHT),
        )

        return HomeActivity(
            activity=activity,
            instructions=f"{activity.content} Set aside about {activity.duration} for this.",
            recommendation=self.practice_recommendation(activity, trend),
        )

    def _candidates(self, focus_areas: Iterable[str]) -> list[Intervention]:
        """Catalog entries for the focus areas, deduplicated, in order."""
        seen: set[str] = set()
        candidates = []
        for area in focus_areas:
            for intervention in self._catalog.for_focus(area):
                if intervention.id not in seen:
                    seen.add(intervention.id)
                    candidates.append(intervention)
        return candidates

    def _weighted_choice(
        self,
        candidates: list[Intervention],
        weight: Callable[[Intervention], float],
    ) -> Intervention:
        """Roulette selection walking candidates in catalog order."""
        weights = [weight(c) for c in candidates]
        total = sum(weights)
        if total <= 0:
            return candidates[0]

        threshold = self._rng.random() * total
        cumulative = 0.0
        for candidate, w in zip(candidates, weights):
            cumulative += w
            if threshold < cumulative:
                return candidate
        return candidates[-1]

    @staticmethod
    def practice_recommendation(activity: Intervention, trend: JourneyTrend) -> str:
        """How often to practice an activity, phrased for the session trend."""
        if trend == JourneyTrend.IMPROVED:
            return (
                f"You made real progress today. Practicing \"{activity.title}\" "
                "three times this week will help you keep that momentum."
            )
        if trend == JourneyTrend.DECLINED:
            return (
                f"Today was a hard session. Try \"{activity.title}\" once a day, "
                "and reach out to someone you trust or a support line if things "
                "feel heavier."
            )
        return (
            f"Try \"{activity.title}\" a few times before our next session and "
            "notice how you feel afterwards."
        )
