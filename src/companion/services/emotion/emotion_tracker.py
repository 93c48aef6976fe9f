"""
Emotion Tracker

Maintains the emotional history of one session and summarizes
the journey when the session ends.

ARCHITECTURE: One tracker per session. The history is append-only
and owned exclusively by the tracker. Randomness is limited to the
baseline jitter and comes from an injected random source.
"""

import random
from datetime import datetime
from typing import Callable, Mapping, Optional, Union

from companion.config.logging_config import get_logger
from companion.domain.enums.emotion import EmotionDimension, JourneyTrend
from companion.domain.models.emotional_state import (
    EmotionalChange,
    EmotionalJourney,
    EmotionalState,
    NEUTRAL_SCORE,
    clamp_score,
    utc_now,
)

logger = get_logger(__name__)

DimensionKey = Union[EmotionDimension, str]


def _coerce_dimension(key: DimensionKey) -> EmotionDimension:
    """Map a key to a component dimension, rejecting unknown keys."""
    try:
        dimension = EmotionDimension(key)
    except ValueError:
        raise ValueError(f"Unknown emotional dimension: {key!r}") from None
    return dimension


class EmotionTracker:
    """
    Weighted emotional-state tracker.

    Each update blends the newly observed value with the previous one:

        new = 0.7 * observed + 0.3 * previous

    Dimensions not observed are carried over unchanged; the overall
    score is always recomputed as the mean of the four components.

    Usage:
        tracker = EmotionTracker(rng=random.Random(7))
        tracker.assess_baseline({"anxiety": 8})
        tracker.update({"anxiety": 6.0})
        journey = tracker.summarize_journey()
    """

    OBSERVED_WEIGHT: float = 0.7
    PREVIOUS_WEIGHT: float = 0.3

    OBSERVED_MIN: float = 0.0
    OBSERVED_MAX: float = 10.0

    # Overall delta beyond which the session counts as improved/declined
    TREND_THRESHOLD: float = 1.0
    # Per-dimension delta reported as a significant change
    CHANGE_THRESHOLD: float = 1.5

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        jitter: float = 1.0,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize tracker.

        Args:
            rng: Random source for baseline jitter
            jitter: Maximum absolute jitter applied to baseline overall
            clock: Timestamp source
        """
        if jitter < 0:
            raise ValueError(f"Jitter must be non-negative, got {jitter}")
        self._rng = rng or random.Random()
        self._jitter = jitter
        self._clock = clock
        self._history: list[EmotionalState] = []

    @property
    def history(self) -> tuple[EmotionalState, ...]:
        """Read-only view of the history, oldest first."""
        return tuple(self._history)

    @property
    def baseline(self) -> Optional[EmotionalState]:
        return self._history[0] if self._history else None

    def assess_baseline(
        self,
        seed_values: Optional[Mapping[DimensionKey, float]] = None,
    ) -> EmotionalState:
        """
        Produce and record the starting snapshot.

        Components start neutral and are overridden by any self-reported
        values. The overall score is their mean plus a bounded jitter
        emulating day-to-day variance. All scores are clamped to 1-10.

        Args:
            seed_values: Self-reported component scores

        Returns:
            Baseline snapshot (first history entry)

        Raises:
            RuntimeError: If a baseline was already recorded
        """
        if self._history:
            raise RuntimeError("Baseline already assessed for this session")

        components = {dim: NEUTRAL_SCORE for dim in EmotionDimension.components()}
        for key, value in (seed_values or {}).items():
            components[_coerce_dimension(key)] = clamp_score(value)

        mean = sum(components.values()) / len(components)
        offset = self._rng.uniform(-self._jitter, self._jitter) if self._jitter else 0.0

        baseline = EmotionalState(
            overall=clamp_score(mean + offset),
            anxiety=components[EmotionDimension.ANXIETY],
            depression=components[EmotionDimension.DEPRESSION],
            anger=components[EmotionDimension.ANGER],
            joy=components[EmotionDimension.JOY],
            timestamp=self._clock(),
        )
        self._history.append(baseline)

        logger.debug(
            "Baseline assessed",
            overall=round(baseline.overall, 2),
            seeded_dimensions=len(seed_values or {}),
        )
        return baseline

    def update(self, observed: Mapping[DimensionKey, float]) -> EmotionalState:
        """
        Blend observed values into a new snapshot and record it.

        Args:
            observed: Raw observed scores (0-10) for some dimensions

        Returns:
            The new snapshot

        Raises:
            ValueError: On unknown dimensions or out-of-range values
        """
        previous = self.current_state()
        components = previous.components()

        for key, raw in observed.items():
            dimension = _coerce_dimension(key)
            if not self.OBSERVED_MIN <= raw <= self.OBSERVED_MAX:
                raise ValueError(
                    f"Observed {dimension.value} must be "
                    f"{self.OBSERVED_MIN}-{self.OBSERVED_MAX}, got {raw}"
                )
            components[dimension] = (
                self.OBSERVED_WEIGHT * raw
                + self.PREVIOUS_WEIGHT * previous.get(dimension)
            )

        state = EmotionalState.from_components(components, timestamp=self._clock())
        self._history.append(state)
        return state

    def current_state(self) -> EmotionalState:
        """
        Latest snapshot (the baseline if no update occurred yet).

        A neutral snapshot is returned, unrecorded, before any baseline.
        """
        if not self._history:
            return EmotionalState(timestamp=self._clock())
        return self._history[-1]

    def summarize_journey(self) -> EmotionalJourney:
        """
        Compare the first and last snapshots.

        Returns:
            Neutral journey for fewer than two snapshots; otherwise the
            overall trend and the significant per-dimension changes.
        """
        if len(self._history) < 2:
            return EmotionalJourney(trend=JourneyTrend.NEUTRAL, changes=())

        first, last = self._history[0], self._history[-1]

        overall_delta = last.overall - first.overall
        if overall_delta > self.TREND_THRESHOLD:
            trend = JourneyTrend.IMPROVED
        elif overall_delta < -self.TREND_THRESHOLD:
            trend = JourneyTrend.DECLINED
        else:
            trend = JourneyTrend.NEUTRAL

        changes = []
        for dimension in EmotionDimension.components():
            delta = last.get(dimension) - first.get(dimension)
            if abs(delta) > self.CHANGE_THRESHOLD:
                changes.append(EmotionalChange(
                    dimension=dimension,
                    direction="increased" if delta > 0 else "decreased",
                    magnitude=abs(delta),
                ))

        return EmotionalJourney(trend=trend, changes=tuple(changes))
