"""
Unit Tests for Emotion Tracker

Tests baseline assessment, weighted updates and journey summaries.
"""

import random

import pytest

from companion.domain.enums.emotion import EmotionDimension, JourneyTrend
from companion.services.emotion.emotion_tracker import EmotionTracker


ALL_SEVEN = {"anxiety": 7, "depression": 7, "anger": 7, "joy": 7}
# 0.7 * x + 0.3 * 7 == 4
DECLINE_TO_FOUR = {dim: 19 / 7 for dim in ALL_SEVEN}


class TestBaseline:
    """Test baseline assessment."""

    @pytest.fixture
    def tracker(self) -> EmotionTracker:
        return EmotionTracker(rng=random.Random(3), jitter=0.0)

    def test_neutral_without_seeds(self, tracker: EmotionTracker) -> None:
        baseline = tracker.assess_baseline()
        assert baseline.components() == {dim: 5.0 for dim in EmotionDimension.components()}
        assert baseline.overall == pytest.approx(5.0)

    def test_seeds_override_neutral(self, tracker: EmotionTracker) -> None:
        baseline = tracker.assess_baseline({"anxiety": 8})
        assert baseline.anxiety == 8
        assert baseline.depression == 5
        assert baseline.overall == pytest.approx((8 + 5 + 5 + 5) / 4)

    def test_seeds_clamped(self, tracker: EmotionTracker) -> None:
        baseline = tracker.assess_baseline({"anxiety": 14, "joy": -2})
        assert baseline.anxiety == 10
        assert baseline.joy == 1

    def test_baseline_is_first_history_entry(self, tracker: EmotionTracker) -> None:
        baseline = tracker.assess_baseline()
        assert tracker.history == (baseline,)
        assert tracker.baseline is baseline

    def test_second_assessment_rejected(self, tracker: EmotionTracker) -> None:
        tracker.assess_baseline()
        with pytest.raises(RuntimeError):
            tracker.assess_baseline()

    def test_unknown_seed_dimension_rejected(self, tracker: EmotionTracker) -> None:
        with pytest.raises(ValueError):
            tracker.assess_baseline({"boredom": 4})

    def test_jitter_bounded(self) -> None:
        for seed in range(25):
            tracker = EmotionTracker(rng=random.Random(seed), jitter=1.0)
            baseline = tracker.assess_baseline({"anxiety": 6})
            mean = (6 + 5 + 5 + 5) / 4
            assert mean - 1.0 <= baseline.overall <= mean + 1.0

    def test_jitter_seeded_is_reproducible(self) -> None:
        first = EmotionTracker(rng=random.Random(11)).assess_baseline()
        second = EmotionTracker(rng=random.Random(11)).assess_baseline()
        assert first.overall == second.overall


class TestUpdate:
    """Test weighted update rule."""

    @pytest.fixture
    def tracker(self) -> EmotionTracker:
        tracker = EmotionTracker(rng=random.Random(0), jitter=0.0)
        tracker.assess_baseline()
        return tracker

    def test_weighted_blend(self, tracker: EmotionTracker) -> None:
        state = tracker.update({"anxiety": 9})
        assert state.anxiety == pytest.approx(0.7 * 9 + 0.3 * 5)

    def test_unobserved_dimensions_carried(self, tracker: EmotionTracker) -> None:
        state = tracker.update({EmotionDimension.ANGER: 8})
        assert state.anxiety == 5
        assert state.depression == 5
        assert state.joy == 5

    def test_overall_is_mean_of_components(self, tracker: EmotionTracker) -> None:
        state = tracker.update({"anxiety": 9, "joy": 2})
        assert state.overall == pytest.approx(
            (state.anxiety + state.depression + state.anger + state.joy) / 4,
            abs=1e-9,
        )

    def test_update_appends_history(self, tracker: EmotionTracker) -> None:
        tracker.update({})
        tracker.update({"joy": 7})
        assert len(tracker.history) == 3
        assert tracker.current_state() is tracker.history[-1]

    def test_out_of_range_rejected(self, tracker: EmotionTracker) -> None:
        with pytest.raises(ValueError):
            tracker.update({"anxiety": 11})
        with pytest.raises(ValueError):
            tracker.update({"joy": -0.5})
        assert len(tracker.history) == 1

    def test_overall_key_rejected(self, tracker: EmotionTracker) -> None:
        with pytest.raises(ValueError):
            tracker.update({"overall": 5})

    def test_bounds_and_mean_hold_for_valid_inputs(self) -> None:
        rng = random.Random(1234)
        tracker = EmotionTracker(rng=random.Random(0), jitter=0.0)
        tracker.assess_baseline()
        for _ in range(200):
            observed = {
                dim: rng.uniform(0.0, 10.0)
                for dim in EmotionDimension.components()
                if rng.random() < 0.6
            }
            state = tracker.update(observed)
            components = state.components().values()
            assert all(1.0 <= value <= 10.0 for value in components)
            assert state.overall == pytest.approx(sum(components) / 4, abs=1e-9)

    def test_extremes_clamped(self, tracker: EmotionTracker) -> None:
        state = tracker.update({dim: 0.0 for dim in EmotionDimension.components()})
        state = tracker.update({dim: 0.0 for dim in EmotionDimension.components()})
        assert state.anxiety >= 1.0
        assert state.overall >= 1.0

    def test_current_state_before_baseline_not_recorded(self) -> None:
        tracker = EmotionTracker()
        state = tracker.current_state()
        assert state.overall == 5.0
        assert tracker.history == ()


class TestJourney:
    """Test journey summarization."""

    def test_single_entry_is_neutral(self) -> None:
        tracker = EmotionTracker(jitter=0.0)
        tracker.assess_baseline({"anxiety": 9})
        journey = tracker.summarize_journey()
        assert journey.trend == JourneyTrend.NEUTRAL
        assert journey.changes == ()

    def test_empty_history_is_neutral(self) -> None:
        assert EmotionTracker().summarize_journey().trend == JourneyTrend.NEUTRAL

    def test_declined(self) -> None:
        tracker = EmotionTracker(jitter=0.0)
        tracker.assess_baseline(ALL_SEVEN)
        last = tracker.update(DECLINE_TO_FOUR)
        assert last.overall == pytest.approx(4.0)

        journey = tracker.summarize_journey()
        assert journey.trend == JourneyTrend.DECLINED
        assert [c.dimension for c in journey.changes] == list(EmotionDimension.components())
        assert all(c.direction == "decreased" for c in journey.changes)
        assert journey.changes[0].magnitude == pytest.approx(3.0)

    def test_improved(self) -> None:
        tracker = EmotionTracker(jitter=0.0)
        tracker.assess_baseline({dim: 3 for dim in ALL_SEVEN})
        tracker.update({dim: 8 for dim in ALL_SEVEN})
        assert tracker.summarize_journey().trend == JourneyTrend.IMPROVED

    def test_small_changes_not_reported(self) -> None:
        tracker = EmotionTracker(jitter=0.0)
        tracker.assess_baseline()
        tracker.update({"anxiety": 7})  # 5 -> 6.4
        journey = tracker.summarize_journey()
        assert journey.trend == JourneyTrend.NEUTRAL
        assert journey.changes == ()

    def test_only_first_and_last_compared(self) -> None:
        tracker = EmotionTracker(jitter=0.0)
        tracker.assess_baseline()
        tracker.update({"anger": 10})
        tracker.update({"anger": 1.5})
        tracker.update({"anger": 5})
        journey = tracker.summarize_journey()
        assert all(c.dimension != EmotionDimension.ANGER for c in journey.changes)
