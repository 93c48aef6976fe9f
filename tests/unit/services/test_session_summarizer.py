"""
Unit Tests for Session Summarizer

Tests urgency, next-session scheduling and summary construction.
"""

from datetime import date, datetime, timezone

import pytest

from companion.domain.enums.emotion import EmotionDimension, JourneyTrend
from companion.domain.enums.safety_tier import RiskCategory, SafetyTier
from companion.domain.models.emotional_state import (
    EmotionalChange,
    EmotionalJourney,
    EmotionalState,
)
from companion.domain.models.intervention import GENERAL_WELLBEING, InterventionCatalog
from companion.domain.models.responses import (
    InformationalResponse,
    InterventionResponse,
    SafetyResponse,
)
from companion.domain.models.session import SessionRecord, SessionTurn
from companion.domain.models.user import UserProfile
from companion.services.decision import InterventionSelector
from companion.services.orchestration import (
    SessionSummarizer,
    compute_urgency,
    recommend_days,
    recommend_focus,
    recommend_next_session,
)
from companion.services.orchestration.session_summarizer import SELF_CHECK_IN


ENDED_AT = datetime(2026, 3, 2, 10, 15, tzinfo=timezone.utc)


class TestUrgency:
    """Test follow-up urgency."""

    def test_declined_low_wellbeing(self) -> None:
        assert compute_urgency(4.0, JourneyTrend.DECLINED) == pytest.approx(0.6)

    def test_steady_high_wellbeing(self) -> None:
        assert compute_urgency(10.0, JourneyTrend.IMPROVED) == pytest.approx(0.12)

    def test_neutral_uses_steady_factor(self) -> None:
        assert compute_urgency(1.0, JourneyTrend.NEUTRAL) == pytest.approx(0.75)


class TestRecommendDays:
    """Test next-session interval."""

    @pytest.mark.parametrize(
        "interval,urgency,trend,expected",
        [
            (7, 0.8, JourneyTrend.NEUTRAL, 3),
            (7, 0.2, JourneyTrend.NEUTRAL, 9),
            (7, 0.5, JourneyTrend.NEUTRAL, 7),
            (7, 0.7, JourneyTrend.NEUTRAL, 7),
            (7, 0.3, JourneyTrend.IMPROVED, 7),
            (7, 0.5, JourneyTrend.DECLINED, 3),
            (7, 0.2, JourneyTrend.DECLINED, 3),
            (1, 0.9, JourneyTrend.NEUTRAL, 1),
            (1, 0.5, JourneyTrend.DECLINED, 1),
        ],
    )
    def test_days(self, interval: int, urgency: float, trend: JourneyTrend, expected: int) -> None:
        assert recommend_days(interval, urgency, trend) == expected


class TestRecommendFocus:
    """Test next-session focus."""

    def test_skips_recent_goals(self, profile: UserProfile) -> None:
        recent = ["anxiety-management", "stress-reduction"]
        assert recommend_focus(profile, recent) == "sleep-improvement"

    def test_only_recent_window_counts(self, profile: UserProfile) -> None:
        recent = ["stress-reduction", "mood-improvement", "anxiety-management", "self-esteem"]
        assert recommend_focus(profile, recent) == "stress-reduction"

    def test_all_goals_recent_falls_back_to_first(self, profile: UserProfile) -> None:
        recent = ["stress-reduction", "sleep-improvement"]
        assert recommend_focus(profile, recent) == "stress-reduction"

    def test_window_counts_distinct_areas(self, profile: UserProfile) -> None:
        recent = [
            "stress-reduction",
            "anxiety-management",
            "mood-improvement",
            "anxiety-management",
            "mood-improvement",
        ]
        assert recommend_focus(profile, recent) == "sleep-improvement"

    def test_no_goals(self) -> None:
        assert recommend_focus(UserProfile(), []) == GENERAL_WELLBEING

    def test_recommendation_date(self, profile: UserProfile) -> None:
        recommendation = recommend_next_session(
            profile,
            EmotionalState(overall=4.0),
            JourneyTrend.DECLINED,
            [],
            date(2026, 3, 2),
        )
        assert recommendation.recommended_days == 3
        assert recommendation.recommended_date == date(2026, 3, 5)
        assert recommendation.recommended_focus == "stress-reduction"
        assert recommendation.urgency == pytest.approx(0.6)


class TestSessionSummarizer:
    """Test summary construction from a session record."""

    @pytest.fixture
    def summarizer(self, catalog: InterventionCatalog) -> SessionSummarizer:
        return SessionSummarizer(InterventionSelector(catalog))

    @pytest.fixture
    def record(self, catalog: InterventionCatalog) -> SessionRecord:
        """Intervention, safety, intervention and informational turns."""
        breathing = catalog.get("breathing-exercise")
        body_scan = catalog.get("body-scan")
        record = SessionRecord(baseline=EmotionalState(overall=5.0))

        record.add_turn(SessionTurn(
            user_text="work has been stressful and I'm anxious",
            response=InterventionResponse(
                introduction="intro",
                intervention=breathing,
                focus_areas=("anxiety-management",),
            ),
            state=EmotionalState(overall=5.0),
            focus_areas=("anxiety-management",),
            intervention_id=breathing.id,
            themes=("work",),
        ))
        record.add_turn(SessionTurn(
            user_text="sometimes I want to hurt myself",
            response=SafetyResponse(
                tier=SafetyTier.WARNING,
                category=RiskCategory.SELF_HARM,
                message="support",
                resources=(),
            ),
            state=EmotionalState(overall=5.0),
        ))
        record.add_turn(SessionTurn(
            user_text="that helped a bit",
            response=InterventionResponse(
                introduction="intro",
                intervention=body_scan,
                focus_areas=("stress-reduction",),
            ),
            state=EmotionalState(overall=6.0),
            focus_areas=("stress-reduction",),
            intervention_id=body_scan.id,
        ))
        record.add_turn(SessionTurn(
            user_text="not sure about that one",
            response=InformationalResponse(message="ok", focus_areas=("stress-reduction",)),
            state=EmotionalState(overall=5.2),
            focus_areas=("stress-reduction",),
        ))
        return record

    def test_themes_in_first_use_order(
        self,
        summarizer: SessionSummarizer,
        record: SessionRecord,
        profile: UserProfile,
    ) -> None:
        summary = summarizer.summarize(
            record, EmotionalJourney(), profile, EmotionalState(overall=5.2), ENDED_AT
        )
        assert summary.main_themes == ("anxiety-management", "stress-reduction")
        assert summary.stressors_discussed == ("work",)
        assert summary.turn_count == 4
        assert summary.safety_turn_count == 1

    def test_effectiveness_skips_safety_turns(
        self,
        summarizer: SessionSummarizer,
        record: SessionRecord,
        profile: UserProfile,
    ) -> None:
        summary = summarizer.summarize(
            record, EmotionalJourney(), profile, EmotionalState(overall=5.2), ENDED_AT
        )
        assert summary.effectiveness_observations == {
            "breathing-exercise": pytest.approx(1.0),
            "body-scan": pytest.approx(-0.8),
        }

    def test_intervention_insights(
        self,
        summarizer: SessionSummarizer,
        record: SessionRecord,
        profile: UserProfile,
        catalog: InterventionCatalog,
    ) -> None:
        summary = summarizer.summarize(
            record, EmotionalJourney(), profile, EmotionalState(overall=5.2), ENDED_AT
        )
        breathing = catalog.get("breathing-exercise").title
        body_scan = catalog.get("body-scan").title
        assert len(summary.key_insights) == 2
        assert summary.key_insights[0] == (
            f"Your overall score rose by 1.0 points after \"{breathing}\"."
        )
        assert summary.key_insights[1].startswith(
            f"Your overall score dropped by 0.8 points after \"{body_scan}\""
        )

    def test_change_insights_come_first(
        self,
        summarizer: SessionSummarizer,
        record: SessionRecord,
        profile: UserProfile,
    ) -> None:
        journey = EmotionalJourney(
            trend=JourneyTrend.IMPROVED,
            changes=(EmotionalChange(EmotionDimension.ANXIETY, "decreased", 3.0),),
        )
        summary = summarizer.summarize(
            record, journey, profile, EmotionalState(overall=5.2), ENDED_AT
        )
        assert summary.key_insights[0] == "Anxiety decreased by 3.0 points over the session."
        assert summary.emotional_journey is journey

    def test_next_session(
        self,
        summarizer: SessionSummarizer,
        record: SessionRecord,
        profile: UserProfile,
    ) -> None:
        summary = summarizer.summarize(
            record, EmotionalJourney(), profile, EmotionalState(overall=5.2), ENDED_AT
        )
        assert summary.next_session.recommended_days == 7
        assert summary.next_session.recommended_date == date(2026, 3, 9)
        assert summary.next_session.recommended_focus == "sleep-improvement"

    def test_home_activity_prefers_activity_type(
        self,
        summarizer: SessionSummarizer,
        record: SessionRecord,
        profile: UserProfile,
    ) -> None:
        summary = summarizer.summarize(
            record, EmotionalJourney(), profile, EmotionalState(overall=5.2), ENDED_AT
        )
        assert summary.home_activity.activity.id == "scheduled-worry-time"
        assert summary.home_activity.activity.activity_type == "journaling"

    def test_empty_session(
        self,
        summarizer: SessionSummarizer,
        profile: UserProfile,
    ) -> None:
        record = SessionRecord(baseline=EmotionalState())
        summary = summarizer.summarize(
            record,
            EmotionalJourney(),
            profile,
            EmotionalState(),
            ENDED_AT,
            fallback_focus=("sleep-improvement",),
        )
        assert summary.main_themes == ()
        assert summary.effectiveness_observations == {}
        assert len(summary.key_insights) == 1
        assert "steady" in summary.key_insights[0]
        assert summary.home_activity.activity.category == "sleep-improvement"

    def test_summary_serialization(
        self,
        summarizer: SessionSummarizer,
        record: SessionRecord,
        profile: UserProfile,
    ) -> None:
        data = summarizer.summarize(
            record, EmotionalJourney(), profile, EmotionalState(overall=5.2), ENDED_AT
        ).to_dict()
        assert set(data) == {"summary", "home_activity", "next_session"}
        assert data["summary"]["emotional_journey"]["trend"] == "neutral"
        assert data["next_session"]["recommended_date"] == "2026-03-09"

    def test_empty_catalog_suggests_self_check_in(self, profile: UserProfile) -> None:
        summarizer = SessionSummarizer(InterventionSelector(InterventionCatalog({})))
        record = SessionRecord(baseline=EmotionalState())

        summary = summarizer.summarize(
            record,
            EmotionalJourney(trend=JourneyTrend.DECLINED),
            profile,
            EmotionalState(),
            ENDED_AT,
        )

        assert summary.home_activity.activity is SELF_CHECK_IN
        assert "once a day" in summary.home_activity.recommendation
        assert summary.home_activity.instructions.startswith(SELF_CHECK_IN.content)
