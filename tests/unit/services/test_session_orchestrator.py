"""
Unit Tests for Session Orchestrator

Tests the session lifecycle, turn ordering, safety handling,
intervention cool-down and end-of-session summaries.
"""

import asyncio
from datetime import date

import pytest

from companion.domain.enums.emotion import JourneyTrend
from companion.domain.enums.safety_tier import SafetyTier
from companion.domain.enums.session_phase import SessionPhase
from companion.domain.errors import InvalidTransition, ValidationError
from companion.domain.models.intervention import InterventionCatalog
from companion.domain.models.user import UserProfile
from companion.services.decision import InterventionSelector
from companion.services.orchestration import SessionSummarizer
from companion.services.orchestration.session_orchestrator import (
    FALLBACK_MESSAGE,
    GREETING_TEMPLATES,
)


ALL_SEVEN = {"anxiety": 7, "depression": 7, "anger": 7, "joy": 7}
DECLINE_TO_FOUR = {"anxiety": 19 / 7, "depression": 19 / 7, "anger": 19 / 7, "joy": 19 / 7}

ANXIETY_IDS = {
    "breathing-exercise",
    "progressive-muscle-relaxation",
    "grounding-5-4-3-2-1",
    "scheduled-worry-time",
}


class FailingSelector(InterventionSelector):
    def select_focus_areas(self, profile, state, recent_focus=()):
        raise RuntimeError("selector unavailable")


class FailingSummarizer(SessionSummarizer):
    def summarize(self, *args, **kwargs):
        raise RuntimeError("summary unavailable")


class TestLifecycle:
    """Test phase transitions."""

    async def test_start(self, make_orchestrator, profile: UserProfile) -> None:
        orchestrator = make_orchestrator()
        assert orchestrator.phase == SessionPhase.IDLE

        start = await orchestrator.start(profile)

        assert orchestrator.phase == SessionPhase.ACTIVE
        assert start.session_id == orchestrator.record.id
        assert start.focus_areas == ("stress-reduction",)
        assert 0 < len(start.suggested_activities) <= 3
        assert all(a.category == "stress-reduction" for a in start.suggested_activities)
        assert orchestrator.record.user_id == profile.id

    async def test_submit_before_start(self, make_orchestrator) -> None:
        orchestrator = make_orchestrator()
        with pytest.raises(InvalidTransition) as exc_info:
            await orchestrator.submit("hello")
        assert exc_info.value.phase == "idle"

    async def test_end_before_start(self, make_orchestrator) -> None:
        orchestrator = make_orchestrator()
        with pytest.raises(InvalidTransition):
            await orchestrator.end()

    async def test_start_twice(self, make_orchestrator, profile: UserProfile) -> None:
        orchestrator = make_orchestrator()
        await orchestrator.start(profile)
        with pytest.raises(InvalidTransition) as exc_info:
            await orchestrator.start(profile)
        assert exc_info.value.operation == "start a session"
        assert orchestrator.phase == SessionPhase.ACTIVE

    async def test_complete_rejects_turns(self, make_orchestrator, profile: UserProfile) -> None:
        orchestrator = make_orchestrator()
        await orchestrator.start(profile)
        await orchestrator.end()

        assert orchestrator.phase == SessionPhase.COMPLETE
        assert orchestrator.record.is_sealed
        with pytest.raises(InvalidTransition) as exc_info:
            await orchestrator.submit("one more thing")
        assert exc_info.value.phase == "complete"
        with pytest.raises(InvalidTransition):
            await orchestrator.end()

    async def test_restart_after_complete(self, make_orchestrator, profile: UserProfile) -> None:
        orchestrator = make_orchestrator()
        first = await orchestrator.start(profile)
        await orchestrator.end()

        second = await orchestrator.start(profile)

        assert second.session_id != first.session_id
        assert orchestrator.phase == SessionPhase.ACTIVE
        assert orchestrator.record.turn_count == 0

    async def test_failed_start_restores_phase(
        self,
        make_orchestrator,
        catalog: InterventionCatalog,
        profile: UserProfile,
    ) -> None:
        orchestrator = make_orchestrator(selector=FailingSelector(catalog))
        with pytest.raises(RuntimeError):
            await orchestrator.start(profile)
        assert orchestrator.phase == SessionPhase.IDLE
        assert orchestrator.record is None

    async def test_unknown_check_in_dimension(self, make_orchestrator, profile: UserProfile) -> None:
        orchestrator = make_orchestrator()
        with pytest.raises(ValueError):
            await orchestrator.start(profile, {"calm": 3})
        assert orchestrator.phase == SessionPhase.IDLE

    async def test_failed_end_keeps_session_active(
        self,
        make_orchestrator,
        catalog: InterventionCatalog,
        profile: UserProfile,
    ) -> None:
        orchestrator = make_orchestrator(summarizer=FailingSummarizer(InterventionSelector(catalog)))
        await orchestrator.start(profile)

        with pytest.raises(RuntimeError):
            await orchestrator.end()

        assert orchestrator.phase == SessionPhase.ACTIVE
        assert not orchestrator.record.is_sealed
        response = await orchestrator.submit("work has been stressful")
        assert response.kind == "intervention"

    async def test_status(self, make_orchestrator, profile: UserProfile) -> None:
        orchestrator = make_orchestrator()
        assert orchestrator.status()["phase"] == "idle"
        await orchestrator.start(profile)
        await orchestrator.submit("work has been stressful")

        status = orchestrator.status()

        assert status["phase"] == "active"
        assert status["turn_count"] == 1
        assert status["ended_at"] is None
        assert status["current_state"]["anxiety"] > 5.0


class TestGreeting:
    """Test greeting tone and salutation."""

    @pytest.mark.parametrize(
        "score,tone",
        [(9, "momentum"), (2, "concern"), (5, "neutral")],
    )
    async def test_tone_follows_baseline(
        self,
        make_orchestrator,
        profile: UserProfile,
        score: int,
        tone: str,
    ) -> None:
        orchestrator = make_orchestrator()
        check_in = {dim: score for dim in ALL_SEVEN}
        start = await orchestrator.start(profile, check_in)

        expected = [
            template.format(salutation="Good morning", name=", Sam")
            for template in GREETING_TEMPLATES[tone]
        ]
        assert start.greeting in expected

    async def test_no_display_name(self, make_orchestrator) -> None:
        orchestrator = make_orchestrator()
        start = await orchestrator.start(UserProfile())
        assert start.greeting.startswith("Good morning.")


class TestTurns:
    """Test turn processing."""

    async def test_intervention_turn(self, make_orchestrator, profile: UserProfile) -> None:
        orchestrator = make_orchestrator()
        await orchestrator.start(profile)

        response = await orchestrator.submit("work has been stressful")

        assert response.kind == "intervention"
        assert response.introduction.startswith("It sounds like work has been on your mind.")
        assert response.intervention.title in response.introduction
        assert len(orchestrator.record.intervention_history()) == 1
        assert orchestrator.record.turns[0].themes == ("work",)

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_empty_text_rejected(self, make_orchestrator, profile: UserProfile, text: str) -> None:
        orchestrator = make_orchestrator()
        await orchestrator.start(profile)

        with pytest.raises(ValidationError) as exc_info:
            await orchestrator.submit(text)

        assert isinstance(exc_info.value, ValueError)
        assert "text" in exc_info.value.errors
        assert orchestrator.record.turn_count == 0

    async def test_emergency_leaves_state_untouched(self, make_orchestrator, profile: UserProfile) -> None:
        orchestrator = make_orchestrator()
        await orchestrator.start(profile)
        await orchestrator.submit("work has been stressful")
        state_before = orchestrator.current_state()
        history_length = len(orchestrator.tracker.history)
        focus_before = orchestrator.record.focus_history()
        interventions_before = orchestrator.record.intervention_history()

        response = await orchestrator.submit("I want to end my life")

        assert response.kind == "safety"
        assert response.tier == SafetyTier.EMERGENCY
        assert response.instructions is not None
        assert any(r.available_24_7 for r in response.resources)
        assert orchestrator.current_state() == state_before
        assert len(orchestrator.tracker.history) == history_length
        assert orchestrator.record.focus_history() == focus_before
        assert orchestrator.record.intervention_history() == interventions_before
        assert orchestrator.record.turns[-1].is_safety_turn
        assert orchestrator.phase == SessionPhase.ACTIVE

    async def test_warning_offers_to_continue(self, make_orchestrator, profile: UserProfile) -> None:
        orchestrator = make_orchestrator()
        await orchestrator.start(profile)

        response = await orchestrator.submit("Sometimes I want to hurt myself")

        assert response.tier == SafetyTier.WARNING
        assert response.continue_prompt is not None
        assert response.instructions is None
        assert orchestrator.record.focus_history() == []

        follow_up = await orchestrator.submit("work has been stressful")
        assert follow_up.kind == "intervention"

    async def test_cool_down_across_turns(
        self,
        make_orchestrator,
        fixed_analyzer,
        profile: UserProfile,
    ) -> None:
        orchestrator = make_orchestrator(analyzer=fixed_analyzer({"anxiety": 10.0}))
        await orchestrator.start(profile, {"anxiety": 9})

        offered = []
        for _ in range(5):
            response = await orchestrator.submit("I'm so anxious")
            assert response.focus_areas == ("anxiety-management",)
            offered.append(response.intervention.id)

        assert set(offered[:4]) == ANXIETY_IDS
        assert offered[4] == offered[0]

    async def test_cool_down_ignores_safety_turns(
        self,
        make_orchestrator,
        fixed_analyzer,
        profile: UserProfile,
    ) -> None:
        orchestrator = make_orchestrator(analyzer=fixed_analyzer({"anxiety": 10.0}))
        await orchestrator.start(profile, {"anxiety": 9})

        offered = []
        for _ in range(4):
            response = await orchestrator.submit("I'm so anxious")
            offered.append(response.intervention.id)
            await orchestrator.submit("sometimes I want to hurt myself")

        assert set(offered) == ANXIETY_IDS
        assert orchestrator.record.intervention_history() == offered

    async def test_informational_fallback(
        self,
        catalog: InterventionCatalog,
        make_orchestrator,
        fixed_analyzer,
        profile: UserProfile,
    ) -> None:
        partial = InterventionCatalog({
            "anxiety-management": catalog.for_focus("anxiety-management"),
        })
        orchestrator = make_orchestrator(
            analyzer=fixed_analyzer({}),
            selector=InterventionSelector(partial),
        )
        start = await orchestrator.start(profile)
        assert start.suggested_activities == ()

        response = await orchestrator.submit("just checking in")

        assert response.kind == "informational"
        assert response.message == FALLBACK_MESSAGE
        assert response.focus_areas == ("stress-reduction",)
        assert orchestrator.record.intervention_history() == []
        assert orchestrator.record.focus_history() == ["stress-reduction"]

        summary = await orchestrator.end()
        assert summary.home_activity.activity.category == "anxiety-management"


class TestConcurrency:
    """Test per-session ordering."""

    async def test_turns_recorded_in_arrival_order(self, make_orchestrator, profile: UserProfile) -> None:
        orchestrator = make_orchestrator()
        await orchestrator.start(profile)
        texts = ["first turn", "second turn", "third turn"]

        responses = await asyncio.gather(*(orchestrator.submit(t) for t in texts))

        assert len(responses) == 3
        assert [turn.user_text for turn in orchestrator.record.turns] == texts

    async def test_end_waits_for_in_flight_turn(self, make_orchestrator, profile: UserProfile) -> None:
        orchestrator = make_orchestrator()
        await orchestrator.start(profile)

        response, summary = await asyncio.gather(
            orchestrator.submit("work has been stressful"),
            orchestrator.end(),
        )

        assert response.kind == "intervention"
        assert summary.turn_count == 1

    async def test_turn_after_end_rejected(self, make_orchestrator, profile: UserProfile) -> None:
        orchestrator = make_orchestrator()
        await orchestrator.start(profile)

        summary, result = await asyncio.gather(
            orchestrator.end(),
            orchestrator.submit("too late"),
            return_exceptions=True,
        )

        assert summary.turn_count == 0
        assert isinstance(result, InvalidTransition)


class TestEnd:
    """Test end-of-session summaries."""

    async def test_declining_session_shortens_interval(
        self,
        make_orchestrator,
        fixed_analyzer,
        profile: UserProfile,
    ) -> None:
        orchestrator = make_orchestrator(analyzer=fixed_analyzer(DECLINE_TO_FOUR))
        start = await orchestrator.start(profile, ALL_SEVEN)
        assert start.baseline.overall == pytest.approx(7.0)

        await orchestrator.submit("it has been a rough week")
        assert orchestrator.current_state().overall == pytest.approx(4.0)

        summary = await orchestrator.end()

        assert summary.emotional_journey.trend == JourneyTrend.DECLINED
        assert summary.next_session.urgency == pytest.approx(0.6)
        assert summary.next_session.recommended_days == 3
        assert summary.next_session.recommended_date == date(2026, 3, 5)
        assert "Anxiety decreased by 3.0 points over the session." in summary.key_insights

    async def test_summary_counts(self, make_orchestrator, profile: UserProfile) -> None:
        orchestrator = make_orchestrator()
        await orchestrator.start(profile)
        await orchestrator.submit("work has been stressful")
        await orchestrator.submit("I want to hurt myself")

        summary = await orchestrator.end()

        assert summary.turn_count == 2
        assert summary.safety_turn_count == 1
        assert summary.stressors_discussed == ("work",)
        assert orchestrator.record.summary is summary

    async def test_empty_catalog_still_completes(
        self,
        make_orchestrator,
        profile: UserProfile,
    ) -> None:
        orchestrator = make_orchestrator(selector=InterventionSelector(InterventionCatalog({})))
        await orchestrator.start(profile)
        response = await orchestrator.submit("work has been stressful")
        assert response.kind == "informational"

        summary = await orchestrator.end()

        assert orchestrator.phase == SessionPhase.COMPLETE
        assert orchestrator.record.is_sealed
        assert summary.home_activity.activity.id == "self-check-in"
