"""
Session Orchestrator

Drives one guided self-help session through its lifecycle:

    IDLE -> STARTING -> ACTIVE -> ENDING -> COMPLETE

ARCHITECTURE: Each turn flows through
Screening -> Analysis -> Emotion update -> Focus -> Intervention -> Record

SAFETY: Screening runs first on every turn. A flagged turn is answered
with crisis resources and recorded without touching emotional state,
focus history or intervention history. A safety response never ends
the session.

Turns within one session are processed strictly in arrival order.
"""

import asyncio
import random
from datetime import datetime
from typing import Callable, Mapping, Optional

from companion.config.logging_config import get_logger
from companion.domain.enums.session_phase import SessionPhase
from companion.domain.errors import CatalogExhausted, InvalidTransition, ValidationError
from companion.domain.models.emotional_state import EmotionalState, utc_now
from companion.domain.models.responses import (
    InformationalResponse,
    InterventionResponse,
    SessionStart,
    TurnResponse,
)
from companion.domain.models.session import SessionRecord, SessionSummary, SessionTurn
from companion.domain.models.user import UserProfile
from companion.domain.models.intervention import Intervention
from companion.domain.models.safety import SafetyAssessment
from companion.infrastructure.metrics import (
    track_catalog_fallback,
    track_resources_provided,
    track_safety_screening,
    track_session_completed,
    track_session_started,
    track_turn,
)
from companion.services.decision.intervention_selector import InterventionSelector
from companion.services.emotion.emotion_tracker import EmotionTracker
from companion.services.emotion.input_analyzer import InputAnalysis, InputAnalyzer
from companion.services.orchestration.session_summarizer import SessionSummarizer
from companion.services.safety.crisis_resources import CrisisResourceResolver
from companion.services.safety.safety_responses import build_safety_response
from companion.services.safety.safety_screener import SafetyScreener

logger = get_logger(__name__)


GREETING_TEMPLATES: dict[str, tuple[str, ...]] = {
    "concern": (
        "{salutation}{name}. It sounds like things have been heavy lately. "
        "I'm glad you're here, and we'll go at your pace.",
        "{salutation}{name}. Thank you for checking in, even on a hard day. "
        "Let's take this one step at a time.",
    ),
    "momentum": (
        "{salutation}{name}! You're coming in with good energy today. "
        "Let's build on it.",
        "{salutation}{name}! It's great to see you feeling steady. "
        "Let's keep that momentum going.",
    ),
    "neutral": (
        "{salutation}{name}. Welcome back. How would you like to use our time today?",
        "{salutation}{name}. I'm glad you're here. Let's check in and see "
        "where you are today.",
    ),
}

FALLBACK_MESSAGE: str = (
    "Thank you for sharing that with me. I don't have a specific exercise "
    "ready for this right now, but I'm here to listen. Would you like to "
    "tell me more about what's on your mind?"
)


class SessionOrchestrator:
    """
    State machine for one session.

    Usage:
        orchestrator = SessionOrchestrator(selector, screener, resolver)
        start = await orchestrator.start(profile)
        response = await orchestrator.submit("work has been stressful")
        summary = await orchestrator.end()
    """

    # Baseline overall thresholds for greeting tone
    CONCERN_BELOW: float = 4.0
    MOMENTUM_ABOVE: float = 7.0

    def __init__(
        self,
        selector: InterventionSelector,
        screener: SafetyScreener,
        resources: CrisisResourceResolver,
        analyzer: Optional[InputAnalyzer] = None,
        summarizer: Optional[SessionSummarizer] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now,
        baseline_jitter: float = 1.0,
        country_code: str = "US",
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            selector: Focus and intervention selection
            screener: Crisis screening
            resources: Crisis resource lookup
            analyzer: Lexical input analysis
            summarizer: End-of-session summary builder
            rng: Random source for baseline jitter and greeting variety
            clock: Timestamp source
            baseline_jitter: Maximum jitter on the baseline overall score
            country_code: Jurisdiction for crisis resources
        """
        self._selector = selector
        self._screener = screener
        self._resources = resources
        self._analyzer = analyzer or InputAnalyzer()
        self._summarizer = summarizer or SessionSummarizer(selector)
        self._rng = rng or random.Random()
        self._clock = clock
        self._baseline_jitter = baseline_jitter
        self._country_code = country_code

        self._lock = asyncio.Lock()
        self._phase = SessionPhase.IDLE
        self._profile: Optional[UserProfile] = None
        self._tracker: Optional[EmotionTracker] = None
        self._record: Optional[SessionRecord] = None
        self._start_focus: tuple[str, ...] = ()

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def record(self) -> Optional[SessionRecord]:
        """Current (or last completed) session record."""
        return self._record

    @property
    def tracker(self) -> Optional[EmotionTracker]:
        return self._tracker

    @property
    def profile(self) -> Optional[UserProfile]:
        return self._profile

    def current_state(self) -> Optional[EmotionalState]:
        return self._tracker.current_state() if self._tracker else None

    async def start(
        self,
        profile: UserProfile,
        check_in: Optional[Mapping[str, float]] = None,
    ) -> SessionStart:
        """
        Start a session (from IDLE or after a completed session).

        Args:
            profile: User profile
            check_in: Self-reported dimension scores for today

        Returns:
            SessionStart with greeting, focus areas and suggestions

        Raises:
            InvalidTransition: If a session is already active
            ValueError: On unknown check-in dimensions
        """
        async with self._lock:
            if self._phase not in (SessionPhase.IDLE, SessionPhase.COMPLETE):
                raise InvalidTransition("start a session", self._phase.value)

            prior_phase = self._phase
            self._phase = SessionPhase.STARTING
            try:
                tracker = EmotionTracker(
                    rng=self._rng,
                    jitter=self._baseline_jitter,
                    clock=self._clock,
                )
                baseline = tracker.assess_baseline(
                    {**profile.emotional_baseline, **(check_in or {})}
                )
                focus_areas = self._selector.select_focus_areas(profile, baseline)
                suggestions = self._selector.suggest_activities(focus_areas)
                greeting = self._build_greeting(profile, baseline)
                record = SessionRecord(
                    baseline=baseline,
                    user_id=profile.id,
                    started_at=baseline.timestamp,
                )
            except Exception:
                self._phase = prior_phase
                logger.warning("Session start failed, state restored", phase=prior_phase.value)
                raise

            self._profile = profile
            self._tracker = tracker
            self._record = record
            self._start_focus = focus_areas
            self._phase = SessionPhase.ACTIVE

        track_session_started()
        logger.info(
            "Session started",
            session_id=str(record.id),
            focus_areas=list(focus_areas),
            baseline_overall=round(baseline.overall, 2),
        )

        return SessionStart(
            session_id=record.id,
            greeting=greeting,
            focus_areas=focus_areas,
            suggested_activities=suggestions,
            baseline=baseline,
        )

    async def submit(self, text: str) -> TurnResponse:
        """
        Process one user turn.

        Args:
            text: User input

        Returns:
            Safety, intervention or informational response

        Raises:
            InvalidTransition: If no session is active
            ValidationError: If the text is empty
        """
        async with self._lock:
            if self._phase != SessionPhase.ACTIVE:
                raise InvalidTransition("submit a turn", self._phase.value)
            if not text or not text.strip():
                raise ValidationError({"text": "Turn text must not be empty"})

            assessment = self._screener.evaluate(text)
            track_safety_screening(assessment.tier.label)

            if assessment.is_flagged:
                turn = self._safety_turn(text, assessment)
            else:
                turn = self._therapeutic_turn(text)

            self._record.add_turn(turn)

        track_turn(turn.response.kind)
        logger.info(
            "Turn processed",
            session_id=str(self._record.id),
            kind=turn.response.kind,
            turn_number=self._record.turn_count,
            text_length=len(text),
        )
        return turn.response

    async def end(self) -> SessionSummary:
        """
        End the active session and seal its record.

        Waits for any in-flight turn to finish first.

        Returns:
            SessionSummary

        Raises:
            InvalidTransition: If no session is active
        """
        async with self._lock:
            if self._phase != SessionPhase.ACTIVE:
                raise InvalidTransition("end the session", self._phase.value)

            self._phase = SessionPhase.ENDING
            try:
                ended_at = self._clock()
                summary = self._summarizer.summarize(
                    record=self._record,
                    journey=self._tracker.summarize_journey(),
                    profile=self._profile,
                    final_state=self._tracker.current_state(),
                    ended_at=ended_at,
                    fallback_focus=self._start_focus,
                )
                self._record.seal(summary, ended_at)
            except Exception:
                self._phase = SessionPhase.ACTIVE
                logger.warning(
                    "Session end failed, session remains active",
                    session_id=str(self._record.id),
                )
                raise

            self._phase = SessionPhase.COMPLETE

        track_session_completed(
            trend=summary.emotional_journey.trend.value,
            duration_seconds=self._record.duration_seconds,
            recommended_days=summary.next_session.recommended_days,
        )
        logger.info(
            "Session completed",
            session_id=str(self._record.id),
            trend=summary.emotional_journey.trend.value,
            turn_count=summary.turn_count,
            safety_turn_count=summary.safety_turn_count,
        )
        return summary

    def status(self) -> dict:
        """Phase and progress of the current record."""
        record = self._record
        state = self.current_state()
        return {
            "session_id": str(record.id) if record else None,
            "phase": self._phase.value,
            "turn_count": record.turn_count if record else 0,
            "started_at": record.started_at.isoformat() if record else None,
            "ended_at": record.ended_at.isoformat() if record and record.ended_at else None,
            "current_state": state.to_dict() if state else None,
        }

    def _safety_turn(self, text: str, assessment: SafetyAssessment) -> SessionTurn:
        """Answer a flagged turn; emotional and focus state are left untouched."""
        resources = self._resources.crisis_resources(self._country_code)
        response = build_safety_response(assessment, resources)
        track_resources_provided(self._country_code)

        logger.warning(
            "Safety response issued",
            session_id=str(self._record.id),
            tier=assessment.tier.label,
            category=assessment.category.value if assessment.category else None,
        )
        return SessionTurn(
            user_text=text,
            response=response,
            state=self._tracker.current_state(),
            timestamp=self._clock(),
        )

    def _therapeutic_turn(self, text: str) -> SessionTurn:
        analysis = self._analyzer.analyze(text, self._profile.current_stressors)
        state = self._tracker.update(analysis.observed)
        focus_areas = self._selector.select_focus_areas(
            self._profile,
            state,
            self._record.focus_history(),
        )

        try:
            intervention = self._selector.select_intervention(
                focus_areas,
                self._profile,
                recent_interventions=self._record.intervention_history(),
            )
        except CatalogExhausted as e:
            track_catalog_fallback()
            logger.warning(
                "No catalogued intervention, using fallback message",
                focus_areas=list(e.focus_areas),
            )
            response = InformationalResponse(message=FALLBACK_MESSAGE, focus_areas=focus_areas)
            intervention_id = None
        else:
            response = InterventionResponse(
                introduction=self._build_introduction(intervention, focus_areas, analysis),
                intervention=intervention,
                focus_areas=focus_areas,
            )
            intervention_id = intervention.id

        return SessionTurn(
            user_text=text,
            response=response,
            state=state,
            focus_areas=focus_areas,
            intervention_id=intervention_id,
            themes=analysis.themes,
            timestamp=self._clock(),
        )

    def _build_greeting(self, profile: UserProfile, baseline: EmotionalState) -> str:
        hour = self._clock().hour
        if hour < 12:
            salutation = "Good morning"
        elif hour < 18:
            salutation = "Good afternoon"
        else:
            salutation = "Good evening"

        if baseline.overall < self.CONCERN_BELOW:
            tone = "concern"
        elif baseline.overall > self.MOMENTUM_ABOVE:
            tone = "momentum"
        else:
            tone = "neutral"

        template = self._rng.choice(GREETING_TEMPLATES[tone])
        name = f", {profile.display_name}" if profile.display_name else ""
        return template.format(salutation=salutation, name=name)

    @staticmethod
    def _build_introduction(
        intervention: Intervention,
        focus_areas: tuple[str, ...],
        analysis: InputAnalysis,
    ) -> str:
        if analysis.themes:
            lead = f"It sounds like {analysis.themes[0]} has been on your mind."
        else:
            lead = "Thank you for sharing that."
        focus = " and ".join(area.replace("-", " ") for area in focus_areas)
        return (
            f"{lead} Let's try \"{intervention.title}\" ({intervention.duration}) "
            f"to help with {focus}."
        )
