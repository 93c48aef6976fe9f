"""
Session Summarizer

Builds the end-of-session summary from a session's turns: themes,
insights, home activity and the next-session recommendation.

Every output is derived from the record and the emotional journey;
nothing here mutates session state.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Sequence

from companion.config.logging_config import get_logger
from companion.domain.enums.emotion import JourneyTrend
from companion.domain.errors import CatalogExhausted
from companion.domain.models.emotional_state import EmotionalJourney, EmotionalState
from companion.domain.models.intervention import GENERAL_WELLBEING, HomeActivity, Intervention
from companion.domain.models.responses import InterventionResponse
from companion.domain.models.session import (
    NextSessionRecommendation,
    SessionRecord,
    SessionSummary,
)
from companion.domain.models.user import UserProfile
from companion.infrastructure.metrics import track_catalog_fallback
from companion.services.decision.intervention_selector import InterventionSelector

logger = get_logger(__name__)


# Urgency weights: current wellbeing vs. direction of the session
WELLBEING_WEIGHT: float = 0.7
TREND_WEIGHT: float = 0.3
DECLINED_TREND_FACTOR: float = 0.6
STEADY_TREND_FACTOR: float = 0.4

HIGH_URGENCY: float = 0.7
LOW_URGENCY: float = 0.3
RELAXED_EXTRA_DAYS: int = 2

# Recent session focus areas avoided for the next session
NEXT_FOCUS_WINDOW: int = 3

# Overall delta after an intervention worth mentioning as an insight
NOTABLE_DELTA: float = 0.5

# Home activity when the catalog has nothing to offer
SELF_CHECK_IN = Intervention(
    id="self-check-in",
    category=GENERAL_WELLBEING,
    title="Daily Self Check-In",
    duration="5 min",
    content=(
        "Once a day, pause and notice how you are feeling. Rate your mood "
        "from 1 to 10 and write one sentence about what shaped it."
    ),
    activity_type="journaling",
)


def compute_urgency(overall: float, trend: JourneyTrend) -> float:
    """
    Follow-up urgency in [0, 1].

    urgency = 0.7 * ((10 - overall) / 10) + 0.3 * (0.6 if declined else 0.4)
    """
    trend_factor = DECLINED_TREND_FACTOR if trend == JourneyTrend.DECLINED else STEADY_TREND_FACTOR
    return WELLBEING_WEIGHT * ((10 - overall) / 10) + TREND_WEIGHT * trend_factor


def recommend_days(interval: int, urgency: float, trend: JourneyTrend) -> int:
    """
    Days until the next session.

    High urgency halves the preferred interval (floor, minimum 1), low
    urgency extends it by two days. A declined session never waits
    longer than half the interval.
    """
    shortened = max(1, interval // 2)
    if urgency > HIGH_URGENCY:
        days = shortened
    elif urgency < LOW_URGENCY:
        days = interval + RELAXED_EXTRA_DAYS
    else:
        days = interval

    if trend == JourneyTrend.DECLINED:
        days = min(days, shortened)
    return days


def recommend_focus(profile: UserProfile, recent_focus: Sequence[str]) -> str:
    """First profile goal not among the last few distinct focus areas."""
    # Most recent first, repeats collapsed
    window = list(dict.fromkeys(reversed(recent_focus)))[:NEXT_FOCUS_WINDOW]
    for goal in profile.therapeutic_goals:
        if goal not in window:
            return goal
    return profile.first_goal or GENERAL_WELLBEING


def recommend_next_session(
    profile: UserProfile,
    final_state: EmotionalState,
    trend: JourneyTrend,
    recent_focus: Sequence[str],
    ended_on: date,
) -> NextSessionRecommendation:
    """Build the next-session recommendation."""
    urgency = compute_urgency(final_state.overall, trend)
    days = recommend_days(profile.session_frequency, urgency, trend)
    return NextSessionRecommendation(
        recommended_date=ended_on + timedelta(days=days),
        recommended_days=days,
        recommended_focus=recommend_focus(profile, recent_focus),
        urgency=urgency,
    )


@dataclass(frozen=True)
class _InterventionOutcome:
    intervention_id: str
    title: str
    delta: float


class SessionSummarizer:
    """
    Summary builder.

    Usage:
        summarizer = SessionSummarizer(selector)
        summary = summarizer.summarize(record, journey, profile, state, ended_at)
    """

    def __init__(self, selector: InterventionSelector) -> None:
        self._selector = selector

    def summarize(
        self,
        record: SessionRecord,
        journey: EmotionalJourney,
        profile: UserProfile,
        final_state: EmotionalState,
        ended_at: datetime,
        fallback_focus: Sequence[str] = (),
    ) -> SessionSummary:
        """
        Build the summary for a session about to be sealed.

        Args:
            record: Session record (not yet sealed)
            journey: Emotional journey of the session
            profile: User profile
            final_state: Latest emotional snapshot
            ended_at: End timestamp
            fallback_focus: Focus areas used when no turn assigned any

        Returns:
            SessionSummary
        """
        themes = tuple(dict.fromkeys(record.focus_history()))
        outcomes = self._intervention_outcomes(record)

        effectiveness: dict[str, list[float]] = {}
        for outcome in outcomes:
            effectiveness.setdefault(outcome.intervention_id, []).append(outcome.delta)

        home_activity = self._home_activity(
            profile,
            themes or tuple(fallback_focus) or (profile.first_goal or GENERAL_WELLBEING,),
            journey.trend,
        )
        next_session = recommend_next_session(
            profile,
            final_state,
            journey.trend,
            record.focus_history(),
            ended_at.date(),
        )

        summary = SessionSummary(
            main_themes=themes,
            key_insights=self._key_insights(journey, outcomes),
            emotional_journey=journey,
            home_activity=home_activity,
            next_session=next_session,
            stressors_discussed=tuple(
                dict.fromkeys(theme for turn in record.turns for theme in turn.themes)
            ),
            effectiveness_observations={
                key: sum(deltas) / len(deltas) for key, deltas in effectiveness.items()
            },
            turn_count=record.turn_count,
            safety_turn_count=sum(1 for turn in record.turns if turn.is_safety_turn),
        )

        logger.debug(
            "Session summarized",
            trend=journey.trend.value,
            theme_count=len(themes),
            insight_count=len(summary.key_insights),
            recommended_days=next_session.recommended_days,
        )
        return summary

    def _home_activity(
        self,
        profile: UserProfile,
        focus_areas: Sequence[str],
        trend: JourneyTrend,
    ) -> HomeActivity:
        """Catalog home activity, or a self check-in when the catalog is empty."""
        try:
            return self._selector.suggest_home_activity(profile, focus_areas, trend)
        except CatalogExhausted as e:
            track_catalog_fallback()
            logger.warning(
                "No catalogued home activity, suggesting self check-in",
                focus_areas=list(e.focus_areas),
            )
            return HomeActivity(
                activity=SELF_CHECK_IN,
                instructions=(
                    f"{SELF_CHECK_IN.content} Set aside about "
                    f"{SELF_CHECK_IN.duration} for this."
                ),
                recommendation=InterventionSelector.practice_recommendation(
                    SELF_CHECK_IN, trend
                ),
            )

    @staticmethod
    def _intervention_outcomes(record: SessionRecord) -> list[_InterventionOutcome]:
        """
        Overall delta from each intervention turn to the next therapeutic turn.

        Safety turns carry the state forward unchanged and are skipped.
        An intervention in the last therapeutic turn has no outcome yet.
        """
        therapeutic = [turn for turn in record.turns if not turn.is_safety_turn]
        outcomes = []
        for current, following in zip(therapeutic, therapeutic[1:]):
            if not isinstance(current.response, InterventionResponse):
                continue
            outcomes.append(_InterventionOutcome(
                intervention_id=current.response.intervention.id,
                title=current.response.intervention.title,
                delta=following.state.overall - current.state.overall,
            ))
        return outcomes

    @staticmethod
    def _key_insights(
        journey: EmotionalJourney,
        outcomes: Sequence[_InterventionOutcome],
    ) -> tuple[str, ...]:
        insights = [
            f"{change.dimension.value.capitalize()} {change.direction} by "
            f"{change.magnitude:.1f} points over the session."
            for change in journey.changes
        ]

        for outcome in outcomes:
            if outcome.delta >= NOTABLE_DELTA:
                insights.append(
                    f"Your overall score rose by {outcome.delta:.1f} points "
                    f"after \"{outcome.title}\"."
                )
            elif outcome.delta <= -NOTABLE_DELTA:
                insights.append(
                    f"Your overall score dropped by {abs(outcome.delta):.1f} points "
                    f"after \"{outcome.title}\"; it may not be the right fit right now."
                )

        if not insights:
            insights.append(
                "Your emotional state stayed fairly steady today. Noticing "
                "how you feel is an important part of the work."
            )
        return tuple(insights)
