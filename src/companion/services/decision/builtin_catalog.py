"""
Built-in Intervention Catalog

Default reference data for the intervention selector, plus a JSON
loader so deployments can replace the catalog without code changes.

CLINICAL_REVIEW_REQUIRED: Activity content should be reviewed by
mental health professionals before production use.
"""

import json
from pathlib import Path
from typing import Union

from companion.config.logging_config import get_logger
from companion.domain.models.intervention import (
    GENERAL_WELLBEING,
    Intervention,
    InterventionCatalog,
)

logger = get_logger(__name__)


BUILT_IN_INTERVENTIONS: tuple[Intervention, ...] = (
    # Anxiety management
    Intervention(
        id="breathing-exercise",
        category="anxiety-management",
        title="Box Breathing",
        duration="5 min",
        content=(
            "Breathe in slowly for a count of four, hold for four, breathe out "
            "for four, and hold again for four. Repeat the cycle for a few "
            "minutes, letting your shoulders drop on each exhale."
        ),
        follow_up="How does your body feel now compared to before the exercise?",
        activity_type="exercise",
    ),
    Intervention(
        id="progressive-muscle-relaxation",
        category="anxiety-management",
        title="Progressive Muscle Relaxation",
        duration="10 min",
        content=(
            "Starting with your feet, tense each muscle group for five seconds, "
            "then release it for ten. Work upwards through your legs, stomach, "
            "hands, arms, shoulders and face, noticing the difference between "
            "tension and relaxation."
        ),
        follow_up="Which part of your body was holding the most tension?",
        activity_type="exercise",
    ),
    Intervention(
        id="grounding-5-4-3-2-1",
        category="anxiety-management",
        title="5-4-3-2-1 Grounding Exercise",
        duration="5 min",
        content=(
            "Name five things you can see, four things you can touch, three "
            "things you can hear, two things you can smell and one thing you "
            "can taste. Take your time with each one."
        ),
        follow_up="Did bringing your attention to your surroundings change anything?",
        activity_type="technique",
    ),
    Intervention(
        id="scheduled-worry-time",
        category="anxiety-management",
        title="Scheduled Worry Time",
        duration="15 min",
        content=(
            "Set aside fifteen minutes to write down every worry on your mind. "
            "When a worry shows up outside that window, note it and postpone "
            "it to your next worry time."
        ),
        follow_up="Which worry felt most urgent once it was on paper?",
        activity_type="journaling",
    ),
    # Mood improvement
    Intervention(
        id="gratitude-journal",
        category="mood-improvement",
        title="Gratitude Journal",
        duration="5 min",
        content=(
            "Write down three things that went well today, however small, and "
            "a sentence about why each one mattered to you."
        ),
        follow_up="Was it easier or harder than you expected to find three things?",
        activity_type="journaling",
    ),
    Intervention(
        id="positive-memory-recall",
        category="mood-improvement",
        title="Positive Memory Recall",
        duration="10 min",
        content=(
            "Bring to mind a moment when you felt safe, proud or content. "
            "Recall where you were, who was with you, and what you could see "
            "and hear. Stay with the memory for a few breaths."
        ),
        follow_up="What feeling came up as you revisited that memory?",
        activity_type="technique",
    ),
    Intervention(
        id="behavioral-activation",
        category="mood-improvement",
        title="Small Pleasant Activity",
        duration="15 min",
        content=(
            "Pick one small activity you used to enjoy, such as a short walk, "
            "a song or a call with a friend, and schedule it for today. Doing "
            "comes before feeling; motivation often follows action."
        ),
        follow_up="What activity could you realistically do today?",
        activity_type="exercise",
    ),
    # Stress reduction
    Intervention(
        id="body-scan",
        category="stress-reduction",
        title="Body Scan for Stress",
        duration="12 min",
        content=(
            "Lie down or sit comfortably and slowly move your attention from "
            "the top of your head to your toes. Notice any areas of tightness "
            "without trying to change them, and breathe into each one."
        ),
        follow_up="Where did you notice stress sitting in your body?",
        activity_type="meditation",
    ),
    Intervention(
        id="stress-inventory",
        category="stress-reduction",
        title="Stress Inventory Assessment",
        duration="10 min",
        content=(
            "List the things currently causing you stress. Mark each one as "
            "something you can change, influence, or need to accept, and pick "
            "one you can change to take a first step on."
        ),
        follow_up="Which item on your list felt most within your control?",
        activity_type="technique",
    ),
    Intervention(
        id="cognitive-reframing",
        category="stress-reduction",
        title="Cognitive Reframing",
        duration="10 min",
        content=(
            "Write down a stressful thought. Ask yourself what evidence "
            "supports it, what evidence doesn't, and how a good friend might "
            "see the situation. Then write a more balanced version."
        ),
        follow_up="How does the balanced thought feel compared to the original?",
        activity_type="journaling",
    ),
    # Relationship skills
    Intervention(
        id="active-listening",
        category="relationship-skills",
        title="Active Listening Practice",
        duration="10 min",
        content=(
            "In your next conversation, focus on understanding rather than "
            "replying. Reflect back what you heard before sharing your view, "
            "and ask one open question."
        ),
        follow_up="Who would you like to practice this with?",
        activity_type="exercise",
    ),
    Intervention(
        id="boundary-script",
        category="relationship-skills",
        title="Boundary Setting Script",
        duration="15 min",
        content=(
            "Write a short script for a boundary you need: describe the "
            "situation, how it affects you, what you need, and what you will "
            "do if the boundary isn't respected."
        ),
        follow_up="What makes this boundary hard to set?",
        activity_type="technique",
    ),
    # Self-esteem
    Intervention(
        id="strengths-inventory",
        category="self-esteem",
        title="Strengths Inventory",
        duration="10 min",
        content=(
            "List five personal strengths and one recent example of each. "
            "If that feels hard, think of what a friend would say about you."
        ),
        follow_up="Which strength surprised you the most?",
        activity_type="journaling",
    ),
    Intervention(
        id="self-compassion-break",
        category="self-esteem",
        title="Self-Compassion Break",
        duration="5 min",
        content=(
            "Place a hand on your chest and acknowledge that this moment is "
            "hard, that struggle is part of being human, and offer yourself "
            "the kindness you would offer a friend."
        ),
        follow_up="What would you say to a friend in your position?",
        activity_type="meditation",
    ),
    # Sleep improvement
    Intervention(
        id="wind-down-routine",
        category="sleep-improvement",
        title="Wind-Down Routine",
        duration="15 min",
        content=(
            "An hour before bed, dim the lights, put screens away and choose "
            "one calming activity. Keep the routine the same each night so "
            "your body learns the cue."
        ),
        follow_up="What usually keeps you up at night?",
        activity_type="technique",
    ),
    Intervention(
        id="sleep-meditation",
        category="sleep-improvement",
        title="Guided Sleep Meditation",
        duration="10 min",
        content=(
            "In bed, breathe slowly and count each exhale from ten down to "
            "one. If your mind wanders, gently start again from ten."
        ),
        follow_up="How long did it take before your thoughts slowed down?",
        activity_type="meditation",
    ),
    # Work-life balance
    Intervention(
        id="time-boundaries-plan",
        category="work-life-balance",
        title="Time Boundaries Plan",
        duration="10 min",
        content=(
            "Decide on a clear end time for work this week and one protected "
            "activity for yourself each evening. Write both down where you "
            "will see them."
        ),
        follow_up="What tends to pull you back into work after hours?",
        activity_type="technique",
    ),
    Intervention(
        id="values-reflection",
        category="work-life-balance",
        title="Values Reflection Reading",
        duration="15 min",
        content=(
            "Read a short piece on personal values, then note the three "
            "values that matter most to you and how your current week does "
            "or doesn't reflect them."
        ),
        follow_up="Which value feels most neglected right now?",
        activity_type="reading",
    ),
    # General wellbeing
    Intervention(
        id="mindful-check-in",
        category=GENERAL_WELLBEING,
        title="Mindful Check-In",
        duration="5 min",
        content=(
            "Pause and ask yourself three questions: What am I feeling? What "
            "do I need right now? What is one kind thing I can do for myself?"
        ),
        follow_up="What did you notice when you checked in with yourself?",
        activity_type="meditation",
    ),
    Intervention(
        id="mindful-walk",
        category=GENERAL_WELLBEING,
        title="Mindful Walk",
        duration="10 min",
        content=(
            "Take a slow walk and pay attention to each step, the air on your "
            "skin and the sounds around you. When your mind drifts, return to "
            "your footsteps."
        ),
        follow_up="How did you feel after the walk?",
        activity_type="exercise",
    ),
    Intervention(
        id="self-care-reading",
        category=GENERAL_WELLBEING,
        title="Self-Care Reading",
        duration="10 min",
        content=(
            "Spend ten minutes with something uplifting to read, away from "
            "notifications, and note one idea you want to carry into your day."
        ),
        follow_up="What idea stayed with you?",
        activity_type="reading",
    ),
)


def build_default_catalog() -> InterventionCatalog:
    """Catalog of the built-in interventions grouped by focus area."""
    grouped: dict[str, list[Intervention]] = {}
    for intervention in BUILT_IN_INTERVENTIONS:
        grouped.setdefault(intervention.category, []).append(intervention)
    return InterventionCatalog(grouped)


def load_catalog(path: Union[str, Path]) -> InterventionCatalog:
    """
    Load a catalog from JSON.

    Expected format:
        {"anxiety-management": [{"id": ..., "title": ..., "duration": ...,
          "content": ..., "follow_up": ..., "activity_type": ...}, ...], ...}

    Raises:
        OSError, ValueError, KeyError: If the file is unreadable or malformed
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Catalog file must contain an object: {path}")

    entries = {
        focus: [
            Intervention(
                id=item["id"],
                category=focus,
                title=item["title"],
                duration=item.get("duration", "10 min"),
                content=item["content"],
                follow_up=item.get("follow_up"),
                activity_type=item.get("activity_type", "technique"),
            )
            for item in items
        ]
        for focus, items in data.items()
    }
    catalog = InterventionCatalog(entries)

    logger.info(
        "Loaded intervention catalog",
        path=str(path),
        focus_area_count=len(catalog.focus_areas),
        intervention_count=len(catalog),
    )
    return catalog
