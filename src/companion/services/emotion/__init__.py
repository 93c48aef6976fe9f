"""Emotion services package - state tracking and input analysis."""

from companion.services.emotion.emotion_tracker import EmotionTracker
from companion.services.emotion.input_analyzer import InputAnalyzer, InputAnalysis

__all__ = [
    "EmotionTracker",
    "InputAnalyzer",
    "InputAnalysis",
]
