"""
Input Analyzer

Deterministic lexical analysis of a user turn: which emotional
dimensions the text speaks to, how strongly, and which stressor
themes it mentions.

This is keyword matching, not language understanding. Only
dimensions the text actually mentions produce an observed value;
everything else is carried over by the tracker.

NOTE: Crisis screening is NOT done here. The SafetyScreener always
runs first and flagged turns never reach this analyzer.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from companion.domain.enums.emotion import EmotionDimension


@dataclass(frozen=True)
class InputAnalysis:
    """
    Results from analyzing one utterance.

    Attributes:
        normalized_text: Lower-cased, whitespace-collapsed text
        word_count: Number of words
        observed: Raw observed score (0-10) per mentioned dimension
        dimension_hits: Lexicon terms matched per dimension
        themes: Stressor themes mentioned, in lexicon order
        intensified: Whether an intensifier was present
    """

    normalized_text: str
    word_count: int = 0
    observed: dict[EmotionDimension, float] = field(default_factory=dict)
    dimension_hits: dict[EmotionDimension, tuple[str, ...]] = field(default_factory=dict)
    themes: tuple[str, ...] = ()
    intensified: bool = False

    def to_dict(self) -> dict:
        """Serialize (text excluded)."""
        return {
            "word_count": self.word_count,
            "observed": {dim.value: round(v, 2) for dim, v in self.observed.items()},
            "themes": list(self.themes),
            "intensified": self.intensified,
        }


def _word_pattern(terms: Iterable[str]) -> re.Pattern:
    """Compile a whole-word alternation over the terms (longest first)."""
    ordered = sorted(set(terms), key=len, reverse=True)
    return re.compile(r"\b(" + "|".join(re.escape(t) for t in ordered) + r")\b")


class InputAnalyzer:
    """
    Lexical emotion and theme extraction.

    Scoring: a dimension mentioned once observes BASE_SCORE; each
    further distinct term adds STEP; an intensifier adds
    INTENSIFIER_BOOST. Scores are capped at 10.

    A negated term ("not happy") is ignored for its own dimension;
    negated joy terms count toward depression instead.
    """

    DIMENSION_LEXICON: dict[EmotionDimension, frozenset[str]] = {
        EmotionDimension.ANXIETY: frozenset({
            "anxious", "anxiety", "worried", "worry", "worrying", "nervous",
            "panic", "panicking", "stressed", "stressful", "stress",
            "overwhelmed", "overwhelming", "scared", "afraid", "tense",
            "on edge", "restless", "uneasy", "dread",
        }),
        EmotionDimension.DEPRESSION: frozenset({
            "sad", "depressed", "down", "hopeless", "empty", "lonely",
            "worthless", "exhausted", "numb", "unmotivated", "crying",
            "miserable", "low", "heartbroken", "grieving",
        }),
        EmotionDimension.ANGER: frozenset({
            "angry", "mad", "furious", "frustrated", "frustrating",
            "irritated", "annoyed", "resentful", "rage", "fed up", "pissed",
        }),
        EmotionDimension.JOY: frozenset({
            "happy", "glad", "grateful", "calm", "relaxed", "better",
            "good", "great", "excited", "hopeful", "proud", "peaceful",
            "content", "joyful", "relieved",
        }),
    }

    STRESSOR_LEXICON: dict[str, frozenset[str]] = {
        "work": frozenset({
            "work", "job", "boss", "deadline", "deadlines", "office",
            "career", "coworker", "coworkers", "colleague", "colleagues",
            "manager", "meeting", "meetings",
        }),
        "relationships": frozenset({
            "partner", "relationship", "relationships", "girlfriend",
            "boyfriend", "husband", "wife", "friend", "friends", "breakup",
            "dating", "marriage",
        }),
        "family": frozenset({
            "family", "mom", "dad", "mother", "father", "parents", "kids",
            "children", "sibling", "siblings", "brother", "sister",
        }),
        "health": frozenset({
            "health", "sick", "illness", "pain", "doctor", "hospital",
            "diagnosis",
        }),
        "sleep": frozenset({
            "sleep", "sleeping", "insomnia", "tired", "nightmare",
            "nightmares", "awake",
        }),
        "finances": frozenset({
            "money", "bills", "debt", "rent", "finances", "financial",
            "mortgage", "loan",
        }),
        "school": frozenset({
            "school", "exam", "exams", "class", "classes", "homework",
            "college", "university", "grades", "studying",
        }),
        "self-image": frozenset({
            "ugly", "failure", "not good enough", "confidence",
            "self-esteem", "insecure",
        }),
    }

    INTENSIFIERS: frozenset[str] = frozenset({
        "very", "really", "so", "extremely", "incredibly", "super",
        "completely", "totally", "too",
    })

    NEGATORS: frozenset[str] = frozenset({
        "not", "never", "no", "isn't", "don't", "didn't", "doesn't",
        "wasn't", "haven't", "hardly", "barely",
    })

    BASE_SCORE: float = 6.0
    STEP: float = 1.5
    INTENSIFIER_BOOST: float = 1.0
    MAX_SCORE: float = 10.0

    # Words between a negator and the term it negates
    NEGATION_WINDOW: int = 2

    def __init__(self) -> None:
        """Initialize analyzer with compiled lexicons."""
        self._dimension_patterns = {
            dim: _word_pattern(terms) for dim, terms in self.DIMENSION_LEXICON.items()
        }
        self._stressor_patterns = {
            tag: _word_pattern(terms) for tag, terms in self.STRESSOR_LEXICON.items()
        }
        self._intensifier_pattern = _word_pattern(self.INTENSIFIERS)

    def analyze(
        self,
        text: str,
        profile_stressors: Iterable[str] = (),
    ) -> InputAnalysis:
        """
        Analyze one utterance.

        Args:
            text: User input text
            profile_stressors: Stressor tags from the user's profile

        Returns:
            InputAnalysis with observed scores and themes
        """
        normalized = self._normalize_text(text)
        if not normalized:
            return InputAnalysis(normalized_text="")

        hits: dict[EmotionDimension, list[str]] = {dim: [] for dim in self.DIMENSION_LEXICON}
        for dimension, pattern in self._dimension_patterns.items():
            for match in pattern.finditer(normalized):
                term = match.group(1)
                if self._is_negated(normalized, match.start()):
                    if dimension == EmotionDimension.JOY:
                        hits[EmotionDimension.DEPRESSION].append(f"not {term}")
                    continue
                hits[dimension].append(term)

        intensified = self._intensifier_pattern.search(normalized) is not None

        observed: dict[EmotionDimension, float] = {}
        dimension_hits: dict[EmotionDimension, tuple[str, ...]] = {}
        for dimension in EmotionDimension.components():
            distinct = tuple(dict.fromkeys(hits[dimension]))
            if not distinct:
                continue
            score = self.BASE_SCORE + self.STEP * (len(distinct) - 1)
            if intensified:
                score += self.INTENSIFIER_BOOST
            observed[dimension] = min(self.MAX_SCORE, score)
            dimension_hits[dimension] = distinct

        return InputAnalysis(
            normalized_text=normalized,
            word_count=len(normalized.split()),
            observed=observed,
            dimension_hits=dimension_hits,
            themes=self._extract_themes(normalized, profile_stressors),
            intensified=intensified,
        )

    def _normalize_text(self, text: Optional[str]) -> str:
        """Lower-case, straighten quotes, collapse whitespace."""
        if not text:
            return ""
        text = text.replace("’", "'").replace("‘", "'")
        return re.sub(r"\s+", " ", text.strip()).lower()

    def _is_negated(self, text: str, position: int) -> bool:
        """Whether a negator appears within the window before position."""
        preceding = text[:position].split()[-self.NEGATION_WINDOW:]
        return any(word.strip(".,!?;:") in self.NEGATORS for word in preceding)

    def _extract_themes(
        self,
        text: str,
        profile_stressors: Iterable[str],
    ) -> tuple[str, ...]:
        """Stressor tags mentioned, lexicon tags first, then profile tags."""
        themes = [
            tag for tag, pattern in self._stressor_patterns.items()
            if pattern.search(text)
        ]
        for stressor in profile_stressors:
            tag = stressor.strip().lower()
            if tag and tag not in themes and re.search(rf"\b{re.escape(tag)}\b", text):
                themes.append(tag)
        return tuple(themes)
