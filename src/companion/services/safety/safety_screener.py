"""
Safety Screener

Classifies a single utterance into a safety tier before any other
processing of the turn.

SAFETY-CRITICAL: False negatives (missed risk) are worse than false
positives. Matching is deliberately broad: case-insensitive substring
matching over normalized text, not strict tokenization.

ARCHITECTURE: evaluate() is a pure function of the text. It never
reads or writes emotional or session state. Phrase lists are
configuration data and can be extended through a JSON file without
code changes.
"""

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Iterable, Optional, Union

from companion.config.logging_config import get_logger
from companion.domain.enums.safety_tier import RiskCategory, SafetyTier
from companion.domain.models.safety import SafetyAssessment

logger = get_logger(__name__)


def normalize_text(text: Optional[str]) -> str:
    """
    Normalize text for phrase matching.

    Lower-cases, straightens curly quotes and collapses whitespace.
    """
    if not text:
        return ""
    text = text.replace("’", "'").replace("‘", "'")
    return re.sub(r"\s+", " ", text.strip()).lower()


@dataclass(frozen=True)
class CrisisPhraseSet:
    """
    Phrase lists checked by the screener, highest priority first.

    Attributes:
        suicide: Suicidal-ideation phrases (tier emergency)
        self_harm: Self-harm phrases (tier warning)
    """

    suicide: tuple[str, ...]
    self_harm: tuple[str, ...]

    # CLINICAL_REVIEW_REQUIRED: Validate and expand these lists
    DEFAULT_SUICIDE: ClassVar[tuple[str, ...]] = (
        "kill myself",
        "end my life",
        "suicide",
        "suicidal",
        "don't want to live",
        "want to die",
        "better off dead",
        "no reason to live",
        "end it all",
        "take my own life",
    )

    DEFAULT_SELF_HARM: ClassVar[tuple[str, ...]] = (
        "hurt myself",
        "self-harm",
        "self harm",
        "harm myself",
        "cutting",
        "cut myself",
        "burn myself",
        "hit myself",
    )

    @classmethod
    def default(cls) -> "CrisisPhraseSet":
        """Built-in phrase lists."""
        return cls(suicide=cls.DEFAULT_SUICIDE, self_harm=cls.DEFAULT_SELF_HARM)

    def extended(
        self,
        suicide: Iterable[str] = (),
        self_harm: Iterable[str] = (),
    ) -> "CrisisPhraseSet":
        """Return a copy with additional phrases (normalized, deduplicated)."""
        return CrisisPhraseSet(
            suicide=self._merge(self.suicide, suicide),
            self_harm=self._merge(self.self_harm, self_harm),
        )

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        base: Optional["CrisisPhraseSet"] = None,
    ) -> "CrisisPhraseSet":
        """
        Extend phrase lists from a JSON file.

        Expected format:
            {"suicide": ["..."], "self_harm": ["..."]}

        Raises:
            OSError, ValueError: If the file cannot be read or parsed
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Crisis phrase file must contain an object: {path}")

        phrases = (base or cls.default()).extended(
            suicide=data.get("suicide", []),
            self_harm=data.get("self_harm", []),
        )

        logger.info(
            "Loaded crisis phrase config",
            path=str(path),
            suicide_count=len(phrases.suicide),
            self_harm_count=len(phrases.self_harm),
        )
        return phrases

    @staticmethod
    def _merge(existing: Iterable[str], extra: Iterable[str]) -> tuple[str, ...]:
        merged = [normalize_text(p) for p in existing]
        merged.extend(normalize_text(p) for p in extra)
        return tuple(dict.fromkeys(p for p in merged if p))


class SafetyScreener:
    """
    Lexical crisis screener.

    Priority order:
    1. Suicidal-ideation phrases -> EMERGENCY / suicide (short-circuits)
    2. Self-harm phrases -> WARNING / self-harm
    3. No match -> NONE

    Usage:
        screener = SafetyScreener()
        assessment = screener.evaluate("I want to end my life")
        assert assessment.tier == SafetyTier.EMERGENCY
    """

    def __init__(self, phrases: Optional[CrisisPhraseSet] = None) -> None:
        """
        Initialize screener.

        Args:
            phrases: Phrase lists (defaults to built-in lists)
        """
        phrases = phrases or CrisisPhraseSet.default()
        # Normalize once so matching compares like with like
        self._phrases = CrisisPhraseSet(suicide=(), self_harm=()).extended(
            suicide=phrases.suicide,
            self_harm=phrases.self_harm,
        )

    @property
    def phrases(self) -> CrisisPhraseSet:
        return self._phrases

    def evaluate(self, text: str) -> SafetyAssessment:
        """
        Classify an utterance.

        Args:
            text: Raw user input

        Returns:
            SafetyAssessment with tier and category
        """
        normalized = normalize_text(text)
        if not normalized:
            return SafetyAssessment()

        phrase = self._first_match(normalized, self._phrases.suicide)
        if phrase is not None:
            return SafetyAssessment(
                tier=SafetyTier.EMERGENCY,
                category=RiskCategory.SUICIDE,
                matched_phrase=phrase,
            )

        phrase = self._first_match(normalized, self._phrases.self_harm)
        if phrase is not None:
            return SafetyAssessment(
                tier=SafetyTier.WARNING,
                category=RiskCategory.SELF_HARM,
                matched_phrase=phrase,
            )

        return SafetyAssessment()

    @staticmethod
    def _first_match(text: str, phrases: tuple[str, ...]) -> Optional[str]:
        for phrase in phrases:
            if phrase in text:
                return phrase
        return None
