"""Tests configuration and fixtures."""

import random
from datetime import datetime, timezone
from typing import Callable

import pytest

from companion.config import Settings
from companion.config.settings import SessionSettings
from companion.domain.models.intervention import InterventionCatalog
from companion.domain.models.user import UserProfile
from companion.services.decision import InterventionSelector, build_default_catalog
from companion.services.emotion.input_analyzer import InputAnalysis, InputAnalyzer
from companion.services.orchestration import CompanionService, SessionOrchestrator
from companion.services.safety import CrisisResourceResolver, SafetyScreener


FIXED_NOW = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


class FixedAnalyzer(InputAnalyzer):
    """Analyzer returning preset observed scores for every turn."""

    def __init__(self, observed: dict) -> None:
        super().__init__()
        self._observed = observed

    def analyze(self, text, profile_stressors=()) -> InputAnalysis:
        return InputAnalysis(
            normalized_text=text.lower(),
            word_count=len(text.split()),
            observed=dict(self._observed),
        )


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with deterministic session tuning."""
    return Settings(
        env="development",
        debug=True,
        session=SessionSettings(random_seed=7, baseline_jitter=0.0),
    )


@pytest.fixture
def catalog() -> InterventionCatalog:
    return build_default_catalog()


@pytest.fixture
def screener() -> SafetyScreener:
    return SafetyScreener()


@pytest.fixture
def resolver() -> CrisisResourceResolver:
    return CrisisResourceResolver()


@pytest.fixture
def profile() -> UserProfile:
    """Profile with two goals and a work stressor."""
    return UserProfile(
        display_name="Sam",
        therapeutic_goals=("stress-reduction", "sleep-improvement"),
        current_stressors=("work",),
        session_frequency=7,
        preferred_activity_type="journaling",
    )


@pytest.fixture
def make_orchestrator(
    catalog: InterventionCatalog,
    screener: SafetyScreener,
    resolver: CrisisResourceResolver,
) -> Callable[..., SessionOrchestrator]:
    """Factory for seeded orchestrators with a fixed clock and no jitter."""

    def factory(seed: int = 42, analyzer: InputAnalyzer | None = None, **kwargs) -> SessionOrchestrator:
        rng = random.Random(seed)
        selector = kwargs.pop("selector", None) or InterventionSelector(catalog, rng=rng)
        return SessionOrchestrator(
            selector=selector,
            screener=screener,
            resources=resolver,
            analyzer=analyzer,
            rng=rng,
            clock=fixed_clock,
            baseline_jitter=0.0,
            **kwargs,
        )

    return factory


@pytest.fixture
def make_service(
    catalog: InterventionCatalog,
    screener: SafetyScreener,
    resolver: CrisisResourceResolver,
    test_settings: Settings,
) -> Callable[..., CompanionService]:
    """Factory for services with a fixed clock and deterministic sessions."""

    def factory(analyzer: InputAnalyzer | None = None) -> CompanionService:
        return CompanionService(
            catalog=catalog,
            screener=screener,
            resources=resolver,
            settings=test_settings,
            analyzer=analyzer,
            clock=fixed_clock,
        )

    return factory


@pytest.fixture
def service(make_service: Callable[..., CompanionService]) -> CompanionService:
    return make_service()


@pytest.fixture
def fixed_analyzer() -> Callable[[dict], InputAnalyzer]:
    """Factory for analyzers that observe the same scores on every turn."""
    return FixedAnalyzer
