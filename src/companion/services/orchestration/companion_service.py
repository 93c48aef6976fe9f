"""
Companion Service

Entry point for callers: manages many independent sessions keyed by
session ID, plus profile updates.

ARCHITECTURE: One SessionOrchestrator (with its own random source,
tracker and selector) per active session. The catalog, screener and
crisis resources are read-only and shared.

Ended sessions are dropped from the registry; only their final status
is kept, in a bounded most-recent-first store, so that status lookups
and late turns still get a meaningful answer.
"""

import random
from collections import OrderedDict
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union
from uuid import UUID

from companion.config.logging_config import bind_session_id, get_logger
from companion.config.settings import Settings
from companion.domain.enums.session_phase import SessionPhase
from companion.domain.errors import InvalidTransition, UnknownSession
from companion.domain.models.emotional_state import utc_now
from companion.domain.models.intervention import InterventionCatalog
from companion.domain.models.responses import SessionStart, TurnResponse
from companion.domain.models.session import SessionSummary
from companion.domain.models.user import UserProfile
from companion.services.decision.builtin_catalog import build_default_catalog, load_catalog
from companion.services.decision.intervention_selector import InterventionSelector
from companion.services.emotion.input_analyzer import InputAnalyzer
from companion.services.orchestration.session_orchestrator import SessionOrchestrator
from companion.services.safety.crisis_resources import CrisisResourceResolver
from companion.services.safety.safety_screener import CrisisPhraseSet, SafetyScreener

logger = get_logger(__name__)

SessionKey = Union[UUID, str]


class CompanionService:
    """
    Multi-session facade over SessionOrchestrator.

    Usage:
        service = CompanionService.from_settings(get_settings())
        start = await service.start_session(profile)
        response = await service.submit_turn(start.session_id, "hello")
        summary = await service.end_session(start.session_id)
    """

    def __init__(
        self,
        catalog: InterventionCatalog,
        screener: SafetyScreener,
        resources: CrisisResourceResolver,
        settings: Optional[Settings] = None,
        analyzer: Optional[InputAnalyzer] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize service.

        Args:
            catalog: Shared intervention catalog
            screener: Shared crisis screener
            resources: Shared crisis resource lookup
            settings: Application settings (session tuning, jurisdiction)
            analyzer: Shared lexical analyzer
            clock: Timestamp source
        """
        self._catalog = catalog
        self._screener = screener
        self._resources = resources
        self._settings = settings or Settings()
        self._analyzer = analyzer or InputAnalyzer()
        self._clock = clock
        self._sessions: dict[UUID, SessionOrchestrator] = {}
        self._completed: OrderedDict[UUID, dict] = OrderedDict()

    @classmethod
    def from_settings(cls, settings: Settings) -> "CompanionService":
        """
        Build the service and its reference data from configuration.

        Raises:
            OSError, ValueError, KeyError: If a configured data file is invalid
        """
        catalog = (
            load_catalog(settings.catalog.path)
            if settings.catalog.path
            else build_default_catalog()
        )
        phrases = (
            CrisisPhraseSet.from_file(settings.safety.phrases_path)
            if settings.safety.phrases_path
            else CrisisPhraseSet.default()
        )
        return cls(
            catalog=catalog,
            screener=SafetyScreener(phrases),
            resources=CrisisResourceResolver(settings.safety.resources_path),
            settings=settings,
        )

    @property
    def catalog(self) -> InterventionCatalog:
        return self._catalog

    @property
    def session_count(self) -> int:
        """Number of active (not yet ended) sessions."""
        return len(self._sessions)

    def create_orchestrator(self) -> SessionOrchestrator:
        """Fresh orchestrator with its own random source."""
        session_settings = self._settings.session
        rng = (
            random.Random(session_settings.random_seed)
            if session_settings.random_seed is not None
            else random.Random()
        )
        selector = InterventionSelector(
            self._catalog,
            rng=rng,
            cooldown_turns=session_settings.cooldown_turns,
            focus_history_window=session_settings.focus_history_window,
        )
        return SessionOrchestrator(
            selector=selector,
            screener=self._screener,
            resources=self._resources,
            analyzer=self._analyzer,
            rng=rng,
            clock=self._clock,
            baseline_jitter=session_settings.baseline_jitter,
            country_code=self._settings.safety.country_code,
        )

    async def start_session(
        self,
        profile: UserProfile,
        check_in: Optional[Mapping[str, float]] = None,
    ) -> SessionStart:
        """Start a new session and register it."""
        orchestrator = self.create_orchestrator()
        start = await orchestrator.start(profile, check_in)
        self._sessions[start.session_id] = orchestrator
        bind_session_id(str(start.session_id))
        return start

    async def submit_turn(self, session_id: SessionKey, text: str) -> TurnResponse:
        """
        Submit a turn to a session.

        Raises:
            UnknownSession: If the session ID is not registered
            InvalidTransition: If the session is not active
            ValidationError: If the text is empty
        """
        orchestrator = self._active_session(session_id, "submit a turn")
        return await orchestrator.submit(text)

    async def end_session(self, session_id: SessionKey) -> SessionSummary:
        """
        End a session and retire it from the registry.

        Raises:
            UnknownSession: If the session ID is not registered
            InvalidTransition: If the session is not active
        """
        orchestrator = self._active_session(session_id, "end the session")
        summary = await orchestrator.end()
        self._retire(orchestrator)
        return summary

    def update_profile(
        self,
        profile: UserProfile,
        patch: Mapping[str, Any],
    ) -> UserProfile:
        """
        Apply a validated partial update.

        Raises:
            ValidationError: If any field is invalid or unknown
        """
        updated = profile.merged(patch)
        logger.info(
            "Profile updated",
            user_id=str(profile.id),
            fields=sorted(patch),
        )
        return updated

    def get_session(self, session_id: SessionKey) -> SessionOrchestrator:
        """
        Look up an active session.

        Raises:
            UnknownSession: If the ID is malformed or not active
        """
        key = self._parse_key(session_id)
        orchestrator = self._sessions.get(key)
        if orchestrator is None:
            raise UnknownSession(session_id)

        bind_session_id(str(key))
        return orchestrator

    def session_status(self, session_id: SessionKey) -> dict:
        """
        Status of an active or recently ended session.

        Raises:
            UnknownSession: If the ID is malformed, unknown or expired
        """
        key = self._parse_key(session_id)
        if key in self._completed:
            return self._completed[key]
        return self.get_session(key).status()

    def _active_session(self, session_id: SessionKey, operation: str) -> SessionOrchestrator:
        key = self._parse_key(session_id)
        if key in self._completed:
            raise InvalidTransition(operation, SessionPhase.COMPLETE.value)
        return self.get_session(key)

    def _retire(self, orchestrator: SessionOrchestrator) -> None:
        """Drop an ended session, keeping its final status while room remains."""
        key = orchestrator.record.id
        if self._sessions.pop(key, None) is None:
            return

        limit = self._settings.session.completed_session_limit
        if limit:
            self._completed[key] = orchestrator.status()
            while len(self._completed) > limit:
                self._completed.popitem(last=False)

        logger.debug(
            "Session retired",
            session_id=str(key),
            active_sessions=len(self._sessions),
            retained_statuses=len(self._completed),
        )

    @staticmethod
    def _parse_key(session_id: SessionKey) -> UUID:
        try:
            return session_id if isinstance(session_id, UUID) else UUID(str(session_id))
        except ValueError:
            raise UnknownSession(session_id) from None
