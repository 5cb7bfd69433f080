"""Process-level composition of the plant knowledge components."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Sequence

import httpx

from .application.services.plant_context_service import build_plant_context
from .application.services.plant_info_service import (
    build_plant_info,
    should_trigger_plant_info,
)
from .application.services.plant_resolver import PlantResolver
from .infra.config import AppConfig, get_config
from .infra.plant_cache import PlantCacheService, build_plant_caches
from .infra.plant_registry import ConversationPlantRegistry
from .infra.rate_limiter import SlidingWindowRateLimiter, build_rate_limiter
from .infra.session_store import ConversationSessionStore
from .infra.trefle_api import TrefleApi, build_trefle_api
from .observability.logging_utils import log_event
from .schemas import PlantContextResult, PlantInfoResult


logger = logging.getLogger(__name__)


class PlantSession:
    """Plant state for one conversation: its registry and a resolver bound to it."""

    def __init__(
        self,
        session_id: str,
        registry: ConversationPlantRegistry,
        resolver: Optional[PlantResolver],
        *,
        max_plants_to_fetch: int,
        max_plants_per_request: int,
    ) -> None:
        self.session_id = session_id
        self.registry = registry
        self.resolver = resolver
        self._max_plants_to_fetch = max_plants_to_fetch
        self._max_plants_per_request = max_plants_per_request

    def is_configured(self) -> bool:
        return self.resolver is not None

    def get_plant_context(
        self, current_text: Optional[str], history: Optional[Sequence[Any]] = None
    ) -> PlantContextResult:
        if self.resolver is None:
            logger.warning("plant api not configured; skipping plant context")
            return PlantContextResult()
        return build_plant_context(
            self.resolver,
            current_text,
            history,
            max_plants=self._max_plants_to_fetch,
        )

    def should_trigger_plant_info(self, text: Optional[str]) -> bool:
        if self.resolver is None:
            return False
        return should_trigger_plant_info(text, self.registry)

    def get_plant_info(self, text: Optional[str]) -> PlantInfoResult:
        if self.resolver is None:
            return PlantInfoResult()
        return build_plant_info(
            self.resolver, text, max_plants=self._max_plants_per_request
        )


class PlantKnowledgeRuntime:
    """Owns the shared caches, rate limiter and HTTP client.

    Conversations get their own :class:`PlantSession` through
    :meth:`session`; sessions idle longer than the configured TTL are
    dropped together with their registries. Without a Trefle token the
    runtime still works but every session returns empty results.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.config = config or get_config()
        self.caches: PlantCacheService = build_plant_caches(self.config, clock=clock)
        self.rate_limiter: SlidingWindowRateLimiter = build_rate_limiter(
            self.config, clock=clock
        )
        self.api: Optional[TrefleApi] = None
        if self.config.trefle_token:
            self.api = build_trefle_api(
                self.rate_limiter, self.config, transport=transport, sleep=sleep
            )
        else:
            logger.warning("TREFLE_TOKEN is not set; plant lookups are disabled")
        self.sessions: ConversationSessionStore[PlantSession] = ConversationSessionStore(
            self.config.session_store_ttl_seconds, clock=clock
        )

    def is_configured(self) -> bool:
        return self.api is not None

    def session(self, session_id: str) -> PlantSession:
        return self.sessions.get_or_create(session_id, lambda: self._new_session(session_id))

    def _new_session(self, session_id: str) -> PlantSession:
        registry = ConversationPlantRegistry(self.config.registry_max_plants)
        resolver = None
        if self.api is not None:
            resolver = PlantResolver(self.api, self.caches, registry)
        return PlantSession(
            session_id,
            registry,
            resolver,
            max_plants_to_fetch=self.config.max_plants_to_fetch,
            max_plants_per_request=self.config.max_plants_per_request,
        )

    def cleanup(self) -> Dict[str, int]:
        removed = self.caches.cleanup_all()
        expired_sessions = self.sessions.cleanup()
        if expired_sessions:
            log_event("plant_sessions_expired", count=expired_sessions)
        return {**removed, "sessions": expired_sessions}

    def close(self) -> None:
        if self.api is not None:
            self.api.close()

    def __enter__(self) -> "PlantKnowledgeRuntime":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

