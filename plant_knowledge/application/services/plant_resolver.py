from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from ...domain.normalizers import (
    make_species_key,
    normalize_plant_name,
    normalize_search_key,
)
from ...domain.profile_builder import build_plant_profile
from ...infra.errors import PlantApiError, PlantAuthError
from ...infra.plant_cache import PlantCacheService
from ...infra.plant_registry import ConversationPlantRegistry
from ...infra.trefle_api import TrefleApi
from ...observability.logging_utils import log_event, summarize_text
from ...schemas import ProcessedPlantData, SpeciesSummary


logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 10
NAME_SEARCH_LIMIT = 5


class PlantResolver:
    """Cache-aware lookup of plant profiles for one conversation.

    The API client and caches are shared between conversations; the
    registry belongs to this conversation only. Any profile handed out by
    ``resolve_*`` is registered, so later mentions of the same plant are
    answered from the registry.
    """

    def __init__(
        self,
        api: TrefleApi,
        caches: PlantCacheService,
        registry: ConversationPlantRegistry,
    ) -> None:
        self._api = api
        self._caches = caches
        self._registry = registry

    @property
    def registry(self) -> ConversationPlantRegistry:
        return self._registry

    @property
    def caches(self) -> PlantCacheService:
        return self._caches

    def search_by_name(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> List[SpeciesSummary]:
        cache_key = normalize_search_key(query)
        if not cache_key:
            return []
        cached = self._caches.search_results.get(cache_key)
        if cached is not None:
            return list(cached[:limit])

        raw_results = self._api.search_species(query)
        results = _to_summaries(raw_results[: max(0, limit)])
        self._caches.search_results.set(cache_key, results)
        log_event("plant_search", query=query, limit=limit, result_count=len(results))
        return list(results)

    def resolve_by_id(self, species_id: int) -> ProcessedPlantData:
        return self._resolve(species_id)

    def resolve_by_slug(self, slug: str) -> ProcessedPlantData:
        return self._resolve(slug)

    def resolve_by_name(self, name: str) -> Optional[ProcessedPlantData]:
        normalized = normalize_plant_name(name)
        if not normalized:
            return None

        existing = self._registry.find_plant(normalized)
        if existing is not None:
            logger.debug("plant %r found in conversation registry", name)
            return existing

        cached = self._caches.common_names.get(normalized)
        if cached is not None:
            self._registry.register(cached)
            return cached

        results = self.search_by_name(name, NAME_SEARCH_LIMIT)
        if not results:
            logger.info("no search results for %r", name)
            return None

        best = find_best_match(name, results)
        return self.resolve_by_id(best.id)

    def _resolve(self, id_or_slug: Union[int, str]) -> ProcessedPlantData:
        cache_key = make_species_key(id_or_slug)
        cached = self._caches.species.get(cache_key)
        if cached is not None:
            self._registry.register(cached)
            return cached

        raw = self._api.get_species(id_or_slug)
        plant = build_plant_profile(raw)
        self._store(plant)
        log_event(
            "plant_resolved",
            lookup=str(id_or_slug),
            plant_id=plant.id,
            slug=plant.slug,
            scientific_name=plant.scientific_name,
        )
        return plant

    def _store(self, plant: ProcessedPlantData) -> None:
        self._caches.species.set(make_species_key(plant.id), plant)
        self._caches.species.set(make_species_key(plant.slug), plant)
        if plant.common_name:
            self._caches.common_names.set(
                normalize_plant_name(plant.common_name), plant
            )
        self._registry.register(plant)


def find_best_match(query: str, results: Sequence[SpeciesSummary]) -> SpeciesSummary:
    """Pick the search result that best fits ``query``.

    Tried in order: exact common name, exact scientific name, common-name
    prefix, scientific-name prefix, common name containing the query.
    Falls back to the first result.
    """
    if not results:
        raise ValueError("find_best_match requires at least one result")
    needle = normalize_plant_name(query)

    def common(item: SpeciesSummary) -> str:
        return (item.common_name or "").lower()

    def scientific(item: SpeciesSummary) -> str:
        return item.scientific_name.lower()

    matchers = (
        lambda item: common(item) == needle,
        lambda item: scientific(item) == needle,
        lambda item: bool(common(item)) and common(item).startswith(needle),
        lambda item: scientific(item).startswith(needle),
        lambda item: needle in common(item),
    )
    for matcher in matchers:
        for item in results:
            if matcher(item):
                return item
    return results[0]


def _to_summaries(raw_results: Sequence[Dict[str, Any]]) -> List[SpeciesSummary]:
    summaries: List[SpeciesSummary] = []
    for item in raw_results:
        try:
            summaries.append(SpeciesSummary.model_validate(item))
        except ValidationError as exc:
            logger.warning("skipping malformed search result: %s", exc.errors()[:1])
    return summaries


def resolve_name_safely(
    resolver: PlantResolver, name: str, *, caller: str
) -> Optional[ProcessedPlantData]:
    """``resolve_by_name`` that logs API failures and returns ``None`` instead."""
    try:
        return resolver.resolve_by_name(name)
    except PlantAuthError as exc:
        log_event(
            "plant_resolve_failed",
            level=logging.ERROR,
            caller=caller,
            name=name,
            error=type(exc).__name__,
            status_code=exc.status_code,
        )
    except PlantApiError as exc:
        log_event(
            "plant_resolve_failed",
            level=logging.WARNING,
            caller=caller,
            name=name,
            error=type(exc).__name__,
            status_code=exc.status_code,
            message=summarize_text(str(exc)),
        )
    except ValueError as exc:
        # malformed species record
        log_event(
            "plant_resolve_failed",
            level=logging.WARNING,
            caller=caller,
            name=name,
            error=type(exc).__name__,
            message=summarize_text(str(exc)),
        )
    return None


def append_unique_plant(
    plants: List[ProcessedPlantData], plant: ProcessedPlantData
) -> bool:
    """Append ``plant`` unless a profile with the same species id is present."""
    if any(existing.id == plant.id for existing in plants):
        return False
    plants.append(plant)
    return True
