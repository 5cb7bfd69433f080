"""Process-wide caches for search results and resolved plant profiles."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from ..observability.logging_utils import log_event
from ..schemas.models import CacheStats, ProcessedPlantData, SpeciesSummary
from .config import AppConfig, get_config
from .ttl_cache import TTLCache


class PlantCacheService:
    """Owns the three caches shared by every conversation.

    ``search_results`` is keyed by normalized query text, ``species`` by
    species id and slug, and ``common_names`` by lowercased common name.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = 300.0,
        search_max_items: int = 200,
        species_max_items: int = 300,
        common_name_max_items: int = 300,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.search_results: TTLCache[List[SpeciesSummary]] = TTLCache(
            "search_results", ttl_seconds, search_max_items, clock=clock
        )
        self.species: TTLCache[ProcessedPlantData] = TTLCache(
            "species", ttl_seconds, species_max_items, clock=clock
        )
        self.common_names: TTLCache[ProcessedPlantData] = TTLCache(
            "common_names", ttl_seconds, common_name_max_items, clock=clock
        )

    def _caches(self) -> Dict[str, TTLCache]:
        return {
            "search_results": self.search_results,
            "species": self.species,
            "common_names": self.common_names,
        }

    def cleanup_all(self) -> Dict[str, int]:
        removed = {name: cache.cleanup() for name, cache in self._caches().items()}
        if any(removed.values()):
            log_event("plant_cache_cleanup", removed=removed)
        return removed

    def clear_all(self) -> None:
        for cache in self._caches().values():
            cache.clear()
        log_event("plant_cache_cleared")

    def stats(self) -> Dict[str, CacheStats]:
        return {name: cache.stats() for name, cache in self._caches().items()}


def build_plant_caches(
    cfg: Optional[AppConfig] = None,
    *,
    clock: Optional[Callable[[], float]] = None,
) -> PlantCacheService:
    cfg = cfg or get_config()
    return PlantCacheService(
        ttl_seconds=cfg.plant_cache_ttl_seconds,
        search_max_items=cfg.search_cache_max_items,
        species_max_items=cfg.species_cache_max_items,
        common_name_max_items=cfg.common_name_cache_max_items,
        clock=clock,
    )
