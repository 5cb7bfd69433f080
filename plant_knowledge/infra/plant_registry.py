"""Per-conversation store of plants already resolved in the session."""

from __future__ import annotations

from collections import OrderedDict
from threading import Lock
from typing import List, Optional, Set

from ..domain.normalizers import make_registry_key
from ..schemas.models import ProcessedPlantData


DEFAULT_MAX_PLANTS = 20


class ConversationPlantRegistry:
    """FIFO-bounded map of lookup keys to resolved profiles.

    Entries never expire; the registry lives as long as its conversation.
    Once ``max_plants`` keys are held, registering a new key drops the key
    that was registered first. Re-registering a known key replaces the
    profile but keeps its original position.
    """

    def __init__(self, max_plants: int = DEFAULT_MAX_PLANTS) -> None:
        self._max_plants = max(1, int(max_plants))
        self._plants: "OrderedDict[str, ProcessedPlantData]" = OrderedDict()
        self._lock = Lock()

    @property
    def max_plants(self) -> int:
        return self._max_plants

    def add_plant(self, key: str, plant: ProcessedPlantData) -> None:
        normalized = make_registry_key(key)
        if not normalized:
            return
        with self._lock:
            if normalized not in self._plants:
                while len(self._plants) >= self._max_plants:
                    self._plants.popitem(last=False)
            self._plants[normalized] = plant

    def register(self, plant: ProcessedPlantData) -> None:
        """Register a profile under its slug and, when known, its common name."""
        self.add_plant(plant.slug, plant)
        if plant.common_name:
            self.add_plant(plant.common_name, plant)

    def get_plant(self, key: str) -> Optional[ProcessedPlantData]:
        with self._lock:
            return self._plants.get(make_registry_key(key))

    def has_plant(self, key: str) -> bool:
        with self._lock:
            return make_registry_key(key) in self._plants

    def find_plant(self, query: str) -> Optional[ProcessedPlantData]:
        normalized = make_registry_key(query)
        if not normalized:
            return None
        with self._lock:
            exact = self._plants.get(normalized)
            if exact is not None:
                return exact
            for plant in self._plants.values():
                if normalized in plant.scientific_name.lower():
                    return plant
                if plant.common_name and normalized in plant.common_name.lower():
                    return plant
                if normalized in plant.slug.lower():
                    return plant
        return None

    def get_all_plants(self) -> List[ProcessedPlantData]:
        with self._lock:
            return _distinct(list(self._plants.values()))

    def get_recent_plants(self, count: int = 5) -> List[ProcessedPlantData]:
        if count <= 0:
            return []
        with self._lock:
            newest_first = list(reversed(self._plants.values()))
        return _distinct(newest_first)[:count]

    def get_plant_names(self) -> List[str]:
        return [plant.display_name for plant in self.get_all_plants()]

    def clear(self) -> None:
        with self._lock:
            self._plants.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._plants)


def _distinct(plants: List[ProcessedPlantData]) -> List[ProcessedPlantData]:
    seen: Set[int] = set()
    result: List[ProcessedPlantData] = []
    for plant in plants:
        if plant.id in seen:
            continue
        seen.add(plant.id)
        result.append(plant)
    return result
