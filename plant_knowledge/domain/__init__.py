from __future__ import annotations

from typing import Any


_EXTRACTOR_EXPORTS = {
    "extract_mentions",
    "extract_mentions_from_history",
    "is_plant_related_query",
}
_PROFILE_EXPORTS = {
    "build_plant_profile",
    "describe_humidity_level",
    "describe_light_level",
    "describe_soil_humidity",
    "describe_soil_nutrients",
}

__all__ = sorted(_EXTRACTOR_EXPORTS | _PROFILE_EXPORTS)


def __getattr__(name: str) -> Any:
    if name in _EXTRACTOR_EXPORTS:
        from . import mention_extractor as _extractor

        return getattr(_extractor, name)
    if name in _PROFILE_EXPORTS:
        from . import profile_builder as _profiles

        return getattr(_profiles, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
