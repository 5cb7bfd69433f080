from .models import (
    CONFIDENCE_RANK,
    CacheStats,
    Confidence,
    MentionSource,
    PhRange,
    PlantContextResult,
    PlantImages,
    PlantInfoResult,
    PlantMention,
    PrecipitationRange,
    ProcessedPlantData,
    SpeciesSummary,
    TemperatureRange,
)

__all__ = [
    "CONFIDENCE_RANK",
    "CacheStats",
    "Confidence",
    "MentionSource",
    "PhRange",
    "PlantContextResult",
    "PlantImages",
    "PlantInfoResult",
    "PlantMention",
    "PrecipitationRange",
    "ProcessedPlantData",
    "SpeciesSummary",
    "TemperatureRange",
]
