"""
Plant mention extraction and Trefle-backed plant knowledge for chat replies.
"""

from plant_knowledge.domain.mention_extractor import (
    extract_mentions,
    extract_mentions_from_history,
    is_plant_related_query,
)
from plant_knowledge.infra.config import AppConfig, get_config
from plant_knowledge.runtime import PlantKnowledgeRuntime, PlantSession

__version__ = "0.1.0"
__all__ = [
    "AppConfig",
    "PlantKnowledgeRuntime",
    "PlantSession",
    "extract_mentions",
    "extract_mentions_from_history",
    "get_config",
    "is_plant_related_query",
]
