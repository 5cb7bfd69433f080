from __future__ import annotations

import logging
from typing import List, Optional

from ...domain.mention_extractor import extract_mentions, is_plant_related_query
from ...domain.vocabulary import PLANT_INFO_TRIGGERS
from ...infra.errors import PlantApiError
from ...infra.plant_registry import ConversationPlantRegistry
from ...observability.logging_utils import log_event, summarize_text
from ...prompts.plant_formatters import (
    format_plant_care_guide,
    format_plant_for_data,
    format_search_results,
)
from ...schemas import PlantInfoResult, ProcessedPlantData
from .plant_resolver import (
    PlantResolver,
    append_unique_plant,
    resolve_name_safely,
)


logger = logging.getLogger(__name__)

MAX_PLANTS_PER_REQUEST = 3
SUGGESTION_LIMIT = 5
GUIDE_SEPARATOR = "\n\n---\n\n"

ASK_WHICH_PLANT = (
    "I'd be happy to help with plant care information! "
    "Could you tell me which plant you'd like to learn about?"
)


def has_info_trigger(text: str) -> bool:
    lowered = text.lower()
    return any(trigger in lowered for trigger in PLANT_INFO_TRIGGERS)


def should_trigger_plant_info(
    text: Optional[str], registry: ConversationPlantRegistry
) -> bool:
    """True when the message asks for plant details we can answer."""
    if not text or not is_plant_related_query(text):
        return False
    has_subject = bool(extract_mentions(text, registry)) or len(registry) > 0
    if not has_subject:
        return False
    return has_info_trigger(text) or bool(registry.get_recent_plants(1))


def build_plant_info(
    resolver: PlantResolver,
    text: Optional[str],
    *,
    max_plants: int = MAX_PLANTS_PER_REQUEST,
) -> PlantInfoResult:
    registry = resolver.registry
    mentions = extract_mentions(text, registry)

    plants: List[ProcessedPlantData] = []
    not_found: List[str] = []
    if not mentions:
        recent = registry.get_recent_plants(max_plants)
        if not recent:
            result = PlantInfoResult(text=ASK_WHICH_PLANT, triggered=True)
            _log_built(result, text)
            return result
        plants.extend(recent)
    else:
        for mention in mentions[:max_plants]:
            plant = registry.find_plant(mention.normalized_name)
            if plant is None:
                plant = resolve_name_safely(
                    resolver, mention.normalized_name, caller="plant_info"
                )
            if plant is None:
                not_found.append(mention.original_text)
                continue
            append_unique_plant(plants, plant)

    if not plants and not_found:
        result = PlantInfoResult(
            text=_suggestion_text(resolver, not_found[0]),
            not_found=not_found,
            triggered=True,
        )
        _log_built(result, text)
        return result

    result = PlantInfoResult(
        text=render_plant_guides(plants, not_found),
        plants=[format_plant_for_data(plant) for plant in plants],
        not_found=not_found,
        triggered=True,
    )
    _log_built(result, text)
    return result


def render_plant_guides(plants: List[ProcessedPlantData], not_found: List[str]) -> str:
    guides = [format_plant_care_guide(plant) for plant in plants]
    if len(plants) == 1:
        body = guides[0]
    else:
        body = GUIDE_SEPARATOR.join(
            f"## {index}. {plant.display_name}\n\n{guide}"
            for index, (plant, guide) in enumerate(zip(plants, guides), start=1)
        )
    if not_found:
        body += f"\n\n*Note: I couldn't find information for: {', '.join(not_found)}*"
    return body


def _no_match_text(query: str) -> str:
    return (
        f'I couldn\'t find any plants matching "{query}" in my botanical database. '
        "Could you check the spelling or try a different name?"
    )


def _suggestion_text(resolver: PlantResolver, query: str) -> str:
    try:
        results = resolver.search_by_name(query, SUGGESTION_LIMIT)
    except PlantApiError as exc:
        logger.warning("suggestion search for %r failed: %s", query, exc)
        return _no_match_text(query)
    if not results:
        return _no_match_text(query)
    return (
        f'I couldn\'t find an exact match for "{query}", but here are some similar plants:\n\n'
        f"{format_search_results(results, query)}"
        "\n\nWould you like information about any of these?"
    )


def _log_built(result: PlantInfoResult, text: Optional[str]) -> None:
    log_event(
        "plant_info_built",
        text=summarize_text(text or ""),
        plant_count=len(result.plants),
        not_found=result.not_found,
    )
