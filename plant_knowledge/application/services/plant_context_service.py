from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ...domain.mention_extractor import extract_mentions, message_text
from ...infra.plant_registry import ConversationPlantRegistry
from ...observability.logging_utils import log_event, summarize_text
from ...prompts.plant_formatters import (
    create_plant_context_for_prompt,
    format_plant_for_data,
    format_plants_for_context,
)
from ...schemas import PlantContextResult, PlantMention, ProcessedPlantData
from .plant_resolver import (
    PlantResolver,
    append_unique_plant,
    resolve_name_safely,
)


logger = logging.getLogger(__name__)

MAX_PLANTS_TO_FETCH = 5


def build_plant_context(
    resolver: PlantResolver,
    current_text: Optional[str],
    history: Optional[Sequence[Any]] = None,
    *,
    max_plants: int = MAX_PLANTS_TO_FETCH,
) -> PlantContextResult:
    """
    Gather the plants a reply should know about.

    Mentions in the current message outrank those found in history. When
    nothing is mentioned, the conversation's recently resolved plants are
    returned instead. Low-confidence mentions are only answered from the
    registry, never from the remote API.
    """
    registry = resolver.registry
    current_mentions = extract_mentions(current_text, registry)
    history_mentions = _collect_history_mentions(history or [], registry)
    mentions = merge_mentions([*current_mentions, *history_mentions])
    log_event(
        "plant_mentions_extracted",
        text=summarize_text(current_text or ""),
        current_count=len(current_mentions),
        history_count=len(history_mentions),
        names=[mention.normalized_name for mention in mentions],
    )

    if not mentions:
        recent = registry.get_recent_plants(max_plants)
        result = result_from_plants(recent)
        _log_built(result, source="registry")
        return result

    plants: List[ProcessedPlantData] = []
    not_found: List[str] = []
    for mention in mentions[:max_plants]:
        existing = registry.find_plant(mention.normalized_name)
        if existing is not None:
            append_unique_plant(plants, existing)
            continue
        if mention.confidence == "low":
            continue
        plant = resolve_name_safely(resolver, mention.normalized_name, caller="plant_context")
        if plant is None:
            not_found.append(mention.original_text)
            continue
        append_unique_plant(plants, plant)

    for plant in registry.get_recent_plants(max_plants):
        if len(plants) >= max_plants:
            break
        append_unique_plant(plants, plant)

    result = result_from_plants(plants, mentions=mentions, not_found=not_found)
    _log_built(result, source="mentions")
    return result


def merge_mentions(mentions: Iterable[PlantMention]) -> List[PlantMention]:
    """Collapse duplicates by normalized name, keeping the best confidence.

    A name keeps the position of its first appearance.
    """
    merged: Dict[str, PlantMention] = {}
    for mention in mentions:
        existing = merged.get(mention.normalized_name)
        if existing is None or mention.rank < existing.rank:
            merged[mention.normalized_name] = mention
    return list(merged.values())


def result_from_plants(
    plants: Sequence[ProcessedPlantData],
    *,
    mentions: Optional[Sequence[PlantMention]] = None,
    not_found: Optional[Sequence[str]] = None,
) -> PlantContextResult:
    if not plants:
        return PlantContextResult(
            mentions=list(mentions or []),
            not_found=list(not_found or []),
        )
    return PlantContextResult(
        text=create_plant_context_for_prompt(plants),
        plant_names=[plant.display_name for plant in plants],
        plant_scientific_names=[plant.scientific_name for plant in plants],
        plant_count=len(plants),
        plant_summary=format_plants_for_context(plants),
        plants=[format_plant_for_data(plant) for plant in plants],
        raw_plants=list(plants),
        mentions=list(mentions or []),
        not_found=list(not_found or []),
    )


def _collect_history_mentions(
    history: Sequence[Any], registry: ConversationPlantRegistry
) -> List[PlantMention]:
    collected: List[PlantMention] = []
    seen = set()
    for message in history:
        text = message_text(message)
        if not text:
            continue
        for mention in extract_mentions(text, registry):
            if mention.normalized_name in seen:
                continue
            seen.add(mention.normalized_name)
            collected.append(mention)
    return collected


def _log_built(result: PlantContextResult, *, source: str) -> None:
    log_event(
        "plant_context_built",
        source=source,
        plant_count=result.plant_count,
        not_found=result.not_found,
    )
