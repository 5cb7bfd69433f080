"""Heuristic plant-name recognition for conversational text.

Three passes run over every message, in priority order:

1. names of profiles already resolved in the conversation registry,
2. the curated vocabulary in :mod:`.vocabulary`, matched as whole words,
3. lightweight linguistic templates ("my X plant", "grow X", binomials ...).

A name found by an earlier pass shadows the same name found later. The
result is ordered by confidence, most certain first. Extraction never
raises: text without plant names simply yields an empty list.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Pattern, Sequence, Set, Tuple

from ..schemas.models import CONFIDENCE_RANK, Confidence, PlantMention
from .normalizers import normalize_plant_name
from .vocabulary import (
    COMMON_PLANT_NAMES,
    PLANT_CONTEXT_WORDS,
    PLANT_NAMES_BY_LENGTH,
    PLANT_QUERY_KEYWORDS,
    is_stopword,
)

if TYPE_CHECKING:
    from ..infra.plant_registry import ConversationPlantRegistry


logger = logging.getLogger(__name__)

MIN_CANDIDATE_LENGTH = 3
MAX_CANDIDATE_LENGTH = 30
MIN_GENUS_LENGTH = 4
CONTEXT_WINDOW_CHARS = 30
DEFAULT_HISTORY_LIMIT = 5

_END = r"(?:\s|$|,|\.|\?|!)"
PLANT_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(
        r"my\s+([a-z][a-z\s]{2,25}?)(?:\s+plant|\s+tree|\s+bush|\s+vine)?" + _END,
        re.IGNORECASE,
    ),
    re.compile(
        r"the\s+([a-z][a-z\s]{2,25}?)"
        r"(?:\s+plant|\s+tree|\s+bush|\s+vine|\s+is|\s+needs|\s+has|\s+looks)",
        re.IGNORECASE,
    ),
    re.compile(
        r"([a-z][a-z\s]{2,20}?)\s+(?:plant|tree|bush|vine|shrub|flower|herb)s?" + _END,
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:grow|plant|care\s+for|water|fertilize|prune|harvest|propagate)\s+"
        r"(?:the\s+|my\s+|some\s+)?([a-z][a-z\s]{2,25}?)" + _END,
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:about|regarding)\s+(?:the\s+|my\s+)?([a-z][a-z\s]{2,25}?)"
        r"(?:\s+plant|\s+tree|\s+bush)?" + _END,
        re.IGNORECASE,
    ),
    # Genus species, e.g. "Solanum lycopersicum"
    re.compile(r"([A-Z][a-z]+\s+[a-z]+)" + _END),
)
BINOMIAL_RE = re.compile(r"^[A-Z][a-z]+\s+[a-z]+$")

_VOCABULARY_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = tuple(
    (name, re.compile(rf"\b{re.escape(name)}\b", re.IGNORECASE))
    for name in PLANT_NAMES_BY_LENGTH
)
_CONTEXT_ALTERNATION = "|".join(re.escape(word) for word in PLANT_CONTEXT_WORDS)


def extract_mentions(
    text: Optional[str],
    registry: Optional["ConversationPlantRegistry"] = None,
) -> List[PlantMention]:
    if not text:
        return []

    mentions: List[PlantMention] = []
    seen: Set[str] = set()
    passes = (
        _find_registry_matches(text, registry),
        _find_vocabulary_matches(text),
        _find_pattern_matches(text),
    )
    for matches in passes:
        for mention in matches:
            if mention.normalized_name in seen:
                continue
            seen.add(mention.normalized_name)
            mentions.append(mention)

    # sorted() is stable, so equal confidence keeps discovery order
    mentions = sorted(mentions, key=lambda mention: CONFIDENCE_RANK[mention.confidence])
    logger.debug("Found %d plant mentions in text", len(mentions))
    return mentions


def extract_mentions_from_history(
    messages: Sequence[Any],
    limit: int = DEFAULT_HISTORY_LIMIT,
    registry: Optional["ConversationPlantRegistry"] = None,
) -> List[PlantMention]:
    """Collect unique mentions from history, newest message first.

    Stops as soon as ``limit`` mentions are gathered, so older messages are
    never scanned once the budget is spent.
    """
    collected: List[PlantMention] = []
    if limit <= 0:
        return collected
    seen: Set[str] = set()
    for message in reversed(list(messages or [])):
        if len(collected) >= limit:
            break
        text = message_text(message)
        if not text:
            continue
        for mention in extract_mentions(text, registry):
            if mention.normalized_name in seen:
                continue
            seen.add(mention.normalized_name)
            collected.append(mention)
            if len(collected) >= limit:
                break
    return collected


def is_plant_related_query(text: Optional[str]) -> bool:
    if not text:
        return False
    lowered = text.lower()
    if any(keyword in lowered for keyword in PLANT_QUERY_KEYWORDS):
        return True
    return any(name in lowered for name in COMMON_PLANT_NAMES)


def message_text(message: Any) -> str:
    if message is None:
        return ""
    if isinstance(message, str):
        return message
    if isinstance(message, dict):
        value = message.get("text")
    else:
        value = getattr(message, "text", None)
    return value if isinstance(value, str) else ""


def assess_candidate_confidence(candidate: str, full_text: str) -> Confidence:
    normalized = normalize_plant_name(candidate)
    if normalized in COMMON_PLANT_NAMES:
        return "high"
    if BINOMIAL_RE.match(candidate.strip()):
        return "high"
    escaped = re.escape(candidate.strip())
    context_re = re.compile(
        rf"(?:{_CONTEXT_ALTERNATION})\s+.{{0,{CONTEXT_WINDOW_CHARS}}}{escaped}"
        rf"|{escaped}\s+.{{0,{CONTEXT_WINDOW_CHARS}}}(?:{_CONTEXT_ALTERNATION})",
        re.IGNORECASE,
    )
    if context_re.search(full_text):
        return "medium"
    return "low"


def _find_registry_matches(
    text: str, registry: Optional["ConversationPlantRegistry"]
) -> Iterable[PlantMention]:
    if registry is None:
        return []
    lowered = text.lower()
    matches: List[PlantMention] = []
    for plant in registry.get_all_plants():
        if plant.common_name and plant.common_name.lower() in lowered:
            matches.append(
                PlantMention(
                    original_text=plant.common_name,
                    normalized_name=plant.common_name,
                    confidence="high",
                    source="exact_match",
                )
            )
        if plant.scientific_name and plant.scientific_name.lower() in lowered:
            matches.append(
                PlantMention(
                    original_text=plant.scientific_name,
                    normalized_name=plant.scientific_name,
                    confidence="high",
                    source="exact_match",
                )
            )
        genus = (plant.genus or "").lower()
        if len(genus) >= MIN_GENUS_LENGTH and genus in lowered:
            matches.append(
                PlantMention(
                    original_text=plant.genus,
                    normalized_name=genus,
                    confidence="medium",
                    source="exact_match",
                )
            )
    return matches


def _find_vocabulary_matches(text: str) -> Iterable[PlantMention]:
    matches: List[PlantMention] = []
    for name, pattern in _VOCABULARY_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        matches.append(
            PlantMention(
                original_text=match.group(0),
                normalized_name=name,
                confidence="high",
                source="common_name",
            )
        )
    return matches


def _find_pattern_matches(text: str) -> Iterable[PlantMention]:
    matches: List[PlantMention] = []
    processed: Set[str] = set()
    for pattern in PLANT_PATTERNS:
        for match in pattern.finditer(text):
            candidate = (match.group(1) or "").strip()
            if not MIN_CANDIDATE_LENGTH <= len(candidate) <= MAX_CANDIDATE_LENGTH:
                continue
            normalized = normalize_plant_name(candidate)
            if normalized in processed:
                continue
            processed.add(normalized)
            if is_stopword(normalized):
                continue
            confidence = assess_candidate_confidence(candidate, text)
            if confidence == "low" and normalized not in COMMON_PLANT_NAMES:
                continue
            matches.append(
                PlantMention(
                    original_text=candidate,
                    normalized_name=normalized,
                    confidence=confidence,
                    source="pattern",
                )
            )
    return matches
