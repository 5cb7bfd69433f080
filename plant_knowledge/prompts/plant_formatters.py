"""Render plant profiles as care guides, prompt context and records."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence

from ..domain.profile_builder import describe_soil_nutrients as _describe_nutrient_band
from ..schemas.models import ProcessedPlantData, SpeciesSummary


CONTEXT_HEADER = "The following plants have been mentioned in this conversation:\n\n"
CONTEXT_SEPARATOR = "\n\n---\n\n"
CM_PER_FOOT = 30.48
MM_PER_INCH = 25.4
TOXICITY_MARKERS = {
    "none": "✅",
    "low": "⚠️",
    "medium": "⚠️",
}
HIGH_TOXICITY_MARKER = "☠️"


def capitalize_first(text: str) -> str:
    if not text:
        return text
    return text[0].upper() + text[1:].lower()


def celsius_to_fahrenheit(celsius: float) -> int:
    # halves round up, never to even
    return math.floor(celsius * 9 / 5 + 32 + 0.5)


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def format_month_list(months: Sequence[str]) -> str:
    if len(months) == 12:
        return "Year-round"
    if not months:
        return "Unknown"
    return ", ".join(capitalize_first(month) for month in months)


def describe_soil_nutrients(level: float) -> str:
    return _describe_nutrient_band(level) or "Unknown"


def format_plant_care_guide(plant: ProcessedPlantData) -> str:
    sections: List[str] = [_format_header(plant)]
    for section in (
        _format_quick_facts(plant),
        _format_light(plant),
        _format_water(plant),
        _format_soil(plant),
        _format_temperature(plant),
        _format_growth(plant),
    ):
        if section:
            sections.append(section)
    if plant.sowing_instructions:
        sections.append(f"**Sowing Instructions:**\n{plant.sowing_instructions}")
    safety = _format_safety(plant)
    if safety:
        sections.append(safety)
    return "\n\n".join(sections)


def format_plant_summary(plant: ProcessedPlantData) -> str:
    traits: List[str] = []
    if plant.duration:
        traits.append("/".join(plant.duration))
    if plant.ligneous_type:
        traits.append(plant.ligneous_type)
    if plant.edible:
        traits.append("edible")
    if plant.toxicity and plant.toxicity != "none":
        traits.append(f"toxicity: {plant.toxicity}")
    trait_text = f" [{', '.join(traits)}]" if traits else ""

    requirements: List[str] = []
    if plant.light_description:
        requirements.append(f"Light: {plant.light_description}")
    if plant.soil_humidity_description:
        requirements.append(f"Water: {plant.soil_humidity_description}")
    if plant.temperature_range:
        min_c = plant.temperature_range.min_c
        max_c = plant.temperature_range.max_c
        requirements.append(
            f"Temp: {format_number(min_c)}°C-{format_number(max_c)}°C "
            f"({celsius_to_fahrenheit(min_c)}°F-{celsius_to_fahrenheit(max_c)}°F)"
        )
    requirement_text = f"\nCare: {' | '.join(requirements)}" if requirements else ""

    return f"{plant.full_name}{trait_text}{requirement_text}"


def format_plants_for_context(plants: Sequence[ProcessedPlantData]) -> str:
    if not plants:
        return ""
    lines = [
        f"{index}. {format_plant_summary(plant)}"
        for index, plant in enumerate(plants, start=1)
    ]
    return "**Plants in conversation:**\n" + "\n".join(lines)


def format_search_results(results: Sequence[SpeciesSummary], query: str) -> str:
    if not results:
        return f'No plants found matching "{query}".'
    plural = "s" if len(results) > 1 else ""
    header = f'Found {len(results)} plant{plural} matching "{query}":\n'
    lines: List[str] = []
    for index, result in enumerate(results, start=1):
        if result.common_name:
            name = f"{result.common_name} ({result.scientific_name})"
        else:
            name = result.scientific_name
        family = f" - Family: {result.family}" if result.family else ""
        lines.append(f"{index}. {name}{family}")
    return header + "\n".join(lines)


def format_plant_one_liner(plant: ProcessedPlantData) -> str:
    traits: List[str] = []
    if plant.duration:
        traits.append(plant.duration[0])
    if plant.edible:
        traits.append("edible")
    if plant.light_description:
        traits.append(plant.light_description.lower())
    trait_text = f" - {', '.join(traits)}" if traits else ""
    return f"{plant.display_name}{trait_text}"


def create_plant_context_for_prompt(plants: Sequence[ProcessedPlantData]) -> str:
    """Narrative block describing each plant, meant for prompt injection."""
    if not plants:
        return ""
    blocks: List[str] = []
    for plant in plants:
        details = [f"Plant: {plant.full_name}"]
        if plant.family:
            details.append(f"Family: {plant.family}")
        if plant.duration:
            details.append(f"Type: {'/'.join(plant.duration)}")
        if plant.light_description:
            details.append(f"Light: {plant.light_description}")
        if plant.soil_humidity_description:
            details.append(f"Water: {plant.soil_humidity_description}")
        if plant.temperature_range:
            details.append(
                f"Temp: {format_number(plant.temperature_range.min_c)}°C to "
                f"{format_number(plant.temperature_range.max_c)}°C"
            )
        if plant.ph_range:
            details.append(
                f"Soil pH: {format_number(plant.ph_range.min)}-{format_number(plant.ph_range.max)}"
            )
        if plant.edible:
            parts = ", ".join(plant.edible_parts) if plant.edible_parts else "yes"
            details.append(f"Edible: {parts}")
        if plant.toxicity and plant.toxicity != "none":
            details.append(f"Toxicity: {plant.toxicity}")
        if plant.sowing_instructions:
            details.append(f"Sowing: {plant.sowing_instructions}")
        blocks.append("\n".join(details))
    return CONTEXT_HEADER + CONTEXT_SEPARATOR.join(blocks)


def format_plant_for_data(plant: ProcessedPlantData) -> Dict[str, Any]:
    def _dump(value: Any) -> Any:
        return value.model_dump() if value is not None else None

    return {
        "identification": {
            "id": plant.id,
            "slug": plant.slug,
            "scientific_name": plant.scientific_name,
            "common_name": plant.common_name,
            "family": plant.family,
            "genus": plant.genus,
        },
        "characteristics": {
            "type": plant.duration,
            "ligneous_type": plant.ligneous_type,
            "growth_rate": plant.growth_rate,
            "max_height_cm": plant.maximum_height_cm,
            "avg_height_cm": plant.average_height_cm,
        },
        "care": {
            "light": {
                "level": plant.light_requirement,
                "description": plant.light_description,
            },
            "water": {
                "soil_humidity": plant.soil_humidity,
                "soil_humidity_description": plant.soil_humidity_description,
                "atmospheric_humidity": plant.humidity_requirement,
                "atmospheric_humidity_description": plant.humidity_description,
                "annual_precipitation_mm": _dump(plant.precipitation_range),
            },
            "soil": {
                "ph_range": _dump(plant.ph_range),
                "nutrient_level": plant.soil_nutriments,
            },
            "temperature": _dump(plant.temperature_range),
        },
        "timing": {
            "days_to_harvest": plant.days_to_harvest,
            "bloom_months": plant.bloom_months,
            "growth_months": plant.growth_months,
            "fruit_months": plant.fruit_months,
        },
        "sowing": plant.sowing_instructions,
        "safety": {
            "edible": plant.edible,
            "edible_parts": plant.edible_parts,
            "vegetable": plant.vegetable,
            "toxicity": plant.toxicity,
        },
        "appearance": {
            "flower_colors": plant.flower_colors,
            "foliage_colors": plant.foliage_colors,
            "fruit_colors": plant.fruit_colors,
            "image_url": plant.image_url,
        },
    }


def _format_header(plant: ProcessedPlantData) -> str:
    common_name = plant.common_name or "Unknown common name"
    header = f"**{common_name}** (*{plant.scientific_name}*)"
    taxonomy: List[str] = []
    if plant.family:
        taxonomy.append(f"Family: {plant.family}")
    if plant.genus:
        taxonomy.append(f"Genus: {plant.genus}")
    if taxonomy:
        header += "\n" + " | ".join(taxonomy)
    return header


def _format_quick_facts(plant: ProcessedPlantData) -> Optional[str]:
    facts: List[str] = []
    if plant.duration:
        facts.append(f"**Type:** {', '.join(capitalize_first(d) for d in plant.duration)}")
    if plant.ligneous_type:
        facts.append(f"**Growth Form:** {capitalize_first(plant.ligneous_type)}")
    if plant.growth_rate:
        facts.append(f"**Growth Rate:** {capitalize_first(plant.growth_rate)}")
    if plant.maximum_height_cm:
        height_m = plant.maximum_height_cm / 100
        height_ft = plant.maximum_height_cm / CM_PER_FOOT
        facts.append(f"**Max Height:** {height_m:.1f}m ({height_ft:.1f}ft)")
    if plant.flower_colors:
        facts.append(
            f"**Flower Colors:** {', '.join(capitalize_first(c) for c in plant.flower_colors)}"
        )
    if plant.foliage_colors:
        facts.append(
            f"**Foliage Colors:** {', '.join(capitalize_first(c) for c in plant.foliage_colors)}"
        )
    if not facts:
        return None
    return "**Quick Facts:**\n" + "\n".join(facts)


def _format_light(plant: ProcessedPlantData) -> Optional[str]:
    if not plant.light_requirement and not plant.light_description:
        return None
    parts: List[str] = []
    if plant.light_description:
        parts.append(plant.light_description)
    if plant.light_requirement is not None:
        parts.append(f"({format_number(plant.light_requirement)}/10 on the light scale)")
    return f"☀️ **Light Requirements:** {' '.join(parts)}"


def _format_water(plant: ProcessedPlantData) -> Optional[str]:
    parts: List[str] = []
    if plant.soil_humidity_description:
        parts.append(f"**Soil Moisture:** {plant.soil_humidity_description}")
    if plant.humidity_description:
        parts.append(f"**Air Humidity:** {plant.humidity_description}")
    if plant.precipitation_range:
        min_mm = plant.precipitation_range.min_mm
        max_mm = plant.precipitation_range.max_mm
        parts.append(
            f"**Annual Rainfall:** {format_number(min_mm)}-{format_number(max_mm)}mm "
            f"({min_mm / MM_PER_INCH:.1f}-{max_mm / MM_PER_INCH:.1f}in)"
        )
    if not parts:
        return None
    return "💧 **Water & Humidity:**\n" + "\n".join(parts)


def _format_soil(plant: ProcessedPlantData) -> Optional[str]:
    parts: List[str] = []
    if plant.ph_range:
        parts.append(
            f"**pH Range:** {format_number(plant.ph_range.min)} - {format_number(plant.ph_range.max)}"
        )
    if plant.soil_nutriments is not None:
        parts.append(
            f"**Nutrient Needs:** {describe_soil_nutrients(plant.soil_nutriments)} "
            f"({format_number(plant.soil_nutriments)}/10)"
        )
    if not parts:
        return None
    return "🌱 **Soil Requirements:**\n" + "\n".join(parts)


def _hardiness_note(min_c: float) -> str:
    if min_c <= -20:
        return " (very cold hardy)"
    if min_c <= -10:
        return " (cold hardy)"
    if min_c <= 0:
        return " (frost tolerant)"
    if min_c > 10:
        return " (tropical, no frost)"
    return ""


def _format_temperature(plant: ProcessedPlantData) -> Optional[str]:
    if not plant.temperature_range:
        return None
    min_c = plant.temperature_range.min_c
    max_c = plant.temperature_range.max_c
    return (
        f"🌡️ **Temperature Range:** {format_number(min_c)}°C to {format_number(max_c)}°C "
        f"({celsius_to_fahrenheit(min_c)}°F to {celsius_to_fahrenheit(max_c)}°F)"
        f"{_hardiness_note(min_c)}"
    )


def _format_growth(plant: ProcessedPlantData) -> Optional[str]:
    parts: List[str] = []
    if plant.bloom_months:
        parts.append(f"**Bloom Time:** {format_month_list(plant.bloom_months)}")
    if plant.growth_months:
        parts.append(f"**Active Growth:** {format_month_list(plant.growth_months)}")
    if plant.fruit_months:
        parts.append(f"**Fruiting:** {format_month_list(plant.fruit_months)}")
    if plant.days_to_harvest:
        parts.append(f"**Days to Harvest:** {plant.days_to_harvest} days")
    if plant.growth_description:
        parts.append(f"**Growth Notes:** {plant.growth_description}")
    if not parts:
        return None
    return "📅 **Growth & Timing:**\n" + "\n".join(parts)


def _format_safety(plant: ProcessedPlantData) -> Optional[str]:
    parts: List[str] = []
    if plant.edible:
        edible_parts = ", ".join(plant.edible_parts) if plant.edible_parts else "various parts"
        parts.append(f"✅ **Edible:** Yes ({edible_parts})")
        if plant.vegetable:
            parts.append("🥬 **Vegetable:** Yes")
    if plant.toxicity:
        marker = TOXICITY_MARKERS.get(plant.toxicity, HIGH_TOXICITY_MARKER)
        parts.append(f"{marker} **Toxicity:** {capitalize_first(plant.toxicity)}")
    if not parts:
        return None
    return "**Safety Information:**\n" + "\n".join(parts)
