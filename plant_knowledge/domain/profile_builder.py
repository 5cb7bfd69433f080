from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..schemas.models import (
    PhRange,
    PlantImages,
    PrecipitationRange,
    ProcessedPlantData,
    TemperatureRange,
)


DEFAULT_PH_MIN = 5.5
DEFAULT_PH_MAX = 7.5
DEFAULT_TEMP_MIN_C = -10.0
DEFAULT_TEMP_MAX_C = 35.0
DEFAULT_PRECIP_MIN_MM = 0.0
DEFAULT_PRECIP_MAX_MM = 2000.0

# upper bounds of the 0-10 scale bands; anything above the last is the top band
SCALE_BAND_LIMITS = (2, 4, 6, 8)

LIGHT_BANDS = (
    "Low light (shade tolerant)",
    "Partial shade",
    "Partial sun",
    "Full sun",
    "Very high light (full sun required)",
)
HUMIDITY_BANDS = (
    "Very dry (drought tolerant)",
    "Low humidity",
    "Moderate humidity",
    "High humidity",
    "Very high humidity (tropical)",
)
SOIL_HUMIDITY_BANDS = (
    "Dry soil (xerophyte)",
    "Well-drained soil",
    "Moist soil",
    "Wet soil",
    "Waterlogged/aquatic",
)
SOIL_NUTRIENT_BANDS = (
    "Very low (oligotrophic)",
    "Low",
    "Moderate",
    "High",
    "Very high (hypereutrophic)",
)


def _parse_float(value: object) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_int(value: object) -> Optional[int]:
    number = _parse_float(value)
    if number is None:
        return None
    return int(number)


def _as_dict(value: object) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _string_list(value: object) -> Optional[List[str]]:
    if not isinstance(value, list):
        return None
    items = [str(item) for item in value if item is not None and str(item).strip()]
    return items


def _optional_text(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _describe_scale(level: object, bands: Sequence[str]) -> Optional[str]:
    value = _parse_float(level)
    if value is None:
        return None
    for limit, label in zip(SCALE_BAND_LIMITS, bands):
        if value <= limit:
            return label
    return bands[-1]


def describe_light_level(level: object) -> Optional[str]:
    return _describe_scale(level, LIGHT_BANDS)


def describe_humidity_level(level: object) -> Optional[str]:
    return _describe_scale(level, HUMIDITY_BANDS)


def describe_soil_humidity(level: object) -> Optional[str]:
    return _describe_scale(level, SOIL_HUMIDITY_BANDS)


def describe_soil_nutrients(level: object) -> Optional[str]:
    return _describe_scale(level, SOIL_NUTRIENT_BANDS)


def _measurement(value: object, unit: str) -> Optional[float]:
    return _parse_float(_as_dict(value).get(unit))


def _extract_ph_range(growth: Dict[str, Any]) -> Optional[PhRange]:
    ph_min = _parse_float(growth.get("ph_minimum"))
    ph_max = _parse_float(growth.get("ph_maximum"))
    if ph_min is None and ph_max is None:
        return None
    return PhRange(
        min=ph_min if ph_min is not None else DEFAULT_PH_MIN,
        max=ph_max if ph_max is not None else DEFAULT_PH_MAX,
    )


def _extract_temperature_range(growth: Dict[str, Any]) -> Optional[TemperatureRange]:
    low = growth.get("minimum_temperature")
    high = growth.get("maximum_temperature")
    if not low and not high:
        return None
    min_c = _measurement(low, "deg_c")
    max_c = _measurement(high, "deg_c")
    return TemperatureRange(
        min_c=min_c if min_c is not None else DEFAULT_TEMP_MIN_C,
        max_c=max_c if max_c is not None else DEFAULT_TEMP_MAX_C,
    )


def _extract_precipitation_range(growth: Dict[str, Any]) -> Optional[PrecipitationRange]:
    low = growth.get("minimum_precipitation")
    high = growth.get("maximum_precipitation")
    if not low and not high:
        return None
    min_mm = _measurement(low, "mm")
    max_mm = _measurement(high, "mm")
    return PrecipitationRange(
        min_mm=min_mm if min_mm is not None else DEFAULT_PRECIP_MIN_MM,
        max_mm=max_mm if max_mm is not None else DEFAULT_PRECIP_MAX_MM,
    )


def _image_urls(images: Dict[str, Any], kind: str) -> List[str]:
    urls: List[str] = []
    for item in images.get(kind) or []:
        url = _as_dict(item).get("image_url")
        if url:
            urls.append(str(url))
    return urls


def _colors(section: object) -> Optional[List[str]]:
    return _string_list(_as_dict(section).get("color"))


def _split_identity(raw: Dict[str, Any]) -> Tuple[int, str, str]:
    species_id = _parse_int(raw.get("id"))
    if species_id is None:
        raise ValueError("species record is missing a numeric id")
    scientific_name = _optional_text(raw.get("scientific_name"))
    if not scientific_name:
        raise ValueError(f"species {species_id} is missing a scientific name")
    slug = _optional_text(raw.get("slug")) or str(species_id)
    return species_id, slug, scientific_name


def build_plant_profile(raw: Dict[str, Any]) -> ProcessedPlantData:
    """Turn a full species record into a :class:`ProcessedPlantData`.

    Missing sections are tolerated; only ``id`` and ``scientific_name`` are
    required. Qualitative descriptions are derived from the 0-10 scale
    fields, and one-sided ranges are completed with fixed defaults.

    Raises:
        ValueError: if the record has no id or scientific name.
    """
    if not isinstance(raw, dict):
        raise ValueError("species record must be a JSON object")
    species_id, slug, scientific_name = _split_identity(raw)
    growth = _as_dict(raw.get("growth"))
    specs = _as_dict(raw.get("specifications"))
    images = _as_dict(raw.get("images"))

    light = _parse_float(growth.get("light"))
    humidity = _parse_float(growth.get("atmospheric_humidity"))
    soil_humidity = _parse_float(growth.get("soil_humidity"))
    soil_nutriments = _parse_float(growth.get("soil_nutriments"))

    return ProcessedPlantData(
        id=species_id,
        slug=slug,
        scientific_name=scientific_name,
        common_name=_optional_text(raw.get("common_name")),
        family=_optional_text(raw.get("family")) or "",
        genus=_optional_text(raw.get("genus")) or "",
        rank=_optional_text(raw.get("rank")) or "species",
        duration=_string_list(raw.get("duration")),
        edible=bool(raw.get("edible") or False),
        edible_parts=_string_list(raw.get("edible_part")),
        vegetable=bool(raw.get("vegetable") or False),
        toxicity=_optional_text(specs.get("toxicity")),
        ligneous_type=_optional_text(specs.get("ligneous_type")),
        growth_rate=_optional_text(specs.get("growth_rate")),
        average_height_cm=_measurement(specs.get("average_height"), "cm"),
        maximum_height_cm=_measurement(specs.get("maximum_height"), "cm"),
        light_requirement=light,
        light_description=describe_light_level(light),
        humidity_requirement=humidity,
        humidity_description=describe_humidity_level(humidity),
        ph_range=_extract_ph_range(growth),
        soil_humidity=soil_humidity,
        soil_humidity_description=describe_soil_humidity(soil_humidity),
        soil_nutriments=soil_nutriments,
        soil_nutriments_description=describe_soil_nutrients(soil_nutriments),
        temperature_range=_extract_temperature_range(growth),
        precipitation_range=_extract_precipitation_range(growth),
        days_to_harvest=_parse_int(growth.get("days_to_harvest")),
        sowing_instructions=_optional_text(growth.get("sowing")),
        growth_description=_optional_text(growth.get("description")),
        bloom_months=_string_list(growth.get("bloom_months")),
        growth_months=_string_list(growth.get("growth_months")),
        fruit_months=_string_list(growth.get("fruit_months")),
        flower_colors=_colors(raw.get("flower")),
        foliage_colors=_colors(raw.get("foliage")),
        fruit_colors=_colors(raw.get("fruit_or_seed")),
        image_url=_optional_text(raw.get("image_url")),
        images=PlantImages(
            flower=_image_urls(images, "flower"),
            leaf=_image_urls(images, "leaf"),
            habit=_image_urls(images, "habit"),
            fruit=_image_urls(images, "fruit"),
        ),
        raw=raw,
    )
