from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain.normalizers import normalize_plant_name


Confidence = Literal["high", "medium", "low"]
MentionSource = Literal["exact_match", "common_name", "pattern", "context"]

CONFIDENCE_RANK: Dict[str, int] = {"high": 0, "medium": 1, "low": 2}


class PlantMention(BaseModel):
    """Candidate plant name found in free text."""

    model_config = ConfigDict(frozen=True)

    original_text: str
    normalized_name: str
    confidence: Confidence
    source: MentionSource

    @field_validator("normalized_name", mode="before")
    @classmethod
    def normalize_name(cls, value: Any) -> str:
        return normalize_plant_name(str(value or ""))

    @property
    def rank(self) -> int:
        return CONFIDENCE_RANK[self.confidence]


class PhRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: float
    max: float


class TemperatureRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_c: float
    max_c: float


class PrecipitationRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_mm: float
    max_mm: float


class PlantImages(BaseModel):
    model_config = ConfigDict(frozen=True)

    flower: List[str] = Field(default_factory=list)
    leaf: List[str] = Field(default_factory=list)
    habit: List[str] = Field(default_factory=list)
    fruit: List[str] = Field(default_factory=list)


class ProcessedPlantData(BaseModel):
    """Normalized plant profile built from a single remote species record.

    Instances are frozen: the same profile object is shared between the
    species cache, the common-name cache and any number of conversation
    registries.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    slug: str
    scientific_name: str
    common_name: Optional[str] = None
    family: str = ""
    genus: str = ""
    rank: str = "species"

    duration: Optional[List[str]] = None
    edible: bool = False
    edible_parts: Optional[List[str]] = None
    vegetable: bool = False
    toxicity: Optional[str] = None

    ligneous_type: Optional[str] = None
    growth_rate: Optional[str] = None
    average_height_cm: Optional[float] = None
    maximum_height_cm: Optional[float] = None

    light_requirement: Optional[float] = Field(
        default=None, description="Trefle light scale, 0 (no light) to 10 (very intense)."
    )
    light_description: Optional[str] = None
    humidity_requirement: Optional[float] = Field(
        default=None, description="Atmospheric humidity scale, 0 to 10."
    )
    humidity_description: Optional[str] = None
    ph_range: Optional[PhRange] = None
    soil_humidity: Optional[float] = None
    soil_humidity_description: Optional[str] = None
    soil_nutriments: Optional[float] = None
    soil_nutriments_description: Optional[str] = None
    temperature_range: Optional[TemperatureRange] = None
    precipitation_range: Optional[PrecipitationRange] = None

    days_to_harvest: Optional[int] = None
    sowing_instructions: Optional[str] = None
    growth_description: Optional[str] = None
    bloom_months: Optional[List[str]] = None
    growth_months: Optional[List[str]] = None
    fruit_months: Optional[List[str]] = None

    flower_colors: Optional[List[str]] = None
    foliage_colors: Optional[List[str]] = None
    fruit_colors: Optional[List[str]] = None
    image_url: Optional[str] = None
    images: PlantImages = Field(default_factory=PlantImages)

    raw: Dict[str, Any] = Field(default_factory=dict, repr=False)

    @property
    def display_name(self) -> str:
        return self.common_name or self.scientific_name

    @property
    def full_name(self) -> str:
        if self.common_name:
            return f"{self.common_name} ({self.scientific_name})"
        return self.scientific_name


class SpeciesSummary(BaseModel):
    """Light species record returned by the search endpoint."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int
    slug: str = ""
    scientific_name: str
    common_name: Optional[str] = None
    family: Optional[str] = None
    family_common_name: Optional[str] = None
    genus: Optional[str] = None
    rank: Optional[str] = None
    status: Optional[str] = None
    year: Optional[int] = None
    author: Optional[str] = None
    image_url: Optional[str] = None


class CacheStats(BaseModel):
    size: int
    oldest_age: Optional[float] = None
    newest_age: Optional[float] = None


class PlantContextResult(BaseModel):
    """Plant context injected into the response composer's prompt."""

    text: str = ""
    plant_names: List[str] = Field(default_factory=list)
    plant_scientific_names: List[str] = Field(default_factory=list)
    plant_count: int = 0
    plant_summary: str = ""
    plants: List[Dict[str, Any]] = Field(default_factory=list)
    raw_plants: List[ProcessedPlantData] = Field(default_factory=list)
    mentions: List[PlantMention] = Field(default_factory=list)
    not_found: List[str] = Field(default_factory=list)


class PlantInfoResult(BaseModel):
    """Reply payload for an explicit plant information request."""

    text: str = ""
    plants: List[Dict[str, Any]] = Field(default_factory=list)
    not_found: List[str] = Field(default_factory=list)
    triggered: bool = False
