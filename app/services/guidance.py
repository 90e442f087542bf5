"""Planting guidance derived from a species' restoration goal tags.

None of these helpers affect ranking. Each one is a keyword lookup over the
lower-cased ``Restoration Goal`` string, evaluated top to bottom with a
fixed fallback, so every function returns a value for any record.
"""
from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models import SpeciesCatalog, SpeciesRecord

GROWTH_RATES: Sequence[Tuple[Tuple[str, ...], str]] = (
    (("pioneer", "fast"), "Fast-growing (pioneer species)"),
    (("slow",), "Slow-growing (climax species)"),
)
DEFAULT_GROWTH_RATE = "Moderate growth rate"

MATURITY_AGES: Sequence[Tuple[Tuple[str, ...], str]] = (
    (("pioneer", "fast"), "3-5 years for early maturity"),
    (("timber",), "15-25 years for timber production"),
)
DEFAULT_MATURITY_AGE = "8-12 years for full maturity"

SPACINGS: Sequence[Tuple[Tuple[str, ...], str]] = (
    (("agroforestry",), "5-8 meters between trees for intercropping"),
    (("timber",), "3-5 meters for timber production"),
    (("erosion",), "2-4 meters for dense erosion control"),
)
DEFAULT_SPACING = "4-6 meters for general planting"

# Unlike the tables above, every matching row contributes a phrase.
BENEFITS: Sequence[Tuple[Tuple[str, ...], str]] = (
    (("biodiversity",), "Supports local wildlife and biodiversity"),
    (("carbon",), "Excellent carbon sequestration capacity"),
    (("erosion",), "Strong root system for erosion control"),
    (("nitrogen", "legume"), "Nitrogen-fixing capabilities improve soil fertility"),
    (("medicinal",), "Traditional medicinal uses"),
    (("food",), "Provides food/fruit for humans and wildlife"),
)
DEFAULT_BENEFITS = "Provides general ecological benefits including habitat and soil improvement."

RESTORATION_CATEGORIES = {
    "soil_improvement": ("Legume", "Nitrogen Fixing"),
    "erosion_control": ("Erosion Control", "Ground Cover"),
    "pioneer": ("Pioneer", "Fast Growing"),
    "biodiversity": ("Native", "Biodiversity"),
    "general_restoration": ("General Restoration",),
    "hardy_pioneer": ("Pioneer", "Drought Tolerant"),
}

HUMIDITY_BANDS = ((30, "Low"), (60, "Medium"), (80, "High"))

# Shown in place of a missing tolerance; these are not the filtering defaults.
DISPLAY_RANGES = {
    "pH Min": "5.5",
    "pH Max": "7.5",
    "Temp Min (°C)": "18",
    "Temp Max (°C)": "35",
    "Rainfall Min (mm)": "800",
    "Rainfall Max (mm)": "2000",
}


def _goals(species: SpeciesRecord) -> str:
    return species.restoration_goal.lower()


def _first_match(goals: str, table: Sequence[Tuple[Tuple[str, ...], str]], default: str) -> str:
    for keywords, result in table:
        if any(keyword in goals for keyword in keywords):
            return result
    return default


def _shown(species: SpeciesRecord, key: str) -> str:
    value = species.source_value(key)
    if value is None or isinstance(value, bool) or value in ("", 0):
        return DISPLAY_RANGES[key]
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _shown_range(species: SpeciesRecord, low_key: str, high_key: str) -> Tuple[str, str]:
    return _shown(species, low_key), _shown(species, high_key)


def growth_rate(species: SpeciesRecord) -> str:
    return _first_match(_goals(species), GROWTH_RATES, DEFAULT_GROWTH_RATE)


def maturity_age(species: SpeciesRecord) -> str:
    return _first_match(_goals(species), MATURITY_AGES, DEFAULT_MATURITY_AGE)


def optimal_spacing(species: SpeciesRecord) -> str:
    return _first_match(_goals(species), SPACINGS, DEFAULT_SPACING)


def ecological_benefits(species: SpeciesRecord) -> str:
    goals = _goals(species)
    phrases = [phrase for keywords, phrase in BENEFITS if any(k in goals for k in keywords)]
    if not phrases:
        return DEFAULT_BENEFITS
    return ". ".join(phrases) + "."


class PlantingGuide(BaseModel):
    """Establishment and care notes for one species."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    best_season: str
    planting_depth: str
    spacing: str
    watering_schedule: str
    sunlight_requirements: str
    soil_type: str
    ph_range: str = Field(alias="pHRange")
    temperature_range: str
    rainfall_range: str
    growth_rate: str
    maturity_age: str
    max_height: str
    pruning_instructions: str
    fertilization: str
    pest_management: str
    ecological_benefits: str
    companion_plants: str
    special_instructions: str


def planting_guide(species: SpeciesRecord) -> PlantingGuide:
    """Generated guide, with any curated ``PlantingGuide`` entries from the catalog taking precedence."""
    generated = PlantingGuide(
        best_season="Early rainy season (March-June) for best establishment",
        planting_depth="30-45 cm deep, depending on seedling size",
        spacing=optimal_spacing(species),
        watering_schedule="Weekly for first 3 months, then reduce to bi-weekly. Increase during dry spells.",
        sunlight_requirements=species.sunlight or "Full Sun to Partial Shade",
        soil_type=species.soil_type or "Well-draining loamy soil",
        ph_range="{} - {}".format(*_shown_range(species, "pH Min", "pH Max")),
        temperature_range="{}°C - {}°C".format(*_shown_range(species, "Temp Min (°C)", "Temp Max (°C)")),
        rainfall_range="{}mm - {}mm annually".format(
            *_shown_range(species, "Rainfall Min (mm)", "Rainfall Max (mm)")
        ),
        growth_rate=growth_rate(species),
        maturity_age=maturity_age(species),
        max_height=species.max_height or "15-25 meters",
        pruning_instructions="Light pruning during dormant season to maintain shape and remove dead branches",
        fertilization="Organic fertilizer annually during growing season. Compost application recommended.",
        pest_management=(
            "Monitor for common pests. Use organic treatments when necessary. "
            "Maintain tree health for natural resistance."
        ),
        ecological_benefits=ecological_benefits(species),
        companion_plants="Legumes for nitrogen fixation, ground covers for moisture retention",
        special_instructions=(
            "Protect young trees from strong winds and grazing animals. "
            "Mulch around base to retain moisture."
        ),
    )
    if not species.planting_guide:
        return generated

    curated = {
        key: str(value)
        for key, value in species.planting_guide.items()
        if value not in (None, "")
    }
    merged = generated.model_dump(by_alias=True)
    merged.update({key: value for key, value in curated.items() if key in merged})
    return PlantingGuide.model_validate(merged)


def match_percentage(score: float, ceiling: float = 60.0) -> int:
    """Display percentage for a score, rounded half up and capped at 100."""
    return min(int(math.floor(score / ceiling * 100 + 0.5)), 100)


def humidity_category(percent: float) -> str:
    for upper, label in HUMIDITY_BANDS:
        if percent < upper:
            return label
    return "Very High"


def species_for_goal(
    catalog: SpeciesCatalog, category: str, limit: int = 3
) -> List[SpeciesRecord]:
    """First ``limit`` species (catalog order) suited to a restoration category."""
    keywords: Optional[Tuple[str, ...]] = RESTORATION_CATEGORIES.get(category)
    if not keywords:
        return []
    lowered = [keyword.lower() for keyword in keywords]
    matches = [
        record for record in catalog
        if any(keyword in _goals(record) for keyword in lowered)
    ]
    return matches[:limit]
