"""Deterministic recommendation engine for tree species."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from app.models import Criteria, SpeciesRecord

MAX_RESULTS = 6
MIN_SCORE = 15.0

SOIL_MATCH_POINTS = 15.0
GOAL_MATCH_POINTS = 20.0
SUNLIGHT_MATCH_POINTS = 5.0

# Slack applied to a species' stated range before rejecting a site.
RAINFALL_LOWER_SLACK = 0.8
RAINFALL_UPPER_SLACK = 1.2
TEMP_LOWER_SLACK = 0.9
TEMP_UPPER_SLACK = 1.1

# Goal keyword -> SpeciesMetrics attribute added to the score.
METRIC_BOOSTS = (
    (("carbon",), "carbon_sequestration"),
    (("biodiversity",), "biodiversity_value"),
    (("drought",), "drought_tolerance"),
    (("timber", "growth"), "growth_speed"),
)


def _present(value: Optional[float]) -> bool:
    """A criterion only constrains the search when it is set and non-zero."""
    return value is not None and not math.isnan(value) and value != 0


@dataclass
class ScoreComponent:
    name: str
    detail: str
    points: float


@dataclass
class ScoredSpecies:
    species: SpeciesRecord
    score: float
    components: List[ScoreComponent] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        payload = self.species.to_catalog_dict()
        payload["score"] = self.score
        return payload


def passes_survival_filters(species: SpeciesRecord, criteria: Criteria) -> bool:
    """Hard rainfall, temperature and pH checks applied before any scoring."""
    rainfall = criteria.rainfall
    if _present(rainfall):
        if rainfall < species.rainfall_min * RAINFALL_LOWER_SLACK:
            return False
        if rainfall > species.rainfall_max * RAINFALL_UPPER_SLACK:
            return False

    if _present(criteria.temp_min) and _present(criteria.temp_max):
        # Interval overlap against the relaxed species range, not containment.
        if criteria.temp_max < species.temp_min * TEMP_LOWER_SLACK:
            return False
        if criteria.temp_min > species.temp_max * TEMP_UPPER_SLACK:
            return False

    if _present(criteria.ph_min) and _present(criteria.ph_max):
        if criteria.ph_max < species.ph_min or criteria.ph_min > species.ph_max:
            return False

    return True


def score_species(species: SpeciesRecord, criteria: Criteria) -> ScoredSpecies:
    """Additive suitability score for a species that survived the filters."""
    components: List[ScoreComponent] = []

    if criteria.soil and species.soil_type and criteria.soil.lower() in species.soil_type.lower():
        components.append(ScoreComponent(
            name="soil",
            detail=f"soil '{species.soil_type}' matches '{criteria.soil}'",
            points=SOIL_MATCH_POINTS,
        ))

    tags = species.goal_tags
    metrics = species.metrics
    for user_goal in criteria.goals:
        goal = user_goal.lower()
        if any(goal in tag for tag in tags):
            components.append(ScoreComponent(
                name="goal",
                detail=f"restoration goal '{user_goal}' listed",
                points=GOAL_MATCH_POINTS,
            ))
        for keywords, attribute in METRIC_BOOSTS:
            if not any(keyword in goal for keyword in keywords):
                continue
            boost = getattr(metrics, attribute)
            if boost:
                components.append(ScoreComponent(
                    name=attribute,
                    detail=f"{attribute}={boost:g} for goal '{user_goal}'",
                    points=boost,
                ))

    if criteria.sunlight and species.sunlight and criteria.sunlight in species.sunlight:
        components.append(ScoreComponent(
            name="sunlight",
            detail=f"sunlight '{species.sunlight}' includes '{criteria.sunlight}'",
            points=SUNLIGHT_MATCH_POINTS,
        ))

    score = sum(component.points for component in components)
    return ScoredSpecies(species=species, score=score, components=components)


def recommend(
    catalog: Iterable[SpeciesRecord],
    criteria: Criteria,
    limit: int = MAX_RESULTS,
    min_score: float = MIN_SCORE,
) -> List[ScoredSpecies]:
    """Rank the catalog for the given site.

    Species failing a survival filter are never scored. Survivors scoring
    below ``min_score`` are dropped, the rest are ordered by descending score
    with catalog order kept among ties, and at most ``limit`` are returned.
    """
    scored = [
        score_species(species, criteria)
        for species in catalog
        if passes_survival_filters(species, criteria)
    ]
    kept = [result for result in scored if result.score >= min_score]
    # sorted() is stable under reverse=True, so equal scores keep catalog order.
    kept = sorted(kept, key=lambda result: result.score, reverse=True)
    return kept[:limit]
