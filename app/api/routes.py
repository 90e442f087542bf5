"""API routes for the species recommendation service."""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from app.config import get_settings
from app.models import Criteria, SpeciesCatalog
from app.services import data_loader
from app.services.guidance import match_percentage, planting_guide, species_for_goal
from app.services.scoring import ScoredSpecies, recommend

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["recommendations"])


def _get_species_catalog() -> SpeciesCatalog:
    return data_loader.load_species_catalog()


def _serialize(results: List[ScoredSpecies], ceiling: float) -> List[dict]:
    payload = []
    for result in results:
        item = result.as_dict()
        item["matchPercentage"] = match_percentage(result.score, ceiling)
        item["components"] = [
            {"name": component.name, "detail": component.detail, "points": component.points}
            for component in result.components
        ]
        payload.append(item)
    return payload


def _run_recommendation(criteria: Criteria) -> dict:
    missing = criteria.missing_required()
    if missing:
        raise HTTPException(
            status_code=422,
            detail=f"Missing required site conditions: {', '.join(missing)}",
        )

    settings = get_settings()
    catalog = _get_species_catalog()
    results = recommend(catalog, criteria, limit=settings.max_results, min_score=settings.min_score)
    logger.info(
        "Recommended %d of %d species (rainfall=%s, goals=%s)",
        len(results), len(catalog), criteria.rainfall, criteria.goals,
    )
    return {
        "count": len(results),
        "criteria": criteria.model_dump(mode="json", by_alias=True),
        "share_token": criteria.to_share_token(),
        "results": _serialize(results, settings.match_score_ceiling),
    }


@router.get("/health", summary="Health check")
def health() -> dict:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc)}


@router.get("/species", summary="List catalog species")
def list_species(
    goal: Optional[str] = Query(None, description="Restoration category, e.g. 'erosion_control'"),
) -> dict:
    catalog = _get_species_catalog()
    if goal:
        names = [record.species_name for record in species_for_goal(catalog, goal)]
    else:
        names = catalog.list_names()
    return {"species": names, "soil_types": catalog.soil_types()}


@router.get("/species/{species_name}/guide", summary="Planting guide for one species")
def species_guide(species_name: str) -> dict:
    catalog = _get_species_catalog()
    try:
        record = catalog.get(species_name)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {
        "species_name": record.species_name,
        "common_name": record.common_name,
        "guide": planting_guide(record).model_dump(by_alias=True),
    }


@router.post("/recommend", summary="Rank species for a site")
def recommend_species(criteria: Criteria) -> dict:
    return _run_recommendation(criteria)


@router.get("/recommend/shared", summary="Rank species for a shared criteria link")
def recommend_shared(data: str = Query(..., description="Share token from a previous recommendation")) -> dict:
    try:
        criteria = Criteria.from_share_token(data)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _run_recommendation(criteria)
