"""Data loading utilities for the species catalog."""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, List

import requests
from pydantic import ValidationError

from app.config import get_settings
from app.models import SpeciesCatalog, SpeciesRecord

logger = logging.getLogger(__name__)


def _load_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"Required data file missing: {path}")
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def build_catalog(payload: Any) -> SpeciesCatalog:
    """Validate a decoded JSON array of catalog entries.

    Entries that cannot be read as a species (no name, not an object) are
    skipped with a warning; incomplete tolerances are defaulted by the model.
    """
    if not isinstance(payload, list) or not payload:
        raise ValueError("Species data is empty or invalid.")

    records: List[SpeciesRecord] = []
    for index, entry in enumerate(payload):
        try:
            records.append(SpeciesRecord.model_validate(entry))
        except ValidationError as exc:
            logger.warning("Skipping catalog entry %d: %s", index, exc.errors()[0]["msg"])
            continue
        record = records[-1]
        if record.ph_min > record.ph_max or record.rainfall_min > record.rainfall_max or record.temp_min > record.temp_max:
            logger.warning("Catalog entry '%s' has an inverted tolerance range", record.species_name)

    if not records:
        raise ValueError("Species data is empty or invalid.")
    return SpeciesCatalog(species=tuple(records))


def load_catalog_file(path: Path) -> SpeciesCatalog:
    catalog = build_catalog(_load_json(path))
    logger.info("Loaded %d species from %s", len(catalog), path)
    return catalog


def fetch_catalog(url: str, timeout: float = 10.0) -> SpeciesCatalog:
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    catalog = build_catalog(response.json())
    logger.info("Loaded %d species from %s", len(catalog), url)
    return catalog


@lru_cache(1)
def load_species_catalog() -> SpeciesCatalog:
    settings = get_settings()
    if settings.species_catalog_url:
        return fetch_catalog(settings.species_catalog_url, timeout=settings.catalog_timeout_seconds)
    return load_catalog_file(settings.species_catalog_path)
