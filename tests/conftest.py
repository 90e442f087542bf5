"""
Shared pytest fixtures for the species recommender test suite.

Provides:
  - ``make_species``: factory for catalog records in the external key format.
  - ``sample_catalog_path`` / ``sample_catalog``: the bundled data/species.json.
  - ``client``: FastAPI TestClient with the catalog loader pointed at the sample.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

from app.models import SpeciesCatalog, SpeciesRecord
from app.services import data_loader

SAMPLE_CATALOG = Path(__file__).resolve().parents[1] / "data" / "species.json"


@pytest.fixture
def make_species() -> Callable[..., SpeciesRecord]:
    """Build a record shaped like species "A" of the reference scenario.

    Keyword overrides use the catalog's external keys, e.g.
    ``make_species("B", **{"Soil Type": "Sandy"})``. Passing ``None`` for a
    key removes it from the entry.
    """

    def _make(name: str = "A", **overrides: Any) -> SpeciesRecord:
        entry: dict = {
            "Species Name": name,
            "Rainfall Min (mm)": 800,
            "Rainfall Max (mm)": 2000,
            "Temp Min (°C)": 20,
            "Temp Max (°C)": 35,
            "pH Min": 5,
            "pH Max": 7,
            "Soil Type": "Loamy",
            "Restoration Goal": "Pioneer, Fast Growing",
        }
        for key, value in overrides.items():
            if value is None:
                entry.pop(key, None)
            else:
                entry[key] = value
        return SpeciesRecord.model_validate(entry)

    return _make


@pytest.fixture
def sample_catalog_path() -> Path:
    return SAMPLE_CATALOG


@pytest.fixture
def sample_catalog() -> SpeciesCatalog:
    return data_loader.load_catalog_file(SAMPLE_CATALOG)


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch, sample_catalog: SpeciesCatalog) -> TestClient:
    monkeypatch.setattr(data_loader, "load_species_catalog", lambda: sample_catalog)
    from app.main import app

    return TestClient(app)
