"""
Tests for app/services/scoring.py.

What we test
------------
passes_survival_filters():
  - Rainfall tolerance band of -20% / +20% around the species range.
  - Temperature interval overlap against the -10% / +10% relaxed range.
  - pH is a pure interval-overlap test.
  - Missing, zero or NaN criteria skip the corresponding filter.
  - Missing species tolerances default to permissive bounds.

score_species():
  - Soil, goal, metric and sunlight contributions.

recommend():
  - Reference scenarios, threshold, cap, ordering, tie-break, determinism.
"""

from __future__ import annotations

import copy

import pytest

from app.models import Criteria, SpeciesCatalog
from app.services.scoring import passes_survival_filters, recommend, score_species


def _site(**kwargs) -> Criteria:
    values = {"rainfall": 1000, "temp_min": 22, "temp_max": 30}
    values.update(kwargs)
    return Criteria(**values)


# ── Reference scenarios ──────────────────────────────────────────────────────

def test_soil_and_goal_scenario(make_species):
    catalog = [make_species("A")]
    criteria = _site(soil="Loamy", goals=["pioneer"])

    results = recommend(catalog, criteria)

    assert [r.species.species_name for r in results] == ["A"]
    assert results[0].score == 35


def test_rainfall_above_band_returns_nothing(make_species):
    criteria = _site(rainfall=5000)
    assert recommend([make_species("A")], criteria) == []


def test_carbon_goal_without_metrics_only_earns_text_match(make_species):
    species = make_species("C", **{"Restoration Goal": "Carbon, Timber", "Soil Type": "Sandy"})
    result = score_species(species, _site(goals=["carbon"]))
    assert result.score == 20
    assert [c.name for c in result.components] == ["goal"]


def test_empty_catalog_is_not_an_error():
    assert recommend([], _site(goals=["pioneer"])) == []


# ── Survival filters ─────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "rainfall, survives",
    [(639, False), (640, True), (2400, True), (2401, False)],
)
def test_rainfall_band_edges(make_species, rainfall, survives):
    assert passes_survival_filters(make_species(), _site(rainfall=rainfall)) is survives


def test_temperature_filter_uses_interval_overlap(make_species):
    species = make_species()  # 20-35 °C, relaxed to 18-38.5
    assert passes_survival_filters(species, _site(temp_min=10, temp_max=17)) is False
    assert passes_survival_filters(species, _site(temp_min=10, temp_max=18.5)) is True
    assert passes_survival_filters(species, _site(temp_min=38, temp_max=45)) is True
    assert passes_survival_filters(species, _site(temp_min=39, temp_max=45)) is False


def test_ph_overlap_is_not_containment(make_species):
    species = make_species(**{"pH Min": 5.0, "pH Max": 6.5})
    assert passes_survival_filters(species, _site(ph_min=6.0, ph_max=7.5)) is True


def test_disjoint_ph_is_rejected(make_species):
    species = make_species(**{"pH Min": 4.0, "pH Max": 5.0})
    assert passes_survival_filters(species, _site(ph_min=6.0, ph_max=7.0)) is False


def test_missing_criteria_skip_filters(make_species):
    species = make_species()
    criteria = Criteria(rainfall=0, temp_min=float("nan"), temp_max=60)
    assert passes_survival_filters(species, criteria) is True


def test_species_without_tolerances_is_never_filtered(make_species):
    species = make_species(**{
        "Rainfall Min (mm)": None,
        "Rainfall Max (mm)": None,
        "Temp Min (°C)": None,
        "Temp Max (°C)": None,
        "pH Min": None,
        "pH Max": None,
    })
    assert passes_survival_filters(species, _site(rainfall=3500, temp_min=5, temp_max=42)) is True


def test_filtered_species_never_appear_even_with_high_score(make_species):
    strong = make_species(
        "Dry",
        **{"Rainfall Max (mm)": 500, "Restoration Goal": "Pioneer, Carbon, Biodiversity"},
    )
    criteria = _site(soil="Loamy", goals=["pioneer", "carbon", "biodiversity"])
    assert recommend([strong], criteria) == []


# ── Scoring rules ────────────────────────────────────────────────────────────

def test_soil_match_is_case_insensitive_substring(make_species):
    species = make_species(**{"Soil Type": "Sandy Loam", "Restoration Goal": ""})
    assert score_species(species, _site(soil="loam")).score == 15


def test_each_matched_goal_adds_twenty(make_species):
    matching = make_species("M", **{"Restoration Goal": "Pioneer, Erosion Control"})
    other = make_species("O", **{"Restoration Goal": "Ornamental"})
    criteria = _site(soil="Loamy", goals=["pioneer", "erosion"])

    diff = score_species(matching, criteria).score - score_species(other, criteria).score

    assert diff >= 40


def test_metric_boosts_follow_goal_keywords(make_species):
    species = make_species(**{
        "Restoration Goal": "Carbon, Biodiversity",
        "Soil Type": "Sandy",
        "Metrics": {
            "GrowthSpeed": 8,
            "CarbonSequestration": 9,
            "BiodiversityValue": 7,
            "DroughtTolerance": 6,
        },
    })
    assert score_species(species, _site(goals=["carbon"])).score == 29
    assert score_species(species, _site(goals=["Biodiversity"])).score == 27
    # No tag contains these goals, so only the metric boosts apply.
    assert score_species(species, _site(goals=["drought"])).score == 6
    assert score_species(species, _site(goals=["timber"])).score == 8
    assert score_species(species, _site(goals=["fast growth"])).score == 8


def test_sunlight_bonus(make_species):
    species = make_species(**{"Sunlight": "Full Sun to Partial Shade", "Restoration Goal": ""})
    assert score_species(species, _site(sunlight="Full Sun")).score == 5
    assert score_species(species, _site(sunlight="Deep Shade")).score == 0


# ── Ranking ──────────────────────────────────────────────────────────────────

def test_results_below_threshold_are_dropped(make_species):
    weak = make_species("Weak", **{"Soil Type": "Clay", "Restoration Goal": "", "Sunlight": "Full Sun"})
    results = recommend([weak], _site(sunlight="Full Sun", soil="Loamy"))
    assert results == []


def test_output_is_capped_at_six_and_ties_keep_catalog_order(make_species):
    catalog = [make_species(f"S{i}") for i in range(9)]
    results = recommend(catalog, _site(soil="Loamy", goals=["pioneer"]))

    assert len(results) == 6
    assert [r.species.species_name for r in results] == [f"S{i}" for i in range(6)]


def test_results_sorted_by_descending_score(make_species):
    catalog = [
        make_species("Soil only", **{"Restoration Goal": "Ornamental"}),
        make_species("Soil and goal"),
        make_species("Goal only", **{"Soil Type": "Clay"}),
        make_species("Everything", **{"Sunlight": "Full Sun"}),
    ]
    results = recommend(catalog, _site(soil="Loamy", goals=["pioneer"], sunlight="Full Sun"))

    assert [r.species.species_name for r in results] == [
        "Everything", "Soil and goal", "Goal only", "Soil only",
    ]
    scores = [r.score for r in results]
    assert scores == sorted(scores, reverse=True)
    assert all(score >= 15 for score in scores)


def test_recommend_is_deterministic_and_leaves_catalog_untouched(sample_catalog: SpeciesCatalog):
    before = copy.deepcopy(sample_catalog)
    criteria = _site(rainfall=1100, goals=["carbon", "biodiversity"], soil="Loam")

    first = recommend(sample_catalog, criteria)
    second = recommend(sample_catalog, criteria)

    assert [(r.species.species_name, r.score) for r in first] == [
        (r.species.species_name, r.score) for r in second
    ]
    assert sample_catalog == before


def test_as_dict_uses_catalog_keys(make_species):
    result = recommend([make_species("A")], _site(soil="Loamy", goals=["pioneer"]))[0]
    payload = result.as_dict()
    assert payload["Species Name"] == "A"
    assert payload["score"] == 35


def test_as_dict_keeps_sparse_entries_as_supplied(make_species):
    sparse = make_species(
        "Sparse",
        **{"Rainfall Min (mm)": None, "pH Max": None, "Rainfall Max (mm)": ""},
    )
    payload = recommend([sparse], _site(soil="Loamy", goals=["pioneer"]))[0].as_dict()

    assert payload["score"] == 35
    assert payload["Rainfall Max (mm)"] == ""
    for filled_in in ("Rainfall Min (mm)", "pH Max", "Metrics", "Sunlight", "Common Name"):
        assert filled_in not in payload
