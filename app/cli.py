"""Command line front end: rank catalog species for a site."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from app.config import get_settings
from app.models import Criteria, SpeciesCatalog
from app.services import data_loader
from app.services.guidance import humidity_category, match_percentage
from app.services.scoring import ScoredSpecies, recommend


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Recommend tree species for a planting site")
    parser.add_argument("--catalog", type=Path, default=None, help="Optional override path for the species JSON")
    parser.add_argument("--rainfall", type=float, default=None, help="Annual rainfall (mm)")
    parser.add_argument("--temp-min", type=float, default=None, help="Minimum temperature (°C)")
    parser.add_argument("--temp-max", type=float, default=None, help="Maximum temperature (°C)")
    parser.add_argument("--ph-min", type=float, default=5.5)
    parser.add_argument("--ph-max", type=float, default=7.0)
    parser.add_argument("--soil", default="", help="Soil type, e.g. Loamy")
    parser.add_argument("--sunlight", default="", help="Sunlight exposure, e.g. 'Full Sun'")
    parser.add_argument("--humidity", default="", help="Humidity category (Low, Medium, High, Very High)")
    parser.add_argument("--humidity-pct", type=float, default=None, help="Relative humidity %% (overrides --humidity)")
    parser.add_argument("--goal", dest="goals", action="append", default=[], help="Restoration goal; repeatable")
    parser.add_argument("--share", action="store_true", help="Also print a share token for these criteria")
    return parser


def criteria_from_args(args: argparse.Namespace) -> Criteria:
    humidity = args.humidity
    if args.humidity_pct is not None:
        humidity = humidity_category(args.humidity_pct)
    return Criteria(
        soil=args.soil,
        ph_min=args.ph_min,
        ph_max=args.ph_max,
        rainfall=args.rainfall,
        temp_min=args.temp_min,
        temp_max=args.temp_max,
        humidity=humidity,
        sunlight=args.sunlight,
        goals=args.goals,
    )


def format_results(results: List[ScoredSpecies], ceiling: float) -> str:
    if not results:
        return "No species match these site conditions."
    lines = []
    for rank, result in enumerate(results, start=1):
        record = result.species
        name = record.species_name
        if record.common_name:
            name = f"{name} ({record.common_name})"
        lines.append(
            f"{rank}. {name}: score {result.score:g}, {match_percentage(result.score, ceiling)}% match"
        )
    return "\n".join(lines)


def run(args: argparse.Namespace, parser: argparse.ArgumentParser) -> List[ScoredSpecies]:
    criteria = criteria_from_args(args)
    missing = criteria.missing_required()
    if missing:
        parser.error(f"missing required site conditions: {', '.join(missing)}")

    settings = get_settings()
    catalog: SpeciesCatalog
    if args.catalog is not None:
        catalog = data_loader.load_catalog_file(args.catalog)
    else:
        catalog = data_loader.load_species_catalog()

    results = recommend(catalog, criteria, limit=settings.max_results, min_score=settings.min_score)
    print(format_results(results, settings.match_score_ceiling))
    if args.share:
        print(f"Share token: {criteria.to_share_token()}")
    return results


def main(argv: Optional[List[str]] = None) -> None:
    level = getattr(logging, get_settings().log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(levelname)s %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)
    run(args, parser)


if __name__ == "__main__":
    main()
