"""Domain models for the species recommendation service."""

from .criteria import Criteria
from .species import SpeciesCatalog, SpeciesMetrics, SpeciesRecord

__all__ = [
    "Criteria",
    "SpeciesMetrics",
    "SpeciesRecord",
    "SpeciesCatalog",
]
