"""Species catalog domain models."""
from __future__ import annotations

import copy
import math
import re
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

RAINFALL_MIN_DEFAULT = 0
RAINFALL_MAX_DEFAULT = 3000
TEMP_MIN_DEFAULT = 0
TEMP_MAX_DEFAULT = 40
PH_MIN_DEFAULT = 0.0
PH_MAX_DEFAULT = 14.0

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")


def parse_number(value: Any) -> Optional[float]:
    """Leading-number parse of a catalog cell; None when nothing usable is there."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value))
        if match is None:
            return None
        number = float(match.group(1))
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _permissive_int(value: Any, default: int) -> int:
    number = parse_number(value)
    if number is None or int(number) == 0:
        return default
    return int(number)


def _permissive_float(value: Any, default: float) -> float:
    number = parse_number(value)
    if not number:
        return default
    return number


class SpeciesMetrics(BaseModel):
    """0-10 performance scores used for goal-specific boosts."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    growth_speed: float = Field(0.0, alias="GrowthSpeed")
    carbon_sequestration: float = Field(0.0, alias="CarbonSequestration")
    biodiversity_value: float = Field(0.0, alias="BiodiversityValue")
    drought_tolerance: float = Field(0.0, alias="DroughtTolerance")

    @field_validator("*", mode="before")
    @classmethod
    def _zero_when_missing(cls, value: Any) -> float:
        number = parse_number(value)
        return number if number is not None else 0.0


class SpeciesRecord(BaseModel):
    """One catalog entry describing a tree species' tolerances and attributes.

    Field aliases are the key names used by the catalog JSON file. Missing or
    unparseable numeric tolerances fall back to the widest bounds so that an
    incomplete entry is never filtered out for lack of data.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    species_name: str = Field(..., alias="Species Name", min_length=1)
    common_name: Optional[str] = Field(None, alias="Common Name")
    soil_type: str = Field("", alias="Soil Type")
    ph_min: float = Field(PH_MIN_DEFAULT, alias="pH Min")
    ph_max: float = Field(PH_MAX_DEFAULT, alias="pH Max")
    rainfall_min: int = Field(RAINFALL_MIN_DEFAULT, alias="Rainfall Min (mm)")
    rainfall_max: int = Field(RAINFALL_MAX_DEFAULT, alias="Rainfall Max (mm)")
    temp_min: int = Field(TEMP_MIN_DEFAULT, alias="Temp Min (°C)")
    temp_max: int = Field(TEMP_MAX_DEFAULT, alias="Temp Max (°C)")
    sunlight: str = Field("", alias="Sunlight")
    restoration_goal: str = Field("", alias="Restoration Goal")
    max_height: Optional[str] = Field(None, alias="Max Height (m)")
    planting_guide: Optional[Dict[str, Any]] = Field(None, alias="PlantingGuide")
    metrics: SpeciesMetrics = Field(default_factory=SpeciesMetrics, alias="Metrics")

    _source: Dict[str, Any] = PrivateAttr(default_factory=dict)

    @field_validator("soil_type", "sunlight", "restoration_goal", mode="before")
    @classmethod
    def _blank_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("max_height", mode="before")
    @classmethod
    def _height_text(cls, value: Any) -> Optional[str]:
        return None if value in (None, "") else str(value)

    @field_validator("ph_min", mode="before")
    @classmethod
    def _ph_min(cls, value: Any) -> float:
        return _permissive_float(value, PH_MIN_DEFAULT)

    @field_validator("ph_max", mode="before")
    @classmethod
    def _ph_max(cls, value: Any) -> float:
        return _permissive_float(value, PH_MAX_DEFAULT)

    @field_validator("rainfall_min", mode="before")
    @classmethod
    def _rainfall_min(cls, value: Any) -> int:
        return _permissive_int(value, RAINFALL_MIN_DEFAULT)

    @field_validator("rainfall_max", mode="before")
    @classmethod
    def _rainfall_max(cls, value: Any) -> int:
        return _permissive_int(value, RAINFALL_MAX_DEFAULT)

    @field_validator("temp_min", mode="before")
    @classmethod
    def _temp_min(cls, value: Any) -> int:
        return _permissive_int(value, TEMP_MIN_DEFAULT)

    @field_validator("temp_max", mode="before")
    @classmethod
    def _temp_max(cls, value: Any) -> int:
        return _permissive_int(value, TEMP_MAX_DEFAULT)

    @field_validator("metrics", mode="before")
    @classmethod
    def _metrics(cls, value: Any) -> Any:
        if not isinstance(value, (dict, SpeciesMetrics)):
            return SpeciesMetrics()
        return value

    @field_validator("planting_guide", mode="before")
    @classmethod
    def _guide(cls, value: Any) -> Optional[Dict[str, Any]]:
        return value if isinstance(value, dict) else None

    @model_validator(mode="wrap")
    @classmethod
    def _keep_source(cls, data: Any, handler: Any) -> "SpeciesRecord":
        record = handler(data)
        if isinstance(data, dict):
            aliases = {name: info.alias for name, info in cls.model_fields.items() if info.alias}
            record._source = {aliases.get(key, key): copy.deepcopy(value) for key, value in data.items()}
        return record

    @property
    def goal_tags(self) -> Tuple[str, ...]:
        return tuple(tag.strip().lower() for tag in self.restoration_goal.split(","))

    def source_value(self, key: str) -> Any:
        """Value of a catalog key exactly as the entry supplied it, or None."""
        return copy.deepcopy(self._source.get(key))

    def to_catalog_dict(self) -> Dict[str, Any]:
        """The entry as the catalog supplied it, without permissive fill-ins."""
        if self._source:
            return copy.deepcopy(self._source)
        return self.model_dump(by_alias=True, exclude_unset=True)


class SpeciesCatalog(BaseModel):
    """Immutable, ordered collection of species records."""

    model_config = ConfigDict(frozen=True)

    species: Tuple[SpeciesRecord, ...]

    def __iter__(self) -> Iterator[SpeciesRecord]:  # type: ignore[override]
        return iter(self.species)

    def __len__(self) -> int:
        return len(self.species)

    def get(self, species_name: str) -> SpeciesRecord:
        for record in self.species:
            if record.species_name == species_name:
                return record
        raise KeyError(f"Species '{species_name}' not found.")

    def list_names(self) -> List[str]:
        return [record.species_name for record in self.species]

    def soil_types(self) -> List[str]:
        return sorted({record.soil_type for record in self.species if record.soil_type})
