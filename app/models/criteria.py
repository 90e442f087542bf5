"""Site criteria submitted for a recommendation request."""
from __future__ import annotations

import base64
import binascii
import math
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .species import parse_number

REQUIRED_FIELDS = ("rainfall", "tempMin", "tempMax")


def _absent(value: Optional[float]) -> bool:
    return value is None or math.isnan(value)


class Criteria(BaseModel):
    """User-entered site conditions and restoration goals.

    Aliases match the keys of the recommendation form, which is also the
    payload format of shareable links.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    soil: str = ""
    ph_min: float = Field(5.5, alias="pHMin")
    ph_max: float = Field(7.0, alias="pHMax")
    rainfall: Optional[float] = None
    temp_min: Optional[float] = Field(None, alias="tempMin")
    temp_max: Optional[float] = Field(None, alias="tempMax")
    humidity: str = ""
    sunlight: str = ""
    goals: List[str] = Field(default_factory=list)

    @field_validator("soil", "humidity", "sunlight", mode="before")
    @classmethod
    def _blank_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("ph_min", mode="before")
    @classmethod
    def _ph_min(cls, value: Any) -> Any:
        return parse_number(value) or 5.5

    @field_validator("ph_max", mode="before")
    @classmethod
    def _ph_max(cls, value: Any) -> Any:
        return parse_number(value) or 7.0

    @field_validator("rainfall", "temp_min", "temp_max", mode="before")
    @classmethod
    def _empty_is_missing(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator("goals", mode="before")
    @classmethod
    def _clean_goals(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        return [str(goal).strip() for goal in value if str(goal).strip()]

    def missing_required(self) -> List[str]:
        """Names of the required site conditions that were not supplied."""
        values = {"rainfall": self.rainfall, "tempMin": self.temp_min, "tempMax": self.temp_max}
        return [name for name in REQUIRED_FIELDS if _absent(values[name])]

    def to_share_token(self) -> str:
        payload = self.model_dump_json(by_alias=True)
        return base64.b64encode(payload.encode("utf-8")).decode("ascii")

    @classmethod
    def from_share_token(cls, token: str) -> "Criteria":
        try:
            payload = base64.b64decode(token.strip(), validate=True).decode("utf-8")
            return cls.model_validate_json(payload)
        except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
            raise ValueError("Invalid share token.") from exc
