"""
Pydantic models for car records.

Incoming fields are coerced rather than strictly validated: strings are cut to
their column width, numeric strings are parsed, unknown fields are ignored.
"""

import math
import re
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


STRING_CAPS = {
    "brand": 64,
    "model": 64,
    "fuel_type": 32,
    "image_url": 512,
    "color": 64,
    "transmission": 32,
    "owners": 32,
    "type": 32,
    "location": 128,
}

LIST_ITEM_CAPS = {
    "images": 512,
    "features": 64,
}

ZERO_IS_BLANK = ("year", "price")

_INT_PREFIX = re.compile(r"^[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}


def to_int(value: Any) -> int:
    """Parse the leading integer of a number or numeric string."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    if isinstance(value, str):
        match = _INT_PREFIX.match(value.strip())
        if match:
            return int(match.group())
    raise ValueError(f"{value!r} is not a valid integer")


def to_float(value: Any) -> float:
    """Parse the leading number of a number or numeric string."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)) and math.isfinite(value):
        return float(value)
    if isinstance(value, str):
        match = _FLOAT_PREFIX.match(value.strip())
        if match:
            return float(match.group())
    raise ValueError(f"{value!r} is not a valid number")


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError(f"{value!r} is not a valid boolean")


def to_str_list(value: Any, max_length: int) -> List[str]:
    """Non-list input becomes an empty list."""
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item)[:max_length] for item in value]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_zero(value: Any) -> bool:
    try:
        return to_float(value) == 0
    except (TypeError, ValueError):
        return False


class CarUpdateRequest(BaseModel):
    """
    Partial update of a car record.

    Every field is optional; only fields present (and not null) in the
    request body end up in the update sent to the document store.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True, protected_namespaces=())

    brand: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    price: Optional[float] = None
    fuel_type: Optional[str] = Field(default=None, alias="fuelType")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    images: Optional[List[str]] = None
    mileage: Optional[int] = None
    color: Optional[str] = None
    transmission: Optional[str] = None
    owners: Optional[str] = None
    type: Optional[str] = None
    seating_capacity: Optional[int] = Field(default=None, alias="seatingCapacity")
    location: Optional[str] = None
    available: Optional[bool] = None
    features: Optional[List[str]] = None

    @field_validator(*STRING_CAPS, mode="before")
    @classmethod
    def coerce_string(cls, v, info):
        if v is None:
            return None
        return str(v)[:STRING_CAPS[info.field_name]]

    @field_validator("year", "mileage", "seating_capacity", mode="before")
    @classmethod
    def coerce_int(cls, v):
        return None if v is None else to_int(v)

    @field_validator("price", mode="before")
    @classmethod
    def coerce_float(cls, v):
        return None if v is None else to_float(v)

    @field_validator("available", mode="before")
    @classmethod
    def coerce_bool(cls, v):
        return None if v is None else to_bool(v)

    @field_validator(*LIST_ITEM_CAPS, mode="before")
    @classmethod
    def coerce_list(cls, v, info):
        if v is None:
            return None
        return to_str_list(v, LIST_ITEM_CAPS[info.field_name])

    def to_document(self) -> Dict[str, Any]:
        """Fields to write, keyed by their stored (camelCase) names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class CarCreateRequest(CarUpdateRequest):
    """New car record; optional fields fall back to dealership defaults."""

    brand: str
    model: str
    year: int
    price: float
    fuel_type: str = Field(alias="fuelType")
    image_url: str = Field(default="", alias="imageUrl")
    images: List[str] = Field(default_factory=list)
    mileage: int = 0
    color: str = "White"
    transmission: str = "Manual"
    owners: str = "1st Owner"
    type: str = "Sedan"
    seating_capacity: int = Field(default=5, alias="seatingCapacity")
    location: str = "Main Branch"
    available: bool = True
    features: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data):
        # Blank values count as absent: required fields report as missing,
        # optional ones take their default. A zero year or price is blank too.
        if isinstance(data, dict):
            return {
                key: value for key, value in data.items()
                if not _is_blank(value) and not (key in ZERO_IS_BLANK and _is_zero(value))
            }
        return data


class CarResponse(BaseModel):
    """Single car record."""
    success: bool = True
    data: Dict[str, Any]


class CarListResponse(BaseModel):
    """Newest-first page of car records."""
    success: bool = True
    data: List[Dict[str, Any]]
    total: int


class MessageResponse(BaseModel):
    success: bool = True
    message: str
