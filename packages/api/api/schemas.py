"""Pydantic request/response models for the API."""

import math
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from database.models import MAX_INTEGER
from towers.models import TowerFilter

DEFAULT_SEARCH_RADIUS_METERS = 1000.0


class CellTowerSchema(BaseModel):
    """A cell tower as returned to clients (camelCase keys)."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    mcc: int
    mnc: int
    lac: int
    cell_id: int
    lat: float
    lon: float
    radio: str
    range: int | None
    province: str
    district: str
    subdistrict: str
    village: str
    address: str | None
    updated_at: datetime


class TowerSearchParams(BaseModel):
    """Query string of ``GET /towers``.

    Values arrive as strings and are coerced; an empty value counts as
    absent. Unknown parameters (such as ``api_key``) are ignored.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    mcc: int | None = Field(default=None, ge=0, le=MAX_INTEGER)
    mnc: int | None = Field(default=None, ge=0, le=MAX_INTEGER)
    lac: int | None = Field(default=None, ge=0, le=MAX_INTEGER)
    cell_id: int | None = Field(default=None, ge=0, le=MAX_INTEGER)
    lat: float | None = Field(default=None, ge=-90, le=90)
    lon: float | None = Field(default=None, ge=-180, le=180)
    radius: float = Field(default=DEFAULT_SEARCH_RADIUS_METERS, ge=0)

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_absent(cls, value, info):
        if isinstance(value, str) and not value.strip():
            return DEFAULT_SEARCH_RADIUS_METERS if info.field_name == "radius" else None
        return value

    @field_validator("lat", "lon", "radius")
    @classmethod
    def _finite(cls, value):
        if value is not None and not math.isfinite(value):
            raise ValueError("must be a finite number")
        return value

    def to_filter(self) -> TowerFilter:
        return TowerFilter(
            mcc=self.mcc,
            mnc=self.mnc,
            lac=self.lac,
            cell_id=self.cell_id,
            lat=self.lat,
            lon=self.lon,
            radius=self.radius,
        )


class ApiKeyCreated(BaseModel):
    """Response of the public key generator."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    key: str
    status: Literal["active"] = "active"
    created_at: str
    message: str


class ErrorResponse(BaseModel):
    message: str
    field: str | None = None


class HealthStatus(BaseModel):
    status: str
    towers: int
