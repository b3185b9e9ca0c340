"""Mini README: Request bodies accepted by the budget API.

Update models declare every field optional; the web layer forwards only the
fields a client actually sent (``model_dump(exclude_unset=True)``), which
gives the partial-update semantics the gateway expects.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..calculation import PositionType


class ProjectCreate(BaseModel):
    name: Optional[str] = None


class ProjectUpdate(BaseModel):
    """Partial update of a project's settings."""

    model_config = ConfigDict(allow_inf_nan=False)

    name: Optional[str] = None
    shooting_days: Optional[int] = Field(None, ge=1)
    include_hotel: Optional[bool] = None
    hotel_cost_per_night: Optional[float] = Field(None, ge=0)
    per_diem: Optional[float] = Field(None, ge=0)
    actual_per_diem: Optional[float] = Field(None, ge=0)
    archived: Optional[bool] = None


class PositionCreate(BaseModel):
    type: PositionType


class PositionUpdate(BaseModel):
    """Partial update of a cost position; ``null`` clears nullable fields."""

    model_config = ConfigDict(allow_inf_nan=False)

    name: Optional[str] = None
    daily_rate: Optional[float] = Field(None, ge=0)
    flat_fee: Optional[float] = Field(None, ge=0)
    hotel_nights: Optional[int] = Field(None, ge=0)
    travel_costs: Optional[float] = Field(None, ge=0)
    days_on_set: Optional[int] = Field(None, ge=1)
    costs: Optional[float] = Field(None, ge=0)
    color: Optional[str] = None
    active: Optional[bool] = None
    actual_costs: Optional[float] = Field(None, ge=0)
    sort_order: Optional[int] = None


class PositionReference(BaseModel):
    """Position entry of a reorder request; extra fields are ignored."""

    model_config = ConfigDict(extra="ignore")

    id: str


class ReorderRequest(BaseModel):
    positions: List[PositionReference]
