"""Pydantic schemas for dashboard widgets."""

from typing import Literal

from pydantic import BaseModel, Field

StatColor = Literal["success", "info", "warning", "danger", "gray"]


class Stat(BaseModel):
    """One card of the stats overview widget."""

    label: str
    value: int = Field(..., ge=0)
    description: str | None = None
    description_icon: str | None = None
    chart: list[int] = Field(default_factory=list)
    color: StatColor = "gray"
    placeholder: bool = Field(
        default=False,
        description="True when the value is fixed demo data, not computed from storage",
    )


class StatsResponse(BaseModel):
    stats: list[Stat]
