"""Pydantic schemas for the panel navigation menu."""

from pydantic import BaseModel


class NavigationItem(BaseModel):
    label: str
    icon: str
    path: str


class NavigationResponse(BaseModel):
    items: list[NavigationItem]
