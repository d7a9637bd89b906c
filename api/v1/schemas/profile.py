from __future__ import annotations
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class UserProfileIn(BaseModel):
    """Demographics sent by the meal-planning screens (all optional here,
    presence is checked by the endpoint so it can name the missing data)."""

    age: int | None = None
    gender: str | None = None
    height: float | None = None
    weight: float | None = None
    activityLevel: str | None = None
    bodyFatPercentage: float | None = None

    model_config = ConfigDict(extra="allow")


class MealPlanDataIn(BaseModel):
    goal: str | None = Field(None, examples=["weight-loss", "muscle-gain", "maintenance"])
    restrictions: str | List[str] | None = None
    preferences: str | List[str] | None = None

    model_config = ConfigDict(extra="allow")
