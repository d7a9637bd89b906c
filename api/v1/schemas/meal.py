from __future__ import annotations
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict

from .profile import MealPlanDataIn, UserProfileIn


class MealIn(BaseModel):
    type: str | None = None          # breakfast / lunch / dinner / snack
    name: str | None = None
    calories: float | None = None
    protein: str | float | None = None
    carbs: str | float | None = None
    fat: str | float | None = None
    ingredients: List[str] | None = None
    instructions: str | List[str] | None = None

    model_config = ConfigDict(extra="allow")


class MealPlanRequest(BaseModel):
    userProfile: UserProfileIn | None = None
    mealPlanData: MealPlanDataIn | None = None


class ModifyMealRequest(BaseModel):
    currentMeal: MealIn | None = None
    userRequest: str | None = None
    userProfile: UserProfileIn | None = None
    mealPlanData: MealPlanDataIn | None = None


class ModifyMealResponse(BaseModel):
    modifiedMeal: Dict[str, Any]
    changes: Dict[str, Any]
    nutritionalImpact: Any = None
    metadata: Dict[str, Any]

    model_config = ConfigDict(extra="allow")
