"""Re-export individual schema modules for easy imports."""

from .profile import UserProfileIn, MealPlanDataIn
from .meal import MealIn, MealPlanRequest, ModifyMealRequest, ModifyMealResponse
from .analysis import AnalysisOut

__all__ = [
    "UserProfileIn",
    "MealPlanDataIn",
    "MealIn",
    "MealPlanRequest",
    "ModifyMealRequest",
    "ModifyMealResponse",
    "AnalysisOut",
]
