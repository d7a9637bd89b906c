# api/v1/meal_plans.py
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, status

from config import settings
from core.meal_plan import build_template_plan, placeholder_modification, weekly_totals
from core.nutrition_calc import MetabolicProfile, NutritionalCalculator, UserAnthro
from core.prompts import MEAL_PLAN_SYSTEM, MODIFY_SYSTEM, meal_plan_prompt, modify_meal_prompt
from scripts.helpers import extract_clean_json
from services import gemini
from services.mock_ai import simulate_latency
from api.v1.schemas import (
    MealIn,
    MealPlanDataIn,
    MealPlanRequest,
    ModifyMealRequest,
    ModifyMealResponse,
    UserProfileIn,
)

router = APIRouter()
_LOG = logging.getLogger(__name__)
_calc = NutritionalCalculator()

_PROFILE_MISSING = (
    "Missing required user profile data. "
    "Please provide age, gender, height, weight, and activityLevel."
)


# ───────────────────────── helpers ──────────────────────────
def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _millis() -> int:
    return int(time.time() * 1000)


def _anthro(user: UserProfileIn) -> UserAnthro:
    """Raise 400 unless every field the calculator needs is present."""
    if not (user.age and user.gender and user.height and user.weight and user.activityLevel):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, _PROFILE_MISSING)
    return UserAnthro(
        age=user.age,
        gender=user.gender,
        height_cm=user.height,
        weight_kg=user.weight,
        activity_level=user.activityLevel,
    )


def _restrictions(plan: MealPlanDataIn) -> str | None:
    value = plan.restrictions
    if isinstance(value, list):
        return ", ".join(value) or None
    return value or None


def _well_formed_plan(days: Any) -> bool:
    """A list of day objects whose `meals` (when present) are meal objects."""
    if not isinstance(days, list):
        return False
    for day in days:
        if not isinstance(day, dict):
            return False
        meals = day.get("meals", [])
        if not isinstance(meals, list) or not all(isinstance(m, dict) for m in meals):
            return False
    return True


async def _ai_meal_plan(
    user: UserProfileIn, plan: MealPlanDataIn, metabolic: MetabolicProfile
) -> Dict[str, Any]:
    try:
        text = await gemini.generate(
            meal_plan_prompt(user.model_dump(), plan.model_dump(), metabolic),
            system=MEAL_PLAN_SYSTEM,
            temperature=0.7,
            max_output_tokens=4000,
        )
    except gemini.GenerationError as e:
        _LOG.warning("Meal plan generation failed: %s", e)
        return {
            "error": "Failed to generate meal plan",
            "mealPlan": [],
            "message": "Please try again.",
        }

    data = extract_clean_json(text)
    if not _well_formed_plan(data.get("mealPlan")):
        _LOG.warning("Meal plan reply had no usable mealPlan array")
        return {
            "error": "Could not parse AI response",
            "mealPlan": [],
            "message": "Please try again with different parameters.",
        }
    if not isinstance(data.get("weeklyTotals"), dict):
        data["weeklyTotals"] = weekly_totals(data["mealPlan"])
    return data


def _normalize_modification(data: Dict[str, Any], meal: MealIn) -> Dict[str, Any] | None:
    new_meal = data.get("modifiedMeal")
    if not isinstance(new_meal, dict) or not new_meal.get("name"):
        return None
    changes = data.get("changes")
    if not isinstance(changes, dict):
        try:
            delta = float(new_meal.get("calories") or 0) - float(meal.calories or 0)
        except (TypeError, ValueError):
            delta = 0
        changes = {"calorieChange": round(delta), "summary": ""}
    return {**data, "modifiedMeal": new_meal, "changes": changes}


# ───────────────────────── generate ─────────────────────────
@router.post(
    "/generate-meal-plan",
    status_code=status.HTTP_200_OK,
    summary="Build a 7-day meal plan for the user's calorie target",
)
async def generate_meal_plan(body: MealPlanRequest) -> Dict[str, Any]:
    if body.userProfile is None or body.mealPlanData is None:
        raise HTTPException(
            400, "Missing required data. Please provide userProfile and mealPlanData."
        )
    anthro = _anthro(body.userProfile)
    goal = body.mealPlanData.goal
    if not goal:
        raise HTTPException(400, "Missing goal. Please specify your primary goal.")

    metabolic = _calc.profile(anthro, goal)
    _LOG.info("meal plan: goal=%s target=%d kcal", goal, metabolic.target_calories)

    if settings.use_mock_ai:
        await simulate_latency()
        plan = build_template_plan(
            metabolic.target_calories, goal, _restrictions(body.mealPlanData)
        )
    else:
        plan = await _ai_meal_plan(body.userProfile, body.mealPlanData, metabolic)

    plan["metadata"] = {
        "generatedAt": _now_iso(),
        "userProfile": metabolic.as_metadata(),
        "requestId": f"meal_{_millis()}",
    }
    return plan


# ───────────────────────── modify ───────────────────────────
@router.post(
    "/modify-meal",
    response_model=ModifyMealResponse,
    status_code=status.HTTP_200_OK,
    summary="Replace one meal according to a free-text request",
)
async def modify_meal(body: ModifyMealRequest) -> ModifyMealResponse:
    if body.currentMeal is None or not body.userRequest or body.userProfile is None:
        raise HTTPException(
            400,
            "Missing required data. Please provide currentMeal, userRequest, and userProfile.",
        )
    meal = body.currentMeal
    if not (meal.name and meal.type and meal.calories):
        raise HTTPException(400, "Invalid meal data. Missing name, type, or calories.")
    request = body.userRequest.strip()
    if len(request) < 5:
        raise HTTPException(
            400, "Please provide a more detailed description of what you want to change."
        )

    plan = body.mealPlanData or MealPlanDataIn()
    anthro = _anthro(body.userProfile)
    daily = _calc.target_calories(anthro, plan.goal)
    window = _calc.meal_calorie_range(meal.type, daily)
    original = meal.model_dump(exclude_none=True)

    result: Dict[str, Any] | None = None
    if settings.use_mock_ai:
        await simulate_latency()
    else:
        try:
            text = await gemini.generate(
                modify_meal_prompt(original, request, body.userProfile.model_dump(), plan.model_dump(), window),
                system=MODIFY_SYSTEM,
                temperature=0.8,
                max_output_tokens=1500,
            )
            result = _normalize_modification(extract_clean_json(text), meal)
        except gemini.GenerationError as e:
            _LOG.warning("Meal modification failed: %s", e)

    if result is None:
        result = placeholder_modification(original)

    result["metadata"] = {
        "modifiedAt": _now_iso(),
        "originalMeal": original,
        "userRequest": request,
        "requestId": f"modify_{_millis()}",
        "calorieRange": {"min": window.min, "max": window.max},
    }
    return ModifyMealResponse(**result)
