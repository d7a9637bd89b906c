"""
core/nutrition_calc.py
────────────────────────────────────────────────────────────────────────
Metabolic arithmetic shared by every endpoint:

1. BMI   (weight / height²)
2. BMR   (Mifflin–St Jeor)
3. TDEE  (activity multiplier)
4. Goal-adjusted daily calories with a gender floor
5. Per-meal calorie windows
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

Logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────────────────────────────
#  Tables
# ──────────────────────────────────────────────────────────────────────
ACTIVITY_MULTIPLIERS: dict[str, float] = {
    "low": 1.2,
    "moderate": 1.375,
    "high": 1.55,
    "very_high": 1.725,
}
DEFAULT_MULTIPLIER = 1.2

_ACTIVITY_ALIASES = {
    "very-high": "very_high",
    "moderate-activity": "moderate",
}

GOAL_OFFSETS: dict[str, int] = {
    "weight-loss": -500,
    "weight-gain": 500,
    "muscle-gain": 300,
    "athletic-performance": 200,
}

CALORIE_FLOOR = {"male": 1500, "female": 1200}

# protein / carbs / fat, percent of kcal
MACRO_SPLITS: dict[str, tuple[int, int, int]] = {
    "weight-loss": (30, 35, 35),
    "weight-gain": (25, 45, 30),
    "muscle-gain": (35, 40, 25),
    "maintenance": (25, 45, 30),
    "athletic-performance": (30, 50, 20),
}

MEAL_WINDOWS: dict[str, tuple[float, float]] = {
    "breakfast": (0.20, 0.30),
    "lunch": (0.25, 0.35),
    "dinner": (0.25, 0.35),
    "snack": (0.05, 0.15),
}


def round_half_up(value: float) -> int:
    """Nearest integer, .5 rounds away from zero for positives."""
    return int(math.floor(value + 0.5))


def normalize_activity(level: str | None) -> str:
    key = (level or "").strip().lower()
    return _ACTIVITY_ALIASES.get(key, key)


def normalize_gender(gender: str | None) -> str:
    return (gender or "").strip().lower()


def body_mass_index(weight_kg: float, height_cm: float) -> float:
    height_m = height_cm / 100
    return weight_kg / (height_m * height_m)


def macro_split(goal: str | None) -> tuple[int, int, int]:
    return MACRO_SPLITS.get(goal or "", MACRO_SPLITS["maintenance"])


# ──────────────────────────────────────────────────────────────────────
#  Value objects
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class UserAnthro:
    age: int
    gender: str            # "male" | "female"
    height_cm: float
    weight_kg: float
    activity_level: str = "low"

    @property
    def is_male(self) -> bool:
        return normalize_gender(self.gender) == "male"


@dataclass(frozen=True)
class MetabolicProfile:
    bmi: float
    bmr: float
    tdee: float
    target_calories: int

    def as_metadata(self) -> dict[str, float | int]:
        return {
            "bmi": self.bmi,
            "bmr": round_half_up(self.bmr),
            "tdee": round_half_up(self.tdee),
            "targetCalories": self.target_calories,
        }


@dataclass(frozen=True)
class MealRange:
    min: int
    max: int


# ──────────────────────────────────────────────────────────────────────
#  Calculator
# ──────────────────────────────────────────────────────────────────────
class NutritionalCalculator:
    """Source-of-truth for BMI / BMR / TDEE and calorie targets."""

    # --------------- BMI / BMR / TDEE -------------------------------
    def bmi(self, u: UserAnthro) -> float:
        return round(body_mass_index(u.weight_kg, u.height_cm), 1)

    def bmr(self, u: UserAnthro) -> float:
        base = 10 * u.weight_kg + 6.25 * u.height_cm - 5 * u.age
        return base + (5 if u.is_male else -161)

    def tdee(self, u: UserAnthro) -> float:
        mult = ACTIVITY_MULTIPLIERS.get(
            normalize_activity(u.activity_level), DEFAULT_MULTIPLIER
        )
        return self.bmr(u) * mult

    # --------------- Calories ---------------------------------------
    def target_calories(self, u: UserAnthro, goal: str | None) -> int:
        raw = self.tdee(u) + GOAL_OFFSETS.get(goal or "", 0)
        floor = CALORIE_FLOOR["male" if u.is_male else "female"]
        rounded = round_half_up(raw)
        if rounded < floor:
            Logger.debug("target %d kcal clamped to floor %d", rounded, floor)
        return max(rounded, floor)

    def profile(self, u: UserAnthro, goal: str | None) -> MetabolicProfile:
        return MetabolicProfile(
            bmi=self.bmi(u),
            bmr=self.bmr(u),
            tdee=self.tdee(u),
            target_calories=self.target_calories(u, goal),
        )

    # --------------- Meal windows -----------------------------------
    @staticmethod
    def meal_calorie_range(meal_type: str | None, daily_calories: float) -> MealRange:
        lo, hi = MEAL_WINDOWS.get((meal_type or "").lower(), MEAL_WINDOWS["snack"])
        return MealRange(
            min=round_half_up(daily_calories * lo),
            max=round_half_up(daily_calories * hi),
        )
