"""
core/body_classification.py
────────────────────────────────────────────────────────────────────────
Rule-based body assessment used whenever the vision LLM is skipped or
fails.  Inputs are plain numbers so each rule can be tested alone:

  • classify_body_type()   – somatotype from BMI + body-fat %
  • classify_body_shape()  – shape tendency from BMI + gender
  • health_problems()      – ordered flag list, never empty
  • detailed_analysis()    – one-paragraph narrative
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from core.nutrition_calc import normalize_activity, normalize_gender

_LOG = logging.getLogger(__name__)

ECTOMORPH = "Ectomorph (naturally lean)"
MESOMORPH = "Mesomorph (naturally athletic)"
ENDOMORPH = "Endomorph (higher body fat tendency)"
MIXED = "Mixed body type"

NO_CONCERNS = "No significant concerns observed from available data"


@dataclass(frozen=True)
class ClassificationResult:
    body_type: str
    body_shape: str
    health_problems: list[str] = field(default_factory=list)


def classify_body_type(bmi: float, body_fat: float) -> str:
    # first match wins
    if bmi < 18.5 and body_fat < 15:
        return ECTOMORPH
    if 18.5 <= bmi < 25 and body_fat < 20:
        return MESOMORPH
    if bmi >= 25 or body_fat > 25:
        return ENDOMORPH
    return MIXED


def classify_body_shape(bmi: float, gender: str) -> str:
    if normalize_gender(gender) == "male":
        return "Athletic/V-shape potential" if bmi < 25 else "Apple shape tendency"
    return "Rectangle to hourglass potential" if bmi < 25 else "Pear to apple shape tendency"


def health_problems(bmi: float, body_fat: float, activity: str) -> list[str]:
    problems: list[str] = []

    if bmi > 30:
        problems.append("BMI indicates obesity - consider consulting healthcare provider")
    elif bmi > 25:
        problems.append("BMI indicates overweight - gradual weight loss recommended")
    elif bmi < 18.5:
        problems.append("BMI indicates underweight - consider nutritional assessment")

    if body_fat > 30:
        problems.append("High body fat percentage may increase health risks")
    elif body_fat < 8:
        problems.append("Very low body fat may affect hormonal health")

    # combined flag uses 23, below the standalone overweight cut-off
    if normalize_activity(activity) == "low" and bmi > 23:
        problems.append("Low activity level combined with higher BMI")

    if not problems:
        problems.append(NO_CONCERNS)
    return problems


def classify(bmi: float, body_fat: float, gender: str, activity: str) -> ClassificationResult:
    result = ClassificationResult(
        body_type=classify_body_type(bmi, body_fat),
        body_shape=classify_body_shape(bmi, gender),
        health_problems=health_problems(bmi, body_fat, activity),
    )
    _LOG.debug("classified bmi=%.1f bf=%.1f → %s", bmi, body_fat, result.body_type)
    return result


def detailed_analysis(
    age: int,
    gender: str,
    height_cm: float,
    weight_kg: float,
    activity: str,
    bmi: float,
    body_fat: float,
) -> str:
    """Narrative paragraph returned as `additionalDetails`."""
    body_type = classify_body_type(bmi, body_fat)
    weight_note = (
        "Your weight is in a healthy range."
        if bmi < 25
        else "Consider gradual lifestyle changes for optimal health."
    )
    activity_note = (
        "Increasing physical activity could provide significant health benefits."
        if normalize_activity(activity) == "low"
        else "Your current activity level is beneficial for health."
    )
    return (
        f"Based on your profile ({age}-year-old {gender}, {height_cm:g}cm, {weight_kg:g}kg), "
        f"your BMI is {bmi:.1f} and body fat is {body_fat:g}%. "
        f"You have a {body_type.lower()} build with {activity} activity levels. "
        f"{weight_note} {activity_note} "
        "Regular monitoring and professional guidance can help optimize your fitness journey."
    )
