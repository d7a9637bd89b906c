"""
core/recommendation.py
────────────────────────────────────────────────────────────────────────
Rule-based fitness recommendations.

Blocks are appended in a fixed order (age → activity → body fat →
gender) and the list is then cut to `MAX_RECOMMENDATIONS`, so the
later blocks are the ones that drop out for profiles that trigger
many rules.
"""
from __future__ import annotations

import logging
from typing import List

from core.nutrition_calc import normalize_activity, normalize_gender

_LOG = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 6


def _age_block(age: int) -> List[str]:
    if age > 40:
        return [
            "Focus on maintaining muscle mass with regular strength training",
            "Include flexibility and mobility work in your routine",
        ]
    if age < 25:
        return [
            "Take advantage of your age for building strong fitness habits",
            "Focus on developing proper exercise form and consistency",
        ]
    return []


def _activity_block(activity: str) -> List[str]:
    if activity == "low":
        return [
            "Start with 150 minutes of moderate activity per week",
            "Begin with walking, swimming, or cycling",
        ]
    if activity == "very_high":
        return [
            "Ensure adequate recovery time between intense sessions",
            "Monitor for signs of overtraining and burnout",
        ]
    return []


def _body_fat_block(body_fat: float) -> List[str]:
    if body_fat < 10:
        return [
            "Focus on performance and strength rather than further fat loss",
            "Ensure adequate nutrition to support your training",
        ]
    if body_fat > 25:
        return [
            "Create a moderate caloric deficit for sustainable fat loss",
            "Combine cardiovascular exercise with strength training",
        ]
    return [
        "Maintain current body composition with consistent training",
        "Consider setting performance-based fitness goals",
    ]


def _gender_block(gender: str, age: int) -> List[str]:
    if gender == "female":
        recs = ["Include weight-bearing exercises to support bone health"]
        if age > 35:
            recs.append("Consider calcium and vitamin D intake for bone health")
        return recs
    return ["Focus on compound movements for overall strength development"]


def generate_recommendations(
    age: int,
    activity: str,
    body_fat: float,
    gender: str,
) -> List[str]:
    recs: List[str] = []
    recs += _age_block(age)
    recs += _activity_block(normalize_activity(activity))
    recs += _body_fat_block(body_fat)
    recs += _gender_block(normalize_gender(gender), age)

    if len(recs) > MAX_RECOMMENDATIONS:
        _LOG.debug("dropping %d recommendation(s) over cap", len(recs) - MAX_RECOMMENDATIONS)
    return recs[:MAX_RECOMMENDATIONS]
