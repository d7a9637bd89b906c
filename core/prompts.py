"""Prompt templates sent to the chat model."""

from __future__ import annotations

from typing import Any, Dict

from core.nutrition_calc import MACRO_SPLITS, MealRange, MetabolicProfile

ANALYSIS_SYSTEM = "You are an expert fitness and health analyst. Always respond with valid JSON."
MEAL_PLAN_SYSTEM = (
    "You are a professional nutritionist and meal planning expert. "
    "Always respond with valid JSON format as requested."
)
MODIFY_SYSTEM = (
    "You are a professional nutritionist expert in meal modification and dietary planning. "
    "Always respond with valid JSON format as requested."
)

_GOAL_LABELS = {
    "weight-loss": "Weight Loss",
    "weight-gain": "Weight Gain",
    "muscle-gain": "Muscle Gain",
    "maintenance": "Maintenance",
    "athletic-performance": "Athletic Performance",
}


def _macro_guidelines() -> str:
    return "\n".join(
        f"   - {_GOAL_LABELS[goal]}: {p}% protein, {c}% carbs, {f}% fat"
        for goal, (p, c, f) in MACRO_SPLITS.items()
    )


def _listing(value: Any, default: str) -> str:
    if not value:
        return default
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


def analysis_prompt(profile: Dict[str, Any], body_fat: float) -> str:
    return f"""
Based on the provided body photo and user information, provide a comprehensive body analysis.

User Information:
- Age: {profile['age']} years
- Gender: {profile['gender']}
- Height: {profile['height']} cm
- Weight: {profile['weight']} kg
- Activity Level: {profile['activity']}
- Body Fat Percentage: {body_fat}%

Respond with a JSON object in exactly this shape:
{{
  "bodyType": "body type classification",
  "bodyShape": "body shape description",
  "healthProblems": ["list", "of", "observed", "issues"],
  "additionalDetails": "detailed analysis paragraph",
  "recommendations": ["specific", "actionable", "recommendations"]
}}

Be professional, constructive, and focus on health and fitness improvements."""


def meal_plan_prompt(
    user: Dict[str, Any],
    plan: Dict[str, Any],
    metabolic: MetabolicProfile,
) -> str:
    body_fat = user.get("bodyFatPercentage")
    body_fat_line = f"- Body Fat Percentage: {body_fat}%\n" if body_fat else ""
    target = metabolic.target_calories
    return f"""
Create a comprehensive 7-day meal plan for the following client.

**Client Profile:**
- Age: {user['age']} years
- Gender: {user['gender']}
- Height: {user['height']}cm
- Weight: {user['weight']}kg
- Activity Level: {user['activityLevel']}
- BMI: {metabolic.bmi}
{body_fat_line}- Target Daily Calories: {target}

**Goals & Preferences:**
- Primary Goal: {plan['goal']}
- Dietary Restrictions: {_listing(plan.get('restrictions'), 'None specified')}
- Food Preferences: {_listing(plan.get('preferences'), 'None specified')}

**Requirements:**
1. Seven days, Monday through Sunday
2. Each day has breakfast, lunch, dinner and 1-2 snacks
3. Each day lands within ±50 calories of the target
4. Macronutrient balance by goal:
{_macro_guidelines()}
5. Respect every dietary restriction and preference
6. Practical, varied, nutritionally dense meals

**Output Format:**
{{
  "mealPlan": [
    {{
      "day": "Monday",
      "totalCalories": {target},
      "meals": [
        {{
          "type": "breakfast",
          "name": "Greek Yogurt Parfait with Berries",
          "calories": 320,
          "protein": "25g",
          "carbs": "35g",
          "fat": "8g",
          "ingredients": ["1 cup Greek yogurt", "1/2 cup mixed berries"],
          "instructions": "Layer yogurt and berries."
        }}
      ]
    }}
  ],
  "weeklyTotals": {{"avgDailyCalories": 0, "avgProtein": "0g", "avgCarbs": "0g", "avgFat": "0g"}},
  "nutritionalGoals": {{"targetCalories": {target}, "proteinPercent": "25%", "carbsPercent": "45%", "fatPercent": "30%"}},
  "notes": "Additional tips or recommendations"
}}"""


def modify_meal_prompt(
    meal: Dict[str, Any],
    request: str,
    user: Dict[str, Any],
    plan: Dict[str, Any],
    window: MealRange,
) -> str:
    body_fat = user.get("bodyFatPercentage")
    body_fat_line = f"- Body Fat Percentage: {body_fat}%\n" if body_fat else ""
    return f"""
Modify a meal based on the client's request.

**Current Meal:**
- Type: {meal.get('type')}
- Name: {meal.get('name')}
- Calories: {meal.get('calories')}
- Protein: {meal.get('protein')}
- Carbs: {meal.get('carbs')}
- Fat: {meal.get('fat')}

**Client Request:**
"{request}"

**Client Profile:**
- Age: {user.get('age')} years
- Gender: {user.get('gender')}
- Height: {user.get('height')}cm
- Weight: {user.get('weight')}kg
- Activity Level: {user.get('activityLevel')}
{body_fat_line}- Goal: {plan.get('goal') or 'Not specified'}
- Dietary Restrictions: {_listing(plan.get('restrictions'), 'None')}
- Food Preferences: {_listing(plan.get('preferences'), 'None')}

**Requirements:**
1. Keep the meal type ({meal.get('type')})
2. Target calorie range: {window.min} - {window.max} calories
3. Macronutrient balance by goal:
{_macro_guidelines()}
4. If the request is unclear or impossible, suggest the closest alternative

**Output Format:**
{{
  "modifiedMeal": {{
    "type": "{meal.get('type')}",
    "name": "New Meal Name",
    "calories": 400,
    "protein": "25g",
    "carbs": "35g",
    "fat": "15g",
    "ingredients": ["ingredient 1", "ingredient 2"],
    "instructions": "Step-by-step preparation instructions"
  }},
  "changes": {{"calorieChange": -50, "summary": "What changed and why"}},
  "nutritionalImpact": "How this affects the daily nutrition goals"
}}"""
