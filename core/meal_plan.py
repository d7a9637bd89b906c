"""
core/meal_plan.py
────────────────────────────────────────────────────────────────────────
Local meal-plan building blocks:

1.  `build_template_plan()` – deterministic 7-day plan used when the
    chat model is switched off.
2.  `weekly_totals()` – average daily calories + macros of any plan
    (AI or template) via a pandas frame of its meals.
3.  `placeholder_modification()` – the "could not modify" answer.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List

import pandas as pd

from core.nutrition_calc import macro_split, round_half_up

_LOG = logging.getLogger(__name__)

DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

# share of daily kcal per slot; each sits inside its MEAL_WINDOWS range
MEAL_SHARES: Dict[str, float] = {
    "breakfast": 0.25,
    "lunch": 0.30,
    "dinner": 0.30,
    "snack": 0.15,
}

# one entry per weekday, (name, ingredients, instructions)
_LIBRARY: Dict[str, List[tuple[str, List[str], str]]] = {
    "breakfast": [
        ("Greek Yogurt Parfait with Berries", ["Greek yogurt", "mixed berries", "granola", "honey"],
         "Layer yogurt, berries and granola. Drizzle with honey."),
        ("Veggie Scrambled Eggs on Toast", ["eggs", "spinach", "tomato", "wholegrain toast"],
         "Scramble eggs with spinach and tomato; serve on toast."),
        ("Overnight Oats with Banana", ["rolled oats", "milk", "chia seeds", "banana"],
         "Soak oats and chia in milk overnight; top with sliced banana."),
        ("Peanut Butter Banana Smoothie", ["banana", "peanut butter", "milk", "oats"],
         "Blend everything until smooth."),
        ("Cottage Cheese Bowl with Fruit", ["cottage cheese", "pineapple", "walnuts"],
         "Top cottage cheese with fruit and walnuts."),
        ("Whole-Wheat Pancakes", ["whole-wheat flour", "egg", "milk", "blueberries"],
         "Mix batter, fold in blueberries and cook on a hot pan."),
        ("Avocado Egg Toast", ["wholegrain bread", "avocado", "poached egg"],
         "Spread avocado on toast and top with a poached egg."),
    ],
    "lunch": [
        ("Grilled Chicken Quinoa Bowl", ["chicken breast", "quinoa", "cucumber", "feta"],
         "Grill chicken, slice and serve over quinoa with vegetables."),
        ("Turkey and Hummus Wrap", ["wholegrain wrap", "turkey", "hummus", "lettuce"],
         "Spread hummus, add turkey and lettuce, roll tightly."),
        ("Lentil and Vegetable Soup", ["red lentils", "carrot", "celery", "vegetable stock"],
         "Simmer lentils and vegetables in stock for 25 minutes."),
        ("Tuna Pasta Salad", ["wholewheat pasta", "tuna", "sweetcorn", "olive oil"],
         "Toss cooked pasta with tuna, corn and olive oil."),
        ("Chickpea Buddha Bowl", ["chickpeas", "brown rice", "roasted peppers", "tahini"],
         "Assemble rice, chickpeas and peppers; dress with tahini."),
        ("Beef and Bean Burrito Bowl", ["lean beef mince", "black beans", "rice", "salsa"],
         "Brown the mince, add beans and serve over rice with salsa."),
        ("Salmon Rice Bowl", ["salmon fillet", "jasmine rice", "edamame", "soy sauce"],
         "Bake salmon and serve over rice with edamame."),
    ],
    "dinner": [
        ("Baked Salmon with Sweet Potato", ["salmon fillet", "sweet potato", "broccoli"],
         "Roast sweet potato, bake salmon for 15 minutes, steam broccoli."),
        ("Chicken Stir-Fry with Brown Rice", ["chicken breast", "mixed vegetables", "brown rice", "soy sauce"],
         "Stir-fry chicken and vegetables; serve with rice."),
        ("Turkey Meatballs with Wholewheat Spaghetti", ["turkey mince", "wholewheat spaghetti", "tomato sauce"],
         "Bake meatballs, simmer in sauce and toss with pasta."),
        ("Tofu and Vegetable Curry", ["firm tofu", "coconut milk", "spinach", "basmati rice"],
         "Simmer tofu and vegetables in curry sauce; serve with rice."),
        ("Lean Steak with Roasted Vegetables", ["sirloin steak", "zucchini", "peppers", "potatoes"],
         "Sear steak to taste and roast vegetables alongside."),
        ("Shrimp Tacos", ["shrimp", "corn tortillas", "cabbage slaw", "lime"],
         "Cook shrimp quickly and serve in tortillas with slaw."),
        ("Roast Chicken with Quinoa Salad", ["chicken thighs", "quinoa", "cherry tomatoes", "parsley"],
         "Roast chicken and serve with herbed quinoa salad."),
    ],
    "snack": [
        ("Apple with Almond Butter", ["apple", "almond butter"], "Slice apple and dip."),
        ("Protein Shake", ["whey protein", "milk"], "Shake with milk or water."),
        ("Hummus and Carrot Sticks", ["hummus", "carrots"], "Serve carrots with hummus."),
        ("Trail Mix", ["almonds", "raisins", "dark chocolate chips"], "Portion into a small bowl."),
        ("Rice Cakes with Cottage Cheese", ["rice cakes", "cottage cheese"], "Top rice cakes with cheese."),
        ("Boiled Eggs", ["eggs"], "Boil for 9 minutes and cool."),
        ("Greek Yogurt with Honey", ["Greek yogurt", "honey"], "Stir honey into yogurt."),
    ],
}

_GRAMS = re.compile(r"(\d+(?:\.\d+)?)")


def _macros(calories: int, goal: str | None) -> Dict[str, str]:
    protein_pc, carbs_pc, fat_pc = macro_split(goal)
    return {
        "protein": f"{round_half_up(calories * protein_pc / 100 / 4)}g",
        "carbs": f"{round_half_up(calories * carbs_pc / 100 / 4)}g",
        "fat": f"{round_half_up(calories * fat_pc / 100 / 9)}g",
    }


def _template_meal(slot: str, day_idx: int, target_calories: int, goal: str | None) -> Dict[str, Any]:
    name, ingredients, instructions = _LIBRARY[slot][day_idx % len(_LIBRARY[slot])]
    calories = round_half_up(target_calories * MEAL_SHARES[slot])
    return {
        "type": slot,
        "name": name,
        "calories": calories,
        **_macros(calories, goal),
        "ingredients": list(ingredients),
        "instructions": instructions,
    }


def build_template_plan(
    target_calories: int,
    goal: str | None,
    restrictions: str | None = None,
) -> Dict[str, Any]:
    days = []
    for idx, day in enumerate(DAYS):
        meals = [_template_meal(slot, idx, target_calories, goal) for slot in MEAL_SHARES]
        days.append({
            "day": day,
            "totalCalories": sum(m["calories"] for m in meals),
            "meals": meals,
        })

    protein_pc, carbs_pc, fat_pc = macro_split(goal)
    notes = "Template plan built from standard portions for your calorie target."
    if restrictions:
        notes += f" Check each meal against your restrictions ({restrictions}) before cooking."

    return {
        "mealPlan": days,
        "weeklyTotals": weekly_totals(days),
        "nutritionalGoals": {
            "targetCalories": target_calories,
            "proteinPercent": f"{protein_pc}%",
            "carbsPercent": f"{carbs_pc}%",
            "fatPercent": f"{fat_pc}%",
        },
        "notes": notes,
    }


def _grams(value: Any) -> float:
    if isinstance(value, (int, float)):
        return float(value)
    match = _GRAMS.search(str(value or ""))
    return float(match.group(1)) if match else 0.0


def weekly_totals(days: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Average per-day calories and macros across the plan."""
    rows = []
    for i, day in enumerate(days):
        if not isinstance(day, dict):
            continue
        for meal in day.get("meals") or []:
            if not isinstance(meal, dict):
                continue
            rows.append({
                "day": day.get("day", i),
                "calories": _grams(meal.get("calories")),
                "protein_g": _grams(meal.get("protein")),
                "carbs_g": _grams(meal.get("carbs")),
                "fat_g": _grams(meal.get("fat")),
            })
    if not rows:
        return {"avgDailyCalories": 0, "avgProtein": "0g", "avgCarbs": "0g", "avgFat": "0g"}

    per_day = pd.DataFrame(rows).groupby("day", sort=False).sum()
    avg = per_day.mean()
    return {
        "avgDailyCalories": round_half_up(avg["calories"]),
        "avgProtein": f"{round_half_up(avg['protein_g'])}g",
        "avgCarbs": f"{round_half_up(avg['carbs_g'])}g",
        "avgFat": f"{round_half_up(avg['fat_g'])}g",
    }


def placeholder_modification(meal: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "modifiedMeal": {
            "type": meal.get("type"),
            "name": f"Modified {meal.get('name')}",
            "calories": meal.get("calories"),
            "protein": meal.get("protein"),
            "carbs": meal.get("carbs"),
            "fat": meal.get("fat"),
            "ingredients": ["Modified meal ingredients"],
            "instructions": "Please try your request again for detailed instructions.",
        },
        "changes": {
            "calorieChange": 0,
            "summary": "Unable to process modification request. Please try again with different wording.",
        },
        "nutritionalImpact": "No changes were made.",
    }
