"""
HTTP-level tests for the /api routes (external services stubbed).
"""
from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from api.v1 import analysis
from main import app
from services import gemini, nyckel
from services.nyckel import BodyFatEstimate

IMAGE = ("body.jpg", b"\xff\xd8\xff\xe0fake-jpeg", "image/jpeg")

FORM = {"age": "25", "gender": "male", "height": "180", "weight": "75", "activity": "moderate"}

PROFILE = {"age": 25, "gender": "male", "height": 180, "weight": 75, "activityLevel": "moderate"}

MEAL = {"type": "breakfast", "name": "Oatmeal", "calories": 350, "protein": "15g", "carbs": "55g", "fat": "8g"}


def _fake_generate(reply: str):
    async def _generate(prompt, **kwargs):
        return reply
    return _generate


# ── meta ───────────────────────────────────────────────────────────
def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


@pytest.mark.parametrize("path", ["/api/analyze-enhanced", "/api/generate-meal-plan", "/api/modify-meal"])
def test_non_post_is_405_json(client, path):
    r = client.get(path)
    assert r.status_code == 405
    assert r.json() == {"error": "Method not allowed. Use POST."}


# ── analysis ───────────────────────────────────────────────────────
def test_analysis_mock_mode_roundtrip(client, mock_mode):
    r = client.post("/api/analyze-enhanced", data=FORM, files={"image": IMAGE})
    assert r.status_code == 200
    body = r.json()
    assert 12 <= body["bodyFatPercentage"] <= 30
    assert 0.75 <= body["confidence"] <= 0.95
    assert body["healthProblems"]
    assert len(body["recommendations"]) <= 6
    assert body["bodyShape"] == "Athletic/V-shape potential"

    stored = client.get(f"/api/results/{body['resultId']}")
    assert stored.status_code == 200
    assert stored.json()["bodyType"] == body["bodyType"]
    assert stored.json()["userInputs"]["age"] == 25


def test_unknown_result_is_404(client):
    r = client.get("/api/results/does-not-exist")
    assert r.status_code == 404
    assert r.json() == {"error": "Result not found"}


def test_analysis_falls_back_when_services_unavailable(client, offline):
    r = client.post("/api/analyze-enhanced", data=FORM, files={"image": IMAGE})
    assert r.status_code == 200
    body = r.json()
    assert 15 <= body["bodyFatPercentage"] <= 30
    assert body["confidence"] == 0.8
    assert body["bodyType"].split()[0] in {"Mesomorph", "Endomorph", "Mixed"}
    assert "Based on your profile" in body["additionalDetails"]


def test_analysis_uses_model_reply(client, offline, monkeypatch):
    async def _classify(image, mime_type):
        return BodyFatEstimate(percentage=22.5, confidence=0.9)

    reply = "```json\n" + json.dumps({
        "bodyType": "Mesomorph",
        "bodyShape": "V-shape",
        "healthProblems": [],
        "additionalDetails": "Looks balanced.",
        "recommendations": [f"tip {i}" for i in range(9)],
    }) + "\n```"
    monkeypatch.setattr(nyckel, "classify_body_fat", _classify)
    monkeypatch.setattr(gemini, "generate", _fake_generate(reply))

    body = client.post("/api/analyze-enhanced", data=FORM, files={"image": IMAGE}).json()
    assert body["bodyFatPercentage"] == 22.5
    assert body["confidence"] == 0.9
    assert body["bodyType"] == "Mesomorph"
    assert body["healthProblems"] == ["No significant concerns observed from available data"]
    assert len(body["recommendations"]) == 6


def test_analysis_unparsable_reply_uses_rules(client, offline, monkeypatch):
    monkeypatch.setattr(gemini, "generate", _fake_generate("I cannot help with that."))
    body = client.post("/api/analyze-enhanced", data=FORM, files={"image": IMAGE}).json()
    assert body["bodyShape"] == "Athletic/V-shape potential"


@pytest.mark.parametrize("override, message", [
    ({"age": "abc"}, "Invalid numeric values provided"),
    ({"gender": ""}, "Missing required user information"),
    ({"age": "12"}, "Age must be between 13 and 100"),
    ({"height": "260"}, "Height must be between 100 and 250 cm"),
    ({"weight": "20"}, "Weight must be between 30 and 300 kg"),
])
def test_analysis_validation(client, mock_mode, override, message):
    r = client.post("/api/analyze-enhanced", data={**FORM, **override}, files={"image": IMAGE})
    assert r.status_code == 400
    assert r.json() == {"error": message}


def test_analysis_reads_leading_numbers(client, mock_mode):
    form = {**FORM, "height": "180cm", "weight": "75.5kg", "age": " 25 years"}
    r = client.post("/api/analyze-enhanced", data=form, files={"image": IMAGE})
    assert r.status_code == 200
    stored = client.get(f"/api/results/{r.json()['resultId']}").json()
    assert stored["userInputs"]["height"] == 180
    assert stored["userInputs"]["weight"] == 75.5
    assert stored["userInputs"]["age"] == 25


def test_analysis_requires_image(client, mock_mode):
    r = client.post("/api/analyze-enhanced", data=FORM)
    assert r.status_code == 400
    assert r.json() == {"error": "No valid image file provided"}


def test_analysis_rejects_non_image(client, mock_mode):
    r = client.post("/api/analyze-enhanced", data=FORM, files={"image": ("notes.txt", b"hi", "text/plain")})
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid file type. Please upload an image."


def test_analysis_rejects_large_file(client, mock_mode, monkeypatch):
    monkeypatch.setattr(mock_mode, "max_upload_bytes", 4)
    r = client.post("/api/analyze-enhanced", data=FORM, files={"image": IMAGE})
    assert r.status_code == 400
    assert r.json()["error"].startswith("File too large")


def test_unexpected_error_is_json_500(mock_mode, monkeypatch):
    def _boom(*args, **kwargs):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(analysis, "generate_recommendations", _boom)
    monkeypatch.setattr(mock_mode, "debug", True)
    client = TestClient(app, raise_server_exceptions=False)
    r = client.post("/api/analyze-enhanced", data=FORM, files={"image": IMAGE})
    assert r.status_code == 500
    body = r.json()
    assert body["error"]
    assert body["debug"] == {"errorType": "RuntimeError", "errorMessage": "kaboom"}


# ── meal plan ──────────────────────────────────────────────────────
def test_meal_plan_mock_mode(client, mock_mode):
    r = client.post("/api/generate-meal-plan", json={
        "userProfile": PROFILE,
        "mealPlanData": {"goal": "weight-loss", "restrictions": ["vegetarian"]},
    })
    assert r.status_code == 200
    body = r.json()
    assert len(body["mealPlan"]) == 7
    assert body["metadata"]["userProfile"] == {
        "bmi": 23.1, "bmr": 1755, "tdee": 2413, "targetCalories": 1913,
    }
    assert body["metadata"]["requestId"].startswith("meal_")
    assert body["weeklyTotals"]["avgDailyCalories"] == 1913


def test_meal_plan_female_floor(client, mock_mode):
    profile = {"age": 20, "gender": "female", "height": 160, "weight": 45, "activityLevel": "low"}
    r = client.post("/api/generate-meal-plan", json={
        "userProfile": profile, "mealPlanData": {"goal": "weight-loss"},
    })
    assert r.json()["metadata"]["userProfile"]["targetCalories"] == 1200


def test_meal_plan_degraded_on_failure(client, offline):
    r = client.post("/api/generate-meal-plan", json={
        "userProfile": PROFILE, "mealPlanData": {"goal": "maintenance"},
    })
    assert r.status_code == 200
    body = r.json()
    assert body["mealPlan"] == []
    assert body["error"]
    assert body["metadata"]["userProfile"]["targetCalories"] == 2413


def test_meal_plan_from_model_gets_weekly_totals(client, offline, monkeypatch):
    reply = "Here is your plan: " + json.dumps({
        "mealPlan": [{"day": "Monday", "totalCalories": 900, "meals": [
            {"type": "lunch", "name": "Bowl", "calories": 900, "protein": "50g", "carbs": "80g", "fat": "30g"},
        ]}],
        "notes": "Enjoy",
    })
    monkeypatch.setattr(gemini, "generate", _fake_generate(reply))
    body = client.post("/api/generate-meal-plan", json={
        "userProfile": PROFILE, "mealPlanData": {"goal": "muscle-gain"},
    }).json()
    assert body["mealPlan"][0]["meals"][0]["name"] == "Bowl"
    assert body["weeklyTotals"]["avgDailyCalories"] == 900
    assert body["notes"] == "Enjoy"


@pytest.mark.parametrize("plan", [
    ["Monday: oats, chicken salad, salmon"],
    [{"day": "Monday", "meals": ["oats"]}],
    [{"day": "Monday", "meals": "oats"}],
])
def test_meal_plan_with_malformed_days_is_degraded(client, offline, monkeypatch, plan):
    monkeypatch.setattr(gemini, "generate", _fake_generate(json.dumps({"mealPlan": plan})))
    r = client.post("/api/generate-meal-plan", json={
        "userProfile": PROFILE, "mealPlanData": {"goal": "maintenance"},
    })
    assert r.status_code == 200
    body = r.json()
    assert body["mealPlan"] == []
    assert body["error"] == "Could not parse AI response"
    assert body["metadata"]["userProfile"]["targetCalories"] == 2413


@pytest.mark.parametrize("payload, message", [
    ({"userProfile": PROFILE}, "Missing required data. Please provide userProfile and mealPlanData."),
    ({"userProfile": {"age": 25}, "mealPlanData": {"goal": "weight-loss"}},
     "Missing required user profile data. Please provide age, gender, height, weight, and activityLevel."),
    ({"userProfile": PROFILE, "mealPlanData": {}}, "Missing goal. Please specify your primary goal."),
])
def test_meal_plan_validation(client, mock_mode, payload, message):
    r = client.post("/api/generate-meal-plan", json=payload)
    assert r.status_code == 400
    assert r.json() == {"error": message}


def test_bad_field_type_is_400(client, mock_mode):
    r = client.post("/api/generate-meal-plan", json={
        "userProfile": {**PROFILE, "age": "old"}, "mealPlanData": {"goal": "weight-loss"},
    })
    assert r.status_code == 400
    assert r.json()["error"].startswith("Invalid value for userProfile.age")


def test_malformed_json_is_400(client):
    r = client.post(
        "/api/generate-meal-plan",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid request body"}


# ── modify meal ────────────────────────────────────────────────────
def test_modify_meal_mock_mode(client, mock_mode):
    r = client.post("/api/modify-meal", json={
        "currentMeal": MEAL, "userRequest": "  make it dairy free  ", "userProfile": PROFILE,
    })
    assert r.status_code == 200
    body = r.json()
    assert body["modifiedMeal"]["name"] == "Modified Oatmeal"
    assert body["changes"]["calorieChange"] == 0
    assert body["metadata"]["userRequest"] == "make it dairy free"
    assert body["metadata"]["requestId"].startswith("modify_")
    assert body["metadata"]["calorieRange"] == {"min": 483, "max": 724}


def test_modify_meal_from_model(client, offline, monkeypatch):
    reply = json.dumps({
        "modifiedMeal": {"type": "breakfast", "name": "Tofu Scramble", "calories": 420},
        "nutritionalImpact": "Slightly more protein.",
    })
    monkeypatch.setattr(gemini, "generate", _fake_generate(reply))
    body = client.post("/api/modify-meal", json={
        "currentMeal": MEAL, "userRequest": "more protein please", "userProfile": PROFILE,
        "mealPlanData": {"goal": "muscle-gain"},
    }).json()
    assert body["modifiedMeal"]["name"] == "Tofu Scramble"
    assert body["changes"]["calorieChange"] == 70
    assert body["nutritionalImpact"] == "Slightly more protein."


def test_modify_meal_reply_without_name_falls_back(client, offline, monkeypatch):
    monkeypatch.setattr(gemini, "generate", _fake_generate('{"modifiedMeal": {"calories": 1}}'))
    body = client.post("/api/modify-meal", json={
        "currentMeal": MEAL, "userRequest": "less sugar", "userProfile": PROFILE,
    }).json()
    assert body["modifiedMeal"]["name"] == "Modified Oatmeal"


@pytest.mark.parametrize("payload, message", [
    ({"currentMeal": MEAL, "userProfile": PROFILE},
     "Missing required data. Please provide currentMeal, userRequest, and userProfile."),
    ({"currentMeal": {"name": "Oatmeal", "type": "breakfast"}, "userRequest": "less sugar", "userProfile": PROFILE},
     "Invalid meal data. Missing name, type, or calories."),
    ({"currentMeal": MEAL, "userRequest": "  ab  ", "userProfile": PROFILE},
     "Please provide a more detailed description of what you want to change."),
])
def test_modify_meal_validation(client, mock_mode, payload, message):
    r = client.post("/api/modify-meal", json=payload)
    assert r.status_code == 400
    assert r.json() == {"error": message}
