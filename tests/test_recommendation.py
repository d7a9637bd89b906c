"""
Rule ordering + cap for core/recommendation.py
"""
import pytest

from core.recommendation import MAX_RECOMMENDATIONS, generate_recommendations


def test_cap_drops_last_block():
    recs = generate_recommendations(45, "low", 30, "male")
    assert len(recs) == MAX_RECOMMENDATIONS
    assert recs[0] == "Focus on maintaining muscle mass with regular strength training"
    assert recs[2] == "Start with 150 minutes of moderate activity per week"
    assert recs[4] == "Create a moderate caloric deficit for sustainable fat loss"
    assert "Focus on compound movements for overall strength development" not in recs


def test_mid_age_gets_no_age_block():
    recs = generate_recommendations(30, "moderate", 15, "female")
    assert recs == [
        "Maintain current body composition with consistent training",
        "Consider setting performance-based fitness goals",
        "Include weight-bearing exercises to support bone health",
    ]


def test_female_over_35_gets_calcium_entry():
    recs = generate_recommendations(38, "high", 20, "female")
    assert recs[-1] == "Consider calcium and vitamin D intake for bone health"
    assert len(recs) == 4


def test_very_high_alias_and_low_body_fat():
    recs = generate_recommendations(20, "very-high", 8, "female")
    assert len(recs) == 6
    assert "Ensure adequate recovery time between intense sessions" in recs
    assert "Focus on performance and strength rather than further fat loss" in recs
    # gender block is the one that falls off
    assert "Include weight-bearing exercises to support bone health" not in recs


def test_body_fat_boundaries_are_maintenance():
    for bf in (10, 25):
        recs = generate_recommendations(30, "moderate", bf, "male")
        assert recs[0] == "Maintain current body composition with consistent training"


@pytest.mark.parametrize("age", [13, 24, 25, 40, 41, 100])
@pytest.mark.parametrize("activity", ["low", "moderate", "high", "very_high"])
@pytest.mark.parametrize("bf", [5, 15, 35])
@pytest.mark.parametrize("gender", ["male", "female"])
def test_never_more_than_six(age, activity, bf, gender):
    assert len(generate_recommendations(age, activity, bf, gender)) <= MAX_RECOMMENDATIONS


def test_pure_function():
    first = generate_recommendations(45, "low", 30, "female")
    second = generate_recommendations(45, "low", 30, "female")
    assert first == second
    first.append("mutated")
    assert generate_recommendations(45, "low", 30, "female") == second
