import os
import sys
import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import ExerciseCatalogRepository
from recommendation_service import RecommendationService, WORKOUT_TEMPLATES


@pytest.fixture
def recommender(tmp_path):
    catalog = ExerciseCatalogRepository(str(tmp_path / "workout.db"))
    return RecommendationService(catalog, limit=3)


def test_recommendations_are_capped(recommender):
    names = [e["name"] for e in recommender.recommend_exercises()]
    assert names == ["Bench Press", "Bicep Curls", "Burpees"]


def test_exclude_ids_accepts_lists(recommender):
    first = recommender.recommend_exercises()[0]
    names = [e["name"] for e in recommender.recommend_exercises(exclude_ids=[first["id"]])]
    assert first["name"] not in names


def test_parse_ids():
    assert RecommendationService._parse_ids("1, 2,,3") == [1, 2, 3]
    assert RecommendationService._parse_ids(None) == []
    with pytest.raises(ValueError):
        RecommendationService._parse_ids("1,x")


def test_templates_are_defined():
    assert len(WORKOUT_TEMPLATES) == 6
    for template in WORKOUT_TEMPLATES:
        assert template["estimated_duration"] > 0
        assert all(group["count"] > 0 for group in template["exercises"])


def test_combined_template_filters(recommender):
    templates = recommender.workout_templates(goal="body", duration=50, difficulty="Intermediate")
    assert [t["name"] for t in templates] == ["Upper Body Focus"]


def test_suggest_exercises_partial_match():
    assert RecommendationService.suggest_exercises("Saturday Leg Day")[0] == "Squats"
    assert RecommendationService.suggest_exercises("") == []


def test_calculate_calories_rounding(recommender):
    pushups = next(
        e for e in recommender.catalog.fetch_all_records() if e["name"] == "Push-ups"
    )
    result = recommender.calculate_calories(pushups["id"], sets=1, reps=1)
    assert result == {"calories": 1, "exercise": "Push-ups"}


def test_calculate_calories_requires_id(recommender):
    with pytest.raises(ValueError):
        recommender.calculate_calories(None, duration=10)
    with pytest.raises(LookupError):
        recommender.calculate_calories(9999, duration=10)
