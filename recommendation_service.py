from __future__ import annotations
from typing import Iterable

from db import ExerciseCatalogRepository
from algorithms.calorie_estimator import CalorieEstimator


WORKOUT_TEMPLATES: list[dict] = [
    {
        "name": "Full Body Strength",
        "description": "Complete full body workout targeting all major muscle groups",
        "difficulty": "Intermediate",
        "estimated_duration": 60,
        "estimated_calories": 400,
        "exercises": [
            {"muscle_group": "Legs", "count": 2, "suggestions": ["Squats", "Lunges"]},
            {"muscle_group": "Chest", "count": 2, "suggestions": ["Push-ups", "Bench Press"]},
            {"muscle_group": "Back", "count": 2, "suggestions": ["Pull-ups", "Deadlifts"]},
            {"muscle_group": "Shoulders", "count": 1, "suggestions": ["Shoulder Press"]},
            {"muscle_group": "Core", "count": 1, "suggestions": ["Plank"]},
        ],
    },
    {
        "name": "Upper Body Focus",
        "description": "Target chest, back, shoulders, and arms",
        "difficulty": "Intermediate",
        "estimated_duration": 45,
        "estimated_calories": 300,
        "exercises": [
            {"muscle_group": "Chest", "count": 3, "suggestions": ["Push-ups", "Bench Press", "Chest Dips"]},
            {"muscle_group": "Back", "count": 2, "suggestions": ["Pull-ups", "Rows"]},
            {"muscle_group": "Shoulders", "count": 2, "suggestions": ["Shoulder Press", "Lateral Raises"]},
            {"muscle_group": "Arms", "count": 2, "suggestions": ["Bicep Curls", "Tricep Dips"]},
        ],
    },
    {
        "name": "Lower Body Power",
        "description": "Intense leg and glute workout",
        "difficulty": "Advanced",
        "estimated_duration": 50,
        "estimated_calories": 450,
        "exercises": [
            {"muscle_group": "Legs", "count": 4, "suggestions": ["Squats", "Deadlifts", "Lunges", "Leg Press"]},
            {"muscle_group": "Core", "count": 2, "suggestions": ["Plank", "Mountain Climbers"]},
        ],
    },
    {
        "name": "Cardio Blast",
        "description": "High-intensity cardio workout",
        "difficulty": "Intermediate",
        "estimated_duration": 30,
        "estimated_calories": 350,
        "exercises": [
            {"muscle_group": "Cardio", "count": 3, "suggestions": ["Running", "Cycling", "Burpees"]},
            {"muscle_group": "Full Body", "count": 2, "suggestions": ["Jumping Jacks", "Mountain Climbers"]},
        ],
    },
    {
        "name": "Core Strength",
        "description": "Focus on building a strong core",
        "difficulty": "Beginner",
        "estimated_duration": 25,
        "estimated_calories": 150,
        "exercises": [
            {
                "muscle_group": "Core",
                "count": 5,
                "suggestions": ["Plank", "Crunches", "Leg Raises", "Russian Twists", "Mountain Climbers"],
            },
        ],
    },
    {
        "name": "Quick Morning Routine",
        "description": "Fast-paced full body workout",
        "difficulty": "Beginner",
        "estimated_duration": 20,
        "estimated_calories": 200,
        "exercises": [
            {"muscle_group": "Full Body", "count": 3, "suggestions": ["Burpees", "Jumping Jacks", "Mountain Climbers"]},
            {"muscle_group": "Core", "count": 2, "suggestions": ["Plank", "Crunches"]},
        ],
    },
]

WORKOUT_EXERCISE_SUGGESTIONS: dict[str, list[str]] = {
    "Morning Cardio": ["Running", "Cycling", "Jumping Jacks", "Burpees", "Mountain Climbers"],
    "Full Body Strength": ["Squats", "Push-ups", "Deadlifts", "Pull-ups", "Plank", "Shoulder Press"],
    "Upper Body Day": ["Push-ups", "Pull-ups", "Bench Press", "Shoulder Press", "Bicep Curls", "Tricep Dips"],
    "Lower Body Day": ["Squats", "Deadlifts", "Lunges", "Leg Press", "Plank"],
    "Chest & Triceps": ["Push-ups", "Bench Press", "Chest Dips", "Tricep Dips", "Tricep Extensions"],
    "Back & Biceps": ["Pull-ups", "Deadlifts", "Rows", "Bicep Curls", "Hammer Curls"],
    "Leg Day": ["Squats", "Deadlifts", "Lunges", "Leg Press", "Leg Curls", "Calf Raises"],
    "Shoulder & Arms": ["Shoulder Press", "Lateral Raises", "Bicep Curls", "Tricep Dips", "Front Raises"],
    "Core Focus": ["Plank", "Crunches", "Mountain Climbers", "Leg Raises", "Russian Twists", "Bicycle Crunches"],
    "HIIT Workout": ["Burpees", "Mountain Climbers", "Jumping Jacks", "High Knees", "Squat Jumps"],
    "Yoga Session": ["Plank", "Downward Dog", "Warrior Pose", "Tree Pose"],
    "Running Session": ["Running", "Warm-up Jog", "Sprints", "Cool-down Walk"],
    "Cycling Workout": ["Cycling", "Warm-up Ride", "Interval Training"],
    "Swimming": ["Swimming", "Freestyle", "Breaststroke", "Backstroke"],
    "Push Day": ["Push-ups", "Bench Press", "Shoulder Press", "Tricep Dips", "Chest Flyes"],
    "Pull Day": ["Pull-ups", "Rows", "Deadlifts", "Bicep Curls", "Lat Pulldowns"],
    "Rest Day": ["Light Walking", "Stretching", "Yoga"],
    "Active Recovery": ["Light Walking", "Cycling", "Yoga", "Stretching"],
    "Full Body Circuit": ["Squats", "Push-ups", "Burpees", "Mountain Climbers", "Plank", "Jumping Jacks"],
    "Upper Body Push": ["Push-ups", "Bench Press", "Shoulder Press", "Tricep Dips"],
    "Upper Body Pull": ["Pull-ups", "Rows", "Bicep Curls", "Deadlifts"],
    "Legs & Glutes": ["Squats", "Lunges", "Deadlifts", "Hip Thrusts", "Leg Press"],
    "Cardio Blast": ["Running", "Burpees", "Jumping Jacks", "Mountain Climbers", "High Knees"],
    "Strength Training": ["Squats", "Deadlifts", "Bench Press", "Shoulder Press", "Rows"],
    "Endurance Training": ["Running", "Cycling", "Swimming", "Rowing"],
    "Power Training": ["Squat Jumps", "Box Jumps", "Deadlifts", "Clean and Press"],
    "Flexibility & Mobility": ["Stretching", "Yoga", "Pilates", "Dynamic Warm-up"],
    "CrossFit WOD": ["Burpees", "Squats", "Pull-ups", "Deadlifts", "Box Jumps"],
    "Bodyweight Workout": ["Push-ups", "Squats", "Pull-ups", "Plank", "Lunges", "Burpees"],
    "Weight Training": ["Squats", "Deadlifts", "Bench Press", "Shoulder Press", "Rows", "Bicep Curls"],
}


class RecommendationService:
    """Recommend exercises and workout templates and estimate calories."""

    def __init__(
        self,
        catalog_repo: ExerciseCatalogRepository,
        limit: int = 20,
        templates: list[dict] | None = None,
    ) -> None:
        self.catalog = catalog_repo
        self.limit = limit
        self.templates = WORKOUT_TEMPLATES if templates is None else templates

    @staticmethod
    def _parse_ids(exclude_ids: str | Iterable | None) -> list[int]:
        if not exclude_ids:
            return []
        if isinstance(exclude_ids, str):
            exclude_ids = exclude_ids.split(",")
        ids: list[int] = []
        for value in exclude_ids:
            value = str(value).strip()
            if not value:
                continue
            try:
                ids.append(int(value))
            except ValueError:
                raise ValueError(f"invalid exercise id: {value}")
        return ids

    def recommend_exercises(
        self,
        muscle_group: str | None = None,
        difficulty: str | None = None,
        exclude_ids: str | Iterable | None = None,
    ) -> list[dict]:
        """Return predefined exercises sorted by name, capped at ``limit``."""
        if muscle_group == "All":
            muscle_group = None
        return self.catalog.fetch_all_records(
            custom=False,
            muscle_group=muscle_group,
            difficulty=difficulty,
            exclude_ids=self._parse_ids(exclude_ids),
            limit=self.limit,
        )

    def workout_templates(
        self,
        goal: str | None = None,
        duration: int | str | None = None,
        difficulty: str | None = None,
    ) -> list[dict]:
        templates = list(self.templates)
        if goal:
            needle = goal.lower()
            templates = [
                t
                for t in templates
                if needle in t["name"].lower() or needle in t["description"].lower()
            ]
        if difficulty:
            templates = [
                t for t in templates if t["difficulty"].lower() == difficulty.lower()
            ]
        if duration not in (None, ""):
            try:
                max_duration = int(duration)
            except (TypeError, ValueError):
                raise ValueError("duration must be an integer number of minutes")
            templates = [t for t in templates if t["estimated_duration"] <= max_duration]
        return templates

    @staticmethod
    def suggest_exercises(workout_name: str | None) -> list[str]:
        """Return exercise names commonly logged for ``workout_name``."""
        if not workout_name:
            return []
        if workout_name in WORKOUT_EXERCISE_SUGGESTIONS:
            return WORKOUT_EXERCISE_SUGGESTIONS[workout_name]
        lowered = workout_name.lower()
        for key, names in WORKOUT_EXERCISE_SUGGESTIONS.items():
            if key.lower() == lowered:
                return names
        for key, names in WORKOUT_EXERCISE_SUGGESTIONS.items():
            if key.lower() in lowered or lowered in key.lower():
                return names
        return []

    def calculate_calories(
        self,
        exercise_id: int | None,
        sets: float | None = 0,
        reps: float | None = 0,
        duration: float | None = 0,
        weight: float | None = 0,
        distance: float | None = 0,
    ) -> dict:
        if not exercise_id:
            raise ValueError("Exercise ID is required")
        values = {
            "sets": sets,
            "reps": reps,
            "duration": duration,
            "weight": weight,
            "distance": distance,
        }
        for key, value in values.items():
            if value is not None and value < 0:
                raise ValueError(f"{key} must be non-negative")
        exercise = self.catalog.fetch_detail(exercise_id)
        calories = CalorieEstimator.estimate(
            exercise, sets, reps, duration, weight, distance
        )
        return {"calories": calories, "exercise": exercise["name"]}
