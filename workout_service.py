from __future__ import annotations
import datetime
import logging
from typing import Any, Iterable, Optional

from db import (
    WorkoutRepository,
    WorkoutExerciseRepository,
    ExerciseCatalogRepository,
)
from algorithms.calorie_estimator import CalorieEstimator

logger = logging.getLogger(__name__)

_NUMERIC_FIELDS = ("sets", "reps", "weight", "duration", "distance")


class WorkoutService:
    """Maintains logged activities, cached calories and workout totals."""

    def __init__(
        self,
        workout_repo: WorkoutRepository,
        activity_repo: WorkoutExerciseRepository,
        catalog_repo: ExerciseCatalogRepository,
    ) -> None:
        self.workouts = workout_repo
        self.activities = activity_repo
        self.catalog = catalog_repo

    @staticmethod
    def _parse_date(value: str) -> str:
        text = str(value)
        try:
            parsed = datetime.date.fromisoformat(text).isoformat()
        except ValueError:
            parsed = None
        if parsed != text:
            raise ValueError("scheduledDate must be in YYYY-MM-DD format")
        return parsed

    @staticmethod
    def _parse_time(value: str | None) -> str | None:
        if not value:
            return None
        try:
            return datetime.datetime.strptime(value, "%H:%M").strftime("%H:%M")
        except ValueError:
            raise ValueError("scheduledTime must be in HH:MM format")

    @staticmethod
    def _count(key: str, value: Any) -> int:
        number = float(value or 0)
        if not number.is_integer():
            raise ValueError(f"{key} must be a whole number")
        return int(number)

    @classmethod
    def _normalize(cls, entry: dict) -> dict:
        """Return ``entry`` with defaults applied and numbers coerced."""
        result = {
            "exercise_id": entry.get("exercise_id"),
            "sets": cls._count("sets", entry.get("sets")),
            "reps": cls._count("reps", entry.get("reps")),
            "weight": float(entry.get("weight") or 0),
            "duration": float(entry.get("duration") or 0),
            "distance": float(entry.get("distance") or 0),
            "completed": bool(entry.get("completed") or False),
            "notes": entry.get("notes"),
        }
        for key in _NUMERIC_FIELDS:
            if result[key] < 0:
                raise ValueError(f"{key} must be non-negative")
        return result

    @staticmethod
    def _estimate(exercise: dict, entry: dict) -> int:
        return CalorieEstimator.estimate(
            exercise,
            entry["sets"],
            entry["reps"],
            entry["duration"],
            entry["weight"],
            entry["distance"],
        )

    def _prepare(self, entries: Iterable[dict]) -> list[dict]:
        """Resolve exercises and compute calories before anything is written."""
        prepared = []
        for raw in entries:
            entry = self._normalize(raw)
            if entry["exercise_id"] is None:
                raise ValueError("exercise is required for each workout exercise")
            exercise = self.catalog.fetch_detail(entry["exercise_id"])
            entry["calories_burned"] = self._estimate(exercise, entry)
            prepared.append(entry)
        return prepared

    def _workout_fields(self, changes: dict) -> dict:
        """Validate the scalar fields of a partial update."""
        fields = {}
        if changes.get("name") is not None:
            name = changes["name"].strip()
            if not name:
                raise ValueError("Name and scheduled date are required")
            fields["name"] = name
        if changes.get("scheduled_date") is not None:
            fields["scheduled_date"] = self._parse_date(changes["scheduled_date"])
        if "scheduled_time" in changes:
            fields["scheduled_time"] = self._parse_time(changes["scheduled_time"])
        if "overall_notes" in changes:
            fields["overall_notes"] = changes["overall_notes"]
        return fields

    def create(
        self,
        name: str | None,
        scheduled_date: str | None,
        scheduled_time: str | None = None,
        exercises: Optional[Iterable[dict]] = None,
        overall_notes: str | None = None,
    ) -> int:
        name = (name or "").strip()
        if not name or not scheduled_date:
            raise ValueError("Name and scheduled date are required")
        date = self._parse_date(scheduled_date)
        time = self._parse_time(scheduled_time)
        entries = self._prepare(exercises or [])
        workout_id = self.workouts.create(name, date, time, overall_notes or "", entries)
        logger.info(
            "created workout %s with %d exercises (%d kcal)",
            workout_id,
            len(entries),
            sum(e["calories_burned"] for e in entries),
        )
        return workout_id

    def update(self, workout_id: int, **changes: Any) -> None:
        """Apply a partial update.

        Every given field is validated before anything is written; a blank
        ``name`` or a malformed date or time rejects the whole update.
        ``scheduled_time`` and ``overall_notes`` may be cleared with ``None``.
        An ``exercises`` list replaces every logged activity, and
        ``is_completed`` toggles completion.
        """
        self.workouts.fetch_detail(workout_id)
        fields = self._workout_fields(changes)
        entries = None
        if changes.get("exercises") is not None:
            entries = self._prepare(changes["exercises"])
        self.workouts.update(workout_id, **fields)
        if entries is not None:
            self.workouts.replace_activities(workout_id, entries)
        if changes.get("is_completed") is not None:
            self.set_completed(workout_id, bool(changes["is_completed"]))
        logger.info("updated workout %s", workout_id)

    def set_completed(self, workout_id: int, completed: bool) -> None:
        self.workouts.fetch_detail(workout_id)
        self.workouts.set_completed(workout_id, completed)

    def add_activity(self, workout_id: int, entry: dict) -> int:
        self.workouts.fetch_detail(workout_id)
        (prepared,) = self._prepare([entry])
        return self.activities.add(workout_id, **prepared)

    def _activity_in_workout(self, workout_id: int, activity_id: int) -> dict:
        self.workouts.fetch_detail(workout_id)
        activity = self.activities.fetch_detail(activity_id)
        if activity["workout_id"] != workout_id:
            raise LookupError("exercise not found in workout")
        return activity

    def update_activity(self, workout_id: int, activity_id: int, **changes: Any) -> None:
        """Edit one activity and refresh its calories and the workout total.

        When the referenced exercise no longer exists the cached calories
        are kept as they are.
        """
        activity = self._activity_in_workout(workout_id, activity_id)
        merged = {k: v for k, v in activity.items()}
        merged.update({k: v for k, v in changes.items() if v is not None})
        entry = self._normalize(merged)
        calories = activity["calories_burned"]
        exercise = self.catalog.find(activity["exercise_id"])
        if exercise is not None:
            calories = self._estimate(exercise, entry)
        self.activities.update(
            activity_id,
            entry["sets"],
            entry["reps"],
            entry["weight"],
            entry["duration"],
            entry["distance"],
            calories,
            entry["completed"],
            entry["notes"],
        )

    def remove_activity(self, workout_id: int, activity_id: int) -> None:
        self._activity_in_workout(workout_id, activity_id)
        self.activities.remove(activity_id)

    def delete(self, workout_id: int) -> None:
        self.workouts.delete(workout_id)
        logger.info("deleted workout %s", workout_id)

    def _exercise_summary(self, exercise_id: int) -> dict | None:
        exercise = self.catalog.find(exercise_id)
        if exercise is None:
            return None
        return {
            "id": exercise["id"],
            "name": exercise["name"],
            "description": exercise["description"],
            "muscle_group": exercise["muscle_group"],
        }

    def _detail(self, row: tuple) -> dict:
        (
            wid,
            name,
            scheduled_date,
            scheduled_time,
            is_completed,
            completed_at,
            overall_notes,
            total,
            created_at,
            updated_at,
        ) = row
        activities = []
        for activity in self.activities.fetch_for_workout(wid):
            activity = dict(activity)
            activity["exercise"] = self._exercise_summary(activity["exercise_id"])
            activities.append(activity)
        return {
            "id": wid,
            "name": name,
            "scheduled_date": scheduled_date,
            "scheduled_time": scheduled_time,
            "exercises": activities,
            "is_completed": bool(is_completed),
            "completed_at": completed_at,
            "overall_notes": overall_notes,
            "total_calories_burned": int(total),
            "created_at": created_at,
            "updated_at": updated_at,
        }

    def fetch(self, workout_id: int) -> dict:
        return self._detail(self.workouts.fetch_detail(workout_id))

    def list_workouts(
        self,
        status: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> list[dict]:
        if start_date:
            start_date = self._parse_date(start_date)
        if end_date:
            end_date = self._parse_date(end_date)
        rows = self.workouts.fetch_all_workouts(status, start_date, end_date)
        return [self._detail(r) for r in rows]
