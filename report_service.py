from __future__ import annotations
import datetime
from typing import Dict, List

from db import WorkoutRepository


class ReportService:
    """Aggregate scheduled workouts into completion and calorie reports."""

    def __init__(self, workout_repo: WorkoutRepository) -> None:
        self.workouts = workout_repo

    @staticmethod
    def _parse(value: str | None, label: str) -> datetime.date:
        if not value:
            raise ValueError(
                "Start date and end date are required (format: YYYY-MM-DD)"
            )
        try:
            return datetime.date.fromisoformat(value)
        except ValueError:
            raise ValueError(f"{label} must be in YYYY-MM-DD format")

    def workout_report(self, start_date: str | None, end_date: str | None) -> Dict:
        """Summarise workouts scheduled between two dates, both inclusive."""
        start = self._parse(start_date, "startDate")
        end = self._parse(end_date, "endDate")
        if start > end:
            raise ValueError("startDate must not be after endDate")
        rows = self.workouts.fetch_all_workouts(
            start_date=start.isoformat(), end_date=end.isoformat()
        )
        total = len(rows)
        completed = 0
        calories = 0
        by_date: Dict[str, Dict[str, int | str]] = {}
        workouts: List[Dict] = []
        for wid, name, date, _time, is_completed, completed_at, _notes, kcal, *_ in rows:
            entry = by_date.setdefault(
                date,
                {"date": date, "total": 0, "completed": 0, "pending": 0, "calories": 0},
            )
            entry["total"] += 1
            entry["calories"] += int(kcal)
            if is_completed:
                completed += 1
                entry["completed"] += 1
            else:
                entry["pending"] += 1
            calories += int(kcal)
            workouts.append(
                {
                    "id": wid,
                    "name": name,
                    "scheduled_date": date,
                    "is_completed": bool(is_completed),
                    "completed_at": completed_at,
                    "total_calories_burned": int(kcal),
                }
            )
        percentage = round(completed / total * 100, 2) if total else 0
        return {
            "period": {"start_date": start_date, "end_date": end_date},
            "summary": {
                "total_workouts": total,
                "completed_workouts": completed,
                "pending_workouts": total - completed,
                "completion_percentage": percentage,
                "total_calories_burned": calories,
            },
            "workouts_by_date": [by_date[d] for d in sorted(by_date)],
            "workouts": workouts,
        }
