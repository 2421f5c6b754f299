import datetime
import logging

from db import ExerciseCatalogRepository, WorkoutRepository, WorkoutExerciseRepository
from workout_service import WorkoutService

logger = logging.getLogger(__name__)


def _exercise_id(catalog: ExerciseCatalogRepository, name: str) -> int:
    for record in catalog.fetch_all_records(custom=False):
        if record["name"] == name:
            return record["id"]
    raise LookupError(f"predefined exercise {name} not found")


def seed(db_path: str = "workout.db") -> int | None:
    """Schedule a demo workout for today if the database has none."""
    catalog = ExerciseCatalogRepository(db_path)
    workouts = WorkoutRepository(db_path)
    service = WorkoutService(workouts, WorkoutExerciseRepository(db_path), catalog)
    if workouts.fetch_all_workouts():
        logger.info("database already contains workouts")
        return None
    workout_id = service.create(
        "Full Body Strength",
        datetime.date.today().isoformat(),
        "07:30",
        [
            {"exercise_id": _exercise_id(catalog, "Squats"), "sets": 3, "reps": 10, "weight": 60},
            {"exercise_id": _exercise_id(catalog, "Push-ups"), "sets": 3, "reps": 15},
            {"exercise_id": _exercise_id(catalog, "Running"), "duration": 20},
        ],
        "Sample session",
    )
    logger.info("seed data inserted (workout %s)", workout_id)
    return workout_id


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    seed()
