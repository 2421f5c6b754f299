import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException, APIRouter, Query, Request, Body
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from config import APP_VERSION, YamlConfig
from db import (
    WorkoutRepository,
    WorkoutExerciseRepository,
    ExerciseCatalogRepository,
)
from workout_service import WorkoutService
from recommendation_service import RecommendationService
from report_service import ReportService

logger = logging.getLogger(__name__)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExerciseIn(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    muscle_group: Optional[str] = None
    calories_per_minute: Optional[float] = None
    calories_per_rep: Optional[float] = None
    difficulty: Optional[str] = None


class ActivityIn(CamelModel):
    exercise: Optional[int] = None
    sets: Optional[int] = None
    reps: Optional[int] = None
    weight: Optional[float] = None
    duration: Optional[float] = None
    distance: Optional[float] = None
    completed: Optional[bool] = None
    notes: Optional[str] = None

    def to_entry(self) -> dict:
        data = self.model_dump(exclude={"exercise"})
        data["exercise_id"] = self.exercise
        return data


class WorkoutIn(CamelModel):
    name: Optional[str] = None
    scheduled_date: Optional[str] = None
    scheduled_time: Optional[str] = None
    exercises: Optional[List[ActivityIn]] = None
    overall_notes: Optional[str] = None
    is_completed: Optional[bool] = None


class CalorieRequest(CamelModel):
    exercise_id: Optional[int] = None
    sets: Optional[float] = 0
    reps: Optional[float] = 0
    duration: Optional[float] = 0
    weight: Optional[float] = 0
    distance: Optional[float] = 0


def camelize(value):
    """Recursively convert dictionary keys to camelCase for JSON output."""
    if isinstance(value, dict):
        return {to_camel(k): camelize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [camelize(v) for v in value]
    return value


def http_error(exc: Exception) -> HTTPException:
    """Translate a repository or service error into an HTTP error."""
    if isinstance(exc, PermissionError):
        return HTTPException(status_code=403, detail=str(exc))
    if isinstance(exc, LookupError):
        return HTTPException(status_code=404, detail=str(exc).strip("'\""))
    return HTTPException(status_code=400, detail=str(exc))


class GymAPI:
    """Provides REST endpoints for scheduling and logging workouts."""

    def __init__(
        self,
        db_path: str | None = None,
        yaml_path: str = "settings.yaml",
    ) -> None:
        self.config = YamlConfig(yaml_path)
        self.settings = self.config.settings(db_path=db_path)
        self.db_path = self.settings.db_path
        self.workouts = WorkoutRepository(self.db_path)
        self.activities = WorkoutExerciseRepository(self.db_path)
        self.exercise_catalog = ExerciseCatalogRepository(self.db_path)
        self.workout_service = WorkoutService(
            self.workouts,
            self.activities,
            self.exercise_catalog,
        )
        self.recommender = RecommendationService(
            self.exercise_catalog,
            limit=self.settings.recommendation_limit,
        )
        self.reports = ReportService(self.workouts)
        self.app = FastAPI(
            title="GymLog API",
            description="REST API for scheduling workouts and estimating calories",
            version=APP_VERSION,
        )
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=[self.settings.frontend_url],
            allow_credentials=self.settings.frontend_url != "*",
            allow_methods=["*"],
            allow_headers=["*"],
        )
        self._setup_routes()
        logger.info("GymLog API ready (database %s)", self.db_path)

    def _setup_routes(self) -> None:
        workouts_router = APIRouter(prefix="/api/workouts", tags=["Workouts"])
        exercises_router = APIRouter(prefix="/api/exercises", tags=["Exercises"])
        reports_router = APIRouter(prefix="/api/reports", tags=["Reports"])
        recommendations_router = APIRouter(
            prefix="/api/recommendations", tags=["Recommendations"]
        )

        @self.app.exception_handler(Exception)
        async def unhandled_error(request: Request, exc: Exception):
            logger.exception("unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(status_code=500, content={"detail": str(exc)})

        @self.app.get("/")
        def root():
            return {
                "status": "OK",
                "message": "GymLog API",
                "endpoints": [
                    "/api/health",
                    "/api/workouts",
                    "/api/exercises",
                    "/api/reports",
                    "/api/recommendations",
                ],
            }

        @self.app.get(
            "/api/health",
            summary="Health check",
            description="Verify API and database connectivity.",
        )
        def health():
            """Return API and database connection status."""
            self.workouts.fetch_all("SELECT 1;")
            return {"status": "OK", "message": "GymLog API is running"}

        @exercises_router.get("")
        def list_exercises(custom: Optional[bool] = None):
            return camelize(self.exercise_catalog.fetch_all_records(custom=custom))

        @exercises_router.get("/{exercise_id}")
        def get_exercise(exercise_id: int):
            try:
                return camelize(self.exercise_catalog.fetch_detail(exercise_id))
            except LookupError as e:
                raise http_error(e)

        @exercises_router.post("", status_code=201)
        def create_exercise(payload: ExerciseIn = Body(...)):
            try:
                eid = self.exercise_catalog.add(
                    payload.name,
                    payload.description,
                    payload.muscle_group,
                    payload.calories_per_minute or 0.0,
                    payload.calories_per_rep or 0.0,
                    payload.difficulty,
                )
                return camelize(self.exercise_catalog.fetch_detail(eid))
            except ValueError as e:
                raise http_error(e)

        @exercises_router.put("/{exercise_id}")
        def update_exercise(exercise_id: int, payload: ExerciseIn = Body(...)):
            try:
                self.exercise_catalog.update(
                    exercise_id,
                    payload.name,
                    payload.description,
                    payload.muscle_group,
                    payload.calories_per_minute,
                    payload.calories_per_rep,
                    payload.difficulty,
                )
                return camelize(self.exercise_catalog.fetch_detail(exercise_id))
            except (ValueError, LookupError, PermissionError) as e:
                raise http_error(e)

        @exercises_router.delete("/{exercise_id}")
        def delete_exercise(exercise_id: int):
            try:
                self.exercise_catalog.remove(exercise_id)
                return {"status": "deleted"}
            except (LookupError, PermissionError) as e:
                raise http_error(e)

        @workouts_router.get(
            "",
            summary="List workouts",
            description="Scheduled workouts, newest first, optionally filtered.",
        )
        def list_workouts(
            status: Optional[str] = None,
            start_date: Optional[str] = Query(None, alias="startDate"),
            end_date: Optional[str] = Query(None, alias="endDate"),
        ):
            try:
                return camelize(
                    self.workout_service.list_workouts(status, start_date, end_date)
                )
            except ValueError as e:
                raise http_error(e)

        @workouts_router.get("/{workout_id}")
        def get_workout(workout_id: int):
            try:
                return camelize(self.workout_service.fetch(workout_id))
            except LookupError as e:
                raise http_error(e)

        @workouts_router.post("", status_code=201, summary="Create workout")
        def create_workout(payload: WorkoutIn = Body(...)):
            try:
                workout_id = self.workout_service.create(
                    payload.name,
                    payload.scheduled_date,
                    payload.scheduled_time,
                    [a.to_entry() for a in payload.exercises or []],
                    payload.overall_notes,
                )
                return camelize(self.workout_service.fetch(workout_id))
            except (ValueError, LookupError) as e:
                raise http_error(e)

        @workouts_router.put("/{workout_id}")
        def update_workout(workout_id: int, payload: WorkoutIn = Body(...)):
            changes = payload.model_dump(exclude_unset=True, exclude={"exercises"})
            if payload.exercises is not None:
                changes["exercises"] = [a.to_entry() for a in payload.exercises]
            try:
                self.workout_service.update(workout_id, **changes)
                return camelize(self.workout_service.fetch(workout_id))
            except (ValueError, LookupError) as e:
                raise http_error(e)

        @workouts_router.post("/{workout_id}/exercises", status_code=201)
        def add_workout_exercise(workout_id: int, payload: ActivityIn = Body(...)):
            try:
                self.workout_service.add_activity(workout_id, payload.to_entry())
                return camelize(self.workout_service.fetch(workout_id))
            except (ValueError, LookupError) as e:
                raise http_error(e)

        @workouts_router.patch("/{workout_id}/exercises/{activity_id}")
        def update_workout_exercise(
            workout_id: int, activity_id: int, payload: ActivityIn = Body(...)
        ):
            changes = payload.model_dump(exclude_unset=True, exclude={"exercise"})
            try:
                self.workout_service.update_activity(workout_id, activity_id, **changes)
                return camelize(self.workout_service.fetch(workout_id))
            except (ValueError, LookupError) as e:
                raise http_error(e)

        @workouts_router.delete("/{workout_id}/exercises/{activity_id}")
        def delete_workout_exercise(workout_id: int, activity_id: int):
            try:
                self.workout_service.remove_activity(workout_id, activity_id)
                return camelize(self.workout_service.fetch(workout_id))
            except LookupError as e:
                raise http_error(e)

        @workouts_router.delete("/{workout_id}")
        def delete_workout(workout_id: int):
            try:
                self.workout_service.delete(workout_id)
                return {"status": "deleted"}
            except LookupError as e:
                raise http_error(e)

        @reports_router.get("/workouts")
        def workout_report(
            start_date: Optional[str] = Query(None, alias="startDate"),
            end_date: Optional[str] = Query(None, alias="endDate"),
        ):
            try:
                return camelize(self.reports.workout_report(start_date, end_date))
            except ValueError as e:
                raise http_error(e)

        @recommendations_router.post("/calculate-calories")
        def calculate_calories(payload: CalorieRequest = Body(...)):
            try:
                return self.recommender.calculate_calories(
                    payload.exercise_id,
                    payload.sets,
                    payload.reps,
                    payload.duration,
                    payload.weight,
                    payload.distance,
                )
            except (ValueError, LookupError) as e:
                raise http_error(e)

        @recommendations_router.get("/exercises")
        def recommend_exercises(
            muscle_group: Optional[str] = Query(None, alias="muscleGroup"),
            difficulty: Optional[str] = None,
            exclude_ids: Optional[List[str]] = Query(None, alias="excludeIds"),
        ):
            try:
                return camelize(
                    self.recommender.recommend_exercises(
                        muscle_group,
                        difficulty,
                        ",".join(exclude_ids) if exclude_ids else None,
                    )
                )
            except ValueError as e:
                raise http_error(e)

        @recommendations_router.get("/workouts")
        def recommend_workouts(
            goal: Optional[str] = None,
            duration: Optional[str] = None,
            difficulty: Optional[str] = None,
        ):
            try:
                return camelize(
                    self.recommender.workout_templates(goal, duration, difficulty)
                )
            except ValueError as e:
                raise http_error(e)

        @recommendations_router.get("/suggestions")
        def suggest_exercises(
            workout_name: Optional[str] = Query(None, alias="workoutName"),
        ):
            return self.recommender.suggest_exercises(workout_name)

        self.app.include_router(workouts_router)
        self.app.include_router(exercises_router)
        self.app.include_router(reports_router)
        self.app.include_router(recommendations_router)


api = GymAPI()
app = api.app

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=api.settings.host, port=api.settings.port)
