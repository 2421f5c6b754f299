import requests
from typing import Optional


class GymLogClient:
    """Simple REST client for the GymLog API.

    ``session`` defaults to a :class:`requests.Session`; any object with the
    same ``get``/``post``/``put``/``patch``/``delete`` methods can be used.
    """

    def __init__(self, base_url: str = "http://localhost:5001", session=None) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api{path}"

    def list_exercises(self, custom: Optional[bool] = None) -> list:
        params = {} if custom is None else {"custom": str(custom).lower()}
        resp = self.session.get(self._url("/exercises"), params=params)
        resp.raise_for_status()
        return resp.json()

    def create_exercise(self, name: str, muscle_group: str = "Other", **fields) -> dict:
        resp = self.session.post(
            self._url("/exercises"),
            json={"name": name, "muscleGroup": muscle_group, **fields},
        )
        resp.raise_for_status()
        return resp.json()

    def delete_exercise(self, exercise_id: int) -> None:
        resp = self.session.delete(self._url(f"/exercises/{exercise_id}"))
        resp.raise_for_status()

    def create_workout(
        self,
        name: str,
        scheduled_date: str,
        exercises: Optional[list] = None,
        **fields,
    ) -> dict:
        resp = self.session.post(
            self._url("/workouts"),
            json={
                "name": name,
                "scheduledDate": scheduled_date,
                "exercises": exercises or [],
                **fields,
            },
        )
        resp.raise_for_status()
        return resp.json()

    def list_workouts(self, **params: str) -> list:
        resp = self.session.get(self._url("/workouts"), params=params)
        resp.raise_for_status()
        return resp.json()

    def complete_workout(self, workout_id: int, completed: bool = True) -> dict:
        resp = self.session.put(
            self._url(f"/workouts/{workout_id}"),
            json={"isCompleted": completed},
        )
        resp.raise_for_status()
        return resp.json()

    def calculate_calories(self, exercise_id: int, **activity: float) -> int:
        resp = self.session.post(
            self._url("/recommendations/calculate-calories"),
            json={"exerciseId": exercise_id, **activity},
        )
        resp.raise_for_status()
        return resp.json()["calories"]

    def workout_report(self, start_date: str, end_date: str) -> dict:
        resp = self.session.get(
            self._url("/reports/workouts"),
            params={"startDate": start_date, "endDate": end_date},
        )
        resp.raise_for_status()
        return resp.json()
