import math
from typing import Any, Callable, Mapping


class CalorieEstimator:
    """Estimate calories burned for one logged exercise.

    Exactly one strategy applies, in priority order: duration, distance,
    reps, sets. The first strategy whose guard matches decides the result,
    even when it yields zero.
    """

    BASE_PER_MINUTE: dict[str, float] = {
        "Cardio": 10,
        "Full Body": 8,
        "Legs": 7,
        "Back": 6,
        "Chest": 6,
        "Shoulders": 5,
        "Arms": 4,
        "Core": 5,
        "Other": 5,
    }
    DEFAULT_PER_MINUTE: float = 5

    BASE_PER_SET: dict[str, float] = {
        "Legs": 15,
        "Back": 12,
        "Chest": 12,
        "Full Body": 20,
        "Shoulders": 10,
        "Arms": 8,
        "Core": 10,
        "Other": 8,
    }
    DEFAULT_PER_SET: float = 8

    RUN_PER_KM: float = 60
    OTHER_CARDIO_PER_KM: float = 30

    @staticmethod
    def _field(exercise: Any, key: str, default: Any = 0) -> Any:
        if isinstance(exercise, Mapping):
            value = exercise.get(key, default)
        else:
            value = getattr(exercise, key, default)
        return default if value is None else value

    @classmethod
    def _by_duration(cls, exercise, sets, reps, duration, weight, distance) -> float:
        per_minute = cls._field(exercise, "calories_per_minute")
        if per_minute > 0:
            return per_minute * duration
        group = cls._field(exercise, "muscle_group", "Other")
        calories = cls.BASE_PER_MINUTE.get(group, cls.DEFAULT_PER_MINUTE) * duration
        if weight > 0:
            calories += (weight / 10) * duration * 0.2
        return calories

    @classmethod
    def _by_distance(cls, exercise, sets, reps, duration, weight, distance) -> float:
        # non-cardio exercises logged by distance alone estimate to zero
        if cls._field(exercise, "muscle_group", "Other") != "Cardio":
            return 0.0
        name = str(cls._field(exercise, "name", ""))
        per_km = cls.RUN_PER_KM if "run" in name.lower() else cls.OTHER_CARDIO_PER_KM
        return distance * per_km

    @classmethod
    def _by_reps(cls, exercise, sets, reps, duration, weight, distance) -> float:
        calories = cls._field(exercise, "calories_per_rep") * sets * reps
        if weight > 0:
            calories += (weight / 10) * sets * reps * 0.1
        return calories

    @classmethod
    def _by_sets(cls, exercise, sets, reps, duration, weight, distance) -> float:
        group = cls._field(exercise, "muscle_group", "Other")
        calories = cls.BASE_PER_SET.get(group, cls.DEFAULT_PER_SET) * sets
        if weight > 0:
            calories += (weight / 10) * sets * 0.5
        return calories

    @classmethod
    def strategies(cls) -> list[tuple[str, Callable[..., bool], Callable[..., float]]]:
        """Return ``(name, guard, formula)`` triples in evaluation order."""
        return [
            (
                "duration",
                lambda ex, s, r, d, w, km: d > 0,
                cls._by_duration,
            ),
            (
                "distance",
                lambda ex, s, r, d, w, km: km > 0,
                cls._by_distance,
            ),
            (
                "reps",
                lambda ex, s, r, d, w, km: cls._field(ex, "calories_per_rep") > 0
                and s > 0
                and r > 0,
                cls._by_reps,
            ),
            (
                "sets",
                lambda ex, s, r, d, w, km: s > 0 and r > 0,
                cls._by_sets,
            ),
        ]

    @classmethod
    def select_strategy(
        cls,
        exercise: Any,
        sets: float = 0,
        reps: float = 0,
        duration: float = 0,
        weight: float = 0,
        distance: float = 0,
    ) -> str | None:
        """Return the name of the strategy that would be applied, if any."""
        args = cls._normalize(sets, reps, duration, weight, distance)
        for name, guard, _formula in cls.strategies():
            if guard(exercise, *args):
                return name
        return None

    @staticmethod
    def _normalize(*values: float | None) -> tuple[float, ...]:
        return tuple(v or 0 for v in values)

    @staticmethod
    def round_half_up(value: float) -> int:
        """Round to the nearest integer with halves rounded up."""
        return int(math.floor(value + 0.5))

    @classmethod
    def estimate(
        cls,
        exercise: Any,
        sets: float = 0,
        reps: float = 0,
        duration: float = 0,
        weight: float = 0,
        distance: float = 0,
    ) -> int:
        """Return estimated calories for ``exercise`` as a non-negative integer.

        ``exercise`` is an exercise record as returned by
        ``ExerciseCatalogRepository.fetch_detail`` or any object exposing
        ``name``, ``muscle_group``, ``calories_per_minute`` and
        ``calories_per_rep``. ``None`` inputs count as zero.
        """
        args = cls._normalize(sets, reps, duration, weight, distance)
        for _name, guard, formula in cls.strategies():
            if guard(exercise, *args):
                return max(0, cls.round_half_up(formula(exercise, *args)))
        return 0
