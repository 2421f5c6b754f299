import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from algorithms import CalorieEstimator


def exercise(
    name: str = "Exercise",
    muscle_group: str = "Other",
    per_minute: float = 0.0,
    per_rep: float = 0.0,
) -> dict:
    return {
        "name": name,
        "muscle_group": muscle_group,
        "calories_per_minute": per_minute,
        "calories_per_rep": per_rep,
    }


class DurationStrategyTestCase(unittest.TestCase):
    def test_per_minute_coefficient_wins(self) -> None:
        plank = exercise("Plank", "Core", per_minute=3)
        self.assertEqual(CalorieEstimator.estimate(plank, duration=10), 30)
        self.assertEqual(
            CalorieEstimator.estimate(
                plank, sets=4, reps=12, duration=10, weight=100, distance=3
            ),
            30,
        )

    def test_per_minute_is_rounded(self) -> None:
        running = exercise("Running", "Cardio", per_minute=10)
        self.assertEqual(CalorieEstimator.estimate(running, duration=2.25), 23)

    def test_muscle_group_rate(self) -> None:
        legs = exercise("Leg Press", "Legs")
        self.assertEqual(CalorieEstimator.estimate(legs, duration=10), 70)
        self.assertEqual(CalorieEstimator.estimate(legs, duration=3), 21)

    def test_every_muscle_group_rate(self) -> None:
        for group, rate in CalorieEstimator.BASE_PER_MINUTE.items():
            with self.subTest(group=group):
                self.assertEqual(
                    CalorieEstimator.estimate(exercise(muscle_group=group), duration=10),
                    rate * 10,
                )

    def test_unknown_muscle_group_defaults_to_five(self) -> None:
        yoga = exercise("Sun Salutation", "Yoga")
        self.assertEqual(CalorieEstimator.estimate(yoga, duration=10), 50)

    def test_weight_bonus(self) -> None:
        legs = exercise("Squats", "Legs")
        # 7 * 10 + (50 / 10) * 10 * 0.2
        self.assertEqual(CalorieEstimator.estimate(legs, duration=10, weight=50), 80)

    def test_weight_bonus_ignored_with_coefficient(self) -> None:
        cycling = exercise("Cycling", "Cardio", per_minute=8)
        self.assertEqual(
            CalorieEstimator.estimate(cycling, duration=10, weight=50), 80
        )


class DistanceStrategyTestCase(unittest.TestCase):
    def test_running_distance(self) -> None:
        run = exercise("Morning Run", "Cardio")
        self.assertEqual(CalorieEstimator.estimate(run, distance=5), 300)

    def test_run_match_is_case_insensitive(self) -> None:
        run = exercise("TRAIL RUNNING", "Cardio")
        self.assertEqual(CalorieEstimator.estimate(run, distance=2), 120)

    def test_other_cardio_distance(self) -> None:
        cycling = exercise("Cycling", "Cardio")
        self.assertEqual(CalorieEstimator.estimate(cycling, distance=5), 150)

    def test_non_cardio_distance_is_zero(self) -> None:
        lunges = exercise("Walking Lunges", "Legs")
        self.assertEqual(CalorieEstimator.estimate(lunges, distance=5), 0)

    def test_non_cardio_distance_shadows_reps(self) -> None:
        # the distance strategy is selected and yields zero; reps are ignored
        lunges = exercise("Walking Lunges", "Legs", per_rep=1)
        self.assertEqual(
            CalorieEstimator.select_strategy(lunges, sets=3, reps=10, distance=5),
            "distance",
        )
        self.assertEqual(
            CalorieEstimator.estimate(lunges, sets=3, reps=10, distance=5), 0
        )

    def test_duration_takes_priority_over_distance(self) -> None:
        run = exercise("Running", "Cardio", per_minute=10)
        self.assertEqual(CalorieEstimator.estimate(run, duration=10, distance=5), 100)


class RepStrategyTestCase(unittest.TestCase):
    def test_reps(self) -> None:
        ex = exercise("Pull-ups", "Back", per_rep=1)
        self.assertEqual(CalorieEstimator.estimate(ex, sets=3, reps=10), 30)

    def test_reps_with_weight(self) -> None:
        ex = exercise("Pull-ups", "Back", per_rep=1)
        # 30 + (20 / 10) * 3 * 10 * 0.1
        self.assertEqual(CalorieEstimator.estimate(ex, sets=3, reps=10, weight=20), 36)

    def test_half_rounds_up(self) -> None:
        ex = exercise("Push-ups", "Chest", per_rep=0.5)
        self.assertEqual(CalorieEstimator.estimate(ex, sets=1, reps=1), 1)
        self.assertEqual(CalorieEstimator.estimate(ex, sets=1, reps=5), 3)

    def test_missing_reps_is_zero(self) -> None:
        ex = exercise("Pull-ups", "Back", per_rep=1)
        self.assertEqual(CalorieEstimator.estimate(ex, sets=3), 0)
        self.assertIsNone(CalorieEstimator.select_strategy(ex, sets=3))


class SetStrategyTestCase(unittest.TestCase):
    def test_sets_fallback(self) -> None:
        chest = exercise("Cable Fly", "Chest")
        self.assertEqual(CalorieEstimator.estimate(chest, sets=3, reps=10), 36)

    def test_sets_fallback_with_weight(self) -> None:
        chest = exercise("Cable Fly", "Chest")
        # 12 * 3 + (40 / 10) * 3 * 0.5
        self.assertEqual(
            CalorieEstimator.estimate(chest, sets=3, reps=10, weight=40), 42
        )

    def test_unmapped_group_defaults_to_eight(self) -> None:
        cardio = exercise("Box Jumps", "Cardio")
        self.assertEqual(CalorieEstimator.estimate(cardio, sets=3, reps=10), 24)

    def test_full_body(self) -> None:
        ex = exercise("Thrusters", "Full Body")
        self.assertEqual(CalorieEstimator.estimate(ex, sets=2, reps=8), 40)


class EstimatorContractTestCase(unittest.TestCase):
    def test_no_activity_is_zero(self) -> None:
        ex = exercise("Squats", "Legs", per_minute=5, per_rep=1)
        self.assertEqual(CalorieEstimator.estimate(ex), 0)

    def test_none_inputs_count_as_zero(self) -> None:
        ex = exercise("Pull-ups", "Back", per_rep=1)
        self.assertEqual(
            CalorieEstimator.estimate(ex, 3, 10, None, None, None), 30
        )

    def test_strategy_order(self) -> None:
        ex = exercise("Squats", "Legs", per_rep=1)
        self.assertEqual(CalorieEstimator.select_strategy(ex, duration=1), "duration")
        self.assertEqual(CalorieEstimator.select_strategy(ex, distance=1), "distance")
        self.assertEqual(CalorieEstimator.select_strategy(ex, sets=1, reps=1), "reps")
        plain = exercise("Squats", "Legs")
        self.assertEqual(CalorieEstimator.select_strategy(plain, sets=1, reps=1), "sets")

    def test_idempotent(self) -> None:
        ex = exercise("Deadlifts", "Back", per_rep=1.2)
        first = CalorieEstimator.estimate(ex, sets=5, reps=5, weight=140)
        second = CalorieEstimator.estimate(ex, sets=5, reps=5, weight=140)
        self.assertEqual(first, second)
        self.assertIsInstance(first, int)

    def test_accepts_objects(self) -> None:
        class Definition:
            name = "Morning Run"
            muscle_group = "Cardio"
            calories_per_minute = 0
            calories_per_rep = 0

        self.assertEqual(CalorieEstimator.estimate(Definition(), distance=5), 300)

    def test_round_half_up(self) -> None:
        self.assertEqual(CalorieEstimator.round_half_up(0.5), 1)
        self.assertEqual(CalorieEstimator.round_half_up(2.5), 3)
        self.assertEqual(CalorieEstimator.round_half_up(2.49), 2)


if __name__ == "__main__":
    unittest.main()
