import json
import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from cli import export_workouts, backup_db, restore_db
from seed_sample_data import seed
from db import WorkoutRepository


class CLIToolsTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_cli.db"
        self.cleanup()

    def tearDown(self) -> None:
        self.cleanup()

    def cleanup(self) -> None:
        for path in [self.db_path, "backup.db", "exports"]:
            if os.path.exists(path):
                if os.path.isdir(path):
                    for f in os.listdir(path):
                        os.remove(os.path.join(path, f))
                    os.rmdir(path)
                else:
                    os.remove(path)

    def test_seed_is_idempotent(self) -> None:
        workout_id = seed(self.db_path)
        self.assertEqual(workout_id, 1)
        self.assertIsNone(seed(self.db_path))
        rows = WorkoutRepository(self.db_path).fetch_all_workouts()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0][1], "Full Body Strength")
        self.assertEqual(rows[0][7], 265)

    def test_export_backup_restore(self) -> None:
        os.makedirs("exports", exist_ok=True)
        seed(self.db_path)
        paths = export_workouts(self.db_path, "exports")
        self.assertEqual(paths, [os.path.join("exports", "workout_1.json")])
        with open(paths[0], encoding="utf-8") as f:
            data = json.load(f)
        self.assertEqual(data["total_calories_burned"], 265)
        self.assertEqual(len(data["exercises"]), 3)

        backup_db(self.db_path, "backup.db")
        self.assertTrue(os.path.exists("backup.db"))
        os.remove(self.db_path)
        restore_db("backup.db", self.db_path)
        self.assertEqual(len(WorkoutRepository(self.db_path).fetch_all_workouts()), 1)


if __name__ == "__main__":
    unittest.main()
