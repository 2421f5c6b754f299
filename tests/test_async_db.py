import os
import sys
import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import (
    AsyncBaseRepository,
    AsyncWorkoutRepository,
    AsyncExerciseCatalogRepository,
    WorkoutExerciseRepository,
)


class NumberRepository(AsyncBaseRepository):
    async def init_db(self) -> None:
        async with self._async_connection() as conn:
            await conn.execute("CREATE TABLE IF NOT EXISTS numbers (val INTEGER)")
            await conn.commit()

    async def add(self, val: int) -> int:
        return await self.execute("INSERT INTO numbers (val) VALUES (?)", (val,))

    async def all(self):
        rows = await self.fetch_all("SELECT val FROM numbers")
        return [r[0] for r in rows]


@pytest.mark.asyncio
async def test_async_repository(tmp_path):
    repo = NumberRepository(str(tmp_path / "test.db"))
    await repo.init_db()
    await repo.add(5)
    assert await repo.all() == [5]


@pytest.mark.asyncio
async def test_async_workout_repo(tmp_path):
    db_file = str(tmp_path / "workout.db")
    repo = AsyncWorkoutRepository(db_file)
    wid = await repo.create("Leg Day", "2024-01-01", "07:30")
    assert wid == 1
    rows = await repo.fetch_all_workouts()
    assert rows[0][:4] == (1, "Leg Day", "2024-01-01", "07:30")
    detail = await repo.fetch_detail(wid)
    assert detail[4] == 0
    await repo.delete(wid)
    assert await repo.fetch_all_workouts() == []
    with pytest.raises(LookupError):
        await repo.delete(wid)


@pytest.mark.asyncio
async def test_async_workout_filters(tmp_path):
    repo = AsyncWorkoutRepository(str(tmp_path / "workout.db"))
    await repo.create("January", "2024-01-10")
    await repo.create("March", "2024-03-10")
    rows = await repo.fetch_all_workouts(start_date="2024-02-01")
    assert [r[1] for r in rows] == ["March"]
    rows = await repo.fetch_all_workouts(status="completed")
    assert rows == []


@pytest.mark.asyncio
async def test_async_delete_cascades(tmp_path):
    db_file = str(tmp_path / "workout.db")
    repo = AsyncWorkoutRepository(db_file)
    activities = WorkoutExerciseRepository(db_file)
    wid = await repo.create("Leg Day", "2024-01-01")
    activities.add(wid, 3, sets=3, reps=10, calories_burned=24)
    await repo.delete(wid)
    assert activities.fetch_for_workout(wid) == []


@pytest.mark.asyncio
async def test_async_catalog(tmp_path):
    repo = AsyncExerciseCatalogRepository(str(tmp_path / "workout.db"))
    records = await repo.fetch_all_records(custom=False, muscle_group="Cardio")
    assert [r["name"] for r in records] == ["Cycling", "Jumping Jacks", "Running"]
    running = await repo.fetch_detail(records[-1]["id"])
    assert running["calories_per_minute"] == 10.0
    with pytest.raises(LookupError):
        await repo.fetch_detail(9999)
