import sqlite3
import aiosqlite
import csv
import os
import datetime
import logging
from contextlib import contextmanager, asynccontextmanager
from typing import Any, Iterable, List, Tuple, Optional

logger = logging.getLogger(__name__)

MUSCLE_GROUPS = (
    "Chest",
    "Back",
    "Shoulders",
    "Arms",
    "Legs",
    "Core",
    "Cardio",
    "Full Body",
    "Other",
)
DIFFICULTIES = ("Beginner", "Intermediate", "Advanced")


def _now() -> str:
    return datetime.datetime.now().isoformat(timespec="seconds")


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "exercises": (
            """CREATE TABLE exercises (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    description TEXT,
                    muscle_group TEXT NOT NULL DEFAULT 'Other',
                    calories_per_minute REAL NOT NULL DEFAULT 0,
                    calories_per_rep REAL NOT NULL DEFAULT 0,
                    difficulty TEXT NOT NULL DEFAULT 'Intermediate',
                    is_custom INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT,
                    updated_at TEXT
                );""",
            [
                "id",
                "name",
                "description",
                "muscle_group",
                "calories_per_minute",
                "calories_per_rep",
                "difficulty",
                "is_custom",
                "created_at",
                "updated_at",
            ],
        ),
        "workouts": (
            """CREATE TABLE workouts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    scheduled_date TEXT NOT NULL,
                    scheduled_time TEXT,
                    is_completed INTEGER NOT NULL DEFAULT 0,
                    completed_at TEXT,
                    overall_notes TEXT,
                    total_calories_burned INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT,
                    updated_at TEXT
                );""",
            [
                "id",
                "name",
                "scheduled_date",
                "scheduled_time",
                "is_completed",
                "completed_at",
                "overall_notes",
                "total_calories_burned",
                "created_at",
                "updated_at",
            ],
        ),
        # exercise_id is a plain reference: deleting a custom exercise must
        # leave logged activities and their cached calories untouched.
        "workout_exercises": (
            """CREATE TABLE workout_exercises (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    workout_id INTEGER NOT NULL,
                    exercise_id INTEGER NOT NULL,
                    position INTEGER NOT NULL DEFAULT 0,
                    sets INTEGER NOT NULL DEFAULT 0,
                    reps INTEGER NOT NULL DEFAULT 0,
                    weight REAL NOT NULL DEFAULT 0,
                    duration REAL NOT NULL DEFAULT 0,
                    distance REAL NOT NULL DEFAULT 0,
                    calories_burned INTEGER NOT NULL DEFAULT 0,
                    completed INTEGER NOT NULL DEFAULT 0,
                    notes TEXT,
                    FOREIGN KEY(workout_id) REFERENCES workouts(id) ON DELETE CASCADE
                );""",
            [
                "id",
                "workout_id",
                "exercise_id",
                "position",
                "sets",
                "reps",
                "weight",
                "duration",
                "distance",
                "calories_burned",
                "completed",
                "notes",
            ],
        ),
    }

    def __init__(self, db_path: str = "workout.db") -> None:
        self._db_path = db_path
        self._ensure_schema()
        self._import_exercise_catalog_data()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        connection.execute("PRAGMA foreign_keys=on;")
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute("PRAGMA foreign_keys=off;")
            for table, (sql, columns) in self._TABLE_DEFINITIONS.items():
                self._ensure_table(conn, table, sql, columns)
            cursor.execute("PRAGMA foreign_keys=on;")

    def _ensure_table(
        self, conn: sqlite3.Connection, table: str, sql: str, columns: List[str]
    ) -> None:
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?;", (table,)
        )
        if cur.fetchone() is None:
            conn.execute(sql)
            return

        cur = conn.execute(f"PRAGMA table_info({table});")
        existing_cols = [row[1] for row in cur.fetchall()]
        if existing_cols == columns:
            return

        logger.info("migrating table %s", table)
        conn.execute(f"ALTER TABLE {table} RENAME TO {table}_old;")
        conn.execute(sql)

        common = [c for c in existing_cols if c in columns]
        if common:
            cols = ", ".join(common)
            missing = [c for c in columns if c not in existing_cols]
            if missing:
                def default_val(col: str) -> str:
                    if col == "muscle_group":
                        return "'Other'"
                    if col == "difficulty":
                        return "'Intermediate'"
                    if col in (
                        "position",
                        "sets",
                        "reps",
                        "weight",
                        "duration",
                        "distance",
                        "calories_burned",
                        "completed",
                        "is_completed",
                        "is_custom",
                        "calories_per_minute",
                        "calories_per_rep",
                        "total_calories_burned",
                    ):
                        return "0"
                    return "NULL"

                defaults = ", ".join(default_val(c) for c in missing)
                conn.execute(
                    f"INSERT INTO {table} ({cols}, {', '.join(missing)}) SELECT {cols}, {defaults} FROM {table}_old;"
                )
            else:
                conn.execute(
                    f"INSERT INTO {table} ({cols}) SELECT {cols} FROM {table}_old;"
                )
        conn.execute(f"DROP TABLE {table}_old;")

    def _import_exercise_catalog_data(self) -> None:
        csv_path = os.path.join(os.path.dirname(__file__), "exercise_catalog.csv")
        if not os.path.exists(csv_path):
            return
        with open(csv_path, newline="", encoding="utf-8") as csvfile:
            reader = csv.DictReader(csvfile)
            records = [
                (
                    row["Exercise Name"],
                    row.get("Description", ""),
                    row["Muscle Group"],
                    float(row.get("Calories Per Minute") or 0),
                    float(row.get("Calories Per Rep") or 0),
                    row.get("Difficulty") or "Intermediate",
                )
                for row in reader
            ]
        timestamp = _now()
        with self._connection() as conn:
            for (
                name,
                description,
                muscle_group,
                per_minute,
                per_rep,
                difficulty,
            ) in records:
                rows = conn.execute(
                    "SELECT id FROM exercises WHERE name = ? AND is_custom = 0;",
                    (name,),
                ).fetchall()
                if rows:
                    conn.execute(
                        "UPDATE exercises SET description = ?, muscle_group = ?, calories_per_minute = ?, calories_per_rep = ?, difficulty = ? WHERE id = ?;",
                        (
                            description,
                            muscle_group,
                            per_minute,
                            per_rep,
                            difficulty,
                            rows[0][0],
                        ),
                    )
                else:
                    conn.execute(
                        "INSERT INTO exercises (name, description, muscle_group, calories_per_minute, calories_per_rep, difficulty, is_custom, created_at, updated_at) "
                        "VALUES (?, ?, ?, ?, ?, ?, 0, ?, ?);",
                        (
                            name,
                            description,
                            muscle_group,
                            per_minute,
                            per_rep,
                            difficulty,
                            timestamp,
                            timestamp,
                        ),
                    )
        logger.debug("seeded %d predefined exercises", len(records))


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def execute(self, query: str, params: Tuple = ()) -> int:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.lastrowid

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()


class AsyncDatabase(Database):
    """Provides asynchronous connection management."""

    @asynccontextmanager
    async def _async_connection(self):
        conn = await aiosqlite.connect(self._db_path)
        await conn.execute("PRAGMA foreign_keys=on;")
        try:
            yield conn
            await conn.commit()
        finally:
            await conn.close()


class AsyncBaseRepository(AsyncDatabase):
    """Asynchronous variant of BaseRepository using aiosqlite."""

    async def execute(self, query: str, params: Tuple = ()) -> int:
        async with self._async_connection() as conn:
            cursor = await conn.execute(query, params)
            await conn.commit()
            return cursor.lastrowid

    async def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        async with self._async_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return rows


_EXERCISE_COLUMNS = (
    "id, name, description, muscle_group, calories_per_minute, calories_per_rep, "
    "difficulty, is_custom, created_at, updated_at"
)


def _exercise_query(
    custom: Optional[bool] = None,
    muscle_group: Optional[str] = None,
    difficulty: Optional[str] = None,
    exclude_ids: Optional[Iterable[int]] = None,
    limit: Optional[int] = None,
) -> tuple[str, tuple]:
    query = f"SELECT {_EXERCISE_COLUMNS} FROM exercises WHERE 1=1"
    params: list[Any] = []
    if custom is not None:
        query += " AND is_custom = ?"
        params.append(int(custom))
    if muscle_group:
        query += " AND muscle_group = ?"
        params.append(muscle_group)
    if difficulty:
        query += " AND difficulty = ?"
        params.append(difficulty)
    excluded = list(exclude_ids or [])
    if excluded:
        placeholders = ",".join(["?" for _ in excluded])
        query += f" AND id NOT IN ({placeholders})"
        params.extend(excluded)
    query += " ORDER BY name, id"
    if limit is not None:
        query += " LIMIT ?"
        params.append(limit)
    query += ";"
    return query, tuple(params)


def _exercise_row(row: Tuple) -> dict:
    (
        eid,
        name,
        description,
        muscle_group,
        per_minute,
        per_rep,
        difficulty,
        is_custom,
        created_at,
        updated_at,
    ) = row
    return {
        "id": eid,
        "name": name,
        "description": description,
        "muscle_group": muscle_group,
        "calories_per_minute": float(per_minute),
        "calories_per_rep": float(per_rep),
        "difficulty": difficulty,
        "is_custom": bool(is_custom),
        "created_at": created_at,
        "updated_at": updated_at,
    }


def _check_non_negative(**values: Optional[float]) -> None:
    for key, value in values.items():
        if value is not None and value < 0:
            raise ValueError(f"{key} must be non-negative")


class ExerciseCatalogRepository(BaseRepository):
    """Repository for predefined and custom exercise definitions."""

    @staticmethod
    def _validate(
        muscle_group: Optional[str],
        difficulty: Optional[str],
        calories_per_minute: Optional[float],
        calories_per_rep: Optional[float],
    ) -> None:
        if muscle_group is not None and muscle_group not in MUSCLE_GROUPS:
            raise ValueError(f"invalid muscle group: {muscle_group}")
        if difficulty is not None and difficulty not in DIFFICULTIES:
            raise ValueError(f"invalid difficulty: {difficulty}")
        _check_non_negative(
            calories_per_minute=calories_per_minute,
            calories_per_rep=calories_per_rep,
        )

    def fetch_all_records(
        self,
        custom: Optional[bool] = None,
        muscle_group: Optional[str] = None,
        difficulty: Optional[str] = None,
        exclude_ids: Optional[Iterable[int]] = None,
        limit: Optional[int] = None,
    ) -> List[dict]:
        """Return exercises matching the filters sorted by name."""
        query, params = _exercise_query(
            custom, muscle_group, difficulty, exclude_ids, limit
        )
        return [_exercise_row(r) for r in self.fetch_all(query, params)]

    def find(self, exercise_id: int) -> Optional[dict]:
        rows = self.fetch_all(
            f"SELECT {_EXERCISE_COLUMNS} FROM exercises WHERE id = ?;",
            (exercise_id,),
        )
        return _exercise_row(rows[0]) if rows else None

    def fetch_detail(self, exercise_id: int) -> dict:
        exercise = self.find(exercise_id)
        if exercise is None:
            raise LookupError("exercise not found")
        return exercise

    def add(
        self,
        name: str,
        description: Optional[str] = None,
        muscle_group: Optional[str] = None,
        calories_per_minute: float = 0.0,
        calories_per_rep: float = 0.0,
        difficulty: Optional[str] = None,
    ) -> int:
        """Create a custom exercise and return its id."""
        name = (name or "").strip()
        if not name:
            raise ValueError("exercise name is required")
        muscle_group = muscle_group or "Other"
        difficulty = difficulty or "Intermediate"
        self._validate(muscle_group, difficulty, calories_per_minute, calories_per_rep)
        timestamp = _now()
        exercise_id = self.execute(
            "INSERT INTO exercises (name, description, muscle_group, calories_per_minute, calories_per_rep, difficulty, is_custom, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, 1, ?, ?);",
            (
                name,
                description.strip() if description else description,
                muscle_group,
                calories_per_minute or 0.0,
                calories_per_rep or 0.0,
                difficulty,
                timestamp,
                timestamp,
            ),
        )
        logger.info("created custom exercise %s (%s)", exercise_id, name)
        return exercise_id

    def _require_custom(self, exercise_id: int, action: str) -> None:
        rows = self.fetch_all(
            "SELECT is_custom FROM exercises WHERE id = ?;",
            (exercise_id,),
        )
        if not rows:
            raise LookupError("exercise not found")
        if rows[0][0] == 0:
            raise PermissionError(f"cannot {action} predefined exercises")

    def update(
        self,
        exercise_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        muscle_group: Optional[str] = None,
        calories_per_minute: Optional[float] = None,
        calories_per_rep: Optional[float] = None,
        difficulty: Optional[str] = None,
    ) -> None:
        """Update the given fields of a custom exercise."""
        self._require_custom(exercise_id, "update")
        self._validate(muscle_group, difficulty, calories_per_minute, calories_per_rep)
        fields = {
            "name": name.strip() if name else None,
            "description": description,
            "muscle_group": muscle_group,
            "calories_per_minute": calories_per_minute,
            "calories_per_rep": calories_per_rep,
            "difficulty": difficulty,
        }
        changes = {k: v for k, v in fields.items() if v is not None}
        changes["updated_at"] = _now()
        assignments = ", ".join(f"{k} = ?" for k in changes)
        self.execute(
            f"UPDATE exercises SET {assignments} WHERE id = ?;",
            (*changes.values(), exercise_id),
        )
        logger.info("updated custom exercise %s", exercise_id)

    def remove(self, exercise_id: int) -> None:
        self._require_custom(exercise_id, "delete")
        self.execute("DELETE FROM exercises WHERE id = ?;", (exercise_id,))
        logger.info("deleted custom exercise %s", exercise_id)


class AsyncExerciseCatalogRepository(AsyncBaseRepository):
    """Asynchronous read access to the exercise catalog."""

    async def fetch_all_records(
        self,
        custom: Optional[bool] = None,
        muscle_group: Optional[str] = None,
        difficulty: Optional[str] = None,
        exclude_ids: Optional[Iterable[int]] = None,
        limit: Optional[int] = None,
    ) -> List[dict]:
        query, params = _exercise_query(
            custom, muscle_group, difficulty, exclude_ids, limit
        )
        rows = await self.fetch_all(query, params)
        return [_exercise_row(r) for r in rows]

    async def fetch_detail(self, exercise_id: int) -> dict:
        rows = await self.fetch_all(
            f"SELECT {_EXERCISE_COLUMNS} FROM exercises WHERE id = ?;",
            (exercise_id,),
        )
        if not rows:
            raise LookupError("exercise not found")
        return _exercise_row(rows[0])


_WORKOUT_COLUMNS = (
    "id, name, scheduled_date, scheduled_time, is_completed, completed_at, "
    "overall_notes, total_calories_burned, created_at, updated_at"
)


def _workout_query(
    status: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> tuple[str, tuple]:
    query = f"SELECT {_WORKOUT_COLUMNS} FROM workouts"
    params: list[str | int] = []
    where_clauses: list[str] = []
    if status == "completed":
        where_clauses.append("is_completed = 1")
    elif status == "pending":
        where_clauses.append("is_completed = 0")
    if start_date:
        where_clauses.append("scheduled_date >= ?")
        params.append(start_date)
    if end_date:
        where_clauses.append("scheduled_date <= ?")
        params.append(end_date)
    if where_clauses:
        query += " WHERE " + " AND ".join(where_clauses)
    query += " ORDER BY scheduled_date DESC, scheduled_time DESC, id DESC;"
    return query, tuple(params)


def _insert_activity(conn: sqlite3.Connection, workout_id: int, activity: dict) -> int:
    _check_non_negative(
        sets=activity["sets"],
        reps=activity["reps"],
        weight=activity["weight"],
        duration=activity["duration"],
        distance=activity["distance"],
    )
    position = conn.execute(
        "SELECT COALESCE(MAX(position), 0) + 1 FROM workout_exercises WHERE workout_id = ?;",
        (workout_id,),
    ).fetchone()[0]
    cursor = conn.execute(
        "INSERT INTO workout_exercises (workout_id, exercise_id, position, sets, reps, weight, duration, distance, calories_burned, completed, notes) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?);",
        (
            workout_id,
            activity["exercise_id"],
            int(position),
            activity["sets"],
            activity["reps"],
            activity["weight"],
            activity["duration"],
            activity["distance"],
            activity["calories_burned"],
            int(activity["completed"]),
            activity["notes"],
        ),
    )
    return cursor.lastrowid


def _refresh_total(conn: sqlite3.Connection, workout_id: int) -> int:
    total = conn.execute(
        "SELECT COALESCE(SUM(calories_burned), 0) FROM workout_exercises WHERE workout_id = ?;",
        (workout_id,),
    ).fetchone()[0]
    conn.execute(
        "UPDATE workouts SET total_calories_burned = ?, updated_at = ? WHERE id = ?;",
        (int(total), _now(), workout_id),
    )
    return int(total)


class WorkoutRepository(BaseRepository):
    """Repository for workout table operations."""

    _EDITABLE_COLUMNS = ("name", "scheduled_date", "scheduled_time", "overall_notes")

    def create(
        self,
        name: str,
        scheduled_date: str,
        scheduled_time: str | None = None,
        overall_notes: str | None = None,
        activities: Iterable[dict] = (),
    ) -> int:
        """Insert a workout, its activities and their total in one transaction."""
        timestamp = _now()
        with self._connection() as conn:
            cursor = conn.execute(
                "INSERT INTO workouts (name, scheduled_date, scheduled_time, overall_notes, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?);",
                (
                    name,
                    scheduled_date,
                    scheduled_time,
                    overall_notes,
                    timestamp,
                    timestamp,
                ),
            )
            workout_id = cursor.lastrowid
            for activity in activities:
                _insert_activity(conn, workout_id, activity)
            _refresh_total(conn, workout_id)
        return workout_id

    def fetch_all_workouts(
        self,
        status: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[
        Tuple[
            int,
            str,
            str,
            Optional[str],
            int,
            Optional[str],
            Optional[str],
            int,
            str,
            str,
        ]
    ]:
        query, params = _workout_query(status, start_date, end_date)
        return self.fetch_all(query, params)

    def fetch_detail(self, workout_id: int) -> Tuple[
        int,
        str,
        str,
        Optional[str],
        int,
        Optional[str],
        Optional[str],
        int,
        str,
        str,
    ]:
        rows = self.fetch_all(
            f"SELECT {_WORKOUT_COLUMNS} FROM workouts WHERE id = ?;",
            (workout_id,),
        )
        if not rows:
            raise LookupError("workout not found")
        return rows[0]


    def update(self, workout_id: int, **fields: Any) -> None:
        """Update the given columns of a workout in a single statement."""
        unknown = sorted(set(fields) - set(self._EDITABLE_COLUMNS))
        if unknown:
            raise ValueError(f"cannot update {', '.join(unknown)}")
        if not fields:
            return
        fields["updated_at"] = _now()
        assignments = ", ".join(f"{k} = ?" for k in fields)
        self.execute(
            f"UPDATE workouts SET {assignments} WHERE id = ?;",
            (*fields.values(), workout_id),
        )

    def replace_activities(self, workout_id: int, activities: Iterable[dict]) -> int:
        """Swap every logged activity of a workout and return the new total."""
        with self._connection() as conn:
            conn.execute(
                "DELETE FROM workout_exercises WHERE workout_id = ?;", (workout_id,)
            )
            for activity in activities:
                _insert_activity(conn, workout_id, activity)
            return _refresh_total(conn, workout_id)

    def set_completed(self, workout_id: int, completed: bool) -> None:
        """Toggle completion, keeping the first completion time."""
        timestamp = _now()
        if completed:
            self.execute(
                "UPDATE workouts SET is_completed = 1, completed_at = COALESCE(completed_at, ?), updated_at = ? WHERE id = ?;",
                (timestamp, timestamp, workout_id),
            )
        else:
            self.execute(
                "UPDATE workouts SET is_completed = 0, completed_at = NULL, updated_at = ? WHERE id = ?;",
                (timestamp, workout_id),
            )

    def delete(self, workout_id: int) -> None:
        rows = self.fetch_all(
            "SELECT id FROM workouts WHERE id = ?;",
            (workout_id,),
        )
        if not rows:
            raise LookupError("workout not found")
        self.execute("DELETE FROM workouts WHERE id = ?;", (workout_id,))


class AsyncWorkoutRepository(AsyncBaseRepository):
    """Async repository for workout table operations."""

    async def create(
        self,
        name: str,
        scheduled_date: str,
        scheduled_time: str | None = None,
        overall_notes: str | None = None,
    ) -> int:
        timestamp = _now()
        return await self.execute(
            "INSERT INTO workouts (name, scheduled_date, scheduled_time, overall_notes, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?);",
            (name, scheduled_date, scheduled_time, overall_notes, timestamp, timestamp),
        )

    async def fetch_all_workouts(
        self,
        status: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Tuple]:
        query, params = _workout_query(status, start_date, end_date)
        return await self.fetch_all(query, params)

    async def fetch_detail(self, workout_id: int) -> Tuple:
        rows = await self.fetch_all(
            f"SELECT {_WORKOUT_COLUMNS} FROM workouts WHERE id = ?;",
            (workout_id,),
        )
        if not rows:
            raise LookupError("workout not found")
        return rows[0]

    async def delete(self, workout_id: int) -> None:
        rows = await self.fetch_all(
            "SELECT id FROM workouts WHERE id = ?;",
            (workout_id,),
        )
        if not rows:
            raise LookupError("workout not found")
        await self.execute("DELETE FROM workouts WHERE id = ?;", (workout_id,))


_ACTIVITY_COLUMNS = (
    "id, workout_id, exercise_id, position, sets, reps, weight, duration, "
    "distance, calories_burned, completed, notes"
)


class WorkoutExerciseRepository(BaseRepository):
    """Repository for exercises logged inside a workout.

    Every write also refreshes the owning workout's stored total within the
    same transaction.
    """

    @staticmethod
    def _row(row: Tuple) -> dict:
        (
            aid,
            workout_id,
            exercise_id,
            position,
            sets,
            reps,
            weight,
            duration,
            distance,
            calories,
            completed,
            notes,
        ) = row
        return {
            "id": aid,
            "workout_id": workout_id,
            "exercise_id": exercise_id,
            "position": position,
            "sets": int(sets),
            "reps": int(reps),
            "weight": float(weight),
            "duration": float(duration),
            "distance": float(distance),
            "calories_burned": int(calories),
            "completed": bool(completed),
            "notes": notes,
        }

    def add(
        self,
        workout_id: int,
        exercise_id: int,
        sets: int = 0,
        reps: int = 0,
        weight: float = 0.0,
        duration: float = 0.0,
        distance: float = 0.0,
        calories_burned: int = 0,
        completed: bool = False,
        notes: Optional[str] = None,
    ) -> int:
        activity = {
            "exercise_id": exercise_id,
            "sets": sets,
            "reps": reps,
            "weight": weight,
            "duration": duration,
            "distance": distance,
            "calories_burned": calories_burned,
            "completed": completed,
            "notes": notes,
        }
        with self._connection() as conn:
            activity_id = _insert_activity(conn, workout_id, activity)
            _refresh_total(conn, workout_id)
        return activity_id

    @staticmethod
    def _owner(conn: sqlite3.Connection, activity_id: int) -> int:
        row = conn.execute(
            "SELECT workout_id FROM workout_exercises WHERE id = ?;", (activity_id,)
        ).fetchone()
        if row is None:
            raise LookupError("exercise not found in workout")
        return row[0]

    def update(
        self,
        activity_id: int,
        sets: int,
        reps: int,
        weight: float,
        duration: float,
        distance: float,
        calories_burned: int,
        completed: bool,
        notes: Optional[str],
    ) -> None:
        _check_non_negative(
            sets=sets,
            reps=reps,
            weight=weight,
            duration=duration,
            distance=distance,
        )
        with self._connection() as conn:
            workout_id = self._owner(conn, activity_id)
            conn.execute(
                "UPDATE workout_exercises SET sets = ?, reps = ?, weight = ?, duration = ?, distance = ?, calories_burned = ?, completed = ?, notes = ? WHERE id = ?;",
                (
                    sets,
                    reps,
                    weight,
                    duration,
                    distance,
                    calories_burned,
                    int(completed),
                    notes,
                    activity_id,
                ),
            )
            _refresh_total(conn, workout_id)

    def remove(self, activity_id: int) -> None:
        with self._connection() as conn:
            workout_id = self._owner(conn, activity_id)
            conn.execute("DELETE FROM workout_exercises WHERE id = ?;", (activity_id,))
            _refresh_total(conn, workout_id)

    def fetch_for_workout(self, workout_id: int) -> List[dict]:
        rows = self.fetch_all(
            f"SELECT {_ACTIVITY_COLUMNS} FROM workout_exercises WHERE workout_id = ? ORDER BY position, id;",
            (workout_id,),
        )
        return [self._row(r) for r in rows]

    def fetch_detail(self, activity_id: int) -> dict:
        rows = self.fetch_all(
            f"SELECT {_ACTIVITY_COLUMNS} FROM workout_exercises WHERE id = ?;",
            (activity_id,),
        )
        if not rows:
            raise LookupError("exercise not found in workout")
        return self._row(rows[0])
