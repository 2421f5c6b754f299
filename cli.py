import argparse
import json
import logging
import os
import shutil

from config import YamlConfig
from db import ExerciseCatalogRepository, WorkoutRepository, WorkoutExerciseRepository
from workout_service import WorkoutService
from seed_sample_data import seed


def export_workouts(db_path: str, output_dir: str = ".") -> list[str]:
    """Write every workout with its logged exercises to ``workout_<id>.json``."""
    workouts = WorkoutRepository(db_path)
    service = WorkoutService(
        workouts,
        WorkoutExerciseRepository(db_path),
        ExerciseCatalogRepository(db_path),
    )
    paths = []
    for workout in service.list_workouts():
        out_path = os.path.join(output_dir, f"workout_{workout['id']}.json")
        with open(out_path, "w", encoding="utf-8") as f:
            json.dump(workout, f, indent=2)
        paths.append(out_path)
    return paths


def backup_db(db_path: str, backup_path: str) -> None:
    shutil.copy(db_path, backup_path)


def restore_db(backup_path: str, db_path: str) -> None:
    shutil.copy(backup_path, db_path)


def serve(yaml_path: str, host: str | None, port: int | None) -> None:
    import uvicorn
    from rest_api import GymAPI

    api = GymAPI(yaml_path=yaml_path)
    uvicorn.run(
        api.app,
        host=host or api.settings.host,
        port=port or api.settings.port,
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="GymLog utility commands")
    parser.add_argument("--yaml", default="settings.yaml")
    sub = parser.add_subparsers(dest="cmd", required=True)

    srv = sub.add_parser("serve")
    srv.add_argument("--host")
    srv.add_argument("--port", type=int)

    sd = sub.add_parser("seed")
    sd.add_argument("--db")

    exp = sub.add_parser("export")
    exp.add_argument("--db")
    exp.add_argument("--out", default=".")

    bkp = sub.add_parser("backup")
    bkp.add_argument("--db")
    bkp.add_argument("--out", default="backup.db")

    rst = sub.add_parser("restore")
    rst.add_argument("--in", dest="src", default="backup.db")
    rst.add_argument("--db")

    args = parser.parse_args()
    settings = YamlConfig(args.yaml).settings(db_path=getattr(args, "db", None))
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "serve":
        serve(args.yaml, args.host, args.port)
    elif args.cmd == "seed":
        seed(settings.db_path)
    elif args.cmd == "export":
        for path in export_workouts(settings.db_path, args.out):
            print(path)
    elif args.cmd == "backup":
        backup_db(settings.db_path, args.out)
    elif args.cmd == "restore":
        restore_db(args.src, settings.db_path)


if __name__ == "__main__":
    main()
