"""Command-line entry point for the task tracker.

Usage:
    cd backend && python -m tracker.cli init-db
    cd backend && python -m tracker.cli seed
    cd backend && python -m tracker.cli serve --port 8000
"""

from __future__ import annotations

import argparse
import logging
from datetime import datetime, timedelta

from tracker.config import settings

logger = logging.getLogger(__name__)


def init_db() -> None:
    from tracker.db.database import create_db_and_tables, get_database_url

    create_db_and_tables()
    logger.info("Tables ready at %s", get_database_url())


def seed() -> dict:
    """Insert a small demo project with three tasks, one due today."""
    from sqlmodel import Session

    from tracker.db.database import create_db_and_tables, engine
    from tracker.engines.relationships import RelationshipManager
    from tracker.engines.store import ProjectStore, TaskStore

    create_db_and_tables()
    today = datetime.now().replace(hour=9, minute=0, second=0, microsecond=0)

    with Session(engine) as session:
        projects = ProjectStore(session)
        tasks = TaskStore(session)
        relationships = RelationshipManager(session)

        project = projects.create(
            name="Website relaunch",
            description="Demo project created by `tracker.cli seed`",
            start_date=today - timedelta(days=7),
            due_date=today + timedelta(days=14),
        )
        created = [
            tasks.create("Team Meeting", today - timedelta(days=1), today),
            tasks.create("Review copy", today, today + timedelta(days=3)),
            tasks.create("Ship landing page", today, today + timedelta(days=10)),
        ]
        for task in created:
            relationships.attach_task(project.id, task.id)

        summary = {"project_id": project.id, "task_ids": [t.id for t in created]}

    logger.info("Seeded project %s with %d tasks", summary["project_id"], len(summary["task_ids"]))
    return summary


def serve(host: str, port: int, reload: bool = False) -> None:
    import uvicorn

    uvicorn.run("tracker.main:app", host=host, port=port, reload=reload)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Task tracker backend")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create database tables")
    sub.add_parser("seed", help="Insert demo data")

    serve_parser = sub.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument("--host", default=settings.host)
    serve_parser.add_argument("--port", type=int, default=settings.port)
    serve_parser.add_argument("--reload", action="store_true")

    args = parser.parse_args(argv)
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "init-db":
        init_db()
    elif args.command == "seed":
        seed()
    elif args.command == "serve":
        logger.info("Serving on %s:%d", args.host, args.port)
        serve(args.host, args.port, reload=args.reload)


if __name__ == "__main__":
    main()
