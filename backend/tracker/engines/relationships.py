"""Relationship Manager — project -> task membership set.

Membership lives in the project_task index. A task id may be attached to a
project without the task existing, and deleting a task leaves its id in
place; such dangling ids are filtered out whenever tasks are resolved.
"""

from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from tracker.db.database import store_errors
from tracker.engines.store import ProjectStore, check_id
from tracker.models.task import Project, ProjectTask, Task

logger = logging.getLogger(__name__)


class RelationshipManager:
    """Attach tasks to projects and resolve membership in both directions."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.projects = ProjectStore(session)

    def attach_task(self, project_id: str, task_id: str) -> Project:
        """Add task_id to the project's set. Re-adding is a no-op.

        Raises NotFound if the project does not exist. The task is not
        looked up.
        """
        check_id(task_id, "task")
        project = self.projects.get(project_id)

        with store_errors("attach task"):
            existing = self.session.get(ProjectTask, (project_id, task_id))
            if existing is not None:
                logger.debug("Task %s already in project %s", task_id, project_id)
                return project
            self.session.add(ProjectTask(project_id=project_id, task_id=task_id))
            try:
                self.session.commit()
            except IntegrityError:
                # A concurrent attach inserted the same pair first.
                self.session.rollback()
                logger.debug("Task %s attached concurrently to project %s", task_id, project_id)
                return self.projects.get(project_id)
            self.session.refresh(project)

        logger.info("Task %s attached to project %s", task_id, project_id)
        return project

    def task_ids_of_project(self, project_id: str) -> list[str]:
        """Raw membership set in attach order, dangling ids included."""
        statement = (
            select(ProjectTask.task_id)
            .where(ProjectTask.project_id == project_id)
            .order_by(ProjectTask.attached_at)
        )
        with store_errors("list project task ids"):
            return list(self.session.exec(statement).all())

    def tasks_of_project(self, project_id: str) -> Sequence[Task]:
        """Tasks whose ids are in the project's set, in attach order.

        Raises NotFound if the project does not exist. Ids that no longer
        resolve to a task are skipped.
        """
        self.projects.get(project_id)
        statement = (
            select(Task)
            .join(ProjectTask, ProjectTask.task_id == Task.id)
            .where(ProjectTask.project_id == project_id)
            .order_by(ProjectTask.attached_at)
        )
        with store_errors("list project tasks"):
            return self.session.exec(statement).all()

    def projects_containing_task(self, task_id: str) -> Sequence[Project]:
        """Every project whose set contains task_id (inverse lookup)."""
        check_id(task_id, "task")
        statement = (
            select(Project)
            .join(ProjectTask, ProjectTask.project_id == Project.id)
            .where(ProjectTask.task_id == task_id)
            .order_by(Project.created_at)
        )
        with store_errors("list projects for task"):
            return self.session.exec(statement).all()

    def task_ids_by_project(self, project_ids: Sequence[str]) -> dict[str, list[str]]:
        """Membership sets for several projects in one query."""
        result: dict[str, list[str]] = {pid: [] for pid in project_ids}
        if not project_ids:
            return result
        statement = (
            select(ProjectTask)
            .where(ProjectTask.project_id.in_(project_ids))  # type: ignore[attr-defined]
            .order_by(ProjectTask.attached_at)
        )
        with store_errors("list project task ids"):
            for link in self.session.exec(statement).all():
                result[link.project_id].append(link.task_id)
        return result
