"""Status Transition Handler — completion flag changes for tasks.

Reverting a task to not-done clears start_date and done_date
unconditionally. Marking it done touches nothing else; done_date is not
stamped automatically.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlmodel import Session

from tracker.db.database import store_errors
from tracker.engines.store import TaskStore
from tracker.errors import InvalidArgument
from tracker.models.task import Task

logger = logging.getLogger(__name__)


class StatusTransitionHandler:
    """Apply isDone transitions and their date-field side effects."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.tasks = TaskStore(session)

    def set_task_status(self, task_id: str, is_done: bool) -> Task:
        """Set is_done and return the post-update task.

        Raises NotFound if the task does not exist.
        """
        if not isinstance(is_done, bool):
            raise InvalidArgument("isDone must be a boolean")
        task = self.tasks.get(task_id)

        task.is_done = is_done
        if not is_done:
            task.start_date = None
            task.done_date = None
        task.updated_at = datetime.now(timezone.utc)

        with store_errors("set task status"):
            self.session.add(task)
            self.session.commit()
            self.session.refresh(task)

        logger.info("Task %s %s", task_id, "marked as done" if is_done else "reset to to-do")
        return task
