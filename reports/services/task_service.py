"""
Task service - the engine's entry point for the boundary layer.

Resolves ids, serializes mutations per task, applies commands through the
validated mutation path and turns domain errors into ServiceResult values.
"""
import threading
from datetime import datetime
from typing import Dict, List, Optional

import structlog

from reports.errors import (
    ConfigurationError,
    InvalidArgumentError,
    NotFoundError,
    ServiceResult,
    TaskError,
)
from reports.models.commands import TaskCommand, apply_command
from reports.models.domain import Employee, Task
from reports.services.repositories import EmployeeRepository, TaskRepository

log = structlog.get_logger()


class TaskLocks:
    """One re-entrant lock per task id, shared by every service instance."""

    def __init__(self):
        self._locks: Dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def for_task(self, task_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(task_id)
            if lock is None:
                lock = self._locks[task_id] = threading.RLock()
            return lock

    def discard(self, task_id: str) -> None:
        with self._guard:
            self._locks.pop(task_id, None)


DEFAULT_TASK_LOCKS = TaskLocks()


class TaskService:
    """Creates, mutates, removes and queries tasks."""

    def __init__(
        self,
        tasks: TaskRepository,
        employees: EmployeeRepository,
        locks: Optional[TaskLocks] = None
    ):
        self.tasks = tasks
        self.employees = employees
        self.locks = locks or DEFAULT_TASK_LOCKS

    def get_task(self, task_id: str) -> ServiceResult[Task]:
        task = self.tasks.load(task_id)
        if task is None:
            return ServiceResult.failure(NotFoundError(f"Task {task_id} not found"))
        return ServiceResult.success(task)

    def create_task(self, title: str, owner: Optional[Employee] = None) -> ServiceResult[Task]:
        """Create a new task in Open state. Nothing is stored if the title is blank."""
        try:
            task = Task.create(title, owner)
        except TaskError as error:
            log.warning("task_create_refused", reason=error.kind.value, message=error.message)
            return ServiceResult.failure(error)

        self.tasks.save(task)
        log.info("task_created", task_id=task.id, owner_id=task.owner_id)
        return ServiceResult.success(task)

    def apply_command(self, task: Task, changer: Employee, command: TaskCommand) -> ServiceResult[Task]:
        """
        Apply a command to a tracked task on behalf of a resolved employee.

        Refusals (not found, invalid argument, permission denied, no-op state)
        come back as failed results. A missing validator or command handler
        is a programming error and is raised.
        """
        if task is None:
            return ServiceResult.failure(InvalidArgumentError("Task must be provided"))

        with self.locks.for_task(task.id):
            tracked = self.tasks.load(task.id)
            if tracked is None:
                return ServiceResult.failure(NotFoundError(f"Task {task.title} doesn't exist in system"))

            try:
                apply_command(tracked, changer, command, self.employees.load)
            except ConfigurationError:
                raise
            except TaskError as error:
                log.warning(
                    "task_command_refused",
                    task_id=tracked.id,
                    changer_id=getattr(changer, "id", None),
                    command=type(command).__name__,
                    reason=error.kind.value,
                    message=error.message
                )
                return ServiceResult.failure(error)

            self.tasks.save(tracked)

        log.info(
            "task_command_applied",
            task_id=tracked.id,
            changer_id=changer.id,
            command=type(command).__name__,
            state=tracked.state.value
        )
        return ServiceResult.success(tracked)

    def use_command(self, task_id: str, changer_id: str, command: TaskCommand) -> ServiceResult[Task]:
        """Boundary form of apply_command: resolve both ids first."""
        task = self.tasks.load(task_id)
        if task is None:
            return ServiceResult.failure(NotFoundError(f"Task {task_id} not found"))

        changer = self.employees.load(changer_id)
        if changer is None:
            return ServiceResult.failure(NotFoundError(f"Employee {changer_id} not found"))

        return self.apply_command(task, changer, command)

    def remove_task(self, task_id: str) -> ServiceResult[Task]:
        """Remove a task together with its modification and comment trail."""
        with self.locks.for_task(task_id):
            task = self.tasks.load(task_id)
            if task is None:
                return ServiceResult.failure(NotFoundError(f"Task {task_id} not found"))
            self.tasks.delete(task_id)

        self.locks.discard(task_id)
        log.info("task_removed", task_id=task_id)
        return ServiceResult.success(task)

    # Queries - all ordered by creation time, ascending

    def list_tasks(self) -> List[Task]:
        return self.tasks.list_all()

    def find_tasks_by_creation_time(self, created_at: datetime) -> List[Task]:
        return [t for t in self.tasks.list_all() if t.created_at == created_at]

    def find_tasks_by_modification_time(self, updated_at: datetime) -> List[Task]:
        return [t for t in self.tasks.list_all() if t.updated_at == updated_at]

    def find_tasks_by_owner(self, employee: Employee) -> List[Task]:
        return [t for t in self.tasks.list_all() if t.owner_id == employee.id]

    def find_tasks_modified_by(self, employee: Employee) -> List[Task]:
        return [t for t in self.tasks.list_all() if t.was_modified_by(employee.id)]

    def find_tasks_created_by_subordinates(self, employee: Employee) -> List[Task]:
        """Tasks owned by the direct subordinates of the given employee."""
        subordinate_ids = {s.id for s in self.employees.subordinates_of(employee.id)}
        return [t for t in self.tasks.list_all() if t.owner_id in subordinate_ids]
