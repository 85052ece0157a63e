"""
Task change commands.

The boundary layer builds one of these from untrusted input; apply_command is
the single entry point that routes it to the matching Task method.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Type, Union

from reports.errors import ConfigurationError, NotFoundError, require_text
from reports.models.domain import Employee, Task
from reports.models.enums import TaskState


@dataclass(frozen=True)
class SetTaskTitleCommand:
    title: str


@dataclass(frozen=True)
class SetTaskContentCommand:
    content: str


@dataclass(frozen=True)
class SetTaskStateCommand:
    state: TaskState


@dataclass(frozen=True)
class SetTaskOwnerCommand:
    owner_id: str


@dataclass(frozen=True)
class AddTaskCommentCommand:
    text: str


TaskCommand = Union[
    SetTaskTitleCommand,
    SetTaskContentCommand,
    SetTaskStateCommand,
    SetTaskOwnerCommand,
    AddTaskCommentCommand,
]

EmployeeFinder = Callable[[str], Optional[Employee]]


def _set_title(task: Task, changer: Employee, command: SetTaskTitleCommand, find_employee: EmployeeFinder) -> None:
    task.set_title(changer, command.title)


def _set_content(task: Task, changer: Employee, command: SetTaskContentCommand, find_employee: EmployeeFinder) -> None:
    task.set_content(changer, command.content)


def _set_state(task: Task, changer: Employee, command: SetTaskStateCommand, find_employee: EmployeeFinder) -> None:
    task.set_state(changer, command.state)


def _set_owner(task: Task, changer: Employee, command: SetTaskOwnerCommand, find_employee: EmployeeFinder) -> None:
    # Resolve before the validator runs; a dangling owner id is NotFound, not a refusal
    require_text(command.owner_id, "Task owner")
    owner = find_employee(command.owner_id)
    if owner is None:
        raise NotFoundError(f"Employee {command.owner_id} not found")
    task.set_owner(changer, owner)


def _add_comment(task: Task, changer: Employee, command: AddTaskCommentCommand, find_employee: EmployeeFinder) -> None:
    task.add_comment(changer, command.text)


COMMAND_HANDLERS: Dict[Type, Callable] = {
    SetTaskTitleCommand: _set_title,
    SetTaskContentCommand: _set_content,
    SetTaskStateCommand: _set_state,
    SetTaskOwnerCommand: _set_owner,
    AddTaskCommentCommand: _add_comment,
}


def apply_command(task: Task, changer: Employee, command: TaskCommand, find_employee: EmployeeFinder) -> Task:
    """Apply a command to a task, returning the (mutated) task."""
    handler = COMMAND_HANDLERS.get(type(command))
    if handler is None:
        raise ConfigurationError(f"No handler registered for command {type(command).__name__}")
    handler(task, changer, command, find_employee)
    return task
