"""
Per-state operation validators.

Each TaskState has exactly one validator deciding which roles may perform
which operation while a task is in that state. Who may do what is a pure
function of the changer's role; the task itself is not consulted.
"""
from typing import Dict, FrozenSet, Iterable, Mapping

from reports.errors import ConfigurationError
from reports.models.enums import EmployeeRole, TaskOperation, TaskState

ANYONE: FrozenSet[EmployeeRole] = frozenset(EmployeeRole)
LEADS: FrozenSet[EmployeeRole] = frozenset({EmployeeRole.TEAM_LEAD, EmployeeRole.SUPERVISOR})
SUPERVISORS: FrozenSet[EmployeeRole] = frozenset({EmployeeRole.SUPERVISOR})
NOBODY: FrozenSet[EmployeeRole] = frozenset()


class TaskOperationValidator:
    """Policy table for one lifecycle state."""

    def __init__(self, state: TaskState, allowed: Mapping[TaskOperation, Iterable[EmployeeRole]]):
        missing = [op.value for op in TaskOperation if op not in allowed]
        if missing:
            raise ConfigurationError(
                f"Validator for {state.value} has no rule for: {', '.join(missing)}"
            )
        self.state = state
        self._allowed: Dict[TaskOperation, FrozenSet[EmployeeRole]] = {
            op: frozenset(roles) for op, roles in allowed.items()
        }

    def permits(self, operation: TaskOperation, changer) -> bool:
        return changer.role in self._allowed[operation]

    def can_set_title(self, changer) -> bool:
        return self.permits(TaskOperation.SET_TITLE, changer)

    def can_set_content(self, changer) -> bool:
        return self.permits(TaskOperation.SET_CONTENT, changer)

    def can_set_state(self, changer) -> bool:
        return self.permits(TaskOperation.SET_STATE, changer)

    def can_add_comment(self, changer) -> bool:
        return self.permits(TaskOperation.ADD_COMMENT, changer)

    def can_set_owner(self, changer) -> bool:
        return self.permits(TaskOperation.SET_OWNER, changer)

    def __repr__(self):
        return f"TaskOperationValidator({self.state.value})"


OPEN_VALIDATOR = TaskOperationValidator(TaskState.OPEN, {
    TaskOperation.SET_TITLE: LEADS,
    TaskOperation.SET_CONTENT: LEADS,
    TaskOperation.SET_STATE: ANYONE,
    TaskOperation.ADD_COMMENT: ANYONE,
    TaskOperation.SET_OWNER: ANYONE,
})

ACTIVE_VALIDATOR = TaskOperationValidator(TaskState.ACTIVE, {
    TaskOperation.SET_TITLE: LEADS,
    TaskOperation.SET_CONTENT: LEADS,
    TaskOperation.SET_STATE: LEADS,
    TaskOperation.ADD_COMMENT: ANYONE,
    TaskOperation.SET_OWNER: ANYONE,
})

# Closed tasks are frozen except for discussion; a lead may reopen them
CLOSED_VALIDATOR = TaskOperationValidator(TaskState.CLOSED, {
    TaskOperation.SET_TITLE: NOBODY,
    TaskOperation.SET_CONTENT: NOBODY,
    TaskOperation.SET_STATE: LEADS,
    TaskOperation.ADD_COMMENT: ANYONE,
    TaskOperation.SET_OWNER: NOBODY,
})

# Only a supervisor can bring a cancelled task back
CANCELLED_VALIDATOR = TaskOperationValidator(TaskState.CANCELLED, {
    TaskOperation.SET_TITLE: NOBODY,
    TaskOperation.SET_CONTENT: NOBODY,
    TaskOperation.SET_STATE: SUPERVISORS,
    TaskOperation.ADD_COMMENT: ANYONE,
    TaskOperation.SET_OWNER: NOBODY,
})

VALIDATORS: Dict[TaskState, TaskOperationValidator] = {
    TaskState.OPEN: OPEN_VALIDATOR,
    TaskState.ACTIVE: ACTIVE_VALIDATOR,
    TaskState.CLOSED: CLOSED_VALIDATOR,
    TaskState.CANCELLED: CANCELLED_VALIDATOR,
}


def validator_for(state: TaskState, registry: Mapping[TaskState, TaskOperationValidator] = VALIDATORS) -> TaskOperationValidator:
    """Return the validator for a state. Fails fast when none is registered."""
    try:
        return registry[state]
    except KeyError:
        raise ConfigurationError(f"No operation validator registered for state {state!r}") from None
