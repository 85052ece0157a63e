"""Enums for the Reports system - these define the valid values for roles, states and audited fields."""
from enum import Enum


class EmployeeRole(str, Enum):
    """Organizational role. Only TeamLead and Supervisor may edit task text."""
    REGULAR = "Regular"
    TEAM_LEAD = "TeamLead"
    SUPERVISOR = "Supervisor"


class TaskState(str, Enum):
    """The four states a Task can be in. No other states are allowed."""
    OPEN = "Open"
    ACTIVE = "Active"
    CLOSED = "Closed"
    CANCELLED = "Cancelled"


class TaskOperation(str, Enum):
    """Operations gated by the per-state validators."""
    SET_TITLE = "set_title"
    SET_CONTENT = "set_content"
    SET_STATE = "set_state"
    ADD_COMMENT = "add_comment"
    SET_OWNER = "set_owner"


class TaskField(str, Enum):
    """Field recorded on a Modification."""
    TITLE = "Title"
    CONTENT = "Content"
    STATE = "State"
    OWNER = "Owner"
    COMMENTS = "Comments"
