"""
Tests for the per-state operation validators.

Each state's policy is checked against every role, so a change to the table
shows up as a failing case rather than a silent permission drift.
"""
import pytest
from reports.errors import ConfigurationError
from reports.models.domain import Employee
from reports.models.enums import EmployeeRole, TaskOperation, TaskState
from reports.models.validators import (
    VALIDATORS,
    TaskOperationValidator,
    validator_for,
)

REGULAR = EmployeeRole.REGULAR
TEAM_LEAD = EmployeeRole.TEAM_LEAD
SUPERVISOR = EmployeeRole.SUPERVISOR
ALL_ROLES = {REGULAR, TEAM_LEAD, SUPERVISOR}
LEADS = {TEAM_LEAD, SUPERVISOR}

EXPECTED_POLICY = {
    TaskState.OPEN: {
        TaskOperation.SET_TITLE: LEADS,
        TaskOperation.SET_CONTENT: LEADS,
        TaskOperation.SET_STATE: ALL_ROLES,
        TaskOperation.ADD_COMMENT: ALL_ROLES,
        TaskOperation.SET_OWNER: ALL_ROLES,
    },
    TaskState.ACTIVE: {
        TaskOperation.SET_TITLE: LEADS,
        TaskOperation.SET_CONTENT: LEADS,
        TaskOperation.SET_STATE: LEADS,
        TaskOperation.ADD_COMMENT: ALL_ROLES,
        TaskOperation.SET_OWNER: ALL_ROLES,
    },
    TaskState.CLOSED: {
        TaskOperation.SET_TITLE: set(),
        TaskOperation.SET_CONTENT: set(),
        TaskOperation.SET_STATE: LEADS,
        TaskOperation.ADD_COMMENT: ALL_ROLES,
        TaskOperation.SET_OWNER: set(),
    },
    TaskState.CANCELLED: {
        TaskOperation.SET_TITLE: set(),
        TaskOperation.SET_CONTENT: set(),
        TaskOperation.SET_STATE: {SUPERVISOR},
        TaskOperation.ADD_COMMENT: ALL_ROLES,
        TaskOperation.SET_OWNER: set(),
    },
}


def _employee(role):
    return Employee.create("Test", role.value, role)


class TestValidatorRegistry:

    def test_every_state_has_a_validator(self):
        """The state → validator mapping is total."""
        assert set(VALIDATORS) == set(TaskState)
        for state in TaskState:
            assert validator_for(state).state == state

    def test_missing_validator_fails_fast(self):
        """A state with no validator is a configuration error, never permissive."""
        registry = {TaskState.OPEN: VALIDATORS[TaskState.OPEN]}

        with pytest.raises(ConfigurationError) as exc_info:
            validator_for(TaskState.CLOSED, registry)

        assert "CLOSED" in str(exc_info.value).upper()

    def test_incomplete_policy_is_rejected(self):
        """Every validator must decide every operation."""
        with pytest.raises(ConfigurationError) as exc_info:
            TaskOperationValidator(TaskState.OPEN, {TaskOperation.SET_TITLE: LEADS})

        assert "add_comment" in str(exc_info.value)


class TestPolicyMatrix:

    @pytest.mark.parametrize("state", list(TaskState))
    @pytest.mark.parametrize("operation", list(TaskOperation))
    @pytest.mark.parametrize("role", list(EmployeeRole))
    def test_policy_matches_table(self, state, operation, role):
        validator = validator_for(state)
        expected = role in EXPECTED_POLICY[state][operation]
        assert validator.permits(operation, _employee(role)) is expected

    def test_named_capabilities_match_generic_check(self):
        validator = validator_for(TaskState.ACTIVE)
        lead = _employee(TEAM_LEAD)
        regular = _employee(REGULAR)

        assert validator.can_set_title(lead) is True
        assert validator.can_set_content(regular) is False
        assert validator.can_set_state(regular) is False
        assert validator.can_add_comment(regular) is True
        assert validator.can_set_owner(regular) is True
