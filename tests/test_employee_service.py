"""Tests for the employee directory and the chief/subordinate relation."""
from reports.errors import ErrorKind
from reports.models.enums import EmployeeRole


class TestHiring:

    def test_hire_with_chief(self, employee_service, supervisor):
        result = employee_service.hire("Olga", "Smirnova", EmployeeRole.TEAM_LEAD, supervisor.id)

        assert result.ok
        employee = result.value
        assert employee.role == EmployeeRole.TEAM_LEAD
        assert employee.chief_id == supervisor.id
        assert employee_service.get_employee(employee.id).value is employee

    def test_blank_name_is_invalid(self, employee_service):
        assert employee_service.hire(" ", "Smirnova").error_kind == ErrorKind.INVALID_ARGUMENT

    def test_unknown_chief_is_not_found(self, employee_service):
        assert employee_service.hire("Olga", "Smirnova", chief_id="ghost").error_kind == ErrorKind.NOT_FOUND

    def test_unknown_role_is_invalid(self, employee_service):
        assert employee_service.hire("Olga", "Smirnova", "Intern").error_kind == ErrorKind.INVALID_ARGUMENT


class TestRelationships:

    def test_is_chief_of(self, employee_service, supervisor, team_lead, regular):
        assert employee_service.is_chief_of(supervisor.id, team_lead.id).value is True
        assert employee_service.is_chief_of(team_lead.id, regular.id).value is True
        # Only direct subordinates count
        assert employee_service.is_chief_of(supervisor.id, regular.id).value is False
        assert employee_service.is_chief_of(regular.id, team_lead.id).value is False

    def test_subordinates_are_direct_reports(self, employee_service, supervisor, team_lead, regular):
        assert employee_service.subordinates(supervisor.id).value == [team_lead]
        assert employee_service.subordinates(team_lead.id).value == [regular]
        assert employee_service.subordinates(regular.id).value == []

    def test_change_chief(self, employee_service, supervisor, team_lead, regular):
        result = employee_service.set_chief(regular.id, supervisor.id)

        assert result.ok
        assert {e.id for e in employee_service.subordinates(supervisor.id).value} == {team_lead.id, regular.id}
        assert employee_service.subordinates(team_lead.id).value == []

    def test_detach_from_chief(self, employee_service, team_lead, regular):
        employee_service.set_chief(regular.id, None)
        assert regular.chief_id is None

    def test_employee_cannot_be_own_chief(self, employee_service, regular):
        assert employee_service.set_chief(regular.id, regular.id).error_kind == ErrorKind.INVALID_ARGUMENT

    def test_promotion_changes_permissions(self, employee_service, task_service, sample_task, regular):
        from reports.models.commands import SetTaskTitleCommand

        refused = task_service.apply_command(sample_task, regular, SetTaskTitleCommand("Better title"))
        assert refused.error_kind == ErrorKind.PERMISSION_DENIED

        employee_service.set_role(regular.id, EmployeeRole.TEAM_LEAD)

        assert task_service.apply_command(sample_task, regular, SetTaskTitleCommand("Better title")).ok

    def test_unknown_ids_are_not_found(self, employee_service, regular):
        assert employee_service.get_employee("ghost").error_kind == ErrorKind.NOT_FOUND
        assert employee_service.subordinates("ghost").error_kind == ErrorKind.NOT_FOUND
        assert employee_service.is_chief_of("ghost", regular.id).error_kind == ErrorKind.NOT_FOUND
        assert employee_service.set_role("ghost", EmployeeRole.SUPERVISOR).error_kind == ErrorKind.NOT_FOUND


class TestDismissal:

    def test_dismissal_keeps_tasks_without_owner(self, employee_service, task_service, sample_task, regular):
        """Tasks lose their owner, not their existence."""
        result = employee_service.dismiss(regular.id)

        assert result.ok
        assert task_service.get_task(sample_task.id).ok
        assert sample_task.owner_id is None
        assert employee_service.get_employee(regular.id).error_kind == ErrorKind.NOT_FOUND

    def test_dismissal_detaches_subordinates(self, employee_service, team_lead, regular):
        employee_service.dismiss(team_lead.id)
        assert regular.chief_id is None

    def test_dismiss_unknown_is_not_found(self, employee_service):
        assert employee_service.dismiss("ghost").error_kind == ErrorKind.NOT_FOUND
