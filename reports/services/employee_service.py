"""Employee directory - onboarding, chief/role changes and subordinate lookups."""
from typing import List, Optional, Union

import structlog

from reports.errors import InvalidArgumentError, NotFoundError, ServiceResult, TaskError
from reports.models.domain import Employee
from reports.models.enums import EmployeeRole
from reports.services.repositories import EmployeeRepository, TaskRepository

log = structlog.get_logger()


class EmployeeService:
    """Maintains employees and the chief_id graph between them."""

    def __init__(self, employees: EmployeeRepository, tasks: TaskRepository):
        self.employees = employees
        self.tasks = tasks

    def hire(
        self,
        first_name: str,
        last_name: str,
        role: Union[EmployeeRole, str] = EmployeeRole.REGULAR,
        chief_id: Optional[str] = None
    ) -> ServiceResult[Employee]:
        chief = None
        if chief_id is not None:
            chief = self.employees.load(chief_id)
            if chief is None:
                return ServiceResult.failure(NotFoundError(f"Employee {chief_id} not found"))

        try:
            employee = Employee.create(first_name, last_name, role, chief)
        except TaskError as error:
            return ServiceResult.failure(error)

        self.employees.save(employee)
        log.info("employee_hired", employee_id=employee.id, role=employee.role.value, chief_id=employee.chief_id)
        return ServiceResult.success(employee)

    def get_employee(self, employee_id: str) -> ServiceResult[Employee]:
        employee = self.employees.load(employee_id)
        if employee is None:
            return ServiceResult.failure(NotFoundError(f"Employee {employee_id} not found"))
        return ServiceResult.success(employee)

    def list_employees(self) -> List[Employee]:
        return self.employees.list_all()

    def set_chief(self, employee_id: str, chief_id: Optional[str]) -> ServiceResult[Employee]:
        """
        Attach an employee to a chief, or detach with chief_id=None.

        Acyclicity of the chief graph beyond self-reference is not checked.
        """
        employee = self.employees.load(employee_id)
        if employee is None:
            return ServiceResult.failure(NotFoundError(f"Employee {employee_id} not found"))

        if chief_id is not None:
            if chief_id == employee_id:
                return ServiceResult.failure(InvalidArgumentError("An employee cannot be their own chief"))
            if self.employees.load(chief_id) is None:
                return ServiceResult.failure(NotFoundError(f"Employee {chief_id} not found"))

        employee.chief_id = chief_id
        self.employees.save(employee)
        log.info("employee_chief_changed", employee_id=employee_id, chief_id=chief_id)
        return ServiceResult.success(employee)

    def set_role(self, employee_id: str, role: Union[EmployeeRole, str]) -> ServiceResult[Employee]:
        employee = self.employees.load(employee_id)
        if employee is None:
            return ServiceResult.failure(NotFoundError(f"Employee {employee_id} not found"))
        try:
            role = EmployeeRole(role)
        except ValueError:
            return ServiceResult.failure(InvalidArgumentError(f"Unknown employee role: {role!r}"))

        employee.role = role
        self.employees.save(employee)
        log.info("employee_role_changed", employee_id=employee_id, role=role.value)
        return ServiceResult.success(employee)

    def subordinates(self, employee_id: str) -> ServiceResult[List[Employee]]:
        if self.employees.load(employee_id) is None:
            return ServiceResult.failure(NotFoundError(f"Employee {employee_id} not found"))
        return ServiceResult.success(self.employees.subordinates_of(employee_id))

    def is_chief_of(self, chief_id: str, employee_id: str) -> ServiceResult[bool]:
        chief = self.employees.load(chief_id)
        employee = self.employees.load(employee_id)
        if chief is None or employee is None:
            missing = chief_id if chief is None else employee_id
            return ServiceResult.failure(NotFoundError(f"Employee {missing} not found"))
        return ServiceResult.success(chief.is_chief_of(employee))

    def dismiss(self, employee_id: str) -> ServiceResult[Employee]:
        """
        Remove an employee. Their tasks lose the owner, their subordinates
        lose the chief; nothing else is deleted.
        """
        employee = self.employees.load(employee_id)
        if employee is None:
            return ServiceResult.failure(NotFoundError(f"Employee {employee_id} not found"))

        for task in self.tasks.list_all():
            if task.owner_id == employee_id:
                task.owner_id = None
                self.tasks.save(task)

        for subordinate in self.employees.subordinates_of(employee_id):
            subordinate.chief_id = None
            self.employees.save(subordinate)

        self.employees.delete(employee_id)
        log.info("employee_dismissed", employee_id=employee_id)
        return ServiceResult.success(employee)
