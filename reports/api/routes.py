"""API routes for tasks and employees."""
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from reports.database import get_db
from reports.errors import ErrorKind, ServiceResult
from reports.models.commands import (
    AddTaskCommentCommand,
    SetTaskContentCommand,
    SetTaskOwnerCommand,
    SetTaskStateCommand,
    SetTaskTitleCommand,
    TaskCommand,
)
from reports.services.employee_service import EmployeeService
from reports.services.repositories import SqlEmployeeRepository, SqlTaskRepository
from reports.services.task_service import TaskService
from reports.api.schemas import (
    CommentCreate,
    ContentUpdate,
    EmployeeChiefUpdate,
    EmployeeCreate,
    EmployeeResponse,
    EmployeeRoleUpdate,
    ErrorResponse,
    FullTaskResponse,
    OwnerUpdate,
    StateUpdate,
    TaskCreate,
    TaskResponse,
    TitleUpdate,
)

router = APIRouter()

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorKind.NO_OP_STATE: status.HTTP_409_CONFLICT,
}

REFUSALS = {
    400: {"model": ErrorResponse, "description": "Blank or missing argument"},
    403: {"model": ErrorResponse, "description": "Refusal - the task's state does not allow this for the changer's role"},
    404: {"model": ErrorResponse, "description": "Task or employee not found"},
    409: {"model": ErrorResponse, "description": "Task is already in the requested state"},
}


def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    return TaskService(SqlTaskRepository(db), SqlEmployeeRepository(db))


def get_employee_service(db: Session = Depends(get_db)) -> EmployeeService:
    return EmployeeService(SqlEmployeeRepository(db), SqlTaskRepository(db))


def unwrap(result: ServiceResult):
    """Return the value of a result or raise the matching HTTP error."""
    if result.ok:
        return result.value
    raise HTTPException(
        status_code=STATUS_BY_KIND.get(result.error_kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail={"kind": result.error_kind.value, "message": result.message}
    )


def as_utc_naive(moment: datetime) -> datetime:
    """Stored timestamps are naive UTC."""
    if moment.tzinfo is not None:
        return moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment


# Task endpoints
@router.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED, responses=REFUSALS)
def create_task(
    task_data: TaskCreate,
    tasks: TaskService = Depends(get_task_service),
    employees: EmployeeService = Depends(get_employee_service)
):
    """Create a new task in Open state."""
    owner = unwrap(employees.get_employee(task_data.owner_id)) if task_data.owner_id else None
    return unwrap(tasks.create_task(task_data.title, owner))


@router.get("/tasks", response_model=List[TaskResponse])
def list_tasks(tasks: TaskService = Depends(get_task_service)):
    """List all tasks, oldest first."""
    return tasks.list_tasks()


@router.get("/tasks/by-creation-time/{created_at}", response_model=List[FullTaskResponse])
def find_tasks_by_creation_time(created_at: datetime, tasks: TaskService = Depends(get_task_service)):
    return tasks.find_tasks_by_creation_time(as_utc_naive(created_at))


@router.get("/tasks/by-modification-time/{updated_at}", response_model=List[FullTaskResponse])
def find_tasks_by_modification_time(updated_at: datetime, tasks: TaskService = Depends(get_task_service)):
    return tasks.find_tasks_by_modification_time(as_utc_naive(updated_at))


@router.get("/tasks/by-employee/{employee_id}", response_model=List[FullTaskResponse], responses=REFUSALS)
def find_tasks_by_employee(
    employee_id: str,
    tasks: TaskService = Depends(get_task_service),
    employees: EmployeeService = Depends(get_employee_service)
):
    """Tasks owned by an employee."""
    employee = unwrap(employees.get_employee(employee_id))
    return tasks.find_tasks_by_owner(employee)


@router.get("/tasks/modified-by-employee/{employee_id}", response_model=List[FullTaskResponse], responses=REFUSALS)
def find_tasks_modified_by_employee(
    employee_id: str,
    tasks: TaskService = Depends(get_task_service),
    employees: EmployeeService = Depends(get_employee_service)
):
    employee = unwrap(employees.get_employee(employee_id))
    return tasks.find_tasks_modified_by(employee)


@router.get("/tasks/created-by-subordinates/{employee_id}", response_model=List[FullTaskResponse], responses=REFUSALS)
def find_tasks_created_by_subordinates(
    employee_id: str,
    tasks: TaskService = Depends(get_task_service),
    employees: EmployeeService = Depends(get_employee_service)
):
    """Tasks owned by the direct subordinates of an employee."""
    employee = unwrap(employees.get_employee(employee_id))
    return tasks.find_tasks_created_by_subordinates(employee)


@router.get("/tasks/{task_id}", response_model=FullTaskResponse, responses=REFUSALS)
def get_task(task_id: str, tasks: TaskService = Depends(get_task_service)):
    """Get a task with its modification history and comments."""
    return unwrap(tasks.get_task(task_id))


def _use(tasks: TaskService, task_id: str, changer_id: str, command: TaskCommand):
    return unwrap(tasks.use_command(task_id, changer_id, command))


@router.put("/tasks/{task_id}/title", response_model=FullTaskResponse, responses=REFUSALS)
def set_title(task_id: str, changer_id: str, data: TitleUpdate, tasks: TaskService = Depends(get_task_service)):
    return _use(tasks, task_id, changer_id, SetTaskTitleCommand(data.title))


@router.put("/tasks/{task_id}/content", response_model=FullTaskResponse, responses=REFUSALS)
def set_content(task_id: str, changer_id: str, data: ContentUpdate, tasks: TaskService = Depends(get_task_service)):
    return _use(tasks, task_id, changer_id, SetTaskContentCommand(data.content))


@router.put("/tasks/{task_id}/state", response_model=FullTaskResponse, responses=REFUSALS)
def set_state(task_id: str, changer_id: str, data: StateUpdate, tasks: TaskService = Depends(get_task_service)):
    """
    Move a task to another state.

    WILL REFUSE if:
    - The task is already in that state (409)
    - The current state does not let the changer's role change state (403)
    """
    return _use(tasks, task_id, changer_id, SetTaskStateCommand(data.state))


@router.put("/tasks/{task_id}/owner", response_model=FullTaskResponse, responses=REFUSALS)
def set_owner(task_id: str, changer_id: str, data: OwnerUpdate, tasks: TaskService = Depends(get_task_service)):
    return _use(tasks, task_id, changer_id, SetTaskOwnerCommand(data.owner_id))


@router.post("/tasks/{task_id}/comments", response_model=FullTaskResponse, responses=REFUSALS)
def add_comment(task_id: str, changer_id: str, data: CommentCreate, tasks: TaskService = Depends(get_task_service)):
    return _use(tasks, task_id, changer_id, AddTaskCommentCommand(data.text))


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT, responses=REFUSALS)
def remove_task(task_id: str, tasks: TaskService = Depends(get_task_service)):
    unwrap(tasks.remove_task(task_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Employee endpoints
@router.post("/employees", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED, responses=REFUSALS)
def hire_employee(data: EmployeeCreate, employees: EmployeeService = Depends(get_employee_service)):
    return unwrap(employees.hire(data.first_name, data.last_name, data.role, data.chief_id))


@router.get("/employees", response_model=List[EmployeeResponse])
def list_employees(employees: EmployeeService = Depends(get_employee_service)):
    return employees.list_employees()


@router.get("/employees/{employee_id}", response_model=EmployeeResponse, responses=REFUSALS)
def get_employee(employee_id: str, employees: EmployeeService = Depends(get_employee_service)):
    return unwrap(employees.get_employee(employee_id))


@router.get("/employees/{employee_id}/subordinates", response_model=List[EmployeeResponse], responses=REFUSALS)
def list_subordinates(employee_id: str, employees: EmployeeService = Depends(get_employee_service)):
    return unwrap(employees.subordinates(employee_id))


@router.put("/employees/{employee_id}/chief", response_model=EmployeeResponse, responses=REFUSALS)
def set_chief(employee_id: str, data: EmployeeChiefUpdate, employees: EmployeeService = Depends(get_employee_service)):
    return unwrap(employees.set_chief(employee_id, data.chief_id))


@router.put("/employees/{employee_id}/role", response_model=EmployeeResponse, responses=REFUSALS)
def set_role(employee_id: str, data: EmployeeRoleUpdate, employees: EmployeeService = Depends(get_employee_service)):
    return unwrap(employees.set_role(employee_id, data.role))


@router.delete("/employees/{employee_id}", status_code=status.HTTP_204_NO_CONTENT, responses=REFUSALS)
def dismiss_employee(employee_id: str, employees: EmployeeService = Depends(get_employee_service)):
    """Remove an employee. Their tasks stay, without an owner."""
    unwrap(employees.dismiss(employee_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
