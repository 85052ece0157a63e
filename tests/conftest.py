"""Pytest configuration and shared fixtures."""
import os

# Keep the app module from creating ./reports.db on import
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from reports.database import Base, make_engine
from reports.models.domain import Employee, Task
from reports.models.audit import Modification, Comment
from reports.models.enums import EmployeeRole
from reports.services.employee_service import EmployeeService
from reports.services.repositories import InMemoryEmployeeRepository, InMemoryTaskRepository
from reports.services.task_service import TaskLocks, TaskService


@pytest.fixture
def db_engine():
    """Fresh in-memory database shared by every connection of one test."""
    engine = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    TestingSessionLocal = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)
    session = TestingSessionLocal()

    yield session

    session.close()


@pytest.fixture
def task_repo():
    return InMemoryTaskRepository()


@pytest.fixture
def employee_repo():
    return InMemoryEmployeeRepository()


@pytest.fixture
def task_service(task_repo, employee_repo):
    return TaskService(task_repo, employee_repo, locks=TaskLocks())


@pytest.fixture
def employee_service(employee_repo, task_repo):
    return EmployeeService(employee_repo, task_repo)


@pytest.fixture
def supervisor(employee_service):
    return employee_service.hire("Sofia", "Kovalenko", EmployeeRole.SUPERVISOR).unwrap()


@pytest.fixture
def team_lead(employee_service, supervisor):
    return employee_service.hire("Misha", "Libchenko", EmployeeRole.TEAM_LEAD, supervisor.id).unwrap()


@pytest.fixture
def regular(employee_service, team_lead):
    return employee_service.hire("Ivan", "Petrov", EmployeeRole.REGULAR, team_lead.id).unwrap()


@pytest.fixture
def sample_task(task_service, regular):
    """A tracked task in Open state owned by the regular employee."""
    return task_service.create_task("Prepare quarterly report", regular).unwrap()
