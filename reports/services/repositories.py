"""
Persistence collaborators for tasks and employees.

The services treat these as authoritative and never cache beyond a single
call. Two implementations are provided: in-memory (tests, embedding) and
SQLAlchemy (the HTTP app).
"""
import threading
from typing import Dict, List, Optional, Protocol
from sqlalchemy.orm import Session
from reports.models.domain import Employee, Task


class TaskRepository(Protocol):
    def load(self, task_id: str) -> Optional[Task]: ...

    def save(self, task: Task) -> None: ...

    def list_all(self) -> List[Task]: ...

    def delete(self, task_id: str) -> None: ...


class EmployeeRepository(Protocol):
    def load(self, employee_id: str) -> Optional[Employee]: ...

    def save(self, employee: Employee) -> None: ...

    def list_all(self) -> List[Employee]: ...

    def delete(self, employee_id: str) -> None: ...

    def subordinates_of(self, employee_id: str) -> List[Employee]: ...


class InMemoryTaskRepository:
    """Dict-backed task store. Reads return snapshot lists."""

    def __init__(self):
        self._tasks: Dict[str, Task] = {}
        self._lock = threading.RLock()

    def load(self, task_id: str) -> Optional[Task]:
        with self._lock:
            return self._tasks.get(task_id)

    def save(self, task: Task) -> None:
        with self._lock:
            self._tasks[task.id] = task

    def list_all(self) -> List[Task]:
        with self._lock:
            # sorted() is stable, so equal timestamps keep insertion order
            return sorted(self._tasks.values(), key=lambda t: t.created_at)

    def delete(self, task_id: str) -> None:
        with self._lock:
            self._tasks.pop(task_id, None)


class InMemoryEmployeeRepository:
    """Dict-backed employee store with a chief_id lookup for subordinates."""

    def __init__(self):
        self._employees: Dict[str, Employee] = {}
        self._lock = threading.RLock()

    def load(self, employee_id: str) -> Optional[Employee]:
        with self._lock:
            return self._employees.get(employee_id)

    def save(self, employee: Employee) -> None:
        with self._lock:
            self._employees[employee.id] = employee

    def list_all(self) -> List[Employee]:
        with self._lock:
            return list(self._employees.values())

    def delete(self, employee_id: str) -> None:
        with self._lock:
            self._employees.pop(employee_id, None)

    def subordinates_of(self, employee_id: str) -> List[Employee]:
        with self._lock:
            return [e for e in self._employees.values() if e.chief_id == employee_id]


class SqlTaskRepository:
    """Task store over a SQLAlchemy session. Each save commits."""

    def __init__(self, db: Session):
        self.db = db

    def load(self, task_id: str) -> Optional[Task]:
        # Always read the committed row; the identity map may hold a copy another session has since changed
        return self.db.get(Task, task_id, populate_existing=True)

    def save(self, task: Task) -> None:
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)

    def list_all(self) -> List[Task]:
        return self.db.query(Task).order_by(Task.created_at.asc()).all()

    def delete(self, task_id: str) -> None:
        task = self.db.get(Task, task_id)
        if task is not None:
            self.db.delete(task)
            self.db.commit()


class SqlEmployeeRepository:
    """Employee store over a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def load(self, employee_id: str) -> Optional[Employee]:
        return self.db.get(Employee, employee_id)

    def save(self, employee: Employee) -> None:
        self.db.add(employee)
        self.db.commit()
        self.db.refresh(employee)

    def list_all(self) -> List[Employee]:
        return self.db.query(Employee).order_by(Employee.created_at.asc()).all()

    def delete(self, employee_id: str) -> None:
        employee = self.db.get(Employee, employee_id)
        if employee is not None:
            self.db.delete(employee)
            self.db.commit()

    def subordinates_of(self, employee_id: str) -> List[Employee]:
        return (
            self.db.query(Employee)
            .filter(Employee.chief_id == employee_id)
            .order_by(Employee.created_at.asc())
            .all()
        )
