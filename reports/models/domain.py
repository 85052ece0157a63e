"""Domain models - employees and the task aggregate with its validated mutations."""
import uuid
from datetime import datetime
from typing import Callable, Optional, Union
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from reports.database import Base
from reports.errors import InvalidArgumentError, NoOpStateError, PermissionDeniedError, require_text
from reports.models.audit import Comment, Modification, utcnow
from reports.models.enums import EmployeeRole, TaskField, TaskOperation, TaskState
from reports.models.validators import validator_for


def new_id() -> str:
    return uuid.uuid4().hex


class Employee(Base):
    """
    An employee with a role and an optional chief.

    Subordinates are not stored here: they are the employees whose chief_id
    points at this one, looked up through the employee repository.
    """
    __tablename__ = "employees"

    id = Column(String(32), primary_key=True, index=True, default=new_id)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    role = Column(SQLEnum(EmployeeRole), nullable=False, default=EmployeeRole.REGULAR)
    chief_id = Column(String(32), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    @classmethod
    def create(
        cls,
        first_name: str,
        last_name: str,
        role: EmployeeRole = EmployeeRole.REGULAR,
        chief: Optional["Employee"] = None
    ) -> "Employee":
        require_text(first_name, "First name")
        require_text(last_name, "Last name")
        try:
            role = EmployeeRole(role)
        except ValueError:
            raise InvalidArgumentError(f"Unknown employee role: {role!r}") from None
        return cls(
            id=new_id(),
            first_name=first_name,
            last_name=last_name,
            role=role,
            chief_id=chief.id if chief is not None else None,
            created_at=utcnow()
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def is_chief_of(self, other: "Employee") -> bool:
        return other is not None and other.chief_id == self.id

    def __str__(self):
        return f"{self.full_name} ({self.role.value})"

    def __repr__(self):
        return f"Employee(id={self.id!r}, role={self.role.value})"


class Task(Base):
    """
    A task progresses through states: Open → Active → Closed, or → Cancelled.

    Invariants enforced here:
    - Title is never blank
    - Every change goes through the validator of the current state
    - Every successful change appends exactly one Modification
    - Setting the state to the current state is refused
    """
    __tablename__ = "tasks"

    id = Column(String(32), primary_key=True, index=True, default=new_id)
    title = Column(String, nullable=False)
    content = Column(String, nullable=False, default="")
    state = Column(SQLEnum(TaskState), nullable=False, default=TaskState.OPEN)
    owner_id = Column(String(32), ForeignKey("employees.id", ondelete="SET NULL"), nullable=True, index=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    # Relationships
    modifications = relationship(
        "Modification",
        back_populates="task",
        order_by="Modification.id",
        cascade="all, delete-orphan"
    )
    comments = relationship(
        "Comment",
        back_populates="task",
        order_by="Comment.id",
        cascade="all, delete-orphan"
    )

    @classmethod
    def create(cls, title: str, owner: Optional[Employee] = None) -> "Task":
        """New task in Open state with empty content and no history."""
        require_text(title, "Task title")
        now = utcnow()
        return cls(
            id=new_id(),
            title=title,
            content="",
            state=TaskState.OPEN,
            owner_id=owner.id if owner is not None else None,
            created_at=now,
            updated_at=now
        )

    def set_title(self, changer: Employee, title: str) -> None:
        self._require_changer(changer)
        require_text(title, "Task title")

        def apply(now: datetime) -> None:
            self.title = title

        self._mutate(changer, TaskOperation.SET_TITLE, TaskField.TITLE, apply)

    def set_content(self, changer: Employee, content: str) -> None:
        self._require_changer(changer)
        require_text(content, "Task content")

        def apply(now: datetime) -> None:
            self.content = content

        self._mutate(changer, TaskOperation.SET_CONTENT, TaskField.CONTENT, apply)

    def set_state(self, changer: Employee, state: Union[TaskState, str]) -> None:
        """
        Move the task to another state.

        Which targets are legal is decided by the current state's validator.
        A no-op transition is refused before permissions are checked.
        """
        self._require_changer(changer)
        if state is None:
            raise InvalidArgumentError("Task state must be provided")
        try:
            state = TaskState(state)
        except ValueError:
            raise InvalidArgumentError(f"Unknown task state: {state!r}") from None

        if state == self.state:
            raise NoOpStateError(f"Task state is already set on {state.value}")

        def apply(now: datetime) -> None:
            self.state = state

        self._mutate(changer, TaskOperation.SET_STATE, TaskField.STATE, apply)

    def add_comment(self, changer: Employee, text: str) -> Comment:
        self._require_changer(changer)
        require_text(text, "Comment")
        comment = Comment(author_id=changer.id, text=text)

        def apply(now: datetime) -> None:
            comment.created_at = now
            self.comments.append(comment)

        self._mutate(changer, TaskOperation.ADD_COMMENT, TaskField.COMMENTS, apply)
        return comment

    def set_owner(self, changer: Employee, owner: Employee) -> None:
        self._require_changer(changer)
        if owner is None:
            raise InvalidArgumentError("Task owner must be provided")

        def apply(now: datetime) -> None:
            self.owner_id = owner.id

        self._mutate(changer, TaskOperation.SET_OWNER, TaskField.OWNER, apply)

    def was_modified_by(self, employee_id: str) -> bool:
        return any(m.changer_id == employee_id for m in self.modifications)

    def _mutate(
        self,
        changer: Employee,
        operation: TaskOperation,
        field: TaskField,
        apply: Callable[[datetime], None]
    ) -> None:
        """
        The one validated mutation path: check, apply, record, touch.

        Nothing is written unless the validator allows the operation.
        """
        validator = validator_for(self.state)
        if not validator.permits(operation, changer):
            raise PermissionDeniedError(
                f"{changer} is not able to {operation.value.replace('_', ' ')} "
                f"on task '{self.title}' while it is {self.state.value}"
            )

        # Never go back in time relative to the last recorded change
        now = utcnow()
        if self.updated_at is not None and now < self.updated_at:
            now = self.updated_at

        apply(now)
        self.modifications.append(Modification(changer_id=changer.id, field=field, changed_at=now))
        self.updated_at = now

    @staticmethod
    def _require_changer(changer: Optional[Employee]) -> None:
        if changer is None:
            raise InvalidArgumentError("Changer must be provided")

    def __repr__(self):
        return f"Task(id={self.id!r}, title={self.title!r}, state={self.state.value})"
