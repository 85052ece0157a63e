"""Pydantic schemas for request/response validation."""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field
from reports.models.enums import EmployeeRole, TaskField, TaskState


# Employee schemas
class EmployeeCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: EmployeeRole = EmployeeRole.REGULAR
    chief_id: Optional[str] = None


class EmployeeChiefUpdate(BaseModel):
    chief_id: Optional[str] = None


class EmployeeRoleUpdate(BaseModel):
    role: EmployeeRole


class EmployeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    role: EmployeeRole
    chief_id: Optional[str]


# Task schemas
class TaskCreate(BaseModel):
    title: str = Field(..., max_length=200)
    owner_id: Optional[str] = None


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    state: TaskState
    owner_id: Optional[str]
    created_at: datetime
    updated_at: datetime


class ModificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    changer_id: str
    field: TaskField
    changed_at: datetime


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    author_id: str
    text: str
    created_at: datetime


class FullTaskResponse(TaskResponse):
    content: str
    modifications: List[ModificationResponse] = []
    comments: List[CommentResponse] = []


# Command payloads - the changer comes from the query string
class TitleUpdate(BaseModel):
    title: str


class ContentUpdate(BaseModel):
    content: str


class StateUpdate(BaseModel):
    state: TaskState


class OwnerUpdate(BaseModel):
    owner_id: str


class CommentCreate(BaseModel):
    text: str = Field(..., max_length=2000)


# Error response
class ErrorResponse(BaseModel):
    """Response when an operation is refused."""
    kind: str
    message: str
