"""Task routes. Every route acts on the current user's tasks only."""
from datetime import datetime

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, ConfigDict, Field

from ..application.services import TaskService
from ..dependencies import get_task_service, require_user

router = APIRouter(prefix="/tasks", tags=["tasks"])


class TaskCreate(BaseModel):
    description: str = Field(..., min_length=1)
    completed: bool = False


class TaskUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: str | None = None
    completed: bool | None = None


class TaskResponse(BaseModel):
    id: str
    description: str
    completed: bool
    owner: str
    created_at: datetime
    updated_at: datetime


@router.post("", status_code=201, response_model=TaskResponse)
def create_task(
    request: Request,
    data: TaskCreate,
    service: TaskService = Depends(get_task_service)
):
    """Create a task owned by the current user."""
    user = require_user(request)
    return service.create_task(user["id"], data.description, data.completed)


@router.get("", response_model=list[TaskResponse])
def list_tasks(
    request: Request,
    completed: bool | None = None,
    limit: int | None = Query(None, ge=0),
    skip: int = Query(0, ge=0),
    sort_by: str | None = Query(None, description="field:asc or field:desc"),
    service: TaskService = Depends(get_task_service)
):
    """List the current user's tasks.

    GET /tasks?completed=true&limit=10&skip=20&sort_by=created_at:desc
    """
    user = require_user(request)
    return service.list_tasks(
        user["id"],
        completed=completed,
        limit=limit,
        skip=skip,
        sort_by=sort_by
    )


@router.get("/{task_id}", response_model=TaskResponse)
def read_task(request: Request, task_id: str, service: TaskService = Depends(get_task_service)):
    user = require_user(request)
    return service.get_task(user["id"], task_id)


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(
    request: Request,
    task_id: str,
    data: TaskUpdate,
    service: TaskService = Depends(get_task_service)
):
    """Update description and/or completed."""
    user = require_user(request)
    updates = data.model_dump(exclude_unset=True)
    return service.update_task(user["id"], task_id, updates)


@router.delete("/{task_id}", response_model=TaskResponse)
def delete_task(request: Request, task_id: str, service: TaskService = Depends(get_task_service)):
    user = require_user(request)
    return service.delete_task(user["id"], task_id)
