from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from datetime import datetime

from hearth.dependencies import get_current_member_id, get_task_service
from hearth.schemas.task import TaskCreate, TaskUpdate, TaskFilter, TaskResponse
from hearth.schemas.result import Result
from hearth.services.task_service import TaskService

router = APIRouter()


@router.post("", response_model=Result[TaskResponse], status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    member_id: str = Depends(get_current_member_id),
    service: TaskService = Depends(get_task_service),
):
    """Create a task in one of the current member's households."""
    task = service.create_task(member_id, task_data)
    return Result.successful(data=TaskResponse(**task))


@router.get("", response_model=Result[List[TaskResponse]])
async def get_tasks(
    household_ids: List[str] = Query(default=[]),
    due_date_from: Optional[datetime] = None,
    due_date_to: Optional[datetime] = None,
    completed_date_from: Optional[datetime] = None,
    completed_date_to: Optional[datetime] = None,
    member_id: str = Depends(get_current_member_id),
    service: TaskService = Depends(get_task_service),
):
    """
    Get the tasks visible to the current member.

    Query parameters:
    - **household_ids**: Restrict to these households (repeatable); defaults to all
    - **due_date_from / due_date_to**: Inclusive due date range
    - **completed_date_from / completed_date_to**: Inclusive completion date range
    """
    filters = TaskFilter(
        household_ids=household_ids,
        due_date_from=due_date_from,
        due_date_to=due_date_to,
        completed_date_from=completed_date_from,
        completed_date_to=completed_date_to,
    )
    tasks = service.get_tasks(member_id, filters)
    return Result.successful(data=[TaskResponse(**task) for task in tasks])


@router.get("/{task_id}", response_model=Result[TaskResponse])
async def get_task(
    task_id: str,
    member_id: str = Depends(get_current_member_id),
    service: TaskService = Depends(get_task_service),
):
    task = service.get_task(member_id, task_id)
    return Result.successful(data=TaskResponse(**task))


@router.put("/{task_id}", response_model=Result[TaskResponse])
async def update_task(
    task_id: str,
    task_data: TaskUpdate,
    member_id: str = Depends(get_current_member_id),
    service: TaskService = Depends(get_task_service),
):
    """Replace a task's fields and tags."""
    task = service.update_task(member_id, task_id, task_data)
    return Result.successful(data=TaskResponse(**task))


@router.delete("/{task_id}", response_model=Result[dict])
async def delete_task(
    task_id: str,
    member_id: str = Depends(get_current_member_id),
    service: TaskService = Depends(get_task_service),
):
    service.delete_task(member_id, task_id)
    return Result.successful(data={"message": "Task deleted successfully"})
