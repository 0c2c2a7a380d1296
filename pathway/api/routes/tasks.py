"""Task board and progress endpoints."""

from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, Depends, Query, status

from ...auth import UserScope
from ...services.progress import ProgressService
from ...services.tasks import TaskService
from ..dependencies import get_database, get_user_scope
from ..schemas import ProfileResponse, ProgressResponse, TaskCreateRequest, TaskResponse, TaskToggleResponse

router = APIRouter()


@router.get("/tasks", response_model=List[TaskResponse], status_code=status.HTTP_200_OK)
def list_tasks(scope: UserScope = Depends(get_user_scope), db=Depends(get_database)) -> List[TaskResponse]:
    return [TaskResponse(**task.to_dict()) for task in TaskService(db, scope).list_tasks()]


@router.get("/tasks/board", response_model=Dict[str, List[TaskResponse]], status_code=status.HTTP_200_OK)
def task_board(
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> Dict[str, List[TaskResponse]]:
    """Tasks grouped under Monday through Sunday."""

    board = TaskService(db, scope).board().by_day()
    return {day: [TaskResponse(**task.to_dict()) for task in items] for day, items in board.items()}


@router.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreateRequest,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> TaskResponse:
    task = TaskService(db, scope).create_task(payload.name, payload.category, payload.day)
    return TaskResponse(**task.to_dict())


@router.post("/tasks/{task_id}/toggle", response_model=TaskToggleResponse, status_code=status.HTTP_200_OK)
def toggle_task(
    task_id: str,
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> TaskToggleResponse:
    result = TaskService(db, scope).toggle_task(task_id)
    return TaskToggleResponse(
        task=TaskResponse(**result.task.to_dict()),
        profile=ProfileResponse(**result.profile.to_dict()) if result.profile else None,
    )


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str,
    confirm: bool = Query(default=False, description="Must be true to delete the task"),
    scope: UserScope = Depends(get_user_scope),
    db=Depends(get_database),
) -> None:
    TaskService(db, scope).delete_task(task_id, confirmed=confirm)


@router.get("/progress", response_model=ProgressResponse, status_code=status.HTTP_200_OK)
def get_progress(scope: UserScope = Depends(get_user_scope), db=Depends(get_database)) -> ProgressResponse:
    return ProgressResponse(**ProgressService(db, scope).summary().to_dict())
