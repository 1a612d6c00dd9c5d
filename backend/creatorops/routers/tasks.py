"""
Tasks router for CRUD operations.

Associates only see and update the tasks assigned to them.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from sqlalchemy import desc

from ..database import get_db
from ..dependencies import get_current_user, require_manager
from ..schemas.task import TaskCreate, TaskResponse, TaskUpdate, TaskListResponse
from ..models import Task, User

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def _visible_tasks(db: Session, user: User):
    query = db.query(Task)
    if not user.is_manager:
        query = query.filter(Task.assigned_to == user.id)
    return query


def _get_task_or_404(db: Session, user: User, task_id: str) -> Task:
    task = _visible_tasks(db, user).filter(Task.id == task_id).first()
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.get("/", response_model=TaskListResponse)
def list_tasks(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    status: Optional[str] = None,
    priority: Optional[str] = None,
    assigned_to: Optional[str] = None,
    creator_id: Optional[str] = None,
    campaign_id: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List tasks with pagination and filters."""
    query = _visible_tasks(db, current_user)

    if status:
        query = query.filter(Task.status == status)
    if priority:
        query = query.filter(Task.priority == priority)
    if assigned_to:
        query = query.filter(Task.assigned_to == assigned_to)
    if creator_id:
        query = query.filter(Task.creator_id == creator_id)
    if campaign_id:
        query = query.filter(Task.campaign_id == campaign_id)

    total = query.count()

    tasks = (
        query
        .order_by(desc(Task.created_at))
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )

    return TaskListResponse(
        total=total,
        page=page,
        page_size=page_size,
        tasks=[TaskResponse.model_validate(t) for t in tasks]
    )


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a single task by ID."""
    return _get_task_or_404(db, current_user, task_id)


@router.post("/", response_model=TaskResponse, status_code=201)
def create_task(
    task: TaskCreate,
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db)
):
    """Create a new task (admin/manager)."""
    db_task = Task(**task.model_dump(), created_by=current_user.id)
    db.add(db_task)
    db.commit()
    db.refresh(db_task)
    return db_task


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    update: TaskUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update a task.

    Admins and managers may change anything; an associate may only change
    the status of a task assigned to them.
    """
    task = _get_task_or_404(db, current_user, task_id)
    update_data = update.model_dump(exclude_unset=True)

    if not current_user.is_manager and set(update_data) - {"status"}:
        raise HTTPException(
            status_code=403,
            detail=f"Associates can only update task status. Your role: {current_user.role}"
        )

    for key, value in update_data.items():
        setattr(task, key, value)

    db.commit()
    db.refresh(task)
    return task


@router.delete("/{task_id}")
def delete_task(
    task_id: str,
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db)
):
    """Delete a task (admin/manager)."""
    task = _get_task_or_404(db, current_user, task_id)
    db.delete(task)
    db.commit()
    return {"message": "Task deleted"}
