"""
Dashboard router: overview counts for the landing page.
"""
import logging
from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func

from ..database import get_db
from ..dependencies import get_current_user
from ..models import Campaign, Creator, Task, User, CampaignStatus, TaskStatus
from ..models.task import OPEN_TASK_STATUSES

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def _count_by_status(query, column, statuses) -> dict:
    counts = {status.value: 0 for status in statuses}
    for status, count in query.with_entities(column, func.count()).group_by(column).all():
        counts[status] = count
    return counts


@router.get("/stats")
def get_dashboard_stats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Creator and campaign totals plus task workload.

    Task figures cover the tasks the caller can see: everything for admins
    and managers, only their own assignments for associates.
    """
    today = date.today()

    tasks = db.query(Task)
    if not current_user.is_manager:
        tasks = tasks.filter(Task.assigned_to == current_user.id)
    open_tasks = tasks.filter(Task.status.in_(OPEN_TASK_STATUSES))

    return {
        "total_creators": db.query(func.count(Creator.id)).scalar(),
        "total_campaigns": db.query(func.count(Campaign.id)).scalar(),
        "open_tasks": open_tasks.count(),
        "tasks_due_today": tasks.filter(Task.due_date == today).count(),
        "overdue_tasks": open_tasks.filter(Task.due_date < today).count(),
        "tasks_by_status": _count_by_status(tasks, Task.status, TaskStatus),
        "campaigns_by_status": _count_by_status(db.query(Campaign), Campaign.status, CampaignStatus),
    }
