"""
API routers.
"""
from .auth import router as auth_router
from .campaigns import router as campaigns_router
from .creators import router as creators_router
from .tasks import router as tasks_router
from .payments import router as payments_router
from .dashboard import router as dashboard_router
from .csv_import import router as csv_import_router

__all__ = [
    "auth_router",
    "campaigns_router",
    "creators_router",
    "tasks_router",
    "payments_router",
    "dashboard_router",
    "csv_import_router",
]
