"""
Pydantic schemas for request/response validation.
"""
from .campaign import CampaignCreate, CampaignUpdate, CampaignResponse, CampaignListResponse
from .creator import CreatorCreate, CreatorUpdate, CreatorResponse, CreatorListResponse
from .task import TaskCreate, TaskUpdate, TaskResponse, TaskListResponse
from .payment import PaymentCreate, PaymentUpdate, PaymentResponse, PaymentListResponse
from .csv_import import CSVPreviewResponse, CSVImportResponse

__all__ = [
    "CampaignCreate", "CampaignUpdate", "CampaignResponse", "CampaignListResponse",
    "CreatorCreate", "CreatorUpdate", "CreatorResponse", "CreatorListResponse",
    "TaskCreate", "TaskUpdate", "TaskResponse", "TaskListResponse",
    "PaymentCreate", "PaymentUpdate", "PaymentResponse", "PaymentListResponse",
    "CSVPreviewResponse", "CSVImportResponse",
]
