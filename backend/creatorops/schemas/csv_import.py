"""
CSV Import schemas for API validation.
"""
from typing import Optional, List, Dict, Any
from pydantic import BaseModel


class ImportIssue(BaseModel):
    """A coercion problem found while mapping one row."""
    row_index: int
    field: str
    value: Optional[str] = None
    issue: str
    message: str


class RowOutcome(BaseModel):
    """Result of inserting one row in per-row mode."""
    row_index: int
    outcome: str
    error: Optional[str] = None


class CSVPreviewResponse(BaseModel):
    """Response for CSV preview endpoint."""
    entity: str
    headers: List[str]
    column_mapping: Dict[str, str]
    unmapped_columns: List[str]
    preview_rows: List[Dict[str, Any]]
    preview_count: int
    total_rows: int
    warnings: List[ImportIssue]


class CSVImportResponse(BaseModel):
    """Response for CSV import execution."""
    entity: str
    total_rows: int
    submitted: int
    inserted: int
    failed: int
    warnings: List[ImportIssue]
    rows: Optional[List[RowOutcome]] = None
