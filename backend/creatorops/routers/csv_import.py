"""
CSV bulk-import router for campaigns, creators and tasks.

Flow: download the entity template, upload a file for preview, then upload
the same file again to execute. Execution re-parses the whole file.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_db
from ..dependencies import get_current_user
from ..models.user import User
from ..schemas.csv_import import CSVPreviewResponse, CSVImportResponse
from ..services.csv_import_service import (
    ImportParseError,
    ImportPermissionError,
    ImportSubmitError,
    UnresolvedReferenceError,
    generate_template,
)
from ..services.import_schemas import EntitySchema, get_entity_schema
from ..services.import_session import ImportSession

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/import", tags=["csv-import"])


def get_schema_or_404(entity: str) -> EntitySchema:
    """Path dependency resolving the entity name to its import schema."""
    schema = get_entity_schema(entity)
    if schema is None:
        raise HTTPException(status_code=404, detail=f"Unknown import entity: {entity}")
    return schema


@router.get("/{entity}/template")
def download_template(schema: EntitySchema = Depends(get_schema_or_404)):
    """Download the CSV template (header row plus example rows)."""
    return Response(
        content=generate_template(schema),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{schema.template_filename}"'},
    )


@router.post("/{entity}/preview", response_model=CSVPreviewResponse)
async def preview_csv_import(
    file: UploadFile = File(...),
    schema: EntitySchema = Depends(get_schema_or_404),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Upload a CSV file and preview the import.
    Returns detected column mapping, up to five rows and mapping warnings.
    """
    session = ImportSession(db, schema, current_user)
    content = await file.read()

    try:
        session.select_file(file.filename, content)
        preview = session.parse()
    except ImportParseError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return CSVPreviewResponse(**preview)


@router.post("/{entity}/execute", response_model=CSVImportResponse)
async def execute_csv_import(
    file: UploadFile = File(...),
    per_row: Optional[bool] = Form(None),
    schema: EntitySchema = Depends(get_schema_or_404),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Execute the import for the uploaded file.

    Batch mode (default) writes all rows or none. With ``per_row`` each row
    is committed on its own and reported individually.
    """
    settings = get_settings()
    session = ImportSession(db, schema, current_user, settings)
    content = await file.read()

    try:
        session.select_file(file.filename, content)
        session.parse()
        result = session.submit(per_row=per_row)
    except ImportParseError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ImportPermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except UnresolvedReferenceError as e:
        raise HTTPException(
            status_code=422,
            detail={"message": str(e), "issues": e.issues},
        )
    except ImportSubmitError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(
        f"{current_user.email} imported {result['inserted']}/{result['submitted']} {schema.entity}"
    )
    return CSVImportResponse(**result)
