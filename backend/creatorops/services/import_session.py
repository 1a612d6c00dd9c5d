"""
Per-attempt import state machine.

idle -> file_selected -> parsed -> submitting -> succeeded | failed

A failed attempt keeps its preview; dismissing the error returns the session
to ``parsed`` so the user can resubmit. Selecting a new file is allowed from
any state except ``submitting``.
"""
import logging
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..config import get_settings
from ..models.user import User
from .csv_import_service import (
    execute_import,
    load_import_references,
    preview_import,
    read_upload,
)
from .import_schemas import EntitySchema
from .reference_service import ReferenceIndex

logger = logging.getLogger(__name__)


class ImportState(str, Enum):
    IDLE = "idle"
    FILE_SELECTED = "file_selected"
    PARSED = "parsed"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TRANSITIONS = {
    ImportState.IDLE: {ImportState.FILE_SELECTED},
    ImportState.FILE_SELECTED: {ImportState.FILE_SELECTED, ImportState.PARSED},
    ImportState.PARSED: {ImportState.FILE_SELECTED, ImportState.SUBMITTING},
    ImportState.SUBMITTING: {ImportState.SUCCEEDED, ImportState.FAILED},
    ImportState.SUCCEEDED: {ImportState.FILE_SELECTED},
    ImportState.FAILED: {ImportState.FILE_SELECTED, ImportState.PARSED},
}


class InvalidTransitionError(Exception):
    """Raised when an action is not allowed in the session's current state."""


class ImportSession:
    """One user's CSV import attempt for one entity."""

    def __init__(self, db: Session, schema: EntitySchema, user: User, settings=None):
        self.db = db
        self.schema = schema
        self.user = user
        self.settings = settings or get_settings()
        self.state = ImportState.IDLE
        self.text: Optional[str] = None
        self.references: Optional[Dict[str, ReferenceIndex]] = None
        self.preview: Optional[Dict[str, Any]] = None
        self.result: Optional[Dict[str, Any]] = None
        self.error: Optional[Exception] = None

    def _transition(self, target: ImportState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise InvalidTransitionError(
                f"Cannot move import from '{self.state.value}' to '{target.value}'"
            )
        logger.debug(f"{self.schema.entity} import: {self.state.value} -> {target.value}")
        self.state = target

    def select_file(self, filename: Optional[str], content: bytes) -> None:
        """Read an uploaded file. Clears any previous preview and outcome."""
        text = read_upload(filename, content, self.settings.import_max_file_bytes)
        self._transition(ImportState.FILE_SELECTED)
        self.text = text
        self.references = None
        self.preview = None
        self.result = None
        self.error = None

    def parse(self) -> Dict[str, Any]:
        """
        Build the preview for the selected file. The reference lists loaded
        here are kept for the submit.
        """
        if self.state != ImportState.FILE_SELECTED:
            raise InvalidTransitionError(f"No file selected (state: '{self.state.value}')")
        references = load_import_references(self.db, self.schema, self.text, self.user)
        preview = preview_import(
            self.db, self.schema, self.text, self.user,
            limit=self.settings.import_preview_rows,
            references=references,
        )
        self._transition(ImportState.PARSED)
        self.references = references
        self.preview = preview
        return preview

    def submit(self, per_row: Optional[bool] = None) -> Dict[str, Any]:
        """
        Re-parse the whole file and write it. On failure the error is kept on
        the session and re-raised; the preview stays available.
        """
        self._transition(ImportState.SUBMITTING)
        if per_row is None:
            per_row = self.settings.import_per_row_results
        try:
            result = execute_import(
                self.db, self.schema, self.text, self.user,
                strict=self.settings.import_strict_foreign_keys,
                per_row=per_row,
                references=self.references,
            )
        except Exception as e:
            self.error = e
            self._transition(ImportState.FAILED)
            logger.error(f"{self.schema.entity} import failed for user {self.user.id}: {e}")
            raise
        self.result = result
        self._transition(ImportState.SUCCEEDED)
        return result

    def dismiss_error(self) -> None:
        """Acknowledge a failed submit and return to the parsed preview."""
        self._transition(ImportState.PARSED)
        self.error = None
