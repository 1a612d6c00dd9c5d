from unittest.mock import patch

import pytest

from creatorops.config import Settings
from creatorops.models import Campaign, Task
from creatorops.services import csv_import_service
from creatorops.services.csv_import_service import ImportParseError, ImportPermissionError
from creatorops.services.import_schemas import CAMPAIGN_SCHEMA, CREATOR_SCHEMA, TASK_SCHEMA
from creatorops.services.import_session import (
    ImportSession,
    ImportState,
    InvalidTransitionError,
)

CAMPAIGN_CSV = b"brand_name,budget_min\nAcme,100\nGlobex,abc\n"


def test_happy_path(db_session, manager):
    session = ImportSession(db_session, CAMPAIGN_SCHEMA, manager)
    assert session.state == ImportState.IDLE

    session.select_file("campaigns.csv", CAMPAIGN_CSV)
    assert session.state == ImportState.FILE_SELECTED

    preview = session.parse()
    assert session.state == ImportState.PARSED
    assert preview["preview_count"] == 2

    result = session.submit()
    assert session.state == ImportState.SUCCEEDED
    assert result["inserted"] == 2
    assert db_session.query(Campaign).count() == 2


def test_cannot_parse_or_submit_without_a_file(db_session, manager):
    session = ImportSession(db_session, CAMPAIGN_SCHEMA, manager)

    with pytest.raises(InvalidTransitionError):
        session.parse()
    with pytest.raises(InvalidTransitionError):
        session.submit()


def test_failed_submit_keeps_preview_and_requires_dismissal(db_session, associate):
    session = ImportSession(db_session, CAMPAIGN_SCHEMA, associate)
    session.select_file("campaigns.csv", CAMPAIGN_CSV)
    preview = session.parse()

    with pytest.raises(ImportPermissionError):
        session.submit()

    assert session.state == ImportState.FAILED
    assert isinstance(session.error, ImportPermissionError)
    assert session.preview == preview

    # No automatic retry: the error has to be dismissed first
    with pytest.raises(InvalidTransitionError):
        session.submit()

    session.dismiss_error()
    assert session.state == ImportState.PARSED
    assert session.error is None
    assert session.preview == preview


def test_rejected_file_leaves_state_unchanged(db_session, manager):
    session = ImportSession(db_session, CAMPAIGN_SCHEMA, manager)

    with pytest.raises(ImportParseError):
        session.select_file("campaigns.xlsx", CAMPAIGN_CSV)

    assert session.state == ImportState.IDLE


def test_new_file_can_be_selected_after_success(db_session, manager):
    session = ImportSession(db_session, CAMPAIGN_SCHEMA, manager)
    session.select_file("campaigns.csv", CAMPAIGN_CSV)
    session.parse()
    session.submit()

    session.select_file("more.csv", b"brand_name\nInitech\n")
    assert session.state == ImportState.FILE_SELECTED
    assert session.result is None


def test_settings_control_preview_size_and_per_row_mode(db_session, manager):
    settings = Settings(import_preview_rows=1, import_per_row_results=True)
    session = ImportSession(db_session, CREATOR_SCHEMA, manager, settings)
    session.select_file("creators.csv", b"name,category\nAsha,Beauty\nRavi,\n")

    assert session.parse()["preview_count"] == 1

    result = session.submit()
    assert [r["outcome"] for r in result["rows"]] == ["inserted", "failed"]


def test_reference_lists_are_fetched_once_per_attempt(db_session, manager, associate):
    session = ImportSession(db_session, TASK_SCHEMA, manager)
    session.select_file("tasks.csv", b"title,assigned_to_email\nBrief,associate@example.com\n")

    with patch.object(
        csv_import_service,
        "load_reference_indexes",
        wraps=csv_import_service.load_reference_indexes,
    ) as loader:
        session.parse()
        session.submit()

    assert loader.call_count == 1
    assert db_session.query(Task).one().assigned_to == associate.id
