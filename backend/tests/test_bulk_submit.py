from unittest.mock import patch

import pytest

from creatorops.models import Campaign, Creator, Task
from creatorops.services import csv_import_service
from creatorops.services.csv_import_service import (
    ImportPermissionError,
    ImportSubmitError,
    UnresolvedReferenceError,
    execute_import,
    generate_template,
    insert_records,
    insert_records_per_row,
    preview_import,
)
from creatorops.services.import_schemas import (
    CAMPAIGN_SCHEMA,
    CREATOR_SCHEMA,
    TASK_SCHEMA,
)


def test_campaign_template_round_trip_as_manager(db_session, manager):
    text = generate_template(CAMPAIGN_SCHEMA)

    preview = preview_import(db_session, CAMPAIGN_SCHEMA, text, manager)
    assert preview["preview_count"] == 2
    assert preview["preview_rows"] == [
        dict(zip(CAMPAIGN_SCHEMA.template_headers, row)) for row in CAMPAIGN_SCHEMA.template_rows
    ]

    with patch.object(
        csv_import_service, "insert_records", wraps=csv_import_service.insert_records
    ) as insert_spy:
        result = execute_import(db_session, CAMPAIGN_SCHEMA, text, manager)

    insert_spy.assert_called_once()
    _, model, records = insert_spy.call_args.args
    assert model is Campaign
    assert len(records) == 2
    assert all(r["status"] == "planning" for r in records)
    assert all(r["created_by"] == manager.id for r in records)

    assert result["submitted"] == 2
    assert result["inserted"] == 2
    assert result["failed"] == 0
    assert result["rows"] is None

    saved = db_session.query(Campaign).order_by(Campaign.brand_name).all()
    assert [c.brand_name for c in saved] == ["Glow Cosmetics", "StrideFit"]
    assert saved[0].target_niches == ["beauty", "skincare"]
    assert saved[0].required_platforms == ["instagram", "youtube"]
    assert saved[0].budget_max == 150000
    # manager@example.com resolves, the unknown creator names do not
    assert saved[0].assigned_team_member == manager.id
    assert saved[0].assigned_creator is None


def test_unresolved_references_are_reported_as_warnings(db_session, manager):
    result = execute_import(db_session, CAMPAIGN_SCHEMA, generate_template(CAMPAIGN_SCHEMA), manager)

    unresolved = [w for w in result["warnings"] if w["issue"] == "unresolved_reference"]
    assert {w["value"] for w in unresolved} == {"Rajesh Kumar", "Priya Sharma", "associate@example.com"}


def test_associate_is_rejected_before_any_insert(db_session, associate):
    text = generate_template(CAMPAIGN_SCHEMA)

    with patch.object(csv_import_service, "insert_records") as insert_mock:
        with pytest.raises(ImportPermissionError) as excinfo:
            execute_import(db_session, CAMPAIGN_SCHEMA, text, associate)

    insert_mock.assert_not_called()
    assert "associate" in str(excinfo.value)
    assert excinfo.value.role == "associate"
    assert db_session.query(Campaign).count() == 0


def test_header_only_file_inserts_nothing(db_session, manager):
    with patch.object(
        csv_import_service, "insert_records", wraps=csv_import_service.insert_records
    ) as insert_spy:
        result = execute_import(db_session, TASK_SCHEMA, "title,status\n", manager)

    _, _, records = insert_spy.call_args.args
    assert records == []
    assert result["submitted"] == 0
    assert db_session.query(Task).count() == 0


def test_creator_defaults_are_applied(db_session, admin):
    text = "name,category,secondary_categories\nAsha,Beauty,\"Lifestyle, Travel\"\n"
    execute_import(db_session, CREATOR_SCHEMA, text, admin)

    creator = db_session.query(Creator).one()
    assert creator.status == "pending"
    assert creator.is_verified is False
    assert creator.created_by == admin.id
    assert creator.secondary_categories == ["Lifestyle", "Travel"]
    assert creator.sub_niches == []


def test_explicit_status_is_kept(db_session, manager):
    execute_import(db_session, TASK_SCHEMA, "title,status\nShip it,Done\n", manager)
    assert db_session.query(Task).one().status == "done"


def test_batch_failure_rolls_back_everything(db_session, manager):
    text = "name,primary_category\nAsha,Beauty\nRavi,\n"

    with pytest.raises(ImportSubmitError) as excinfo:
        execute_import(db_session, CREATOR_SCHEMA, text, manager)

    assert "primary_category" in str(excinfo.value)
    assert db_session.query(Creator).count() == 0


def test_per_row_mode_reports_each_row(db_session, manager):
    text = "name,primary_category\nAsha,Beauty\nRavi,\nMeera,Food\n"

    result = execute_import(db_session, CREATOR_SCHEMA, text, manager, per_row=True)

    assert [r["outcome"] for r in result["rows"]] == ["inserted", "failed", "inserted"]
    assert result["rows"][1]["row_index"] == 1
    assert "primary_category" in result["rows"][1]["error"]
    assert result["inserted"] == 2
    assert result["failed"] == 1
    assert sorted(c.name for c in db_session.query(Creator).all()) == ["Asha", "Meera"]


def test_task_references_resolve_by_email_and_name(db_session, manager, associate, creator):
    text = (
        "title,assigned_to_email,creator_name\n"
        "Brief,associate@example.com,Rajesh Kumar\n"
        "Review,Mona Manager,\n"
    )
    execute_import(db_session, TASK_SCHEMA, text, manager)

    tasks = {t.title: t for t in db_session.query(Task).all()}
    assert tasks["Brief"].assigned_to == associate.id
    assert tasks["Brief"].creator_id == creator.id
    assert tasks["Review"].assigned_to == manager.id
    assert tasks["Review"].creator_id is None


def test_task_campaign_resolves_by_brand_name(db_session, manager):
    execute_import(db_session, CAMPAIGN_SCHEMA, "brand_name\nGlow Cosmetics\n", manager)
    campaign = db_session.query(Campaign).one()

    execute_import(db_session, TASK_SCHEMA, "title,campaign\nBrief,Glow Cosmetics\n", manager)
    assert db_session.query(Task).one().campaign_id == campaign.id


def test_strict_mode_rejects_unresolved_references(db_session, manager):
    text = "title,assigned_to_email\nBrief,nobody@example.com\n"

    with patch.object(csv_import_service, "insert_records") as insert_mock:
        with pytest.raises(UnresolvedReferenceError) as excinfo:
            execute_import(db_session, TASK_SCHEMA, text, manager, strict=True)

    insert_mock.assert_not_called()
    assert excinfo.value.issues[0]["value"] == "nobody@example.com"


def test_ambiguous_creator_is_left_empty(db_session, manager, creator):
    db_session.add(Creator(name="Rajesh Kumar", email="rk2@example.com", primary_category="Food"))
    db_session.commit()

    result = execute_import(db_session, TASK_SCHEMA, "title,creator\nBrief,Rajesh Kumar\n", manager)

    assert db_session.query(Task).one().creator_id is None
    assert result["warnings"][0]["issue"] == "ambiguous_reference"


def test_oversized_budget_becomes_a_warning(db_session, manager):
    text = "brand_name,budget_max\nAcme,99999999999999999999\n"

    result = execute_import(db_session, CAMPAIGN_SCHEMA, text, manager)

    assert result["inserted"] == 1
    assert [w["issue"] for w in result["warnings"]] == ["invalid_integer"]
    assert db_session.query(Campaign).one().budget_max is None


def test_driver_overflow_in_batch_mode_rolls_back(db_session, manager):
    records = [
        {"brand_name": "Good", "created_by": manager.id},
        {"brand_name": "Huge", "budget_max": 10 ** 20, "created_by": manager.id},
    ]

    with pytest.raises(ImportSubmitError) as excinfo:
        insert_records(db_session, Campaign, records)

    assert "too large" in str(excinfo.value)
    assert db_session.query(Campaign).count() == 0


def test_driver_overflow_in_per_row_mode_is_reported(db_session, manager):
    records = [
        {"brand_name": "Good", "budget_max": 1, "created_by": manager.id},
        {"brand_name": "Huge", "budget_max": 10 ** 20, "created_by": manager.id},
        {"brand_name": "After", "created_by": manager.id},
    ]

    outcomes = insert_records_per_row(db_session, Campaign, records)

    assert [o["outcome"] for o in outcomes] == ["inserted", "failed", "inserted"]
    assert "too large" in outcomes[1]["error"]
    assert sorted(c.brand_name for c in db_session.query(Campaign).all()) == ["After", "Good"]
