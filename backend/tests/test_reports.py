import csv
import io
from datetime import date, timedelta

from creatorops.models import Campaign, Task
from creatorops.services.csv_export_service import export_filename


def _rows(text):
    return list(csv.reader(io.StringIO(text)))


def test_dashboard_stats(client, db_session, manager, associate, creator, headers_for):
    today = date.today()
    db_session.add_all([
        Task(title="Due now", status="todo", due_date=today, assigned_to=associate.id, created_by=manager.id),
        Task(title="Late", status="in_progress", due_date=today - timedelta(days=2),
             assigned_to=associate.id, created_by=manager.id),
        Task(title="Late but done", status="done", due_date=today - timedelta(days=2),
             assigned_to=manager.id, created_by=manager.id),
        Task(title="Blocked", status="blocked", assigned_to=manager.id, created_by=manager.id),
        Campaign(brand_name="Acme", status="active", created_by=manager.id),
    ])
    db_session.commit()

    stats = client.get("/api/dashboard/stats", headers=headers_for(manager)).json()

    assert stats["total_creators"] == 1
    assert stats["total_campaigns"] == 1
    assert stats["open_tasks"] == 2
    assert stats["tasks_due_today"] == 1
    assert stats["overdue_tasks"] == 1
    assert stats["tasks_by_status"] == {
        "todo": 1, "in_progress": 1, "review": 0, "blocked": 1, "done": 1
    }
    assert stats["campaigns_by_status"]["active"] == 1
    assert stats["campaigns_by_status"]["planning"] == 0

    own = client.get("/api/dashboard/stats", headers=headers_for(associate)).json()
    assert sum(own["tasks_by_status"].values()) == 2


def test_dashboard_requires_login(client):
    assert client.get("/api/dashboard/stats").status_code == 401


def test_campaign_export(client, db_session, manager, creator, headers_for):
    campaign = Campaign(
        brand_name="Glow Cosmetics",
        budget_max=150000,
        assigned_creator=creator.id,
        assigned_team_member=manager.id,
        required_platforms=["instagram", "youtube"],
        campaign_notes='Two reels, "one" story',
        created_by=manager.id,
    )
    db_session.add(campaign)
    db_session.commit()

    response = client.get(f"/api/campaigns/{campaign.id}/export", headers=headers_for(manager))

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert f'filename="{export_filename("execution", "Glow Cosmetics")}"' in response.headers["content-disposition"]
    sheet = dict(_rows(response.text)[1:])
    assert sheet["Brand Name"] == "Glow Cosmetics"
    assert sheet["Budget Max"] == "150000"
    assert sheet["Creator"] == "Rajesh Kumar"
    assert sheet["Team Member"] == "Mona Manager"
    assert sheet["Required Platforms"] == "instagram, youtube"
    assert sheet["Execution Notes"] == 'Two reels, "one" story'
    assert sheet["Start Date"] == ""


def test_payments_export(client, manager, creator, headers_for):
    headers = headers_for(manager)
    campaign = client.post("/api/campaigns/", json={"brand_name": "Acme"}, headers=headers).json()
    client.post(
        "/api/payments/",
        json={
            "payment_title": "Launch payout",
            "invoice_number": "INV-2410-007",
            "campaign_id": campaign["id"],
            "status": "completed",
            "payment_date": "2024-10-05",
            "creators": [{"creator_id": creator.id, "amount": 1200, "commission_percentage": 12.5}],
        },
        headers=headers,
    )

    response = client.get("/api/payments/export", headers=headers)

    assert response.status_code == 200
    assert 'filename="payments_' in response.headers["content-disposition"]
    header, row = _rows(response.text)
    assert header[:3] == ["Invoice", "Title", "Total"]
    assert row == [
        "INV-2410-007", "Launch payout", "1200.00", "USD", "completed", "Acme",
        "Rajesh Kumar", "1200.00", "12.5%", "2024-10-05",
    ]


def test_export_filename_slugs_the_label():
    assert export_filename("execution", "Glow & Co.", today=date(2024, 10, 1)) == "execution_Glow_Co_2024-10-01.csv"
    assert export_filename("payments", today=date(2024, 10, 1)) == "payments_2024-10-01.csv"
