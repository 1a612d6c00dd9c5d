"""
CSV exports for campaigns and payments.

All CSV text leaving the API (exports and import templates) goes through
``write_csv`` so quoting stays RFC 4180.
"""
import csv
import io
import re
from datetime import date
from typing import Any, Iterable, List, Optional, Sequence

from ..models import Campaign, Payment


def write_csv(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    """Header row plus data rows as CSV text. None becomes an empty cell."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow(["" if cell is None else cell for cell in row])
    return buffer.getvalue()


def export_filename(prefix: str, label: Optional[str] = None, today: Optional[date] = None) -> str:
    """``{prefix}_{label}_{YYYY-MM-DD}.csv`` with the label reduced to a safe slug."""
    parts = [prefix]
    if label:
        parts.append(re.sub(r"[^A-Za-z0-9]+", "_", label).strip("_") or "details")
    parts.append((today or date.today()).isoformat())
    return "_".join(parts) + ".csv"


def _joined(values: Optional[List[str]]) -> str:
    return ", ".join(values or [])


def export_campaign(campaign: Campaign) -> str:
    """One campaign as a two-column Field/Value sheet."""
    creator = campaign.creator.name if campaign.creator else None
    team_member = (campaign.team_member.name or campaign.team_member.email) if campaign.team_member else None
    rows = [
        ("Brand Name", campaign.brand_name),
        ("Description", campaign.description),
        ("Status", campaign.status),
        ("Budget Min", campaign.budget_min),
        ("Budget Max", campaign.budget_max),
        ("Start Date", campaign.start_date),
        ("End Date", campaign.end_date),
        ("Creator", creator),
        ("Team Member", team_member),
        ("Target Niches", _joined(campaign.target_niches)),
        ("Target Regions", _joined(campaign.target_regions)),
        ("Required Platforms", _joined(campaign.required_platforms)),
        ("Status Notes", campaign.status_notes),
        ("Execution Notes", campaign.campaign_notes),
    ]
    return write_csv(("Field", "Value"), rows)


PAYMENT_EXPORT_HEADERS = (
    "Invoice", "Title", "Total", "Currency", "Status", "Campaign",
    "Creators", "Amounts", "Commissions", "Date",
)


def export_payments(payments: Iterable[Payment]) -> str:
    """One line per payment; creator splits are joined with ``; ``."""
    rows = []
    for payment in payments:
        splits = payment.creators
        rows.append((
            payment.invoice_number,
            payment.payment_title,
            f"{payment.payment_amount:.2f}",
            payment.currency,
            payment.status,
            payment.campaign.brand_name if payment.campaign else None,
            "; ".join(s.creator.name if s.creator else "" for s in splits),
            "; ".join(f"{s.amount:.2f}" for s in splits),
            "; ".join(f"{s.commission_percentage or 0:g}%" for s in splits),
            payment.payment_date,
        ))
    return write_csv(PAYMENT_EXPORT_HEADERS, rows)
