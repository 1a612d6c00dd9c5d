"""
Declarative CSV import schemas for campaigns, creators and tasks.

Each entity lists its importable fields with the header aliases accepted for
them (matched case-insensitively), the coercion applied to the raw cell and,
for foreign keys, which reference list resolves the value. The generic
mapper in ``csv_import_service`` consumes these tables.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type

from ..models import Campaign, Creator, Task, CampaignStatus, TaskStatus, TaskPriority
from ..models.user import MANAGER_ROLES


class FieldKind(str, Enum):
    """How a raw CSV cell is coerced."""
    TEXT = "text"
    INTEGER = "integer"
    LIST = "list"
    DATE = "date"
    CHOICE = "choice"
    REFERENCE = "reference"


@dataclass(frozen=True)
class FieldSpec:
    """One importable field."""
    name: str
    aliases: Tuple[str, ...]
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    choices: Tuple[str, ...] = ()
    reference: Optional[str] = None  # users / creators / campaigns
    bounds: Optional[Tuple[int, int]] = None


@dataclass(frozen=True)
class EntitySchema:
    """Import configuration for one entity."""
    entity: str
    label: str
    model: Type[Any]
    fields: Tuple[FieldSpec, ...]
    allowed_roles: Tuple[str, ...]
    defaults: Dict[str, Any] = field(default_factory=dict)
    template_headers: Tuple[str, ...] = ()
    template_rows: Tuple[Tuple[str, ...], ...] = ()

    @property
    def template_filename(self) -> str:
        return f"{self.label}_template.csv"

    def alias_lookup(self) -> Dict[str, FieldSpec]:
        """Reverse lookup: normalized alias -> field spec."""
        lookup: Dict[str, FieldSpec] = {}
        for spec in self.fields:
            for alias in (spec.name,) + spec.aliases:
                lookup.setdefault(alias.lower().strip(), spec)
        return lookup

    def get_field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(name)


CAMPAIGN_SCHEMA = EntitySchema(
    entity="campaigns",
    label="campaign",
    model=Campaign,
    allowed_roles=MANAGER_ROLES,
    defaults={"status": CampaignStatus.PLANNING.value},
    fields=(
        FieldSpec("brand_name", ("brand", "brand name"), required=True),
        FieldSpec("description", ("brief",)),
        FieldSpec("budget_min", ("min_budget", "budget min"), FieldKind.INTEGER),
        FieldSpec("budget_max", ("max_budget", "budget max"), FieldKind.INTEGER),
        FieldSpec(
            "status", (), FieldKind.CHOICE,
            choices=tuple(s.value for s in CampaignStatus),
        ),
        FieldSpec("start_date", ("start", "start date"), FieldKind.DATE),
        FieldSpec("end_date", ("end", "end date"), FieldKind.DATE),
        FieldSpec(
            "assigned_creator", ("creator", "creator_name"),
            FieldKind.REFERENCE, reference="creators",
        ),
        FieldSpec(
            "assigned_team_member", ("team_member", "assignee", "team member"),
            FieldKind.REFERENCE, reference="users",
        ),
        FieldSpec("target_niches", ("niches",), FieldKind.LIST),
        FieldSpec("target_regions", ("regions",), FieldKind.LIST),
        FieldSpec("required_platforms", ("platforms",), FieldKind.LIST),
        FieldSpec("status_notes", ("status notes",)),
        FieldSpec("campaign_notes", ("notes", "execution_notes")),
    ),
    template_headers=(
        "brand_name", "description", "budget_min", "budget_max",
        "start_date", "end_date", "assigned_creator", "assigned_team_member",
        "target_niches", "target_regions", "required_platforms",
        "status_notes", "campaign_notes",
    ),
    template_rows=(
        (
            "Glow Cosmetics", "Festive season product launch", "50000", "150000",
            "2024-10-01", "2024-11-15", "Rajesh Kumar", "manager@example.com",
            "beauty, skincare", "India, UAE", "instagram, youtube",
            "Brief shared with creator", "Two reels and one story",
        ),
        (
            "StrideFit", "Running shoe awareness push", "20000", "60000",
            "2024-12-01", "2025-01-31", "Priya Sharma", "associate@example.com",
            "fitness", "India", "instagram",
            "Awaiting budget sign-off", "",
        ),
    ),
)


CREATOR_SCHEMA = EntitySchema(
    entity="creators",
    label="creator",
    model=Creator,
    allowed_roles=MANAGER_ROLES,
    defaults={"status": "pending", "is_verified": False},
    fields=(
        FieldSpec("name", ("creator", "creator_name", "full name"), required=True),
        FieldSpec("email", ("email address", "e-mail")),
        FieldSpec("phone", ("phone number", "mobile")),
        FieldSpec("country", ()),
        FieldSpec("primary_market", ("market",)),
        FieldSpec("primary_category", ("category",), required=True),
        FieldSpec("secondary_categories", ("secondary categories",), FieldKind.LIST),
        FieldSpec("sub_niches", ("niches", "sub niches"), FieldKind.LIST),
        FieldSpec("typical_deliverables", ("deliverables",), FieldKind.LIST),
        FieldSpec("past_rate_notes", ("rate_notes", "rates")),
        FieldSpec("brand_friendly_score", ("score",), FieldKind.INTEGER, bounds=(1, 5)),
        FieldSpec("management_type", ("management",)),
        FieldSpec("content_language", ("language",)),
        FieldSpec("audience_geo_split", ("geo_split", "audience geo")),
    ),
    template_headers=(
        "name", "email", "phone", "country", "primary_market",
        "primary_category", "secondary_categories", "sub_niches",
        "typical_deliverables", "past_rate_notes", "brand_friendly_score",
        "management_type", "content_language", "audience_geo_split",
    ),
    template_rows=(
        (
            "Rajesh Kumar", "rajesh@example.com", "+91 98765 43210", "India",
            "India", "Tech", "Gadgets, Reviews", "smartphones, laptops",
            "YouTube video, Instagram reel", "INR 80k per video", "4",
            "agency", "Hindi", "IN 85% / US 5%",
        ),
        (
            "Priya Sharma", "priya@example.com", "+91 91234 56789", "India",
            "India", "Beauty", "Lifestyle", "skincare",
            "Instagram reel", "INR 40k per reel", "5",
            "self", "English", "IN 70% / AE 10%",
        ),
    ),
)


TASK_SCHEMA = EntitySchema(
    entity="tasks",
    label="task",
    model=Task,
    allowed_roles=MANAGER_ROLES,
    defaults={"status": TaskStatus.TODO.value},
    fields=(
        FieldSpec("title", ("task", "name"), required=True),
        FieldSpec("description", ("details",)),
        FieldSpec(
            "status", (), FieldKind.CHOICE,
            choices=tuple(s.value for s in TaskStatus),
        ),
        FieldSpec(
            "priority", (), FieldKind.CHOICE,
            choices=tuple(p.value for p in TaskPriority),
        ),
        FieldSpec("due_date", ("due", "due date", "deadline"), FieldKind.DATE),
        FieldSpec(
            "assigned_to", ("assigned_to_email", "assignee", "assigned to"),
            FieldKind.REFERENCE, reference="users",
        ),
        FieldSpec(
            "creator_id", ("creator", "creator_name"),
            FieldKind.REFERENCE, reference="creators",
        ),
        FieldSpec(
            "campaign_id", ("campaign", "campaign_name", "brand_name"),
            FieldKind.REFERENCE, reference="campaigns",
        ),
    ),
    template_headers=(
        "title", "description", "status", "priority", "due_date",
        "assigned_to_email", "creator_name", "campaign_name",
    ),
    template_rows=(
        (
            "Share brief with creator", "Send the festive launch brief", "todo",
            "high", "2024-12-31", "john@example.com", "Rajesh Kumar", "Glow Cosmetics",
        ),
        (
            "Collect draft video", "Review first cut before approval", "in_progress",
            "medium", "2024-12-25", "jane@example.com", "Priya Sharma", "",
        ),
    ),
)


ENTITY_SCHEMAS: Dict[str, EntitySchema] = {
    schema.entity: schema
    for schema in (CAMPAIGN_SCHEMA, CREATOR_SCHEMA, TASK_SCHEMA)
}


def get_entity_schema(entity: str) -> Optional[EntitySchema]:
    """Look up an import schema by entity name (``campaigns``, ``creators``, ``tasks``)."""
    return ENTITY_SCHEMAS.get(entity.lower().strip())
