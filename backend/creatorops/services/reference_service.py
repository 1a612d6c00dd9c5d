"""
Reference lists and foreign-key resolution for CSV imports.

Users, creators and campaigns are loaded once per import and matched by exact,
case-sensitive string equality against their human-readable columns
(name/email, or brand name for campaigns).
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple, Union

from sqlalchemy.orm import Session

from ..models import Campaign, Creator, User

logger = logging.getLogger(__name__)

# Columns a CSV value may match, per reference list
REFERENCE_KEYS: Dict[str, Tuple[str, ...]] = {
    "users": ("name", "email"),
    "creators": ("name", "email"),
    "campaigns": ("brand_name",),
}


@dataclass(frozen=True)
class Resolved:
    id: Any


@dataclass(frozen=True)
class Ambiguous:
    value: str
    ids: Tuple[Any, ...]


@dataclass(frozen=True)
class NotFound:
    value: str


Resolution = Union[Resolved, Ambiguous, NotFound]


class ReferenceIndex:
    """Read-only lookup over one reference list."""

    def __init__(self, rows: Iterable[Dict[str, Any]], keys: Tuple[str, ...]):
        self.keys = keys
        self._by_value: Dict[str, List[Any]] = {}
        for row in rows:
            row_id = row["id"]
            for key in keys:
                value = row.get(key)
                if not value:
                    continue
                ids = self._by_value.setdefault(value, [])
                if row_id not in ids:
                    ids.append(row_id)

    def resolve(self, value: str) -> Resolution:
        """Resolve a CSV value to an id. No normalization is applied."""
        ids = self._by_value.get(value, [])
        if len(ids) == 1:
            return Resolved(ids[0])
        if len(ids) > 1:
            return Ambiguous(value, tuple(ids))
        return NotFound(value)


def _load_users(db: Session, user: User) -> List[Dict[str, Any]]:
    """Admins and managers see every user; associates only see themselves."""
    query = db.query(User.id, User.name, User.email)
    if not user.is_manager:
        query = query.filter(User.id == user.id)
    return [
        {"id": row.id, "name": row.name, "email": row.email}
        for row in query.order_by(User.name).all()
    ]


def _load_creators(db: Session, user: User) -> List[Dict[str, Any]]:
    rows = db.query(Creator.id, Creator.name, Creator.email).order_by(Creator.name).all()
    return [{"id": row.id, "name": row.name, "email": row.email} for row in rows]


def _load_campaigns(db: Session, user: User) -> List[Dict[str, Any]]:
    rows = db.query(Campaign.id, Campaign.brand_name).order_by(Campaign.brand_name).all()
    return [{"id": row.id, "brand_name": row.brand_name} for row in rows]


_LOADERS = {
    "users": _load_users,
    "creators": _load_creators,
    "campaigns": _load_campaigns,
}


def load_reference_indexes(
    db: Session,
    names: Iterable[str],
    user: User,
) -> Dict[str, ReferenceIndex]:
    """Fetch each named reference list once and index it for resolution."""
    indexes: Dict[str, ReferenceIndex] = {}
    for name in names:
        rows = _LOADERS[name](db, user)
        indexes[name] = ReferenceIndex(rows, REFERENCE_KEYS[name])
        logger.debug(f"Loaded {len(rows)} {name} for reference resolution")
    return indexes
