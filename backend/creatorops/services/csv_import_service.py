"""
CSV bulk-import service shared by campaigns, creators and tasks.

Pipeline: template generation, upload decoding, quote-aware parsing, header
alias detection, per-field coercion (including foreign-key lookup against
preloaded reference lists) and the bulk submit.
"""
import csv
import io
import logging
import re
from datetime import date
from typing import Dict, Any, List, Tuple, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.user import User
from .csv_export_service import write_csv
from .import_schemas import EntitySchema, FieldKind, FieldSpec
from .reference_service import (
    Ambiguous,
    NotFound,
    ReferenceIndex,
    Resolved,
    load_reference_indexes,
)

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".csv",)

INTEGER_PATTERN = re.compile(r"^[+-]?\d+$", re.ASCII)

# Signed 64-bit, the widest INTEGER the supported databases store
INT_MIN, INT_MAX = -(2 ** 63), 2 ** 63 - 1

INSERT_ERRORS = (SQLAlchemyError, OverflowError, ValueError)

REFERENCE_ISSUES = ("unresolved_reference", "ambiguous_reference")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class CSVImportError(Exception):
    """Base class for import pipeline failures."""


class ImportParseError(CSVImportError):
    """The uploaded file could not be read or parsed as CSV."""


class ImportPermissionError(CSVImportError):
    """The caller's role may not import this entity."""

    def __init__(self, message: str, role: Optional[str]):
        super().__init__(message)
        self.role = role


class UnresolvedReferenceError(CSVImportError):
    """Strict mode: one or more foreign-key values did not resolve."""

    def __init__(self, issues: List[Dict[str, Any]]):
        super().__init__(f"{len(issues)} reference value(s) could not be resolved")
        self.issues = issues


class ImportSubmitError(CSVImportError):
    """The database rejected the batch. Message is the raw database error."""


# ---------------------------------------------------------------------------
# Template & file reading
# ---------------------------------------------------------------------------

def generate_template(schema: EntitySchema) -> str:
    """Header row plus the schema's example rows, as CSV text."""
    return write_csv(schema.template_headers, schema.template_rows)


def read_upload(filename: Optional[str], content: bytes, max_bytes: Optional[int] = None) -> str:
    """Validate an uploaded file and decode it to text."""
    if not filename or not filename.lower().endswith(ALLOWED_EXTENSIONS):
        raise ImportParseError("File must be a CSV file (.csv)")
    if max_bytes is not None and len(content) > max_bytes:
        raise ImportParseError(f"File is larger than the {max_bytes} byte limit")
    try:
        return content.decode("utf-8-sig")  # Handle BOM
    except UnicodeDecodeError:
        raise ImportParseError("File encoding not supported. Please use UTF-8.")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_csv(text: str, limit: Optional[int] = None) -> Tuple[List[str], List[Dict[str, str]]]:
    """
    Parse CSV text into (headers, rows).

    Headers come from the first line, lowercased and trimmed. Each data row is
    a map of header -> trimmed value. Lines that are empty or whitespace-only
    are skipped; a line of bare delimiters is a row of empty values.
    ``limit`` caps the number of rows returned (0 reads only the header).
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    try:
        header_cells = next(reader, [])
        headers = [cell.strip().lower() for cell in header_cells]
        if not any(headers):
            raise ImportParseError("File is empty or has no header row")

        rows: List[Dict[str, str]] = []
        for cells in reader:
            if limit is not None and len(rows) >= limit:
                break
            if not cells or (len(cells) == 1 and not cells[0].strip()):
                continue
            values = [cell.strip() for cell in cells]
            row: Dict[str, str] = {}
            for i, header in enumerate(headers):
                if not header:
                    continue
                row[header] = values[i] if i < len(values) else ""
            rows.append(row)
    except csv.Error as e:
        raise ImportParseError(f"Invalid CSV format: {e}")

    return headers, rows


def detect_column_mapping(headers: List[str], schema: EntitySchema) -> Dict[str, str]:
    """
    Map CSV headers to entity fields using the schema's aliases.
    The first header claiming a field wins. Returns {header: field_name}.
    """
    lookup = schema.alias_lookup()
    mapping: Dict[str, str] = {}
    used_fields: set = set()

    for header in headers:
        spec = lookup.get(header.lower().strip())
        if spec and spec.name not in used_fields:
            mapping[header] = spec.name
            used_fields.add(spec.name)

    return mapping


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------

def parse_int(raw: str) -> Optional[int]:
    """
    Parse a whole number. Returns None for empty input, anything that is not
    plain ASCII digits with an optional sign, and values outside 64 bits.
    """
    if not raw or not INTEGER_PATTERN.match(raw.strip()):
        return None
    number = int(raw.strip())
    if not INT_MIN <= number <= INT_MAX:
        return None
    return number


def split_list(raw: str) -> List[str]:
    """Split a comma-separated cell into trimmed, non-empty tokens."""
    if not raw:
        return []
    return [token.strip() for token in raw.split(",") if token.strip()]


def parse_date(raw: str) -> Optional[date]:
    """Parse an ISO ``YYYY-MM-DD`` date, or None."""
    if not raw:
        return None
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        return None


def _issue(row_index: int, spec: FieldSpec, value: str, kind: str, message: str) -> Dict[str, Any]:
    return {
        "row_index": row_index,
        "field": spec.name,
        "value": value,
        "issue": kind,
        "message": f"Row {row_index + 1}: {message}",
    }


def _coerce(
    spec: FieldSpec,
    raw: str,
    references: Dict[str, ReferenceIndex],
    row_index: int,
    issues: List[Dict[str, Any]],
) -> Any:
    if spec.kind == FieldKind.LIST:
        return split_list(raw)

    if not raw:
        return None

    if spec.kind == FieldKind.INTEGER:
        number = parse_int(raw)
        if number is None:
            issues.append(_issue(row_index, spec, raw, "invalid_integer",
                                 f"'{raw}' is not a whole number for {spec.name}"))
            return None
        if spec.bounds and not spec.bounds[0] <= number <= spec.bounds[1]:
            issues.append(_issue(row_index, spec, raw, "out_of_range",
                                 f"{spec.name} must be between {spec.bounds[0]} and {spec.bounds[1]}"))
            return None
        return number

    if spec.kind == FieldKind.DATE:
        parsed = parse_date(raw)
        if parsed is None:
            issues.append(_issue(row_index, spec, raw, "invalid_date",
                                 f"'{raw}' is not a YYYY-MM-DD date for {spec.name}"))
        return parsed

    if spec.kind == FieldKind.CHOICE:
        choice = raw.lower()
        if choice not in spec.choices:
            issues.append(_issue(row_index, spec, raw, "invalid_choice",
                                 f"Invalid {spec.name} '{raw}'. Use: {', '.join(spec.choices)}"))
            return None
        return choice

    if spec.kind == FieldKind.REFERENCE:
        index = references.get(spec.reference)
        if index is None:
            return None
        resolution = index.resolve(raw)
        if isinstance(resolution, Resolved):
            return resolution.id
        if isinstance(resolution, Ambiguous):
            issues.append(_issue(row_index, spec, raw, "ambiguous_reference",
                                 f"'{raw}' matches {len(resolution.ids)} {spec.reference}"))
        elif isinstance(resolution, NotFound):
            issues.append(_issue(row_index, spec, raw, "unresolved_reference",
                                 f"No {spec.reference} entry named '{raw}'"))
        return None

    return raw


# ---------------------------------------------------------------------------
# Row mapping
# ---------------------------------------------------------------------------

def map_row(
    row: Dict[str, str],
    column_mapping: Dict[str, str],
    schema: EntitySchema,
    references: Dict[str, ReferenceIndex],
    row_index: int = 0,
) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """
    Map one parsed row to a candidate record.

    Only fields whose header is present are set. Returns the record and the
    list of coercion issues found (the record is produced regardless).
    """
    record: Dict[str, Any] = {}
    issues: List[Dict[str, Any]] = []

    for header, field_name in column_mapping.items():
        spec = schema.get_field(field_name)
        record[field_name] = _coerce(spec, row.get(header, ""), references, row_index, issues)

    for spec in schema.fields:
        if spec.required and record.get(spec.name) in (None, ""):
            issues.append(_issue(row_index, spec, row.get(spec.name, ""), "missing_required",
                                 f"{spec.name} is required"))

    return record, issues


def _load_references(
    db: Session,
    schema: EntitySchema,
    column_mapping: Dict[str, str],
    user: User,
) -> Dict[str, ReferenceIndex]:
    """Load only the reference lists whose foreign-key columns are present."""
    mapped = set(column_mapping.values())
    needed: List[str] = []
    for spec in schema.fields:
        if spec.reference and spec.name in mapped and spec.reference not in needed:
            needed.append(spec.reference)
    return load_reference_indexes(db, needed, user)


def load_import_references(
    db: Session,
    schema: EntitySchema,
    text: str,
    user: User,
) -> Dict[str, ReferenceIndex]:
    """Reference lists needed by the foreign-key columns in the file's header row."""
    headers, _ = parse_csv(text, limit=0)
    return _load_references(db, schema, detect_column_mapping(headers, schema), user)


# ---------------------------------------------------------------------------
# Preview
# ---------------------------------------------------------------------------

def preview_import(
    db: Session,
    schema: EntitySchema,
    text: str,
    user: User,
    limit: int = 5,
    references: Optional[Dict[str, ReferenceIndex]] = None,
) -> Dict[str, Any]:
    """
    Preview: headers, detected mapping, the first ``limit`` rows and their
    warnings, plus the number of non-blank rows in the whole file.
    ``references`` reuses lists already loaded for this file.
    """
    headers, all_rows = parse_csv(text)
    rows = all_rows[:limit]
    column_mapping = detect_column_mapping(headers, schema)
    if references is None:
        references = _load_references(db, schema, column_mapping, user)

    warnings: List[Dict[str, Any]] = []
    for index, row in enumerate(rows):
        _, issues = map_row(row, column_mapping, schema, references, index)
        warnings.extend(issues)

    return {
        "entity": schema.entity,
        "headers": headers,
        "column_mapping": column_mapping,
        "unmapped_columns": [h for h in headers if h and h not in column_mapping],
        "preview_rows": rows,
        "preview_count": len(rows),
        "total_rows": len(all_rows),
        "warnings": warnings,
    }


# ---------------------------------------------------------------------------
# Submit
# ---------------------------------------------------------------------------

def check_permission(user: User, schema: EntitySchema) -> None:
    """Raise ImportPermissionError unless the caller's role is allowed."""
    if user.role not in schema.allowed_roles:
        allowed = " and ".join(schema.allowed_roles)
        raise ImportPermissionError(
            f"Only {allowed} can import {schema.entity}. Your role: {user.role}",
            role=user.role,
        )


def _apply_defaults(record: Dict[str, Any], schema: EntitySchema, user: User) -> Dict[str, Any]:
    for key, value in schema.defaults.items():
        if record.get(key) is None:
            record[key] = value
    record["created_by"] = user.id
    return record


def _db_error_message(error: Exception) -> str:
    return str(getattr(error, "orig", None) or error)


def insert_records(db: Session, model, records: List[Dict[str, Any]]) -> int:
    """Insert all records in one transaction. All-or-nothing."""
    try:
        db.add_all([model(**record) for record in records])
        db.commit()
    except INSERT_ERRORS as e:
        db.rollback()
        message = _db_error_message(e)
        logger.error(f"Bulk insert into {model.__tablename__} failed: {message}")
        raise ImportSubmitError(message) from e
    return len(records)


def insert_records_per_row(db: Session, model, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Insert each record in its own transaction and report every row's outcome."""
    outcomes: List[Dict[str, Any]] = []
    for index, record in enumerate(records):
        try:
            db.add(model(**record))
            db.commit()
            outcomes.append({"row_index": index, "outcome": "inserted", "error": None})
        except INSERT_ERRORS as e:
            db.rollback()
            message = _db_error_message(e)
            logger.warning(f"Row {index + 1} of {model.__tablename__} import failed: {message}")
            outcomes.append({"row_index": index, "outcome": "failed", "error": message})
    return outcomes


def execute_import(
    db: Session,
    schema: EntitySchema,
    text: str,
    user: User,
    strict: bool = False,
    per_row: bool = False,
    references: Optional[Dict[str, ReferenceIndex]] = None,
) -> Dict[str, Any]:
    """
    Execute the import: permission check, full parse, mapping, then write.

    Batch mode writes every record in one transaction and raises
    ImportSubmitError if anything fails. Per-row mode commits rows
    individually and reports each outcome. ``references`` reuses lists
    loaded at preview time instead of fetching them again.
    """
    check_permission(user, schema)

    headers, rows = parse_csv(text)
    column_mapping = detect_column_mapping(headers, schema)
    if references is None:
        references = _load_references(db, schema, column_mapping, user)

    records: List[Dict[str, Any]] = []
    warnings: List[Dict[str, Any]] = []
    for index, row in enumerate(rows):
        record, issues = map_row(row, column_mapping, schema, references, index)
        records.append(_apply_defaults(record, schema, user))
        warnings.extend(issues)

    if strict:
        unresolved = [w for w in warnings if w["issue"] in REFERENCE_ISSUES]
        if unresolved:
            raise UnresolvedReferenceError(unresolved)

    logger.info(
        f"Importing {len(records)} {schema.entity} for user {user.id} "
        f"({'per-row' if per_row else 'batch'} mode, {len(warnings)} warnings)"
    )

    row_outcomes = None
    if per_row:
        row_outcomes = insert_records_per_row(db, schema.model, records)
        inserted = sum(1 for o in row_outcomes if o["outcome"] == "inserted")
    else:
        inserted = insert_records(db, schema.model, records)

    return {
        "entity": schema.entity,
        "total_rows": len(rows),
        "submitted": len(records),
        "inserted": inserted,
        "failed": len(records) - inserted,
        "warnings": warnings,
        "rows": row_outcomes,
    }
