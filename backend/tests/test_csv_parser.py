import pytest

from creatorops.services.csv_import_service import (
    ImportParseError,
    generate_template,
    parse_csv,
    read_upload,
)
from creatorops.services.import_schemas import ENTITY_SCHEMAS, CAMPAIGN_SCHEMA


def test_headers_are_lowercased_and_trimmed():
    headers, rows = parse_csv(" Brand_Name , Budget_Min\nAcme,100\n")
    assert headers == ["brand_name", "budget_min"]
    assert rows == [{"brand_name": "Acme", "budget_min": "100"}]


def test_header_only_file_has_no_rows():
    headers, rows = parse_csv("title,description\n")
    assert headers == ["title", "description"]
    assert rows == []


def test_blank_lines_are_skipped():
    text = "title,status\nFirst,todo\n\n   \n\t\nSecond,done\n"
    _, rows = parse_csv(text)
    assert [r["title"] for r in rows] == ["First", "Second"]


def test_delimiter_only_line_is_a_row_of_empty_values():
    _, rows = parse_csv("title,status\nFirst,todo\n,\n")
    assert rows == [{"title": "First", "status": "todo"}, {"title": "", "status": ""}]


def test_limit_zero_reads_only_the_header():
    headers, rows = parse_csv("Title,Status\nFirst,todo\n", limit=0)
    assert headers == ["title", "status"]
    assert rows == []


def test_parsing_twice_gives_same_row_count():
    text = "title\nA\n\nB\n  \nC\n"
    assert len(parse_csv(text)[1]) == len(parse_csv(text)[1]) == 3


def test_limit_caps_preview_rows():
    text = "title\n" + "\n".join(f"Task {i}" for i in range(12))
    _, rows = parse_csv(text, limit=5)
    assert len(rows) == 5
    assert rows[-1]["title"] == "Task 4"


def test_quoted_commas_stay_in_one_field():
    text = 'name,audience_geo_split\nPriya,"IN 70%, AE 10%"\n'
    _, rows = parse_csv(text)
    assert rows[0]["audience_geo_split"] == "IN 70%, AE 10%"


def test_short_rows_fill_missing_cells_with_empty_strings():
    _, rows = parse_csv("title,description,status\nOnly title\n")
    assert rows == [{"title": "Only title", "description": "", "status": ""}]


def test_crlf_line_endings():
    _, rows = parse_csv("title,status\r\nA,todo\r\nB,done\r\n")
    assert [r["status"] for r in rows] == ["todo", "done"]


def test_empty_file_is_rejected():
    with pytest.raises(ImportParseError):
        parse_csv("")


def test_read_upload_strips_bom_and_checks_extension():
    assert read_upload("tasks.csv", "\ufefftitle\nA\n".encode("utf-8")) == "title\nA\n"
    with pytest.raises(ImportParseError):
        read_upload("tasks.xlsx", b"title\nA\n")
    with pytest.raises(ImportParseError):
        read_upload("tasks.csv", b"\xff\xfe\x00bad")


def test_read_upload_enforces_size_limit():
    with pytest.raises(ImportParseError):
        read_upload("tasks.csv", b"title\n" + b"x" * 100, max_bytes=10)


@pytest.mark.parametrize("entity", sorted(ENTITY_SCHEMAS))
def test_template_round_trips_through_parser(entity):
    schema = ENTITY_SCHEMAS[entity]
    headers, rows = parse_csv(generate_template(schema))

    assert headers == list(schema.template_headers)
    assert rows == [dict(zip(schema.template_headers, row)) for row in schema.template_rows]


def test_template_quotes_list_values():
    text = generate_template(CAMPAIGN_SCHEMA)
    assert text.splitlines()[0].startswith("brand_name,description,budget_min")
    assert '"beauty, skincare"' in text
