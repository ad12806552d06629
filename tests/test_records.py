"""
Tests for record helpers: CSV loading and choosing model inputs.
"""

import io

from lookalike.geo import DISTANCE_FIELD, RESIDENT_FIELD
from lookalike.records import (
    headers_of,
    is_likely_contact_field,
    read_csv_records,
    records_to_frame,
    resolve_included_columns,
    shared_headers,
    suggest_exclusions,
)


def test_read_csv_keeps_strings_and_blanks():
    headers, records = read_csv_records(io.StringIO("name,age,zip\nAnn,40,01234\nBob,,\n"))
    assert headers == ["name", "age", "zip"]
    assert records[0] == {"name": "Ann", "age": "40", "zip": "01234"}
    assert records[1]["age"] == ""


def test_shared_headers_follow_member_order():
    assert shared_headers(["c", "a", "b"], ["b", "c", "z"]) == ["c", "b"]


def test_headers_of_first_seen_union():
    assert headers_of([{"a": "1"}, {"b": "2", "a": "3"}]) == ["a", "b"]


def test_contact_fields():
    assert is_likely_contact_field("First Name")
    assert is_likely_contact_field("email_address")
    assert is_likely_contact_field("Zip Code")
    assert not is_likely_contact_field("age")
    assert not is_likely_contact_field("visits_last_year")
    assert suggest_exclusions(["id", "age", "phone", "gender"]) == ["id", "phone"]


def test_resolve_included_columns():
    members = ["name", "age", "address", "gender"]
    contacts = ["age", "gender", "address", "phone"]
    assert resolve_included_columns(members, contacts, ["address"]) == ["age", "gender"]
    assert resolve_included_columns(
        members, contacts, ["address"], geo_enabled=True, address_field="address"
    ) == ["age", "gender", RESIDENT_FIELD, DISTANCE_FIELD]
    # geo without an address field adds nothing
    assert resolve_included_columns(members, contacts, geo_enabled=True) == ["age", "address", "gender"]


def test_records_to_frame_fills_and_strips():
    frame = records_to_frame([{"a": " x "}, {"b": "y"}], ["a", "b"])
    assert frame["a"].tolist() == ["x", ""]
    assert frame["b"].tolist() == ["", "y"]
