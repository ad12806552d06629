"""
Tests for the command-line run and the demo data generator.
"""

import json

import pandas as pd
import pytest

from lookalike.data_dictionary import DATA_DICTIONARY, DEMO_FIELDS
from lookalike.geo import DISTANCE_FIELD, RESIDENT_FIELD
from lookalike.inference import SCORE_COLUMN
from lookalike.make_synthetic_data import generate_membership_datasets
from lookalike.train import main, parse_args


@pytest.fixture
def demo_csvs(tmp_path):
    members, contacts = generate_membership_datasets(n_people=300, random_state=7)
    members_path = tmp_path / "members.csv"
    contacts_path = tmp_path / "contacts.csv"
    members.to_csv(members_path, index=False)
    contacts.to_csv(contacts_path, index=False)
    return members_path, contacts_path


def test_generator_shapes():
    members, contacts = generate_membership_datasets(n_people=300, random_state=7)
    assert len(members) + len(contacts) == 300
    assert len(members) > 0 and len(contacts) > 0
    assert list(members.columns) == list(contacts.columns)
    assert "address" in members.columns


def test_generator_is_seeded():
    a, _ = generate_membership_datasets(n_people=100, random_state=1)
    b, _ = generate_membership_datasets(n_people=100, random_state=1)
    pd.testing.assert_frame_equal(a, b)


def test_parse_args_defaults():
    args = parse_args([])
    assert args.iterations == 2000
    assert args.exclude is None
    assert not args.geo


def test_main_writes_artifacts(demo_csvs, tmp_path, capsys):
    members_path, contacts_path = demo_csvs
    out = tmp_path / "artifacts"
    main([
        "--members", str(members_path),
        "--contacts", str(contacts_path),
        "--out", str(out),
        "--iterations", "300",
        "--geo",
    ])

    for name in ("scored.csv", "feature_importances.json", "metrics.json", "config.json", "column_types.json"):
        assert (out / name).exists()

    scored = pd.read_csv(out / "scored.csv", dtype=str, keep_default_na=False)
    assert scored.columns[-1] == SCORE_COLUMN
    assert RESIDENT_FIELD in scored.columns and DISTANCE_FIELD in scored.columns
    scores = scored[SCORE_COLUMN].astype(int).tolist()
    assert scores == sorted(scores, reverse=True)

    metrics = json.loads((out / "metrics.json").read_text())
    assert metrics["total_members"] + metrics["total_contacts"] == 300
    assert metrics["iterations_run"] == 300
    assert metrics["columbia_members"]["total"] == metrics["total_members"]

    config = json.loads((out / "config.json").read_text())
    assert config["address_field"] == "address"
    assert "email" in config["excluded_columns"]
    assert "email" not in config["included_columns"]

    types = json.loads((out / "column_types.json").read_text())
    assert types["gender"] == "binary_gender"
    assert types["last_visit_date"] == "days_since"

    assert "Scoring complete." in capsys.readouterr().out


def test_missing_input(tmp_path):
    with pytest.raises(FileNotFoundError):
        main(["--members", str(tmp_path / "nope.csv"), "--out", str(tmp_path / "out")])


def test_data_dictionary_covers_outputs_and_demo_columns():
    assert {SCORE_COLUMN, RESIDENT_FIELD, DISTANCE_FIELD} <= set(DATA_DICTIONARY)
    assert "yes" in DATA_DICTIONARY[RESIDENT_FIELD] and "no" in DATA_DICTIONARY[RESIDENT_FIELD]
    members, _ = generate_membership_datasets(n_people=50, random_state=3)
    assert set(members.columns) == set(DEMO_FIELDS)
