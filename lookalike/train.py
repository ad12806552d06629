"""
lookalike/train.py

Trains a membership-likeness model on a member list vs a contact list and
writes the ranked contacts plus explanations for downstream review.

Artifacts written to --out (default artifacts/):
    scored.csv                 contacts ranked by Membership_Score
    feature_importances.json   importance / correlation / explanation per feature
    metrics.json               accuracy + dataset sizes
    config.json                settings used for the run
    column_types.json          detected type for every input column

Run (demo data)
---------------
python -m lookalike.make_synthetic_data
python -m lookalike.train

Run (custom)
------------
python -m lookalike.train --members data/members.csv --contacts data/contacts.csv \
    --exclude email phone --geo
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from lookalike.config import DEFAULT_CONFIG, EngineConfig
from lookalike.engine import analyze_and_predict
from lookalike.geo import SYNTHETIC_FIELDS, detect_address_field, summarize_columbia
from lookalike.inference import importances_to_frame, predictions_to_frame
from lookalike.records import read_csv_records, resolve_included_columns, suggest_exclusions


ARTIFACT_DIR = Path("artifacts")
DEFAULT_MEMBERS_PATH = Path("data/members.csv")
DEFAULT_CONTACTS_PATH = Path("data/contacts.csv")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Score contacts by likeness to members.")
    parser.add_argument("--members", type=str, default=str(DEFAULT_MEMBERS_PATH),
                        help="CSV of known members (positive class).")
    parser.add_argument("--contacts", type=str, default=str(DEFAULT_CONTACTS_PATH),
                        help="CSV of contacts to score.")
    parser.add_argument("--out", type=str, default=str(ARTIFACT_DIR),
                        help="Directory for output artifacts.")
    parser.add_argument("--exclude", nargs="*", default=None,
                        help="Shared fields to leave out. Default: auto-detected identifiers "
                             "(names, emails, phones, address parts, ids).")
    parser.add_argument("--geo", action="store_true",
                        help="Add columbia_resident / distance_from_columbia_mi from an address field.")
    parser.add_argument("--address-field", type=str, default=None,
                        help="Address column for --geo (auto-detected if omitted).")
    parser.add_argument("--learning-rate", type=float, default=DEFAULT_CONFIG.learning_rate)
    parser.add_argument("--iterations", type=int, default=DEFAULT_CONFIG.iterations)
    parser.add_argument("--l2", type=float, default=DEFAULT_CONFIG.l2_penalty,
                        help="L2 penalty strength.")
    parser.add_argument("--tolerance", type=float, default=None,
                        help="Stop early once updates fall below this size.")
    parser.add_argument("--type-threshold", type=float, default=DEFAULT_CONFIG.type_threshold,
                        help="Share of values needed to call a column date/boolean/numeric.")
    parser.add_argument("--max-categories", type=int, default=DEFAULT_CONFIG.max_categories,
                        help="One-hot categories kept per column.")
    parser.add_argument("--validation-fraction", type=float,
                        default=DEFAULT_CONFIG.validation_fraction,
                        help="Hold out this share of rows for an extra validation accuracy.")
    parser.add_argument("--random-state", type=int, default=DEFAULT_CONFIG.random_state,
                        help="Seed for the optional validation split.")
    parser.add_argument("--verbose", action="store_true", help="Log pipeline progress.")
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> EngineConfig:
    return EngineConfig(
        learning_rate=args.learning_rate,
        iterations=args.iterations,
        l2_penalty=args.l2,
        tolerance=args.tolerance,
        type_threshold=args.type_threshold,
        max_categories=args.max_categories,
        validation_fraction=args.validation_fraction,
        random_state=args.random_state,
    )


def _require(path: Path) -> Path:
    if not path.exists():
        raise FileNotFoundError(
            f"Input not found at {path}. "
            f"Generate demo data first: python -m lookalike.make_synthetic_data"
        )
    return path


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    config = config_from_args(args)
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    # -----------------------------
    # 1) Load data
    # -----------------------------
    member_headers, members = read_csv_records(_require(Path(args.members)))
    contact_headers, contacts = read_csv_records(_require(Path(args.contacts)))

    # -----------------------------
    # 2) Choose model inputs
    # -----------------------------
    address_field = None
    if args.geo:
        address_field = args.address_field or detect_address_field(member_headers)
        if address_field is None:
            print("No address field detected; continuing without geo enrichment.")

    excluded = args.exclude
    if excluded is None:
        excluded = suggest_exclusions(member_headers)
    columns = resolve_included_columns(
        member_headers, contact_headers, excluded,
        geo_enabled=address_field is not None, address_field=address_field,
    )

    # -----------------------------
    # 3) Train + score
    # -----------------------------
    result = analyze_and_predict(
        members, contacts, columns,
        config=config, geo=address_field is not None, address_field=address_field,
    )

    # -----------------------------
    # 4) Save artifacts
    # -----------------------------
    export_headers = contact_headers + (list(SYNTHETIC_FIELDS) if address_field else [])
    predictions_to_frame(result.predictions, export_headers).to_csv(out_dir / "scored.csv", index=False)
    (out_dir / "feature_importances.json").write_text(
        json.dumps([fi.to_dict() for fi in result.feature_importances], indent=2)
    )

    metrics = {
        "model_accuracy": result.model_accuracy,
        "validation_accuracy": result.validation_accuracy,
        "total_members": result.total_members,
        "total_contacts": result.total_contacts,
        "n_features": len(result.model.weights) if result.model is not None else 0,
        "iterations_run": result.model.iterations_run if result.model is not None else 0,
    }
    if address_field:
        metrics["columbia_members"] = summarize_columbia(members, address_field).to_dict()
        metrics["columbia_contacts"] = summarize_columbia(contacts, address_field).to_dict()
    (out_dir / "metrics.json").write_text(json.dumps(metrics, indent=2))

    run_config = {
        **config.to_dict(),
        "members_path": args.members,
        "contacts_path": args.contacts,
        "included_columns": columns,
        "excluded_columns": list(excluded),
        "address_field": address_field,
    }
    (out_dir / "config.json").write_text(json.dumps(run_config, indent=2))
    (out_dir / "column_types.json").write_text(
        json.dumps({s.name: s.column_type.value for s in result.column_specs}, indent=2)
    )

    print("Scoring complete.")
    print(f"Saved artifacts to: {out_dir.resolve()}")
    print(f"Members={result.total_members} | Contacts={result.total_contacts} | "
          f"Training accuracy={result.model_accuracy}%")
    top = importances_to_frame(result.feature_importances[:5])
    if not top.empty:
        print("Top features:")
        for row in top.itertuples(index=False):
            print(f"  {row.field:<40} importance={row.importance:>3}  {row.direction}")


if __name__ == "__main__":
    main()
