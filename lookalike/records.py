"""
lookalike/records.py

Helpers around raw records (field -> string mappings): reading them from CSV,
working out which headers two datasets share, and choosing model inputs.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from lookalike.geo import SYNTHETIC_FIELDS


Record = Mapping[str, str]

# Identifiers and contact details: unique per person, useless as predictors
CONTACT_ONLY_PATTERNS = (
    re.compile(r"^(first[_\s]?name|last[_\s]?name|full[_\s]?name|name)$", re.I),
    re.compile(r"^(email|e[_\s]?mail|email[_\s]?address)$", re.I),
    re.compile(r"^(phone|phone[_\s]?number|mobile|cell|telephone)$", re.I),
    re.compile(r"^(address|street|city|state|zip|zip[_\s]?code|postal|country)$", re.I),
    re.compile(r"^(id|member[_\s]?id|contact[_\s]?id|record[_\s]?id|uuid)$", re.I),
)


def read_csv_records(source) -> Tuple[List[str], List[Dict[str, str]]]:
    """
    Read a CSV (path or file-like) into (headers, records).

    Every cell stays a string; blank cells become "" rather than NaN.
    """
    df = pd.read_csv(source, dtype=str, keep_default_na=False, skip_blank_lines=True)
    return list(df.columns), df.to_dict(orient="records")


def headers_of(records: Iterable[Record]) -> List[str]:
    """Union of record keys in first-seen order."""
    seen: Dict[str, None] = {}
    for row in records:
        for key in row:
            seen.setdefault(key, None)
    return list(seen)


def shared_headers(member_headers: Sequence[str], contact_headers: Sequence[str]) -> List[str]:
    """Headers present in both datasets, in member header order."""
    contact_set = set(contact_headers)
    return [h for h in member_headers if h in contact_set]


def is_likely_contact_field(name: str) -> bool:
    return any(p.search(name.strip()) for p in CONTACT_ONLY_PATTERNS)


def suggest_exclusions(headers: Sequence[str]) -> List[str]:
    return [h for h in headers if is_likely_contact_field(h)]


def resolve_included_columns(
    member_headers: Sequence[str],
    contact_headers: Sequence[str],
    excluded: Iterable[str] = (),
    geo_enabled: bool = False,
    address_field: Optional[str] = None,
) -> List[str]:
    """
    Model inputs: shared headers minus exclusions, plus the synthetic
    residency fields when geo enrichment is on and an address field exists.
    """
    excluded = set(excluded)
    included = [h for h in shared_headers(member_headers, contact_headers) if h not in excluded]
    if geo_enabled and address_field:
        included += [f for f in SYNTHETIC_FIELDS if f not in included]
    return included


def records_to_frame(records: Sequence[Record], columns: Sequence[str]) -> pd.DataFrame:
    """Table of stripped strings, one row per record; absent fields become ""."""
    frame = pd.DataFrame.from_records(
        [{c: row.get(c) for c in columns} for row in records], columns=list(columns)
    )
    return frame.fillna("").astype(str).apply(lambda s: s.str.strip())
