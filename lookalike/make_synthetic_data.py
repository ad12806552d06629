"""
lookalike/make_synthetic_data.py

Creates a realistic-looking pair of member / contact lists for demos.
Synthetic, but shaped like a community-center CRM export: identifiers, age,
visit history, gender, parental status, program interest and a street address
somewhere around Columbia, MD.

Outputs:
  data/members.csv
  data/contacts.csv
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

import numpy as np
import pandas as pd

from lookalike.gazetteer import COLUMBIA_ZIPS, MD_CITY_COORDS
from lookalike.model import sigmoid


STREETS = ["Main St", "Oak Ave", "Little Patuxent Pkwy", "Route 108", "Cedar Ln",
           "Harpers Farm Rd", "Broken Land Pkwy", "Park Ave", "Chestnut St", "Maple Dr"]
PROGRAMS = ["Aquatics", "Fitness", "Arts", "Youth Sports", "Seniors Club"]
NEARBY_CITIES = sorted(c for c in MD_CITY_COORDS if c != "columbia")


def _address(rng: np.random.Generator, in_columbia: bool) -> str:
    number = int(rng.integers(1, 9999))
    street = STREETS[int(rng.integers(len(STREETS)))]
    if in_columbia:
        zip_code = sorted(COLUMBIA_ZIPS)[int(rng.integers(len(COLUMBIA_ZIPS)))]
        return f"{number} {street}, Columbia, MD {zip_code}"
    city = NEARBY_CITIES[int(rng.integers(len(NEARBY_CITIES)))]
    return f"{number} {street}, {city.title()}, MD"


def generate_membership_datasets(
    n_people: int = 2000,
    random_state: int = 42,
    today: str = "2024-06-30",
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Return (members, contacts) as string-valued DataFrames.

    Membership is sampled from a logistic propensity so that older, frequent,
    recent visitors living in Columbia are more often members.
    """
    rng = np.random.default_rng(random_state)

    age = np.clip(rng.normal(42, 14, size=n_people), 18, 90).round().astype(int)
    visits = np.clip(rng.poisson(6, size=n_people), 0, 60)
    days_ago = np.clip(rng.exponential(120, size=n_people), 0, 1500).round().astype(int)
    is_female = rng.binomial(1, 0.55, size=n_people)
    is_parent = rng.binomial(1, 0.4, size=n_people)
    program = rng.integers(0, len(PROGRAMS), size=n_people)
    in_columbia = rng.binomial(1, 0.45, size=n_people)

    # Underlying propensity with realistic relationships + noise
    linear = (
        + 0.04 * (age - 42)
        + 0.18 * (visits - 6)
        - 0.006 * (days_ago - 120)
        + 0.30 * is_parent
        + 0.90 * in_columbia
        + 0.40 * (program == PROGRAMS.index("Aquatics"))
        + rng.normal(0, 0.5, size=n_people)
        - 0.5
    )
    is_member = rng.binomial(1, sigmoid(linear))

    last_visit = pd.Timestamp(today) - pd.to_timedelta(days_ago, unit="D")
    df = pd.DataFrame(
        {
            "id": [f"P{100000 + i}" for i in range(n_people)],
            "email": [f"person{i}@example.org" for i in range(n_people)],
            "age": age.astype(str),
            "visits_last_year": visits.astype(str),
            "last_visit_date": last_visit.strftime("%Y-%m-%d"),
            "gender": np.where(is_female == 1, "Female", "Male"),
            "parental_status": np.where(is_parent == 1, "Parent", "Non-Parent"),
            "program_interest": [PROGRAMS[p] for p in program],
            "address": [_address(rng, bool(c)) for c in in_columbia],
        }
    )
    members = df[is_member == 1].reset_index(drop=True)
    contacts = df[is_member == 0].reset_index(drop=True)
    return members, contacts


def main() -> None:
    out_dir = Path("data")
    out_dir.mkdir(parents=True, exist_ok=True)

    members, contacts = generate_membership_datasets(n_people=2000, random_state=42)
    members.to_csv(out_dir / "members.csv", index=False)
    contacts.to_csv(out_dir / "contacts.csv", index=False)

    # Print quick quality checks
    print(f"Wrote {len(members)} members to {out_dir / 'members.csv'}")
    print(f"Wrote {len(contacts)} contacts to {out_dir / 'contacts.csv'}")
    print("Columns:", list(members.columns))


if __name__ == "__main__":
    main()
