"""
lookalike/data_dictionary.py

Column -> description mapping for the fields this project adds or emits.
Used by the Streamlit UI next to the scored table and the importances.
"""

from lookalike.geo import DISTANCE_FIELD, RESIDENT_FIELD
from lookalike.inference import SCORE_COLUMN


DATA_DICTIONARY = {
    SCORE_COLUMN: "Likeness to the member list, 1 (least) to 100 (most).",
    RESIDENT_FIELD: "Derived from the address: yes for Columbia residents, no otherwise (including unknown addresses).",
    DISTANCE_FIELD: "Miles from the nearest Columbia, MD boundary edge (0 for residents, blank if unknown).",
    "field": "Model input. One-hot categories appear as column::value; binary fields as column (more/less).",
    "importance": "Relative weight magnitude, 0-100 (the strongest feature is 100).",
    "correlation": "Point-biserial correlation with membership, -1 to 1.",
    "confidence": "Heuristic certainty for the importance, 1-99%.",
    "direction": "positive = higher values look more like members; negative = less like members.",
    "explanation": "Plain-language reading of the feature's effect.",
    "factors": "Up to 10 features contributing most to a contact's score, by absolute contribution.",
}

# Fields produced by make_synthetic_data.py
DEMO_FIELDS = {
    "id": "Record identifier (excluded from the model by default).",
    "email": "Contact email (excluded from the model by default).",
    "age": "Age in years.",
    "visits_last_year": "Facility visits in the last 12 months.",
    "last_visit_date": "Most recent visit; modeled as days since the visit.",
    "gender": "Male / Female.",
    "parental_status": "Parent / Non-Parent.",
    "program_interest": "Program the person signed up for or asked about.",
    "address": "Street address used for the Columbia residency fields.",
}
