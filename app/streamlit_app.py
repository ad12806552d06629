"""
app/streamlit_app.py

Purpose
-------
A Streamlit dashboard that:
  - accepts a member CSV and a contact CSV (or generates demo data)
  - lets the user pick which shared fields feed the model
  - optionally derives Columbia, MD residency fields from an address column
  - shows feature importances, ranked contacts and the score distribution

Run:
    streamlit run app/streamlit_app.py
"""

import io

import matplotlib.pyplot as plt
import pandas as pd
import streamlit as st

from lookalike.config import EngineConfig
from lookalike.data_dictionary import DATA_DICTIONARY, DEMO_FIELDS
from lookalike.engine import InputError, analyze_and_predict
from lookalike.geo import SYNTHETIC_FIELDS, detect_address_field, summarize_columbia
from lookalike.inference import SCORE_COLUMN, importances_to_frame, predictions_to_frame
from lookalike.make_synthetic_data import generate_membership_datasets
from lookalike.records import read_csv_records, resolve_included_columns, shared_headers, suggest_exclusions


# ---------------------------------------------------------------------
# Streamlit page configuration
# ---------------------------------------------------------------------
st.set_page_config(page_title="Member Lookalike Scoring", layout="wide")
st.title("Member Lookalike Scoring")


# ---------------------------------------------------------------------
# Caching helpers
# ---------------------------------------------------------------------
# Streamlit reruns the script top-to-bottom on every interaction.

@st.cache_data
def load_demo():
    members, contacts = generate_membership_datasets(n_people=1200, random_state=42)
    return (
        list(members.columns), members.to_dict(orient="records"),
        list(contacts.columns), contacts.to_dict(orient="records"),
    )


@st.cache_data
def load_upload(data: bytes):
    return read_csv_records(io.BytesIO(data))


# ---------------------------------------------------------------------
# Data input section
# ---------------------------------------------------------------------
st.sidebar.header("Data")
member_file = st.sidebar.file_uploader("Members CSV", type="csv")
contact_file = st.sidebar.file_uploader("Contacts CSV", type="csv")

if member_file and contact_file:
    member_headers, members = load_upload(member_file.getvalue())
    contact_headers, contacts = load_upload(contact_file.getvalue())
else:
    st.info("Upload both CSVs, or explore the synthetic demo lists below.")
    member_headers, members, contact_headers, contacts = load_demo()

if not members or not contacts:
    st.warning("Both lists need at least one row.")
    st.stop()

st.caption(f"{len(members)} members | {len(contacts)} contacts")


# ---------------------------------------------------------------------
# Sidebar controls
# ---------------------------------------------------------------------
st.sidebar.header("Model inputs")
common = shared_headers(member_headers, contact_headers)
excluded = st.sidebar.multiselect(
    "Exclude fields",
    options=common,
    default=[h for h in suggest_exclusions(member_headers) if h in common],
    help="Identifiers and contact details rarely help the model.",
)

detected = detect_address_field(member_headers)
use_geo = st.sidebar.checkbox(
    "Add Columbia residency fields",
    value=False,
    disabled=detected is None,
    help="Derives columbia_resident and distance_from_columbia_mi from the address.",
)
address_field = None
if use_geo:
    address_field = st.sidebar.selectbox(
        "Address field", options=member_headers, index=member_headers.index(detected)
    )

iterations = st.sidebar.slider("Training iterations", 100, 5000, 2000, step=100)
validation_fraction = st.sidebar.slider(
    "Validation holdout", 0.0, 0.5, 0.0, step=0.05,
    help="Share of rows held out to report an extra validation accuracy.",
)

columns = resolve_included_columns(
    member_headers, contact_headers, excluded,
    geo_enabled=use_geo, address_field=address_field,
)


# ---------------------------------------------------------------------
# Train + score
# ---------------------------------------------------------------------
config = EngineConfig(iterations=iterations, validation_fraction=validation_fraction)
try:
    with st.spinner("Training..."):
        result = analyze_and_predict(
            members, contacts, columns,
            config=config, geo=use_geo, address_field=address_field,
        )
except InputError as e:
    st.error(str(e))
    st.stop()

m1, m2, m3 = st.columns(3)
m1.metric("Training accuracy", f"{result.model_accuracy}%")
m2.metric("Validation accuracy",
          "-" if result.validation_accuracy is None else f"{result.validation_accuracy}%")
m3.metric("Model inputs", len(columns))


# ---------------------------------------------------------------------
# Dashboard outputs
# ---------------------------------------------------------------------
col1, col2 = st.columns([2, 1])

with col1:
    st.subheader("What makes someone look like a member")
    st.dataframe(importances_to_frame(result.feature_importances), use_container_width=True)

with col2:
    st.subheader("Score distribution")
    scores = [p.score for p in result.predictions]
    fig = plt.figure()
    plt.hist(scores, bins=20, range=(1, 100))
    plt.xlabel(SCORE_COLUMN)
    plt.ylabel("contacts")
    st.pyplot(fig)

st.subheader("Contacts ranked by likeness (top 50)")
export_headers = contact_headers + (list(SYNTHETIC_FIELDS) if address_field else [])
scored = predictions_to_frame(result.predictions, export_headers)
st.dataframe(scored.head(50), use_container_width=True)
st.download_button(
    "Download scored CSV",
    data=scored.to_csv(index=False).encode("utf-8"),
    file_name="scored.csv",
    mime="text/csv",
)

if result.predictions:
    st.subheader("Why this contact scored the way they did")
    rank = st.number_input("Rank to explain", min_value=1, max_value=len(result.predictions), value=1)
    chosen = result.predictions[int(rank) - 1]
    st.write(f"Score: **{chosen.score}**")
    st.dataframe(
        pd.DataFrame([f.to_dict() for f in chosen.factors], columns=["field", "contribution"]),
        use_container_width=True,
    )

if address_field:
    st.subheader("Columbia residency")
    left, right = st.columns(2)
    for frame_col, label, rows in ((left, "Members", members), (right, "Contacts", contacts)):
        summary = summarize_columbia(rows, address_field)
        with frame_col:
            st.caption(label)
            st.write(
                f"Residents: {summary.residents} | Non-residents: {summary.non_residents} | "
                f"Unknown: {summary.unknown} | Avg distance: {summary.avg_distance or '-'} mi"
            )
            st.bar_chart(pd.Series(dict(summary.distance_buckets), name="non-residents"))

with st.expander("Data dictionary"):
    st.table(pd.Series({**DATA_DICTIONARY, **DEMO_FIELDS}, name="description"))
