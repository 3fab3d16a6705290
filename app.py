"""Streamlit UI for the seating optimizer with CSV previews and validations."""
from __future__ import annotations

# Add src to sys.path so seating_optimizer can be found
import sys
import os
import io
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

import pandas as pd
import streamlit as st

from seating_optimizer.csv_loader import (
    attending,
    load_constraints,
    load_guests,
    load_relationships,
    load_tables,
)
from seating_optimizer.optimizer import optimize
from seating_optimizer.report import table_report, unseated_guests

# -----------------------------
# Helpers
# -----------------------------

def uploadedfile_to_df(uploaded_file) -> pd.DataFrame | None:
    """Read a Streamlit UploadedFile or file-like object into a DataFrame."""
    if uploaded_file is None:
        return None
    if hasattr(uploaded_file, "read"):
        uploaded_file.seek(0)
        return pd.read_csv(io.StringIO(uploaded_file.read().decode("utf-8")), dtype=str)
    return pd.read_csv(uploaded_file, dtype=str)

def df_to_csvio(df: pd.DataFrame) -> io.StringIO:
    """Serialize a DataFrame to a StringIO CSV buffer positioned at start."""
    buf = io.StringIO()
    df.to_csv(buf, index=False)
    buf.seek(0)
    return buf

def validate_columns(df: pd.DataFrame, required: list[str], file_label: str) -> bool:
    """Check required columns and show an error if any are missing."""
    missing = [col for col in required if col not in df.columns]
    if missing:
        st.error(f"Error in {file_label}: missing columns: {', '.join(missing)}")
        return False
    return True

def build_and_solve(
    guests_df: pd.DataFrame,
    tables_df: pd.DataFrame,
    rel_df: pd.DataFrame | None,
    constraints_df: pd.DataFrame | None,
    include_declined: bool,
):
    """Run loaders and the optimizer."""
    guests = load_guests(df_to_csvio(guests_df))
    if rel_df is not None:
        load_relationships(df_to_csvio(rel_df), guests, {g.id for g in guests})
    tables = load_tables(df_to_csvio(tables_df))
    constraints = load_constraints(df_to_csvio(constraints_df)) if constraints_df is not None else []

    if not include_declined:
        guests = attending(guests)
    return guests, tables, optimize(guests, tables, constraints)

# -----------------------------
# Sidebar options
# -----------------------------

st.sidebar.header("Seating Options")
include_declined = st.sidebar.checkbox(
    "Seat declined guests too",
    value=False,
    help="By default guests whose RSVP is declined are left out.",
)

# -----------------------------
# Main UI and previews
# -----------------------------

st.title("Seating Optimizer")

_guests_file = st.file_uploader("Guests CSV", type="csv")
_tables_file = st.file_uploader("Tables CSV", type="csv")
_relationships_file = st.file_uploader("Relationships CSV (optional)", type="csv")
_constraints_file = st.file_uploader("Constraints CSV (optional)", type="csv")

_previews = [
    (_guests_file, "Guests", ["id"], "guests.csv"),
    (_tables_file, "Tables", ["id", "capacity"], "tables.csv"),
    (_relationships_file, "Relationships", ["guest_id", "other_id", "type"], "relationships.csv"),
    (_constraints_file, "Constraints", ["id", "type", "guest_ids"], "constraints.csv"),
]
all_valid = True
for uploaded, title, required, label in _previews:
    if uploaded is None:
        continue
    df = uploadedfile_to_df(uploaded)
    st.subheader(f"{title} preview")
    st.dataframe(df, use_container_width=True)
    all_valid = validate_columns(df, required, label) and all_valid
    uploaded.seek(0)

# -----------------------------
# Run button
# -----------------------------

run_disabled = not (_guests_file and _tables_file and all_valid)
run_clicked = st.button("Optimize seating", disabled=run_disabled, key="run_optimizer_button")

# -----------------------------
# Solve
# -----------------------------

if run_clicked and not run_disabled:
    try:
        guests, tables, result = build_and_solve(
            uploadedfile_to_df(_guests_file),
            uploadedfile_to_df(_tables_file),
            uploadedfile_to_df(_relationships_file),
            uploadedfile_to_df(_constraints_file),
            include_declined=include_declined,
        )
    except ValueError as e:
        st.error(f"Input validation error: {e}")
        st.stop()
    except Exception as e:
        st.exception(e)
        st.stop()

    st.metric("Score", f"{result.score}/100")
    for v in result.violations:
        st.warning(str(v))

    names = {g.id: g.name for g in guests}
    result_df = pd.DataFrame(
        {
            "guest": list(result.assignments.keys()),
            "name": [names[gid] for gid in result.assignments],
            "table": list(result.assignments.values()),
        }
    )
    st.subheader("Assignments")
    st.dataframe(result_df, use_container_width=True)

    report_df = pd.DataFrame(table_report(result, guests, tables))
    if not report_df.empty:
        report_df["members"] = report_df["members"].apply(lambda ids: ", ".join(names[i] for i in ids))
    st.subheader("Guests per table")
    st.dataframe(report_df, use_container_width=True)

    left_out = unseated_guests(result, guests)
    if left_out:
        st.subheader("Unseated guests")
        st.dataframe(pd.DataFrame({"guest": [g.id for g in left_out], "name": [g.name for g in left_out]}), use_container_width=True)

    st.download_button(
        "Download assignments as CSV",
        result_df.to_csv(index=False).encode("utf-8"),
        file_name="assignments.csv",
    )
