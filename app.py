import logging

import matplotlib.pyplot as plt
import streamlit as st

from config import load_settings, setup_logging
from dates import today_local
from metrics import current_streak, monthly_completion
from models import AppState, ViewState, view_days
from storage import LocalStorage
from store import HabitStore, export_document, export_filename
from view import completion_label, grid_changes, grid_frame, month_heatmap, month_label, streak_label

logger = logging.getLogger(__name__)

# Set page configuration
st.set_page_config(page_title="Habit Grid", layout="wide")

settings = load_settings()
setup_logging(settings)
store = HabitStore(LocalStorage(settings.data_file), key=settings.storage_key)

# Initialize session state variables if they don't exist
if "app_state" not in st.session_state:
    today = today_local()
    st.session_state.app_state = AppState(habits=store.load(), view=ViewState.for_day(today), today=today)
if "grid_version" not in st.session_state:
    st.session_state.grid_version = 0
if "imported_file_id" not in st.session_state:
    st.session_state.imported_file_id = None

state = st.session_state.app_state
state.today = today_local()


def go_to_previous_month():
    state.view = state.view.previous()


def go_to_next_month():
    state.view = state.view.next()


def log_export():
    logger.info("Exported %d habits", len(state.habits))


# Main title
st.title("Habit Grid")

# Month navigation
col_prev, col_label, col_next = st.columns([1, 4, 1])
with col_prev:
    st.button("◀ Prev", on_click=go_to_previous_month, use_container_width=True)
with col_label:
    st.subheader(month_label(state.view))
with col_next:
    st.button("Next ▶", on_click=go_to_next_month, use_container_width=True)

days = view_days(state.view)

# Section 1: Month grid
if not len(state.habits):
    st.info("No habits yet. Add one below!")
else:
    before = grid_frame(state.habits, days, state.today)
    editor_key = f"grid_{state.view.year}_{state.view.month}_{st.session_state.grid_version}"
    after = st.data_editor(
        before,
        key=editor_key,
        disabled=["Streak", "Month"],
        use_container_width=True,
    )

    if store.apply_changes(state.habits, grid_changes(before, after, days)):
        st.rerun()

    # Per-habit metrics
    metric_cols = st.columns(min(len(state.habits), 4))
    for i, habit in enumerate(state.habits):
        with metric_cols[i % len(metric_cols)]:
            st.metric(
                habit.name,
                streak_label(current_streak(habit, state.today)),
                completion_label(monthly_completion(habit, days)),
                delta_color="off",
            )

    fig = month_heatmap(state.habits, days, state.today)
    st.pyplot(fig)
    plt.close(fig)

# Section 2: Add habits
with st.form("add_habit_form", clear_on_submit=True):
    habit_name = st.text_input("Habit Name")
    submitted = st.form_submit_button("Add Habit")

    if submitted:
        if store.add_habit(state.habits, habit_name):
            st.session_state.grid_version += 1
            st.toast(f"Habit '{habit_name.strip()}' added successfully!")
            st.rerun()
        elif habit_name.strip():
            st.warning(f"A habit named '{habit_name.strip()}' already exists.")

# Section 3: Export / Import
col_export, col_import = st.columns(2)

with col_export:
    st.download_button(
        "Export",
        data=export_document(state.habits),
        file_name=export_filename(state.today),
        mime="application/json",
        on_click=log_export,
    )

with col_import:
    uploaded = st.file_uploader("Import", type=["json"])
    if uploaded is not None and uploaded.file_id != st.session_state.imported_file_id:
        st.session_state.imported_file_id = uploaded.file_id
        result = store.import_into(state, uploaded.getvalue())
        if result.accepted:
            st.session_state.grid_version += 1
            st.toast(f"Imported {len(result.habits)} habits.")
            st.rerun()
        else:
            st.error(result.reason)

# Add footer
st.markdown("---")
st.markdown("Habit Grid")
