# dashboard.py
import streamlit as st

from loadboard.api import HttpLoadApi
from loadboard.config import ConfigError, configure_logging, load_settings
from loadboard.models import DISPLAY_LIMITS, IncompleteDraftError
from loadboard.runtime import EventLoopThread
from loadboard.table import LOADING_MESSAGE, header, show_spinner, style_frame, to_frame
from loadboard.view import LoadBoardView

st.set_page_config(page_title="TMS Load Management", layout="wide")

st.title("TMS Load Management")

try:
    settings = load_settings()
except ConfigError as exc:
    st.error(str(exc))
    st.stop()


@st.cache_resource
def event_loop(log_level: str) -> EventLoopThread:
    configure_logging(log_level)
    return EventLoopThread().start()


loop = event_loop(settings.log_level)

# one view per browser session; mounting does the first fetch
if "load_board" not in st.session_state:
    view = LoadBoardView(
        HttpLoadApi(settings.load_api_url, timeout=settings.load_api_timeout),
        display_limit=settings.display_limit,
        toast_seconds=settings.toast_seconds,
    )
    loop.call(view.mount)
    st.session_state["load_board"] = view

view: LoadBoardView = st.session_state["load_board"]


@st.fragment(run_every=1.0)
def toast_banner():
    # the toast is cleared on the loop thread; poll so the banner disappears
    message = view.state.toast
    if message:
        st.success(message)


toast_banner()

state = view.state

# ---------- toolbar ----------
toggle_col, refresh_col, limit_col = st.columns([1, 1, 2])

if toggle_col.button("Cancel" if state.form_visible else "Create New Load", key="toggle_form"):
    loop.call(view.toggle_form)
    st.rerun()

if refresh_col.button("Loading..." if state.loading else "Refresh", disabled=state.loading, key="refresh"):
    loop.call(view.refresh)
    st.rerun()

limit = limit_col.selectbox(
    "Show",
    DISPLAY_LIMITS,
    index=DISPLAY_LIMITS.index(state.display_limit),
    format_func=lambda n: f"{n} loads",
    key="display_limit",
)
if limit != state.display_limit:
    loop.call(view.set_display_limit, limit)
    state = view.state

# ---------- create form ----------
FIELD_LABELS = {
    "customer": "Customer Name",
    "pickup": "Pickup City",
    "pickup_state": "Pickup State",
    "pickup_country": "Pickup Country",
    "delivery": "Delivery City",
    "delivery_state": "Delivery State",
    "delivery_country": "Delivery Country",
}

if state.form_visible:
    with st.container(border=True):
        st.subheader("Create New Load")
        # new keys after every reset so the inputs come back empty
        gen = state.draft_generation
        draft = state.draft
        values = {"customer": st.text_input("Customer Name", value=draft.customer, key=f"customer_{gen}")}

        for prefix, title in (("pickup", "Pickup Location"), ("delivery", "Delivery Location")):
            st.markdown(f"**{title}**")
            city_col, state_col, country_col = st.columns([2, 1, 1])
            for col, suffix, label in ((city_col, "", "City"), (state_col, "_state", "State"), (country_col, "_country", "Country")):
                field = prefix + suffix
                values[field] = col.text_input(label, value=getattr(draft, field), key=f"{field}_{gen}")

        for field, value in values.items():
            loop.call(view.edit_draft, field, value)

        if st.button("Creating..." if state.loading else "Create Load", type="primary", disabled=state.loading, key="create_load"):
            try:
                loop.call(view.create_load)
            except IncompleteDraftError as exc:
                st.warning("Please fill in: " + ", ".join(FIELD_LABELS[f] for f in exc.missing))
            else:
                st.rerun()

# ---------- loads table ----------
state = view.state
st.subheader(header(state))

if show_spinner(state):
    st.info(LOADING_MESSAGE)
else:
    st.dataframe(style_frame(to_frame(state)), hide_index=True, use_container_width=True)

    # choices are load ids, and a fresh list gets a fresh picker
    choice = st.selectbox(
        "Delete load",
        [load.id for load in state.visible_loads],
        index=None,
        placeholder="Select a load to delete",
        key=f"delete_choice_{state.applied_fetch}",
    )
    if st.button(f"Delete {choice}" if choice else "Delete", disabled=choice is None, key="delete_load"):
        loop.call(view.delete_load, choice)
        st.rerun()
