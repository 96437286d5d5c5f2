from typing import Dict, List

import pandas as pd

from .models import ACTIVE_STATUS
from .state import BoardState

COLUMNS = ["Load ID", "Customer", "Carrier", "Route", "Status"]
EMPTY_MESSAGE = "No loads found"
LOADING_MESSAGE = "Loading loads..."
UNKNOWN = "Unknown"

# (background, text)
ACTIVE_COLORS = ("#d4edda", "#155724")
INACTIVE_COLORS = ("#f8d7da", "#721c24")


def header(state: BoardState) -> str:
    return f"Loads ({state.total} total)"


def show_spinner(state: BoardState) -> bool:
    # the form keeps its own "Creating..." label, so the table stays put while it is open
    return state.loading and not state.form_visible


def table_rows(state: BoardState) -> List[Dict[str, str]]:
    if not state.loads:
        return [{"Load ID": EMPTY_MESSAGE, "Customer": "", "Carrier": "", "Route": "", "Status": ""}]
    return [
        {
            "Load ID": load.id,
            "Customer": load.customer or UNKNOWN,
            "Carrier": load.carrier or UNKNOWN,
            "Route": load.route,
            "Status": load.status,
        }
        for load in state.visible_loads
    ]


def to_frame(state: BoardState) -> pd.DataFrame:
    return pd.DataFrame(table_rows(state), columns=COLUMNS)


def status_color(status: str) -> str:
    background, text = ACTIVE_COLORS if status == ACTIVE_STATUS else INACTIVE_COLORS
    return f"background-color: {background}; color: {text}"


def style_frame(frame: pd.DataFrame):
    # the placeholder row has no status to color
    rows = frame.index[frame["Load ID"] != EMPTY_MESSAGE]
    return frame.style.map(status_color, subset=pd.IndexSlice[rows, ["Status"]])
