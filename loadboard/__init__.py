"""
Load board: list, create and delete freight loads against the Load API.
"""

from .api import HttpLoadApi, LoadApi, LoadApiError
from .models import DraftLoad, IncompleteDraftError, Load, LoadPayload
from .state import BoardState, FormVisibility, reduce
from .view import LoadBoardView

__all__ = [
    "BoardState",
    "DraftLoad",
    "FormVisibility",
    "HttpLoadApi",
    "IncompleteDraftError",
    "Load",
    "LoadApi",
    "LoadApiError",
    "LoadBoardView",
    "LoadPayload",
    "reduce",
]
