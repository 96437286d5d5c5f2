"""
Board state and the transitions that change it.

Every change to what the board shows goes through ``reduce(state, event)``,
which never touches the network. The view issues the events; tests can feed
them directly.
"""

import logging
from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict

from .models import DEFAULT_DISPLAY_LIMIT, DraftLoad, Load, check_display_limit

logger = logging.getLogger(__name__)


class FormVisibility(str, Enum):
    HIDDEN = "hidden"
    VISIBLE = "visible"


class BoardState(BaseModel):
    model_config = ConfigDict(frozen=True)

    loads: Tuple[Load, ...] = ()
    draft: DraftLoad = DraftLoad()
    form: FormVisibility = FormVisibility.HIDDEN
    toast: str = ""
    display_limit: int = DEFAULT_DISPLAY_LIMIT

    # operations awaiting a response
    in_flight: int = 0
    # sequence number of the last fetch whose result was applied
    applied_fetch: int = 0
    # bumped on every draft reset so form widgets can be rebuilt empty
    draft_generation: int = 0

    @property
    def loading(self) -> bool:
        return self.in_flight > 0

    @property
    def form_visible(self) -> bool:
        return self.form is FormVisibility.VISIBLE

    @property
    def total(self) -> int:
        return len(self.loads)

    @property
    def visible_loads(self) -> Tuple[Load, ...]:
        return self.loads[: self.display_limit]


# ---------- events ----------

class Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class FetchStarted(Event):
    seq: int


class FetchSucceeded(Event):
    seq: int
    loads: Tuple[Load, ...]


class FetchFailed(Event):
    seq: int


class CreateStarted(Event):
    pass


class CreateSucceeded(Event):
    pass


class CreateRejected(Event):
    status_code: int


class CreateErrored(Event):
    pass


class FormOpened(Event):
    pass


class FormCancelled(Event):
    pass


class DraftEdited(Event):
    field: str
    value: str


class DisplayLimitChanged(Event):
    limit: int


class ToastShown(Event):
    message: str


class ToastCleared(Event):
    pass


# ---------- transitions ----------

def _finished(state: BoardState, **changes) -> BoardState:
    return state.model_copy(update={"in_flight": max(state.in_flight - 1, 0), **changes})


def reduce(state: BoardState, event: Event) -> BoardState:
    if isinstance(event, (FetchStarted, CreateStarted)):
        return state.model_copy(update={"in_flight": state.in_flight + 1})

    if isinstance(event, FetchSucceeded):
        if event.seq <= state.applied_fetch:
            logger.debug("discarding stale fetch seq=%s applied=%s", event.seq, state.applied_fetch)
            return _finished(state)
        return _finished(state, loads=tuple(event.loads), applied_fetch=event.seq)

    if isinstance(event, (FetchFailed, CreateRejected, CreateErrored)):
        return _finished(state)

    if isinstance(event, CreateSucceeded):
        return _finished(
            state,
            form=FormVisibility.HIDDEN,
            draft=DraftLoad(),
            draft_generation=state.draft_generation + 1,
        )

    if isinstance(event, FormOpened):
        return state.model_copy(update={"form": FormVisibility.VISIBLE})

    if isinstance(event, FormCancelled):
        return state.model_copy(update={"form": FormVisibility.HIDDEN})

    if isinstance(event, DraftEdited):
        return state.model_copy(update={"draft": state.draft.with_field(event.field, event.value)})

    if isinstance(event, DisplayLimitChanged):
        return state.model_copy(update={"display_limit": check_display_limit(event.limit)})

    if isinstance(event, ToastShown):
        return state.model_copy(update={"toast": event.message})

    if isinstance(event, ToastCleared):
        return state.model_copy(update={"toast": ""})

    raise TypeError(f"unhandled event: {type(event).__name__}")
