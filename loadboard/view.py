"""
The Load Board View.

Holds one ``BoardState`` and runs the three Load API operations against it:

- fetch_all: reload the list; stale responses are dropped by sequence number
- create_load: post the draft, then reload on success
- delete_load: delete by id, then always reload

Everything else (form toggle, draft edits, display limit, toasts) is a plain
state transition. The API is injected so tests can hand in a fake.
"""

import logging
from typing import Optional

from .api import LoadApi, LoadApiError, LoadApiStatusError
from .models import DEFAULT_DISPLAY_LIMIT, DraftLoad, IncompleteDraftError
from .state import (
    BoardState,
    CreateErrored,
    CreateRejected,
    CreateStarted,
    CreateSucceeded,
    DisplayLimitChanged,
    DraftEdited,
    Event,
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    FormCancelled,
    FormOpened,
    ToastCleared,
    ToastShown,
    reduce,
)
from .toast import TOAST_SECONDS, Scheduler, ToastTimer

logger = logging.getLogger(__name__)

CREATED_MESSAGE = "Load created successfully!"
REJECTED_MESSAGE = "Failed to create load"
ERROR_MESSAGE = "Error creating load"


class LoadBoardView:
    def __init__(
        self,
        api: LoadApi,
        *,
        display_limit: int = DEFAULT_DISPLAY_LIMIT,
        toast_seconds: float = TOAST_SECONDS,
        call_later: Optional[Scheduler] = None,
    ) -> None:
        self.api = api
        self._state = reduce(BoardState(), DisplayLimitChanged(limit=display_limit))
        self._fetch_seq = 0
        self._mounted = False
        self._closed = False
        self._toast_timer = ToastTimer(self.clear_toast, delay=toast_seconds, call_later=call_later)

    @property
    def state(self) -> BoardState:
        return self._state

    @property
    def mounted(self) -> bool:
        return self._mounted

    def dispatch(self, event: Event) -> BoardState:
        self._state = reduce(self._state, event)
        logger.debug("%s -> in_flight=%s loads=%s", type(event).__name__, self._state.in_flight, self._state.total)
        return self._state

    # ---------- lifecycle ----------

    async def mount(self) -> None:
        self._mounted = True
        self._closed = False
        await self.fetch_all()

    def unmount(self) -> None:
        self._mounted = False
        self._closed = True
        self._toast_timer.cancel()

    # ---------- Load API operations ----------

    async def fetch_all(self) -> None:
        self._fetch_seq += 1
        seq = self._fetch_seq
        self.dispatch(FetchStarted(seq=seq))
        applied = False
        try:
            loads = await self.api.list_loads()
            self.dispatch(FetchSucceeded(seq=seq, loads=loads))
            applied = True
        except LoadApiError as exc:
            logger.error("Error fetching loads: %s", exc)
        finally:
            # anything else still propagates, but never leaves the fetch in flight
            if not applied:
                self.dispatch(FetchFailed(seq=seq))

    refresh = fetch_all

    async def create_load(self, draft: Optional[DraftLoad] = None) -> bool:
        """Submit ``draft`` (the current form draft by default).

        Returns True when the API accepted the load. Raises
        IncompleteDraftError without calling the API if a field is blank.
        """
        draft = draft if draft is not None else self._state.draft
        missing = draft.missing_fields()
        if missing:
            raise IncompleteDraftError(missing)

        self.dispatch(CreateStarted())
        outcome: Event = CreateErrored()
        try:
            await self.api.create_load(draft.to_payload())
            outcome = CreateSucceeded()
        except LoadApiStatusError as exc:
            logger.warning("Load API rejected new load: %s", exc)
            outcome = CreateRejected(status_code=exc.status_code)
        except LoadApiError as exc:
            logger.error("Error creating load: %s", exc)
        finally:
            self.dispatch(outcome)

        if isinstance(outcome, CreateRejected):
            self.show_toast(REJECTED_MESSAGE)
            return False
        if isinstance(outcome, CreateErrored):
            self.show_toast(ERROR_MESSAGE)
            return False

        self.show_toast(CREATED_MESSAGE)
        await self.fetch_all()
        return True

    async def delete_load(self, load_id: str) -> None:
        try:
            status_code = await self.api.delete_load(load_id)
        except LoadApiError as exc:
            logger.error("Error deleting load %s: %s", load_id, exc)
        else:
            if not 200 <= status_code < 300:
                logger.warning("Delete of load %s returned %s", load_id, status_code)
        finally:
            await self.fetch_all()

    # ---------- form ----------

    def open_form(self) -> None:
        self.dispatch(FormOpened())

    def cancel_form(self) -> None:
        self.dispatch(FormCancelled())

    def toggle_form(self) -> None:
        if self._state.form_visible:
            self.cancel_form()
        else:
            self.open_form()

    def edit_draft(self, field: str, value: str) -> None:
        if getattr(self._state.draft, field, None) != value:
            self.dispatch(DraftEdited(field=field, value=value))

    def set_display_limit(self, limit: int) -> None:
        self.dispatch(DisplayLimitChanged(limit=limit))

    # ---------- toast ----------

    def show_toast(self, message: str) -> None:
        self.dispatch(ToastShown(message=message))
        if message and not self._closed:
            self._toast_timer.restart()
        else:
            self._toast_timer.cancel()

    def clear_toast(self) -> None:
        self._toast_timer.cancel()
        self.dispatch(ToastCleared())
