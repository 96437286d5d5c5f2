import asyncio

import pytest

from loadboard.api import LoadApiStatusError
from loadboard.models import Load
from loadboard.view import LoadBoardView


class ManualClock:
    """Scheduler fake: timers only fire when the test advances time."""

    class Timer:
        def __init__(self, when, callback):
            self.when = when
            self.callback = callback
            self.cancelled = False

        def cancel(self):
            self.cancelled = True

    def __init__(self):
        self.now = 0.0
        self.timers = []

    def call_later(self, delay, callback):
        timer = self.Timer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    def advance(self, seconds):
        self.now += seconds
        due = sorted(
            (t for t in self.timers if not t.cancelled and t.when <= self.now),
            key=lambda t: t.when,
        )
        for timer in due:
            self.timers.remove(timer)
            timer.callback()

    @property
    def pending(self):
        return [t for t in self.timers if not t.cancelled]


class FakeLoadApi:
    def __init__(self, loads=()):
        self.loads = list(loads)
        self.calls = []
        self.created = []
        self.list_error = None
        self.create_error = None
        self.delete_error = None
        self.delete_status = 200

    async def list_loads(self):
        self.calls.append("list")
        if self.list_error is not None:
            raise self.list_error
        return list(self.loads)

    async def create_load(self, payload):
        self.calls.append("create")
        self.created.append(payload)
        if self.create_error is not None:
            raise self.create_error
        self.loads.append(Load(id=f"L-{len(self.loads) + 1}", **payload.model_dump()))

    async def delete_load(self, load_id):
        self.calls.append(("delete", load_id))
        if self.delete_error is not None:
            raise self.delete_error
        self.loads = [load for load in self.loads if load.id != load_id]
        return self.delete_status


class GatedLoadApi(FakeLoadApi):
    """list_loads() waits until the test releases that particular call."""

    def __init__(self):
        super().__init__()
        self.waiting = []

    async def list_loads(self):
        self.calls.append("list")
        future = asyncio.get_running_loop().create_future()
        self.waiting.append(future)
        return await future

    def release(self, index, loads):
        self.waiting[index].set_result(list(loads))


def make_loads(n, status="active"):
    return [
        Load(
            id=f"L-{1000 + i}",
            origin="Chicago, IL",
            destination="Dallas, TX",
            customer=f"Customer {i}",
            carrier="Blue Line Freight",
            status=status,
            created_at="2025-09-23T08:00:00Z",
        )
        for i in range(n)
    ]


ACME_DRAFT = {
    "customer": "Acme",
    "pickup": "Chicago",
    "pickup_state": "IL",
    "pickup_country": "US",
    "delivery": "Dallas",
    "delivery_state": "TX",
    "delivery_country": "US",
}


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def api():
    return FakeLoadApi(make_loads(3))


@pytest.fixture
def view(api, clock):
    return LoadBoardView(api, call_later=clock.call_later)


@pytest.fixture
def rejecting_api(api):
    api.create_error = LoadApiStatusError(500, "upstream error")
    return api
