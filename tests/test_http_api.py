import asyncio

import httpx
import pytest

from fake_load_api import SEED_LOADS, create_app
from loadboard.api import (
    HttpLoadApi,
    LoadApiDecodeError,
    LoadApiStatusError,
    LoadApiUnavailable,
    parse_loads,
)
from loadboard.models import DraftLoad, LoadPayload
from loadboard.view import CREATED_MESSAGE, REJECTED_MESSAGE, LoadBoardView

BASE_URL = "http://testserver"

PAYLOAD = LoadPayload(origin="Chicago, IL", destination="Dallas, TX", customer="Acme")


def _call(app, fn):
    async def run():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as client:
            return await fn(HttpLoadApi(BASE_URL, client=client))

    return asyncio.run(run())


def test_list_returns_loads():
    app = create_app()

    async def fn(api):
        return await api.list_loads()

    loads = _call(app, fn)

    assert [load.id for load in loads] == [row["id"] for row in SEED_LOADS]
    assert loads[0].route == "Chicago, IL → Dallas, TX"


@pytest.mark.parametrize("body", [b"null", b"", b"[]"])
def test_list_treats_null_and_empty_as_no_loads(body):
    app = create_app()
    app.state.list_body = body

    async def fn(api):
        return await api.list_loads()

    assert _call(app, fn) == []


def test_list_error_status_raises():
    app = create_app()
    app.state.fail["GET"] = 500

    async def fn(api):
        return await api.list_loads()

    with pytest.raises(LoadApiStatusError) as info:
        _call(app, fn)
    assert info.value.status_code == 500


def test_list_garbage_body_raises_decode_error():
    app = create_app()
    app.state.list_body = b'{"shipments": []}'

    async def fn(api):
        return await api.list_loads()

    with pytest.raises(LoadApiDecodeError):
        _call(app, fn)


def test_create_posts_json_body():
    app = create_app()

    async def fn(api):
        await api.create_load(PAYLOAD)

    _call(app, fn)

    assert app.state.received == [
        {
            "origin": "Chicago, IL",
            "destination": "Dallas, TX",
            "customer": "Acme",
            "carrier": "Default Carrier",
            "status": "active",
        }
    ]


def test_create_non_success_raises_with_status():
    app = create_app()
    app.state.fail["POST"] = 502

    async def fn(api):
        await api.create_load(PAYLOAD)

    with pytest.raises(LoadApiStatusError) as info:
        _call(app, fn)
    assert info.value.status_code == 502


def test_delete_sends_id_as_query_param_and_returns_status():
    app = create_app()

    async def fn(api):
        return await api.delete_load("L-1002"), await api.delete_load("nope")

    ok, missing = _call(app, fn)

    assert (ok, missing) == (200, 404)
    assert app.state.deleted == ["L-1002", "nope"]
    assert [row["id"] for row in app.state.loads] == ["L-1001", "L-1003"]


def test_transport_failure_raises_unavailable():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url=BASE_URL) as client:
            api = HttpLoadApi(BASE_URL, client=client)
            with pytest.raises(LoadApiUnavailable):
                await api.list_loads()
            with pytest.raises(LoadApiUnavailable):
                await api.create_load(PAYLOAD)
            with pytest.raises(LoadApiUnavailable):
                await api.delete_load("L-1")

    asyncio.run(run())


def test_aclose_leaves_borrowed_client_open():
    async def run():
        async with httpx.AsyncClient(base_url=BASE_URL) as client:
            await HttpLoadApi(BASE_URL, client=client).aclose()
            return client.is_closed

    assert asyncio.run(run()) is False


def test_aclose_closes_owned_client():
    async def run():
        api = HttpLoadApi(BASE_URL + "/")
        client = api.client
        await api.aclose()
        return api.base_url, client.is_closed

    assert asyncio.run(run()) == (BASE_URL, True)


def test_parse_loads_rejects_invalid_json():
    with pytest.raises(LoadApiDecodeError):
        parse_loads(b"<html>502 Bad Gateway</html>")


def test_view_round_trip_against_fake_api(clock):
    app = create_app()

    async def fn(api):
        view = LoadBoardView(api, call_later=clock.call_later)
        await view.mount()
        counts = [view.state.total]

        view.open_form()
        await view.create_load(
            DraftLoad(
                customer="Acme", pickup="Denver", pickup_state="CO", pickup_country="US",
                delivery="Kansas City", delivery_state="MO", delivery_country="US",
            )
        )
        counts.append(view.state.total)
        created = view.state.loads[-1]
        toast = view.state.toast

        await view.delete_load(created.id)
        counts.append(view.state.total)

        app.state.fail["POST"] = 500
        view.open_form()
        await view.create_load(DraftLoad(**{f: "x" for f in DraftLoad.model_fields}))
        return counts, created, toast, view.state

    counts, created, toast, state = _call(app, fn)

    assert counts == [3, 4, 3]
    assert created.route == "Denver, CO → Kansas City, MO"
    assert created.carrier == "Default Carrier"
    assert toast == CREATED_MESSAGE
    assert state.toast == REJECTED_MESSAGE
    assert state.form_visible


def test_undecodable_body_raises_unavailable():
    def garbled(request):
        return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"[not gzip]")

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(garbled), base_url=BASE_URL) as client:
            api = HttpLoadApi(BASE_URL, client=client)
            with pytest.raises(LoadApiUnavailable):
                await api.list_loads()
            with pytest.raises(LoadApiUnavailable):
                await api.create_load(PAYLOAD)

    asyncio.run(run())
