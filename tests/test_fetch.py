import logging

import httpx
import pytest
import respx

from moviegrab.fetch import ErrorKind, SearchError, get_json, get_text, log_request


@pytest.mark.asyncio
async def test_get_text():
    with respx.mock:
        respx.get("https://httpbin.org/status/200").mock(
            return_value=httpx.Response(200, text="")
        )
        async with httpx.AsyncClient() as client:
            assert await get_text("https://httpbin.org/status/200", client) == ""


@pytest.mark.asyncio
async def test_error():
    with respx.mock:
        respx.get("https://httpbin.org/status/404").mock(return_value=httpx.Response(404))
        async with httpx.AsyncClient() as client:
            with pytest.raises(SearchError) as info:
                await get_text("https://httpbin.org/status/404", client)
    assert info.value.message == 'Request to "https://httpbin.org/status/404" failed with 404'
    assert info.value.kind is ErrorKind.STATUS_CODE
    assert info.value.cause.status_code == 404


@pytest.mark.asyncio
async def test_json():
    with respx.mock:
        respx.get("https://httpbin.org/ip").mock(
            return_value=httpx.Response(200, json={"origin": "192.0.2.1"})
        )
        async with httpx.AsyncClient() as client:
            data = await get_json("https://httpbin.org/ip", client)
    assert data["origin"] == "192.0.2.1"


@pytest.mark.asyncio
async def test_json_parse_error():
    with respx.mock:
        respx.get("https://httpbin.org/html").mock(
            return_value=httpx.Response(200, text="<html></html>")
        )
        async with httpx.AsyncClient() as client:
            with pytest.raises(SearchError) as info:
                await get_json("https://httpbin.org/html", client)
    assert info.value.kind is ErrorKind.PARSING
    assert str(info.value) == "Parsing Error"


@pytest.mark.asyncio
async def test_connection_error():
    with respx.mock:
        respx.get("https://httpbin.org/down").mock(side_effect=httpx.ConnectError("down"))
        async with httpx.AsyncClient() as client:
            with pytest.raises(SearchError) as info:
                await get_text("https://httpbin.org/down", client)
    assert info.value.kind is ErrorKind.HTTP_REQUEST
    assert info.value.message == "Request Error"


@pytest.mark.asyncio
async def test_log_request(caplog):
    caplog.set_level(logging.DEBUG, logger="moviegrab.fetch")
    await log_request(httpx.Request("GET", "https://example.com/a"))
    assert 'GET "https://example.com/a"' in caplog.messages