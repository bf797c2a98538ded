"""
AiohttpTransport tests with a mocked ClientSession and a local aiohttp server.
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from amazon_shopping.errors import MalformedResponse, TransportFailure
from amazon_shopping.normalizers.amazon import AmazonNormalizer
from amazon_shopping.services.transport import AiohttpTransport, TransportResponse

URL = "https://webservices.amazon.com/paapi5/searchitems"


def create_mock_response(status=200, text_data="", headers=None):
    """Helper to create a properly mocked async response."""
    mock_response = AsyncMock()
    mock_response.status = status
    mock_response.headers = headers or {}
    mock_response.text = AsyncMock(return_value=text_data)

    mock_response.__aenter__ = AsyncMock(return_value=mock_response)
    mock_response.__aexit__ = AsyncMock(return_value=None)

    return mock_response


def create_mock_session(response=None, error=None):
    mock_session = MagicMock()
    if error is not None:
        mock_session.request.side_effect = error
    else:
        mock_session.request.return_value = response
    mock_session.close = AsyncMock()
    return mock_session


@pytest.mark.asyncio
async def test_send_returns_status_body_and_headers():
    transport = AiohttpTransport(timeout=5)
    transport.session = create_mock_session(create_mock_response(
        status=200,
        text_data='{"RequestId": "R"}',
        headers={"x-amzn-RequestId": "R"},
    ))

    response = await transport.send("POST", URL, {"Accept": "application/json"}, b"{}")

    assert response == TransportResponse(
        status=200, body='{"RequestId": "R"}', headers={"x-amzn-RequestId": "R"}
    )
    transport.session.request.assert_called_once_with(
        "POST", URL, headers={"Accept": "application/json"}, data=b"{}"
    )


@pytest.mark.asyncio
async def test_error_status_is_returned_not_raised():
    transport = AiohttpTransport()
    transport.session = create_mock_session(create_mock_response(status=500, text_data="oops"))

    response = await transport.send("POST", URL, {}, b"{}")

    assert response.status == 500
    assert response.body == "oops"


@pytest.mark.asyncio
async def test_client_error_becomes_transport_failure():
    transport = AiohttpTransport()
    transport.session = create_mock_session(error=aiohttp.ClientConnectionError("refused"))

    with pytest.raises(TransportFailure, match="Network error") as exc_info:
        await transport.send("POST", URL, {}, b"{}")

    assert isinstance(exc_info.value.__cause__, aiohttp.ClientConnectionError)


@pytest.mark.asyncio
async def test_timeout_becomes_transport_failure():
    transport = AiohttpTransport()
    transport.session = create_mock_session(error=asyncio.TimeoutError())

    with pytest.raises(TransportFailure, match="Timeout"):
        await transport.send("POST", URL, {}, b"{}")


@pytest.mark.asyncio
async def test_initialize_creates_session_once():
    transport = AiohttpTransport(timeout=7)

    with patch("aiohttp.ClientSession") as mock_session_class:
        mock_session_class.return_value = AsyncMock()

        await transport.initialize()
        await transport.initialize()

        mock_session_class.assert_called_once()
        timeout = mock_session_class.call_args.kwargs["timeout"]
        assert timeout.total == 7


@pytest.mark.asyncio
async def test_context_manager_closes_session():
    with patch("aiohttp.ClientSession") as mock_session_class:
        mock_session = AsyncMock()
        mock_session_class.return_value = mock_session

        async with AiohttpTransport() as transport:
            assert transport.session is mock_session

        mock_session.close.assert_awaited_once()
        assert transport.session is None


def test_default_timeout_comes_from_config():
    with patch("amazon_shopping.services.transport.config.REQUEST_TIMEOUT", 12):
        assert AiohttpTransport().timeout == 12


def create_app(body):
    async def search_items(request):
        return web.Response(body=body, content_type="application/json")

    app = web.Application()
    app.router.add_post("/paapi5/searchitems", search_items)
    return app


@pytest.mark.asyncio
async def test_undecodable_bytes_in_string_are_replaced():
    async with TestServer(create_app(b'{"x": "\xff\xfe"}')) as server:
        async with AiohttpTransport(timeout=5) as transport:
            response = await transport.send(
                "POST", str(server.make_url("/paapi5/searchitems")), {}, b"{}"
            )

    assert response.status == 200
    assert "\ufffd" in response.body
    assert AmazonNormalizer.normalize(response.body, response.status).products == []


@pytest.mark.asyncio
async def test_undecodable_body_surfaces_as_malformed_response():
    async with TestServer(create_app(b"\xff\xfe")) as server:
        async with AiohttpTransport(timeout=5) as transport:
            response = await transport.send(
                "POST", str(server.make_url("/paapi5/searchitems")), {}, b"{}"
            )

    with pytest.raises(MalformedResponse):
        AmazonNormalizer.normalize(response.body, response.status)


@pytest.mark.asyncio
async def test_body_is_decoded_leniently():
    mock_response = create_mock_response(text_data="{}")
    transport = AiohttpTransport()
    transport.session = create_mock_session(mock_response)

    await transport.send("POST", URL, {}, b"{}")

    mock_response.text.assert_awaited_once_with(errors="replace")
