"""Bitquery 클라이언트 테스트 (가짜 aiohttp 세션)."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from collectors.api_client import (
    BitqueryClient,
    BitqueryClientConfig,
    BitqueryError,
    get_api_key,
)


class FakeResponse:
    def __init__(self, status=200, payload=None, text=""):
        self.status = status
        self._payload = payload
        self._text = text

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def text(self):
        return self._text

    async def json(self, content_type="application/json"):
        return self._payload


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.calls = []
        self.closed = False

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        return self.response

    async def close(self):
        self.closed = True


class TestExecute:
    """BitqueryClient.execute 테스트."""

    @pytest.mark.asyncio
    async def test_returns_data(self):
        session = FakeSession(FakeResponse(payload={"data": {"EVM": {"DEXTrades": []}}}))
        client = BitqueryClient("secret", session=session)

        data = await client.execute("https://x/graphql", "query Q", {"network": "eth"})

        assert data == {"EVM": {"DEXTrades": []}}
        url, kwargs = session.calls[0]
        assert url == "https://x/graphql"
        assert kwargs["json"] == {"query": "query Q", "variables": {"network": "eth"}}
        assert kwargs["headers"]["Authorization"] == "Bearer secret"
        assert kwargs["headers"]["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_timeout_from_config(self):
        session = FakeSession(FakeResponse(payload={"data": {}}))
        client = BitqueryClient("k", config=BitqueryClientConfig(total_timeout=7), session=session)
        await client.execute("https://x", "q")
        timeout = session.calls[0][1]["timeout"]
        assert timeout.total == 7

    @pytest.mark.asyncio
    async def test_no_variables(self):
        session = FakeSession(FakeResponse(payload={"data": {}}))
        await BitqueryClient("k", session=session).execute("https://x", "q")
        assert session.calls[0][1]["json"] == {"query": "q"}

    @pytest.mark.asyncio
    async def test_http_error(self):
        session = FakeSession(FakeResponse(status=401, text="Unauthorized"))
        client = BitqueryClient("k", session=session)

        with pytest.raises(BitqueryError) as exc_info:
            await client.execute("https://x", "q")

        assert exc_info.value.status == 401
        assert "401" in str(exc_info.value)
        assert "Unauthorized" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_graphql_errors(self):
        payload = {"errors": [{"message": "Unknown field"}, {"message": "other"}], "data": None}
        client = BitqueryClient("k", session=FakeSession(FakeResponse(payload=payload)))
        with pytest.raises(BitqueryError, match="Unknown field"):
            await client.execute("https://x", "q")

    @pytest.mark.asyncio
    async def test_missing_data(self):
        client = BitqueryClient("k", session=FakeSession(FakeResponse(payload={"foo": 1})))
        with pytest.raises(BitqueryError):
            await client.execute("https://x", "q")

    @pytest.mark.asyncio
    async def test_non_object_body(self):
        client = BitqueryClient("k", session=FakeSession(FakeResponse(payload=["x"])))
        with pytest.raises(BitqueryError):
            await client.execute("https://x", "q")


class TestSessionLifecycle:
    @pytest.mark.asyncio
    async def test_injected_session_not_closed(self):
        session = FakeSession(FakeResponse(payload={"data": {}}))
        async with BitqueryClient("k", session=session) as client:
            await client.execute("https://x", "q")
        assert session.closed is False

    @pytest.mark.asyncio
    async def test_owned_session_closed(self, monkeypatch):
        session = MagicMock()
        session.closed = False
        session.close = AsyncMock()
        monkeypatch.setattr("collectors.api_client.aiohttp.ClientSession", lambda: session)

        client = BitqueryClient("k")
        assert await client._get_session() is session
        await client.close()
        session.close.assert_awaited_once()


class TestGetApiKey:
    def test_present(self, monkeypatch):
        monkeypatch.setenv("TEST_BITQUERY_KEY", "abcd1234")
        assert get_api_key("TEST_BITQUERY_KEY") == "abcd1234"

    def test_missing_optional(self, monkeypatch):
        monkeypatch.delenv("TEST_BITQUERY_KEY", raising=False)
        assert get_api_key("TEST_BITQUERY_KEY") is None

    def test_missing_required(self, monkeypatch):
        monkeypatch.delenv("TEST_BITQUERY_KEY", raising=False)
        with pytest.raises(ValueError):
            get_api_key("TEST_BITQUERY_KEY", required=True)
