"""Tests for OddsApiService with a mocked HTTP transport."""
import httpx
import pytest

from app.core.exceptions import UpstreamError
from app.services.odds_api_service import OddsApiService, MATCHUPS_ERROR_MESSAGE


class TestOddsApiService:
    """get_matchups() request shape and error mapping."""

    @pytest.mark.asyncio
    async def test_get_matchups_returns_payload(self, make_odds_service, sample_matchups):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=sample_matchups)

        service = make_odds_service(handler)
        matchups = await service.get_matchups()
        await service.close()

        assert matchups == sample_matchups
        assert len(seen) == 1
        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == "/v4/sports/americanfootball_nfl/odds/"
        assert request.url.params["apiKey"] == "test-key"
        assert request.url.params["regions"] == "us"
        assert request.url.params["markets"] == "h2h"

    @pytest.mark.asyncio
    async def test_get_matchups_empty_slate(self, make_odds_service):
        service = make_odds_service(lambda request: httpx.Response(200, json=[]))

        assert await service.get_matchups() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 422, 429, 500])
    async def test_non_success_status_raises(self, make_odds_service, status):
        service = make_odds_service(
            lambda request: httpx.Response(status, json={"message": "Invalid API key"})
        )

        with pytest.raises(UpstreamError) as exc_info:
            await service.get_matchups()

        assert exc_info.value.message == MATCHUPS_ERROR_MESSAGE
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, make_odds_service):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        service = make_odds_service(handler)

        with pytest.raises(UpstreamError):
            await service.get_matchups()

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, make_odds_service):
        service = make_odds_service(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(UpstreamError):
            await service.get_matchups()

    @pytest.mark.asyncio
    async def test_missing_api_key_skips_request(self, make_odds_service):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=[])

        service = make_odds_service(handler, api_key="")

        with pytest.raises(UpstreamError):
            await service.get_matchups()
        assert calls == []

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        service = OddsApiService(api_key="k")
        await service._get_client()

        await service.close()
        await service.close()

        assert service._client is None

    def test_odds_url_uses_configured_sport(self):
        service = OddsApiService(api_key="k", base_url="https://example.test/v4/", sport="americanfootball_ncaaf")

        assert service.odds_url == "https://example.test/v4/sports/americanfootball_ncaaf/odds/"
