"""
The Odds API service for fetching NFL matchups.

One request per call: GET /sports/{sport}/odds with the API key and the
configured region and market. Responses are not cached and failed requests
are not retried.
"""
import logging
from typing import List, Dict, Optional
import httpx

from app.core import metrics
from app.core.config import settings
from app.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

MATCHUPS_ERROR_MESSAGE = "Failed to fetch NFL matchups"


class OddsApiService:
    """
    Client for The Odds API.

    Holds a single AsyncClient for connection reuse; call close() on shutdown.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = settings.ODDS_API_BASE_URL,
        sport: str = settings.ODDS_API_SPORT,
        regions: str = settings.ODDS_API_REGIONS,
        markets: str = settings.ODDS_API_MARKETS,
        timeout: float = settings.ODDS_API_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize The Odds API service.

        Args:
            api_key: The Odds API key
            base_url: API root, e.g. https://api.the-odds-api.com/v4
            sport: Sport key (americanfootball_nfl)
            regions: Bookmaker regions (us, uk, eu, au)
            markets: Odds markets (h2h, spreads, totals)
            timeout: Request timeout in seconds
            client: Pre-built HTTP client (tests inject one with a mock transport)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.sport = sport
        self.regions = regions
        self.markets = markets
        self.timeout = timeout
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def odds_url(self) -> str:
        return f"{self.base_url}/sports/{self.sport}/odds/"

    async def get_matchups(self) -> List[Dict]:
        """
        Fetch upcoming matchups with head-to-head odds.

        Returns:
            The provider's JSON array of matchup objects, unmodified

        Raises:
            UpstreamError: If the key is missing, the request fails, or the
                provider answers with a non-2xx status
        """
        if not self.api_key:
            metrics.record_odds_api_failure("missing_key")
            logger.error("The Odds API key not configured. Set THE_ODDS_API_KEY environment variable.")
            raise UpstreamError(MATCHUPS_ERROR_MESSAGE)

        params = {
            "apiKey": self.api_key,
            "regions": self.regions,
            "markets": self.markets,
        }

        try:
            client = await self._get_client()
            response = await client.get(self.odds_url, params=params)
        except httpx.HTTPError as e:
            metrics.record_odds_api_failure("transport")
            logger.error(f"Error fetching NFL matchups: {e}")
            raise UpstreamError(MATCHUPS_ERROR_MESSAGE) from e

        if not response.is_success:
            metrics.record_odds_api_failure(f"http_{response.status_code}")
            logger.error(f"The Odds API returned {response.status_code} for NFL matchups")
            raise UpstreamError(MATCHUPS_ERROR_MESSAGE)

        remaining = response.headers.get("x-requests-remaining")
        if remaining is not None:
            logger.debug(f"The Odds API requests remaining: {remaining}")

        try:
            matchups = response.json()
        except ValueError as e:
            metrics.record_odds_api_failure("invalid_json")
            logger.error(f"The Odds API returned a non-JSON body: {e}")
            raise UpstreamError(MATCHUPS_ERROR_MESSAGE) from e

        metrics.record_odds_api_success()
        return matchups


# Singleton instance
_odds_service: Optional[OddsApiService] = None


def get_odds_service(api_key: Optional[str] = None) -> OddsApiService:
    """Get or create OddsApiService singleton."""
    global _odds_service
    if _odds_service is None:
        _odds_service = OddsApiService(api_key=api_key if api_key is not None else settings.THE_ODDS_API_KEY)
    return _odds_service


async def close_odds_service() -> None:
    """Close and drop the singleton (application shutdown)."""
    global _odds_service
    if _odds_service is not None:
        await _odds_service.close()
        _odds_service = None
