"""
NFL matchups API route.

Base path: /api/nfl-matchups

Proxies The Odds API: upcoming NFL games with head-to-head odds.
"""
import logging

from fastapi import APIRouter, Depends

from app.api.dependencies import get_odds_api_service
from app.core.exceptions import VoteApiError, error_response
from app.services.odds_api_service import OddsApiService, MATCHUPS_ERROR_MESSAGE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/nfl-matchups", tags=["nfl-matchups"])


@router.get("")
async def list_nfl_matchups(service: OddsApiService = Depends(get_odds_api_service)):
    """Upcoming NFL matchups as returned by the odds provider."""
    try:
        return await service.get_matchups()
    except VoteApiError as e:
        logger.error(f"Error fetching NFL matchups: {e.message}")
        return error_response(e, MATCHUPS_ERROR_MESSAGE)
