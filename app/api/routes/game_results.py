"""
Game results API routes.

Base path: /api/game-results

- GET: every stored result, newest game first
- POST: create or replace the result for a matchup
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from app.api.dependencies import get_voting_service
from app.core.exceptions import ValidationError, VoteApiError, error_response
from app.services.voting_service import VotingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/game-results", tags=["game-results"])


@router.get("")
def list_game_results(service: VotingService = Depends(get_voting_service)):
    """
    List all game results ordered by game date, most recent first.

    Returns an empty array when no results have been recorded.
    """
    try:
        return service.get_game_results()
    except VoteApiError as e:
        logger.error(f"Error fetching game results: {e.message}")
        return error_response(e, "Failed to fetch game results")


@router.post("")
async def store_game_result(request: Request, service: VotingService = Depends(get_voting_service)):
    """
    Store the final score of a matchup.

    Body: `{matchup_id, home_team, away_team, home_score, away_score, winner?, game_date?}`.
    Posting the same `matchup_id` again replaces the stored result.

    Responses:
    - 200 `{"success": true, "data": [row]}`
    - 400 when required fields are missing or the body is not valid JSON
    - 500 when the write fails
    """
    try:
        try:
            body = await request.json()
        except ValueError as e:
            raise ValidationError("Request body must be valid JSON") from e

        data = await run_in_threadpool(service.upsert_game_result, body)
        return {"success": True, "data": data}
    except ValidationError as e:
        logger.warning(f"Rejected game result: {e.message}")
        return error_response(e)
    except VoteApiError as e:
        logger.error(f"Error storing game result: {e.message}")
        return error_response(e, "Failed to store game result")
