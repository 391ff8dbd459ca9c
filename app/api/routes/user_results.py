"""
User results API routes.

Base path: /api/user-results

Pairs votes with final game results so the leaderboard and profile pages can
score each pick.
"""
import logging

from fastapi import APIRouter, Depends

from app.api.dependencies import get_voting_service
from app.core.exceptions import VoteApiError, error_response
from app.services.voting_service import VotingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user-results", tags=["user-results"])


@router.get("")
def list_all_user_results(service: VotingService = Depends(get_voting_service)):
    """Every vote with its voter's username and the result when one exists."""
    try:
        return service.get_all_user_results()
    except VoteApiError as e:
        logger.error(f"Error fetching user results: {e.message}")
        return error_response(e, "Failed to fetch user results")


@router.get("/{user_id}")
def list_user_results(user_id: str, service: VotingService = Depends(get_voting_service)):
    """A user's votes on matchups that have a recorded result."""
    try:
        return service.get_user_results(user_id)
    except VoteApiError as e:
        logger.error(f"Error fetching results for user {user_id}: {e.message}")
        return error_response(e, "Failed to fetch user results")
