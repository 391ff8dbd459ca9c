"""
Vote API routes.

Base path: /api/votes

The voter is taken from the request context (X-User-Id forwarded by the
session provider), never from the body.
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from app.api.dependencies import get_voting_service
from app.core.context import RequestContext, get_request_context
from app.core.exceptions import ValidationError, VoteApiError, error_response
from app.services.voting_service import VotingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("")
async def submit_vote(
    request: Request,
    context: RequestContext = Depends(get_request_context),
    service: VotingService = Depends(get_voting_service),
):
    """
    Record the session user's pick for a matchup.

    Body: `{matchup_id, vote}` where `vote` is the team picked.
    """
    try:
        try:
            body = await request.json()
        except ValueError as e:
            raise ValidationError("Request body must be valid JSON") from e
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")

        user_id = context.require_user()
        data = await run_in_threadpool(
            service.submit_vote, body.get("matchup_id"), user_id, body.get("vote")
        )
        return {"success": True, "data": data}
    except ValidationError as e:
        logger.warning(f"Rejected vote: {e.message}")
        return error_response(e)
    except VoteApiError as e:
        logger.error(f"Error submitting vote: {e.message}")
        return error_response(e, "Failed to submit vote")


@router.get("/{matchup_id}")
def list_votes(matchup_id: str, service: VotingService = Depends(get_voting_service)):
    """All votes cast for a matchup."""
    try:
        return service.get_votes_for_matchup(matchup_id)
    except VoteApiError as e:
        logger.error(f"Error fetching votes for {matchup_id}: {e.message}")
        return error_response(e, "Failed to fetch votes")


@router.get("/{matchup_id}/counts")
def vote_counts(matchup_id: str, service: VotingService = Depends(get_voting_service)):
    """Vote tally per team for a matchup."""
    try:
        return service.get_vote_counts(matchup_id)
    except VoteApiError as e:
        logger.error(f"Error counting votes for {matchup_id}: {e.message}")
        return error_response(e, "Failed to fetch votes")
