"""
Voting service: votes, game results and the joined reads built on them.

Wraps the vote and game result repositories, validates write payloads and
turns SQLAlchemy failures into PersistenceError so routes only deal with the
error taxonomy in app.core.exceptions.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core import metrics
from app.core.exceptions import PersistenceError, ValidationError
from app.models import GameResult, Vote
from app.repositories import GameResultRepository, VoteRepository

logger = logging.getLogger(__name__)

REQUIRED_RESULT_FIELDS = ("matchup_id", "home_team", "away_team", "home_score", "away_score")
SCORE_FIELDS = ("home_score", "away_score")


class GameResultIn(BaseModel):
    """Validated game result payload."""
    matchup_id: str = Field(..., min_length=1, max_length=100)
    home_team: str = Field(..., min_length=1)
    away_team: str = Field(..., min_length=1)
    home_score: int = Field(..., ge=0)
    away_score: int = Field(..., ge=0)
    winner: Optional[str] = None
    game_date: Optional[date] = None

    @field_validator("home_score", "away_score", mode="before")
    @classmethod
    def _reject_bool_score(cls, value):
        # bool is an int subclass; lax parsing would store true/false as 1/0
        if isinstance(value, bool):
            raise ValueError("score must be an integer, not a boolean")
        return value

    @field_validator("game_date", mode="before")
    @classmethod
    def _date_from_timestamp(cls, value):
        # Accept full ISO timestamps (e.g. commence_time) as well as plain dates
        if isinstance(value, str) and "T" in value:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        return value


def missing_result_fields(fields: Dict[str, Any]) -> List[str]:
    """
    Names of required game result fields absent from `fields`.

    Scores count as present whenever they are not None, so a score of 0 is
    valid. Text fields must also be non-empty.
    """
    missing = []
    for name in REQUIRED_RESULT_FIELDS:
        value = fields.get(name)
        if value is None:
            missing.append(name)
        elif name not in SCORE_FIELDS and isinstance(value, str) and not value.strip():
            missing.append(name)
    return missing


def vote_to_dict(vote: Vote) -> dict:
    """Convert Vote model to dictionary."""
    return {
        "id": vote.id,
        "matchup_id": vote.matchup_id,
        "user_id": vote.user_id,
        "vote": vote.vote,
        "created_at": vote.created_at.isoformat() if vote.created_at else None,
    }


def game_result_to_dict(result: GameResult) -> dict:
    """Convert GameResult model to dictionary."""
    return {
        "id": result.id,
        "matchup_id": result.matchup_id,
        "home_team": result.home_team,
        "away_team": result.away_team,
        "home_score": result.home_score,
        "away_score": result.away_score,
        "winner": result.winner,
        "game_date": result.game_date.isoformat() if result.game_date else None,
        "updated_at": result.updated_at.isoformat() if result.updated_at else None,
    }


class VotingService:
    """Read and write operations for votes and game results."""

    def __init__(self, db: Session):
        self.db = db
        self.votes = VoteRepository(db)
        self.results = GameResultRepository(db)

    def _persistence_error(self, operation: str, prefix: str, exc: SQLAlchemyError) -> PersistenceError:
        self.votes.rollback()
        metrics.record_persistence_error(operation)
        return PersistenceError(f"{prefix}: {exc}")

    # ==================== VOTES ====================

    def submit_vote(self, matchup_id: str, user_id: str, vote: str) -> dict:
        """
        Record a user's vote for a matchup.

        Repeated votes by the same user are stored as separate rows.

        Raises:
            ValidationError: If any argument is empty
            PersistenceError: If the insert is rejected (e.g. unknown user)
        """
        empty = [
            name for name, value in (("matchup_id", matchup_id), ("user_id", user_id), ("vote", vote))
            if not isinstance(value, str) or not value.strip()
        ]
        if empty:
            raise ValidationError(f"Missing required fields: {', '.join(empty)}")

        try:
            row = self.votes.create(matchup_id=matchup_id, user_id=user_id, vote=vote)
            self.votes.save()
            self.votes.refresh(row)
        except SQLAlchemyError as e:
            raise self._persistence_error("submit_vote", "Failed to submit vote", e) from e

        metrics.votes_submitted_total.inc()
        logger.info(f"Vote recorded for matchup {matchup_id}", extra={"user_id": user_id})
        return vote_to_dict(row)

    def get_votes_for_matchup(self, matchup_id: str) -> List[dict]:
        try:
            rows = self.votes.find_by_matchup(matchup_id)
        except SQLAlchemyError as e:
            raise self._persistence_error("get_votes_for_matchup", "Failed to fetch votes", e) from e
        return [vote_to_dict(v) for v in rows]

    def get_vote_counts(self, matchup_id: str) -> List[dict]:
        """Per-team vote tally for a matchup, most popular pick first."""
        try:
            rows = self.votes.count_by_vote(matchup_id)
        except SQLAlchemyError as e:
            raise self._persistence_error("get_vote_counts", "Failed to fetch votes", e) from e
        return [{"vote": vote, "count": count} for vote, count in rows]

    # ==================== GAME RESULTS ====================

    def get_game_results(self) -> List[dict]:
        """All game results, newest game first. Empty list when none exist."""
        try:
            rows = self.results.find_all_by_date()
        except SQLAlchemyError as e:
            raise self._persistence_error("get_game_results", "Failed to fetch game results", e) from e
        return [game_result_to_dict(r) for r in rows]

    def upsert_game_result(self, fields: Dict[str, Any]) -> List[dict]:
        """
        Create or replace the result for `fields["matchup_id"]`.

        `winner` and `game_date` are optional; a write without them clears
        any previously stored value.

        Returns:
            The written row, wrapped in a list

        Raises:
            ValidationError: If required fields are missing or malformed
            PersistenceError: If the write fails
        """
        if not isinstance(fields, dict):
            raise ValidationError("Request body must be a JSON object")

        missing = missing_result_fields(fields)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        try:
            payload = GameResultIn(**{name: fields.get(name) for name in GameResult.WRITABLE_FIELDS})
        except PydanticValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            raise ValidationError(f"Invalid value for {location}: {first['msg']}") from e

        try:
            row = self.results.upsert_result(payload.model_dump())
            self.results.save()
        except SQLAlchemyError as e:
            raise self._persistence_error("upsert_game_result", "Failed to store game result", e) from e

        metrics.game_results_upserted_total.inc()
        logger.info(f"Stored result for matchup {payload.matchup_id}")
        return [game_result_to_dict(row)]

    # ==================== USER RESULTS ====================

    def get_user_results(self, user_id: str) -> List[dict]:
        """
        A user's votes on finished matchups, each with a nested `game_results` row.
        """
        try:
            rows = self.votes.find_with_results_for_user(user_id)
        except SQLAlchemyError as e:
            raise self._persistence_error("get_user_results", "Failed to fetch user results", e) from e
        return [
            {**vote_to_dict(vote), "game_results": game_result_to_dict(result)}
            for vote, result in rows
        ]

    def get_all_user_results(self) -> List[dict]:
        """
        Every vote with the voter's username and the matchup result, if any.
        """
        try:
            rows = self.votes.find_all_with_users_and_results()
        except SQLAlchemyError as e:
            raise self._persistence_error("get_all_user_results", "Failed to fetch user results", e) from e
        return [
            {
                **vote_to_dict(vote),
                "users": {"username": username},
                "game_results": game_result_to_dict(result) if result is not None else None,
            }
            for vote, username, result in rows
        ]
