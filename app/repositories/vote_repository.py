"""
Vote Repository for vote data access.

Usage:
    repo = VoteRepository(db)
    repo.create(matchup_id="abc123", user_id=user_id, vote="Kansas City Chiefs")
    votes = repo.find_by_matchup("abc123")
    rows = repo.find_with_results_for_user(user_id)
"""
from typing import List, Optional, Tuple

from app.models import Vote, GameResult, User
from app.repositories.base import BaseRepository


class VoteRepository(BaseRepository[Vote]):
    """Repository for votes and the joins that pair them with users and results."""

    def __init__(self, db):
        super().__init__(Vote, db)

    def find_by_matchup(self, matchup_id: str) -> List[Vote]:
        """All votes cast for a matchup, oldest first."""
        return (
            self.query()
            .filter(Vote.matchup_id == matchup_id)
            .order_by(Vote.created_at, Vote.id)
            .all()
        )

    def count_by_vote(self, matchup_id: str) -> List[Tuple[str, int]]:
        """Tally of votes per team for a matchup: [(vote, count), ...]."""
        return self.group_by_and_count("vote", Vote.matchup_id == matchup_id)

    def find_with_results_for_user(self, user_id: str) -> List[Tuple[Vote, GameResult]]:
        """
        A user's votes paired with the final result of each matchup.

        Inner join: votes on matchups without a recorded result are left out.
        """
        return (
            self.db.query(Vote, GameResult)
            .join(GameResult, GameResult.matchup_id == Vote.matchup_id)
            .filter(Vote.user_id == user_id)
            .order_by(Vote.created_at, Vote.id)
            .all()
        )

    def find_all_with_users_and_results(self) -> List[Tuple[Vote, str, Optional[GameResult]]]:
        """
        Every vote with its voter's username and, when recorded, the result.

        Votes whose user row is missing are dropped (inner join on users);
        votes on unfinished matchups are kept with a None result (left join).
        """
        return (
            self.db.query(Vote, User.username, GameResult)
            .join(User, User.id == Vote.user_id)
            .outerjoin(GameResult, GameResult.matchup_id == Vote.matchup_id)
            .order_by(Vote.created_at, Vote.id)
            .all()
        )
