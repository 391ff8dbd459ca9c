"""
Repository layer for data access.

Usage:
    from app.repositories import VoteRepository, GameResultRepository
    from app.core.database import get_session_factory

    db = get_session_factory()()
    results = GameResultRepository(db).find_all_by_date()
    db.close()
"""

from app.repositories.base import BaseRepository
from app.repositories.vote_repository import VoteRepository
from app.repositories.game_result_repository import GameResultRepository

__all__ = [
    "BaseRepository",
    "VoteRepository",
    "GameResultRepository",
]
