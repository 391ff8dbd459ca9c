"""
Game Result Repository for final score data access.

Usage:
    repo = GameResultRepository(db)
    repo.upsert_result({"matchup_id": "abc123", "home_team": ..., ...})
    results = repo.find_all_by_date()
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.models import GameResult
from app.repositories.base import BaseRepository


class GameResultRepository(BaseRepository[GameResult]):
    """Repository for game results keyed by matchup."""

    def __init__(self, db):
        super().__init__(GameResult, db)

    def find_by_matchup_id(self, matchup_id: str) -> Optional[GameResult]:
        return self.filter_by_first(matchup_id=matchup_id)

    def find_all_by_date(self) -> List[GameResult]:
        """All results, most recent game first; undated results last."""
        return self.find_all(order_by="-game_date")

    def upsert_result(self, values: Dict[str, Any]) -> GameResult:
        """
        Write or replace the result for `values["matchup_id"]`.

        Returns:
            The stored row as re-read from the database (not yet committed)
        """
        row = dict(values, updated_at=datetime.now(timezone.utc))
        self.upsert(row, conflict_fields=("matchup_id",))
        self.flush()
        return self.find_by_matchup_id(values["matchup_id"])
