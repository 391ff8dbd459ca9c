"""
Models Module

Usage:
    from app.models import Vote, GameResult, User
"""
from app.models.models import Base, User, Vote, GameResult

__all__ = [
    "Base",
    "User",
    "Vote",
    "GameResult",
]
