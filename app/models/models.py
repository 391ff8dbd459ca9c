"""
Database models for the NFL vote API.

Models mirror the hosted Postgres schema used by the web app:
- users: owned by the session provider; only `username` is read here
- votes: one row per submitted pick
- game_results: final scores, one row per matchup
"""
from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, DateTime, Date, ForeignKey, Index
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Application user. Lifecycle is managed by the session provider."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)  # uuid from the session provider
    username = Column(String(255), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    votes = relationship("Vote", back_populates="user")


class Vote(Base):
    """A user's pick for a matchup. Never updated after insert."""
    __tablename__ = "votes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    matchup_id = Column(String(100), nullable=False, index=True)  # The Odds API event id
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    vote = Column(String(255), nullable=False)  # team picked
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    user = relationship("User", back_populates="votes")

    __table_args__ = (
        Index("ix_votes_user_matchup", "user_id", "matchup_id"),
    )


class GameResult(Base):
    """Final score of a matchup, written by upsert on matchup_id."""
    __tablename__ = "game_results"

    id = Column(Integer, primary_key=True, autoincrement=True)
    matchup_id = Column(String(100), unique=True, nullable=False)
    home_team = Column(String(255), nullable=False)
    away_team = Column(String(255), nullable=False)
    home_score = Column(Integer, nullable=False)
    away_score = Column(Integer, nullable=False)
    winner = Column(String(255), nullable=True)
    game_date = Column(Date, nullable=True, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    # Columns a caller may write; id and updated_at are managed here
    WRITABLE_FIELDS = (
        "matchup_id",
        "home_team",
        "away_team",
        "home_score",
        "away_score",
        "winner",
        "game_date",
    )
