"""
FastAPI dependencies shared by the route modules.

Tests swap these out through `app.dependency_overrides`.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.services.odds_api_service import OddsApiService, get_odds_service
from app.services.voting_service import VotingService


def get_voting_service(db: Session = Depends(get_db)) -> VotingService:
    return VotingService(db)


def get_odds_api_service() -> OddsApiService:
    return get_odds_service()
