"""
Services module.

- odds_api_service: The Odds API client for NFL matchups
- voting_service: votes, game results and the reads that join them
"""
