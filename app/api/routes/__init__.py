"""
API routes.

- game_results: stored final scores (GET/POST /api/game-results)
- nfl_matchups: odds provider proxy (GET /api/nfl-matchups)
- votes: vote submission and tallies (/api/votes)
- user_results: votes joined with results (/api/user-results)
"""
