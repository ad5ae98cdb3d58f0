"""Ranked leaderboard with cached fallback."""
