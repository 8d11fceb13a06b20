"""Challenge engine services: scoring, lifecycle, guess commit, leaderboard.

This package contains the game logic proper and is imported by HTTP routes,
keeping transport concerns separated from core game mechanics.
"""
