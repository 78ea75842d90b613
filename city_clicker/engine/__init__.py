"""
City Clicker Round Engine
Core scoring and round-state engine without web framework, persistence, or UI
"""

ROUNDS_PER_GAME = 10

# Round table rows kept (newest first); oldest row is evicted when full.
HISTORY_SIZE = 10
