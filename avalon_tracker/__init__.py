"""
Avalon tracker.
Durable record of finished (and in-progress) Avalon games: roles, quests, outcomes.
"""

__version__ = "0.1.0"
