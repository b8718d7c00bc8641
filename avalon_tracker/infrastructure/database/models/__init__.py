from .base import Base
from .game import Game
from .player_role import PlayerRole
from .quest import Quest
from .game_to_quest import GameToQuest
from .quest_participant import QuestParticipant

__all__ = [
    "Base",
    "Game",
    "PlayerRole",
    "Quest",
    "GameToQuest",
    "QuestParticipant",
]
