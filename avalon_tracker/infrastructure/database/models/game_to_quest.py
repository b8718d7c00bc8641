from sqlalchemy import Column, ForeignKey, Text
from .base import Base


class GameToQuest(Base):
    """
    遊戲與任務的關聯表。一個任務只屬於一場遊戲（由 repository 層保證）。
    """
    __tablename__ = "games_to_quests"

    game_id = Column(Text, ForeignKey("games.id"), comment="遊戲 ID")
    quest_id = Column(Text, ForeignKey("quests.id"), comment="任務 ID")

    __mapper_args__ = {"primary_key": [game_id, quest_id]}

    def __repr__(self):
        return f"<GameToQuest game={self.game_id}, quest={self.quest_id}>"
