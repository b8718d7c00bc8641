from sqlalchemy import Column, ForeignKey, Text
from .base import Base


class QuestParticipant(Base):
    """
    任務參與者表：玩家在某個任務中的角色（例如 leader / member）。
    """
    __tablename__ = "quest_participants"

    quest_id = Column(Text, ForeignKey("quests.id"), comment="任務 ID")
    name = Column(Text, comment="玩家名稱")
    role = Column(Text, comment="任務層級的角色")

    __mapper_args__ = {"primary_key": [quest_id, name]}

    def __repr__(self):
        return f"<QuestParticipant quest={self.quest_id}, name={self.name}, role={self.role}>"
