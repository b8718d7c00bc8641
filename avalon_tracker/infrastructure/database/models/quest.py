from sqlalchemy import Column, Integer, Text
from .base import Base


class Quest(Base):
    """
    任務表：一場遊戲中的一輪任務及其結果。
    """
    __tablename__ = "quests"

    id = Column(Text, primary_key=True, comment="任務識別碼")
    fails = Column(Integer, comment="失敗票數")
    status = Column(Text, comment="任務狀態（pending / succeeded / failed）")

    def __repr__(self):
        return f"<Quest id={self.id}, fails={self.fails}, status={self.status}>"
