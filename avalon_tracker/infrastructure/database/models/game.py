"""
Game 模型定義。
一場遊戲的根記錄，勝方在遊戲結束時寫入一次。
"""

from sqlalchemy import Column, Text
from .base import Base


class Game(Base):
    """
    遊戲表。

    - **id**: 遊戲識別碼（主鍵）。
    - **winner**: 勝利陣營標籤，進行中或未定時為 NULL。
    """
    __tablename__ = "games"

    id = Column(
        Text,
        primary_key=True,
        comment="遊戲識別碼"
    )

    winner = Column(
        Text,
        nullable=True,
        comment="勝利陣營，未結束時為 NULL"
    )

    def __repr__(self):
        return f"<Game id={self.id}, winner={self.winner}>"
