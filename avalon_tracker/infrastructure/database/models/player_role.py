from sqlalchemy import Column, Text
from .base import Base


class PlayerRole(Base):
    """
    玩家角色表：記錄玩家在某場遊戲中的身分。

    資料表本身沒有主鍵與外鍵；(game_id, name) 的唯一性由 repository 層保證，
    mapper 以此作為邏輯主鍵。
    """
    __tablename__ = "player_roles"

    game_id = Column(Text, comment="所屬遊戲 ID（邏輯上參照 games.id）")
    name = Column(Text, comment="玩家名稱")
    role = Column(Text, comment="遊戲層級的角色")

    __mapper_args__ = {"primary_key": [game_id, name]}

    def __repr__(self):
        return f"<PlayerRole game={self.game_id}, name={self.name}, role={self.role}>"
