"""
Game 相關的 DTO (Data Transfer Objects)。
包含 store 回傳的唯讀記錄，以及匯入／重建整場遊戲用的資料結構。
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from avalon_tracker.domain.models.game import Alignment, QuestStatus, Role, VictoryType

# ========== 資料表記錄 ==========


class GameRecord(BaseModel):
    """
    games 資料表的一列。
    """
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str = Field(..., description="遊戲識別碼")
    winner: Optional[str] = Field(None, description="勝利陣營，未結束時為 None")


class PlayerRoleRecord(BaseModel):
    """
    player_roles 資料表的一列。
    """
    model_config = ConfigDict(from_attributes=True, frozen=True)

    game_id: str = Field(..., description="所屬遊戲 ID")
    name: str = Field(..., description="玩家名稱")
    role: str = Field(..., description="遊戲層級的角色")


class QuestRecord(BaseModel):
    """
    quests 資料表的一列。
    """
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str = Field(..., description="任務識別碼")
    fails: Optional[int] = Field(0, description="失敗票數")
    status: str = Field(..., description="任務狀態")


class QuestParticipantRecord(BaseModel):
    """
    quest_participants 資料表的一列。
    """
    model_config = ConfigDict(from_attributes=True, frozen=True)

    quest_id: str = Field(..., description="任務 ID")
    name: str = Field(..., description="玩家名稱")
    role: str = Field(..., description="任務層級的角色")


# ========== 整場遊戲 ==========


class QuestParticipantInfo(BaseModel):
    """
    任務成員。未提供 role 時，記錄時沿用玩家的遊戲角色。
    """
    name: str = Field(..., description="玩家名稱")
    role: Optional[str] = Field(None, description="任務層級的角色")


class QuestInfo(BaseModel):
    """
    一輪任務。

    participants 可以是名稱字串，也可以是 {name, role}。
    """
    id: Optional[str] = Field(None, description="任務識別碼，匯入時可省略")
    status: QuestStatus = Field(..., description="任務狀態")
    fails: Optional[int] = Field(None, ge=0, description="失敗票數")
    participants: List[QuestParticipantInfo] = Field(default_factory=list, description="任務成員")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "fail",
                "fails": 1,
                "participants": ["player1", "player2", {"name": "player4", "role": "leader"}]
            }
        }
    )

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> QuestStatus:
        return QuestStatus.parse(value)

    @field_validator("participants", mode="before")
    @classmethod
    def _parse_participants(cls, value: Any) -> Any:
        if value is None:
            return []
        return [{"name": item} if isinstance(item, str) else item for item in value]


class EndResult(BaseModel):
    """
    遊戲結果。
    """
    model_config = ConfigDict(populate_by_name=True)

    winner: Alignment = Field(..., description="勝利陣營")
    victory_type: Optional[VictoryType] = Field(None, alias="type", description="勝利方式")

    @field_validator("winner", mode="before")
    @classmethod
    def _parse_winner(cls, value: Any) -> Alignment:
        return Alignment.parse(value)


class GameInfo(BaseModel):
    """
    一整場遊戲：玩家角色、任務與結果。格式與 YAML 匯入檔相同。
    """
    id: Optional[str] = Field(None, description="遊戲識別碼，匯入時可省略")
    players: Dict[str, Role] = Field(..., description="玩家名稱 -> 角色")
    quests: List[QuestInfo] = Field(default_factory=list, description="依序進行的任務")
    result: Optional[EndResult] = Field(None, description="遊戲結果，進行中為 None")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "players": {"player1": "merlin", "player2": "morgana", "player3": "servant"},
                "quests": [{"status": "success", "fails": 0, "participants": ["player1", "player3"]}],
                "result": {"winner": "evil", "type": "assassination"}
            }
        }
    )

    @field_validator("players", mode="before")
    @classmethod
    def _parse_players(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {str(name): Role.parse(role) for name, role in value.items()}

    def players_with_alignment(self, alignment: Alignment) -> List[str]:
        return [name for name, role in self.players.items() if role.alignment is alignment]

    def winners(self) -> List[str]:
        """
        勝利陣營的所有玩家；遊戲尚未結束時為空列表。
        """
        if self.result is None:
            return []
        return self.players_with_alignment(self.result.winner)
