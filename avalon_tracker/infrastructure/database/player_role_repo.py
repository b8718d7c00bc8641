"""
PlayerRole repository for database operations.
Provides synchronous operations for PlayerRole entities.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from avalon_tracker.infrastructure.database.base_repo import BaseRepository
from avalon_tracker.infrastructure.database.models.player_role import PlayerRole
from avalon_tracker.infrastructure.database.utils import with_session


class PlayerRoleRepository(BaseRepository[PlayerRole]):
    """
    PlayerRole 資料庫 Repository 類。

    player_roles 沒有唯一鍵，查詢時以 get_by 取得全部符合的列，
    而不是依賴 mapper 的邏輯主鍵。

    用法示例:
    ```python
    repo = PlayerRoleRepository(database)
    repo.create_player_role(game_id="G1", name="Alice", role="merlin")
    roles = repo.list_by_game("G1")
    ```
    """

    model = PlayerRole
    resource_type = "player_role"

    @with_session
    def get_by_game_and_name(
        self,
        game_id: str,
        name: str,
        db: Optional[Session] = None
    ) -> Optional[PlayerRole]:
        """
        查詢玩家在指定遊戲中的角色，找不到時回傳 None。
        """
        results = self.get_by(db=db, game_id=game_id, name=name)
        return results[0] if results else None

    @with_session
    def create_player_role(
        self,
        game_id: str,
        name: str,
        role: str,
        db: Optional[Session] = None
    ) -> PlayerRole:
        """
        新增一筆玩家角色。

        Args:
            game_id: 所屬遊戲 ID
            name: 玩家名稱
            role: 角色名稱
            db: 可選的資料庫 Session

        Returns:
            新創建的 PlayerRole 實體
        """
        return self.create(
            {"game_id": game_id, "name": name, "role": role},
            db=db
        )

    @with_session
    def list_by_game(
        self,
        game_id: str,
        db: Optional[Session] = None
    ) -> List[PlayerRole]:
        """
        依寫入順序列出遊戲中所有玩家角色。找不到時回傳空列表。
        """
        return self.get_by(db=db, game_id=game_id)
