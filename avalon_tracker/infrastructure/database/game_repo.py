"""
Game repository for database operations.
Provides CRUD operations for Game entities.
"""
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from avalon_tracker.infrastructure.database.base_repo import BaseRepository
from avalon_tracker.infrastructure.database.models.game import Game
from avalon_tracker.infrastructure.database.utils import with_session, insertion_order


class GameRepository(BaseRepository[Game]):
    """
    Game 資料庫 Repository 類，提供對 Game 實體的基本操作。

    用法示例:
    ```python
    repo = GameRepository(database)

    game = repo.create_game("G1")
    repo.set_winner("G1", "evil")
    ids = repo.list_ids()
    ```
    """

    model = Game
    resource_type = "game"

    @with_session
    def create_game(
        self,
        game_id: str,
        db: Optional[Session] = None
    ) -> Game:
        """
        創建新的遊戲記錄。

        Args:
            game_id: 遊戲識別碼
            db: 可選的資料庫 Session

        Returns:
            新創建的 Game 實體

        Raises:
            DuplicateKeyError: 如果 game_id 已存在
        """
        return self.create({"id": game_id, "winner": None}, db=db)

    @with_session
    def set_winner(
        self,
        game_id: str,
        winner: str,
        db: Optional[Session] = None
    ) -> Game:
        """
        寫入勝利陣營。是否允許覆寫由呼叫端決定。

        Raises:
            ResourceNotFoundError: 如果找不到遊戲
        """
        return self.update(game_id, {"winner": winner}, db=db)

    @with_session
    def list_ids(self, db: Optional[Session] = None) -> List[str]:
        """
        依寫入順序列出所有遊戲 ID。
        """
        stmt = select(Game.id).order_by(*insertion_order(db, Game))
        return list(db.execute(stmt).scalars().all())
