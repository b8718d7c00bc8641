"""
Quest repository for database operations.
"""

from typing import Optional

from sqlalchemy.orm import Session

from avalon_tracker.infrastructure.database.base_repo import BaseRepository
from avalon_tracker.infrastructure.database.models.quest import Quest
from avalon_tracker.infrastructure.database.utils import with_session


class QuestRepository(BaseRepository[Quest]):
    """
    Quest 資料庫 Repository 類。

    用法示例:
    ```python
    repo = QuestRepository(database)
    repo.create_quest(quest_id="Q1", status="pending")
    repo.record_outcome("Q1", fails=1, status="failed")
    ```
    """

    model = Quest
    resource_type = "quest"

    @with_session
    def create_quest(
        self,
        quest_id: str,
        status: str,
        fails: int = 0,
        db: Optional[Session] = None
    ) -> Quest:
        """
        創建新的任務。

        Args:
            quest_id: 任務識別碼
            status: 初始狀態
            fails: 失敗票數（新任務為 0）
            db: 可選的資料庫 Session

        Returns:
            新創建的 Quest 實體

        Raises:
            DuplicateKeyError: 如果 quest_id 已存在
        """
        return self.create(
            {"id": quest_id, "fails": fails, "status": status},
            db=db
        )

    @with_session
    def record_outcome(
        self,
        quest_id: str,
        fails: int,
        status: str,
        db: Optional[Session] = None
    ) -> Quest:
        """
        更新任務的失敗票數與狀態。

        Raises:
            ResourceNotFoundError: 如果找不到任務
        """
        return self.update(quest_id, {"fails": fails, "status": status}, db=db)
