"""
GameToQuest repository for database operations.
Links quests to the game that owns them.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from avalon_tracker.infrastructure.database.base_repo import BaseRepository
from avalon_tracker.infrastructure.database.models.game_to_quest import GameToQuest
from avalon_tracker.infrastructure.database.models.quest import Quest
from avalon_tracker.infrastructure.database.utils import with_session, insertion_order


class GameToQuestRepository(BaseRepository[GameToQuest]):
    """
    GameToQuest 資料庫 Repository 類。

    用法示例:
    ```python
    repo = GameToQuestRepository(database)
    repo.create_link(game_id="G1", quest_id="Q1")
    quests = repo.list_quests_for_game("G1")
    ```
    """

    model = GameToQuest
    resource_type = "game_to_quest"

    @with_session
    def get_by_quest(
        self,
        quest_id: str,
        db: Optional[Session] = None
    ) -> List[GameToQuest]:
        """
        查詢任務的所有連結（正常情況下最多一筆）。
        """
        return self.get_by(db=db, quest_id=quest_id)

    @with_session
    def create_link(
        self,
        game_id: str,
        quest_id: str,
        db: Optional[Session] = None
    ) -> GameToQuest:
        """
        新增遊戲與任務的連結。
        """
        return self.create({"game_id": game_id, "quest_id": quest_id}, db=db)

    @with_session
    def list_quests_for_game(
        self,
        game_id: str,
        db: Optional[Session] = None
    ) -> List[Quest]:
        """
        依連結順序列出遊戲的所有任務。找不到時回傳空列表。
        """
        stmt = (
            select(Quest)
            .join(GameToQuest, GameToQuest.quest_id == Quest.id)
            .where(GameToQuest.game_id == game_id)
            .order_by(*insertion_order(db, GameToQuest))
        )
        return list(db.execute(stmt).scalars().all())
