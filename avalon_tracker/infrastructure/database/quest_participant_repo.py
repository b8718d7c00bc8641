"""
QuestParticipant repository for database operations.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from avalon_tracker.infrastructure.database.base_repo import BaseRepository
from avalon_tracker.infrastructure.database.models.quest_participant import QuestParticipant
from avalon_tracker.infrastructure.database.utils import with_session


class QuestParticipantRepository(BaseRepository[QuestParticipant]):
    """
    QuestParticipant 資料庫 Repository 類，記錄任務成員與其任務內角色。
    """

    model = QuestParticipant
    resource_type = "quest_participant"

    @with_session
    def get_by_quest_and_name(
        self,
        quest_id: str,
        name: str,
        db: Optional[Session] = None
    ) -> Optional[QuestParticipant]:
        results = self.get_by(db=db, quest_id=quest_id, name=name)
        return results[0] if results else None

    @with_session
    def create_participant(
        self,
        quest_id: str,
        name: str,
        role: str,
        db: Optional[Session] = None
    ) -> QuestParticipant:
        return self.create(
            {"quest_id": quest_id, "name": name, "role": role},
            db=db
        )

    @with_session
    def list_by_quest(
        self,
        quest_id: str,
        db: Optional[Session] = None
    ) -> List[QuestParticipant]:
        """
        依寫入順序列出任務參與者。找不到時回傳空列表。
        """
        return self.get_by(db=db, quest_id=quest_id)
