"""
Game record store.
Creates, mutates and reads games, quests and their associations, enforcing the
consistency rules the raw tables leave unchecked.
"""
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from avalon_tracker.application.dto.game_dto import (
    GameRecord, PlayerRoleRecord, QuestRecord, QuestParticipantRecord,
    GameInfo, QuestInfo, QuestParticipantInfo, EndResult
)
from avalon_tracker.domain.logic.game_result import infer_victory_type
from avalon_tracker.domain.models.game import Alignment, QuestStatus, Role
from avalon_tracker.infrastructure.database.session import Database
from avalon_tracker.infrastructure.database.game_repo import GameRepository
from avalon_tracker.infrastructure.database.player_role_repo import PlayerRoleRepository
from avalon_tracker.infrastructure.database.quest_repo import QuestRepository
from avalon_tracker.infrastructure.database.game_to_quest_repo import GameToQuestRepository
from avalon_tracker.infrastructure.database.quest_participant_repo import QuestParticipantRepository
from avalon_tracker.infrastructure.database.models import Game, Quest
from avalon_tracker.utils.exceptions import (
    AppException, ResourceNotFoundError, DuplicateKeyError, DuplicateAssignmentError,
    AlreadyLinkedError, AlreadySetError, InvalidArgumentError
)
from avalon_tracker.utils.logger import logger


class GameRecordStore:
    """
    遊戲記錄的存取層。

    每個寫入操作都在單一交易中完成；違反規則時拋出對應的例外，
    交易整體回滾，不會留下部分寫入。

    用法示例:
    ```python
    with Database() as database:
        database.create_schema()
        store = GameRecordStore(database)

        store.create_game("G1")
        store.assign_role("G1", "Alice", "merlin")
        store.create_quest("Q1", "pending")
        store.link_quest_to_game("G1", "Q1")
        store.add_quest_participant("Q1", "Alice", "leader")
        store.record_quest_outcome("Q1", 1, "failed")
        store.set_winner("G1", "evil")
    ```
    """

    def __init__(
        self,
        database: Database,
        game_repo: Optional[GameRepository] = None,
        role_repo: Optional[PlayerRoleRepository] = None,
        quest_repo: Optional[QuestRepository] = None,
        link_repo: Optional[GameToQuestRepository] = None,
        participant_repo: Optional[QuestParticipantRepository] = None
    ):
        self.database = database
        self.game_repo = game_repo or GameRepository(database)
        self.role_repo = role_repo or PlayerRoleRepository(database)
        self.quest_repo = quest_repo or QuestRepository(database)
        self.link_repo = link_repo or GameToQuestRepository(database)
        self.participant_repo = participant_repo or QuestParticipantRepository(database)

    # ========== 寫入操作 ==========

    def create_game(self, game_id: str) -> GameRecord:
        """
        建立新遊戲，勝方初始為未設定。

        Raises:
            DuplicateKeyError: game_id 已存在
            InvalidArgumentError: game_id 為空白
        """
        with self.database.session_scope() as db:
            game = self._create_game(db, game_id)
            record = GameRecord.model_validate(game)
        logger.info("Game created", extra={"game_id": game_id})
        return record

    def set_winner(self, game_id: str, winner: str) -> GameRecord:
        """
        寫入勝方。勝方只能寫入一次，已寫入時拋出 AlreadySetError 而非覆寫。

        Raises:
            ResourceNotFoundError: 找不到遊戲
            AlreadySetError: 勝方已記錄
        """
        with self.database.session_scope() as db:
            game = self._set_winner(db, game_id, winner)
            record = GameRecord.model_validate(game)
        logger.info("Game winner recorded", extra={"game_id": game_id, "winner": winner})
        return record

    def assign_role(self, game_id: str, player_name: str, role: str) -> PlayerRoleRecord:
        """
        記錄玩家在遊戲中的角色；每位玩家在同一場遊戲只能有一個角色。

        Raises:
            ResourceNotFoundError: 找不到遊戲
            DuplicateAssignmentError: 玩家已有角色
        """
        with self.database.session_scope() as db:
            player_role = self._assign_role(db, game_id, player_name, role)
            record = PlayerRoleRecord.model_validate(player_role)
        logger.info("Role assigned", extra={"game_id": game_id, "player": player_name, "role": role})
        return record

    def create_quest(self, quest_id: str, initial_status: str = QuestStatus.PENDING.value) -> QuestRecord:
        """
        建立新任務，失敗票數初始為 0。

        Raises:
            DuplicateKeyError: quest_id 已存在
            InvalidStatusError: 狀態不在允許集合內
        """
        with self.database.session_scope() as db:
            quest = self._create_quest(db, quest_id, initial_status)
            record = QuestRecord.model_validate(quest)
        logger.info("Quest created", extra={"quest_id": quest_id, "status": record.status})
        return record

    def link_quest_to_game(self, game_id: str, quest_id: str) -> None:
        """
        將任務連結到遊戲。一個任務只能屬於一場遊戲。

        Raises:
            ResourceNotFoundError: 找不到遊戲或任務
            AlreadyLinkedError: 任務已連結到（任一）遊戲
        """
        with self.database.session_scope() as db:
            self._link_quest_to_game(db, game_id, quest_id)
        logger.info("Quest linked to game", extra={"game_id": game_id, "quest_id": quest_id})

    def record_quest_outcome(self, quest_id: str, fail_count: int, status: str) -> QuestRecord:
        """
        記錄任務的失敗票數與結果。已結算的任務不可再修改。

        Raises:
            InvalidArgumentError: fail_count 不是非負整數
            InvalidStatusError: 狀態不在允許集合內
            ResourceNotFoundError: 找不到任務
            AlreadySetError: 任務已結算
        """
        with self.database.session_scope() as db:
            quest = self._record_quest_outcome(db, quest_id, fail_count, status)
            record = QuestRecord.model_validate(quest)
        logger.info("Quest outcome recorded", extra={
            "quest_id": quest_id,
            "fails": record.fails,
            "status": record.status
        })
        return record

    def add_quest_participant(self, quest_id: str, player_name: str, role: str) -> QuestParticipantRecord:
        """
        記錄任務成員及其任務內角色；同一任務中每位玩家只能出現一次。

        Raises:
            ResourceNotFoundError: 找不到任務
            DuplicateAssignmentError: 玩家已是該任務成員
        """
        with self.database.session_scope() as db:
            participant = self._add_quest_participant(db, quest_id, player_name, role)
            record = QuestParticipantRecord.model_validate(participant)
        logger.info("Quest participant added", extra={
            "quest_id": quest_id,
            "player": player_name,
            "role": role
        })
        return record

    def record_game(self, info: GameInfo) -> str:
        """
        在單一交易中寫入整場遊戲：遊戲、玩家角色、每個任務（含連結、成員與結果）與勝方。
        任何一步失敗，整場遊戲都不會寫入。

        只以名稱列出的任務成員沿用其遊戲角色；不在玩家名單中的名稱視為 servant。

        Args:
            info: 整場遊戲資料，缺少的 ID 會自動產生

        Returns:
            遊戲 ID
        """
        game_id = info.id or str(uuid.uuid4())
        with self.database.session_scope() as db:
            self._create_game(db, game_id)
            for name, role in info.players.items():
                self._assign_role(db, game_id, name, role.value)

            for quest in info.quests:
                quest_id = quest.id or str(uuid.uuid4())
                self._create_quest(db, quest_id, QuestStatus.PENDING.value)
                self._link_quest_to_game(db, game_id, quest_id)
                for participant in quest.participants:
                    role = participant.role or info.players.get(participant.name, Role.SERVANT).value
                    self._add_quest_participant(db, quest_id, participant.name, role)
                self._record_quest_outcome(db, quest_id, quest.fails or 0, quest.status.value)

            if info.result is not None:
                self._set_winner(db, game_id, info.result.winner.value)

        logger.info("Game recorded", extra={
            "game_id": game_id,
            "players": len(info.players),
            "quests": len(info.quests)
        })
        return game_id

    # ========== 讀取操作 ==========

    def get_game(self, game_id: str) -> GameRecord:
        """
        Raises:
            ResourceNotFoundError: 找不到遊戲
        """
        return GameRecord.model_validate(self.game_repo.get_by_id(game_id))

    def get_quest(self, quest_id: str) -> QuestRecord:
        """
        Raises:
            ResourceNotFoundError: 找不到任務
        """
        return QuestRecord.model_validate(self.quest_repo.get_by_id(quest_id))

    def list_game_ids(self) -> List[str]:
        return self.game_repo.list_ids()

    def list_roles_for_game(self, game_id: str) -> List[PlayerRoleRecord]:
        return [PlayerRoleRecord.model_validate(row) for row in self.role_repo.list_by_game(game_id)]

    def list_quests_for_game(self, game_id: str) -> List[QuestRecord]:
        return [QuestRecord.model_validate(row) for row in self.link_repo.list_quests_for_game(game_id)]

    def list_participants_for_quest(self, quest_id: str) -> List[QuestParticipantRecord]:
        return [
            QuestParticipantRecord.model_validate(row)
            for row in self.participant_repo.list_by_quest(quest_id)
        ]

    def load_game(self, game_id: str) -> GameInfo:
        """
        由原始資料列重建整場遊戲。

        無法辨識的角色會被略過，無法辨識的勝方則不產生 result，兩者都記錄 WARNING。

        Raises:
            ResourceNotFoundError: 找不到遊戲
        """
        with self.database.session_scope() as db:
            return self._load_game(db, game_id)

    def load_all_games(self) -> List[GameInfo]:
        with self.database.session_scope() as db:
            return [self._load_game(db, game_id) for game_id in self.game_repo.list_ids(db=db)]

    # ========== 交易內的步驟 ==========

    def _create_game(self, db: Session, game_id: str) -> Game:
        _require_text(game_id, "game_id")
        if self.game_repo.find_by_id(game_id, db=db) is not None:
            raise _rejected(DuplicateKeyError(
                message=f"Game with id {game_id} already exists",
                resource_type="game",
                resource_id=game_id
            ))
        return self.game_repo.create_game(game_id, db=db)

    def _set_winner(self, db: Session, game_id: str, winner: str) -> Game:
        _require_text(winner, "winner")
        game = self._lock_game(db, game_id)
        if game.winner is not None:
            raise _rejected(AlreadySetError(
                f"Game {game_id} already has a winner ({game.winner})",
                details={"game_id": game_id, "winner": game.winner}
            ))
        return self.game_repo.set_winner(game_id, winner, db=db)

    def _assign_role(self, db: Session, game_id: str, player_name: str, role: str):
        _require_text(player_name, "player_name")
        _require_text(role, "role")
        self._lock_game(db, game_id)
        existing = self.role_repo.get_by_game_and_name(game_id, player_name, db=db)
        if existing is not None:
            raise _rejected(DuplicateAssignmentError(
                f"Player {player_name} already has role {existing.role} in game {game_id}",
                details={"game_id": game_id, "player_name": player_name, "role": existing.role}
            ))
        return self.role_repo.create_player_role(game_id, player_name, role, db=db)

    def _create_quest(self, db: Session, quest_id: str, initial_status: str) -> Quest:
        _require_text(quest_id, "quest_id")
        status = QuestStatus.parse(initial_status)
        if self.quest_repo.find_by_id(quest_id, db=db) is not None:
            raise _rejected(DuplicateKeyError(
                message=f"Quest with id {quest_id} already exists",
                resource_type="quest",
                resource_id=quest_id
            ))
        return self.quest_repo.create_quest(quest_id, status.value, db=db)

    def _link_quest_to_game(self, db: Session, game_id: str, quest_id: str) -> None:
        # 固定先鎖遊戲再鎖任務
        self._lock_game(db, game_id)
        self._lock_quest(db, quest_id)
        links = self.link_repo.get_by_quest(quest_id, db=db)
        if links:
            raise _rejected(AlreadyLinkedError(
                f"Quest {quest_id} is already linked to game {links[0].game_id}",
                details={"quest_id": quest_id, "game_id": links[0].game_id}
            ))
        self.link_repo.create_link(game_id, quest_id, db=db)

    def _record_quest_outcome(self, db: Session, quest_id: str, fail_count: int, status: str) -> Quest:
        if isinstance(fail_count, bool) or not isinstance(fail_count, int) or fail_count < 0:
            raise _rejected(InvalidArgumentError(
                f"fail_count must be a non-negative integer, got {fail_count!r}",
                details={"quest_id": quest_id, "fail_count": fail_count}
            ))
        new_status = QuestStatus.parse(status)
        quest = self._lock_quest(db, quest_id)
        if quest.status is not None and QuestStatus.parse(quest.status).is_resolved:
            raise _rejected(AlreadySetError(
                f"Quest {quest_id} is already resolved ({quest.status})",
                details={"quest_id": quest_id, "status": quest.status}
            ))
        return self.quest_repo.record_outcome(quest_id, fail_count, new_status.value, db=db)

    def _add_quest_participant(self, db: Session, quest_id: str, player_name: str, role: str):
        _require_text(player_name, "player_name")
        _require_text(role, "role")
        self._lock_quest(db, quest_id)
        existing = self.participant_repo.get_by_quest_and_name(quest_id, player_name, db=db)
        if existing is not None:
            raise _rejected(DuplicateAssignmentError(
                f"Player {player_name} already participates in quest {quest_id}",
                details={"quest_id": quest_id, "player_name": player_name, "role": existing.role}
            ))
        return self.participant_repo.create_participant(quest_id, player_name, role, db=db)

    def _lock_game(self, db: Session, game_id: str) -> Game:
        game = self.game_repo.lock_by_id(game_id, db=db)
        if game is None:
            raise _rejected(ResourceNotFoundError(
                message=f"Game with id {game_id} not found",
                resource_type="game",
                resource_id=game_id
            ))
        return game

    def _lock_quest(self, db: Session, quest_id: str) -> Quest:
        quest = self.quest_repo.lock_by_id(quest_id, db=db)
        if quest is None:
            raise _rejected(ResourceNotFoundError(
                message=f"Quest with id {quest_id} not found",
                resource_type="quest",
                resource_id=quest_id
            ))
        return quest

    def _load_game(self, db: Session, game_id: str) -> GameInfo:
        game = self.game_repo.get_by_id(game_id, db=db)
        players = {}
        for row in self.role_repo.list_by_game(game_id, db=db):
            try:
                players[row.name] = Role.parse(row.role)
            except InvalidArgumentError:
                # 自由文字角色不在 Role 列舉內
                logger.warning("Skipping unrecognized role", extra={
                    "game_id": game_id,
                    "player_name": row.name,
                    "role": row.role
                })

        quests = []
        for quest in self.link_repo.list_quests_for_game(game_id, db=db):
            participants = [
                QuestParticipantInfo(name=row.name, role=row.role)
                for row in self.participant_repo.list_by_quest(quest.id, db=db)
            ]
            quests.append(QuestInfo(
                id=quest.id,
                status=QuestStatus.parse(quest.status),
                fails=quest.fails,
                participants=participants
            ))

        result = None
        if game.winner is not None:
            try:
                winner = Alignment.parse(game.winner)
            except InvalidArgumentError:
                logger.warning("Omitting result with unrecognized winner", extra={
                    "game_id": game_id,
                    "winner": game.winner
                })
            else:
                result = EndResult(
                    winner=winner,
                    victory_type=infer_victory_type(winner, [quest.status for quest in quests])
                )

        return GameInfo(id=game.id, players=players, quests=quests, result=result)


def _require_text(value: str, field: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise _rejected(InvalidArgumentError(
            f"{field} must be a non-empty string",
            details={field: value}
        ))


def _rejected(error: AppException) -> AppException:
    logger.warning(error.message, extra={"error_code": error.error_code})
    return error
