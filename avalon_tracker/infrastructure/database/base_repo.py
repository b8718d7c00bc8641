"""
Base repository class for database operations.
Provides common synchronous CRUD operations for all entity repositories.
"""
from typing import TypeVar, Generic, Type, List, Optional, Any, Dict, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from avalon_tracker.utils.exceptions import DatabaseError, DuplicateKeyError, ResourceNotFoundError
from avalon_tracker.infrastructure.database.session import Database
from avalon_tracker.infrastructure.database.utils import with_session, insertion_order

# Type variable for the entity model
T = TypeVar('T')


def _is_unique_violation(error: IntegrityError) -> bool:
    text = str(error.orig).lower()
    return "unique" in text or "duplicate" in text or "primary key" in text


class BaseRepository(Generic[T]):
    """
    基礎資料庫 Repository 類，提供通用的 CRUD 操作。

    用法示例:
    ```python
    class GameRepository(BaseRepository[Game]):
        model = Game

    game_repo = GameRepository(database)
    games = game_repo.get_all()
    game = game_repo.get_by_id("G1")
    ```
    """
    # 子類需要覆寫此屬性
    model: Type[Any] = None
    # 錯誤訊息中使用的資源名稱，預設為模型名稱小寫
    resource_type: str = None

    def __init__(self, database: Database):
        """
        初始化 repository。

        Args:
            database: 共用的資料庫 handle
        """
        if self.__class__.model is None:
            raise NotImplementedError("Repository class must define 'model' attribute")
        self.database = database

    @property
    def _resource_type(self) -> str:
        return self.resource_type or self.model.__name__.lower()

    def _not_found(self, id: Any) -> ResourceNotFoundError:
        return ResourceNotFoundError(
            message=f"{self.model.__name__} with id {id} not found",
            resource_type=self._resource_type,
            resource_id=id
        )

    @with_session
    def find_by_id(self, id: Any, db: Session = None) -> Optional[T]:
        """
        根據 ID 取得實體，找不到時回傳 None。

        Args:
            id: 實體 ID（複合鍵時為 tuple）
            db: 可選的數據庫 Session，如果未提供則自動創建

        Returns:
            實體對象或 None
        """
        return db.get(self.model, id)

    @with_session
    def get_by_id(self, id: Any, db: Session = None) -> T:
        """
        根據 ID 取得實體。

        Args:
            id: 實體 ID
            db: 可選的數據庫 Session，如果未提供則自動創建

        Returns:
            實體對象

        Raises:
            ResourceNotFoundError: 如果找不到實體
        """
        entity = db.get(self.model, id)
        if entity is None:
            raise self._not_found(id)
        return entity

    @with_session
    def lock_by_id(self, id: Any, db: Session = None) -> Optional[T]:
        """
        以 SELECT ... FOR UPDATE 讀取實體，鎖定該列直到交易結束。
        SQLite 不支援列鎖，改由 BEGIN IMMEDIATE 的資料庫鎖序列化。

        Args:
            id: 實體 ID
            db: 數據庫 Session，須由呼叫端的交易提供才有意義

        Returns:
            實體對象或 None
        """
        return db.get(self.model, id, with_for_update=True)

    @with_session
    def get_all(self, db: Session = None) -> List[T]:
        """
        取得所有實體列表（依寫入順序）。

        Args:
            db: 可選的數據庫 Session，如果未提供則自動創建

        Returns:
            實體列表
        """
        stmt = select(self.model).order_by(*insertion_order(db, self.model))
        return list(db.execute(stmt).scalars().all())

    @with_session
    def get_by(self, db: Session = None, **kwargs) -> List[T]:
        """
        根據條件查詢實體（依寫入順序）。

        Args:
            db: 可選的數據庫 Session，如果未提供則自動創建
            **kwargs: 查詢條件

        Returns:
            符合條件的實體列表
        """
        stmt = select(self.model)

        # 添加所有查詢條件
        for key, value in kwargs.items():
            if hasattr(self.model, key):
                stmt = stmt.where(getattr(self.model, key) == value)

        stmt = stmt.order_by(*insertion_order(db, self.model))
        return list(db.execute(stmt).scalars().all())

    @with_session
    def create(self, data: Union[Dict[str, Any], T], db: Session = None) -> T:
        """
        創建新實體。

        Args:
            data: 實體數據或實體對象
            db: 可選的數據庫 Session，如果未提供則自動創建

        Returns:
            新創建的實體

        Raises:
            DuplicateKeyError: 如果主鍵已存在
        """
        # 根據輸入類型處理
        if isinstance(data, dict):
            entity = self.model(**data)
        else:
            entity = data

        db.add(entity)
        try:
            db.flush()
        except IntegrityError as e:
            if not _is_unique_violation(e):
                raise DatabaseError(
                    f"{self.model.__name__} violates an integrity constraint: {e.orig}"
                ) from e
            raise DuplicateKeyError(
                message=f"{self.model.__name__} violates a unique key: {e.orig}",
                resource_type=self._resource_type
            ) from e

        return entity

    @with_session
    def update(self, id: Any, data: Dict[str, Any], db: Session = None) -> T:
        """
        更新實體。

        Args:
            id: 實體 ID
            data: 要更新的數據
            db: 可選的數據庫 Session，如果未提供則自動創建

        Returns:
            更新後的實體

        Raises:
            ResourceNotFoundError: 如果找不到實體
        """
        entity = db.get(self.model, id)
        if entity is None:
            raise self._not_found(id)

        # 更新實體屬性
        for key, value in data.items():
            if hasattr(entity, key):
                setattr(entity, key, value)

        db.flush()
        return entity
