"""
資料庫工具函數。
提供資料庫操作的輔助功能。
"""
import functools
from typing import TypeVar, Callable, Any, List

from sqlalchemy import literal_column
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from avalon_tracker.utils.exceptions import AppException, DatabaseError

T = TypeVar('T')


def with_session(func: Callable[..., T]) -> Callable[..., T]:
    """
    裝飾器：自動處理 session 的創建和關閉。

    當方法的 db 參數為 None 時，從 repository 的 database handle 創建一個新的 session，
    執行完畢後提交並關閉；若呼叫端已提供 db，則直接沿用且不提交。

    用法：
    ```python
    @with_session
    def get_entity(self, id: str, db: Session = None) -> Entity:
        return db.get(Entity, id)
    ```

    Args:
        func: 要裝飾的 repository 方法，必須有一個名為 db 的關鍵字參數

    Returns:
        裝飾後的函數
    """
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> T:
        # 檢查是否已提供 db
        db = kwargs.get('db')
        own_session = False

        # 如果沒有提供 db，創建一個新的
        if db is None:
            db = self.database.SessionLocal()
            kwargs['db'] = db
            own_session = True

        try:
            result = func(self, *args, **kwargs)

            # 如果我們創建了自己的 session，則提交
            if own_session:
                db.commit()

            return result
        except AppException:
            if own_session:
                db.rollback()
            raise
        except SQLAlchemyError as e:
            if own_session:
                db.rollback()
            raise DatabaseError(f"{func.__qualname__} failed: {e}") from e
        except Exception:
            if own_session:
                db.rollback()
            raise
        finally:
            # 如果我們創建了自己的 session，則關閉
            if own_session:
                db.close()

    return wrapper


def insertion_order(db: Session, model: Any) -> List[Any]:
    """
    回傳依寫入順序排序的 ORDER BY 子句。

    關聯表沒有自增欄位，SQLite 以 rowid 排序；其他資料庫維持儲存順序。

    Args:
        db: 目前的 Session
        model: ORM 模型類別

    Returns:
        可傳給 order_by 的子句列表（可能為空）
    """
    if db.get_bind().dialect.name == "sqlite":
        return [literal_column(f"{model.__tablename__}.rowid")]
    return []
