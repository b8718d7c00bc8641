"""
Database connection management module.
Provides the Database handle: engine, session factory and transaction scope.
"""
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from avalon_tracker.config import settings
from avalon_tracker.infrastructure.database.models import Base
from avalon_tracker.utils.exceptions import AppException, DatabaseError
from avalon_tracker.utils.logger import logger


class Database:
    """
    資料庫 handle，持有 engine 與 session factory。

    生命週期由呼叫端明確管理：程式啟動時建立，結束時呼叫 `close()`。

    用法示例:
    ```python
    with Database("sqlite:///./avalon.db") as database:
        database.create_schema()
        with database.session_scope() as db:
            db.add(Game(id="G1"))
    ```
    """

    def __init__(
        self,
        url: Optional[str] = None,
        echo: Optional[bool] = None,
        busy_timeout_ms: Optional[int] = None,
    ):
        """
        初始化資料庫 handle。

        Args:
            url: SQLAlchemy 連線字串，未提供時使用 settings.database_url
            echo: 是否輸出 SQL，未提供時使用 settings.database_echo
            busy_timeout_ms: SQLite 等待寫入鎖的毫秒數
        """
        self.url = url or settings.database_url
        self.busy_timeout_ms = (
            settings.sqlite_busy_timeout_ms if busy_timeout_ms is None else busy_timeout_ms
        )
        self.engine = self._create_engine(
            settings.database_echo if echo is None else echo
        )
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )
        self._closed = False
        logger.debug("Database handle opened", extra={
            "dialect": self.dialect,
            "environment": settings.app_env
        })

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @property
    def closed(self) -> bool:
        return self._closed

    def _create_engine(self, echo: bool) -> Engine:
        url = make_url(self.url)
        if url.get_backend_name() != "sqlite":
            return create_engine(self.url, echo=echo, pool_pre_ping=True)

        options = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            # 記憶體資料庫只存在於單一連線中
            options["poolclass"] = StaticPool

        engine = create_engine(self.url, echo=echo, **options)
        self._configure_sqlite(engine)
        return engine

    def _configure_sqlite(self, engine: Engine) -> None:
        """
        啟用外鍵檢查，並讓每個交易以 BEGIN IMMEDIATE 開始，
        使「先檢查再寫入」的流程在多個寫入者之間序列化。
        """
        busy_timeout_ms = int(self.busy_timeout_ms)

        @event.listens_for(engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            # 交由 SQLAlchemy 自行發出 BEGIN
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute(f"PRAGMA busy_timeout={busy_timeout_ms}")
            cursor.close()

        @event.listens_for(engine, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    def create_schema(self) -> None:
        """建立所有資料表（已存在的資料表不受影響）。"""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ready", extra={"tables": len(Base.metadata.tables)})

    def get_db(self) -> Generator[Session, None, None]:
        """
        提供一個資料庫 Session 的 generator。
        正常結束時提交，發生例外時回滾，最後一律關閉。

        Yields:
            SQLAlchemy Session
        """
        self._ensure_open()
        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except AppException:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database transaction failed: {e}")
            raise DatabaseError(f"Database transaction failed: {e}") from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        上下文管理器：一個區塊即一個交易。

        用法：
        ```python
        with database.session_scope() as db:
            db.add(entity)
        # 已自動提交並關閉
        ```
        """
        yield from self.get_db()

    def _ensure_open(self) -> None:
        if self._closed:
            raise DatabaseError("Database handle is closed")

    def close(self) -> None:
        """釋放連線池。重複呼叫不會出錯。"""
        if self._closed:
            return
        self.engine.dispose()
        self._closed = True
        logger.debug("Database handle closed")

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
