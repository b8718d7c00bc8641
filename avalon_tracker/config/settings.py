"""
Application settings.
Values come from environment variables or a local .env file.
"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    應用程式設定。

    - **app_env**: 執行環境（development / test / production）
    - **database_url**: SQLAlchemy 連線字串，對應環境變數 DATABASE_URL
    - **database_echo**: 是否輸出 SQL 語句
    - **sqlite_busy_timeout_ms**: SQLite 寫入鎖的最長等待時間（毫秒）
    - **log_level**: 日誌等級
    """

    app_env: str = "development"
    database_url: str = "sqlite:///./avalon.db"
    database_echo: bool = False
    sqlite_busy_timeout_ms: int = Field(default=5000, ge=0)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
