"""
Logging setup.
Provides the project-wide logger; fields passed through ``extra`` are appended to each line.
"""
import logging
import sys

from avalon_tracker.config import settings

LOGGER_NAME = "avalon_tracker"

# LogRecord 內建屬性，不視為 extra 欄位
_RESERVED_ATTRS = set(logging.LogRecord(
    name="", level=0, pathname="", lineno=0, msg="", args=(), exc_info=None
).__dict__.keys()) | {"message", "asctime"}


class ExtraFieldsFormatter(logging.Formatter):
    """在標準格式後附加 extra 欄位，例如 `game_id=G1 player=Alice`。"""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if not extras:
            return base
        fields = " ".join(f"{key}={value}" for key, value in sorted(extras.items()))
        return f"{base} | {fields}"


def setup_logger(name: str = LOGGER_NAME, level: str = None) -> logging.Logger:
    """
    建立（或取得）已設定好的 logger。

    Args:
        name: logger 名稱
        level: 日誌等級，未提供時使用 settings.log_level

    Returns:
        設定完成的 logging.Logger
    """
    log = logging.getLogger(name)
    log.setLevel((level or settings.log_level).upper())

    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ExtraFieldsFormatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        log.addHandler(handler)

    return log


logger = setup_logger()
