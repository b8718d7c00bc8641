"""
Application exception hierarchy.
Every invariant violation of the game record store surfaces as one of these types.
"""
from typing import Any, Dict, Optional


class AppException(Exception):
    """
    所有應用程式錯誤的基底類別。

    Args:
        message: 錯誤訊息
        error_code: 機器可讀的錯誤代碼
        details: 其他補充資訊
    """
    error_code: str = "APP_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class DatabaseError(AppException):
    """底層儲存發生非預期錯誤。"""
    error_code = "DATABASE_ERROR"


class ResourceNotFoundError(AppException):
    """參照的資源不存在。"""
    error_code = "NOT_FOUND"

    def __init__(self, message: str, resource_type: str, resource_id: Any = None):
        super().__init__(
            message,
            details={"resource_type": resource_type, "resource_id": resource_id}
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class DuplicateKeyError(AppException):
    """主鍵重複。"""
    error_code = "DUPLICATE_KEY"

    def __init__(self, message: str, resource_type: str, resource_id: Any = None):
        super().__init__(
            message,
            details={"resource_type": resource_type, "resource_id": resource_id}
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class BusinessLogicError(AppException):
    """違反資料一致性規則的錯誤。"""
    error_code = "BUSINESS_LOGIC_ERROR"


class DuplicateAssignmentError(BusinessLogicError):
    """玩家在同一場遊戲（或同一任務）已有角色。"""
    error_code = "DUPLICATE_ASSIGNMENT"


class AlreadyLinkedError(BusinessLogicError):
    """任務已連結到某場遊戲。"""
    error_code = "ALREADY_LINKED"


class AlreadySetError(BusinessLogicError):
    """值已寫入且不可覆寫（勝方、已結算的任務）。"""
    error_code = "ALREADY_SET"


class InvalidArgumentError(BusinessLogicError):
    """參數不合法，例如負數的失敗票數或空白名稱。"""
    error_code = "INVALID_ARGUMENT"


class InvalidStatusError(BusinessLogicError):
    """任務狀態不在允許的集合內。"""
    error_code = "INVALID_STATUS"
