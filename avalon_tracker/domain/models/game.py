"""
Game 詞彙定義。
角色、陣營、任務狀態與勝利方式。
"""

from enum import Enum
from typing import Dict

from avalon_tracker.utils.exceptions import InvalidArgumentError, InvalidStatusError


def _normalize(value) -> str:
    if isinstance(value, Enum):
        value = value.value
    return "".join(ch for ch in str(value).strip().lower() if ch not in "_- ")


class Alignment(str, Enum):
    """
    陣營。
    - **good**: 亞瑟的忠臣
    - **evil**: 莫德雷德的爪牙
    """
    GOOD = "good"
    EVIL = "evil"

    @classmethod
    def parse(cls, value: str) -> "Alignment":
        if isinstance(value, cls):
            return value
        normalized = _normalize(value)
        for alignment in cls:
            if alignment.value == normalized:
                return alignment
        raise InvalidArgumentError(f"Unknown alignment: {value!r}")


class Role(str, Enum):
    """
    遊戲層級的隱藏角色。
    """
    ASSASSIN = "assassin"
    MERLIN = "merlin"
    MINION = "minion"
    MORDRED = "mordred"
    MORGANA = "morgana"
    OBERON = "oberon"
    PERCIVAL = "percival"
    REVERSE_OBERON = "reverseoberon"
    SERVANT = "servant"

    @classmethod
    def _missing_(cls, value):
        # 接受 "Reverse_Oberon"、"reverse-oberon" 等寫法
        if isinstance(value, str):
            normalized = _normalize(value)
            for role in cls:
                if role.value == normalized:
                    return role
        return None

    @classmethod
    def parse(cls, value: str) -> "Role":
        try:
            return cls(value)
        except ValueError:
            raise InvalidArgumentError(f"Unknown role: {value!r}") from None

    @property
    def alignment(self) -> Alignment:
        return ROLE_ALIGNMENTS[self]


ROLE_ALIGNMENTS: Dict[Role, Alignment] = {
    Role.ASSASSIN: Alignment.EVIL,
    Role.MORGANA: Alignment.EVIL,
    Role.MINION: Alignment.EVIL,
    Role.MORDRED: Alignment.EVIL,
    Role.OBERON: Alignment.EVIL,
    Role.MERLIN: Alignment.GOOD,
    Role.PERCIVAL: Alignment.GOOD,
    Role.REVERSE_OBERON: Alignment.GOOD,
    Role.SERVANT: Alignment.GOOD,
}


class QuestStatus(str, Enum):
    """
    任務狀態（封閉集合）。
    - **pending**: 尚未結算
    - **succeeded**: 任務成功
    - **failed**: 任務失敗
    """
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            return _QUEST_STATUS_ALIASES.get(_normalize(value))
        return None

    @classmethod
    def parse(cls, value: str) -> "QuestStatus":
        """
        解析任務狀態字串。

        Raises:
            InvalidStatusError: 不在允許集合內的狀態
        """
        if value is None:
            raise InvalidStatusError("Quest status is required")
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(status.value for status in cls)
            raise InvalidStatusError(
                f"Invalid quest status {value!r}; expected one of: {allowed}",
                details={"status": value}
            ) from None

    @property
    def is_resolved(self) -> bool:
        return self is not QuestStatus.PENDING


_QUEST_STATUS_ALIASES: Dict[str, QuestStatus] = {
    "pending": QuestStatus.PENDING,
    "succeeded": QuestStatus.SUCCEEDED,
    "success": QuestStatus.SUCCEEDED,
    "failed": QuestStatus.FAILED,
    "fail": QuestStatus.FAILED,
}


class VictoryType(str, Enum):
    """
    勝利方式。
    - **assassination**: 刺客成功刺殺梅林
    - **quest**: 以任務結果決定勝負
    """
    ASSASSINATION = "assassination"
    QUEST = "quest"
