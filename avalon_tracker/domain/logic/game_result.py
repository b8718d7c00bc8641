from typing import Iterable

from avalon_tracker.domain.models.game import Alignment, QuestStatus, VictoryType

# 邪惡陣營以任務取勝所需的失敗任務數
QUEST_FAILURES_TO_WIN = 3


def infer_victory_type(winner: Alignment, statuses: Iterable[QuestStatus]) -> VictoryType:
    """
    由勝方與任務結果推斷勝利方式。

    邪惡陣營獲勝但失敗任務少於三次時，只可能是刺殺梅林成功。
    """
    failures = sum(1 for status in statuses if status is QuestStatus.FAILED)
    if winner is Alignment.EVIL and failures < QUEST_FAILURES_TO_WIN:
        return VictoryType.ASSASSINATION
    return VictoryType.QUEST
