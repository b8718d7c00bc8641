"""Loader for YAML game files in the avalon tracker format."""

from pathlib import Path
from typing import List, Union

import yaml

from avalon_tracker.application.dto.game_dto import GameInfo


def load_games_file(path: Union[str, Path]) -> List[GameInfo]:
    """
    讀取並驗證 YAML 遊戲檔。

    檔案根節點可以是遊戲列表，也可以是單一遊戲。

    Args:
        path: YAML 檔案路徑

    Returns:
        GameInfo 列表

    Raises:
        FileNotFoundError: 檔案不存在
        ValueError: YAML 語法錯誤，或結構不是遊戲或遊戲列表
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Game file not found: {file_path}")

    try:
        raw = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Malformed YAML in {file_path}: {e}") from e
    return parse_games(raw)


def parse_games(raw) -> List[GameInfo]:
    if raw is None:
        return []
    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, list):
        raise ValueError("Game file root must be a list of games or a single game mapping")
    return [GameInfo.model_validate(item) for item in raw]
