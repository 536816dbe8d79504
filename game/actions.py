"""动作与结果
定义玩家动作的标准化结构，以及引擎处理动作后的结果
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .enums import ActionType, Side
from .exceptions import GameError
from .tile import Tile


@dataclass(frozen=True)
class Action:
    """玩家动作

    Attributes:
        action_type: 出牌 / 摸牌 / 过
        tile: 出牌时的骨牌
        side: 出牌时指定的端 (None 表示由引擎决定，优先左端)
    """

    action_type: ActionType
    tile: Tile | None = None
    side: Side | None = None

    @classmethod
    def play(cls, tile: Tile, side: Side | None = None) -> Action:
        return cls(ActionType.PLAY, tile=tile, side=side)

    @classmethod
    def draw(cls) -> Action:
        return cls(ActionType.DRAW)

    @classmethod
    def pass_turn(cls) -> Action:
        return cls(ActionType.PASS)

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> Action:
        """从已校验的 action 消息 data 构造"""
        action_type = ActionType(data["type"])
        tile = data.get("tile")
        side = data.get("side")
        return cls(
            action_type=action_type,
            tile=Tile.from_wire(tile) if tile is not None else None,
            side=Side(side) if side else None,
        )

    def to_wire(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.action_type.value}
        if self.tile is not None:
            data["tile"] = self.tile.to_list()
        if self.side is not None:
            data["side"] = self.side.value
        return data


@dataclass
class ActionResult:
    """引擎处理动作的结果

    changed 为 True 时调用方需要广播新的快照；
    被拒绝的动作不会修改任何状态，也不触发广播。
    """

    accepted: bool
    changed: bool = False
    error: GameError | None = None
    winner: str | None = None

    @classmethod
    def ok(cls, winner: str | None = None) -> ActionResult:
        return cls(accepted=True, changed=True, winner=winner)

    @classmethod
    def rejected(cls, error: GameError) -> ActionResult:
        return cls(accepted=False, changed=False, error=error)
