"""对局状态模块
定义牌面 (Board) 与权威对局状态 (GameState) 及其快照序列化

房主持有唯一的权威 GameState；广播出去的快照只包含牌堆张数，
牌堆中的具体骨牌永远不会出现在快照里。
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from .enums import GamePhase, Side
from .tile import Tile


@dataclass
class Board:
    """牌面

    已放置的骨牌按从左到右的顺序存储，且每张都已定向为
    ``(左点数, 右点数)``，相邻两张的接触点数相等。
    """

    tiles: list[tuple[int, int]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.tiles)

    @property
    def is_empty(self) -> bool:
        return not self.tiles

    @property
    def ends(self) -> tuple[int, int] | None:
        """(左端点数, 右端点数)，空牌面为 None"""
        if not self.tiles:
            return None
        return (self.tiles[0][0], self.tiles[-1][1])

    def end_value(self, side: Side) -> int:
        ends = self.ends
        if ends is None:
            raise ValueError("board is empty")
        return ends[0] if side is Side.LEFT else ends[1]

    def place(self, tile: Tile, side: Side | None = None) -> None:
        """放置骨牌 (调用前须已校验可接)

        空牌面时忽略 side；否则把相接点数朝向已有的一端。
        """
        if not self.tiles:
            self.tiles.append(tile.pips)
            return
        value = self.end_value(side)
        outer = tile.other(value)
        if side is Side.LEFT:
            self.tiles.insert(0, (outer, value))
        else:
            self.tiles.append((value, outer))

    def to_wire(self) -> list[list[int]]:
        return [list(t) for t in self.tiles]


@dataclass
class GameState:
    """权威对局状态

    Attributes:
        running: 对局是否进行中
        board: 牌面
        hands: 玩家 ID → 手牌
        boneyard: 牌堆 (仅房主持有，不进入快照)
        boneyard_count: 牌堆剩余张数
        turn_order: 开局时固定的座次
        current_turn_index: 当前行动者在 turn_order 中的下标
        winner: 胜者玩家 ID
    """

    running: bool = False
    board: Board = field(default_factory=Board)
    hands: dict[str, list[Tile]] = field(default_factory=dict)
    boneyard: list[Tile] = field(default_factory=list, repr=False)
    boneyard_count: int = 0
    turn_order: list[str] = field(default_factory=list)
    current_turn_index: int = 0
    winner: str | None = None

    @property
    def ends(self) -> tuple[int, int] | None:
        return self.board.ends

    @property
    def phase(self) -> GamePhase:
        if self.running:
            return GamePhase.RUNNING
        if self.winner is not None:
            return GamePhase.FINISHED
        return GamePhase.NOT_RUNNING

    @property
    def current_player_id(self) -> str | None:
        if not self.turn_order:
            return None
        return self.turn_order[self.current_turn_index]

    def hand_of(self, player_id: str) -> list[Tile]:
        return self.hands.get(player_id, [])

    def tile_count(self) -> int:
        """手牌 + 牌面 + 牌堆 的总张数 (整局恒定)"""
        return sum(len(h) for h in self.hands.values()) + len(self.board) + self.boneyard_count

    def advance_turn(self) -> None:
        self.current_turn_index = (self.current_turn_index + 1) % len(self.turn_order)

    # ==================== 快照 ====================

    def to_snapshot(self) -> dict[str, Any]:
        """生成广播用快照 (牌堆只给张数)"""
        ends = self.ends
        return {
            "running": self.running,
            "board": self.board.to_wire(),
            "ends": list(ends) if ends is not None else None,
            "hands": {pid: [t.to_list() for t in hand] for pid, hand in self.hands.items()},
            "boneyard_count": self.boneyard_count,
            "turn_order": list(self.turn_order),
            "current_turn_index": self.current_turn_index,
            "winner": self.winner,
        }

    @classmethod
    def from_snapshot(cls, data: dict[str, Any]) -> GameState:
        """从快照重建只读视图 (boneyard 为空，仅保留张数)"""
        return cls(
            running=bool(data.get("running", False)),
            board=Board([(int(a), int(b)) for a, b in data.get("board", [])]),
            hands={
                pid: [Tile.from_wire(t) for t in hand]
                for pid, hand in data.get("hands", {}).items()
            },
            boneyard_count=int(data.get("boneyard_count", 0)),
            turn_order=list(data.get("turn_order", [])),
            current_turn_index=int(data.get("current_turn_index", 0)),
            winner=data.get("winner"),
        )

    def copy(self) -> GameState:
        return copy.deepcopy(self)
