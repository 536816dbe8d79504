"""骨牌与牌组模块
定义骨牌、双六牌组的生成、洗牌与发牌
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .config import GameConfig, get_config
from .exceptions import InvalidTileError

MAX_PIP = 6


@dataclass(frozen=True, slots=True)
class Tile:
    """骨牌 (无序点数对)

    构造时规范化为 ``low <= high``，因此 ``Tile(6, 2) == Tile(2, 6)``。

    Attributes:
        low: 较小点数
        high: 较大点数
    """

    low: int
    high: int

    def __post_init__(self):
        if self.low > self.high:
            low, high = self.high, self.low
            object.__setattr__(self, "low", low)
            object.__setattr__(self, "high", high)
        if not (0 <= self.low and self.high <= MAX_PIP):
            raise InvalidTileError(pips=(self.low, self.high))

    @classmethod
    def from_pips(cls, a: int, b: int) -> Tile:
        """从任意顺序的两个点数构造骨牌"""
        return cls(a, b)

    @classmethod
    def from_wire(cls, pips: Sequence[int]) -> Tile:
        """从 ``[a, b]`` 形式的线上数据构造"""
        if len(pips) != 2:
            raise InvalidTileError(pips=tuple(pips))
        return cls.from_pips(int(pips[0]), int(pips[1]))

    @property
    def pips(self) -> tuple[int, int]:
        return (self.low, self.high)

    @property
    def is_double(self) -> bool:
        return self.low == self.high

    def touches(self, value: int) -> bool:
        """是否有一端点数等于 value"""
        return self.low == value or self.high == value

    def other(self, value: int) -> int:
        """与 value 相接后朝外的另一端点数"""
        if self.low == value:
            return self.high
        if self.high == value:
            return self.low
        raise InvalidTileError(f"{self} does not touch {value}", pips=self.pips)

    def to_list(self) -> list[int]:
        return [self.low, self.high]

    def __str__(self) -> str:
        return f"[{self.low}|{self.high}]"


def make_double_six_set(max_pip: int = MAX_PIP) -> list[Tile]:
    """生成整副骨牌: 每个 0 <= i <= j <= max_pip 恰好一张"""
    return [Tile(i, j) for i in range(max_pip + 1) for j in range(i, max_pip + 1)]


def shuffle_tiles(tiles: list[Tile], rng: random.Random | None = None) -> list[Tile]:
    """原地洗牌，返回同一列表"""
    rng = rng or random.Random()
    rng.shuffle(tiles)
    return tiles


def deal(
    tiles: Sequence[Tile],
    player_ids: Iterable[str],
    config: GameConfig | None = None,
) -> tuple[dict[str, list[Tile]], list[Tile]]:
    """按座位顺序连续发牌

    Returns:
        (hands, boneyard): 每名玩家的手牌与剩余牌堆
    """
    config = config or get_config()
    ids = list(player_ids)
    hand_size = config.hand_size_for(len(ids))
    hands: dict[str, list[Tile]] = {}
    idx = 0
    for pid in ids:
        hands[pid] = list(tiles[idx:idx + hand_size])
        idx += hand_size
    return hands, list(tiles[idx:])
