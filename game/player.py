"""玩家与房间名册

player_id 是应用层的稳定身份 (参与者的 create_identity() 值)，
与传输层连接句柄无关；channel_id 只是连接管理器里通道表的键，
不会写入 GameState。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class Player:
    """房间内的参与者"""

    player_id: str
    display_name: str
    channel_id: str | None = None  # 房主自己没有通道
    slot: int = 0

    def to_wire(self) -> dict[str, Any]:
        return {"id": self.player_id, "name": self.display_name}


class Roster:
    """活跃玩家名册 (房主在首位，其余按自我介绍顺序)"""

    def __init__(self) -> None:
        self._players: list[Player] = []

    def __len__(self) -> int:
        return len(self._players)

    def __iter__(self):
        return iter(self._players)

    def __contains__(self, player_id: object) -> bool:
        return any(p.player_id == player_id for p in self._players)

    def add(self, player: Player) -> Player:
        """加入名册并分配座位号；同一 ID 重复加入时更新显示名"""
        existing = self.get(player.player_id)
        if existing is not None:
            existing.display_name = player.display_name
            return existing
        player.slot = len(self._players)
        self._players.append(player)
        return player

    def get(self, player_id: str) -> Player | None:
        for p in self._players:
            if p.player_id == player_id:
                return p
        return None

    def get_by_channel(self, channel_id: str) -> Player | None:
        for p in self._players:
            if p.channel_id == channel_id:
                return p
        return None

    def remove_by_channel(self, channel_id: str) -> Player | None:
        """按通道移除玩家，返回被移除者"""
        player = self.get_by_channel(channel_id)
        if player is not None:
            self._players.remove(player)
            for i, p in enumerate(self._players):
                p.slot = i
        return player

    def ids(self) -> list[str]:
        return [p.player_id for p in self._players]

    def to_wire(self) -> list[dict[str, Any]]:
        return [p.to_wire() for p in self._players]

    def clear(self) -> None:
        self._players.clear()
