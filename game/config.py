"""对局配置中心 (SSOT - 单一事实来源)

规则常量 (点数范围、房间容量、手牌数) 固定不变，不在运行时协商；
网络与日志相关参数支持从环境变量覆盖。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


def _get_env_int(key: str, default: int) -> int:
    """从环境变量获取整数配置"""
    value = os.environ.get(key)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            pass
    return default


@dataclass(frozen=True)
class GameConfig:
    """对局配置类 (不可变)

    可通过环境变量覆盖的配置项：
    - DOMINO_HOST: 房主监听地址
    - DOMINO_PORT: 房主监听端口
    - DOMINO_MAX_MESSAGE_SIZE: 单条消息最大字节数
    - DOMINO_LOG_FEED_LIMIT: 本地日志流保留条数
    """
    # ==================== 牌组规则 ====================
    max_pip: int = 6                 # 双六牌: 点数 0..6，共 28 张
    min_players: int = 2
    max_participants: int = 4        # 房主 + 3 名远程玩家
    two_player_hand_size: int = 7
    multi_player_hand_size: int = 5

    # ==================== 网络配置 ====================
    host: str = field(
        default_factory=lambda: os.environ.get("DOMINO_HOST", "0.0.0.0")
    )
    port: int = field(
        default_factory=lambda: _get_env_int("DOMINO_PORT", 8765)
    )
    max_message_size: int = field(
        default_factory=lambda: _get_env_int("DOMINO_MAX_MESSAGE_SIZE", 65_536)
    )

    # ==================== 日志 ====================
    log_level: str = field(
        default_factory=lambda: os.environ.get("DOMINO_LOG_LEVEL", "INFO")
    )
    log_feed_limit: int = field(
        default_factory=lambda: _get_env_int("DOMINO_LOG_FEED_LIMIT", 200)
    )

    @property
    def tile_count(self) -> int:
        """整副牌张数: (n+1)(n+2)/2"""
        return (self.max_pip + 1) * (self.max_pip + 2) // 2

    @property
    def max_remote_peers(self) -> int:
        return self.max_participants - 1

    def hand_size_for(self, player_count: int) -> int:
        """两人局每人 7 张，三到四人局每人 5 张"""
        if player_count == 2:
            return self.two_player_hand_size
        return self.multi_player_hand_size

    def validate(self) -> list[str]:
        """检查配置是否自洽，返回错误描述列表 (空列表表示合法)"""
        errors: list[str] = []
        if self.max_pip < 1:
            errors.append(f"max_pip 必须 >= 1 (当前 {self.max_pip})")
        if self.min_players < 2:
            errors.append(f"min_players 必须 >= 2 (当前 {self.min_players})")
        if self.min_players > self.max_participants:
            errors.append(
                f"min_players ({self.min_players}) 不能大于 max_participants ({self.max_participants})"
            )
        dealt = self.hand_size_for(self.max_participants) * self.max_participants
        if dealt > self.tile_count:
            errors.append(f"满员时需发 {dealt} 张，超过整副 {self.tile_count} 张")
        if not 0 < self.port < 65536:
            errors.append(f"port 超出范围 (当前 {self.port})")
        if self.max_message_size <= 0:
            errors.append(f"max_message_size 必须为正数 (当前 {self.max_message_size})")
        if self.log_feed_limit <= 0:
            errors.append(f"log_feed_limit 必须为正数 (当前 {self.log_feed_limit})")
        return errors

    @classmethod
    def from_env(cls) -> GameConfig:
        """从环境变量创建配置实例"""
        return cls()


# 全局配置单例
_config: GameConfig | None = None


def get_config() -> GameConfig:
    """获取全局配置实例（懒加载）"""
    global _config
    if _config is None:
        _config = GameConfig.from_env()
        for error in _config.validate():
            logger.warning(f"配置错误: {error}")
    return _config


def reset_config() -> None:
    """重置配置（用于测试）"""
    global _config
    _config = None
