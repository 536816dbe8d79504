"""对局异常模块
定义多米诺对局中的各类异常，提供明确的错误类型和信息

引擎与路由层在检测点捕获这些异常并记录日志，
不会向上抛出导致房主进程崩溃。
"""

from i18n import t as _t


class GameError(Exception):
    """对局异常基类

    所有对局相关的异常都应该继承此类，
    提供统一的异常处理接口。
    """

    def __init__(self, message: str, details: dict | None = None):
        """初始化对局异常

        Args:
            message: 错误消息
            details: 额外的错误详情（可选）
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# ==================== 牌组相关异常 ====================


class InvalidTileError(GameError):
    """点数越界或格式不合法的骨牌"""

    def __init__(self, message: str | None = None, pips: tuple | None = None):
        if message is None:
            message = _t("exc.invalid_tile")
        details = {"pips": list(pips)} if pips is not None else {}
        super().__init__(message, details)
        self.pips = pips


# ==================== 对局状态异常 ====================


class GameNotRunningError(GameError):
    """对局未开始或已结束时收到动作"""

    def __init__(self, message: str | None = None, player_id: str | None = None):
        if message is None:
            message = _t("exc.not_running")
        details = {"player_id": player_id} if player_id is not None else {}
        super().__init__(message, details)
        self.player_id = player_id


class NotEnoughPlayersError(GameError):
    """开局人数不足"""

    def __init__(self, message: str | None = None, count: int = 0, required: int = 2):
        if message is None:
            message = _t("exc.not_enough_players", count=count, required=required)
        super().__init__(message, {"count": count, "required": required})
        self.count = count
        self.required = required


# ==================== 动作相关异常 ====================


class TurnViolationError(GameError):
    """非当前回合玩家提交的动作"""

    def __init__(
        self,
        message: str | None = None,
        player_id: str | None = None,
        current_player_id: str | None = None,
    ):
        if message is None:
            message = _t("exc.turn_violation", player=player_id)
        details = {}
        if player_id is not None:
            details["player_id"] = player_id
        if current_player_id is not None:
            details["current_player_id"] = current_player_id
        super().__init__(message, details)
        self.player_id = player_id
        self.current_player_id = current_player_id


class InvalidMoveError(GameError):
    """手牌中没有该骨牌，或骨牌与两端均不相接"""

    def __init__(
        self,
        message: str | None = None,
        action_type: str | None = None,
        player_id: str | None = None,
        reason: str | None = None,
    ):
        if message is None:
            message = _t("exc.invalid_move")
        details = {}
        if action_type:
            details["action_type"] = action_type
        if player_id is not None:
            details["player_id"] = player_id
        if reason:
            details["reason"] = reason
        super().__init__(message, details)
        self.action_type = action_type
        self.player_id = player_id
        self.reason = reason


# ==================== 网络相关异常 ====================


class ProtocolError(GameError):
    """无法识别、格式错误或方向不符的消息"""

    def __init__(
        self,
        message: str | None = None,
        msg_type: str | None = None,
        peer_id: str | None = None,
    ):
        if message is None:
            message = _t("exc.protocol")
        details = {}
        if msg_type:
            details["msg_type"] = msg_type
        if peer_id is not None:
            details["peer_id"] = peer_id
        super().__init__(message, details)
        self.msg_type = msg_type
        self.peer_id = peer_id


class CapacityExceededError(GameError):
    """房间人数已达上限时的入站连接"""

    def __init__(self, message: str | None = None, capacity: int = 4):
        if message is None:
            message = _t("exc.capacity")
        super().__init__(message, {"capacity": capacity})
        self.capacity = capacity
