"""中文翻译表（默认语言）。"""

STRINGS: dict[str, str] = {
    # ── 异常 ──
    "exc.invalid_tile": "无效的骨牌",
    "exc.not_running": "对局未在进行中",
    "exc.not_enough_players": "至少需要 {required} 名玩家才能开局 (当前 {count} 名)",
    "exc.turn_violation": "不是 {player} 的回合",
    "exc.invalid_move": "无效的出牌",
    "exc.protocol": "消息格式错误",
    "exc.capacity": "房间已满",

    # ── 端 ──
    "side.left": "左端",
    "side.right": "右端",

    # ── 日志流: 连接 ──
    "feed.peer_created": "已创建节点: {id}",
    "feed.room_created": "房间已创建，房间号 (分享给好友加入): {id}",
    "feed.client_connected": "客户端已连接: {peer}",
    "feed.client_disconnected": "客户端已断开: {peer}",
    "feed.rejected_full": "已拒绝连接 (房间已满)",
    "feed.rejected_duplicate": "已拒绝连接 (节点 ID 重复): {peer}",
    "feed.joined": "{name} 加入了房间 ({peer})",
    "feed.connected_host": "已连接到房主: {host}",
    "feed.disconnected_host": "与房主的连接已断开",
    "feed.room_full": "房主通知: 房间已满",
    "feed.not_connected": "未连接到房主",
    "feed.dropped": "已丢弃来自 {peer} 的消息: {reason}",

    # ── 日志流: 对局 ──
    "feed.need_players": "至少需要 {count} 名玩家才能开局",
    "feed.host_started": "房主开始了对局",
    "feed.game_started": "对局开始",
    "feed.not_running": "忽略 {player} 的动作: 对局未在进行中",
    "feed.not_your_turn": "忽略 {player} 的动作: 不是该玩家的回合",
    "feed.not_in_hand": "无效出牌: 手牌中没有 {tile}",
    "feed.no_fit": "{tile} 与两端都不相接",
    "feed.wrong_side": "{tile} 无法接在{side}",
    "feed.winner": "玩家 {player} 获胜!",

    # ── 终端视图 ──
    "ui.title": "多米诺",
    "ui.peer_id": "你的 ID",
    "ui.room_id": "房间 (房主) ID",
    "ui.players": "玩家",
    "ui.game": "对局",
    "ui.not_running": "对局未进行",
    "ui.board": "牌面",
    "ui.ends": "两端",
    "ui.boneyard": "牌堆",
    "ui.turn": "回合",
    "ui.your_turn": "轮到你了",
    "ui.player_turn": "玩家 {player}",
    "ui.hand": "你的手牌",
    "ui.log": "日志",
    "ui.winner": "胜者: {player}",
    "ui.hint": "命令: start | play <a> <b> [left|right] | draw | pass | quit",
    "ui.invalid_command": "未知命令: {command}",
    "ui.only_host": "只有房主可以开局",
    "ui.prompt": "> ",
}
