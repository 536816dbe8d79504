"""网络安全模块

提供:
- sanitize_display_name: 显示名净化 (防 XSS / 注入)
- 安全相关常量
"""
from __future__ import annotations

import html
import logging
import re

logger = logging.getLogger(__name__)

# ==================== 安全常量 ====================

# 显示名最大长度
MAX_NAME_LENGTH: int = 20

# WebSocket 关闭码
CLOSE_TRY_AGAIN_LATER: int = 1013  # 房间已满
CLOSE_POLICY_VIOLATION: int = 1008  # 节点 ID 冲突等


# ==================== 输入净化 ====================

# 匹配 HTML 标签 (简单版，覆盖 <script>...</script> 等)
_HTML_TAG_RE = re.compile(r"<[^>]+>")
# 控制字符
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")


def sanitize_display_name(text: str, max_length: int = MAX_NAME_LENGTH) -> str:
    """净化玩家显示名。

    1. 移除 HTML 标签与控制字符
    2. 去除首尾空白并截断到最大长度
    3. 转义 HTML 特殊字符

    Returns:
        净化后的安全文本 (可能为空字符串)
    """
    text = _HTML_TAG_RE.sub("", text)
    text = _CONTROL_RE.sub("", text)
    text = text.strip()[:max_length]
    return html.escape(text, quote=True)
