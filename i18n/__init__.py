"""轻量级 i18n 框架 — 零外部依赖。

用法::

    from i18n import t, set_locale

    set_locale("en_US")
    print(t("feed.joined", name="Ana", peer="3f2a"))

    # 领域助手
    from i18n import tile_label
    print(tile_label((6, 2)))  # → "[6|2]"

默认语言可用环境变量 ``DOMINO_LOCALE`` 指定。
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence

logger = logging.getLogger(__name__)

_FALLBACK_LOCALE = "zh_CN"
_SUPPORTED = ("zh_CN", "en_US")

_locale: str = os.environ.get("DOMINO_LOCALE", _FALLBACK_LOCALE)
_tables: dict[str, dict[str, str]] = {}


def _load_table(locale: str) -> dict[str, str]:
    """按需加载翻译表。"""
    if locale == "zh_CN":
        from .zh_CN import STRINGS
    elif locale == "en_US":
        from .en_US import STRINGS
    else:
        raise ValueError(f"Unsupported locale: {locale}")
    return STRINGS


def _table(locale: str) -> dict[str, str]:
    if locale not in _tables:
        _tables[locale] = _load_table(locale)
    return _tables[locale]


def set_locale(locale: str) -> None:
    """设置当前语言。"""
    global _locale
    _table(locale)  # 预加载以确保 locale 有效
    _locale = locale


def get_locale() -> str:
    """获取当前语言。"""
    return _locale


def get_available_locales() -> list[str]:
    """返回所有可用的 locale 列表。"""
    return list(_SUPPORTED)


def t(key: str, **kwargs: object) -> str:
    """翻译函数。

    查找当前 locale 对应的字符串，用 ``kwargs`` 做 format 替换。
    若 key 缺失则回退到 zh_CN，仍缺失则返回 ``[key]``。
    """
    locale = _locale if _locale in _SUPPORTED else _FALLBACK_LOCALE
    template = _table(locale).get(key)

    if template is None and locale != _FALLBACK_LOCALE:
        template = _table(_FALLBACK_LOCALE).get(key)
        if template is not None:
            logger.debug("i18n fallback: '%s' not in %s, using zh_CN", key, locale)

    if template is None:
        logger.warning("i18n missing key: '%s' (lang=%s)", key, locale)
        return f"[{key}]"

    if kwargs:
        try:
            return template.format_map(kwargs)
        except KeyError as e:
            logger.warning("i18n format error: key='%s', missing=%s", key, e)
            return template
    return template


# ── 便捷别名 ──
_ = t


def tile_label(pips: Sequence[int]) -> str:
    """骨牌的显示文本，如 ``[6|2]``。"""
    a, b = pips
    return f"[{a}|{b}]"


def side_name(side: str) -> str:
    """端名 (left/right) 的本地化显示。"""
    key = f"side.{side}"
    result = t(key)
    return side if result == f"[{key}]" else result
