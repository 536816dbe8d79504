# -*- coding: utf-8 -*-
"""
UI模块
提供终端界面显示
"""

from .console import Command, ConsoleView, parse_command

__all__ = ['Command', 'ConsoleView', 'parse_command']
