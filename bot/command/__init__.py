"""
Command 처리 모듈

채팅 명령 파싱 및 처리 로직
"""

from bot.command.handler import CommandHandler
from bot.command.parser import BotCommand, parse_command

__all__ = [
    "BotCommand",
    "CommandHandler",
    "parse_command",
]
