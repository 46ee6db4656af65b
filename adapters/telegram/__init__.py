"""
Telegram 어댑터

Bot API long polling 클라이언트와 응답 모델.
"""

from adapters.telegram.client import TelegramApiError, TelegramBotClient
from adapters.telegram.models import (
    TelegramMessage,
    TelegramUpdate,
    TelegramUser,
    parse_message,
    parse_update,
    parse_user,
)

__all__ = [
    "TelegramBotClient",
    "TelegramApiError",
    "TelegramUser",
    "TelegramMessage",
    "TelegramUpdate",
    "parse_user",
    "parse_message",
    "parse_update",
]
