"""
Telegram Bot API 모델 변환

Bot API JSON 응답을 불변 도메인 모델로 변환.
필요한 필드만 유지하고 나머지는 무시.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TelegramUser:
    """메시지 발신자

    Attributes:
        id: Telegram user id (external identity)
        first_name: 이름 (Bot API에서 항상 존재)
        username: @username (선택)
        last_name: 성 (선택)
        is_bot: 봇 계정 여부
    """

    id: int
    first_name: str
    username: str | None = None
    last_name: str | None = None
    is_bot: bool = False

    @property
    def display_name(self) -> str:
        """표시 이름 (@username 우선, 없으면 이름)"""
        if self.username:
            return f"@{self.username}"
        return self.first_name


@dataclass(frozen=True)
class TelegramMessage:
    """수신 메시지

    Attributes:
        message_id: 채팅 내 메시지 ID
        chat_id: 채팅 ID (답장 대상)
        text: 본문 (텍스트 메시지가 아니면 None)
        sender: 발신자 (채널 게시물 등은 None)
    """

    message_id: int
    chat_id: int
    text: str | None = None
    sender: TelegramUser | None = None


@dataclass(frozen=True)
class TelegramUpdate:
    """getUpdates 항목"""

    update_id: int
    message: TelegramMessage | None = None


def parse_user(data: dict[str, Any]) -> TelegramUser:
    """User 객체 파싱"""
    return TelegramUser(
        id=int(data["id"]),
        first_name=data.get("first_name", ""),
        username=data.get("username"),
        last_name=data.get("last_name"),
        is_bot=bool(data.get("is_bot", False)),
    )


def parse_message(data: dict[str, Any]) -> TelegramMessage:
    """Message 객체 파싱"""
    sender = data.get("from")
    return TelegramMessage(
        message_id=int(data["message_id"]),
        chat_id=int(data["chat"]["id"]),
        text=data.get("text"),
        sender=parse_user(sender) if sender else None,
    )


def parse_update(data: dict[str, Any]) -> TelegramUpdate:
    """Update 객체 파싱

    message 외의 업데이트 유형(edited_message, callback_query 등)은 무시.
    """
    message = data.get("message")
    return TelegramUpdate(
        update_id=int(data["update_id"]),
        message=parse_message(message) if message else None,
    )
