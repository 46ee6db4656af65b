"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 구현체는 이 Protocol을 준수해야 함.
"""

from typing import Protocol, runtime_checkable

from adapters.telegram.models import TelegramUpdate, TelegramUser


@runtime_checkable
class IBotClient(Protocol):
    """채팅 봇 API 클라이언트 인터페이스

    long polling으로 메시지를 받고 답장을 보냄.
    """

    async def get_me(self) -> TelegramUser:
        """봇 자신의 정보 조회"""
        ...

    async def get_updates(
        self,
        offset: int | None = None,
        timeout: int = 30,
    ) -> list[TelegramUpdate]:
        """새 업데이트 조회

        Args:
            offset: 마지막으로 처리한 update_id + 1
            timeout: long polling 대기 시간 (초)

        Returns:
            업데이트 목록
        """
        ...

    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_to_message_id: int | None = None,
    ) -> int:
        """메시지 전송

        Returns:
            전송된 message_id
        """
        ...

    async def close(self) -> None:
        """연결 종료"""
        ...
