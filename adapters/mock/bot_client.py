"""
Mock 봇 클라이언트

테스트용 Mock Bot Client.
IBotClient Protocol 준수.
"""

import asyncio
from dataclasses import dataclass

from adapters.telegram.models import TelegramUpdate, TelegramUser


@dataclass
class SentMessage:
    """전송 기록"""

    chat_id: int
    text: str
    reply_to_message_id: int | None


class MockBotClient:
    """Mock 봇 클라이언트

    IBotClient Protocol 구현.
    미리 넣어둔 업데이트를 순서대로 돌려주고, 전송한 메시지를 기록.
    큐가 비면 빈 배치를 반환.

    사용 예시:
    ```python
    client = MockBotClient()
    client.push_update(update)

    updates = await client.get_updates()
    await client.send_message(chat_id, "ok")

    assert client.sent[0].text == "ok"
    ```
    """

    def __init__(self, username: str = "allinvoo_bot", fail_send: bool = False):
        """
        Args:
            username: get_me()가 반환할 봇 username
            fail_send: True면 send_message가 RuntimeError 발생 (에러 시나리오용)
        """
        self.me = TelegramUser(id=1, first_name="AllInVoo", username=username, is_bot=True)
        self.fail_send = fail_send
        self.sent: list[SentMessage] = []
        self.offsets: list[int | None] = []
        self.closed = False
        self._batches: list[list[TelegramUpdate]] = []

    def push_update(self, *updates: TelegramUpdate) -> None:
        """다음 get_updates 배치 추가"""
        self._batches.append(list(updates))

    async def get_me(self) -> TelegramUser:
        return self.me

    async def get_updates(
        self,
        offset: int | None = None,
        timeout: int = 30,
    ) -> list[TelegramUpdate]:
        self.offsets.append(offset)
        # 실제 long polling처럼 이벤트 루프에 제어권 양보
        await asyncio.sleep(0)
        if not self._batches:
            return []
        return self._batches.pop(0)

    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_to_message_id: int | None = None,
    ) -> int:
        if self.fail_send:
            raise RuntimeError("send failed")
        self.sent.append(SentMessage(chat_id, text, reply_to_message_id))
        return len(self.sent)

    async def close(self) -> None:
        self.closed = True
