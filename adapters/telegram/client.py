"""
Telegram Bot API 클라이언트

httpx 비동기 클라이언트로 getMe / getUpdates / sendMessage 호출.
토큰이 URL에 포함되므로 URL은 로그에 남기지 않음.
"""

import logging
from typing import Any

import httpx

from adapters.telegram.models import (
    TelegramUpdate,
    TelegramUser,
    parse_update,
    parse_user,
)
from core.constants import Defaults, TelegramEndpoints

logger = logging.getLogger(__name__)


class TelegramApiError(Exception):
    """Telegram API 에러

    HTTP 에러 또는 응답의 ok=false 수신 시 발생.
    """

    def __init__(
        self,
        description: str,
        error_code: int | None = None,
        retry_after: int | None = None,
    ):
        self.description = description
        self.error_code = error_code
        self.retry_after = retry_after
        super().__init__(f"Telegram API Error [{error_code}]: {description}")


class TelegramBotClient:
    """Telegram Bot API 클라이언트

    Args:
        token: Bot 토큰
        base_url: API 베이스 URL
        timeout: 일반 요청 타임아웃 (초)

    사용 예시:
    ```python
    async with TelegramBotClient(token) as client:
        me = await client.get_me()
        updates = await client.get_updates(offset=None, timeout=30)
        await client.send_message(chat_id, "안녕하세요")
    ```
    """

    def __init__(
        self,
        token: str,
        base_url: str = TelegramEndpoints.API_URL,
        timeout: float = 10.0,
    ):
        if not token:
            raise ValueError("token은 필수입니다")

        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        # httpx 비동기 클라이언트 (재사용)
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 반환 (lazy initialization)"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """HTTP 클라이언트 종료"""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _method_url(self, method: str) -> str:
        return f"{self.base_url}/bot{self.token}/{method}"

    async def _call(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """API 메서드 호출

        Args:
            method: Bot API 메서드 이름 (getMe 등)
            params: JSON 본문
            timeout: 요청 타임아웃 (None이면 기본값)

        Returns:
            응답의 result 필드

        Raises:
            TelegramApiError: HTTP 에러 또는 ok=false
            httpx.HTTPError: 네트워크 에러
        """
        client = await self._get_client()
        response = await client.post(
            self._method_url(method),
            json=params or {},
            timeout=timeout if timeout is not None else self.timeout,
        )

        try:
            body = response.json()
        except ValueError as e:
            raise TelegramApiError(
                f"{method}: invalid response body", response.status_code
            ) from e

        if not isinstance(body, dict):
            raise TelegramApiError(
                f"{method}: invalid response body", response.status_code
            )

        if not body.get("ok"):
            raise TelegramApiError(
                f"{method}: {body.get('description', 'unknown error')}",
                body.get("error_code", response.status_code),
                (body.get("parameters") or {}).get("retry_after"),
            )

        return body.get("result")

    async def get_me(self) -> TelegramUser:
        """봇 자신의 정보 조회"""
        result = await self._call("getMe")
        return parse_user(result)

    async def get_updates(
        self,
        offset: int | None = None,
        timeout: int = Defaults.POLL_TIMEOUT_SEC,
    ) -> list[TelegramUpdate]:
        """새 업데이트 조회 (long polling)

        Args:
            offset: 마지막으로 처리한 update_id + 1
            timeout: 서버 측 long polling 대기 시간 (초)

        Returns:
            업데이트 목록 (없으면 빈 리스트)
        """
        params: dict[str, Any] = {
            "timeout": timeout,
            "allowed_updates": ["message"],
        }
        if offset is not None:
            params["offset"] = offset

        # HTTP 타임아웃은 long polling 대기 시간보다 길어야 함
        result = await self._call(
            "getUpdates", params, timeout=timeout + self.timeout
        )
        return [parse_update(item) for item in result or []]

    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_to_message_id: int | None = None,
    ) -> int:
        """메시지 전송

        Args:
            chat_id: 채팅 ID
            text: 본문 (plain text)
            reply_to_message_id: 답장 대상 메시지 ID (선택)

        Returns:
            전송된 message_id
        """
        params: dict[str, Any] = {"chat_id": chat_id, "text": text}
        if reply_to_message_id is not None:
            params["reply_parameters"] = {
                "message_id": reply_to_message_id,
                "allow_sending_without_reply": True,
            }

        result = await self._call("sendMessage", params)
        logger.debug("메시지 전송: chat_id=%s", chat_id)
        return int(result["message_id"])

    # -------------------------------------------------------------------------
    # Context Manager 지원
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "TelegramBotClient":
        """async with 진입"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """async with 종료 시 클라이언트 정리"""
        await self.close()
