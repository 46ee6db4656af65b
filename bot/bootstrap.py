"""
Bot Bootstrap

설정 로드, 의존성 주입, 메인 루프 관리.

- Telegram long polling (getUpdates)
- 메시지 1건당 태스크 1개로 동시 처리
- 저장소 연결은 연산 단위로 풀에서 대여
"""

import asyncio
import logging
import sys

import httpx

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from adapters.interfaces import IBotClient
from adapters.telegram.client import TelegramApiError, TelegramBotClient
from adapters.telegram.models import TelegramMessage
from bot.command.handler import CommandHandler
from core.config.loader import BotConfig, ConfigLoadError, get_settings
from core.constants import Defaults
from core.ledger.archive import ArchiveOperation
from core.ledger.store import LedgerStore
from core.logging import setup_logging
from core.storage.user_registry import UserRegistry

logger = logging.getLogger("bot")


class BotEngine:
    """Bot 엔진

    모든 컴포넌트를 초기화하고 메인 루프 실행.

    Args:
        config: Bot 설정
        db: SQLite 어댑터
        client: 봇 API 클라이언트
    """

    def __init__(self, config: BotConfig, db: SQLiteAdapter, client: IBotClient):
        self.config = config
        self.db = db
        self.client = client

        # 코어 컴포넌트
        self.registry = UserRegistry(db)
        self.store = LedgerStore(db)
        self.archiver = ArchiveOperation(self.store)

        # initialize()에서 생성 (봇 username 필요)
        self.handler: CommandHandler | None = None

        self.poll_error_backoff = Defaults.POLL_ERROR_BACKOFF_SEC

        # 처리 중인 메시지 태스크
        self._tasks: set[asyncio.Task] = set()
        self._offset: int | None = None

        # 통계
        self._handled_count = 0

    @property
    def pending_tasks(self) -> int:
        """처리 중인 메시지 수"""
        return len(self._tasks)

    async def initialize(self) -> None:
        """봇 정보 조회 및 핸들러 생성"""
        me = await self.client.get_me()
        logger.info("봇 계정 확인: @%s (id=%s)", me.username, me.id)

        self.handler = CommandHandler(
            registry=self.registry,
            store=self.store,
            archiver=self.archiver,
            bot_username=me.username,
        )

    async def handle_message(self, message: TelegramMessage) -> None:
        """메시지 1건 처리 후 답장

        답장 전송 실패는 로그만 남김. 이미 커밋된 Ledger 변경은 되돌리지 않음.
        """
        if self.handler is None:
            raise RuntimeError("BotEngine.initialize()가 호출되지 않았습니다")

        reply = await self.handler.handle(message)
        self._handled_count += 1
        if reply is None:
            return

        try:
            await self.client.send_message(
                message.chat_id,
                reply,
                reply_to_message_id=message.message_id,
            )
        except Exception:
            logger.exception("답장 전송 실패: chat_id=%s", message.chat_id)

    def _spawn(self, message: TelegramMessage) -> None:
        task = asyncio.create_task(self.handle_message(message))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("메시지 태스크 실패: %r", exc, exc_info=exc)

    async def poll_once(self) -> int:
        """getUpdates 1회 호출 후 메시지별 태스크 생성

        Returns:
            수신한 업데이트 수
        """
        updates = await self.client.get_updates(
            offset=self._offset,
            timeout=self.config.poll_timeout_sec,
        )

        for update in updates:
            self._offset = update.update_id + 1
            if update.message is not None:
                self._spawn(update.message)

        return len(updates)

    async def run_main_loop(self, shutdown_event: asyncio.Event) -> None:
        """메인 루프

        Args:
            shutdown_event: 설정되면 루프 종료
        """
        while not shutdown_event.is_set():
            try:
                await self.poll_once()
            except (TelegramApiError, httpx.HTTPError) as e:
                delay = self.poll_error_backoff
                if isinstance(e, TelegramApiError) and e.retry_after:
                    delay = float(e.retry_after)
                logger.warning("업데이트 조회 실패: %s (%.1f초 후 재시도)", e, delay)
                try:
                    await asyncio.wait_for(shutdown_event.wait(), timeout=delay)
                except asyncio.TimeoutError:
                    pass

    async def stop(self, timeout: float = 10.0) -> None:
        """처리 중인 메시지를 기다린 뒤 종료

        timeout 안에 끝나지 않은 태스크는 취소.
        """
        if self._tasks:
            logger.info("처리 중인 메시지 %d건 대기", len(self._tasks))
            _, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        logger.info("Bot 엔진 종료 (처리 메시지: %d건)", self._handled_count)


async def main() -> None:
    """Bot 메인 함수"""
    # 1. 설정 로드
    try:
        settings = get_settings()
    except ConfigLoadError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"설정 로드 실패: {e}")
        sys.exit(1)

    setup_logging("bot", console_level=settings.log_level, file_level=settings.log_level)

    logger.info("=" * 60)
    logger.info("AllInVoo Bot 시작")
    logger.info("=" * 60)
    logger.info(f"DB: {settings.db_path}")

    # 2. DB 연결 및 스키마 초기화
    async with SQLiteAdapter(settings.db_path) as db, TelegramBotClient(
        settings.bot_token
    ) as client:
        await init_schema(db)

        # 3. Bot 엔진 생성 및 초기화
        engine = BotEngine(settings.config, db, client)
        await engine.initialize()

        shutdown_event = asyncio.Event()

        logger.info("Bot 메인 루프 시작 (종료: Ctrl+C)")

        try:
            await engine.run_main_loop(shutdown_event)
        except asyncio.CancelledError:
            logger.info("메인 루프 취소됨")
        except KeyboardInterrupt:
            logger.info("Ctrl+C 감지")
        finally:
            await engine.stop()

    logger.info("AllInVoo Bot 정상 종료")


if __name__ == "__main__":
    asyncio.run(main())
