"""
Command Handler

채팅 명령을 Ledger 연산으로 연결하고 응답 텍스트를 만듦.

에러 매핑:
- InputError → 거부 메시지 + 사용법 힌트 (상태 변경 없음)
- NothingToArchive → 안내 메시지
- 그 외 예외 → 로그 기록 후 일반 실패 메시지
"""

import logging

from adapters.telegram.models import TelegramMessage, TelegramUser
from bot.command import formatting
from bot.command.parser import BotCommand, parse_command
from core.constants import Defaults
from core.ledger.amount import parse_amount
from core.ledger.archive import ArchiveOperation
from core.ledger.errors import (
    AmountOverflow,
    InputError,
    InvalidAmount,
    InvalidEntry,
    NothingToArchive,
    SignNotAllowed,
)
from core.ledger.store import LedgerStore
from core.ledger.types import EntryKind
from core.storage.user_registry import UserRegistry

logger = logging.getLogger(__name__)


def parse_query_limit(args: str) -> int:
    """/query 인자 → 조회 개수

    숫자가 아니면 기본값, 범위 밖이면 1~50으로 제한.
    """
    try:
        limit = int(args.strip())
    except ValueError:
        return Defaults.QUERY_LIMIT
    return max(Defaults.QUERY_LIMIT_MIN, min(limit, Defaults.QUERY_LIMIT_MAX))


def describe_input_error(error: InputError) -> str:
    """입력 오류 → 사용자용 문구"""
    if isinstance(error, SignNotAllowed):
        return "Sign not allowed here. Use /adjust for signed amounts."
    if isinstance(error, AmountOverflow):
        return "Amount is too large."
    if isinstance(error, InvalidAmount):
        return f"{error.message}."
    if isinstance(error, InvalidEntry):
        if error.kind == EntryKind.SAVE.value:
            return formatting.SAVE_NOT_POSITIVE_TEXT
        if error.kind == EntryKind.ADJUST.value:
            return formatting.ADJUST_ZERO_TEXT
        return f"Invalid entry: {error.message}."
    return str(error)


class CommandHandler:
    """명령 핸들러

    메시지 1건 = 호출 1번. 상태는 모두 저장소에 있으므로
    여러 메시지를 동시에 처리해도 안전.

    Args:
        registry: 사용자 저장소
        store: Ledger 저장소
        archiver: Archive 연산
        bot_username: 봇 username ("/cmd@봇" 필터링용)

    사용 예시:
    ```python
    handler = CommandHandler(registry, store, ArchiveOperation(store), "allinvoo_bot")
    reply = await handler.handle(message)
    if reply:
        await client.send_message(message.chat_id, reply)
    ```
    """

    def __init__(
        self,
        registry: UserRegistry,
        store: LedgerStore,
        archiver: ArchiveOperation,
        bot_username: str | None = None,
    ):
        self.registry = registry
        self.store = store
        self.archiver = archiver
        self.bot_username = bot_username

    async def handle(self, message: TelegramMessage) -> str | None:
        """메시지 처리

        Args:
            message: 수신 메시지

        Returns:
            응답 텍스트 (명령이 아니면 None)
        """
        if not message.text:
            return None

        command = parse_command(message.text, self.bot_username)
        if command is None:
            return None

        sender = message.sender
        if sender is None:
            return formatting.NO_SENDER_TEXT

        try:
            user_id = await self.registry.ensure_user(
                sender.id,
                sender.username,
                sender.first_name,
                sender.last_name,
            )
            return await self._dispatch(command, user_id, sender)
        except InputError as e:
            logger.info("입력 거부: /%s %s (%s)", command.name, command.args, e)
            return formatting.rejection(describe_input_error(e))
        except NothingToArchive:
            return formatting.NOTHING_TO_ARCHIVE_TEXT
        except Exception:
            logger.exception(
                "명령 처리 실패: /%s (external_id=%s)", command.name, sender.id
            )
            return formatting.GENERIC_FAILURE_TEXT

    async def _dispatch(
        self, command: BotCommand, user_id: str, sender: TelegramUser
    ) -> str:
        if command.name == "start":
            return formatting.welcome(sender.display_name, user_id)
        if command.name == "help":
            return formatting.HELP_TEXT
        if command.name == "save":
            return await self._save(user_id, command.args)
        if command.name == "adjust":
            return await self._adjust(user_id, command.args)
        if command.name == "allinvoo":
            return await self._allinvoo(user_id)
        if command.name == "query":
            return await self._query(user_id, sender, command.args)
        raise ValueError(f"Unsupported command: {command.name}")

    async def _save(self, user_id: str, args: str) -> str:
        amount_cents, reason = parse_amount(args, allow_signed=False)
        if amount_cents <= 0:
            return formatting.SAVE_NOT_POSITIVE_TEXT

        await self.store.add_entry(user_id, amount_cents, EntryKind.SAVE, reason)
        total = await self.store.current_balance(user_id)
        return formatting.saved(amount_cents, reason, total)

    async def _adjust(self, user_id: str, args: str) -> str:
        delta_cents, reason = parse_amount(args, allow_signed=True)
        if delta_cents == 0:
            return formatting.ADJUST_ZERO_TEXT

        await self.store.add_entry(user_id, delta_cents, EntryKind.ADJUST, reason)
        total = await self.store.current_balance(user_id)
        return formatting.adjusted(delta_cents, reason, total)

    async def _allinvoo(self, user_id: str) -> str:
        moved = await self.archiver.archive(user_id)
        history = await self.store.history_total(user_id)
        return formatting.archived(moved, history)

    async def _query(self, user_id: str, sender: TelegramUser, args: str) -> str:
        limit = parse_query_limit(args)
        entries = await self.store.recent_entries(user_id, limit)
        if not entries:
            return formatting.NO_ENTRIES_TEXT

        current = await self.store.current_balance(user_id)
        history = await self.store.history_total(user_id)
        return formatting.entry_list(sender.display_name, entries, current, history)
