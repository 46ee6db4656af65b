"""
Archive (투자 이관) 연산

현재 잔액 전체를 history로 옮기고 현재 잔액을 0으로 만듦.
별도 카운터 없이 archive Entry 한 건으로 표현.

상태: idle → archiving (사용자별 배타) → idle
"""

from __future__ import annotations

import logging

from core.ledger.errors import NothingToArchive
from core.ledger.store import (
    LedgerStore,
    check_total,
    insert_entry,
    sum_balance,
    sum_history,
)
from core.ledger.types import EntryKind

logger = logging.getLogger(__name__)


class ArchiveOperation:
    """Archive 연산

    잔액 조회 → archive Entry 추가를 BEGIN IMMEDIATE 트랜잭션 하나로 처리.
    쓰기 잠금을 조회 전에 잡으므로 같은 잔액을 두 번 차감할 수 없음.
    잠금은 프로세스 밖(SQLite 파일)에 있어 여러 인스턴스가 DB를 공유해도 유효.

    Args:
        store: LedgerStore
    """

    def __init__(self, store: LedgerStore):
        self.store = store

    async def archive(self, user_id: str, reason: str | None = None) -> int:
        """현재 잔액을 history로 이관

        Args:
            user_id: 사용자 UUID
            reason: archive Entry 메모 (선택)

        Returns:
            이관된 금액 (archive 직전 잔액)

        Raises:
            NothingToArchive: 현재 잔액이 0 (Entry 기록 없음)
            AmountOverflow: 이관 후 history 합계가 int64 범위 초과
        """
        async with self.store.db.transaction(immediate=True) as conn:
            balance = await sum_balance(conn, user_id)
            if balance == 0:
                raise NothingToArchive(user_id)

            history = await sum_history(conn, user_id)
            check_total(history + balance, balance)

            entry = await insert_entry(
                conn, user_id, -balance, EntryKind.ARCHIVE, reason
            )

        logger.info(
            "Archive 완료: user=%s moved=%d entry_id=%d", user_id, balance, entry.id
        )
        return balance
