"""
Ledger 저장소

append-only Entry 저장 및 잔액 집계
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.constants import Limits
from core.ledger.errors import AmountOverflow, InvalidEntry
from core.ledger.types import Entry, EntryKind
from core.utils.timezone import now_utc_iso

if TYPE_CHECKING:
    import aiosqlite

    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


_ENTRY_COLUMNS = "id, user_id, amount_cents, kind, reason, created_at"


def validate_entry(kind: EntryKind, amount_cents: int) -> None:
    """사용자 요청 Entry 규칙 검증

    Raises:
        InvalidEntry: save ≤ 0, adjust == 0, archive 직접 기록, int64 범위 초과
    """
    if kind == EntryKind.ARCHIVE:
        raise InvalidEntry(kind.value, amount_cents, "archive entries are system-generated")
    if not Limits.INT64_MIN <= amount_cents <= Limits.INT64_MAX:
        raise InvalidEntry(kind.value, amount_cents, "amount out of range")
    if kind == EntryKind.SAVE and amount_cents <= 0:
        raise InvalidEntry(kind.value, amount_cents, "save amount must be positive")
    if kind == EntryKind.ADJUST and amount_cents == 0:
        raise InvalidEntry(kind.value, amount_cents, "adjustment must be non-zero")


async def insert_entry(
    conn: aiosqlite.Connection,
    user_id: str,
    amount_cents: int,
    kind: EntryKind,
    reason: str | None,
) -> Entry:
    """주어진 연결에서 Entry 1건 INSERT (검증 없음)

    호출자가 트랜잭션 경계를 관리.
    """
    created_at = now_utc_iso()
    cursor = await conn.execute(
        """
        INSERT INTO entries (user_id, amount_cents, kind, reason, created_at)
        VALUES (?, ?, ?, ?, ?)
        """,
        (user_id, amount_cents, kind.value, reason, created_at),
    )
    entry_id = cursor.lastrowid
    await cursor.close()

    return Entry(
        id=int(entry_id),
        user_id=user_id,
        amount_cents=amount_cents,
        kind=kind,
        reason=reason,
        created_at=created_at,
    )


async def sum_balance(conn: aiosqlite.Connection, user_id: str) -> int:
    """주어진 연결에서 현재 잔액 합계 조회"""
    cursor = await conn.execute(
        "SELECT COALESCE(SUM(amount_cents), 0) FROM entries WHERE user_id = ?",
        (user_id,),
    )
    row = await cursor.fetchone()
    await cursor.close()
    return int(row[0])


async def sum_history(conn: aiosqlite.Connection, user_id: str) -> int:
    """주어진 연결에서 누적 이관 금액 조회 (archive Entry 부호 반전 합계)"""
    cursor = await conn.execute(
        """
        SELECT COALESCE(-SUM(amount_cents), 0)
        FROM entries
        WHERE user_id = ? AND kind = ?
        """,
        (user_id, EntryKind.ARCHIVE.value),
    )
    row = await cursor.fetchone()
    await cursor.close()
    return int(row[0])


def check_total(total: int, amount_cents: int) -> None:
    """합계가 int64 대칭 범위 안인지 확인

    -INT64_MIN은 int64로 표현할 수 없으므로 하한도 -INT64_MAX.

    Raises:
        AmountOverflow: 범위 초과 (Entry 기록 없음)
    """
    if abs(total) > Limits.INT64_MAX:
        raise AmountOverflow(str(amount_cents))


class LedgerStore:
    """Ledger 저장소

    Entry는 INSERT만 하고 UPDATE/DELETE 하지 않음.
    잔액은 캐시 없이 매번 SUM으로 계산.

    Args:
        db: SQLite 어댑터

    사용 예시:
    ```python
    store = LedgerStore(db)
    await store.add_entry(user_id, 1250, EntryKind.SAVE, "점심 절약")
    balance = await store.current_balance(user_id)
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def add_entry(
        self,
        user_id: str,
        amount_cents: int,
        kind: EntryKind,
        reason: str | None = None,
    ) -> Entry:
        """Entry 추가

        잔액 확인과 INSERT를 BEGIN IMMEDIATE 트랜잭션 하나로 처리.
        커밋 전에는 다른 조회에 보이지 않음.

        Args:
            user_id: 사용자 UUID
            amount_cents: 부호 있는 센트 금액
            kind: SAVE 또는 ADJUST
            reason: 메모 (선택)

        Returns:
            저장된 Entry

        Raises:
            InvalidEntry: Entry 규칙 위반
            AmountOverflow: 추가 후 잔액이 int64 범위 초과
        """
        kind = EntryKind(kind)
        validate_entry(kind, amount_cents)

        async with self.db.transaction(immediate=True) as conn:
            balance = await sum_balance(conn, user_id)
            check_total(balance + amount_cents, amount_cents)
            entry = await insert_entry(conn, user_id, amount_cents, kind, reason)

        logger.debug(
            "Entry 저장: id=%d user=%s kind=%s amount=%d",
            entry.id,
            user_id,
            kind.value,
            amount_cents,
        )
        return entry

    async def current_balance(self, user_id: str) -> int:
        """현재 잔액 (archive 차감 포함 전체 합계, Entry 없으면 0)"""
        async with self.db.acquire() as conn:
            return await sum_balance(conn, user_id)

    async def history_total(self, user_id: str) -> int:
        """누적 이관 금액 (archive Entry 부호 반전 합계)"""
        async with self.db.acquire() as conn:
            return await sum_history(conn, user_id)

    async def grand_total(self, user_id: str) -> int:
        """총합 (현재 잔액 + 누적 이관 금액)

        archive 전후로 변하지 않음.
        """
        row = await self.db.fetchone(
            """
            SELECT
                COALESCE(SUM(amount_cents), 0),
                COALESCE(-SUM(CASE WHEN kind = ? THEN amount_cents END), 0)
            FROM entries
            WHERE user_id = ?
            """,
            (EntryKind.ARCHIVE.value, user_id),
        )
        return int(row[0]) + int(row[1]) if row else 0

    async def recent_entries(self, user_id: str, limit: int) -> list[Entry]:
        """최근 Entry 조회 (id 내림차순)

        Args:
            user_id: 사용자 UUID
            limit: 최대 개수 (1 이상, 범위 제한은 호출자 책임)

        Returns:
            조회 시점 스냅샷 리스트

        Raises:
            ValueError: limit < 1 (SQLite는 음수 LIMIT을 무제한으로 처리)
        """
        if limit < 1:
            raise ValueError(f"limit must be >= 1: {limit}")

        rows = await self.db.fetchall(
            f"""
            SELECT {_ENTRY_COLUMNS}
            FROM entries
            WHERE user_id = ?
            ORDER BY id DESC
            LIMIT ?
            """,
            (user_id, limit),
        )
        return [Entry.from_row(row) for row in rows]
