"""
SQLite 어댑터 테스트

SQLiteAdapter 및 관련 함수 테스트.
"""

import asyncio
import sqlite3
from pathlib import Path

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import (
    SQLiteAdapter,
    create_connection,
    init_schema,
)
from core.ledger.archive import ArchiveOperation
from core.ledger.store import LedgerStore
from core.ledger.types import EntryKind
from core.storage.user_registry import UserRegistry


class TestCreateConnection:
    """create_connection 테스트"""

    @pytest.mark.asyncio
    async def test_create_connection(self, tmp_path: Path) -> None:
        """연결 생성 (WAL 모드)"""
        conn = await create_connection(tmp_path / "test.db")

        cursor = await conn.execute("PRAGMA journal_mode")
        row = await cursor.fetchone()
        assert row[0].upper() == "WAL"

        await conn.close()

    @pytest.mark.asyncio
    async def test_pragmas(self, tmp_path: Path) -> None:
        """busy_timeout, foreign_keys 설정"""
        conn = await create_connection(tmp_path / "test.db")

        cursor = await conn.execute("PRAGMA busy_timeout")
        assert (await cursor.fetchone())[0] == 30000
        cursor = await conn.execute("PRAGMA foreign_keys")
        assert (await cursor.fetchone())[0] == 1

        await conn.close()

    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, tmp_path: Path) -> None:
        """부모 디렉토리 생성"""
        db_path = tmp_path / "subdir" / "test.db"

        conn = await create_connection(db_path)

        assert db_path.parent.exists()

        await conn.close()


class TestSQLiteAdapter:
    """SQLiteAdapter 테스트"""

    @pytest_asyncio.fixture
    async def adapter(self, tmp_path: Path) -> SQLiteAdapter:
        """테스트용 어댑터"""
        adapter = SQLiteAdapter(tmp_path / "test.db", pool_size=2)
        await adapter.connect()
        await adapter.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, value TEXT)")
        yield adapter
        await adapter.close()

    def test_invalid_pool_size(self, tmp_path: Path) -> None:
        """pool_size < 1 거부"""
        with pytest.raises(ValueError):
            SQLiteAdapter(tmp_path / "test.db", pool_size=0)

    @pytest.mark.asyncio
    async def test_connect_and_close(self, tmp_path: Path) -> None:
        """연결 및 종료"""
        adapter = SQLiteAdapter(tmp_path / "test.db")

        assert not adapter.is_connected
        await adapter.connect()
        assert adapter.is_connected
        await adapter.close()
        assert not adapter.is_connected

    @pytest.mark.asyncio
    async def test_acquire_not_connected(self, tmp_path: Path) -> None:
        """연결 전 acquire는 RuntimeError"""
        adapter = SQLiteAdapter(tmp_path / "test.db")

        with pytest.raises(RuntimeError):
            async with adapter.acquire():
                pass

    @pytest.mark.asyncio
    async def test_context_manager(self, tmp_path: Path) -> None:
        """async with 사용"""
        async with SQLiteAdapter(tmp_path / "test.db") as adapter:
            assert adapter.is_connected

        assert not adapter.is_connected

    @pytest.mark.asyncio
    async def test_execute_returns_rowcount(self, adapter: SQLiteAdapter) -> None:
        """execute 영향 행 수"""
        count = await adapter.execute("INSERT INTO t (value) VALUES (?)", ("a",))

        assert count == 1

    @pytest.mark.asyncio
    async def test_fetchone_and_fetchall(self, adapter: SQLiteAdapter) -> None:
        """단건/전체 조회"""
        await adapter.execute("INSERT INTO t (value) VALUES (?)", ("a",))
        await adapter.execute("INSERT INTO t (value) VALUES (?)", ("b",))

        row = await adapter.fetchone("SELECT value FROM t WHERE id = ?", (1,))
        rows = await adapter.fetchall("SELECT value FROM t ORDER BY id")

        assert row == ("a",)
        assert rows == [("a",), ("b",)]
        assert await adapter.fetchone("SELECT value FROM t WHERE id = 99") is None

    @pytest.mark.asyncio
    async def test_transaction_commit(self, adapter: SQLiteAdapter) -> None:
        """정상 종료 시 커밋"""
        async with adapter.transaction() as conn:
            await conn.execute("INSERT INTO t (value) VALUES ('x')")
            await conn.execute("INSERT INTO t (value) VALUES ('y')")

        rows = await adapter.fetchall("SELECT value FROM t ORDER BY id")
        assert rows == [("x",), ("y",)]

    @pytest.mark.asyncio
    async def test_transaction_rollback(self, adapter: SQLiteAdapter) -> None:
        """예외 시 롤백"""
        with pytest.raises(RuntimeError):
            async with adapter.transaction() as conn:
                await conn.execute("INSERT INTO t (value) VALUES ('x')")
                raise RuntimeError("boom")

        assert await adapter.fetchall("SELECT value FROM t") == []

    @pytest.mark.asyncio
    async def test_connection_returned_after_rollback(
        self, adapter: SQLiteAdapter
    ) -> None:
        """롤백 후에도 풀 연결 재사용 가능"""
        for _ in range(adapter.pool_size + 1):
            with pytest.raises(RuntimeError):
                async with adapter.transaction():
                    raise RuntimeError("boom")

        await adapter.execute("INSERT INTO t (value) VALUES ('ok')")
        assert await adapter.fetchone("SELECT COUNT(*) FROM t") == (1,)

    @pytest.mark.asyncio
    async def test_table_exists(self, adapter: SQLiteAdapter) -> None:
        """테이블 존재 확인"""
        assert await adapter.table_exists("t")
        assert not await adapter.table_exists("missing")


class TestConnectionRelease:
    """연결 반납 시 트랜잭션 정리 테스트"""

    @pytest_asyncio.fixture
    async def single(self, tmp_path: Path) -> SQLiteAdapter:
        """연결 하나짜리 어댑터 (반납된 연결을 그대로 다시 받음)"""
        adapter = SQLiteAdapter(tmp_path / "single.db", pool_size=1)
        await adapter.connect()
        await adapter.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, value TEXT)")
        yield adapter
        await adapter.close()

    @pytest.mark.asyncio
    async def test_open_transaction_rolled_back_on_release(
        self, single: SQLiteAdapter
    ) -> None:
        """커밋 없이 반납된 연결은 ROLLBACK 후 풀로 복귀"""
        async with single.acquire() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            await conn.execute("INSERT INTO t (value) VALUES ('dangling')")
            assert conn.in_transaction

        async with single.acquire() as conn:
            assert not conn.in_transaction

        assert await single.fetchone("SELECT COUNT(*) FROM t") == (0,)

    @pytest.mark.asyncio
    async def test_cancel_during_begin(self, single: SQLiteAdapter) -> None:
        """BEGIN 대기 중 취소되어도 열린 트랜잭션이 남지 않음"""

        async def write() -> None:
            async with single.transaction() as conn:
                await conn.execute("INSERT INTO t (value) VALUES ('never')")

        task = asyncio.create_task(write())
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        async with single.acquire() as conn:
            assert not conn.in_transaction

        async with single.transaction() as conn:
            await conn.execute("INSERT INTO t (value) VALUES ('after')")

        assert await single.fetchall("SELECT value FROM t") == [("after",)]

    @pytest.mark.asyncio
    async def test_cancelled_archive_keeps_later_saves(self, tmp_path: Path) -> None:
        """취소된 archive 뒤의 저장이 재시작 후에도 유지"""
        db_path = tmp_path / "ledger.db"

        db = SQLiteAdapter(db_path, pool_size=1)
        await db.connect()
        await init_schema(db)
        store = LedgerStore(db)
        archiver = ArchiveOperation(store)
        user_id = await UserRegistry(db).ensure_user(4004, "saver", "Sam", None)
        await store.add_entry(user_id, 500, EntryKind.SAVE)

        task = asyncio.create_task(archiver.archive(user_id))
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        async with db.acquire() as conn:
            assert not conn.in_transaction

        await store.add_entry(user_id, 700, EntryKind.SAVE)
        await db.close()

        reopened = SQLiteAdapter(db_path, pool_size=1)
        await reopened.connect()
        try:
            assert await LedgerStore(reopened).current_balance(user_id) == 1200
            assert await LedgerStore(reopened).history_total(user_id) == 0
        finally:
            await reopened.close()


class TestInitSchema:
    """init_schema 테스트"""

    @pytest.mark.asyncio
    async def test_creates_tables(self, db: SQLiteAdapter) -> None:
        """users, entries 생성"""
        assert await db.table_exists("users")
        assert await db.table_exists("entries")

    @pytest.mark.asyncio
    async def test_idempotent(self, db: SQLiteAdapter) -> None:
        """재호출 안전"""
        await init_schema(db)
        await init_schema(db)

        assert await db.table_exists("entries")

    @pytest.mark.asyncio
    async def test_kind_check_constraint(self, db: SQLiteAdapter, user_id: str) -> None:
        """kind CHECK 제약"""
        with pytest.raises(sqlite3.IntegrityError, match="CHECK"):
            await db.execute(
                "INSERT INTO entries (user_id, amount_cents, kind, created_at) "
                "VALUES (?, 100, 'bonus', '2026-01-01T00:00:00+00:00')",
                (user_id,),
            )

    @pytest.mark.asyncio
    async def test_foreign_key(self, db: SQLiteAdapter) -> None:
        """없는 사용자 Entry 거부"""
        with pytest.raises(sqlite3.IntegrityError, match="FOREIGN KEY"):
            await db.execute(
                "INSERT INTO entries (user_id, amount_cents, kind, created_at) "
                "VALUES ('ghost', 100, 'save', '2026-01-01T00:00:00+00:00')"
            )
