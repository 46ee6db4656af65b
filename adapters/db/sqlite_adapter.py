"""
SQLite 어댑터

WAL 모드 SQLite 연결 풀 관리.
명령 처리 태스크마다 연결을 잠깐 빌려 쓰고 즉시 반납.

주의: 연결은 autocommit 모드(isolation_level=None).
여러 문장을 묶을 때는 반드시 transaction() 사용.
"""

import asyncio
import logging
import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from core.constants import Defaults

logger = logging.getLogger(__name__)


async def create_connection(db_path: Path | str) -> aiosqlite.Connection:
    """SQLite 연결 생성 (WAL 모드, autocommit)

    Args:
        db_path: DB 파일 경로

    Returns:
        aiosqlite 연결 객체
    """
    db_path_str = str(db_path)

    # 디렉토리가 없으면 생성
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    # isolation_level=None: 암묵적 BEGIN 없이 BEGIN/COMMIT을 직접 제어
    conn = await aiosqlite.connect(db_path_str, isolation_level=None)

    await conn.execute("PRAGMA journal_mode=WAL")

    # 동시 접근 설정 (다른 writer의 커밋을 최대 30초 대기)
    await conn.execute("PRAGMA busy_timeout=30000")

    await conn.execute("PRAGMA foreign_keys=ON")

    logger.debug("SQLite 연결 생성: %s", db_path_str)

    return conn


class SQLiteAdapter:
    """SQLite 어댑터

    고정 크기 연결 풀. 각 연산은 acquire()로 연결을 빌리고 끝나면 반납.
    사용자 간 연산은 서로 다른 연결에서 동시에 진행됨.

    Args:
        db_path: DB 파일 경로
        pool_size: 연결 풀 크기

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as db:
        async with db.transaction() as conn:
            await conn.execute("INSERT INTO ...")

        row = await db.fetchone("SELECT ...", (user_id,))
    ```
    """

    def __init__(self, db_path: Path | str, pool_size: int = Defaults.DB_POOL_SIZE):
        if pool_size < 1:
            raise ValueError("pool_size는 1 이상이어야 합니다")

        self.db_path = Path(db_path)
        self.pool_size = pool_size
        self._pool: asyncio.Queue[aiosqlite.Connection] | None = None
        self._connections: list[aiosqlite.Connection] = []

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._pool is not None

    async def connect(self) -> None:
        """연결 풀 생성"""
        if self._pool is not None:
            return

        pool: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=self.pool_size)
        for _ in range(self.pool_size):
            conn = await create_connection(self.db_path)
            self._connections.append(conn)
            pool.put_nowait(conn)

        self._pool = pool
        logger.info(
            "SQLite 연결 풀 생성: %s (pool_size=%d)", self.db_path, self.pool_size
        )

    async def close(self) -> None:
        """연결 풀 종료"""
        if self._pool is None:
            return

        for conn in self._connections:
            await conn.close()
        self._connections.clear()
        self._pool = None
        logger.info("SQLite 연결 종료")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """풀에서 연결 대여 (블록 종료 시 반납)"""
        if self._pool is None:
            raise RuntimeError("Not connected to database")

        pool = self._pool
        conn = await pool.get()
        try:
            yield conn
        finally:
            try:
                conn = await self._reset_connection(conn)
            finally:
                pool.put_nowait(conn)

    async def _reset_connection(self, conn: aiosqlite.Connection) -> aiosqlite.Connection:
        """반납 전 열린 트랜잭션 정리

        ROLLBACK이 실패하면 연결을 닫고 새 연결로 교체.
        쓰기 잠금을 쥔 연결이 풀에 남지 않아야 함.

        Returns:
            풀에 돌려놓을 연결
        """
        if not conn.in_transaction:
            return conn

        logger.warning("트랜잭션이 열린 채 반납된 연결, ROLLBACK 실행")
        try:
            await conn.execute("ROLLBACK")
            return conn
        except sqlite3.Error:
            logger.exception("ROLLBACK 실패, 연결 교체")

        await conn.close()
        replacement = await create_connection(self.db_path)
        self._connections = [c for c in self._connections if c is not conn]
        self._connections.append(replacement)
        return replacement

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> int:
        """단일 SQL 실행 (autocommit)

        Returns:
            영향받은 행 수
        """
        async with self.acquire() as conn:
            cursor = await conn.execute(sql, parameters or ())
            rowcount = cursor.rowcount
            await cursor.close()
            return rowcount

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> tuple[Any, ...] | None:
        """단일 행 조회"""
        async with self.acquire() as conn:
            cursor = await conn.execute(sql, parameters or ())
            row = await cursor.fetchone()
            await cursor.close()
            return row

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        """전체 행 조회"""
        async with self.acquire() as conn:
            cursor = await conn.execute(sql, parameters or ())
            rows = await cursor.fetchall()
            await cursor.close()
            return list(rows)

    @asynccontextmanager
    async def transaction(
        self, immediate: bool = True
    ) -> AsyncIterator[aiosqlite.Connection]:
        """트랜잭션 컨텍스트 매니저

        성공 시 자동 커밋, 예외(취소 포함) 시 자동 롤백.
        immediate=True면 BEGIN 시점에 쓰기 잠금을 획득하므로
        블록 안의 읽기 → 쓰기 사이에 다른 writer가 끼어들 수 없음.

        사용 예시:
        ```python
        async with adapter.transaction() as conn:
            cursor = await conn.execute("SELECT SUM(...) ...")
            await conn.execute("INSERT INTO ...")
        ```
        """
        async with self.acquire() as conn:
            try:
                # BEGIN 대기 중 취소되어도 워커 스레드에서 BEGIN은 실행됨
                await conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
                yield conn
            except BaseException:
                await self._rollback(conn)
                raise
            await conn.execute("COMMIT")

    async def _rollback(self, conn: aiosqlite.Connection) -> None:
        """ROLLBACK (트랜잭션이 시작되지 않았으면 무시)

        aiosqlite는 연결별로 문장을 순서대로 실행하므로
        ROLLBACK은 앞서 요청한 BEGIN의 결과를 본 뒤 실행됨.
        """
        try:
            await conn.execute("ROLLBACK")
        except sqlite3.OperationalError as e:
            if conn.in_transaction:
                raise
            logger.debug("ROLLBACK 생략 (활성 트랜잭션 없음): %s", e)

    async def table_exists(self, table_name: str) -> bool:
        """테이블 존재 여부 확인"""
        result = await self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result is not None

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


async def init_schema(adapter: SQLiteAdapter) -> None:
    """스키마 초기화 (테이블 생성)

    CREATE IF NOT EXISTS 패턴이라 매 시작마다 호출해도 안전.

    Args:
        adapter: 연결된 SQLiteAdapter
    """
    # users
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id           TEXT PRIMARY KEY,
            external_id  INTEGER NOT NULL UNIQUE,
            username     TEXT,
            first_name   TEXT,
            last_name    TEXT,
            created_at   TEXT NOT NULL
        )
    """)

    # entries (append-only)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS entries (
            id            INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id       TEXT NOT NULL,
            amount_cents  INTEGER NOT NULL,
            kind          TEXT NOT NULL
                          CHECK (kind IN ('save', 'adjust', 'archive')),
            reason        TEXT,
            created_at    TEXT NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id)
        )
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_entries_user
        ON entries(user_id)
    """)

    logger.info("스키마 초기화 완료")
