"""
UserRegistry - 외부 ID → 내부 사용자 ID 매핑

첫 메시지에서 사용자를 생성하고 이후에는 같은 UUID를 반환.
표시 정보(username 등)는 최초 등록 시에만 기록 ("register once").
"""

import logging
from dataclasses import dataclass
from uuid import uuid4

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.utils.timezone import now_utc_iso

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class User:
    """사용자

    Attributes:
        id: 내부 UUID (한 번 생성, 재사용 없음)
        external_id: 외부 ID (Telegram user id)
        username: 외부 username (선택)
        first_name: 이름
        last_name: 성 (선택)
        created_at: 생성 시각 (RFC3339)
    """

    id: str
    external_id: int
    username: str | None
    first_name: str | None
    last_name: str | None
    created_at: str


class UserRegistry:
    """사용자 저장소

    동시에 같은 external_id로 첫 요청이 들어와도
    UNIQUE 제약 + ON CONFLICT DO NOTHING으로 한 행만 생성되고,
    진 쪽은 이긴 쪽 행을 다시 읽어 같은 ID를 반환.

    Args:
        db: SQLiteAdapter 인스턴스
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def ensure_user(
        self,
        external_id: int,
        username: str | None,
        first_name: str,
        last_name: str | None,
    ) -> str:
        """사용자 조회 또는 생성

        Args:
            external_id: 외부 ID
            username: 외부 username (선택)
            first_name: 이름
            last_name: 성 (선택)

        Returns:
            내부 사용자 UUID 문자열
        """
        existing = await self._find_id(external_id)
        if existing is not None:
            return existing

        inserted = await self.db.execute(
            """
            INSERT INTO users (id, external_id, username, first_name, last_name, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(external_id) DO NOTHING
            """,
            (str(uuid4()), external_id, username, first_name, last_name, now_utc_iso()),
        )

        user_id = await self._find_id(external_id)
        if user_id is None:
            # INSERT 직후 조회 실패는 저장소 이상
            raise RuntimeError(f"User row missing after insert: external_id={external_id}")

        if inserted:
            logger.info("사용자 등록: external_id=%d user_id=%s", external_id, user_id)
        else:
            logger.debug("사용자 동시 등록 충돌, 기존 행 사용: external_id=%d", external_id)

        return user_id

    async def get_user(self, user_id: str) -> User | None:
        """사용자 단건 조회

        Returns:
            User (없으면 None)
        """
        row = await self.db.fetchone(
            """
            SELECT id, external_id, username, first_name, last_name, created_at
            FROM users
            WHERE id = ?
            """,
            (user_id,),
        )
        if not row:
            return None

        return User(
            id=row[0],
            external_id=int(row[1]),
            username=row[2],
            first_name=row[3],
            last_name=row[4],
            created_at=row[5],
        )

    async def _find_id(self, external_id: int) -> str | None:
        row = await self.db.fetchone(
            "SELECT id FROM users WHERE external_id = ?",
            (external_id,),
        )
        return row[0] if row else None
