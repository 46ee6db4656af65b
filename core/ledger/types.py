"""
Ledger 타입 정의

EntryKind, Entry 등 Ledger 시스템에서 사용하는 타입 정의
"""

from dataclasses import dataclass
from enum import Enum


class EntryKind(str, Enum):
    """Entry 유형

    str을 상속하여 DB/JSON 직렬화 가능.
    """

    SAVE = "save"  # 저축 (양수만)
    ADJUST = "adjust"  # 잔액 조정 (0 제외, 부호 무관)
    ARCHIVE = "archive"  # 투자 이관 (시스템 생성, 현재 잔액 상쇄)


@dataclass(frozen=True)
class Entry:
    """Ledger Entry (append-only, 저장 후 불변)

    Attributes:
        id: 단조 증가 시퀀스 (최신순 정렬 기준)
        user_id: 소유자 UUID
        amount_cents: 부호 있는 센트 단위 금액
        kind: Entry 유형
        reason: 메모 (선택)
        created_at: 생성 시각 (RFC3339, 정보용)
    """

    id: int
    user_id: str
    amount_cents: int
    kind: EntryKind
    reason: str | None
    created_at: str

    @classmethod
    def from_row(cls, row: tuple) -> "Entry":
        """DB 행 → Entry 변환

        컬럼 순서: id, user_id, amount_cents, kind, reason, created_at
        """
        return cls(
            id=int(row[0]),
            user_id=row[1],
            amount_cents=int(row[2]),
            kind=EntryKind(row[3]),
            reason=row[4],
            created_at=row[5],
        )
