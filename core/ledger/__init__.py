"""
저축 Ledger 시스템

사용자별 append-only Entry로 현재 잔액과 누적 이관(history) 금액을 추적.

사용 예시:
```python
from core.ledger import ArchiveOperation, EntryKind, LedgerStore, parse_amount

store = LedgerStore(db)
archiver = ArchiveOperation(store)

cents, note = parse_amount("12.50 커피 참기")
await store.add_entry(user_id, cents, EntryKind.SAVE, note)

moved = await archiver.archive(user_id)
history = await store.history_total(user_id)
```
"""

from core.ledger.amount import ParsedAmount, format_cents, parse_amount
from core.ledger.archive import ArchiveOperation
from core.ledger.errors import (
    AmountOverflow,
    InputError,
    InvalidAmount,
    InvalidEntry,
    LedgerError,
    NothingToArchive,
    SignNotAllowed,
)
from core.ledger.store import LedgerStore
from core.ledger.types import Entry, EntryKind

__all__ = [
    # 핵심 클래스
    "LedgerStore",
    "ArchiveOperation",
    "Entry",
    "EntryKind",
    # 금액 파싱
    "ParsedAmount",
    "parse_amount",
    "format_cents",
    # 예외
    "LedgerError",
    "InputError",
    "InvalidAmount",
    "SignNotAllowed",
    "AmountOverflow",
    "InvalidEntry",
    "NothingToArchive",
]
