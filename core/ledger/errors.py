"""
Ledger 예외 정의

InputError 계열: 잘못된 사용자 입력 (상태 변경 없음, 수정 후 재시도 가능)
NothingToArchive: 비즈니스 규칙에 따른 no-op (실패가 아님)

저장소 에러(aiosqlite/sqlite3)는 감싸지 않고 그대로 전파.
"""


class LedgerError(Exception):
    """Ledger 예외 최상위 클래스"""

    pass


class InputError(LedgerError):
    """입력 오류 (거부 메시지로 사용자에게 전달)"""

    pass


class InvalidAmount(InputError):
    """금액 형식 오류

    숫자 토큰이 없거나, 형식이 잘못되었거나, 소수점 이하가 2자리를 넘는 경우.
    """

    def __init__(self, text: str, message: str = "Invalid amount"):
        self.text = text
        self.message = message
        super().__init__(f"{message}: {text!r}")


class SignNotAllowed(InputError):
    """부호 사용 불가 (allow_signed=False)"""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Sign not allowed: {text!r}")


class AmountOverflow(InputError):
    """금액이 signed 64-bit 범위를 초과"""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Amount out of range: {text!r}")


class InvalidEntry(InputError):
    """Entry 규칙 위반

    save는 양수, adjust는 0이 아니어야 함.
    archive는 ArchiveOperation만 기록 가능.
    """

    def __init__(self, kind: str, amount_cents: int, message: str):
        self.kind = kind
        self.amount_cents = amount_cents
        self.message = message
        super().__init__(f"Invalid {kind} entry ({amount_cents}): {message}")


class NothingToArchive(LedgerError):
    """현재 잔액이 0이라 이관할 금액이 없음 (no-op, 재시도 안전)"""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"Nothing to archive for user {user_id}")
