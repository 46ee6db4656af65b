"""
금액 파서

자유 형식 10진 텍스트를 정확한 센트 정수 + 메모로 변환.
부동소수점을 거치지 않고 문자열 스캔으로 처리.

문법:
    [+|-] DIGITS [ ("." | ",") DIGIT [DIGIT] ] [note...]

사용 예시:
```python
cents, note = parse_amount("12.3 lunch")  # (1230, "lunch")
cents, note = parse_amount("-3,50", allow_signed=True)  # (-350, None)
```
"""

from typing import NamedTuple

from core.constants import Limits
from core.ledger.errors import AmountOverflow, InvalidAmount, SignNotAllowed


# ASCII 숫자만 허용 (str.isdigit은 '²' 같은 문자도 통과)
_DIGITS = frozenset("0123456789")
_SIGNS = frozenset("+-")
_DECIMAL_SEPARATORS = frozenset(".,")

MAX_FRACTION_DIGITS = 2


class ParsedAmount(NamedTuple):
    """파싱 결과

    Attributes:
        cents: 부호 있는 센트 단위 금액
        note: 금액 뒤 나머지 텍스트 (없으면 None)
    """

    cents: int
    note: str | None


def _scan_digits(text: str, pos: int) -> tuple[str, int]:
    """pos부터 연속된 숫자를 읽음

    Returns:
        (읽은 숫자 문자열, 다음 위치)
    """
    end = pos
    while end < len(text) and text[end] in _DIGITS:
        end += 1
    return text[pos:end], end


def parse_amount(text: str, allow_signed: bool = False) -> ParsedAmount:
    """금액 텍스트 파싱

    Args:
        text: 원본 입력 (예: "12.34 점심")
        allow_signed: 선행 부호(+/-) 허용 여부 (/adjust용)

    Returns:
        ParsedAmount(cents, note)

    Raises:
        InvalidAmount: 숫자 토큰 없음, 형식 오류, 소수점 이하 3자리 이상
        SignNotAllowed: allow_signed=False인데 부호가 있는 경우
        AmountOverflow: signed 64-bit 범위 초과
    """
    s = text.strip()
    if not s:
        raise InvalidAmount(text, "Missing amount")

    pos = 0
    negative = False

    if s[0] in _SIGNS:
        if not allow_signed:
            raise SignNotAllowed(text)
        negative = s[0] == "-"
        pos = 1

    whole, pos = _scan_digits(s, pos)
    if not whole:
        raise InvalidAmount(text, "Bad amount format")

    frac = ""
    if pos < len(s) and s[pos] in _DECIMAL_SEPARATORS:
        frac, pos = _scan_digits(s, pos + 1)
        if not frac:
            raise InvalidAmount(text, "Bad amount format")
        if len(frac) > MAX_FRACTION_DIGITS:
            raise InvalidAmount(text, "Too many decimal places")

    # 19자리 초과는 int 변환 전에 차단 (int64 최대값이 19자리)
    if len(whole.lstrip("0")) > 19:
        raise AmountOverflow(text)

    # 1자리 소수는 0으로 패딩 ("12.3" → 30센트)
    magnitude = int(whole) * 100 + int(frac.ljust(MAX_FRACTION_DIGITS, "0"))
    if magnitude > Limits.INT64_MAX:
        raise AmountOverflow(text)

    note = s[pos:].strip() or None
    return ParsedAmount(-magnitude if negative else magnitude, note)


def format_cents(cents: int) -> str:
    """센트 → "12.34" 형식 문자열

    음수는 "-0.05"처럼 정수부가 0이어도 부호 유지.
    """
    sign = "-" if cents < 0 else ""
    major, minor = divmod(abs(cents), 100)
    return f"{sign}{major}.{minor:02d}"
