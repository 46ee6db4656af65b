"""
타임존 유틸리티

내부 저장: UTC RFC3339 문자열 원칙 준수를 위한 헬퍼 함수
"""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)

    datetime.now(timezone.utc)의 축약형.
    """
    return datetime.now(timezone.utc)


def now_utc_iso() -> str:
    """현재 UTC 시간을 RFC3339 문자열로 반환

    Example:
        >>> now_utc_iso()
        '2026-02-21T01:00:00+00:00'
    """
    return now_utc().isoformat(timespec="seconds")


def format_utc(value: str, fmt: str = "%Y-%m-%d %H:%M") -> str:
    """저장된 RFC3339 문자열을 표시용으로 포맷

    파싱할 수 없는 값은 원본 그대로 반환 (표시 전용).

    Args:
        value: RFC3339 문자열
        fmt: strftime 포맷 문자열

    Returns:
        UTC 기준 포맷된 문자열
    """
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return value
    if dt.tzinfo is None:
        # naive datetime은 UTC로 간주
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime(fmt)
