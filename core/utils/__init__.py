"""
유틸리티 패키지

타임존 처리 등 공통 유틸리티
"""

from core.utils.timezone import (
    format_utc,
    now_utc,
    now_utc_iso,
)

__all__ = [
    "format_utc",
    "now_utc",
    "now_utc_iso",
]
