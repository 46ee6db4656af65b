"""
스토리지 모듈

사용자 저장소 인터페이스 제공
"""

from core.storage.user_registry import User, UserRegistry

__all__ = [
    "User",
    "UserRegistry",
]
