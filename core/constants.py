"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → allinvoo/)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class TelegramEndpoints:
    """Telegram Bot API 엔드포인트 (고정값)

    공식 문서: https://core.telegram.org/bots/api
    """

    API_URL: str = "https://api.telegram.org"


class Defaults:
    """기본값 상수"""

    LOG_LEVEL: str = "INFO"

    # /query 조회 개수
    QUERY_LIMIT: int = 10
    QUERY_LIMIT_MIN: int = 1
    QUERY_LIMIT_MAX: int = 50

    # getUpdates long polling 타임아웃 (초)
    POLL_TIMEOUT_SEC: int = 30
    POLL_ERROR_BACKOFF_SEC: float = 5.0

    DB_POOL_SIZE: int = 4


class Limits:
    """금액 한도 (signed 64-bit, SQLite INTEGER 범위)"""

    INT64_MAX: int = 2**63 - 1
    INT64_MIN: int = -(2**63)


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    BOT_LOGS_DIR: Path = LOGS_DIR / "bot"

    # 설정 파일
    CONFIG_FILE: Path = CONFIG_DIR / "config.yaml"

    # DB 파일
    DEFAULT_DB: Path = DATA_DIR / "bot.db"
