"""
설정 로더

config.yaml 로드 + 환경 변수 오버라이드

우선순위: 환경 변수 (.env 포함) > config.yaml > 기본값
- BOT_TOKEN: Telegram Bot 토큰
- DATABASE_URL: sqlite:PATH / sqlite://PATH / 일반 경로
- LOG_LEVEL: 로그 레벨
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import find_dotenv, load_dotenv

from core.constants import Defaults, Paths


@dataclass(frozen=True)
class BotConfig:
    """Bot 설정

    불변 데이터 구조로 설정 변경 방지
    """

    bot_token: str
    db_path: Path
    log_level: str = Defaults.LOG_LEVEL
    poll_timeout_sec: int = Defaults.POLL_TIMEOUT_SEC


class ConfigLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def sqlite_path_from_url(url: str) -> str | None:
    """DATABASE_URL에서 SQLite 파일 경로 추출

    Args:
        url: "sqlite:./data/bot.db" 또는 "sqlite:///app/data/bot.db"

    Returns:
        파일 경로 (sqlite URL이 아니면 None)
    """
    if url.startswith("sqlite://"):
        return url[len("sqlite://"):]
    if url.startswith("sqlite:"):
        return url[len("sqlite:"):]
    return None


def _resolve_db_path(value: str) -> Path:
    """DB 설정값 → Path (sqlite URL과 일반 경로 모두 허용)"""
    path = sqlite_path_from_url(value)
    if path is None:
        path = value
    # 쿼리 스트링(sqlite:bot.db?mode=rwc)은 파일 경로에서 제외
    path = path.split("?", 1)[0]
    if not path:
        raise ConfigLoadError(f"DB 경로가 비어 있습니다: {value!r}")
    return Path(path)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"config.yaml 파싱 실패: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError("config.yaml 최상위는 매핑이어야 합니다")
    return data


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> BotConfig:
    """설정 로드

    파일이 없어도 환경 변수로 토큰이 주어지면 정상 동작.

    Args:
        path: config.yaml 경로 (None이면 기본 경로 사용)
        environ: 환경 변수 (None이면 .env 로드 후 os.environ)

    Returns:
        BotConfig 인스턴스

    Raises:
        ConfigLoadError: 토큰이 없거나 형식이 잘못된 경우
    """
    if path is None:
        path = Paths.CONFIG_FILE
    if environ is None:
        # 현재 디렉토리부터 상위로 .env 탐색, 이미 설정된 환경 변수는 덮어쓰지 않음
        load_dotenv(find_dotenv(usecwd=True), override=False)
        environ = os.environ

    data = _read_yaml(path) if path.exists() else {}

    telegram_config = data.get("telegram") or {}
    database_config = data.get("database") or {}
    logging_config = data.get("logging") or {}

    bot_token = environ.get("BOT_TOKEN") or telegram_config.get("bot_token", "")
    if not bot_token:
        raise ConfigLoadError(
            f"BOT_TOKEN 환경 변수 또는 {path}의 telegram.bot_token이 필요합니다"
        )

    db_value = environ.get("DATABASE_URL") or database_config.get("url")
    db_path = _resolve_db_path(str(db_value)) if db_value else Paths.DEFAULT_DB

    log_level = str(
        environ.get("LOG_LEVEL") or logging_config.get("level", Defaults.LOG_LEVEL)
    ).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigLoadError(f"유효하지 않은 로그 레벨입니다: '{log_level}'")

    poll_timeout = telegram_config.get("poll_timeout_sec", Defaults.POLL_TIMEOUT_SEC)
    try:
        poll_timeout_sec = int(poll_timeout)
    except (TypeError, ValueError) as e:
        raise ConfigLoadError(
            f"telegram.poll_timeout_sec는 정수여야 합니다: {poll_timeout!r}"
        ) from e

    return BotConfig(
        bot_token=str(bot_token),
        db_path=db_path,
        log_level=log_level,
        poll_timeout_sec=poll_timeout_sec,
    )


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    config.yaml + 환경 변수를 한 번만 로드
    """

    _instance: "Settings | None" = None
    _config: BotConfig | None = None

    def __new__(cls, config_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config_path: Path | None = None) -> None:
        if self._config is None:
            type(self)._config = load_config(config_path)

    @property
    def config(self) -> BotConfig:
        """로드된 설정"""
        assert self._config is not None
        return self._config

    @property
    def bot_token(self) -> str:
        """Telegram Bot 토큰"""
        return self.config.bot_token

    @property
    def db_path(self) -> Path:
        """DB 경로"""
        return self.config.db_path

    @property
    def log_level(self) -> str:
        """로그 레벨"""
        return self.config.log_level

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(config_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        config_path: config.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(config_path)
