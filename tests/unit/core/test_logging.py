"""
core/logging.py 테스트
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import pytest

from core.constants import Paths
from core.logging import NOISY_LOGGERS, get_log_file_path, setup_logging


@pytest.fixture
def restore_root_logger():
    """setup_logging이 추가한 핸들러 정리"""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) in (TimedRotatingFileHandler, logging.StreamHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestGetLogFilePath:
    """get_log_file_path 테스트"""

    def test_bot_default_dir(self) -> None:
        assert get_log_file_path("bot") == Paths.BOT_LOGS_DIR / "bot.log"

    def test_other_process(self) -> None:
        assert get_log_file_path("tool") == Paths.LOGS_DIR / "tool.log"

    def test_custom_dir(self, tmp_path: Path) -> None:
        assert get_log_file_path("bot", tmp_path) == tmp_path / "bot.log"


class TestSetupLogging:
    """setup_logging 테스트"""

    def test_handlers(self, tmp_path: Path, restore_root_logger: None) -> None:
        """콘솔 + 파일 핸들러 구성"""
        root = setup_logging("bot", "DEBUG", "INFO", log_dir=tmp_path / "logs")

        assert (tmp_path / "logs").is_dir()
        assert len(root.handlers) == 2
        file_handlers = [
            h for h in root.handlers if isinstance(h, TimedRotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        assert file_handlers[0].level == logging.INFO

    def test_no_duplicate_handlers(
        self, tmp_path: Path, restore_root_logger: None
    ) -> None:
        """재호출 시 핸들러 중복 없음"""
        setup_logging("bot", log_dir=tmp_path)
        root = setup_logging("bot", log_dir=tmp_path)

        assert len(root.handlers) == 2

    def test_noisy_loggers_quieted(
        self, tmp_path: Path, restore_root_logger: None
    ) -> None:
        setup_logging("bot", log_dir=tmp_path)

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
