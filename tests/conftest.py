"""
pytest 공통 fixture 정의

임시 DB, 코어 컴포넌트, 설정 파일 fixture
"""

import tempfile
from pathlib import Path

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.config.loader import Settings
from core.ledger.archive import ArchiveOperation
from core.ledger.store import LedgerStore
from core.storage.user_registry import UserRegistry


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_settings() -> None:
    """Settings 싱글턴 초기화 (테스트 간 격리)"""
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture
def temp_config_file(temp_dir: Path) -> Path:
    """테스트용 config.yaml 파일 생성"""
    config_content = """# 테스트용 config.yaml
telegram:
  bot_token: "123456:test_token_abcde"
  poll_timeout_sec: 15

database:
  url: "sqlite:./data/test_bot.db"

logging:
  level: debug
"""
    config_path = temp_dir / "config.yaml"
    config_path.write_text(config_content, encoding="utf-8")
    return config_path


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> SQLiteAdapter:
    """스키마가 초기화된 임시 DB"""
    adapter = SQLiteAdapter(tmp_path / "test_ledger.db")
    await adapter.connect()
    await init_schema(adapter)

    yield adapter

    await adapter.close()


@pytest.fixture
def registry(db: SQLiteAdapter) -> UserRegistry:
    """UserRegistry 인스턴스"""
    return UserRegistry(db)


@pytest.fixture
def store(db: SQLiteAdapter) -> LedgerStore:
    """LedgerStore 인스턴스"""
    return LedgerStore(db)


@pytest.fixture
def archiver(store: LedgerStore) -> ArchiveOperation:
    """ArchiveOperation 인스턴스"""
    return ArchiveOperation(store)


@pytest_asyncio.fixture
async def user_id(registry: UserRegistry) -> str:
    """등록된 테스트 사용자 UUID"""
    return await registry.ensure_user(1001, "saver", "Sam", None)
