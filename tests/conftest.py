"""
pytest 공통 fixture 정의

설정 파일, 메모리 원장 서비스, 기본 계정/거래처 fixture
"""

import tempfile
from pathlib import Path

import pytest
import pytest_asyncio

from core.config.loader import Settings
from core.domain.models import AccountHead, Party
from core.ledger.service import LedgerService


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    content = """# 테스트용 settings.yaml
storage: sqlite
database_path: data/test_ledger.db
voucher_prefix: TST
default_page_size: 10
log_level: debug

web:
  host: 0.0.0.0
  port: 9000
"""
    path = temp_dir / "settings.yaml"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def temp_settings_file_memory(temp_dir: Path) -> Path:
    """메모리 저장소 settings.yaml (최소 설정)"""
    path = temp_dir / "settings_memory.yaml"
    path.write_text("storage: memory\n", encoding="utf-8")
    return path


@pytest.fixture
def temp_settings_file_invalid_storage(temp_dir: Path) -> Path:
    """잘못된 storage의 settings.yaml"""
    path = temp_dir / "settings_invalid.yaml"
    path.write_text("storage: postgres\n", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_settings() -> None:
    """테스트 간 Settings 싱글턴 초기화"""
    Settings.reset()
    yield
    Settings.reset()


@pytest_asyncio.fixture
async def ledger() -> LedgerService:
    """메모리 원장 서비스"""
    service = LedgerService.in_memory()
    yield service
    await service.close()


@pytest_asyncio.fixture
async def bank_a(ledger: LedgerService) -> AccountHead:
    """은행 계정 A"""
    return await ledger.create_head("Bank A", "bank")


@pytest_asyncio.fixture
async def bank_b(ledger: LedgerService) -> AccountHead:
    """은행 계정 B"""
    return await ledger.create_head("Bank B", "bank")


@pytest_asyncio.fixture
async def income_head(ledger: LedgerService) -> AccountHead:
    """수익 계정"""
    return await ledger.create_head("Sales Income", "income")


@pytest_asyncio.fixture
async def expense_head(ledger: LedgerService) -> AccountHead:
    """비용 계정"""
    return await ledger.create_head("Office Rent", "expense")


@pytest_asyncio.fixture
async def customer(ledger: LedgerService) -> Party:
    """거래처"""
    return await ledger.create_party("Acme Traders", phone="010-1234-5678", party_type="customer")
