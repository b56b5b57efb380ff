"""
원장 서비스 (엔진 진입점)

레지스트리, 전표 저장소, Projector, 조회 엔진, 보고서를 하나로 묶는 Facade.
외부 호출자(Web, 스크립트)는 이 클래스만 사용.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterable

from adapters.interfaces import ILedgerStorage
from core.constants import Defaults
from core.domain.models import AccountHead, DeleteResult, Party, Voucher, VoucherStats
from core.ledger.projector import BalanceProjector, HeadSummary, PartySummary
from core.ledger.query import QueryEngine, QueryResult, VoucherFilter
from core.ledger.registry import HeadRegistry, PartyRegistry
from core.ledger.reports import DailyReport, DailySummaryRow, ReportBuilder
from core.ledger.voucher_store import VoucherDraft, VoucherStore
from core.types import HeadKind

logger = logging.getLogger(__name__)


class LedgerService:
    """원장 서비스

    Args:
        storage: 원장 저장소 (ILedgerStorage 구현체)
        voucher_prefix: 전표 번호 접두어
        default_page_size: page만 지정된 조회의 기본 페이지 크기

    사용 예시:
    ```python
    service = LedgerService.in_memory()
    bank = await service.create_head("Main Bank", "bank")
    voucher = await service.create_voucher({
        "date": "2024-01-05",
        "voucher_type": "receive",
        "from_head_type": "bank",
        "from_head_id": bank.id,
        "amount": "500",
    })
    result = await service.query_vouchers()
    ```
    """

    def __init__(
        self,
        storage: ILedgerStorage,
        voucher_prefix: str = Defaults.VOUCHER_PREFIX,
        default_page_size: int = Defaults.PAGE_SIZE,
    ):
        self.storage = storage
        self.default_page_size = default_page_size

        self.heads = HeadRegistry(storage)
        self.parties = PartyRegistry(storage)
        self.vouchers = VoucherStore(storage, self.heads, self.parties, voucher_prefix)
        self.projector = BalanceProjector(storage, self.heads, self.parties)
        self.query_engine = QueryEngine(self.projector)
        self.reports = ReportBuilder(self.projector)

    @classmethod
    def in_memory(cls, **kwargs: Any) -> "LedgerService":
        """메모리 저장소 기반 서비스 생성 (테스트/임시 실행용)"""
        from adapters.memory.storage import InMemoryLedgerStorage

        return cls(InMemoryLedgerStorage(), **kwargs)

    async def close(self) -> None:
        """저장소 리소스 정리"""
        await self.storage.close()

    # -------------------------------------------------------------------------
    # 전표
    # -------------------------------------------------------------------------

    async def create_voucher(self, payload: VoucherDraft | dict[str, Any]) -> Voucher:
        return await self.vouchers.create(payload)

    async def update_voucher(self, voucher_id: str, changes: dict[str, Any]) -> Voucher:
        return await self.vouchers.update(voucher_id, changes)

    async def delete_vouchers(self, ids: Iterable[str]) -> DeleteResult:
        return await self.vouchers.soft_delete(ids)

    async def get_voucher(self, voucher_id: str) -> Voucher:
        return await self.vouchers.get(voucher_id)

    async def query_vouchers(
        self,
        voucher_filter: VoucherFilter | dict[str, Any] | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> QueryResult:
        """전표 조회 (page만 지정하면 설정의 기본 페이지 크기 사용)"""
        if isinstance(voucher_filter, dict):
            voucher_filter = VoucherFilter.from_dict(voucher_filter)
        if page is not None and page_size is None:
            page_size = self.default_page_size
        return await self.query_engine.query(voucher_filter, page, page_size)

    # -------------------------------------------------------------------------
    # 계정
    # -------------------------------------------------------------------------

    async def create_head(self, name: str, kind: HeadKind | str) -> AccountHead:
        return await self.heads.create(name, kind)

    async def list_heads(self, kind: HeadKind | str | None = None) -> list[AccountHead]:
        return await self.heads.list(kind)

    async def get_head(self, head_id: str) -> AccountHead:
        return await self.heads.get(head_id)

    async def rename_head(self, head_id: str, name: str) -> AccountHead:
        return await self.heads.rename(head_id, name)

    async def change_head_kind(self, head_id: str, kind: HeadKind | str) -> AccountHead:
        return await self.heads.change_kind(head_id, kind)

    async def delete_head(self, head_id: str) -> None:
        await self.heads.delete(head_id)

    # -------------------------------------------------------------------------
    # 거래처
    # -------------------------------------------------------------------------

    async def create_party(
        self,
        name: str,
        phone: str | None = None,
        address: str | None = None,
        party_type: str | None = None,
    ) -> Party:
        return await self.parties.create(name, phone, address, party_type)

    async def list_parties(self, include_inactive: bool = False) -> list[Party]:
        return await self.parties.list(include_inactive)

    async def get_party(self, party_id: str) -> Party:
        return await self.parties.get(party_id)

    async def rename_party(self, party_id: str, name: str) -> Party:
        return await self.parties.rename(party_id, name)

    async def update_party_contact(
        self,
        party_id: str,
        phone: str | None = None,
        address: str | None = None,
        party_type: str | None = None,
    ) -> Party:
        return await self.parties.update_contact(party_id, phone, address, party_type)

    async def delete_party(self, party_id: str) -> None:
        await self.parties.delete(party_id)

    async def deactivate_party(self, party_id: str) -> Party:
        return await self.parties.deactivate(party_id)

    # -------------------------------------------------------------------------
    # 잔액 / 통계 / 보고서
    # -------------------------------------------------------------------------

    async def balance(
        self,
        kind: HeadKind | str,
        head_id: str,
        as_of: date | None = None,
    ) -> Decimal:
        return await self.projector.balance(kind, head_id, as_of)

    async def head_balances(self, as_of: date | None = None) -> dict[tuple[HeadKind, str], Decimal]:
        return await self.projector.head_balances(as_of)

    async def head_summaries(
        self,
        kind: HeadKind | str | None = None,
        as_of: date | None = None,
    ) -> list[HeadSummary]:
        return await self.projector.head_summaries(kind, as_of)

    async def party_summaries(self, include_inactive: bool = False) -> list[PartySummary]:
        return await self.projector.party_summaries(include_inactive)

    async def compute_stats(
        self,
        predicate: Callable[[Voucher], bool] | None = None,
    ) -> VoucherStats:
        return await self.projector.compute_stats(predicate)

    async def daily_report(self, day: date | str) -> DailyReport:
        return await self.reports.daily_report(day)

    async def daily_summary(
        self,
        from_date: date | str,
        to_date: date | str,
    ) -> list[DailySummaryRow]:
        return await self.reports.daily_summary(from_date, to_date)


async def open_ledger(settings: Any = None) -> LedgerService:
    """설정에 따라 저장소를 열고 LedgerService 반환

    Args:
        settings: Settings 또는 LedgerSettings (None이면 get_settings())

    Returns:
        LedgerService (호출자가 close() 책임)
    """
    if settings is None:
        from core.config.loader import get_settings

        settings = get_settings().ledger
    elif hasattr(settings, "ledger"):
        settings = settings.ledger

    if settings.storage == "memory":
        from adapters.memory.storage import InMemoryLedgerStorage

        storage: ILedgerStorage = InMemoryLedgerStorage()
    else:
        from adapters.db.sqlite_storage import SQLiteLedgerStorage

        storage = await SQLiteLedgerStorage.open(settings.database_path)

    logger.info(
        "원장 서비스 시작",
        extra={"storage": settings.storage, "voucher_prefix": settings.voucher_prefix},
    )

    return LedgerService(
        storage,
        voucher_prefix=settings.voucher_prefix,
        default_page_size=settings.default_page_size,
    )
