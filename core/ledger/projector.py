"""
잔액 Projector

전표 로그에서 계정 잔액, 입금/지급 합계, 통계를 파생.
저장된 상태를 변경하지 않으며 활성 전표만 잔액에 반영.

부호 규칙:
- receive, sales_voucher: to 계정(없으면 from 계정)에 유입, 입금 분류
- payment, purchase_voucher: from 계정에서 유출, 지급 분류
- journal, contra: from 유출 + to 유입, 분류 없음
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable

from adapters.interfaces import ILedgerStorage
from core.domain.models import AccountHead, Party, Voucher, VoucherStats
from core.errors import NotFoundError
from core.ledger.registry import HeadRegistry, PartyRegistry, parse_head_kind
from core.types import (
    PAYMENT_TYPES,
    RECEIVE_TYPES,
    TRANSFER_TYPES,
    Classification,
    HeadKind,
    classify,
)
from core.utils.money import ZERO

logger = logging.getLogger(__name__)

HeadKey = tuple[HeadKind, str]


@dataclass(frozen=True)
class Posting:
    """전표 1건이 계정 1개에 미치는 부호 있는 영향"""

    head_kind: HeadKind
    head_id: str
    delta: Decimal

    @property
    def key(self) -> HeadKey:
        return (self.head_kind, self.head_id)


@dataclass(frozen=True)
class HeadSummary:
    """계정별 입금/지급/잔액 요약"""

    head: AccountHead
    receive: Decimal
    payment: Decimal
    balance: Decimal

    def to_dict(self) -> dict:
        return {
            **self.head.to_dict(),
            "receive": str(self.receive),
            "payment": str(self.payment),
            "balance": str(self.balance),
        }


@dataclass(frozen=True)
class PartySummary:
    """거래처별 입금/지급 요약"""

    party: Party
    receive: Decimal
    payment: Decimal
    balance: Decimal
    voucher_count: int

    def to_dict(self) -> dict:
        return {
            **self.party.to_dict(),
            "receive": str(self.receive),
            "payment": str(self.payment),
            "balance": str(self.balance),
            "voucher_count": self.voucher_count,
        }


def postings(voucher: Voucher) -> list[Posting]:
    """전표의 계정별 영향 계산 (순수 함수)"""
    amount = voucher.amount
    vtype = voucher.voucher_type

    if vtype in RECEIVE_TYPES:
        if voucher.has_to_head:
            return [Posting(voucher.to_head_type, voucher.to_head_id, amount)]
        return [Posting(voucher.from_head_type, voucher.from_head_id, amount)]

    if vtype in PAYMENT_TYPES:
        return [Posting(voucher.from_head_type, voucher.from_head_id, -amount)]

    if vtype in TRANSFER_TYPES:
        return [
            Posting(voucher.from_head_type, voucher.from_head_id, -amount),
            Posting(voucher.to_head_type, voucher.to_head_id, amount),
        ]

    return []


def compute_stats(
    vouchers: Iterable[Voucher],
    predicate: Callable[[Voucher], bool] | None = None,
) -> VoucherStats:
    """전표 통계 계산

    금액 합계와 total_transactions는 활성 전표만,
    active_count/inactive_count는 조건에 맞는 전체 전표 기준.
    """
    total_transactions = 0
    total_receive = ZERO
    total_payment = ZERO
    total_amount = ZERO
    active_count = 0
    inactive_count = 0

    for voucher in vouchers:
        if predicate is not None and not predicate(voucher):
            continue

        if not voucher.is_active:
            inactive_count += 1
            continue

        active_count += 1
        total_transactions += 1
        total_amount += voucher.amount

        classification = classify(voucher.voucher_type)
        if classification == Classification.RECEIVE:
            total_receive += voucher.amount
        elif classification == Classification.PAYMENT:
            total_payment += voucher.amount

    return VoucherStats(
        total_transactions=total_transactions,
        total_receive=total_receive,
        total_payment=total_payment,
        total_amount=total_amount,
        active_count=active_count,
        inactive_count=inactive_count,
    )


class BalanceProjector:
    """잔액 Projector

    전표 스냅샷과 전체 기간 잔액 맵을 저장소 리비전 기준으로 캐시.
    쓰기가 발생하면 리비전이 바뀌어 다음 조회 시 재계산.

    Args:
        storage: 원장 저장소
        heads: 계정 레지스트리
        parties: 거래처 레지스트리
    """

    def __init__(
        self,
        storage: ILedgerStorage,
        heads: HeadRegistry,
        parties: PartyRegistry,
    ):
        self.storage = storage
        self.heads = heads
        self.parties = parties

        self._cached_revision: int | None = None
        self._cached_vouchers: list[Voucher] = []
        self._cached_balances: dict[HeadKey, Decimal] = {}

    async def snapshot(self) -> list[Voucher]:
        """현재 리비전의 전표 스냅샷 (비활성 포함)"""
        revision = await self.storage.revision()
        if revision != self._cached_revision:
            vouchers = await self.storage.list_vouchers()
            self._cached_vouchers = vouchers
            self._cached_balances = self._fold_balances(vouchers)
            self._cached_revision = revision
            logger.debug(
                "Projection 재계산",
                extra={"revision": revision, "voucher_count": len(vouchers)},
            )
        return self._cached_vouchers

    @staticmethod
    def _fold_balances(
        vouchers: Iterable[Voucher],
        as_of: date | None = None,
    ) -> dict[HeadKey, Decimal]:
        balances: dict[HeadKey, Decimal] = defaultdict(lambda: ZERO)
        for voucher in vouchers:
            if not voucher.is_active:
                continue
            if as_of is not None and voucher.date > as_of:
                continue
            for posting in postings(voucher):
                balances[posting.key] += posting.delta
        return dict(balances)

    async def head_balances(self, as_of: date | None = None) -> dict[HeadKey, Decimal]:
        """전체 계정 잔액 맵

        Args:
            as_of: 이 날짜(포함)까지의 전표만 반영 (None이면 전체)
        """
        vouchers = await self.snapshot()
        if as_of is None:
            return dict(self._cached_balances)
        return self._fold_balances(vouchers, as_of)

    async def balance(
        self,
        kind: HeadKind | str,
        head_id: str,
        as_of: date | None = None,
    ) -> Decimal:
        """단일 계정 잔액

        Raises:
            NotFoundError: 존재하지 않는 계정 (kind 불일치 포함)
        """
        kind = parse_head_kind(kind)
        head = await self.heads.get(head_id)
        if head.kind != kind:
            raise NotFoundError(
                f"계정을 찾을 수 없습니다: {kind.value}/{head_id}",
                field="head_id",
            )
        balances = await self.head_balances(as_of)
        return balances.get((kind, head_id), ZERO)

    async def head_summaries(
        self,
        kind: HeadKind | str | None = None,
        as_of: date | None = None,
    ) -> list[HeadSummary]:
        """활성 계정별 입금(유입)/지급(유출)/잔액 (이름순)"""
        vouchers = await self.snapshot()

        inflow: dict[HeadKey, Decimal] = defaultdict(lambda: ZERO)
        outflow: dict[HeadKey, Decimal] = defaultdict(lambda: ZERO)
        for voucher in vouchers:
            if not voucher.is_active:
                continue
            if as_of is not None and voucher.date > as_of:
                continue
            for posting in postings(voucher):
                if posting.delta > 0:
                    inflow[posting.key] += posting.delta
                else:
                    outflow[posting.key] -= posting.delta

        heads = await self.heads.list(kind)
        summaries = []
        for head in sorted(heads, key=lambda h: (h.kind.value, h.name.casefold())):
            key = (head.kind, head.id)
            receive = inflow.get(key, ZERO)
            payment = outflow.get(key, ZERO)
            summaries.append(HeadSummary(
                head=head,
                receive=receive,
                payment=payment,
                balance=receive - payment,
            ))
        return summaries

    async def party_summaries(self, include_inactive: bool = False) -> list[PartySummary]:
        """거래처별 입금/지급 합계 (활성 전표 기준, 이름순)"""
        vouchers = await self.snapshot()

        receive: dict[str, Decimal] = defaultdict(lambda: ZERO)
        payment: dict[str, Decimal] = defaultdict(lambda: ZERO)
        counts: dict[str, int] = defaultdict(int)
        for voucher in vouchers:
            if not voucher.is_active or voucher.party_id is None:
                continue
            counts[voucher.party_id] += 1
            classification = classify(voucher.voucher_type)
            if classification == Classification.RECEIVE:
                receive[voucher.party_id] += voucher.amount
            elif classification == Classification.PAYMENT:
                payment[voucher.party_id] += voucher.amount

        parties = await self.parties.list(include_inactive=include_inactive)
        return [
            PartySummary(
                party=party,
                receive=receive.get(party.id, ZERO),
                payment=payment.get(party.id, ZERO),
                balance=receive.get(party.id, ZERO) - payment.get(party.id, ZERO),
                voucher_count=counts.get(party.id, 0),
            )
            for party in parties
        ]

    async def compute_stats(
        self,
        predicate: Callable[[Voucher], bool] | None = None,
    ) -> VoucherStats:
        """조건에 맞는 전표 통계"""
        return compute_stats(await self.snapshot(), predicate)
