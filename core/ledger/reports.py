"""
일일 보고서

특정 일자의 기초 잔액, 입금/지급 목록, 기말 잔액 및
기간별 일자 요약. 활성 전표만 집계.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from core.domain.models import Voucher
from core.errors import InvalidArgumentError
from core.ledger.projector import BalanceProjector
from core.types import Classification, classify
from core.utils.dates import parse_date
from core.utils.money import ZERO

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyReport:
    """일일 보고서

    opening_balance: 해당 일자 이전 (입금 - 지급) 누계
    closing_balance: opening + total_receive - total_payment
    """

    date: date
    opening_balance: Decimal
    receives: list[Voucher]
    payments: list[Voucher]
    total_receive: Decimal
    total_payment: Decimal
    closing_balance: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "opening_balance": str(self.opening_balance),
            "receives": [v.to_dict() for v in self.receives],
            "payments": [v.to_dict() for v in self.payments],
            "total_receive": str(self.total_receive),
            "total_payment": str(self.total_payment),
            "closing_balance": str(self.closing_balance),
        }


@dataclass(frozen=True)
class DailySummaryRow:
    """일자별 입금/지급 합계"""

    date: date
    total_receive: Decimal
    total_payment: Decimal
    receive_count: int
    payment_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "total_receive": str(self.total_receive),
            "total_payment": str(self.total_payment),
            "receive_count": self.receive_count,
            "payment_count": self.payment_count,
        }


class ReportBuilder:
    """보고서 생성기

    Args:
        projector: 잔액 Projector (스냅샷 제공)
    """

    def __init__(self, projector: BalanceProjector):
        self.projector = projector

    async def daily_report(self, day: date | str) -> DailyReport:
        """일일 보고서 생성"""
        day = parse_date(day)
        vouchers = [v for v in await self.projector.snapshot() if v.is_active]

        opening = ZERO
        receives: list[Voucher] = []
        payments: list[Voucher] = []

        for voucher in vouchers:
            classification = classify(voucher.voucher_type)
            if classification == Classification.TRANSFER:
                continue

            if voucher.date < day:
                if classification == Classification.RECEIVE:
                    opening += voucher.amount
                else:
                    opening -= voucher.amount
            elif voucher.date == day:
                if classification == Classification.RECEIVE:
                    receives.append(voucher)
                else:
                    payments.append(voucher)

        receives.sort(key=lambda v: v.sequence)
        payments.sort(key=lambda v: v.sequence)

        total_receive = sum((v.amount for v in receives), ZERO)
        total_payment = sum((v.amount for v in payments), ZERO)

        logger.debug(
            "일일 보고서 생성",
            extra={"date": day.isoformat(), "receives": len(receives), "payments": len(payments)},
        )

        return DailyReport(
            date=day,
            opening_balance=opening,
            receives=receives,
            payments=payments,
            total_receive=total_receive,
            total_payment=total_payment,
            closing_balance=opening + total_receive - total_payment,
        )

    async def daily_summary(
        self,
        from_date: date | str,
        to_date: date | str,
    ) -> list[DailySummaryRow]:
        """기간 내 일자별 요약 (활동이 있는 일자만, 오름차순)

        Raises:
            InvalidArgumentError: from_date > to_date
        """
        start = parse_date(from_date, "from_date")
        end = parse_date(to_date, "to_date")
        if start > end:
            raise InvalidArgumentError("from_date가 to_date보다 늦습니다", field="from_date")

        receive: dict[date, Decimal] = defaultdict(lambda: ZERO)
        payment: dict[date, Decimal] = defaultdict(lambda: ZERO)
        receive_count: dict[date, int] = defaultdict(int)
        payment_count: dict[date, int] = defaultdict(int)
        days: set[date] = set()

        for voucher in await self.projector.snapshot():
            if not voucher.is_active or not (start <= voucher.date <= end):
                continue
            classification = classify(voucher.voucher_type)
            if classification == Classification.RECEIVE:
                receive[voucher.date] += voucher.amount
                receive_count[voucher.date] += 1
            elif classification == Classification.PAYMENT:
                payment[voucher.date] += voucher.amount
                payment_count[voucher.date] += 1
            else:
                continue
            days.add(voucher.date)

        return [
            DailySummaryRow(
                date=day,
                total_receive=receive.get(day, ZERO),
                total_payment=payment.get(day, ZERO),
                receive_count=receive_count.get(day, 0),
                payment_count=payment_count.get(day, 0),
            )
            for day in sorted(days)
        ]
