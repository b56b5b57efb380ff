"""
core/ledger/reports.py 테스트
"""

from datetime import date
from decimal import Decimal

import pytest

from core.domain.models import AccountHead
from core.errors import InvalidArgumentError
from core.ledger.service import LedgerService


async def add(ledger: LedgerService, day: str, vtype: str, head: AccountHead, amount: str, dst=None):
    data = {
        "date": day,
        "voucher_type": vtype,
        "from_head_type": head.kind.value,
        "from_head_id": head.id,
        "amount": amount,
    }
    if dst is not None:
        data["to_head_type"] = dst.kind.value
        data["to_head_id"] = dst.id
    return await ledger.create_voucher(data)


class TestDailyReport:
    """일일 보고서 테스트"""

    @pytest.mark.asyncio
    async def test_opening_and_closing(
        self, ledger: LedgerService, bank_a: AccountHead, bank_b: AccountHead
    ) -> None:
        await add(ledger, "2024-01-01", "receive", bank_a, "1000")
        await add(ledger, "2024-01-01", "payment", bank_a, "200")
        await add(ledger, "2024-01-02", "receive", bank_a, "300")
        await add(ledger, "2024-01-02", "contra", bank_a, "50", dst=bank_b)
        await add(ledger, "2024-01-02", "purchase_voucher", bank_b, "20")
        await add(ledger, "2024-01-03", "receive", bank_a, "999")

        report = await ledger.daily_report("2024-01-02")

        assert report.date == date(2024, 1, 2)
        assert report.opening_balance == Decimal("800")
        assert [v.amount for v in report.receives] == [Decimal("300")]
        assert [v.amount for v in report.payments] == [Decimal("20")]
        assert report.total_receive == Decimal("300")
        assert report.total_payment == Decimal("20")
        assert report.closing_balance == Decimal("1080")

    @pytest.mark.asyncio
    async def test_inactive_excluded(self, ledger: LedgerService, bank_a: AccountHead) -> None:
        voucher = await add(ledger, "2024-01-01", "receive", bank_a, "500")
        await ledger.delete_vouchers([voucher.id])

        report = await ledger.daily_report(date(2024, 1, 1))

        assert report.receives == []
        assert report.closing_balance == 0

    @pytest.mark.asyncio
    async def test_empty_day(self, ledger: LedgerService) -> None:
        report = await ledger.daily_report("2024-05-01")

        assert report.to_dict() == {
            "date": "2024-05-01",
            "opening_balance": "0",
            "receives": [],
            "payments": [],
            "total_receive": "0",
            "total_payment": "0",
            "closing_balance": "0",
        }


class TestDailySummary:
    """기간별 일자 요약 테스트"""

    @pytest.mark.asyncio
    async def test_days_with_activity_only(self, ledger: LedgerService, bank_a: AccountHead) -> None:
        await add(ledger, "2024-01-03", "payment", bank_a, "10")
        await add(ledger, "2024-01-01", "receive", bank_a, "100")
        await add(ledger, "2024-01-01", "receive", bank_a, "50")
        await add(ledger, "2024-02-01", "receive", bank_a, "1")

        rows = await ledger.daily_summary("2024-01-01", "2024-01-31")

        assert [r.date for r in rows] == [date(2024, 1, 1), date(2024, 1, 3)]
        assert rows[0].total_receive == Decimal("150")
        assert rows[0].receive_count == 2
        assert rows[1].total_payment == Decimal("10")
        assert rows[1].payment_count == 1

    @pytest.mark.asyncio
    async def test_transfer_only_day_omitted(
        self, ledger: LedgerService, bank_a: AccountHead, bank_b: AccountHead
    ) -> None:
        await add(ledger, "2024-01-01", "contra", bank_a, "10", dst=bank_b)

        assert await ledger.daily_summary("2024-01-01", "2024-01-01") == []

    @pytest.mark.asyncio
    async def test_reversed_range(self, ledger: LedgerService) -> None:
        with pytest.raises(InvalidArgumentError):
            await ledger.daily_summary("2024-02-01", "2024-01-01")
