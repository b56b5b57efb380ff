"""
전표 원장 (Voucher Ledger) 시스템

모든 금융 이벤트를 불변 전표로 기록하고,
잔액/입금/지급 합계는 전표 로그에서 파생.

사용 예시:
```python
from core.ledger import LedgerService, VoucherFilter

service = LedgerService.in_memory()
bank = await service.create_head("Main Bank", "bank")
await service.create_voucher({
    "date": "2024-01-05",
    "voucher_type": "receive",
    "from_head_type": "bank",
    "from_head_id": bank.id,
    "amount": "500",
})

# 잔액 조회
balance = await service.balance("bank", bank.id)

# 필터 조회
result = await service.query_vouchers(VoucherFilter(head_type=HeadKind.BANK))
```
"""

from core.ledger.projector import BalanceProjector, HeadSummary, PartySummary, Posting
from core.ledger.query import QueryEngine, QueryResult, VoucherFilter
from core.ledger.registry import HeadRegistry, PartyRegistry
from core.ledger.reports import DailyReport, DailySummaryRow, ReportBuilder
from core.ledger.service import LedgerService, open_ledger
from core.ledger.voucher_store import VoucherDraft, VoucherStore

__all__ = [
    # 핵심 클래스
    "LedgerService",
    "HeadRegistry",
    "PartyRegistry",
    "VoucherStore",
    "BalanceProjector",
    "QueryEngine",
    "ReportBuilder",
    # 값 객체
    "VoucherDraft",
    "VoucherFilter",
    "QueryResult",
    "Posting",
    "HeadSummary",
    "PartySummary",
    "DailyReport",
    "DailySummaryRow",
    # 팩토리
    "open_ledger",
]
