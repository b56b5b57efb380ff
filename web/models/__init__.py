"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    HeadCreateRequest,
    HeadKindRequest,
    HeadRenameRequest,
    PartyCreateRequest,
    PartyUpdateRequest,
    VoucherCreateRequest,
    VoucherDeleteRequest,
    VoucherUpdateRequest,
)
from web.models.responses import (
    BalanceResponse,
    DailyReportResponse,
    DailySummaryRowResponse,
    DeleteResultResponse,
    ErrorResponse,
    HeadResponse,
    HeadSummaryResponse,
    HealthResponse,
    PartyResponse,
    PartySummaryResponse,
    VoucherListResponse,
    VoucherResponse,
    VoucherStatsResponse,
)

__all__ = [
    # Requests
    "VoucherCreateRequest",
    "VoucherUpdateRequest",
    "VoucherDeleteRequest",
    "HeadCreateRequest",
    "HeadRenameRequest",
    "HeadKindRequest",
    "PartyCreateRequest",
    "PartyUpdateRequest",
    # Responses
    "HealthResponse",
    "ErrorResponse",
    "VoucherResponse",
    "VoucherStatsResponse",
    "VoucherListResponse",
    "DeleteResultResponse",
    "HeadResponse",
    "HeadSummaryResponse",
    "BalanceResponse",
    "PartyResponse",
    "PartySummaryResponse",
    "DailyReportResponse",
    "DailySummaryRowResponse",
]
