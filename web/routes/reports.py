"""
보고서 API 라우트

GET /api/reports/daily          - 일일 보고서 (기초 잔액, 입금/지급, 기말 잔액)
GET /api/reports/daily-summary  - 기간 내 일자별 입금/지급 합계
"""

from datetime import date

from fastapi import APIRouter, Depends, Query

from core.ledger.service import LedgerService
from web.dependencies import get_ledger_service
from web.models.responses import ERROR_RESPONSES, DailyReportResponse, DailySummaryRowResponse
from web.services.voucher_view import name_maps, voucher_to_dict

router = APIRouter(prefix="/api/reports", tags=["Reports"], responses=ERROR_RESPONSES)


@router.get("/daily", response_model=DailyReportResponse)
async def get_daily_report(
    day: date = Query(..., alias="date", description="보고 일자"),
    service: LedgerService = Depends(get_ledger_service),
):
    """일일 보고서"""
    report = await service.daily_report(day)
    head_names, party_names = await name_maps(service)

    data = report.to_dict()
    data["receives"] = [voucher_to_dict(v, head_names, party_names) for v in report.receives]
    data["payments"] = [voucher_to_dict(v, head_names, party_names) for v in report.payments]
    return data


@router.get("/daily-summary", response_model=list[DailySummaryRowResponse])
async def get_daily_summary(
    from_date: date = Query(..., description="시작 일자 (포함)"),
    to_date: date = Query(..., description="종료 일자 (포함)"),
    service: LedgerService = Depends(get_ledger_service),
):
    """기간 내 일자별 요약"""
    rows = await service.daily_summary(from_date, to_date)
    return [row.to_dict() for row in rows]
