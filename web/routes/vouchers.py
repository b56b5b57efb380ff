"""
전표 API 라우트

GET    /api/vouchers          - 필터 조회 (통계 포함)
POST   /api/vouchers          - 전표 생성
DELETE /api/vouchers          - 일괄 소프트 삭제
GET    /api/vouchers/{id}     - 단건 조회
PATCH  /api/vouchers/{id}     - 수정 (date, description, amount, party_id)
"""

from datetime import date

from fastapi import APIRouter, Depends, Query

from core.constants import Defaults
from core.ledger.query import VoucherFilter
from core.ledger.service import LedgerService
from web.dependencies import get_ledger_service
from web.models.requests import (
    VoucherCreateRequest,
    VoucherDeleteRequest,
    VoucherUpdateRequest,
)
from web.models.responses import (
    ERROR_RESPONSES,
    DeleteResultResponse,
    VoucherListResponse,
    VoucherResponse,
)
from web.services.voucher_view import describe_voucher, query_result_to_dict

router = APIRouter(prefix="/api/vouchers", tags=["Vouchers"], responses=ERROR_RESPONSES)


@router.get("", response_model=VoucherListResponse)
async def list_vouchers(
    from_date: date | None = Query(default=None, description="시작 일자 (포함)"),
    to_date: date | None = Query(default=None, description="종료 일자 (포함)"),
    voucher_type: str | None = Query(default=None, description="전표 유형"),
    head_type: str | None = Query(default=None, description="계정 종류 (from 또는 to)"),
    head_id: str | None = Query(default=None, description="계정 ID (from 또는 to)"),
    party_id: str | None = Query(default=None, description="거래처 ID"),
    q: str | None = Query(default=None, description="검색어 (설명, 계정명, 거래처명, 전표 번호)"),
    include_inactive: bool = Query(default=False, description="삭제된 전표 포함"),
    page: int | None = Query(default=None, ge=1),
    page_size: int | None = Query(default=None, ge=1, le=Defaults.MAX_PAGE_SIZE),
    service: LedgerService = Depends(get_ledger_service),
):
    """전표 목록 조회

    정렬: 일자 내림차순, 전표 번호 내림차순.
    stats와 total_count는 페이지와 무관하게 전체 필터 결과 기준.
    """
    voucher_filter = VoucherFilter.from_dict({
        "from_date": from_date,
        "to_date": to_date,
        "voucher_type": voucher_type,
        "head_type": head_type,
        "head_id": head_id,
        "party_id": party_id,
        "text_search": q,
        "include_inactive": include_inactive,
    })
    result = await service.query_vouchers(voucher_filter, page, page_size)
    return query_result_to_dict(result)


@router.post("", response_model=VoucherResponse, status_code=201)
async def create_voucher(
    request: VoucherCreateRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    """전표 생성"""
    voucher = await service.create_voucher(request.to_payload())
    return await describe_voucher(service, voucher)


@router.delete("", response_model=DeleteResultResponse)
async def delete_vouchers(
    request: VoucherDeleteRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    """전표 일괄 소프트 삭제

    존재하지 않는 ID는 failed_ids로 반환되며 나머지 삭제는 계속 진행.
    """
    result = await service.delete_vouchers(request.ids)
    return result.to_dict()


@router.get("/{voucher_id}", response_model=VoucherResponse)
async def get_voucher(
    voucher_id: str,
    service: LedgerService = Depends(get_ledger_service),
):
    """전표 단건 조회 (삭제된 전표 포함)"""
    voucher = await service.get_voucher(voucher_id)
    return await describe_voucher(service, voucher)


@router.patch("/{voucher_id}", response_model=VoucherResponse)
async def update_voucher(
    voucher_id: str,
    request: VoucherUpdateRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    """전표 수정"""
    voucher = await service.update_voucher(voucher_id, request.to_changes())
    return await describe_voucher(service, voucher)
