"""
계정 과목 API 라우트
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, Response

from core.ledger.service import LedgerService
from web.dependencies import get_ledger_service
from web.models.requests import HeadCreateRequest, HeadKindRequest, HeadRenameRequest
from web.models.responses import ERROR_RESPONSES, BalanceResponse, HeadResponse, HeadSummaryResponse

router = APIRouter(prefix="/api/heads", tags=["Heads"], responses=ERROR_RESPONSES)


@router.get("", response_model=list[HeadResponse])
async def list_heads(
    kind: str | None = Query(default=None, description="계정 종류 필터"),
    service: LedgerService = Depends(get_ledger_service),
):
    """활성 계정 목록 (최신순)"""
    heads = await service.list_heads(kind)
    return [h.to_dict() for h in heads]


@router.post("", response_model=HeadResponse, status_code=201)
async def create_head(
    request: HeadCreateRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    """계정 생성"""
    head = await service.create_head(request.name, request.kind)
    return head.to_dict()


@router.get("/summary", response_model=list[HeadSummaryResponse])
async def get_head_summary(
    kind: str | None = Query(default=None, description="계정 종류 필터"),
    as_of: date | None = Query(default=None, description="기준 일자 (포함)"),
    service: LedgerService = Depends(get_ledger_service),
):
    """계정별 입금/지급/잔액 (활성 전표 기준)"""
    summaries = await service.head_summaries(kind, as_of)
    return [s.to_dict() for s in summaries]


@router.patch("/{head_id}", response_model=HeadResponse)
async def rename_head(
    head_id: str,
    request: HeadRenameRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    """계정 이름 변경"""
    head = await service.rename_head(head_id, request.name)
    return head.to_dict()


@router.put("/{head_id}/kind", response_model=HeadResponse)
async def change_head_kind(
    head_id: str,
    request: HeadKindRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    """계정 종류 변경 (참조 전표가 있으면 409)"""
    head = await service.change_head_kind(head_id, request.kind)
    return head.to_dict()


@router.delete("/{head_id}", status_code=204)
async def delete_head(
    head_id: str,
    service: LedgerService = Depends(get_ledger_service),
):
    """계정 삭제 (참조 전표가 있으면 409)"""
    await service.delete_head(head_id)
    return Response(status_code=204)


@router.get("/{head_id}/balance", response_model=BalanceResponse)
async def get_head_balance(
    head_id: str,
    kind: str | None = Query(default=None, description="계정 종류 (생략 시 계정의 종류)"),
    as_of: date | None = Query(default=None, description="기준 일자 (포함)"),
    service: LedgerService = Depends(get_ledger_service),
):
    """계정 잔액"""
    if kind is None:
        kind = (await service.get_head(head_id)).kind.value
    balance = await service.balance(kind, head_id, as_of)
    return {
        "head_id": head_id,
        "kind": kind,
        "balance": str(balance),
        "as_of": as_of.isoformat() if as_of else None,
    }
