"""
거래처 API 라우트
"""

from fastapi import APIRouter, Depends, Query, Response

from core.ledger.service import LedgerService
from web.dependencies import get_ledger_service
from web.models.requests import PartyCreateRequest, PartyUpdateRequest
from web.models.responses import ERROR_RESPONSES, PartyResponse, PartySummaryResponse

router = APIRouter(prefix="/api/parties", tags=["Parties"], responses=ERROR_RESPONSES)


@router.get("", response_model=list[PartyResponse])
async def list_parties(
    include_inactive: bool = Query(default=False, description="비활성 거래처 포함"),
    service: LedgerService = Depends(get_ledger_service),
):
    """거래처 목록 (이름순)"""
    parties = await service.list_parties(include_inactive)
    return [p.to_dict() for p in parties]


@router.post("", response_model=PartyResponse, status_code=201)
async def create_party(
    request: PartyCreateRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    """거래처 생성"""
    party = await service.create_party(
        request.name,
        phone=request.phone,
        address=request.address,
        party_type=request.party_type,
    )
    return party.to_dict()


@router.get("/summary", response_model=list[PartySummaryResponse])
async def get_party_summary(
    include_inactive: bool = Query(default=False, description="비활성 거래처 포함"),
    service: LedgerService = Depends(get_ledger_service),
):
    """거래처별 입금/지급 합계"""
    summaries = await service.party_summaries(include_inactive)
    return [s.to_dict() for s in summaries]


@router.patch("/{party_id}", response_model=PartyResponse)
async def update_party(
    party_id: str,
    request: PartyUpdateRequest,
    service: LedgerService = Depends(get_ledger_service),
):
    """거래처 수정 (보낸 항목만 변경)"""
    party = await service.get_party(party_id)
    if request.name is not None:
        party = await service.rename_party(party_id, request.name)
    if any(v is not None for v in (request.phone, request.address, request.party_type)):
        party = await service.update_party_contact(
            party_id,
            phone=request.phone,
            address=request.address,
            party_type=request.party_type,
        )
    return party.to_dict()


@router.delete("/{party_id}", status_code=204)
async def delete_party(
    party_id: str,
    service: LedgerService = Depends(get_ledger_service),
):
    """거래처 삭제 (참조 전표가 있으면 409, 비활성화를 사용)"""
    await service.delete_party(party_id)
    return Response(status_code=204)


@router.post("/{party_id}/deactivate", response_model=PartyResponse)
async def deactivate_party(
    party_id: str,
    service: LedgerService = Depends(get_ledger_service),
):
    """거래처 비활성화"""
    party = await service.deactivate_party(party_id)
    return party.to_dict()
