"""
전표 응답 변환

엔진 결과(Voucher, QueryResult 등)를 API 응답 딕셔너리로 변환.
계정/거래처 이름을 함께 채워 넣음.
"""

from typing import Any

from core.domain.models import Voucher
from core.ledger.query import QueryResult
from core.ledger.service import LedgerService


def voucher_to_dict(
    voucher: Voucher,
    head_names: dict[str, str] | None = None,
    party_names: dict[str, str] | None = None,
) -> dict[str, Any]:
    """전표 + 계정/거래처 이름"""
    head_names = head_names or {}
    party_names = party_names or {}

    data = voucher.to_dict()
    data["from_head_name"] = head_names.get(voucher.from_head_id)
    data["to_head_name"] = head_names.get(voucher.to_head_id) if voucher.to_head_id else None
    data["party_name"] = party_names.get(voucher.party_id) if voucher.party_id else None
    return data


async def name_maps(service: LedgerService) -> tuple[dict[str, str], dict[str, str]]:
    """비활성 포함 전체 계정/거래처 이름 맵"""
    heads = await service.storage.list_heads(include_inactive=True)
    parties = await service.storage.list_parties(include_inactive=True)
    return {h.id: h.name for h in heads}, {p.id: p.name for p in parties}


async def describe_voucher(service: LedgerService, voucher: Voucher) -> dict[str, Any]:
    """단일 전표 응답"""
    head_names, party_names = await name_maps(service)
    return voucher_to_dict(voucher, head_names, party_names)


def query_result_to_dict(result: QueryResult) -> dict[str, Any]:
    """조회 결과 응답"""
    return {
        "rows": [
            voucher_to_dict(v, result.head_names, result.party_names)
            for v in result.rows
        ],
        "stats": result.stats.to_dict(),
        "total_count": result.total_count,
        "page": result.page,
        "page_size": result.page_size,
        "total_pages": result.total_pages,
    }
