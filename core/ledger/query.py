"""
전표 조회/필터 엔진

필터 + 정렬 + 페이지네이션 + 통계.
통계와 total_count는 항상 페이지가 아닌 전체 필터 결과 기준.
정렬: date 내림차순, 동일 날짜는 전표 시퀀스 내림차순.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from core.constants import Defaults
from core.domain.models import Voucher, VoucherStats
from core.errors import InvalidArgumentError
from core.ledger.projector import BalanceProjector, compute_stats
from core.ledger.registry import parse_head_kind
from core.types import HeadKind, VoucherType
from core.utils.dates import parse_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoucherFilter:
    """전표 필터

    모든 조건은 AND 결합. None인 조건은 적용하지 않음.

    Attributes:
        from_date/to_date: 업무 일자 기준 (양 끝 포함)
        head_type/head_id: from 또는 to 계정 일치
        text_search: 설명, 계정명, 거래처명, 전표 번호 부분 일치 (대소문자 무시)
        include_inactive: True면 삭제된 전표도 행에 포함 (감사용)
    """

    from_date: date | None = None
    to_date: date | None = None
    voucher_type: VoucherType | None = None
    head_type: HeadKind | None = None
    head_id: str | None = None
    party_id: str | None = None
    text_search: str | None = None
    include_inactive: bool = False

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "VoucherFilter":
        """원시 값에서 생성 (빈 문자열은 None 취급)"""
        values = {k: (None if v == "" else v) for k, v in data.items()}

        voucher_type = values.get("voucher_type")
        if voucher_type is not None and not isinstance(voucher_type, VoucherType):
            try:
                voucher_type = VoucherType(str(voucher_type).lower())
            except ValueError as e:
                raise InvalidArgumentError(
                    f"유효하지 않은 전표 유형: '{voucher_type}'",
                    field="voucher_type",
                ) from e

        head_type = values.get("head_type")
        from_date = values.get("from_date")
        to_date = values.get("to_date")

        return VoucherFilter(
            from_date=parse_date(from_date, "from_date") if from_date is not None else None,
            to_date=parse_date(to_date, "to_date") if to_date is not None else None,
            voucher_type=voucher_type,
            head_type=parse_head_kind(head_type) if head_type is not None else None,
            head_id=values.get("head_id"),
            party_id=values.get("party_id"),
            text_search=values.get("text_search"),
            include_inactive=bool(values.get("include_inactive") or False),
        )


@dataclass(frozen=True)
class QueryResult:
    """조회 결과"""

    rows: list[Voucher]
    stats: VoucherStats
    total_count: int
    page: int | None = None
    page_size: int | None = None
    head_names: dict[str, str] = field(default_factory=dict)
    party_names: dict[str, str] = field(default_factory=dict)

    @property
    def total_pages(self) -> int:
        if not self.page_size:
            return 1 if self.total_count else 0
        return (self.total_count + self.page_size - 1) // self.page_size


def sort_vouchers(vouchers: list[Voucher]) -> list[Voucher]:
    """date 내림차순, 시퀀스 내림차순 정렬"""
    return sorted(vouchers, key=lambda v: (v.date, v.sequence), reverse=True)


class QueryEngine:
    """전표 조회 엔진

    Projector 스냅샷 위에서 동작하므로 저장소를 직접 변경하지 않음.

    Args:
        projector: 잔액 Projector (스냅샷 제공)
    """

    def __init__(self, projector: BalanceProjector):
        self.projector = projector

    async def _name_maps(self) -> tuple[dict[str, str], dict[str, str]]:
        storage = self.projector.storage
        heads = await storage.list_heads(include_inactive=True)
        parties = await storage.list_parties(include_inactive=True)
        return {h.id: h.name for h in heads}, {p.id: p.name for p in parties}

    async def query(
        self,
        voucher_filter: VoucherFilter | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> QueryResult:
        """전표 조회

        Args:
            voucher_filter: 필터 (None이면 전체)
            page: 1부터 시작하는 페이지 번호 (None이면 전체 반환)
            page_size: 페이지 크기 (page만 지정 시 기본값 사용)

        Raises:
            InvalidArgumentError: page/page_size가 1 미만이거나 from_date > to_date
        """
        voucher_filter = voucher_filter or VoucherFilter()

        if page is not None and page < 1:
            raise InvalidArgumentError("page는 1 이상이어야 합니다", field="page")
        if page_size is not None and page_size < 1:
            raise InvalidArgumentError("page_size는 1 이상이어야 합니다", field="page_size")
        if (
            voucher_filter.from_date is not None
            and voucher_filter.to_date is not None
            and voucher_filter.from_date > voucher_filter.to_date
        ):
            raise InvalidArgumentError("from_date가 to_date보다 늦습니다", field="from_date")

        vouchers = await self.projector.snapshot()
        head_names, party_names = await self._name_maps()

        matched = [
            v for v in vouchers
            if self._matches(v, voucher_filter, head_names, party_names)
        ]
        stats = compute_stats(matched)

        rows = sort_vouchers([
            v for v in matched if voucher_filter.include_inactive or v.is_active
        ])
        total_count = len(rows)

        if page is not None or page_size is not None:
            page = page or 1
            page_size = page_size or Defaults.PAGE_SIZE
            start = (page - 1) * page_size
            rows = rows[start:start + page_size]

        logger.debug(
            "전표 조회",
            extra={"total_count": total_count, "page": page, "page_size": page_size},
        )

        return QueryResult(
            rows=rows,
            stats=stats,
            total_count=total_count,
            page=page,
            page_size=page_size,
            head_names=head_names,
            party_names=party_names,
        )

    @staticmethod
    def _matches(
        voucher: Voucher,
        f: VoucherFilter,
        head_names: dict[str, str],
        party_names: dict[str, str],
    ) -> bool:
        if f.from_date is not None and voucher.date < f.from_date:
            return False
        if f.to_date is not None and voucher.date > f.to_date:
            return False
        if f.voucher_type is not None and voucher.voucher_type != f.voucher_type:
            return False
        if f.party_id is not None and voucher.party_id != f.party_id:
            return False

        if f.head_id is not None:
            if f.head_type is not None:
                if not voucher.references_head(f.head_type, f.head_id):
                    return False
            elif f.head_id not in (voucher.from_head_id, voucher.to_head_id):
                return False
        elif f.head_type is not None:
            if f.head_type not in (voucher.from_head_type, voucher.to_head_type):
                return False

        if f.text_search:
            needle = f.text_search.strip().casefold()
            if needle:
                haystack = [
                    voucher.description,
                    voucher.voucher_number,
                    head_names.get(voucher.from_head_id, ""),
                    head_names.get(voucher.to_head_id or "", ""),
                    party_names.get(voucher.party_id or "", ""),
                ]
                if not any(needle in text.casefold() for text in haystack):
                    return False

        return True
