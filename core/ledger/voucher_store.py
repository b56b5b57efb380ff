"""
전표 저장소

전표의 생성, 수정, 일괄 소프트 삭제.
생성 시 계정/거래처 참조 무결성을 검증하고 전역 시퀀스로 번호를 부여.
생성 이후 유형과 계정 참조는 변경 불가.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from adapters.interfaces import ILedgerStorage
from core.constants import Defaults
from core.domain.integrity import check_voucher_editable
from core.domain.models import (
    EDITABLE_VOUCHER_FIELDS,
    IMMUTABLE_VOUCHER_FIELDS,
    DeleteResult,
    Voucher,
    new_id,
)
from core.errors import ImmutableFieldError, InvalidArgumentError, NotFoundError
from core.ledger.registry import HeadRegistry, PartyRegistry, parse_head_kind
from core.types import TRANSFER_TYPES, HeadKind, RecordStatus, VoucherType
from core.utils.dates import now_utc, parse_date
from core.utils.money import to_amount
from core.utils.voucher_number import make_voucher_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoucherDraft:
    """검증 전 전표 입력값

    Web 요청 또는 호출자가 전달한 원시 값.
    """

    date: Any
    voucher_type: Any
    from_head_type: Any
    from_head_id: str
    amount: Any
    description: str = ""
    party_id: str | None = None
    to_head_type: Any = None
    to_head_id: str | None = None
    created_by: str = Defaults.CREATED_BY

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "VoucherDraft":
        """딕셔너리에서 생성 (알 수 없는 키는 거부)"""
        allowed = {
            "date", "voucher_type", "from_head_type", "from_head_id", "amount",
            "description", "party_id", "to_head_type", "to_head_id", "created_by",
        }
        unknown = set(data) - allowed
        if unknown:
            raise InvalidArgumentError(
                f"알 수 없는 필드: {sorted(unknown)}",
                field=sorted(unknown)[0],
            )
        for required in ("date", "voucher_type", "from_head_type", "from_head_id", "amount"):
            if data.get(required) in (None, ""):
                raise InvalidArgumentError("필수 값이 없습니다", field=required)
        return VoucherDraft(**data)


def _parse_voucher_type(value: Any) -> VoucherType:
    if isinstance(value, VoucherType):
        return value
    try:
        return VoucherType(str(value).lower())
    except ValueError as e:
        valid = [t.value for t in VoucherType]
        raise InvalidArgumentError(
            f"유효하지 않은 전표 유형: '{value}'. 유효한 값: {valid}",
            field="voucher_type",
        ) from e


class VoucherStore:
    """전표 저장소

    Args:
        storage: 원장 저장소
        heads: 계정 레지스트리
        parties: 거래처 레지스트리
        prefix: 전표 번호 접두어

    사용 예시:
    ```python
    store = VoucherStore(storage, HeadRegistry(storage), PartyRegistry(storage))
    voucher = await store.create({
        "date": "2024-01-05",
        "voucher_type": "receive",
        "from_head_type": "bank",
        "from_head_id": bank.id,
        "amount": "500",
    })
    ```
    """

    def __init__(
        self,
        storage: ILedgerStorage,
        heads: HeadRegistry,
        parties: PartyRegistry,
        prefix: str = Defaults.VOUCHER_PREFIX,
    ):
        self.storage = storage
        self.heads = heads
        self.parties = parties
        self.prefix = prefix

    async def create(self, payload: VoucherDraft | dict[str, Any]) -> Voucher:
        """전표 생성

        검증 순서: 금액 → 유형 → from 계정 → to 계정 → 거래처.

        Raises:
            InvalidArgumentError: 금액/유형/계정 종류 오류, to 계정 누락 또는 from과 동일
            NotFoundError: 계정 또는 거래처가 없거나 비활성
        """
        draft = payload if isinstance(payload, VoucherDraft) else VoucherDraft.from_dict(payload)

        amount = to_amount(draft.amount)
        voucher_type = _parse_voucher_type(draft.voucher_type)
        voucher_date = parse_date(draft.date)

        from_kind = parse_head_kind(draft.from_head_type)
        await self.heads.get_active(from_kind, draft.from_head_id, field="from_head_id")

        to_kind, to_head_id = await self._validate_to_head(
            voucher_type, draft, from_kind
        )

        party_id = draft.party_id or None
        if party_id is not None:
            await self.parties.get_active(party_id)

        created_at = now_utc()
        voucher_id = new_id()

        def build(sequence: int) -> Voucher:
            return Voucher(
                id=voucher_id,
                voucher_number=make_voucher_number(sequence, self.prefix),
                sequence=sequence,
                date=voucher_date,
                voucher_type=voucher_type,
                from_head_type=from_kind,
                from_head_id=draft.from_head_id,
                to_head_type=to_kind,
                to_head_id=to_head_id,
                party_id=party_id,
                description=(draft.description or "").strip(),
                amount=amount,
                status=RecordStatus.ACTIVE,
                created_by=draft.created_by or Defaults.CREATED_BY,
                created_at=created_at,
            )

        # 계정/거래처 활성 여부는 저장소가 트랜잭션 안에서 재확인
        voucher = await self.storage.append_voucher(build)

        logger.info(
            "전표 생성",
            extra={
                "voucher_id": voucher.id,
                "voucher_number": voucher.voucher_number,
                "voucher_type": voucher.voucher_type.value,
                "amount": str(voucher.amount),
            },
        )
        return voucher

    async def _validate_to_head(
        self,
        voucher_type: VoucherType,
        draft: VoucherDraft,
        from_kind: HeadKind,
    ) -> tuple[HeadKind | None, str | None]:
        """to 계정 검증 (type/id는 둘 다 있거나 둘 다 없음)"""
        has_type = draft.to_head_type not in (None, "")
        has_id = draft.to_head_id not in (None, "")

        if has_type != has_id:
            raise InvalidArgumentError(
                "to_head_type과 to_head_id는 함께 지정해야 합니다",
                field="to_head_id",
            )

        if not has_id:
            if voucher_type in TRANSFER_TYPES:
                raise InvalidArgumentError(
                    f"{voucher_type.value} 전표는 to 계정이 필요합니다",
                    field="to_head_id",
                )
            return None, None

        to_kind = parse_head_kind(draft.to_head_type)
        if to_kind == from_kind and draft.to_head_id == draft.from_head_id:
            raise InvalidArgumentError(
                "to 계정은 from 계정과 달라야 합니다",
                field="to_head_id",
            )
        await self.heads.get_active(to_kind, draft.to_head_id, field="to_head_id")
        return to_kind, draft.to_head_id

    async def get(self, voucher_id: str) -> Voucher:
        """전표 조회 (비활성 포함)

        Raises:
            NotFoundError: 존재하지 않는 전표
        """
        voucher = await self.storage.get_voucher(voucher_id)
        if voucher is None:
            raise NotFoundError(f"전표를 찾을 수 없습니다: {voucher_id}", field="id")
        return voucher

    async def update(self, voucher_id: str, changes: dict[str, Any]) -> Voucher:
        """전표 수정 (date, description, amount, party_id만 허용)

        변경 불가 필드는 기존 값과 같으면 무시, 다르면 거부.

        Raises:
            NotFoundError: 존재하지 않는 전표 또는 거래처
            ImmutableFieldError: 변경 불가 필드 수정, 비활성 전표 수정
            InvalidArgumentError: 알 수 없는 필드, 잘못된 금액/날짜
        """
        voucher = await self.get(voucher_id)

        unknown = set(changes) - EDITABLE_VOUCHER_FIELDS - IMMUTABLE_VOUCHER_FIELDS
        unknown.discard("status")
        if unknown:
            raise InvalidArgumentError(
                f"알 수 없는 필드: {sorted(unknown)}",
                field=sorted(unknown)[0],
            )

        current = voucher.to_dict()
        for name in sorted(IMMUTABLE_VOUCHER_FIELDS | {"status"}):
            if name in changes and not _same_value(current[name], changes[name]):
                raise ImmutableFieldError(f"변경할 수 없는 필드입니다: {name}", field=name)

        check_voucher_editable(voucher)

        updates: dict[str, Any] = {}
        if "amount" in changes:
            updates["amount"] = to_amount(changes["amount"])
        if "date" in changes:
            updates["date"] = parse_date(changes["date"])
        if "description" in changes:
            updates["description"] = (changes["description"] or "").strip()
        if "party_id" in changes:
            updates["party_id"] = changes["party_id"] or None

        if not updates:
            return voucher

        # 활성 상태와 새 거래처는 저장소가 쓰기 트랜잭션 안에서 재확인
        try:
            updated = await self.storage.update_voucher(voucher_id, updates, now_utc())
        except KeyError as e:
            raise NotFoundError(f"전표를 찾을 수 없습니다: {voucher_id}", field="id") from e

        logger.info(
            "전표 수정",
            extra={"voucher_id": voucher_id, "fields": sorted(updates)},
        )
        return updated

    async def soft_delete(self, ids: Iterable[str]) -> DeleteResult:
        """전표 일괄 소프트 삭제

        각 전표는 개별적으로 원자적 처리. 실패한 ID는 배치를 중단하지 않음.
        이미 삭제된 전표는 무시 (삭제 수에 포함하지 않으며 실패도 아님).

        Returns:
            DeleteResult(deleted_count, failed_ids)
        """
        deleted_count = 0
        failed_ids: list[str] = []
        seen: set[str] = set()

        for voucher_id in ids:
            if voucher_id in seen:
                continue
            seen.add(voucher_id)

            try:
                changed = await self.storage.set_voucher_status(
                    voucher_id, RecordStatus.INACTIVE, now_utc()
                )
            except KeyError:
                failed_ids.append(voucher_id)
                continue

            if changed:
                deleted_count += 1

        logger.info(
            "전표 삭제",
            extra={"deleted_count": deleted_count, "failed_ids": failed_ids},
        )
        return DeleteResult(deleted_count=deleted_count, failed_ids=failed_ids)


def _same_value(current: Any, requested: Any) -> bool:
    """직렬화 값 기준 동등 비교 (Enum, Decimal, date 허용)"""
    if requested is None or current is None:
        return requested == current
    if hasattr(requested, "value"):
        requested = requested.value
    if isinstance(requested, date):
        requested = requested.isoformat()
    if isinstance(requested, Decimal):
        requested = str(requested)
    return str(current) == str(requested)
