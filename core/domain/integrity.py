"""
참조 무결성 규칙

저장소 구현체가 쓰기 잠금(트랜잭션) 안에서 호출하는 검증 함수.
이미 조회한 레코드와 참조 수만 받아 판단하므로
메모리/SQLite 저장소가 같은 규칙을 공유.
"""

from typing import Iterable

from core.domain.models import AccountHead, Party, Voucher
from core.errors import (
    ImmutableFieldError,
    InvalidArgumentError,
    NotFoundError,
    ReferentialIntegrityError,
)
from core.types import HeadKind


def check_head_reference(
    head: AccountHead | None,
    kind: HeadKind,
    head_id: str,
    field: str = "head_id",
) -> AccountHead:
    """전표가 참조할 계정 검증

    Raises:
        NotFoundError: 존재하지 않거나 비활성
        InvalidArgumentError: kind 불일치
    """
    if head is None or not head.is_active:
        raise NotFoundError(f"계정을 찾을 수 없습니다: {head_id}", field=field)
    if head.kind != kind:
        raise InvalidArgumentError(
            f"계정 종류 불일치: {head.name}은(는) {head.kind.value}입니다 (요청: {kind.value})",
            field=field,
        )
    return head


def check_party_reference(party: Party | None, party_id: str) -> Party:
    """전표가 참조할 거래처 검증 (존재 + 활성)"""
    if party is None or not party.is_active:
        raise NotFoundError(f"거래처를 찾을 수 없습니다: {party_id}", field="party_id")
    return party


def check_voucher_references(
    voucher: Voucher,
    from_head: AccountHead | None,
    to_head: AccountHead | None,
    party: Party | None,
) -> None:
    """전표 저장 직전 from/to 계정과 거래처 재검증"""
    check_head_reference(from_head, voucher.from_head_type, voucher.from_head_id, "from_head_id")
    if voucher.to_head_id is not None:
        check_head_reference(to_head, voucher.to_head_type, voucher.to_head_id, "to_head_id")
    if voucher.party_id is not None:
        check_party_reference(party, voucher.party_id)


def check_voucher_editable(voucher: Voucher) -> None:
    if not voucher.is_active:
        raise ImmutableFieldError("삭제된 전표는 수정할 수 없습니다", field="status")


def duplicate_head_name(name: str, kind: HeadKind) -> InvalidArgumentError:
    return InvalidArgumentError(
        f"같은 종류({kind.value})에 이미 존재하는 이름입니다: {name}",
        field="name",
    )


def check_unique_head_name(
    name: str,
    kind: HeadKind,
    heads: Iterable[AccountHead],
    exclude_id: str | None = None,
) -> None:
    """같은 kind의 활성 계정 사이에서 이름 유일성 (대소문자 무시)"""
    folded = name.casefold()
    for head in heads:
        if (
            head.id != exclude_id
            and head.is_active
            and head.kind == kind
            and head.name.casefold() == folded
        ):
            raise duplicate_head_name(name, kind)


def check_head_deletable(references: int) -> None:
    if references > 0:
        raise ReferentialIntegrityError(
            f"전표 {references}건이 참조 중인 계정은 삭제할 수 없습니다",
            field="head_id",
        )


def check_head_kind_changeable(references: int) -> None:
    if references > 0:
        raise ImmutableFieldError(
            f"전표 {references}건이 참조 중인 계정의 종류는 변경할 수 없습니다",
            field="kind",
        )


def check_party_deletable(references: int) -> None:
    if references > 0:
        raise ReferentialIntegrityError(
            f"전표 {references}건이 참조 중인 거래처는 삭제할 수 없습니다. 비활성화를 사용하세요",
            field="party_id",
        )
