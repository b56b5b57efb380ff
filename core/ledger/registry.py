"""
계정/거래처 레지스트리

AccountHead와 Party의 생성, 조회, 수정, 삭제.
전표가 참조 중인 계정/거래처는 삭제 불가 (ReferentialIntegrity).
삭제는 status=inactive로 표시하는 소프트 삭제.
이름 유일성/참조 수 검사는 저장소가 쓰기와 같은 트랜잭션에서 수행.
"""

import logging

from adapters.interfaces import ILedgerStorage
from core.domain.integrity import check_head_reference, check_party_reference
from core.domain.models import AccountHead, Party
from core.errors import InvalidArgumentError, NotFoundError, ReferentialIntegrityError
from core.types import HeadKind

logger = logging.getLogger(__name__)


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidArgumentError("이름이 비어 있습니다", field="name")
    return cleaned


def _clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def _head_not_found(head_id: str) -> NotFoundError:
    return NotFoundError(f"계정을 찾을 수 없습니다: {head_id}", field="head_id")


def _party_not_found(party_id: str) -> NotFoundError:
    return NotFoundError(f"거래처를 찾을 수 없습니다: {party_id}", field="party_id")


class HeadRegistry:
    """계정 과목 레지스트리

    이름은 같은 kind의 활성 계정 사이에서 대소문자 무시 유일.

    Args:
        storage: 원장 저장소
    """

    def __init__(self, storage: ILedgerStorage):
        self.storage = storage

    async def create(self, name: str, kind: HeadKind | str) -> AccountHead:
        """계정 생성

        Raises:
            InvalidArgumentError: 이름이 비었거나 중복, kind가 유효하지 않음
        """
        kind = parse_head_kind(kind)
        head = AccountHead.create(name=_clean_name(name), kind=kind)
        await self.storage.insert_head(head)

        logger.info(
            "계정 생성",
            extra={"head_id": head.id, "head_name": head.name, "kind": kind.value},
        )
        return head

    async def get(self, head_id: str) -> AccountHead:
        """계정 조회 (비활성 포함)

        Raises:
            NotFoundError: 존재하지 않는 계정
        """
        head = await self.storage.get_head(head_id)
        if head is None:
            raise _head_not_found(head_id)
        return head

    async def get_active(self, kind: HeadKind, head_id: str, field: str = "head_id") -> AccountHead:
        """전표 참조용 활성 계정 조회

        Raises:
            NotFoundError: 존재하지 않거나 비활성
            InvalidArgumentError: kind 불일치
        """
        return check_head_reference(await self.storage.get_head(head_id), kind, head_id, field)

    async def list(self, kind: HeadKind | str | None = None) -> list[AccountHead]:
        """활성 계정 목록 (최신순)"""
        kind = parse_head_kind(kind) if kind is not None else None
        heads = await self.storage.list_heads(kind=kind)
        return sorted(heads, key=lambda h: (h.created_at, h.id), reverse=True)

    async def rename(self, head_id: str, name: str) -> AccountHead:
        """계정 이름 변경"""
        name = _clean_name(name)
        try:
            updated = await self.storage.rename_head(head_id, name)
        except KeyError as e:
            raise _head_not_found(head_id) from e

        logger.info("계정 이름 변경", extra={"head_id": head_id, "head_name": name})
        return updated

    async def change_kind(self, head_id: str, kind: HeadKind | str) -> AccountHead:
        """계정 종류 변경

        전표가 하나라도 참조하면 변경 불가.

        Raises:
            ImmutableFieldError: 참조 전표 존재
        """
        kind = parse_head_kind(kind)
        try:
            updated = await self.storage.change_head_kind(head_id, kind)
        except KeyError as e:
            raise _head_not_found(head_id) from e

        logger.info("계정 종류 변경", extra={"head_id": head_id, "to_kind": kind.value})
        return updated

    async def delete(self, head_id: str) -> None:
        """계정 삭제 (소프트 삭제)

        Raises:
            NotFoundError: 존재하지 않는 계정
            ReferentialIntegrityError: 참조 전표 존재 (비활성 전표 포함)
        """
        try:
            changed = await self.storage.deactivate_head(head_id)
        except KeyError as e:
            raise _head_not_found(head_id) from e
        except ReferentialIntegrityError:
            logger.warning("참조 중인 계정 삭제 거부", extra={"head_id": head_id})
            raise

        if changed:
            logger.info("계정 삭제", extra={"head_id": head_id})


class PartyRegistry:
    """거래처 레지스트리

    Args:
        storage: 원장 저장소
    """

    def __init__(self, storage: ILedgerStorage):
        self.storage = storage

    async def create(
        self,
        name: str,
        phone: str | None = None,
        address: str | None = None,
        party_type: str | None = None,
    ) -> Party:
        """거래처 생성"""
        party = Party.create(
            name=_clean_name(name),
            phone=_clean_optional(phone),
            address=_clean_optional(address),
            party_type=_clean_optional(party_type),
        )
        await self.storage.insert_party(party)

        logger.info("거래처 생성", extra={"party_id": party.id, "party_name": party.name})
        return party

    async def get(self, party_id: str) -> Party:
        """거래처 조회 (비활성 포함)

        Raises:
            NotFoundError: 존재하지 않는 거래처
        """
        party = await self.storage.get_party(party_id)
        if party is None:
            raise _party_not_found(party_id)
        return party

    async def get_active(self, party_id: str) -> Party:
        """전표 참조용 활성 거래처 조회"""
        return check_party_reference(await self.storage.get_party(party_id), party_id)

    async def list(self, include_inactive: bool = False) -> list[Party]:
        """거래처 목록 (이름순)"""
        parties = await self.storage.list_parties(include_inactive=include_inactive)
        return sorted(parties, key=lambda p: (p.name.casefold(), p.created_at, p.id))

    async def _update(self, party_id: str, changes: dict[str, str | None]) -> Party:
        try:
            return await self.storage.update_party(party_id, changes)
        except KeyError as e:
            raise _party_not_found(party_id) from e

    async def rename(self, party_id: str, name: str) -> Party:
        """거래처 이름 변경"""
        updated = await self._update(party_id, {"name": _clean_name(name)})

        logger.info("거래처 이름 변경", extra={"party_id": party_id, "party_name": updated.name})
        return updated

    async def update_contact(
        self,
        party_id: str,
        phone: str | None = None,
        address: str | None = None,
        party_type: str | None = None,
    ) -> Party:
        """연락처/유형 갱신 (None인 항목은 유지)"""
        changes = {
            name: _clean_optional(value)
            for name, value in (("phone", phone), ("address", address), ("party_type", party_type))
            if value is not None
        }
        updated = await self._update(party_id, changes)

        logger.info("거래처 정보 갱신", extra={"party_id": party_id})
        return updated

    async def delete(self, party_id: str) -> None:
        """거래처 삭제 (참조 전표가 없을 때만)

        Raises:
            NotFoundError: 존재하지 않는 거래처
            ReferentialIntegrityError: 참조 전표 존재
        """
        try:
            changed = await self.storage.deactivate_party(party_id, require_unreferenced=True)
        except KeyError as e:
            raise _party_not_found(party_id) from e
        except ReferentialIntegrityError:
            logger.warning("참조 중인 거래처 삭제 거부", extra={"party_id": party_id})
            raise

        if changed:
            logger.info("거래처 삭제", extra={"party_id": party_id})

    async def deactivate(self, party_id: str) -> Party:
        """거래처 비활성화

        참조 여부와 무관하게 허용. 과거 전표는 그대로 유지되며
        신규 전표에서는 참조할 수 없음.
        """
        try:
            changed = await self.storage.deactivate_party(party_id)
        except KeyError as e:
            raise _party_not_found(party_id) from e

        if changed:
            logger.info("거래처 비활성화", extra={"party_id": party_id})
        return await self.get(party_id)


def parse_head_kind(kind: HeadKind | str) -> HeadKind:
    """문자열/Enum을 HeadKind로 변환"""
    if isinstance(kind, HeadKind):
        return kind
    try:
        return HeadKind(str(kind).lower())
    except ValueError as e:
        valid = [k.value for k in HeadKind]
        raise InvalidArgumentError(
            f"유효하지 않은 계정 종류: '{kind}'. 유효한 값: {valid}",
            field="kind",
        ) from e
