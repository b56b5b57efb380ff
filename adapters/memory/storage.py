"""
메모리 원장 저장소

테스트 및 임시 실행용 인메모리 저장소.
ILedgerStorage Protocol 준수.
"""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable

from core.domain.integrity import (
    check_head_deletable,
    check_head_kind_changeable,
    check_party_deletable,
    check_party_reference,
    check_unique_head_name,
    check_voucher_editable,
    check_voucher_references,
)
from core.domain.models import EDITABLE_VOUCHER_FIELDS, AccountHead, Party, Voucher
from core.types import HeadKind, RecordStatus

logger = logging.getLogger(__name__)

_PARTY_FIELDS = frozenset({"name", "phone", "address", "party_type"})


@dataclass
class LedgerState:
    """메모리 상태"""

    # 계정 (head_id -> AccountHead)
    heads: dict[str, AccountHead] = field(default_factory=dict)

    # 거래처 (party_id -> Party)
    parties: dict[str, Party] = field(default_factory=dict)

    # 전표 (voucher_id -> Voucher)
    vouchers: dict[str, Voucher] = field(default_factory=dict)

    # 전표 시퀀스 (마지막 할당 값)
    last_sequence: int = 0

    # 쓰기 리비전
    revision: int = 0


class InMemoryLedgerStorage:
    """메모리 원장 저장소

    ILedgerStorage Protocol 구현.
    쓰기는 asyncio.Lock으로 직렬화하며 무결성 검사도 같은 잠금 안에서 수행.
    조회 결과는 복사본을 반환하여 호출자가 내부 상태를 변경할 수 없음
    (Voucher는 불변이므로 공유).

    사용 예시:
    ```python
    storage = InMemoryLedgerStorage()
    service = LedgerService(storage)
    ```
    """

    def __init__(self, state: LedgerState | None = None):
        self.state = state or LedgerState()
        self._lock = asyncio.Lock()

    def _bump(self) -> None:
        self.state.revision += 1

    def _head(self, head_id: str) -> AccountHead:
        head = self.state.heads.get(head_id)
        if head is None:
            raise KeyError(head_id)
        return head

    def _party(self, party_id: str) -> Party:
        party = self.state.parties.get(party_id)
        if party is None:
            raise KeyError(party_id)
        return party

    def _head_references(self, head_id: str) -> int:
        return sum(
            1
            for v in self.state.vouchers.values()
            if v.from_head_id == head_id or v.to_head_id == head_id
        )

    def _party_references(self, party_id: str) -> int:
        return sum(1 for v in self.state.vouchers.values() if v.party_id == party_id)

    async def revision(self) -> int:
        return self.state.revision

    async def close(self) -> None:
        """메모리 저장소는 정리할 리소스 없음"""
        return None

    # -------------------------------------------------------------------------
    # 계정
    # -------------------------------------------------------------------------

    async def insert_head(self, head: AccountHead) -> None:
        async with self._lock:
            if head.is_active:
                check_unique_head_name(head.name, head.kind, self.state.heads.values())
            self.state.heads[head.id] = replace(head)
            self._bump()

    async def rename_head(self, head_id: str, name: str) -> AccountHead:
        async with self._lock:
            head = self._head(head_id)
            if head.is_active:
                check_unique_head_name(name, head.kind, self.state.heads.values(), head_id)
            updated = replace(head, name=name)
            self.state.heads[head_id] = updated
            self._bump()
        return replace(updated)

    async def change_head_kind(self, head_id: str, kind: HeadKind) -> AccountHead:
        async with self._lock:
            head = self._head(head_id)
            if head.kind == kind:
                return replace(head)
            check_head_kind_changeable(self._head_references(head_id))
            if head.is_active:
                check_unique_head_name(head.name, kind, self.state.heads.values(), head_id)
            updated = replace(head, kind=kind)
            self.state.heads[head_id] = updated
            self._bump()
        return replace(updated)

    async def deactivate_head(self, head_id: str) -> bool:
        async with self._lock:
            head = self._head(head_id)
            check_head_deletable(self._head_references(head_id))
            if not head.is_active:
                return False
            self.state.heads[head_id] = replace(head, status=RecordStatus.INACTIVE)
            self._bump()
        return True

    async def get_head(self, head_id: str) -> AccountHead | None:
        head = self.state.heads.get(head_id)
        return replace(head) if head else None

    async def list_heads(
        self,
        kind: HeadKind | None = None,
        include_inactive: bool = False,
    ) -> list[AccountHead]:
        return [
            replace(h)
            for h in self.state.heads.values()
            if (kind is None or h.kind == kind)
            and (include_inactive or h.is_active)
        ]

    async def count_head_references(self, head_id: str) -> int:
        return self._head_references(head_id)

    # -------------------------------------------------------------------------
    # 거래처
    # -------------------------------------------------------------------------

    async def insert_party(self, party: Party) -> None:
        async with self._lock:
            self.state.parties[party.id] = replace(party)
            self._bump()

    async def update_party(self, party_id: str, changes: dict[str, str | None]) -> Party:
        unknown = set(changes) - _PARTY_FIELDS
        if unknown:
            raise ValueError(f"거래처 갱신 불가 필드: {sorted(unknown)}")

        async with self._lock:
            updated = replace(self._party(party_id), **changes)
            self.state.parties[party_id] = updated
            self._bump()
        return replace(updated)

    async def deactivate_party(self, party_id: str, require_unreferenced: bool = False) -> bool:
        async with self._lock:
            party = self._party(party_id)
            if require_unreferenced:
                check_party_deletable(self._party_references(party_id))
            if not party.is_active:
                return False
            self.state.parties[party_id] = replace(party, status=RecordStatus.INACTIVE)
            self._bump()
        return True

    async def get_party(self, party_id: str) -> Party | None:
        party = self.state.parties.get(party_id)
        return replace(party) if party else None

    async def list_parties(self, include_inactive: bool = False) -> list[Party]:
        return [
            replace(p)
            for p in self.state.parties.values()
            if include_inactive or p.is_active
        ]

    async def count_party_references(self, party_id: str) -> int:
        return self._party_references(party_id)

    # -------------------------------------------------------------------------
    # 전표
    # -------------------------------------------------------------------------

    async def append_voucher(self, build: Callable[[int], Voucher]) -> Voucher:
        async with self._lock:
            sequence = self.state.last_sequence + 1
            voucher = build(sequence)
            check_voucher_references(
                voucher,
                self.state.heads.get(voucher.from_head_id),
                self.state.heads.get(voucher.to_head_id) if voucher.to_head_id else None,
                self.state.parties.get(voucher.party_id) if voucher.party_id else None,
            )
            # build/검증 실패 시 시퀀스를 소비하지 않음
            self.state.last_sequence = sequence
            self.state.vouchers[voucher.id] = voucher
            self._bump()
        return voucher

    async def update_voucher(
        self,
        voucher_id: str,
        changes: dict[str, Any],
        updated_at: datetime,
    ) -> Voucher:
        unknown = set(changes) - EDITABLE_VOUCHER_FIELDS
        if unknown:
            raise ValueError(f"전표 갱신 불가 필드: {sorted(unknown)}")

        async with self._lock:
            voucher = self.state.vouchers.get(voucher_id)
            if voucher is None:
                raise KeyError(voucher_id)
            check_voucher_editable(voucher)

            party_id = changes.get("party_id", voucher.party_id)
            if party_id is not None and party_id != voucher.party_id:
                check_party_reference(self.state.parties.get(party_id), party_id)

            updated = replace(voucher, updated_at=updated_at, **changes)
            self.state.vouchers[voucher_id] = updated
            self._bump()
        return updated

    async def get_voucher(self, voucher_id: str) -> Voucher | None:
        return self.state.vouchers.get(voucher_id)

    async def set_voucher_status(
        self,
        voucher_id: str,
        status: RecordStatus,
        updated_at: datetime,
    ) -> bool:
        async with self._lock:
            voucher = self.state.vouchers.get(voucher_id)
            if voucher is None:
                raise KeyError(voucher_id)
            if voucher.status == status:
                return False
            self.state.vouchers[voucher_id] = replace(
                voucher, status=status, updated_at=updated_at
            )
            self._bump()
        return True

    async def list_vouchers(self) -> list[Voucher]:
        return list(self.state.vouchers.values())
