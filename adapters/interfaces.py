"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 저장소 구현체(메모리, SQLite)는 이 Protocol을 준수해야 함.
"""

from datetime import datetime
from typing import Any, Callable, Protocol, runtime_checkable

from core.domain.models import AccountHead, Party, Voucher
from core.types import HeadKind, RecordStatus


@runtime_checkable
class ILedgerStorage(Protocol):
    """원장 저장소 인터페이스

    전표 로그의 단일 진실 공급원.
    쓰기는 구현체 내부에서 직렬화되며, 성공한 쓰기는 이후 읽기에 즉시 반영됨.
    참조 무결성 검사(이름 유일성, 참조 수, 활성 여부)는 쓰기와 같은
    잠금/트랜잭션 안에서 수행되며 LedgerError로 거부됨.
    금액은 반드시 Decimal 타입 사용.
    """

    async def revision(self) -> int:
        """쓰기 리비전 반환

        모든 쓰기마다 단조 증가. Projection 캐시 무효화에 사용.
        """
        ...

    async def close(self) -> None:
        """리소스 정리"""
        ...

    # -------------------------------------------------------------------------
    # 계정 (Head)
    # -------------------------------------------------------------------------

    async def insert_head(self, head: AccountHead) -> None:
        """계정 저장

        Raises:
            InvalidArgumentError: 같은 kind의 활성 계정과 이름 중복
        """
        ...

    async def rename_head(self, head_id: str, name: str) -> AccountHead:
        """계정 이름 변경

        Raises:
            KeyError: 존재하지 않는 계정
            InvalidArgumentError: 이름 중복
        """
        ...

    async def change_head_kind(self, head_id: str, kind: HeadKind) -> AccountHead:
        """계정 종류 변경

        Raises:
            KeyError: 존재하지 않는 계정
            ImmutableFieldError: 참조 전표 존재
            InvalidArgumentError: 새 kind에서 이름 중복
        """
        ...

    async def deactivate_head(self, head_id: str) -> bool:
        """계정 소프트 삭제

        Returns:
            상태가 실제로 변경되었으면 True

        Raises:
            KeyError: 존재하지 않는 계정
            ReferentialIntegrityError: 참조 전표 존재 (비활성 전표 포함)
        """
        ...

    async def get_head(self, head_id: str) -> AccountHead | None:
        """계정 조회 (비활성 포함)"""
        ...

    async def list_heads(
        self,
        kind: HeadKind | None = None,
        include_inactive: bool = False,
    ) -> list[AccountHead]:
        """계정 목록 조회 (순서 보장 없음)"""
        ...

    async def count_head_references(self, head_id: str) -> int:
        """계정을 from/to로 참조하는 전표 수 (비활성 전표 포함)"""
        ...

    # -------------------------------------------------------------------------
    # 거래처 (Party)
    # -------------------------------------------------------------------------

    async def insert_party(self, party: Party) -> None:
        """거래처 저장"""
        ...

    async def update_party(self, party_id: str, changes: dict[str, str | None]) -> Party:
        """거래처 정보 갱신 (name, phone, address, party_type만, 상태는 유지)

        Raises:
            KeyError: 존재하지 않는 거래처
        """
        ...

    async def deactivate_party(self, party_id: str, require_unreferenced: bool = False) -> bool:
        """거래처 비활성화

        Args:
            require_unreferenced: True면 참조 전표가 있을 때 거부 (삭제)

        Returns:
            상태가 실제로 변경되었으면 True

        Raises:
            KeyError: 존재하지 않는 거래처
            ReferentialIntegrityError: require_unreferenced이고 참조 전표 존재
        """
        ...

    async def get_party(self, party_id: str) -> Party | None:
        """거래처 조회 (비활성 포함)"""
        ...

    async def list_parties(self, include_inactive: bool = False) -> list[Party]:
        """거래처 목록 조회 (순서 보장 없음)"""
        ...

    async def count_party_references(self, party_id: str) -> int:
        """거래처를 참조하는 전표 수 (비활성 전표 포함)"""
        ...

    # -------------------------------------------------------------------------
    # 전표 (Voucher)
    # -------------------------------------------------------------------------

    async def append_voucher(self, build: Callable[[int], Voucher]) -> Voucher:
        """전표 추가

        다음 시퀀스를 할당하고 build(sequence)로 만든 전표를 저장.
        참조 계정/거래처 재검증, 시퀀스 할당, 저장은 하나의 원자적 단계.
        검증 실패 시 시퀀스를 소비하지 않음.

        Args:
            build: 시퀀스를 받아 Voucher를 생성하는 함수

        Returns:
            저장된 Voucher

        Raises:
            NotFoundError: 참조 계정/거래처가 없거나 비활성
            InvalidArgumentError: 계정 kind 불일치
        """
        ...

    async def update_voucher(
        self,
        voucher_id: str,
        changes: dict[str, Any],
        updated_at: datetime,
    ) -> Voucher:
        """활성 전표의 수정 가능 필드 갱신

        상태와 참조 필드는 기록하지 않음.

        Raises:
            KeyError: 존재하지 않는 전표
            ImmutableFieldError: 비활성 전표
            NotFoundError: 새 거래처가 없거나 비활성
        """
        ...

    async def get_voucher(self, voucher_id: str) -> Voucher | None:
        """전표 조회 (비활성 포함)"""
        ...

    async def set_voucher_status(
        self,
        voucher_id: str,
        status: RecordStatus,
        updated_at: datetime,
    ) -> bool:
        """전표 상태 변경

        Returns:
            상태가 실제로 변경되었으면 True (이미 같은 상태면 False)
        """
        ...

    async def list_vouchers(self) -> list[Voucher]:
        """전체 전표 스냅샷 (비활성 포함, 순서 보장 없음)"""
        ...
