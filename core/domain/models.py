"""
도메인 모델 정의

AccountHead, Party, Voucher 및 파생 결과 타입.
Voucher는 불변(frozen) - 수정은 dataclasses.replace로 새 인스턴스 생성.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from core.constants import Defaults
from core.types import HeadKind, RecordStatus, VoucherType
from core.utils.dates import now_utc, parse_timestamp


def new_id() -> str:
    """불투명 ID 생성 (UUID v4)"""
    return str(uuid.uuid4())


@dataclass
class AccountHead:
    """계정 과목 (Head)

    전표가 참조하는 분류 계정. (kind, id) 쌍으로 식별.
    """

    id: str
    name: str
    kind: HeadKind
    status: RecordStatus = RecordStatus.ACTIVE
    created_at: datetime = field(default_factory=now_utc)

    @staticmethod
    def create(name: str, kind: HeadKind) -> "AccountHead":
        """새 계정 생성"""
        return AccountHead(id=new_id(), name=name, kind=kind)

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리로 변환 (직렬화용)"""
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "AccountHead":
        """딕셔너리에서 생성 (역직렬화용)"""
        return AccountHead(
            id=data["id"],
            name=data["name"],
            kind=HeadKind(data["kind"]),
            status=RecordStatus(data.get("status", RecordStatus.ACTIVE.value)),
            created_at=parse_timestamp(data["created_at"]),
        )


@dataclass
class Party:
    """거래처 (고객/공급자)

    이름은 유일하지 않음. 연락처 정보는 선택.
    """

    id: str
    name: str
    phone: str | None = None
    address: str | None = None
    party_type: str | None = None
    status: RecordStatus = RecordStatus.ACTIVE
    created_at: datetime = field(default_factory=now_utc)

    @staticmethod
    def create(
        name: str,
        phone: str | None = None,
        address: str | None = None,
        party_type: str | None = None,
    ) -> "Party":
        """새 거래처 생성"""
        return Party(
            id=new_id(),
            name=name,
            phone=phone,
            address=address,
            party_type=party_type,
        )

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리로 변환 (직렬화용)"""
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "address": self.address,
            "party_type": self.party_type,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Party":
        """딕셔너리에서 생성 (역직렬화용)"""
        return Party(
            id=data["id"],
            name=data["name"],
            phone=data.get("phone"),
            address=data.get("address"),
            party_type=data.get("party_type"),
            status=RecordStatus(data.get("status", RecordStatus.ACTIVE.value)),
            created_at=parse_timestamp(data["created_at"]),
        )


# 생성 후 변경 불가 필드
IMMUTABLE_VOUCHER_FIELDS: frozenset[str] = frozenset({
    "id",
    "sequence",
    "voucher_type",
    "from_head_type",
    "from_head_id",
    "to_head_type",
    "to_head_id",
    "voucher_number",
    "created_by",
    "created_at",
})

# 수정 가능 필드
EDITABLE_VOUCHER_FIELDS: frozenset[str] = frozenset({
    "date",
    "description",
    "amount",
    "party_id",
})


@dataclass(frozen=True)
class Voucher:
    """전표

    모든 금융 이벤트의 단일 기록. 잔액/통계는 전표 로그에서 파생.

    Attributes:
        sequence: 전역 시퀀스 (voucher_number 정렬 키)
        date: 업무 일자 (created_at과 별개)
        to_head_type/to_head_id: 둘 다 있거나 둘 다 없음
    """

    id: str
    voucher_number: str
    sequence: int
    date: date
    voucher_type: VoucherType
    from_head_type: HeadKind
    from_head_id: str
    amount: Decimal
    description: str = ""
    party_id: str | None = None
    to_head_type: HeadKind | None = None
    to_head_id: str | None = None
    status: RecordStatus = RecordStatus.ACTIVE
    created_by: str = Defaults.CREATED_BY
    created_at: datetime = field(default_factory=now_utc)
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE

    @property
    def has_to_head(self) -> bool:
        return self.to_head_id is not None

    def references_head(self, kind: HeadKind, head_id: str) -> bool:
        """해당 계정을 from 또는 to로 참조하는지 여부"""
        if self.from_head_type == kind and self.from_head_id == head_id:
            return True
        return self.to_head_type == kind and self.to_head_id == head_id

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리로 변환 (직렬화용, 금액은 문자열)"""
        return {
            "id": self.id,
            "voucher_number": self.voucher_number,
            "sequence": self.sequence,
            "date": self.date.isoformat(),
            "voucher_type": self.voucher_type.value,
            "party_id": self.party_id,
            "from_head_type": self.from_head_type.value,
            "from_head_id": self.from_head_id,
            "to_head_type": self.to_head_type.value if self.to_head_type else None,
            "to_head_id": self.to_head_id,
            "description": self.description,
            "amount": str(self.amount),
            "status": self.status.value,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Voucher":
        """딕셔너리에서 생성 (역직렬화용)"""
        voucher_date = data["date"]
        if isinstance(voucher_date, str):
            voucher_date = date.fromisoformat(voucher_date)

        to_head_type = data.get("to_head_type")
        updated_at = data.get("updated_at")

        return Voucher(
            id=data["id"],
            voucher_number=data["voucher_number"],
            sequence=int(data["sequence"]),
            date=voucher_date,
            voucher_type=VoucherType(data["voucher_type"]),
            from_head_type=HeadKind(data["from_head_type"]),
            from_head_id=data["from_head_id"],
            amount=Decimal(str(data["amount"])),
            description=data.get("description") or "",
            party_id=data.get("party_id"),
            to_head_type=HeadKind(to_head_type) if to_head_type else None,
            to_head_id=data.get("to_head_id"),
            status=RecordStatus(data.get("status", RecordStatus.ACTIVE.value)),
            created_by=data.get("created_by") or Defaults.CREATED_BY,
            created_at=parse_timestamp(data["created_at"]),
            updated_at=parse_timestamp(updated_at) if updated_at else None,
        )


@dataclass(frozen=True)
class DeleteResult:
    """일괄 소프트 삭제 결과"""

    deleted_count: int
    failed_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"deleted_count": self.deleted_count, "failed_ids": list(self.failed_ids)}


@dataclass(frozen=True)
class VoucherStats:
    """전표 통계

    total_* 및 total_transactions는 활성 전표만 집계.
    active_count/inactive_count는 감사용으로 비활성 포함.
    """

    total_transactions: int = 0
    total_receive: Decimal = Decimal("0")
    total_payment: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    active_count: int = 0
    inactive_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_transactions": self.total_transactions,
            "total_receive": str(self.total_receive),
            "total_payment": str(self.total_payment),
            "total_amount": str(self.total_amount),
            "active_count": self.active_count,
            "inactive_count": self.inactive_count,
        }
