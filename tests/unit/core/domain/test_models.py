"""
core/domain/models.py 테스트

AccountHead, Party, Voucher 생성 및 직렬화 테스트
"""

import dataclasses
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from core.domain.models import (
    EDITABLE_VOUCHER_FIELDS,
    IMMUTABLE_VOUCHER_FIELDS,
    AccountHead,
    DeleteResult,
    Party,
    Voucher,
    VoucherStats,
)
from core.types import HeadKind, RecordStatus, VoucherType


def make_voucher(**overrides) -> Voucher:
    """테스트용 Voucher 생성 헬퍼"""
    values = dict(
        id="v-1",
        voucher_number="VCH-000001",
        sequence=1,
        date=date(2024, 1, 5),
        voucher_type=VoucherType.CONTRA,
        from_head_type=HeadKind.BANK,
        from_head_id="h-a",
        to_head_type=HeadKind.BANK,
        to_head_id="h-b",
        amount=Decimal("200.50"),
        description="Transfer",
        created_at=datetime(2024, 1, 5, 9, 0, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return Voucher(**values)


class TestAccountHead:
    """AccountHead 테스트"""

    def test_create(self) -> None:
        head = AccountHead.create("Main Bank", HeadKind.BANK)

        assert head.id
        assert head.name == "Main Bank"
        assert head.kind == HeadKind.BANK
        assert head.status == RecordStatus.ACTIVE
        assert head.is_active
        assert head.created_at.tzinfo is not None

    def test_unique_ids(self) -> None:
        assert AccountHead.create("A", HeadKind.BANK).id != AccountHead.create("A", HeadKind.BANK).id

    def test_dict_round_trip(self) -> None:
        head = AccountHead.create("Rent", HeadKind.EXPENSE)
        restored = AccountHead.from_dict(head.to_dict())

        assert restored == head
        assert head.to_dict()["kind"] == "expense"


class TestParty:
    """Party 테스트"""

    def test_create_with_contact(self) -> None:
        party = Party.create("Acme", phone="010-0000-0000", address="Seoul", party_type="customer")

        assert party.name == "Acme"
        assert party.phone == "010-0000-0000"
        assert party.address == "Seoul"
        assert party.party_type == "customer"
        assert party.is_active

    def test_dict_round_trip(self) -> None:
        party = Party.create("Acme")
        restored = Party.from_dict(party.to_dict())

        assert restored == party
        assert restored.phone is None


class TestVoucher:
    """Voucher 테스트"""

    def test_frozen(self) -> None:
        voucher = make_voucher()
        with pytest.raises(dataclasses.FrozenInstanceError):
            voucher.amount = Decimal("1")  # type: ignore[misc]

    def test_references_head(self) -> None:
        voucher = make_voucher()

        assert voucher.references_head(HeadKind.BANK, "h-a")
        assert voucher.references_head(HeadKind.BANK, "h-b")
        assert not voucher.references_head(HeadKind.INCOME, "h-a")
        assert not voucher.references_head(HeadKind.BANK, "h-c")

    def test_to_dict_amount_as_string(self) -> None:
        data = make_voucher().to_dict()

        assert data["amount"] == "200.50"
        assert data["date"] == "2024-01-05"
        assert data["voucher_type"] == "contra"
        assert data["updated_at"] is None

    def test_dict_round_trip(self) -> None:
        voucher = make_voucher(party_id="p-1", status=RecordStatus.INACTIVE)
        restored = Voucher.from_dict(voucher.to_dict())

        assert restored == voucher

    def test_round_trip_without_to_head(self) -> None:
        voucher = make_voucher(
            voucher_type=VoucherType.RECEIVE,
            to_head_type=None,
            to_head_id=None,
        )
        restored = Voucher.from_dict(voucher.to_dict())

        assert restored.to_head_type is None
        assert not restored.has_to_head

    def test_field_sets_disjoint(self) -> None:
        assert not (IMMUTABLE_VOUCHER_FIELDS & EDITABLE_VOUCHER_FIELDS)
        assert EDITABLE_VOUCHER_FIELDS == {"date", "description", "amount", "party_id"}


class TestResults:
    """DeleteResult, VoucherStats 테스트"""

    def test_delete_result_to_dict(self) -> None:
        result = DeleteResult(deleted_count=2, failed_ids=["x"])
        assert result.to_dict() == {"deleted_count": 2, "failed_ids": ["x"]}

    def test_empty_stats(self) -> None:
        stats = VoucherStats()

        assert stats.total_transactions == 0
        assert stats.to_dict()["total_receive"] == "0"
