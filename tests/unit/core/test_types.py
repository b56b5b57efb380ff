"""
core/types.py 테스트

Enum 값, 문자열 직렬화, 입금/지급 분류 테스트
"""

import json

import pytest

from core.types import (
    PAYMENT_TYPES,
    RECEIVE_TYPES,
    TRANSFER_TYPES,
    Classification,
    HeadKind,
    RecordStatus,
    VoucherType,
    classify,
)


class TestHeadKind:
    """HeadKind Enum 테스트"""

    def test_values(self) -> None:
        assert [k.value for k in HeadKind] == ["income", "expense", "bank", "others"]

    def test_str_inheritance(self) -> None:
        """str 상속 확인 (JSON 직렬화 가능)"""
        assert isinstance(HeadKind.BANK, str)
        assert json.dumps({"kind": HeadKind.BANK}) == '{"kind": "bank"}'

    def test_from_string(self) -> None:
        assert HeadKind("expense") == HeadKind.EXPENSE

    def test_invalid_value(self) -> None:
        with pytest.raises(ValueError):
            HeadKind("liability")


class TestVoucherType:
    """VoucherType Enum 테스트"""

    def test_all_types(self) -> None:
        assert {t.value for t in VoucherType} == {
            "receive",
            "payment",
            "sales_voucher",
            "purchase_voucher",
            "journal",
            "contra",
        }

    def test_groups_are_disjoint_and_complete(self) -> None:
        """입금/지급/대체 그룹은 서로 겹치지 않고 전체를 덮음"""
        assert not (RECEIVE_TYPES & PAYMENT_TYPES)
        assert not (RECEIVE_TYPES & TRANSFER_TYPES)
        assert not (PAYMENT_TYPES & TRANSFER_TYPES)
        assert RECEIVE_TYPES | PAYMENT_TYPES | TRANSFER_TYPES == set(VoucherType)


class TestClassify:
    """classify 함수 테스트"""

    @pytest.mark.parametrize(
        "voucher_type, expected",
        [
            (VoucherType.RECEIVE, Classification.RECEIVE),
            (VoucherType.SALES_VOUCHER, Classification.RECEIVE),
            (VoucherType.PAYMENT, Classification.PAYMENT),
            (VoucherType.PURCHASE_VOUCHER, Classification.PAYMENT),
            (VoucherType.JOURNAL, Classification.TRANSFER),
            (VoucherType.CONTRA, Classification.TRANSFER),
        ],
    )
    def test_classification(self, voucher_type: VoucherType, expected: Classification) -> None:
        assert classify(voucher_type) == expected


class TestRecordStatus:
    """RecordStatus Enum 테스트"""

    def test_values(self) -> None:
        assert RecordStatus.ACTIVE.value == "active"
        assert RecordStatus.INACTIVE.value == "inactive"
