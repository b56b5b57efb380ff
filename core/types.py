"""
타입 정의 모듈

Enum 등 전표 원장의 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class HeadKind(str, Enum):
    """계정 과목(Head) 분류"""

    INCOME = "income"
    EXPENSE = "expense"
    BANK = "bank"
    OTHERS = "others"


class VoucherType(str, Enum):
    """전표 유형"""

    RECEIVE = "receive"
    PAYMENT = "payment"
    SALES_VOUCHER = "sales_voucher"
    PURCHASE_VOUCHER = "purchase_voucher"
    JOURNAL = "journal"
    CONTRA = "contra"


class RecordStatus(str, Enum):
    """레코드 상태 (전표/계정/거래처 공통)

    INACTIVE는 소프트 삭제. 물리 삭제는 하지 않음.
    """

    ACTIVE = "active"
    INACTIVE = "inactive"


class Classification(str, Enum):
    """입금/지급 분류 (통계용)"""

    RECEIVE = "receive"
    PAYMENT = "payment"
    TRANSFER = "transfer"


# 입금으로 분류되는 전표 유형
RECEIVE_TYPES: frozenset[VoucherType] = frozenset({
    VoucherType.RECEIVE,
    VoucherType.SALES_VOUCHER,
})

# 지급으로 분류되는 전표 유형
PAYMENT_TYPES: frozenset[VoucherType] = frozenset({
    VoucherType.PAYMENT,
    VoucherType.PURCHASE_VOUCHER,
})

# 계정 간 대체 전표 (to_head 필수)
TRANSFER_TYPES: frozenset[VoucherType] = frozenset({
    VoucherType.JOURNAL,
    VoucherType.CONTRA,
})


def classify(voucher_type: VoucherType) -> Classification:
    """전표 유형의 입금/지급 분류 반환"""
    if voucher_type in RECEIVE_TYPES:
        return Classification.RECEIVE
    if voucher_type in PAYMENT_TYPES:
        return Classification.PAYMENT
    return Classification.TRANSFER
