"""
금액 유틸리티

모든 금액은 Decimal로 처리 (float 연산 금지).
소수점 2자리 초과 또는 0 이하 금액은 거부하며 반올림/보정하지 않음.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from core.constants import AmountRules
from core.errors import InvalidArgumentError

ZERO = Decimal("0")


def to_amount(value: Any, field: str = "amount") -> Decimal:
    """입력값을 전표 금액(Decimal)으로 변환 및 검증

    Args:
        value: Decimal, int, str 중 하나 (float은 이진 오차로 거부)
        field: 오류 시 보고할 필드명

    Returns:
        0보다 큰 Decimal 금액

    Raises:
        InvalidArgumentError: 숫자가 아니거나 0 이하이거나 소수점 자릿수 초과
    """
    if isinstance(value, bool) or value is None:
        raise InvalidArgumentError("금액이 필요합니다", field=field)

    if isinstance(value, float):
        raise InvalidArgumentError(
            f"금액은 문자열 또는 Decimal로 전달해야 합니다: {value!r}",
            field=field,
        )

    try:
        amount = Decimal(value)
    except (InvalidOperation, ValueError, TypeError) as e:
        raise InvalidArgumentError(f"유효하지 않은 금액: {value!r}", field=field) from e

    if not amount.is_finite():
        raise InvalidArgumentError(f"유효하지 않은 금액: {value!r}", field=field)

    if amount <= ZERO:
        raise InvalidArgumentError(f"금액은 0보다 커야 합니다: {amount}", field=field)

    exponent = amount.normalize().as_tuple().exponent
    if isinstance(exponent, int) and -exponent > AmountRules.MAX_PLACES:
        raise InvalidArgumentError(
            f"소수점 이하 {AmountRules.MAX_PLACES}자리를 초과할 수 없습니다: {amount}",
            field=field,
        )

    return amount


def format_amount(amount: Decimal) -> str:
    """금액을 고정 소수점 문자열로 변환 (JSON 직렬화용)"""
    return f"{amount:.{AmountRules.MAX_PLACES}f}"
