"""
전표 번호 생성

전역 단조 증가 시퀀스 기반. 형식: {prefix}-{seq:06d} (예: VCH-000042)
정렬은 문자열이 아니라 시퀀스 정수로 수행.
"""

from core.constants import Defaults


def make_voucher_number(sequence: int, prefix: str = Defaults.VOUCHER_PREFIX) -> str:
    """시퀀스로 전표 번호 생성

    Args:
        sequence: 전역 시퀀스 값 (1 이상)
        prefix: 번호 접두어

    Returns:
        전표 번호 문자열
    """
    if sequence < 1:
        raise ValueError(f"sequence must be >= 1: {sequence}")
    return f"{prefix}-{sequence:06d}"
