"""
유틸리티 패키지

금액 검증, 날짜 파싱, 전표 번호 생성 등 공통 유틸리티
"""

from core.utils.dates import now_utc, parse_date, parse_timestamp
from core.utils.money import ZERO, format_amount, to_amount
from core.utils.voucher_number import make_voucher_number

__all__ = [
    "ZERO",
    "to_amount",
    "format_amount",
    "now_utc",
    "parse_date",
    "parse_timestamp",
    "make_voucher_number",
]
