"""
Web 서비스 패키지

엔진 결과를 API 응답으로 변환
"""

from web.services.voucher_view import (
    describe_voucher,
    name_maps,
    query_result_to_dict,
    voucher_to_dict,
)

__all__ = [
    "describe_voucher",
    "name_maps",
    "query_result_to_dict",
    "voucher_to_dict",
]
