"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증
금액은 문자열 또는 정수만 허용 (JSON 실수는 이진 변환 오차가 있어 거부).
최종 검증은 엔진에서 수행 (0 이하, 소수점 2자리 초과 거부).
"""

import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field


def _reject_inexact_amount(value: Any) -> Any:
    if isinstance(value, (bool, float)):
        raise ValueError("금액은 문자열(예: \"12.50\") 또는 정수로 전달해야 합니다")
    return value


AmountInput = Annotated[str | int, BeforeValidator(_reject_inexact_amount)]


class VoucherCreateRequest(BaseModel):
    """전표 생성 요청"""

    date: datetime.date = Field(..., description="업무 일자 (YYYY-MM-DD)")
    voucher_type: str = Field(..., description="전표 유형 (receive/payment/sales_voucher/purchase_voucher/journal/contra)")
    from_head_type: str = Field(..., description="from 계정 종류 (income/expense/bank/others)")
    from_head_id: str = Field(..., description="from 계정 ID")
    to_head_type: str | None = Field(default=None, description="to 계정 종류 (journal/contra 필수)")
    to_head_id: str | None = Field(default=None, description="to 계정 ID")
    party_id: str | None = Field(default=None, description="거래처 ID")
    description: str = Field(default="", description="설명")
    amount: AmountInput = Field(..., description="금액 (0 초과, 소수점 2자리 이하)")
    created_by: str | None = Field(default=None, description="작성자")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "date": "2024-01-05",
                    "voucher_type": "receive",
                    "from_head_type": "bank",
                    "from_head_id": "<head-id>",
                    "amount": "500.00",
                    "description": "Opening deposit",
                },
                {
                    "date": "2024-01-06",
                    "voucher_type": "contra",
                    "from_head_type": "bank",
                    "from_head_id": "<head-a>",
                    "to_head_type": "bank",
                    "to_head_id": "<head-b>",
                    "amount": "200",
                },
            ]
        }
    }

    def to_payload(self) -> dict[str, Any]:
        """엔진 입력 딕셔너리 (None인 선택 값 제외)"""
        return self.model_dump(exclude_none=True)


class VoucherUpdateRequest(BaseModel):
    """전표 수정 요청

    date, description, amount, party_id만 수정 가능.
    변경 불가 필드를 보내면 409 (값이 같으면 무시).
    """

    model_config = {"extra": "allow"}

    date: datetime.date | None = Field(default=None, description="업무 일자")
    description: str | None = Field(default=None, description="설명")
    amount: AmountInput | None = Field(default=None, description="금액")
    party_id: str | None = Field(default=None, description="거래처 ID (빈 문자열이면 해제)")

    def to_changes(self) -> dict[str, Any]:
        """요청에 명시된 필드만 변경 딕셔너리로 반환"""
        return self.model_dump(exclude_unset=True)


class VoucherDeleteRequest(BaseModel):
    """전표 일괄 삭제 요청"""

    ids: list[str] = Field(..., min_length=1, description="삭제할 전표 ID 목록")


class HeadCreateRequest(BaseModel):
    """계정 생성 요청"""

    name: str = Field(..., min_length=1, description="계정 이름")
    kind: str = Field(..., description="계정 종류 (income/expense/bank/others)")


class HeadRenameRequest(BaseModel):
    """계정 이름 변경 요청"""

    name: str = Field(..., min_length=1, description="새 이름")


class HeadKindRequest(BaseModel):
    """계정 종류 변경 요청"""

    kind: str = Field(..., description="새 계정 종류")


class PartyCreateRequest(BaseModel):
    """거래처 생성 요청"""

    name: str = Field(..., min_length=1, description="거래처 이름")
    phone: str | None = Field(default=None, description="전화번호")
    address: str | None = Field(default=None, description="주소")
    party_type: str | None = Field(default=None, description="거래처 유형 (고객/공급자 등)")


class PartyUpdateRequest(BaseModel):
    """거래처 수정 요청 (보낸 항목만 변경)"""

    name: str | None = Field(default=None, min_length=1, description="거래처 이름")
    phone: str | None = Field(default=None, description="전화번호")
    address: str | None = Field(default=None, description="주소")
    party_type: str | None = Field(default=None, description="거래처 유형")
