"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화
금액은 정밀도 유지를 위해 문자열로 반환.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    storage: str = Field(..., description="저장소 종류 (sqlite/memory)")
    version: str = Field(..., description="API 버전")


class ErrorResponse(BaseModel):
    """오류 응답"""

    error: str = Field(..., description="오류 종류 (NotFound/InvalidArgument/Immutable/ReferentialIntegrity)")
    message: str = Field(..., description="오류 메시지")
    field: str | None = Field(default=None, description="문제가 된 필드")


# 라우터 공통 오류 응답 문서화
ERROR_RESPONSES: dict[int | str, dict] = {
    400: {"model": ErrorResponse, "description": "잘못된 입력"},
    404: {"model": ErrorResponse, "description": "대상 없음"},
    409: {"model": ErrorResponse, "description": "변경 불가 또는 참조 무결성 위반"},
}


class VoucherResponse(BaseModel):
    """전표 응답"""

    id: str = Field(..., description="전표 ID")
    voucher_number: str = Field(..., description="전표 번호")
    sequence: int = Field(..., description="전역 시퀀스")
    date: str = Field(..., description="업무 일자")
    voucher_type: str = Field(..., description="전표 유형")
    party_id: str | None = Field(default=None, description="거래처 ID")
    party_name: str | None = Field(default=None, description="거래처 이름")
    from_head_type: str = Field(..., description="from 계정 종류")
    from_head_id: str = Field(..., description="from 계정 ID")
    from_head_name: str | None = Field(default=None, description="from 계정 이름")
    to_head_type: str | None = Field(default=None, description="to 계정 종류")
    to_head_id: str | None = Field(default=None, description="to 계정 ID")
    to_head_name: str | None = Field(default=None, description="to 계정 이름")
    description: str = Field(default="", description="설명")
    amount: str = Field(..., description="금액")
    status: str = Field(..., description="상태 (active/inactive)")
    created_by: str = Field(..., description="작성자")
    created_at: str = Field(..., description="생성 시간 (UTC)")
    updated_at: str | None = Field(default=None, description="수정 시간 (UTC)")


class VoucherStatsResponse(BaseModel):
    """전표 통계 응답"""

    total_transactions: int = Field(..., description="활성 전표 수")
    total_receive: str = Field(..., description="입금 합계")
    total_payment: str = Field(..., description="지급 합계")
    total_amount: str = Field(..., description="금액 합계")
    active_count: int = Field(..., description="활성 전표 수 (감사용)")
    inactive_count: int = Field(..., description="삭제된 전표 수 (감사용)")


class VoucherListResponse(BaseModel):
    """전표 목록 응답"""

    rows: list[VoucherResponse] = Field(default_factory=list, description="전표 목록")
    stats: VoucherStatsResponse = Field(..., description="전체 필터 결과 통계")
    total_count: int = Field(..., description="전체 필터 결과 행 수")
    page: int | None = Field(default=None, description="페이지 번호")
    page_size: int | None = Field(default=None, description="페이지 크기")
    total_pages: int = Field(..., description="전체 페이지 수")


class DeleteResultResponse(BaseModel):
    """일괄 삭제 응답"""

    deleted_count: int = Field(..., description="삭제된 전표 수")
    failed_ids: list[str] = Field(default_factory=list, description="찾을 수 없는 ID")


class HeadResponse(BaseModel):
    """계정 응답"""

    id: str = Field(..., description="계정 ID")
    name: str = Field(..., description="계정 이름")
    kind: str = Field(..., description="계정 종류")
    status: str = Field(..., description="상태")
    created_at: str = Field(..., description="생성 시간 (UTC)")


class HeadSummaryResponse(HeadResponse):
    """계정별 입금/지급/잔액 응답"""

    receive: str = Field(..., description="유입 합계")
    payment: str = Field(..., description="유출 합계")
    balance: str = Field(..., description="잔액")


class BalanceResponse(BaseModel):
    """계정 잔액 응답"""

    head_id: str = Field(..., description="계정 ID")
    kind: str = Field(..., description="계정 종류")
    balance: str = Field(..., description="잔액")
    as_of: str | None = Field(default=None, description="기준 일자 (포함)")


class PartyResponse(BaseModel):
    """거래처 응답"""

    id: str = Field(..., description="거래처 ID")
    name: str = Field(..., description="거래처 이름")
    phone: str | None = Field(default=None, description="전화번호")
    address: str | None = Field(default=None, description="주소")
    party_type: str | None = Field(default=None, description="거래처 유형")
    status: str = Field(..., description="상태")
    created_at: str = Field(..., description="생성 시간 (UTC)")


class PartySummaryResponse(PartyResponse):
    """거래처별 입금/지급 응답"""

    receive: str = Field(..., description="입금 합계")
    payment: str = Field(..., description="지급 합계")
    balance: str = Field(..., description="입금 - 지급")
    voucher_count: int = Field(..., description="활성 전표 수")


class DailyReportResponse(BaseModel):
    """일일 보고서 응답"""

    date: str = Field(..., description="보고 일자")
    opening_balance: str = Field(..., description="기초 잔액")
    receives: list[VoucherResponse] = Field(default_factory=list, description="입금 전표")
    payments: list[VoucherResponse] = Field(default_factory=list, description="지급 전표")
    total_receive: str = Field(..., description="입금 합계")
    total_payment: str = Field(..., description="지급 합계")
    closing_balance: str = Field(..., description="기말 잔액")


class DailySummaryRowResponse(BaseModel):
    """일자별 요약 응답"""

    date: str = Field(..., description="일자")
    total_receive: str = Field(..., description="입금 합계")
    total_payment: str = Field(..., description="지급 합계")
    receive_count: int = Field(..., description="입금 건수")
    payment_count: int = Field(..., description="지급 건수")
