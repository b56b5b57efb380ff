"""
원장 오류 정의

모든 엔진 오류는 LedgerError를 상속하며 kind와 문제 필드를 가짐.
호출자는 kind로 분기 (Web 레이어는 HTTP 상태 코드로 매핑).
"""

from enum import Enum


class ErrorKind(str, Enum):
    """오류 종류"""

    NOT_FOUND = "NotFound"
    INVALID_ARGUMENT = "InvalidArgument"
    IMMUTABLE = "Immutable"
    REFERENTIAL_INTEGRITY = "ReferentialIntegrity"


class LedgerError(Exception):
    """원장 오류 기본 클래스

    Args:
        kind: 오류 종류
        message: 오류 메시지
        field: 문제가 된 필드명 (없으면 None)
    """

    kind: ErrorKind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        if field:
            super().__init__(f"[{self.kind.value}] {field}: {message}")
        else:
            super().__init__(f"[{self.kind.value}] {message}")

    def to_dict(self) -> dict[str, str | None]:
        """딕셔너리로 변환 (API 응답용)"""
        return {
            "error": self.kind.value,
            "message": self.message,
            "field": self.field,
        }


class NotFoundError(LedgerError):
    """참조 대상(계정, 거래처, 전표)이 존재하지 않음"""

    kind = ErrorKind.NOT_FOUND


class InvalidArgumentError(LedgerError):
    """입력값 검증 실패 (금액, 유형 불일치 등)"""

    kind = ErrorKind.INVALID_ARGUMENT


class ImmutableFieldError(LedgerError):
    """생성 후 변경 불가 필드 수정 시도"""

    kind = ErrorKind.IMMUTABLE


class ReferentialIntegrityError(LedgerError):
    """전표가 참조 중인 계정/거래처 삭제 시도"""

    kind = ErrorKind.REFERENTIAL_INTEGRITY
