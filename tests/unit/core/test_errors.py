"""
core/errors.py 테스트
"""

import pytest

from core.errors import (
    ErrorKind,
    ImmutableFieldError,
    InvalidArgumentError,
    LedgerError,
    NotFoundError,
    ReferentialIntegrityError,
)


class TestLedgerError:
    """LedgerError 계층 테스트"""

    @pytest.mark.parametrize(
        "error_cls, kind",
        [
            (NotFoundError, ErrorKind.NOT_FOUND),
            (InvalidArgumentError, ErrorKind.INVALID_ARGUMENT),
            (ImmutableFieldError, ErrorKind.IMMUTABLE),
            (ReferentialIntegrityError, ErrorKind.REFERENTIAL_INTEGRITY),
        ],
    )
    def test_kind(self, error_cls: type[LedgerError], kind: ErrorKind) -> None:
        error = error_cls("message")
        assert error.kind == kind
        assert isinstance(error, LedgerError)

    def test_message_with_field(self) -> None:
        error = InvalidArgumentError("금액은 0보다 커야 합니다", field="amount")

        assert error.field == "amount"
        assert "amount" in str(error)
        assert "InvalidArgument" in str(error)

    def test_to_dict(self) -> None:
        error = NotFoundError("없음", field="head_id")

        assert error.to_dict() == {
            "error": "NotFound",
            "message": "없음",
            "field": "head_id",
        }

    def test_field_optional(self) -> None:
        error = ReferentialIntegrityError("참조 중")
        assert error.field is None
        assert error.to_dict()["field"] is None
