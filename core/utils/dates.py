"""
날짜/시간 유틸리티

내부 저장: UTC 타임스탬프 | 전표 일자: 타임존 없는 달력 날짜
"""

from datetime import date, datetime, timezone
from typing import Any

from core.errors import InvalidArgumentError


def now_utc() -> datetime:
    """현재 UTC 시간 반환"""
    return datetime.now(timezone.utc)


def parse_date(value: Any, field: str = "date") -> date:
    """전표 일자 파싱

    Args:
        value: date, datetime 또는 ISO-8601 문자열 (YYYY-MM-DD)
        field: 오류 시 보고할 필드명

    Returns:
        date 객체

    Raises:
        InvalidArgumentError: 파싱 불가
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError as e:
            raise InvalidArgumentError(f"유효하지 않은 날짜: {value!r}", field=field) from e
    raise InvalidArgumentError(f"유효하지 않은 날짜: {value!r}", field=field)


def parse_timestamp(value: str | datetime) -> datetime:
    """ISO 타임스탬프 파싱 (naive면 UTC로 간주)"""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
