"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
LedgerService는 앱 lifespan에서 한 번 생성되어 app.state에 보관.
"""

from fastapi import Request

from core.ledger.service import LedgerService


def get_ledger_service(request: Request) -> LedgerService:
    """원장 서비스 반환

    테스트에서는 app.dependency_overrides로 교체.
    """
    service = getattr(request.app.state, "ledger", None)
    if service is None:
        raise RuntimeError("LedgerService가 초기화되지 않았습니다")
    return service
