"""
헬스 체크 엔드포인트

GET /health - 서버 상태 확인
"""

from fastapi import APIRouter, Depends

from adapters.memory.storage import InMemoryLedgerStorage
from core.ledger.service import LedgerService
from web.dependencies import get_ledger_service
from web.models.responses import HealthResponse

router = APIRouter(tags=["health"])

API_VERSION = "1.0.0"


@router.get("/health", response_model=HealthResponse)
async def health_check(
    service: LedgerService = Depends(get_ledger_service),
) -> HealthResponse:
    """서버 상태 확인

    Returns:
        HealthResponse: status, storage, version 정보
    """
    storage = "memory" if isinstance(service.storage, InMemoryLedgerStorage) else "sqlite"

    return HealthResponse(
        status="ok",
        storage=storage,
        version=API_VERSION,
    )
