"""
FastAPI 애플리케이션

라우터 등록 및 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config.loader import get_settings
from core.errors import ErrorKind, LedgerError
from core.logging import setup_logging
from core.ledger.service import open_ledger
from web.routes import health, heads, parties, reports, vouchers
from web.routes.health import API_VERSION

logger = logging.getLogger(__name__)

# 오류 종류 → HTTP 상태 코드
ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.IMMUTABLE: 409,
    ErrorKind.REFERENTIAL_INTEGRITY: 409,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리

    시작 시 로깅 설정 + 원장 서비스 생성 (SQLite면 스키마 자동 초기화).
    테스트에서 app.state.ledger를 미리 지정하면 그대로 사용.
    """
    settings = get_settings()
    setup_logging("web", console_level=settings.log_level, file_level=settings.log_level)

    owned = getattr(app.state, "ledger", None) is None
    if owned:
        app.state.ledger = await open_ledger(settings)
        logger.info("Web: LedgerService 초기화 완료")

    yield

    if owned:
        await app.state.ledger.close()
        app.state.ledger = None
        logger.info("Web: 원장 저장소 종료 완료")


app = FastAPI(
    title="Voucher Ledger API",
    description="전표 기반 원장 엔진 API",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS 설정 (개발용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """엔진 오류를 HTTP 응답으로 변환"""
    status_code = ERROR_STATUS.get(exc.kind, 400)
    logger.warning(
        "요청 처리 실패",
        extra={"path": request.url.path, "error": exc.kind.value, "field": exc.field},
    )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(vouchers.router)
app.include_router(heads.router)
app.include_router(parties.router)
app.include_router(reports.router)
