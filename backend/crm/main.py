"""FastAPI 애플리케이션 진입점. 미들웨어, 도메인 예외 처리기, API 라우터를 등록합니다."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from crm.config import settings
from crm.database import Base, engine
from crm.exceptions import CrmError
import crm.models  # noqa: F401 - 모델 import로 metadata 등록
from crm.routers import auth, offices, complex_objects, contracts, contract_payments

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="CRM 변경 이력 / 계약 결제 관리 API",
    description="추적 대상 CRM 엔티티의 변경 이력·롤백과 계약별 결제 원장",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
app.include_router(auth.router)
app.include_router(offices.router)
app.include_router(complex_objects.router)
app.include_router(contracts.router)
app.include_router(contract_payments.router)


@app.exception_handler(CrmError)
async def handle_crm_error(request: Request, exc: CrmError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.on_event("startup")
def ensure_schema():
    # 신규 기능 배포 시 누락된 테이블을 자동 생성합니다.
    Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "CRM history & payments"}
