# app/main.py

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.config import get_settings
from app.core.exceptions import AppError, ValidationFailureError
from app.api.v1 import api_router
from app.database import engine, Base
from app import models  # noqa: F401  테이블 메타데이터 등록

# 설정 로드
settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 시작 시
    Base.metadata.create_all(bind=engine)
    logger.info("%s 서버 시작 (api prefix: %s)", settings.app_name, settings.api_prefix)

    yield

    # 종료 시
    engine.dispose()
    logger.info("%s 서버 종료", settings.app_name)


# FastAPI 앱 생성
app = FastAPI(
    title=settings.app_name,
    description="Movie Recommendation Service",
    version="1.0.0",
    docs_url="/docs",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# CORS 미들웨어
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# 에러 응답은 모두 {success, message, code, data?, errors?} 형식
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s 처리 실패: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error.get("loc", ()) if loc != "body")
        errors.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))

    error = ValidationFailureError(errors=errors)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    codes = {401: "InvalidToken", 403: "NotFoundOrForbidden", 404: "EntryNotFound"}
    if exc.status_code in codes:
        code = codes[exc.status_code]
    elif exc.status_code >= 500:
        code = "InternalFailure"
    else:
        code = "ValidationFailure"
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": str(exc.detail),
            "code": code,
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("처리되지 않은 오류: %s %s", request.method, request.url.path)
    content = {"success": False, "message": "서버 오류가 발생했습니다", "code": "InternalFailure"}
    if settings.debug:
        content["errors"] = [str(exc)]
    return JSONResponse(status_code=500, content=content)


# API 라우터 등록
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/")
def read_root():
    """서비스 루트"""
    return {
        "service": settings.app_name,
        "description": "Movie Recommendation Service",
        "version": "1.0.0",
        "docs": "/docs",
    }
