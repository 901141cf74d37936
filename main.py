# main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings
from routes.ocr_route import router as ocr_router
from schema.types import ErrorResponse

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="고지서 OCR 안내 서버")

# CORS 설정 (필요시 도메인 제한 가능)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_body(error: str, detail=None) -> dict:
    return ErrorResponse(error=error, detail=detail or None).model_dump(exclude_none=True)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        content = error_body(exc.detail.get("error") or "Server error", exc.detail.get("detail"))
    else:
        content = error_body(str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # 본문 누락/형식 오류는 모두 400으로 통일
    return JSONResponse(status_code=400, content=error_body("Missing imageBase64"))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("처리되지 않은 오류: %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body("Server error"))


@app.get("/health")
def health():
    """간단한 헬스 체크 엔드포인트"""
    return {"status": "ok"}

# 라우터 등록
app.include_router(ocr_router)

@app.get("/")
def root():
    return {"message": "고지서 OCR 서버 작동 중"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
