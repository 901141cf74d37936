import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException

from config import Settings, get_settings
from schema.types import ExplanationOut, OCRRequest, OCRResult
from services.notice_classifier import EXPLANATIONS, UNRECOGNIZED_EXPLANATION, detect_category
from services.text_extract import InvalidImageError, RecognizedText, normalize_image_base64
from services.vision_ocr import VisionAPIError, VisionConfigError, VisionOCR

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_vision_ocr(settings: Settings = Depends(get_settings)) -> VisionOCR:
    """설정값으로 Vision 클라이언트 생성 (키 누락 시 500)"""
    try:
        return VisionOCR(
            settings.google_vision_api_key,
            endpoint=settings.vision_endpoint,
            feature_type=settings.vision_feature_type,
            language_hints=settings.vision_language_hints,
            enable_confidence_score=settings.vision_confidence_score,
            connect_timeout=settings.vision_connect_timeout,
            read_timeout=settings.vision_read_timeout,
            max_retries=settings.vision_max_retries,
        )
    except VisionConfigError as e:
        logger.error("Vision 설정 오류: %s", e)
        raise HTTPException(status_code=500, detail=str(e))


def verify_internal_token(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    if not settings.ocr_internal_token:
        return
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing Authorization")
    token = authorization.split(" ", 1)[1].strip()
    if token != settings.ocr_internal_token:
        raise HTTPException(status_code=403, detail="Invalid token")


def recognize_image(body: OCRRequest, vision: VisionOCR) -> RecognizedText:
    try:
        content = normalize_image_base64(body.imageBase64)
    except InvalidImageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    try:
        return vision.recognize(content)
    except VisionAPIError as e:
        raise HTTPException(status_code=502, detail={"error": e.message, "detail": e.detail})


@router.post("/ocr", response_model=OCRResult, response_model_exclude_none=True,
             dependencies=[Depends(verify_internal_token)])
def ocr_text(body: OCRRequest, vision: VisionOCR = Depends(get_vision_ocr)):
    recognized = recognize_image(body, vision)
    if not recognized.text:
        return OCRResult(text="", reason="NO_TEXT_DETECTED")
    return OCRResult(text=recognized.text, meta={"hasFullText": recognized.has_full_text})


@router.post("/classify", response_model=ExplanationOut,
             dependencies=[Depends(verify_internal_token)])
def classify_notice(body: OCRRequest, vision: VisionOCR = Depends(get_vision_ocr)):
    recognized = recognize_image(body, vision)
    category = detect_category(recognized.text)
    logger.info("분류 결과: %s", category.value if category else "UNRECOGNIZED")
    explanation = EXPLANATIONS[category] if category else UNRECOGNIZED_EXPLANATION
    return explanation.to_dict()


@router.get("/health")
def ocr_health(settings: Settings = Depends(get_settings)):
    key = settings.google_vision_api_key
    if not key or key == "your-api-key-here":
        return {"status": "warning", "message": "Google Vision API 키 설정이 필요합니다.",
                "ocr_engine": "google_vision", "config_status": "incomplete"}
    return {"status": "healthy", "message": "OCR 서비스가 정상 작동 중입니다.",
            "ocr_engine": "google_vision", "config_status": "complete",
            "feature_type": settings.vision_feature_type}
