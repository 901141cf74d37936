import logging
import time
from typing import Dict, Optional, Sequence

import requests

from services.text_extract import RecognizedText, extract_text

logger = logging.getLogger(__name__)

VISION_ENDPOINT = "https://vision.googleapis.com/v1/images:annotate"
FEATURE_TYPES = ("DOCUMENT_TEXT_DETECTION", "TEXT_DETECTION")


class VisionConfigError(ValueError):
    pass


class VisionAPIError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail


class VisionOCR:
    def __init__(
        self,
        api_key: str,
        endpoint: str = VISION_ENDPOINT,
        feature_type: str = "DOCUMENT_TEXT_DETECTION",
        language_hints: Sequence[str] = ("ko",),
        enable_confidence_score: bool = True,
        connect_timeout: float = 10,
        read_timeout: float = 30,
        max_retries: int = 0,
    ):
        if not api_key:
            raise VisionConfigError("Missing GOOGLE_VISION_API_KEY")
        if feature_type not in FEATURE_TYPES:
            raise VisionConfigError(f"지원하지 않는 featureType: {feature_type}")
        self.api_key = api_key
        self.endpoint = endpoint.rstrip("/")
        self.feature_type = feature_type
        self.language_hints = list(language_hints)
        self.enable_confidence_score = enable_confidence_score
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.max_retries = max(0, int(max_retries))

    def build_payload(self, image_base64: str) -> Dict:
        image_context: Dict = {
            "textDetectionParams": {
                "enableTextDetectionConfidenceScore": self.enable_confidence_score,
            },
        }
        if self.language_hints:
            image_context["languageHints"] = self.language_hints
        return {
            "requests": [
                {
                    "image": {"content": image_base64},
                    "features": [{"type": self.feature_type}],
                    "imageContext": image_context,
                }
            ]
        }

    def annotate(self, image_base64: str) -> Dict:
        """
        images:annotate 호출 → responses[0] 반환 (없으면 빈 dict)
        """
        payload = self.build_payload(image_base64)

        for attempt in range(self.max_retries + 1):
            try:
                resp = requests.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    json=payload,
                    timeout=(self.connect_timeout, self.read_timeout),
                )
            except (requests.Timeout, requests.ConnectionError) as e:
                if attempt < self.max_retries:
                    time.sleep(0.6 * (attempt + 1))
                    continue
                logger.warning("Vision API 네트워크 오류: %s", e)
                raise VisionAPIError("Vision API network error", detail=str(e))
            except requests.RequestException as e:
                raise VisionAPIError("Vision API request failed", detail=str(e))

            data = _json_or_empty(resp)
            if resp.ok:
                return _first_response(data)

            # 4xx는 즉시 실패, 5xx는 재시도
            if 500 <= resp.status_code < 600 and attempt < self.max_retries:
                time.sleep(0.6 * (attempt + 1))
                continue
            message = ((data.get("error") or {}).get("message")) or "Vision API error"
            logger.warning("Vision API 실패[%s]: %s", resp.status_code, message)
            raise VisionAPIError(message, status_code=resp.status_code, detail=resp.text[:200] or None)

        # max_retries >= 0 이므로 루프 안에서 반드시 반환/예외
        raise VisionAPIError("Vision API error")

    def recognize(self, image_base64: str) -> RecognizedText:
        recognized = extract_text(self.annotate(image_base64))
        logger.info(
            "Vision OCR 완료: %d자 (fullText=%s)", len(recognized.text), recognized.has_full_text
        )
        return recognized


def _json_or_empty(resp: requests.Response) -> Dict:
    try:
        data = resp.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _first_response(data: Dict) -> Dict:
    responses = data.get("responses") or []
    first = (responses[0] if responses else None) or {}
    # 이미지 단위 오류는 HTTP 200 안에 담겨 옴
    error = first.get("error")
    if error and error.get("message"):
        logger.warning("Vision 이미지 처리 오류: %s", error.get("message"))
        raise VisionAPIError(error["message"], status_code=error.get("code"))
    return first
