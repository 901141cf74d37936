# config.py
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Tuple

from dotenv import load_dotenv

from services.vision_ocr import VISION_ENDPOINT

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"{name} 값이 올바르지 않습니다: {raw!r}")


def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(x.strip() for x in raw.split(",") if x.strip())


@dataclass(frozen=True)
class Settings:
    google_vision_api_key: str = ""
    vision_endpoint: str = VISION_ENDPOINT
    vision_feature_type: str = "DOCUMENT_TEXT_DETECTION"
    vision_language_hints: Tuple[str, ...] = ("ko",)
    vision_confidence_score: bool = True
    vision_connect_timeout: float = 10.0
    vision_read_timeout: float = 30.0
    vision_max_retries: int = 0
    ocr_internal_token: str = ""
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = field(default_factory=lambda: ("*",))


def load_settings() -> Settings:
    """환경변수(.env 포함)에서 설정을 읽어 Settings 생성"""
    return Settings(
        google_vision_api_key=os.getenv("GOOGLE_VISION_API_KEY", "").strip(),
        vision_endpoint=os.getenv("VISION_ENDPOINT", VISION_ENDPOINT),
        vision_feature_type=os.getenv("VISION_FEATURE_TYPE", "DOCUMENT_TEXT_DETECTION").strip().upper(),
        vision_language_hints=_env_list("VISION_LANGUAGE_HINTS", ("ko",)),
        vision_confidence_score=_env_bool("VISION_CONFIDENCE_SCORE", True),
        vision_connect_timeout=_env_number("VISION_CONNECT_TIMEOUT", 10.0, float),
        vision_read_timeout=_env_number("VISION_READ_TIMEOUT", 30.0, float),
        vision_max_retries=_env_number("VISION_MAX_RETRIES", 0, int),
        ocr_internal_token=os.getenv("OCR_INTERNAL_TOKEN", "").strip(),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=_env_list("CORS_ORIGINS", ("*",)),
    )


@lru_cache()
def get_settings() -> Settings:
    return load_settings()
