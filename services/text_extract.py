import base64
import binascii
import re
from dataclasses import dataclass
from typing import Dict, Optional

_DATA_URL_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,", re.IGNORECASE)
_BLANK_RUN = re.compile(r"\n{3,}")


class InvalidImageError(ValueError):
    pass


@dataclass(frozen=True)
class RecognizedText:
    text: str
    has_full_text: bool = False


def strip_data_url(value: str) -> str:
    """'data:image/png;base64,' 같은 접두어 제거."""
    return _DATA_URL_PREFIX.sub("", value.strip(), count=1)


def normalize_image_base64(value: Optional[str]) -> str:
    """
    요청으로 받은 base64 문자열을 Vision API에 넘길 형태로 정리.
    접두어/공백 제거 후 디코딩이 안 되면 InvalidImageError.
    """
    if not value or not isinstance(value, str):
        raise InvalidImageError("Missing imageBase64")
    content = re.sub(r"\s+", "", strip_data_url(value))
    if not content:
        raise InvalidImageError("Missing imageBase64")
    try:
        base64.b64decode(content, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidImageError("Invalid imageBase64")
    return content


def clean_text(text: str) -> str:
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    joined = "\n".join(line.rstrip() for line in lines)
    # 빈 줄이 여러 개 이어지면 하나로
    return _BLANK_RUN.sub("\n\n", joined).strip()


def extract_text(response: Optional[Dict]) -> RecognizedText:
    """
    Vision 응답(responses[0])에서 텍스트 하나를 뽑음.
    fullTextAnnotation.text 우선, 없으면 textAnnotations[0].description.
    """
    response = response or {}
    full_text = ((response.get("fullTextAnnotation") or {}).get("text")) or ""
    if full_text.strip():
        return RecognizedText(clean_text(full_text), has_full_text=True)

    annotations = response.get("textAnnotations") or []
    if annotations:
        first = annotations[0] or {}
        description = first.get("description") or ""
        return RecognizedText(clean_text(description), has_full_text=False)

    return RecognizedText("", has_full_text=False)
