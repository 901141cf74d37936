"""
pytest 공통 설정
"""
import os

import pytest
from fastapi.testclient import TestClient

# main 을 import 하기 전에 테스트용 환경변수 설정
os.environ.setdefault("GOOGLE_VISION_API_KEY", "test-key-for-tests")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from config import Settings, get_settings  # noqa: E402
from main import app  # noqa: E402
from routes.ocr_route import get_vision_ocr  # noqa: E402
from services.text_extract import RecognizedText  # noqa: E402


class FakeVision:
    """recognize() 만 흉내내는 Vision 클라이언트 대역"""

    def __init__(self, text="", has_full_text=True, error=None):
        self.text = text
        self.has_full_text = has_full_text
        self.error = error
        self.calls = []

    def recognize(self, image_base64):
        self.calls.append(image_base64)
        if self.error is not None:
            raise self.error
        return RecognizedText(self.text, has_full_text=self.has_full_text)


@pytest.fixture
def settings():
    return Settings(google_vision_api_key="test-key-for-tests")


@pytest.fixture
def fake_vision():
    return FakeVision()


@pytest.fixture
def client(settings, fake_vision):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_vision_ocr] = lambda: fake_vision
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
