from unittest.mock import patch

from fastapi.testclient import TestClient

from config import Settings, get_settings
from main import app
from routes.ocr_route import get_vision_ocr
from services.notice_classifier import EXPLANATIONS, UNRECOGNIZED_EXPLANATION, Category, detect_category
from services.vision_ocr import VisionAPIError

SAMPLE_IMAGE_B64 = "aGVsbG8="


class TestOCREndpoint:
    def test_returns_text(self, client, fake_vision):
        fake_vision.text = "환불 처리되었습니다"
        response = client.post("/api/ocr", json={"imageBase64": SAMPLE_IMAGE_B64})
        assert response.status_code == 200
        assert response.json() == {"ok": True, "text": "환불 처리되었습니다", "meta": {"hasFullText": True}}

    def test_strips_data_url_prefix(self, client, fake_vision):
        fake_vision.text = "아무 글자"
        client.post("/api/ocr", json={"imageBase64": "data:image/png;base64," + SAMPLE_IMAGE_B64})
        assert fake_vision.calls == [SAMPLE_IMAGE_B64]

    def test_no_text_detected(self, client, fake_vision):
        response = client.post("/api/ocr", json={"imageBase64": SAMPLE_IMAGE_B64})
        assert response.status_code == 200
        assert response.json() == {"ok": True, "text": "", "reason": "NO_TEXT_DETECTED"}

    def test_get_is_method_not_allowed(self, client):
        response = client.get("/api/ocr")
        assert response.status_code == 405
        assert response.json() == {"ok": False, "error": "Method Not Allowed"}

    def test_missing_body(self, client, fake_vision):
        response = client.post("/api/ocr")
        assert response.status_code == 400
        assert response.json() == {"ok": False, "error": "Missing imageBase64"}
        assert fake_vision.calls == []

    def test_non_string_image(self, client):
        response = client.post("/api/ocr", json={"imageBase64": 123})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing imageBase64"

    def test_empty_image(self, client):
        response = client.post("/api/ocr", json={"imageBase64": ""})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing imageBase64"

    def test_invalid_base64(self, client):
        response = client.post("/api/ocr", json={"imageBase64": "not*base64"})
        assert response.status_code == 400
        assert response.json() == {"ok": False, "error": "Invalid imageBase64"}

    def test_upstream_error_is_forwarded(self, client, fake_vision):
        fake_vision.error = VisionAPIError("API key not valid", status_code=400, detail="raw body")
        response = client.post("/api/ocr", json={"imageBase64": SAMPLE_IMAGE_B64})
        assert response.status_code == 502
        assert response.json() == {"ok": False, "error": "API key not valid", "detail": "raw body"}

    def test_unexpected_error_is_500(self, client, fake_vision):
        fake_vision.error = KeyError("oops")
        response = client.post("/api/ocr", json={"imageBase64": SAMPLE_IMAGE_B64})
        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "Server error"}


class TestClassifyEndpoint:
    def test_returns_explanation(self, client, fake_vision):
        fake_vision.text = "국세청 홈택스에서 현금영수증이 발급되었습니다"
        response = client.post("/api/classify", json={"imageBase64": SAMPLE_IMAGE_B64})
        assert response.status_code == 200
        assert response.json() == EXPLANATIONS[Category.TAX_RECEIPT].to_dict()

    def test_empty_text_is_unrecognized_not_error(self, client, fake_vision):
        fake_vision.text = ""
        response = client.post("/api/classify", json={"imageBase64": SAMPLE_IMAGE_B64})
        assert response.status_code == 200
        assert response.json() == UNRECOGNIZED_EXPLANATION.to_dict()

    def test_category_is_detected_once(self, client, fake_vision):
        fake_vision.text = "미납 요금 납부 기한 안내"
        with patch("routes.ocr_route.detect_category", wraps=detect_category) as spy:
            response = client.post("/api/classify", json={"imageBase64": SAMPLE_IMAGE_B64})
        assert response.status_code == 200
        assert response.json() == EXPLANATIONS[Category.PAYMENT_REQUEST].to_dict()
        assert spy.call_count == 1

    def test_put_is_method_not_allowed(self, client):
        response = client.put("/api/classify", json={"imageBase64": SAMPLE_IMAGE_B64})
        assert response.status_code == 405


class TestConfiguration:
    def test_missing_api_key_is_500(self):
        app.dependency_overrides[get_settings] = lambda: Settings(google_vision_api_key="")
        try:
            client = TestClient(app, raise_server_exceptions=False)
            response = client.post("/api/ocr", json={"imageBase64": SAMPLE_IMAGE_B64})
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "Missing GOOGLE_VISION_API_KEY"}

    def test_health_reports_incomplete_config(self):
        app.dependency_overrides[get_settings] = lambda: Settings(google_vision_api_key="")
        try:
            response = TestClient(app).get("/api/health")
        finally:
            app.dependency_overrides.clear()
        assert response.json()["config_status"] == "incomplete"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}
        assert client.get("/api/health").json()["status"] == "healthy"


class TestInternalToken:
    def _client(self, fake_vision):
        app.dependency_overrides[get_settings] = lambda: Settings(
            google_vision_api_key="k", ocr_internal_token="s3cret"
        )
        app.dependency_overrides[get_vision_ocr] = lambda: fake_vision
        return TestClient(app, raise_server_exceptions=False)

    def test_missing_token(self, fake_vision):
        try:
            response = self._client(fake_vision).post("/api/ocr", json={"imageBase64": SAMPLE_IMAGE_B64})
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 401

    def test_wrong_token(self, fake_vision):
        try:
            response = self._client(fake_vision).post(
                "/api/ocr", json={"imageBase64": SAMPLE_IMAGE_B64},
                headers={"Authorization": "Bearer nope"},
            )
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 403

    def test_valid_token(self, fake_vision):
        fake_vision.text = "인증번호는 123456입니다"
        try:
            response = self._client(fake_vision).post(
                "/api/classify", json={"imageBase64": SAMPLE_IMAGE_B64},
                headers={"Authorization": "Bearer s3cret"},
            )
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 200
        assert response.json() == EXPLANATIONS[Category.AUTH_MESSAGE].to_dict()
