"""Tests for the receipt upload server."""

import httpx
import pytest
from fastapi.testclient import TestClient

from billscan.domain.receipt import OcrResult
from billscan.receipt.ocr_parser.common import ExtractionConfig
from billscan.runtime import receipt_pipeline, receipt_server
from billscan.runtime.receipt_pipeline import RecognitionFailure


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setattr(receipt_server, "load_extraction_config", lambda: ExtractionConfig())
    return TestClient(receipt_server.app)


def _fake_ocr(full_text: str, seen_configs: list[ExtractionConfig] | None = None):
    async def fake_call(contents: bytes, ocr_url: str, *, filename: str, config: ExtractionConfig):
        if seen_configs is not None:
            seen_configs.append(config)
        return {}, OcrResult(full_text=full_text)

    return fake_call


def test_scan_returns_items(client: TestClient, monkeypatch: pytest.MonkeyPatch, receipt_png: bytes) -> None:
    monkeypatch.setattr(receipt_server, "call_ocr_service_async", _fake_ocr("Pan 3 1.200\nTOTAL 3600"))

    response = client.post("/scan", files={"file": ("receipt.png", receipt_png, "image/png")})

    assert response.status_code == 200
    assert response.json() == {
        "status": "success",
        "strategy": "flat_text",
        "items": [{"id": 1, "name": "Pan", "qty": 3, "price": 1200}],
    }


def test_scan_with_no_items_is_success(
    client: TestClient, monkeypatch: pytest.MonkeyPatch, receipt_png: bytes
) -> None:
    monkeypatch.setattr(receipt_server, "call_ocr_service_async", _fake_ocr("TOTAL 3600"))

    response = client.post("/scan", files={"file": ("receipt.png", receipt_png, "image/png")})

    assert response.status_code == 200
    assert response.json()["items"] == []


def test_strict_flag_reaches_parser(client: TestClient, monkeypatch: pytest.MonkeyPatch, receipt_png: bytes) -> None:
    seen: list[ExtractionConfig] = []
    monkeypatch.setattr(receipt_server, "call_ocr_service_async", _fake_ocr("Pizza 12.000", seen))

    response = client.post("/scan?strict=true", files={"file": ("receipt.png", receipt_png, "image/png")})

    assert response.status_code == 200
    assert seen[0].strict_names


def test_recognition_failure_is_502(client: TestClient, monkeypatch: pytest.MonkeyPatch, receipt_png: bytes) -> None:
    async def failing_call(*args: object, **kwargs: object):
        raise RecognitionFailure("OCR service error: 500")

    monkeypatch.setattr(receipt_server, "call_ocr_service_async", failing_call)

    response = client.post("/scan", files={"file": ("receipt.png", receipt_png, "image/png")})

    assert response.status_code == 502
    assert response.json()["status"] == "error"


def test_missing_file_is_400(client: TestClient) -> None:
    response = client.post("/scan", data={"note": "no file"})

    assert response.status_code == 400


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_malformed_ocr_reply_is_502(client: TestClient, monkeypatch: pytest.MonkeyPatch, receipt_png: bytes) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"detections": [["bad"]]}))

    async def call_with_mock_transport(contents: bytes, ocr_url: str, **kwargs: object):
        async with httpx.AsyncClient(transport=transport) as mock_client:
            return await receipt_pipeline.call_ocr_service_async(contents, ocr_url, client=mock_client, **kwargs)

    monkeypatch.setattr(receipt_server, "call_ocr_service_async", call_with_mock_transport)

    response = client.post("/scan", files={"file": ("receipt.png", receipt_png, "image/png")})

    assert response.status_code == 502
    assert response.json()["status"] == "error"
