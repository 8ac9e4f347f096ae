"""Problem+json envelope produced by register_error_handlers."""

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
import pytest

from studyroom.core.exceptions import (
    QuotaExceededException,
    StorageUnavailableException,
)
from studyroom.errors import register_error_handlers, reports_invalid_input

pytestmark = pytest.mark.unit


@pytest.fixture
def error_client():
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/quota")
    def quota():
        raise QuotaExceededException("Hong", "1", 2, 2)

    @app.get("/storage")
    def storage():
        raise StorageUnavailableException()

    @app.get("/plain")
    def plain():
        raise HTTPException(status_code=404, detail="nothing here")

    return TestClient(app)


def test_domain_exception_envelope(error_client):
    response = error_client.get("/quota")

    assert response.status_code == 422
    body = response.json()
    assert body["type"] == "about:blank"
    assert body["title"] == "Unprocessable Entity"
    assert body["code"] == "QUOTA_EXCEEDED"
    assert body["instance"] == "/quota"
    assert body["errors"]["student_name"] == "Hong"


def test_storage_unavailable_carries_retry_after(error_client):
    response = error_client.get("/storage")

    assert response.status_code == 503
    assert response.headers["retry-after"] == "2"
    assert response.json()["code"] == "STORAGE_UNAVAILABLE"


def test_plain_http_exception(error_client):
    response = error_client.get("/plain")

    assert response.status_code == 404
    body = response.json()
    assert body["detail"] == "nothing here"
    assert "code" not in body


def test_unknown_route(error_client):
    response = error_client.get("/missing")
    assert response.status_code == 404
    assert response.json()["title"] == "Not Found"


def test_marked_endpoint_reports_invalid_input():
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/marked")
    @reports_invalid_input
    def marked(hour: int):
        return {"hour": hour}

    @app.get("/unmarked")
    def unmarked(hour: int):
        return {"hour": hour}

    client = TestClient(app)

    marked_response = client.get("/marked", params={"hour": "x"})
    assert marked_response.status_code == 400
    assert marked_response.json()["code"] == "INVALID_INPUT"
    assert marked_response.json()["errors"] == {"field": "hour"}

    unmarked_response = client.get("/unmarked", params={"hour": "x"})
    assert unmarked_response.status_code == 422
    assert unmarked_response.json()["code"] == "VALIDATION_ERROR"
