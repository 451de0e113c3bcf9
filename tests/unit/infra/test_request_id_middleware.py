import pytest


@pytest.mark.unit
def test_request_id_is_echoed_when_valid(app) -> None:
    client = app.test_client()

    response = client.get("/api/v1/openapi.json", headers={"X-Request-ID": "trace-123"})

    assert response.headers["X-Request-ID"] == "trace-123"


@pytest.mark.unit
def test_request_id_is_generated_for_invalid_header(app) -> None:
    client = app.test_client()

    response = client.get("/api/v1/openapi.json", headers={"X-Request-ID": "bad id with spaces"})

    assert response.headers["X-Request-ID"].startswith("req_")


@pytest.mark.unit
def test_error_envelope_carries_request_context(app) -> None:
    client = app.test_client()

    response = client.get("/api/v1/directory_items?period=never", headers={"X-Request-ID": "trace-err"})

    payload = response.get_json()
    assert response.status_code == 400
    assert payload["error"] is True
    assert payload["category"] == "validation"
    assert payload["recoverable"] is True
    assert payload["context"]["request_id"] == "trace-err"
