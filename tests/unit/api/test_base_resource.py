import pytest
from flask import Response

from directory_search.api.v1.resources.base import BaseResource


@pytest.mark.unit
def test_success_returns_response_with_status_applied(app) -> None:
    with app.test_request_context("/api/v1/directory_items"):
        response = BaseResource().success(data={"ok": 1}, message="done", status=201, meta={"total": 1})

    assert isinstance(response, Response)
    assert response.status_code == 201
    payload = response.get_json()
    assert payload["success"] is True
    assert payload["data"] == {"ok": 1}
    assert payload["meta"] == {"total": 1}
