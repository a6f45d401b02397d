"""Tests for ErpApi: HTTP client for the ERP backend."""

import json
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import requests

from erp_hierarchy.api import ApiError, ErpApi
from erp_hierarchy.config import resolve_api_token


@pytest.fixture
def api_with_mock_session() -> tuple[ErpApi, MagicMock]:
    """Create an ErpApi with a mocked requests.Session."""
    with patch("erp_hierarchy.api.requests.Session") as mock_session_cls:
        mock_session = MagicMock()
        mock_session.headers = {}
        mock_session_cls.return_value = mock_session
        api = ErpApi(base_url="http://erp.test/", token="test-token", affiliation_id="42")

    return api, mock_session


def _make_response(data: Any, *, status_code: int = 200) -> MagicMock:
    """Create a mock HTTP response with given JSON data."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.content = json.dumps(data).encode()
    response.json.return_value = data
    return response


def test_init_sets_headers(api_with_mock_session: tuple[ErpApi, MagicMock]) -> None:
    api, session = api_with_mock_session
    assert session.headers["Authorization"] == "Bearer test-token"
    assert session.headers["affiliation"] == "42"
    assert session.headers["Content-Type"] == "application/json"
    assert api.base_url == "http://erp.test"


def test_call_returns_envelope(api_with_mock_session: tuple[ErpApi, MagicMock]) -> None:
    api, session = api_with_mock_session
    session.request.return_value = _make_response({"success": True, "message": "OK", "data": [1]})

    result = api.call("GET", "/api/system/programs")

    assert result["data"] == [1]
    args, kwargs = session.request.call_args
    assert args == ("GET", "http://erp.test/api/system/programs")
    assert kwargs["timeout"] == 10.0
    assert kwargs["data"] is None


def test_call_drops_none_params_and_lowercases_bools(
    api_with_mock_session: tuple[ErpApi, MagicMock],
) -> None:
    api, session = api_with_mock_session
    session.request.return_value = _make_response({"success": True, "data": []})

    api.call("GET", "/x", params={"bpId": 7, "categoryName": None, "isActive": False})

    assert session.request.call_args.kwargs["params"] == {"bpId": 7, "isActive": "false"}


def test_call_sends_json_body(api_with_mock_session: tuple[ErpApi, MagicMock]) -> None:
    api, session = api_with_mock_session
    session.request.return_value = _make_response({"success": True, "data": None})

    api.call("PATCH", "/x", body=[{"categoryId": 1, "sortOrder": 1}])

    assert json.loads(session.request.call_args.kwargs["data"]) == [{"categoryId": 1, "sortOrder": 1}]


def test_success_false_raises_with_backend_message(
    api_with_mock_session: tuple[ErpApi, MagicMock],
) -> None:
    api, session = api_with_mock_session
    session.request.return_value = _make_response({"success": False, "message": "Duplicate name"})

    with pytest.raises(ApiError, match="Duplicate name"):
        api.call("POST", "/x", body={})


def test_http_error_carries_status_code(api_with_mock_session: tuple[ErpApi, MagicMock]) -> None:
    api, session = api_with_mock_session
    session.request.return_value = _make_response(
        {"success": False, "message": "Forbidden"}, status_code=403
    )

    with pytest.raises(ApiError) as exc_info:
        api.call("DELETE", "/x/1")

    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "Forbidden"


def test_http_error_without_json_body(api_with_mock_session: tuple[ErpApi, MagicMock]) -> None:
    api, session = api_with_mock_session
    response = _make_response(None, status_code=502)
    response.json.side_effect = ValueError("not json")
    session.request.return_value = response

    with pytest.raises(ApiError, match="HTTP 502"):
        api.call("GET", "/x")


def test_transport_failure_becomes_api_error(api_with_mock_session: tuple[ErpApi, MagicMock]) -> None:
    api, session = api_with_mock_session
    session.request.side_effect = requests.ConnectionError("refused")

    with pytest.raises(ApiError, match="refused"):
        api.call("GET", "/x")


def test_empty_body_is_success(api_with_mock_session: tuple[ErpApi, MagicMock]) -> None:
    api, session = api_with_mock_session
    response = _make_response(None, status_code=204)
    response.content = b""
    session.request.return_value = response

    assert api.call("DELETE", "/x/1") == {"success": True, "data": None}


def test_bare_payload_is_wrapped(api_with_mock_session: tuple[ErpApi, MagicMock]) -> None:
    api, session = api_with_mock_session
    session.request.return_value = _make_response([{"id": 1}])

    assert api.call("GET", "/x") == {"success": True, "data": [{"id": 1}]}


def test_token_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ERP_API_TOKEN", " env-token ")
    assert resolve_api_token() == "env-token"


def test_token_from_first_found_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ERP_API_TOKEN", raising=False)
    token_file = tmp_path / "token.txt"
    token_file.write_text("file-token\n")
    monkeypatch.setattr(
        "erp_hierarchy.config.API_TOKEN_FILES",
        [tmp_path / "missing.txt", token_file],
    )

    assert resolve_api_token() == "file-token"


def test_no_token_means_no_auth_header(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ERP_API_TOKEN", raising=False)
    monkeypatch.setattr("erp_hierarchy.config.API_TOKEN_FILES", [tmp_path / "missing.txt"])

    with patch("erp_hierarchy.api.requests.Session") as mock_session_cls:
        mock_session = MagicMock()
        mock_session.headers = {}
        mock_session_cls.return_value = mock_session
        ErpApi(affiliation_id="")

    assert "Authorization" not in mock_session.headers
    assert "affiliation" not in mock_session.headers
