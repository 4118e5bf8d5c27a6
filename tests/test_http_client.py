from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests
import responses
from requests import Response

from fxrates.errors import TransportError
from fxrates.http_client import HTTPClient, HTTPClientConfig, HTTPResponse


def make_response(status_code: int, text: str) -> Response:
    resp = MagicMock(spec=Response)
    resp.status_code = status_code
    resp.text = text
    return resp


def test_send_returns_status_and_body():
    session = MagicMock()
    session.get.return_value = make_response(200, '{"ok": true}')
    client = HTTPClient(HTTPClientConfig(timeout=3), session=session)

    response = client.send("https://example.com/latest?base=USD", {"Accept": "application/json"})

    assert response == HTTPResponse(status_code=200, body='{"ok": true}')
    assert response.ok
    session.get.assert_called_once_with(
        "https://example.com/latest?base=USD",
        headers={"Accept": "application/json"},
        timeout=3,
    )


def test_send_does_not_raise_on_error_status():
    session = MagicMock()
    session.get.return_value = make_response(503, "unavailable")
    client = HTTPClient(session=session)

    response = client.send("https://example.com/latest", {})

    assert response.status_code == 503
    assert not response.ok


def test_send_wraps_connection_errors_without_retrying():
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("boom")
    client = HTTPClient(session=session)

    with pytest.raises(TransportError) as exc_info:
        client.send("https://example.com/latest", {})

    assert "Failed to fetch" in str(exc_info.value)
    assert session.get.call_count == 1


@pytest.mark.parametrize(("status", "expected"), [(199, False), (200, True), (204, True), (299, True), (301, False)])
def test_response_ok_range(status, expected):
    assert HTTPResponse(status_code=status, body="").ok is expected


@responses.activate
def test_send_over_real_session_sends_headers():
    responses.add(responses.GET, "https://example.com/latest", body="{}", status=200)

    with HTTPClient() as client:
        response = client.send("https://example.com/latest", {"Accept": "application/json"})

    assert response.body == "{}"
    assert responses.calls[0].request.headers["Accept"] == "application/json"
