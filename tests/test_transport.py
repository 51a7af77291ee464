"""
Tests for the requests-backed transport and the session around it.
"""
import json
import logging

import pytest
import requests

from pawapay_gateway.exceptions import TransportError
from pawapay_gateway.services.session import GatewaySession
from pawapay_gateway.services.transport import RequestsTransport, build_headers


class FakeResponse:
    def __init__(self, status_code, content=b"", text=""):
        self.status_code = status_code
        self.content = content
        self.text = text or content.decode()

    def json(self):
        return json.loads(self.content)


def test_connection_failure_raises_transport_error(monkeypatch):
    def refuse(self, method, url, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(requests.Session, "request", refuse)

    transport = RequestsTransport()
    with pytest.raises(TransportError) as exc_info:
        transport.request("GET", "https://api.sandbox.pawapay.io/availability", headers={})

    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)
    assert exc_info.value.details["error_type"] == "ConnectionError"


def test_timeout_raises_transport_error(monkeypatch):
    def slow(self, method, url, **kwargs):
        raise requests.Timeout("read timed out")

    monkeypatch.setattr(requests.Session, "request", slow)

    with pytest.raises(TransportError):
        RequestsTransport().request("POST", "https://api.sandbox.pawapay.io/deposits", headers={})


def test_http_errors_are_returned_not_raised(monkeypatch):
    captured = {}

    def answer(self, method, url, **kwargs):
        captured.update(kwargs)
        return FakeResponse(400, b'{"status": "REJECTED"}')

    monkeypatch.setattr(requests.Session, "request", answer)

    transport = RequestsTransport(timeout=(1.0, 2.0))
    response = transport.request(
        "POST",
        "https://api.sandbox.pawapay.io/deposits",
        headers={"Authorization": "Bearer x"},
        json_body={"depositId": "1"},
        verify=False,
    )

    assert response.status_code == 400
    assert response.body == {"status": "REJECTED"}
    assert captured["json"] == {"depositId": "1"}
    assert captured["timeout"] == (1.0, 2.0)
    assert captured["verify"] is False


def test_non_json_body_decodes_to_none(monkeypatch):
    monkeypatch.setattr(
        requests.Session,
        "request",
        lambda self, method, url, **kwargs: FakeResponse(502, b"<html>Bad Gateway</html>"),
    )
    response = RequestsTransport().request("GET", "https://api.sandbox.pawapay.io/x", headers={})
    assert response.body is None
    assert "Bad Gateway" in response.text


def test_build_headers():
    assert build_headers("abc") == {
        "Authorization": "Bearer abc",
        "Content-Type": "application/json",
    }


def test_session_never_logs_token(v1_config, transport, caplog):
    session = GatewaySession(v1_config, transport)
    with caplog.at_level(logging.DEBUG):
        session.request("GET", "/availability")

    assert "test-token" not in caplog.text
    assert "test-token" not in repr(session)
    assert "test-token" not in repr(v1_config)


def test_session_defaults_to_requests_transport(v1_config):
    session = GatewaySession(v1_config)
    assert isinstance(session.transport, RequestsTransport)
    assert session.transport.timeout == (10.0, 30.0)
