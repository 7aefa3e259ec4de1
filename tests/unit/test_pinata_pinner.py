from __future__ import annotations

import json

import pytest
import requests

from grievance_ledger.common.config import get_settings
from grievance_ledger.common.errors import ErrCode, PinningError, ValidationError
from grievance_ledger.pinning import MockContentPinner, PinataPinner, resolve_pinner


class _FakeResponse:
    def __init__(self, payload, status: int = 200) -> None:
        self._payload = payload
        self.status_code = status
        self.text = json.dumps(payload) if not isinstance(payload, str) else payload

    def json(self):
        if isinstance(self._payload, str):
            raise ValueError("not json")
        return self._payload


def _pinner() -> PinataPinner:
    return PinataPinner(api_base="https://pinata.local/", jwt="jwt-1", timeout_sec=7)


def test_pin_posts_multipart_with_bearer(monkeypatch) -> None:
    seen = {}

    def _fake_post(url, **kwargs):
        seen["url"] = url
        seen.update(kwargs)
        return _FakeResponse({"IpfsHash": "bafkcid1", "PinSize": 42})

    monkeypatch.setattr("grievance_ledger.pinning.pinata.requests.post", _fake_post)
    result = _pinner().pin(b'{"a":1}', "user-U1.json")

    assert result.content_id == "bafkcid1"
    assert result.size == 42
    assert seen["url"] == "https://pinata.local/pinning/pinFileToIPFS"
    assert seen["headers"]["Authorization"] == "Bearer jwt-1"
    assert seen["files"]["file"][0] == "user-U1.json"
    assert seen["files"]["file"][1] == b'{"a":1}'
    assert json.loads(seen["data"]["pinataMetadata"]) == {"name": "user-U1.json"}
    assert seen["timeout"] == 7


@pytest.mark.parametrize(
    "response",
    [
        _FakeResponse({"error": "unauthorized"}, status=401),
        _FakeResponse("<html>bad gateway</html>"),
        _FakeResponse({"PinSize": 1}),
    ],
)
def test_pin_failures_are_retryable(monkeypatch, response) -> None:
    monkeypatch.setattr(
        "grievance_ledger.pinning.pinata.requests.post", lambda *_a, **_k: response
    )
    with pytest.raises(PinningError) as exc:
        _pinner().pin(b"{}", "x.json")
    assert exc.value.retryable is True
    assert exc.value.code == ErrCode.PINNER_PROVIDER_ERROR


def test_pin_network_error_is_retryable(monkeypatch) -> None:
    def _boom(*_args, **_kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr("grievance_ledger.pinning.pinata.requests.post", _boom)
    with pytest.raises(PinningError, match="HTTP error"):
        _pinner().pin(b"{}", "x.json")


def test_pin_without_jwt_fails(monkeypatch) -> None:
    monkeypatch.setattr(get_settings(), "pinata_jwt", None)
    with pytest.raises(PinningError, match="PINATA_JWT"):
        PinataPinner(api_base="https://pinata.local", jwt=None).pin(b"{}", "x.json")


def test_mock_pinner_is_content_addressed() -> None:
    pinner = MockContentPinner()
    a = pinner.pin(b"same", "a.json")
    b = pinner.pin(b"same", "b.json")
    assert a.content_id == b.content_id
    assert a.content_id.startswith("bafk")
    assert pinner.calls == 2


def test_resolve_pinner(monkeypatch) -> None:
    s = get_settings()
    monkeypatch.setattr(s, "pinner_provider", "mock")
    assert isinstance(resolve_pinner(s), MockContentPinner)
    monkeypatch.setattr(s, "pinner_provider", "s3")
    with pytest.raises(ValidationError) as exc:
        resolve_pinner(s)
    assert exc.value.code == ErrCode.CONFIG_ERROR
