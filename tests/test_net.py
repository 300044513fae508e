import pytest
import requests

from pbp_installer.lib import net


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


def test_lookup_timezone(monkeypatch):
    seen = {}

    def fake_get(url, timeout):
        seen["url"] = url
        seen["timeout"] = timeout
        return FakeResponse({"status": "success", "timezone": "Europe/Oslo"})

    monkeypatch.setattr(net.requests, "get", fake_get)
    assert net.lookup_timezone("http://ip-api.com/json") == "Europe/Oslo"
    assert seen == {"url": "http://ip-api.com/json", "timeout": net.DEFAULT_TIMEOUT_S}


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse({"status": "fail"}),
        FakeResponse({"timezone": "UTC"}, status_code=503),
        FakeResponse(ValueError("not json")),
        FakeResponse(["timezone"]),
    ],
)
def test_lookup_timezone_failures(monkeypatch, response):
    monkeypatch.setattr(net.requests, "get", lambda url, timeout: response)
    with pytest.raises(net.TimezoneLookupError):
        net.lookup_timezone("http://ip-api.com/json")


def test_lookup_timezone_offline(monkeypatch):
    def fake_get(url, timeout):
        raise requests.ConnectionError("no route to host")

    monkeypatch.setattr(net.requests, "get", fake_get)
    with pytest.raises(net.TimezoneLookupError, match="no route to host"):
        net.lookup_timezone("http://ip-api.com/json")
