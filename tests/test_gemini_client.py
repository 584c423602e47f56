import pytest
import requests

from citation_lens.domain.errors import ConfigError
from citation_lens.llm.gemini_client import GeminiClient, GeminiError


class DummyResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload or {}
        self.text = text

    def json(self):
        return self._payload


def test_gemini_generate_success(monkeypatch):
    captured = {}

    def fake_post(url, params=None, json=None, timeout=None):
        captured["url"] = url
        captured["params"] = params
        captured["json"] = json
        captured["timeout"] = timeout
        return DummyResponse(200, {"candidates": [{"content": {"parts": [{"text": "[1, 2, "}, {"text": "3, 4]"}]}}]})

    monkeypatch.setattr(requests, "post", fake_post)
    client = GeminiClient(api_key="k", model="gemini-2.0-flash", timeout_s=7)
    out = client.generate("find it", "QUJD", mime_type="image/png")
    assert out == "[1, 2, 3, 4]"
    assert captured["url"].endswith("/models/gemini-2.0-flash:generateContent")
    assert captured["params"] == {"key": "k"}
    parts = captured["json"]["contents"][0]["parts"]
    assert parts[0] == {"text": "find it"}
    assert parts[1] == {"inline_data": {"mime_type": "image/png", "data": "QUJD"}}
    assert captured["timeout"] == 7


def test_gemini_missing_key_fails_before_network(monkeypatch):
    def fake_post(*args, **kwargs):
        raise AssertionError("network should not be called")

    monkeypatch.setattr(requests, "post", fake_post)
    with pytest.raises(ConfigError) as exc:
        GeminiClient(api_key="").generate("p", "QUJD")
    assert "GEMINI_API_KEY" in str(exc.value)


def test_gemini_http_error_carries_upstream_text(monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **k: DummyResponse(403, text="API key not valid"))
    with pytest.raises(GeminiError) as exc:
        GeminiClient(api_key="k").generate("p", "QUJD")
    assert "API key not valid" in str(exc.value)


def test_gemini_no_candidates(monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *a, **k: DummyResponse(200, {"promptFeedback": {"blockReason": "SAFETY"}}))
    with pytest.raises(GeminiError):
        GeminiClient(api_key="k").generate("p", "QUJD")
