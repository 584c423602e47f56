"""Minimal Gemini client for one-prompt, one-image generation."""

from __future__ import annotations

import json
from dataclasses import dataclass

import requests

from citation_lens.config import API_KEY_ENV, require_api_key
from citation_lens.domain.errors import GatewayError


class GeminiError(GatewayError):
    """Raised when Gemini generation fails."""


@dataclass
class GeminiClient:
    api_key: str = ""
    model: str = "gemini-2.0-pro-exp-02-05"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout_s: int = 120

    @classmethod
    def from_config(cls, cfg, model: str | None = None) -> "GeminiClient":
        vision = cfg.vision
        return cls(api_key=vision.api_key, model=model or vision.model, base_url=vision.base_url, timeout_s=vision.timeout_s)

    def generate(self, prompt: str, image_b64: str, mime_type: str = "image/jpeg") -> str:
        api_key = require_api_key(self.api_key, API_KEY_ENV["vision"])
        url = f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"
        payload = {
            "contents": [
                {
                    "parts": [
                        {"text": prompt},
                        {"inline_data": {"mime_type": mime_type, "data": image_b64}},
                    ]
                }
            ]
        }
        try:
            resp = requests.post(url, params={"key": api_key}, json=payload, timeout=self.timeout_s)
        except requests.RequestException as exc:  # pragma: no cover - network path
            raise GeminiError(f"Gemini not reachable at {self.base_url}. Details: {exc}") from exc
        if resp.status_code != 200:
            raise GeminiError(f"Gemini returned {resp.status_code}: {resp.text}")
        try:
            data = resp.json()
        except json.JSONDecodeError as exc:
            raise GeminiError(f"Invalid JSON from Gemini: {resp.text}") from exc
        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback") or {}
            raise GeminiError(f"Gemini returned no candidates: {feedback}")
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts)


__all__ = ["GeminiClient", "GeminiError"]
