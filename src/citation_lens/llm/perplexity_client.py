"""Perplexity chat completions client (answers with cited sources)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import List, Optional

import requests

from citation_lens.config import API_KEY_ENV, require_api_key
from citation_lens.domain.errors import GatewayError


class PerplexityError(GatewayError):
    """Raised when the Perplexity API call fails."""


@dataclass
class AnswerResponse:
    content: str
    role: str = "assistant"
    citations: List[str] = field(default_factory=list)


@dataclass
class PerplexityClient:
    api_key: str = ""
    base_url: str = "https://api.perplexity.ai"
    model: str = "sonar"
    timeout_s: int = 60

    @classmethod
    def from_config(cls, cfg) -> "PerplexityClient":
        answer = cfg.answer
        return cls(api_key=answer.api_key, base_url=answer.base_url, model=answer.model, timeout_s=answer.timeout_s)

    def chat(
        self,
        messages: List[dict],
        temperature: Optional[float] = None,
        top_p: Optional[float] = None,
    ) -> AnswerResponse:
        api_key = require_api_key(self.api_key, API_KEY_ENV["answer"])
        url = f"{self.base_url.rstrip('/')}/chat/completions"
        payload: dict = {"model": self.model, "messages": messages}
        if temperature is not None:
            payload["temperature"] = temperature
        if top_p is not None:
            payload["top_p"] = top_p
        headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
        try:
            resp = requests.post(url, json=payload, headers=headers, timeout=self.timeout_s)
        except requests.RequestException as exc:  # pragma: no cover - network path
            raise PerplexityError(f"Perplexity request failed: {exc}") from exc
        if resp.status_code != 200:
            raise PerplexityError(f"Perplexity API error: {resp.text}")
        try:
            data = resp.json()
        except json.JSONDecodeError as exc:
            raise PerplexityError(f"Invalid JSON from Perplexity: {resp.text}") from exc
        choices = data.get("choices") or []
        if not choices:
            raise PerplexityError("Perplexity returned no choices.")
        message = choices[0].get("message") or {}
        return AnswerResponse(
            content=message.get("content") or "",
            role=message.get("role") or "assistant",
            citations=list(data.get("citations") or []),
        )


__all__ = ["PerplexityClient", "PerplexityError", "AnswerResponse"]
