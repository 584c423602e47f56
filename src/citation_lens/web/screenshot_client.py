"""ScreenshotOne client returning base64 data URLs."""

from __future__ import annotations

import base64
import time
from dataclasses import dataclass
from typing import Optional

import requests

from citation_lens.config import API_KEY_ENV, require_api_key
from citation_lens.domain.errors import GatewayError
from citation_lens.logging import get_logger

logger = get_logger(__name__)


class ScreenshotError(GatewayError):
    """Raised when a screenshot cannot be captured."""


def _flag(value: bool) -> str:
    return "true" if value else "false"


@dataclass
class ScreenshotClient:
    api_key: str = ""
    base_url: str = "https://api.screenshotone.com/take"
    image_format: str = "jpg"
    image_quality: int = 80
    block_ads: bool = True
    block_cookie_banners: bool = True
    block_trackers: bool = True
    timeout_s: int = 90

    @classmethod
    def from_config(cls, cfg) -> "ScreenshotClient":
        sc = cfg.screenshot
        return cls(
            api_key=sc.api_key,
            base_url=sc.base_url,
            image_format=sc.format,
            image_quality=sc.image_quality,
            block_ads=sc.block_ads,
            block_cookie_banners=sc.block_cookie_banners,
            block_trackers=sc.block_trackers,
            timeout_s=sc.timeout_s,
        )

    def build_params(self, url: str, selector: Optional[str] = None) -> dict:
        params = {
            "access_key": require_api_key(self.api_key, API_KEY_ENV["screenshot"]),
            "url": url,
            "format": self.image_format,
            "block_ads": _flag(self.block_ads),
            "block_cookie_banners": _flag(self.block_cookie_banners),
            "block_trackers": _flag(self.block_trackers),
            "delay": "0",
            "timeout": "60",
            "response_type": "by_format",
            "image_quality": str(self.image_quality),
        }
        if selector:
            params["selector"] = selector
        return params

    def take(self, url: str, selector: Optional[str] = None) -> str:
        """Capture ``url`` (or one element of it) and return a base64 data URL."""
        params = self.build_params(url, selector)
        start = time.perf_counter()
        logger.info("Taking screenshot", extra={"url": url, "selector": selector})
        try:
            resp = requests.get(self.base_url, params=params, timeout=self.timeout_s)
        except requests.RequestException as exc:  # pragma: no cover - network path
            raise ScreenshotError(f"Screenshot request failed: {exc}") from exc
        if resp.status_code != 200:
            raise ScreenshotError(f"Screenshot API error: {resp.status_code} {resp.reason}")
        encoded = base64.b64encode(resp.content).decode("ascii")
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info("Got screenshot", extra={"url": url, "elapsed_ms": round(elapsed_ms)})
        return f"data:image/{self.image_format};base64,{encoded}"


__all__ = ["ScreenshotClient", "ScreenshotError"]
