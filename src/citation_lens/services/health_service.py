"""Startup checks for configuration and upstream reachability."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlparse

import requests

from citation_lens.config import validate_settings


@dataclass
class HealthResult:
    ok: bool
    detail: dict

    def to_dict(self) -> dict:
        return {"ok": self.ok, **self.detail}


def check_config(cfg) -> dict:
    check = validate_settings(cfg)
    return HealthResult(ok=check.ok, detail={"missing": check.missing, "message": check.message}).to_dict()


def _origin(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def check_endpoint(url: str, session=None, timeout: int = 5) -> dict:
    """Any HTTP answer counts as reachable; only transport errors fail."""
    client = session or requests
    origin = _origin(url)
    try:
        resp = client.get(origin, timeout=timeout)
    except Exception as exc:
        return HealthResult(ok=False, detail={"url": origin, "error": str(exc)}).to_dict()
    return HealthResult(ok=True, detail={"url": origin, "status": resp.status_code}).to_dict()


def run_all_checks(cfg, *, include_network: bool = False, session=None) -> dict:
    results = {"config": check_config(cfg)}
    if include_network:
        results["answer"] = check_endpoint(cfg.answer.base_url, session=session)
        results["vision"] = check_endpoint(cfg.vision.base_url, session=session)
        results["screenshot"] = check_endpoint(cfg.screenshot.base_url, session=session)
    return results


__all__ = ["HealthResult", "check_config", "check_endpoint", "run_all_checks"]
