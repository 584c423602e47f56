"""Chat service wrapping the research answerer."""

from __future__ import annotations

from copy import deepcopy

from citation_lens.config import load_config
from citation_lens.domain.models import ChatMessage
from citation_lens.logging import get_logger
from citation_lens.research import answerer
from citation_lens.research.answerer import ERROR_REPLY

logger = get_logger(__name__)


def _apply_overrides(cfg, overrides: dict | None):
    if not overrides:
        return cfg
    # copy config to avoid mutating global/default
    cfg_copy = cfg.model_copy(deep=True) if hasattr(cfg, "model_copy") else deepcopy(cfg)
    if overrides.get("vision_model_override"):
        cfg_copy.vision.model = str(overrides["vision_model_override"])
    if overrides.get("max_citations_override") is not None:
        cfg_copy.chat.max_citations_to_annotate = int(overrides["max_citations_override"])
    return cfg_copy


def ask(history: list[ChatMessage], question: str, *, overrides: dict | None = None, on_status=None, config=None) -> ChatMessage:
    cfg = _apply_overrides(config or load_config(), overrides)
    try:
        return answerer.ask(history, question, config=cfg, on_status=on_status)
    except Exception:  # pragma: no cover - runtime safeguard
        logger.exception("Unexpected error while answering")
        return ChatMessage(role="assistant", content=ERROR_REPLY)


__all__ = ["ask"]
