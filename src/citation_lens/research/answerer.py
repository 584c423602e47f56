"""One chat turn: answer, screenshot the cited page, highlight the cited content."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from citation_lens.config import load_config
from citation_lens.domain.errors import CitationLensError
from citation_lens.domain.models import ActionResult, ChatMessage, Citation, Highlight, LoadingState
from citation_lens.llm.perplexity_client import PerplexityClient
from citation_lens.logging import get_logger, get_run_id
from citation_lens.research import citations as citation_utils
from citation_lens.vision import locator
from citation_lens.web.screenshot_client import ScreenshotClient

logger = get_logger(__name__)

ERROR_REPLY = "Sorry, I encountered an error. Please try again."
HIGHLIGHT_EXPLANATION = "Found using Gemini Vision"

StatusCallback = Callable[[LoadingState], None]


def _notify(on_status: Optional[StatusCallback], status: str, message: str = "") -> None:
    if on_status is not None:
        on_status(LoadingState(status=status, message=message))


def build_messages(history: List[ChatMessage], question: str, system_prompt: str) -> List[dict]:
    messages = [{"role": "system", "content": system_prompt}]
    messages.extend(m.to_api() for m in history if m.role in {"user", "assistant"})
    messages.append({"role": "user", "content": question})
    return messages


def fetch_answer(messages: List[dict], *, config=None, client: Optional[PerplexityClient] = None) -> ActionResult:
    cfg = config or load_config()
    answer_client = client or PerplexityClient.from_config(cfg)
    try:
        response = answer_client.chat(messages, temperature=cfg.answer.temperature, top_p=cfg.answer.top_p)
    except CitationLensError as exc:
        logger.error("Error calling Perplexity API", extra={"error": str(exc)})
        return ActionResult.fail("Failed to call Perplexity API", error=str(exc))
    return ActionResult.ok("Successfully called Perplexity API", data=response)


def capture_screenshot(url: str, *, selector: Optional[str] = None, config=None, client: Optional[ScreenshotClient] = None) -> ActionResult:
    cfg = config or load_config()
    shot_client = client or ScreenshotClient.from_config(cfg)
    try:
        data_url = shot_client.take(url, selector=selector)
    except CitationLensError as exc:
        logger.error("Screenshot failed", extra={"url": url, "error": str(exc)})
        return ActionResult.fail("Failed to take screenshot", error=str(exc))
    return ActionResult.ok("Successfully took screenshot", data=data_url)


def annotate_citation(
    url: str,
    passage: str,
    *,
    config=None,
    screenshot_client: Optional[ScreenshotClient] = None,
    vision_client=None,
    on_status: Optional[StatusCallback] = None,
) -> Optional[Citation]:
    """Screenshot ``url`` and highlight ``passage`` on it; None when either step fails."""
    cfg = config or load_config()
    _notify(on_status, "taking-screenshot", "Taking screenshot of cited webpage...")
    shot = capture_screenshot(url, config=cfg, client=screenshot_client)
    if not shot.is_success or not shot.data:
        return None

    _notify(on_status, "processing-citations", "Processing citations with AI...")
    located = locator.find_content_coordinates(
        shot.data, passage, config=cfg, client=vision_client
    )
    if not located.is_success or not located.data:
        logger.info("No highlight for citation", extra={"url": url, "reason": located.message})
        return None

    text = located.data["text"]
    return Citation(
        url=url,
        relevant_content=text,
        explanation=HIGHLIGHT_EXPLANATION,
        screenshot_url=shot.data,
        highlights=[Highlight(text=text, bbox=box) for box in located.data["coordinates"]],
    )


def ask(
    history: List[ChatMessage],
    question: str,
    *,
    config=None,
    answer_client: Optional[PerplexityClient] = None,
    screenshot_client: Optional[ScreenshotClient] = None,
    vision_client=None,
    on_status: Optional[StatusCallback] = None,
) -> ChatMessage:
    """Run one turn and return the assistant message.

    Screenshot and vision failures leave the citation without highlights; an
    answer failure yields the generic error reply.
    """
    cfg = config or load_config()
    run_id = get_run_id()
    _notify(on_status, "thinking", "Thinking...")
    try:
        messages = build_messages(history, question, cfg.answer.system_prompt)
        answer = fetch_answer(messages, config=cfg, client=answer_client)
        if not answer.is_success or answer.data is None:
            return ChatMessage(role="assistant", content=ERROR_REPLY)

        response = answer.data
        indexes = citation_utils.cited_indexes(response.content, response.citations)
        logger.info("Answer received", extra={"run_id": run_id, "citations": len(response.citations), "cited": indexes})

        contents: Dict[int, Citation] = {}
        for index in indexes[: max(0, cfg.chat.max_citations_to_annotate)]:
            url = response.citations[index - 1]
            citation = annotate_citation(
                url,
                citation_utils.cited_passage(response.content, index),
                config=cfg,
                screenshot_client=screenshot_client,
                vision_client=vision_client,
                on_status=on_status,
            )
            if citation is not None:
                contents[index] = citation
                logger.info("Citation highlighted", extra={"run_id": run_id, "index": index, "boxes": len(citation.highlights)})

        return ChatMessage(
            role=response.role or "assistant",
            content=response.content,
            citations=list(response.citations),
            citation_contents=contents,
        )
    finally:
        _notify(on_status, "idle")


__all__ = ["ask", "annotate_citation", "capture_screenshot", "fetch_answer", "build_messages", "ERROR_REPLY"]
