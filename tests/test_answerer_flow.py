from types import SimpleNamespace

from citation_lens.domain.errors import ConfigError
from citation_lens.domain.models import BoundingBox, ChatMessage
from citation_lens.llm.perplexity_client import AnswerResponse, PerplexityError
from citation_lens.research import answerer
from citation_lens.web.screenshot_client import ScreenshotError


def make_cfg(max_citations=1):
    return SimpleNamespace(
        answer=SimpleNamespace(temperature=0.7, top_p=0.9, system_prompt="Be concise."),
        vision=SimpleNamespace(reject_malformed_boxes=False),
        chat=SimpleNamespace(max_citations_to_annotate=max_citations),
    )


class FakeAnswer:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.messages = None

    def chat(self, messages, temperature=None, top_p=None):
        self.messages = messages
        if self.error:
            raise self.error
        return self.response


class FakeScreenshot:
    def __init__(self, error=None, data_url="data:image/jpg;base64,SU1H"):
        self.error = error
        self.data_url = data_url
        self.urls = []

    def take(self, url, selector=None):
        self.urls.append(url)
        if self.error:
            raise self.error
        return self.data_url


class FakeVision:
    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    def generate(self, prompt, image_b64, mime_type="image/jpeg"):
        self.calls.append((prompt, image_b64, mime_type))
        return self.reply


def test_cited_answer_gets_one_highlight():
    response = AnswerResponse(content="It is 828 metres tall [1].", citations=["https://example.com/burj"])
    shots = FakeScreenshot()
    vision = FakeVision("[500, 250, 750, 500]")
    statuses = []

    msg = answerer.ask(
        [],
        "How tall is the Burj Khalifa?",
        config=make_cfg(),
        answer_client=FakeAnswer(response),
        screenshot_client=shots,
        vision_client=vision,
        on_status=lambda s: statuses.append(s.status),
    )

    assert msg.role == "assistant"
    assert msg.citations == ["https://example.com/burj"]
    assert list(msg.citation_contents) == [1]
    citation = msg.citation_contents[1]
    assert citation.url == "https://example.com/burj"
    assert citation.screenshot_url == "data:image/jpg;base64,SU1H"
    assert len(citation.highlights) == 1
    assert citation.highlights[0].bbox == BoundingBox(0.25, 0.5, 0.5, 0.75)
    assert citation.highlights[0].text == "It is 828 metres tall."
    assert shots.urls == ["https://example.com/burj"]
    # jpg alias from the screenshot API is sent as image/jpeg
    assert vision.calls[0][1] == "SU1H"
    assert vision.calls[0][2] == "image/jpeg"
    assert statuses == ["thinking", "taking-screenshot", "processing-citations", "idle"]


def test_history_and_system_prompt_are_sent():
    fake = FakeAnswer(AnswerResponse(content="ok"))
    history = [ChatMessage("user", "hi"), ChatMessage("assistant", "hello")]
    answerer.ask(history, "next?", config=make_cfg(), answer_client=fake)
    assert fake.messages == [
        {"role": "system", "content": "Be concise."},
        {"role": "user", "content": "hi"},
        {"role": "assistant", "content": "hello"},
        {"role": "user", "content": "next?"},
    ]


def test_answer_without_markers_skips_screenshot():
    shots = FakeScreenshot()
    response = AnswerResponse(content="No citations here.", citations=["https://example.com"])
    msg = answerer.ask([], "q", config=make_cfg(), answer_client=FakeAnswer(response), screenshot_client=shots)
    assert msg.citation_contents == {}
    assert shots.urls == []


def test_out_of_range_marker_is_ignored():
    shots = FakeScreenshot()
    response = AnswerResponse(content="Claim [3].", citations=["https://example.com"])
    msg = answerer.ask([], "q", config=make_cfg(), answer_client=FakeAnswer(response), screenshot_client=shots)
    assert msg.citation_contents == {}
    assert shots.urls == []


def test_screenshot_failure_degrades_gracefully():
    response = AnswerResponse(content="Claim [1].", citations=["https://example.com"])
    vision = FakeVision("[1, 2, 3, 4]")
    msg = answerer.ask(
        [],
        "q",
        config=make_cfg(),
        answer_client=FakeAnswer(response),
        screenshot_client=FakeScreenshot(error=ScreenshotError("Screenshot API error: 500")),
        vision_client=vision,
    )
    assert msg.content == "Claim [1]."
    assert msg.citation_contents == {}
    assert vision.calls == []


def test_vision_without_coordinates_degrades_gracefully():
    response = AnswerResponse(content="Claim [1].", citations=["https://example.com"])
    msg = answerer.ask(
        [],
        "q",
        config=make_cfg(),
        answer_client=FakeAnswer(response),
        screenshot_client=FakeScreenshot(),
        vision_client=FakeVision("sorry"),
    )
    assert msg.citation_contents == {}
    assert msg.citations == ["https://example.com"]


def test_answer_failure_returns_error_reply():
    msg = answerer.ask([], "q", config=make_cfg(), answer_client=FakeAnswer(error=PerplexityError("Perplexity API error: 500")))
    assert msg.role == "assistant"
    assert msg.content == answerer.ERROR_REPLY


def test_fetch_answer_reports_missing_key():
    res = answerer.fetch_answer([], config=make_cfg(), client=FakeAnswer(error=ConfigError("Missing PERPLEXITY_API_KEY environment variable")))
    assert res.is_success is False
    assert res.message == "Failed to call Perplexity API"
    assert "PERPLEXITY_API_KEY" in res.error


def test_max_citations_limits_annotation():
    response = AnswerResponse(content="A [1]. B [2].", citations=["https://a", "https://b"])
    shots = FakeScreenshot()
    msg = answerer.ask(
        [],
        "q",
        config=make_cfg(max_citations=2),
        answer_client=FakeAnswer(response),
        screenshot_client=shots,
        vision_client=FakeVision("[1, 2, 3, 4]"),
    )
    assert shots.urls == ["https://a", "https://b"]
    assert sorted(msg.citation_contents) == [1, 2]


def test_screenshot_mime_type_reaches_vision_call():
    response = AnswerResponse(content="It is 828 metres tall [1].", citations=["https://example.com/burj"])
    vision = FakeVision("[500, 250, 750, 500]")

    msg = answerer.ask(
        [],
        "How tall?",
        config=make_cfg(),
        answer_client=FakeAnswer(response),
        screenshot_client=FakeScreenshot(data_url="data:image/png;base64,UE5H"),
        vision_client=vision,
    )

    assert vision.calls[0][1] == "UE5H"
    assert vision.calls[0][2] == "image/png"
    assert msg.citation_contents[1].screenshot_url == "data:image/png;base64,UE5H"
