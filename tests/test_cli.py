import json
from types import SimpleNamespace

from citation_lens import cli
from citation_lens.domain.models import ActionResult, BoundingBox, ChatMessage


def _patch_runtime(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)
    monkeypatch.setattr(cli, "load_config", lambda path=None: SimpleNamespace(
        logging=SimpleNamespace(level="INFO"),
        app=SimpleNamespace(environment="test"),
    ))
    monkeypatch.setattr(cli, "validate_settings", lambda cfg: SimpleNamespace(ok=True, missing=[], message=""))


def test_parser_has_commands():
    parser = cli.build_parser()
    args = parser.parse_args(["locate", "shot.png", "alpha", "beta", "--model", "gemini-2.0-flash"])
    assert args.terms == ["alpha", "beta"]
    assert args.model == "gemini-2.0-flash"
    assert parser.parse_args(["fields", "shot.png", "Extract totals", "--locate"]).locate is True


def test_locate_single_term(monkeypatch, tmp_path, capsys):
    _patch_runtime(monkeypatch)
    image = tmp_path / "shot.png"
    image.write_bytes(b"png-bytes")
    seen = {}

    def fake_find(img, content, config=None, model=None):
        seen["image"] = img
        seen["content"] = content
        return ActionResult.ok("ok", data={"text": content, "coordinates": [BoundingBox(0.1, 0.2, 0.3, 0.4)]})

    monkeypatch.setattr(cli.locator, "find_content_coordinates", fake_find)
    code = cli.main(["locate", str(image), "alpha"])
    out = json.loads(capsys.readouterr().out)
    assert code == 0
    assert out["is_success"] is True
    assert out["data"]["coordinates"][0]["x0"] == 0.1
    assert seen["image"].startswith("data:image/png;base64,")
    assert seen["content"] == "alpha"


def test_ask_error_reply_exit_code(monkeypatch, capsys):
    _patch_runtime(monkeypatch)
    monkeypatch.setattr(cli.answerer, "ask", lambda history, q, config=None: ChatMessage("assistant", cli.answerer.ERROR_REPLY))
    assert cli.main(["ask", "q"]) == 1
    assert json.loads(capsys.readouterr().out)["content"] == cli.answerer.ERROR_REPLY


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 0
    assert "usage" in capsys.readouterr().out.lower()
