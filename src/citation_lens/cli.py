"""Command line interface for citation-lens."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import List, Optional

from citation_lens import __version__
from citation_lens.config import load_config, validate_settings
from citation_lens.logging import configure_logging, get_logger, get_run_id
from citation_lens.research import answerer
from citation_lens.services import health_service
from citation_lens.utils.imaging import to_data_url
from citation_lens.vision import locator

logger = get_logger(__name__)

_MIME_BY_SUFFIX = {".png": "image/png", ".jpg": "image/jpeg", ".jpeg": "image/jpeg", ".webp": "image/webp"}


def _jsonable(value):
    if is_dataclass(value):
        return asdict(value)
    return str(value)


def _print(payload) -> None:
    print(json.dumps(payload, indent=2, default=_jsonable))


def _read_image(path: str) -> str:
    image_path = Path(path)
    mime = _MIME_BY_SUFFIX.get(image_path.suffix.lower(), "image/jpeg")
    return to_data_url(image_path.read_bytes(), mime)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Citation Lens CLI")
    parser.add_argument("--version", action="version", version=f"citation-lens {__version__}")
    parser.add_argument("--config", help="Path to a YAML config file")
    subparsers = parser.add_subparsers(dest="command")

    ask_parser = subparsers.add_parser("ask", help="Ask a question and highlight the cited source")
    ask_parser.add_argument("question", help="Question to ask")
    ask_parser.set_defaults(func=_ask_handler)

    locate_parser = subparsers.add_parser("locate", help="Locate content in an image")
    locate_parser.add_argument("image", help="Path to an image file")
    locate_parser.add_argument("terms", nargs="+", help="Content to locate; several terms use one multi-phrase prompt")
    locate_parser.add_argument("--model", help="Vision model override")
    locate_parser.set_defaults(func=_locate_handler)

    fields_parser = subparsers.add_parser("fields", help="Extract label/value fields from an image")
    fields_parser.add_argument("image", help="Path to an image file")
    fields_parser.add_argument("task", help="Description of the fields to extract")
    fields_parser.add_argument("--locate", action="store_true", help="Also locate each value in the image")
    fields_parser.add_argument("--model", help="Vision model override")
    fields_parser.set_defaults(func=_fields_handler)

    doctor_parser = subparsers.add_parser("doctor", help="Check configuration and upstream reachability")
    doctor_parser.add_argument("--network", action="store_true", help="Also check that upstream hosts respond")
    doctor_parser.set_defaults(func=_doctor_handler)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    config = load_config(Path(args.config) if args.config else None)
    configure_logging(config.logging.level)
    check = validate_settings(config)
    logger.info(
        "Starting CLI",
        extra={"run_id": get_run_id(), "command": args.command, "env": config.app.environment, "config_ok": check.ok},
    )
    if not check.ok:
        logger.warning(check.message, extra={"missing": check.missing})
    return args.func(args, config) or 0


def _ask_handler(args: argparse.Namespace, config) -> int:
    message = answerer.ask([], args.question, config=config)
    _print(message)
    return 0 if message.content != answerer.ERROR_REPLY else 1


def _locate_handler(args: argparse.Namespace, config) -> int:
    image = _read_image(args.image)
    if len(args.terms) == 1:
        result = locator.find_content_coordinates(image, args.terms[0], config=config, model=args.model)
    else:
        result = locator.find_phrases(image, args.terms, config=config, model=args.model)
    _print(result.to_dict())
    return 0 if result.is_success else 1


def _fields_handler(args: argparse.Namespace, config) -> int:
    image = _read_image(args.image)
    result = locator.extract_fields(image, args.task, config=config, model=args.model)
    if result.is_success and args.locate:
        result = locator.match_fields_to_locations(image, result.data, config=config, model=args.model)
    _print(result.to_dict())
    return 0 if result.is_success else 1


def _doctor_handler(args: argparse.Namespace, config) -> int:
    results = health_service.run_all_checks(config, include_network=args.network)
    _print(results)
    return 0 if all(r.get("ok") for r in results.values()) else 1


if __name__ == "__main__":
    sys.exit(main())
