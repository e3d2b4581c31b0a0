from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from . import epub as epub_util
from .config import ParserConfig, load_config
from .errors import EpubError
from .log import configure_logging


def _config_from_args(args: argparse.Namespace) -> ParserConfig:
    config = load_config()
    if args.cache_dir:
        config = config.model_copy(
            update={"cache_dir": Path(args.cache_dir).expanduser()}
        )
    if args.keep:
        config = config.model_copy(update={"cleanup_on_exit": False})
    return config


def _chapter_payload(parsed: epub_util.ParsedEpub) -> dict:
    return {
        "package": parsed.package_path.relative_to(parsed.root).as_posix(),
        "navigation": parsed.navigation_path.relative_to(parsed.root).as_posix(),
        "chapters": [
            {
                "id": chapter.id,
                "title": chapter.title,
                "play_order": chapter.play_order,
                "resources": [
                    {
                        "id": item.id,
                        "href": item.path,
                        "media_type": item.media_type,
                    }
                    for item in chapter.manifest_items
                ],
            }
            for chapter in parsed.chapters
        ],
    }


def _run(args: argparse.Namespace, action) -> int:
    input_path = Path(args.input)
    if not input_path.exists():
        sys.stderr.write(f"Input file not found: {input_path}\n")
        return 2
    try:
        with epub_util.EpubParser(input_path, _config_from_args(args)) as parser:
            parsed = parser.process()
            return int(action(parsed))
    except EpubError as exc:
        sys.stderr.write(f"{exc.message}\n")
        return 2
    except ValidationError as exc:
        sys.stderr.write(f"Invalid configuration: {exc}\n")
        return 2


def _chapters(args: argparse.Namespace) -> int:
    def action(parsed: epub_util.ParsedEpub) -> int:
        if not parsed.chapters:
            sys.stderr.write("No chapters found in EPUB.\n")
        if args.json:
            payload = _chapter_payload(parsed)
            print(json.dumps(payload, ensure_ascii=False, indent=2))
            return 0
        for chapter in parsed.chapters:
            print(
                f"{chapter.id}\t{chapter.play_order}\t"
                f"{len(chapter.manifest_items)}\t{chapter.title}"
            )
        return 0

    return _run(args, action)


def _html(args: argparse.Namespace) -> int:
    def action(parsed: epub_util.ParsedEpub) -> int:
        html = parsed.html(args.chapter_id, merge=args.merge)
        if args.out:
            out_path = Path(args.out)
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_text(html, encoding="utf-8")
            print(f"Wrote {args.chapter_id} to {out_path}")
            return 0
        sys.stdout.write(html)
        if not html.endswith("\n"):
            sys.stdout.write("\n")
        return 0

    return _run(args, action)


def _text(args: argparse.Namespace) -> int:
    def action(parsed: epub_util.ParsedEpub) -> int:
        print(parsed.chapter_text(args.chapter_id))
        return 0

    return _run(args, action)


def _add_common(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("input", help="Path to an .epub file")
    sub.add_argument(
        "--cache-dir",
        help="Directory to unpack into (default: <temp>/epubUnzip)",
    )
    sub.add_argument(
        "--keep",
        action="store_true",
        help="Keep the unpacked directory after the command finishes",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="folio", description="Inspect EPUB chapters and their resources"
    )
    parser.add_argument("--log-json", action="store_true", help="Emit JSON logs")
    parser.add_argument(
        "--verbose", action="store_true", help="Log debug events to stderr"
    )
    subparsers = parser.add_subparsers(dest="command")

    chapters = subparsers.add_parser("chapters", help="List chapters")
    _add_common(chapters)
    chapters.add_argument("--json", action="store_true", help="Print JSON")
    chapters.set_defaults(func=_chapters)

    html = subparsers.add_parser("html", help="Print a chapter's HTML")
    _add_common(html)
    html.add_argument("chapter_id", help="Chapter id (navPoint id)")
    html.add_argument(
        "--merge",
        action="store_true",
        help="Merge all HTML bodies into the first document",
    )
    html.add_argument("--out", help="Write HTML to this file instead of stdout")
    html.set_defaults(func=_html)

    text = subparsers.add_parser("text", help="Print a chapter's plain text")
    _add_common(text)
    text.add_argument("chapter_id", help="Chapter id (navPoint id)")
    text.set_defaults(func=_text)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    configure_logging(
        json_format=args.log_json,
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
