"""CLI entry point for the index checker."""

import argparse
import asyncio
import json
import logging
import os
import sys

from .manager import LinkListManager
from .models import IndexStatus

STATUS_LABELS = {
    IndexStatus.PENDING: "pending",
    IndexStatus.CHECKING: "checking",
    IndexStatus.INDEXED: "indexed",
    IndexStatus.NOT_INDEXED: "not indexed",
}


def _ensure_utf8() -> None:
    """Ensure stdout/stderr use UTF-8 on Windows to avoid charmap errors."""
    if sys.platform == "win32":
        os.environ.setdefault("PYTHONUTF8", "1")
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8", errors="replace")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="index-checker",
        description="Build site: queries for a list of URLs and check whether they are indexed",
    )
    parser.add_argument(
        "inputs",
        nargs="*",
        default=["-"],
        help="Text files with one URL per line ('-' or nothing reads stdin)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Run the index check for every link (starts a headless browser)",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="OpenAI API key for LLM verdicts (or set OPENAI_API_KEY env var)",
    )
    parser.add_argument(
        "--search-url",
        default=None,
        help="Search endpoint the site: query is sent to (default: Google)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Page timeout in seconds for each check (default: 30)",
    )
    parser.add_argument(
        "--output", "-o",
        choices=["table", "raw", "json"],
        default="table",
        help="Output format; 'raw' prints one INDEXED/NO/... line per link (default: table)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def read_inputs(paths: list[str]) -> str:
    chunks: list[str] = []
    for path in paths:
        if path == "-":
            chunks.append(sys.stdin.read())
        else:
            with open(path, encoding="utf-8") as fh:
                chunks.append(fh.read())
    return "\n".join(chunks)


def render_table(manager: LinkListManager) -> str:
    lines: list[str] = []
    for index, record in enumerate(manager, 1):
        lines.append(f"{index:>4}. [{STATUS_LABELS[record.status]:<11}] {record.original_url}")
        lines.append(f"      {record.query_url}")
    stats = manager.stats()
    lines.append(f"{'='*60}")
    lines.append(
        f"  Total: {stats.total}  Indexed: {stats.indexed}  Not indexed: {stats.not_indexed}"
    )
    return "\n".join(lines)


def render_json(manager: LinkListManager) -> str:
    payload = {
        "links": [record.model_dump(mode="json") for record in manager],
        "stats": manager.stats().model_dump(),
    }
    return json.dumps(payload, indent=2)


async def run_checks(manager: LinkListManager, checker) -> None:
    try:
        await manager.check_all()
    finally:
        await checker.close()


def main(argv=None) -> None:
    _ensure_utf8()
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        raw_text = read_inputs(args.inputs)
    except OSError as e:
        parser.error(f"cannot read input: {e}")

    if args.check:
        # Imported lazily so listing queries never needs a browser stack
        from .checker import SearchIndexChecker
        from .config import CheckerConfig

        config = CheckerConfig(page_timeout_ms=int(args.timeout * 1000))
        if args.search_url:
            config.search_url = args.search_url
        api_key = args.api_key or os.getenv("OPENAI_API_KEY")
        checker = SearchIndexChecker(config, api_token=api_key)
    else:
        checker = None

    manager = LinkListManager(checker=checker)
    manager.input_text = raw_text
    manager.submit_input()

    if not len(manager):
        print("No URLs found in input.", file=sys.stderr)
        sys.exit(1)

    if checker is not None:
        asyncio.run(run_checks(manager, checker))

    if args.output == "raw":
        print(manager.export_text())
    elif args.output == "json":
        print(render_json(manager))
    else:
        print(render_table(manager))


if __name__ == "__main__":
    main()
