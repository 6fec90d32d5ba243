"""
Command-line interface for the link checker.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence
from urllib.parse import urlparse

from dotenv import load_dotenv

from deadlinks.config import CrawlConfig, config_from_env
from deadlinks.core import crawl
from deadlinks.errors import ConfigError
from deadlinks.models import CrawlResult

AUTO_OUTPUT = "auto"


def generate_output_path(base_url: str) -> Path:
    """Generate output path: reports/{hostname}_{datetime}.json"""
    parsed = urlparse(base_url)
    hostname = parsed.hostname or "unknown"
    # Sanitize hostname for filename (replace dots with underscores)
    hostname_safe = hostname.replace(".", "_")
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return Path("reports") / f"{hostname_safe}_{timestamp}.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deadlinks",
        description="Crawl a website and report broken links. Settings may also come from the environment or a .env file.",
    )
    parser.add_argument("base_url", nargs="?", help="Start URL (default: $BASE_URL)")
    parser.add_argument("--timeout", type=int, help="Request timeout in milliseconds (default: 5000)")
    parser.add_argument("--silent", action="store_true", default=None, help="Do not stream every checked link")
    parser.add_argument(
        "--ignore-query",
        nargs="+",
        metavar="NAME",
        help="Skip links carrying any of these query parameters (e.g. utm_source)",
    )
    parser.add_argument("--ignore-external", action="store_true", default=None, help="Do not check links to other hosts")
    parser.add_argument("--include-images", action="store_true", default=None, help="Also check <img src> links")
    parser.add_argument("--webhook", dest="webhook_url", help="Webhook URL notified about broken links")
    parser.add_argument("--user-agent", help="User-Agent header")
    parser.add_argument(
        "--out",
        nargs="?",
        const=AUTO_OUTPUT,
        help="Write broken links as JSON to this path, '-' for stdout (default path: reports/)",
    )
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def build_config(args: argparse.Namespace) -> CrawlConfig:
    """Environment values overridden by command-line flags."""
    config = config_from_env().merged(
        base_url=args.base_url,
        timeout_ms=args.timeout,
        silent=args.silent,
        ignore_query=tuple(args.ignore_query) if args.ignore_query else None,
        ignore_external=args.ignore_external,
        include_images=args.include_images,
        webhook_url=args.webhook_url,
        user_agent=args.user_agent,
    )
    return config.validate()


def write_report(result: CrawlResult, out: str, base_url: str, pretty: bool = False) -> Optional[Path]:
    """Write broken links as JSON. Returns the path written, None for stdout."""
    payload = [asdict(link) for link in result.broken_links]
    json_text = json.dumps(payload, ensure_ascii=False, indent=2 if pretty else None)

    if out == "-":
        print(json_text)
        return None

    output_path = generate_output_path(base_url) if out == AUTO_OUTPUT else Path(out)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json_text, encoding="utf-8")
    return output_path


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the link checker CLI."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
    except ConfigError as e:
        sys.stderr.write(f"error: {e}\n")
        return 1

    try:
        result = crawl(config)
    except KeyboardInterrupt:
        sys.stderr.write("\nInterrupted\n")
        return 130

    if args.out:
        output_path = write_report(result, args.out, config.base_url, pretty=args.pretty)
        if output_path is not None:
            sys.stderr.write(f"Results written to: {output_path}\n")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
