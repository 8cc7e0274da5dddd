#!/usr/bin/env python3

import argparse
from collections.abc import Sequence

from keibaslip.runtime.logging import LOG_LEVEL_NAMES, parse_log_level, set_log_level


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Betting slip OCR utilities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  parse [file]               Extract tickets from OCR text (stdin if omitted)
  scan <image>               OCR a slip photo and extract tickets
  serve [--host] [--port]    Start the extraction server

Environment:
  PERPLEXITY_API_KEY         Enables AI-assisted extraction
  GCV_API_KEY                Enables image OCR (scan, /vision, /scan)
  KEIBASLIP_LOG_LEVEL        Default log level (overridden by --log-level)
""",
    )

    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVEL_NAMES,
        default=None,
        help="Log level for this run (default: KEIBASLIP_LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser("parse", help="Extract tickets from OCR text")
    parse_parser.add_argument("file", nargs="?", default=None, help="Text file with OCR output ('-' or omitted: stdin)")
    parse_parser.add_argument("--no-ai", action="store_true", help="Skip AI-assisted extraction")
    parse_parser.add_argument("--json", action="store_true", help="Print JSON instead of a summary")

    scan_parser = subparsers.add_parser("scan", help="OCR a slip photo and extract tickets")
    scan_parser.add_argument("image", help="Path to slip image")
    scan_parser.add_argument("--no-ai", action="store_true", help="Skip AI-assisted extraction")
    scan_parser.add_argument("--json", action="store_true", help="Print JSON instead of a summary")

    serve_parser = subparsers.add_parser("serve", help="Start the extraction server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to (default: 8080)")

    args = parser.parse_args(argv)

    if args.log_level:
        set_log_level(parse_log_level(args.log_level))

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "parse":
        from keibaslip.cli.slip import cmd_parse

        return cmd_parse(args)
    elif args.command == "scan":
        from keibaslip.cli.slip import cmd_scan

        return cmd_scan(args)
    elif args.command == "serve":
        from keibaslip.cli.slip import cmd_serve

        return cmd_serve(args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
