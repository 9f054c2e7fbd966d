#!/usr/bin/env python3

import argparse
from collections.abc import Callable, Sequence


def _coerce_exit_code(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1


def _run_command(command: Callable[[argparse.Namespace], None], args: argparse.Namespace) -> int:
    """
    Normalize command handlers that call sys.exit().

    This keeps process termination centralized in this module's entrypoint.
    """
    try:
        command(args)
    except SystemExit as exc:
        return _coerce_exit_code(exc.code)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Receipt draft utilities CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  scan <ocr.json> [--json]   Parse a saved recognizer result into a draft
  serve [--host] [--port]    Start the parse server

Notes:
  Parser rule overrides are read from $RECEIPTDRAFT_CONFIG_DIR/parser_rules.toml
  (default: ./config/parser_rules.toml) unless --rules is given.
""",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # scan command
    scan_parser = subparsers.add_parser("scan", help="Parse a saved recognizer result")
    scan_parser.add_argument("ocr_json", help="Path to recognizer output (JSON)")
    scan_parser.add_argument("--json", action="store_true", help="Print the draft as JSON")
    scan_parser.add_argument("--rules", default=None, help="Path to parser_rules.toml override")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start the parse server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to (default: 8080)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "scan":
        from receiptdraft.cli.receipt import cmd_scan

        return _run_command(cmd_scan, args)
    if args.command == "serve":
        from receiptdraft.cli.receipt import cmd_serve

        return _run_command(cmd_serve, args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
