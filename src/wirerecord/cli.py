"""Command-line interface for wirerecord."""

import argparse
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from . import __version__
from .charset import charset_from_content_type, detect_charset
from .errors import ErrorKind, ResponseError, render_message
from .headers import parse_header_block
from .logging_config import setup_logging
from .models.config import DecodeConfig
from .record import ResponseRecord, build_response

EXIT_OK = 0
EXIT_DECODE_ERROR = 1
EXIT_BAD_INPUT = 2


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="wirerecord",
        description="Inspect HTTP header dumps and check how a response body decodes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show the exchange chain of a header dump (curl -D, libcurl header buffer)
  wirerecord headers.txt

  # Check whether a body decodes into ASCII without loss
  wirerecord headers.txt --body body.bin --target ascii

  # Fetch a URL and inspect the result
  wirerecord --fetch https://example.com --show-body
        """,
    )

    parser.add_argument(
        "headers_file",
        nargs="?",
        type=Path,
        help="File holding the raw header dump of one request",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    source_group = parser.add_argument_group("input")
    source_group.add_argument("--body", type=Path, default=None, help="File holding the raw body")
    source_group.add_argument("--url", default="", help="Final URL to record")
    source_group.add_argument(
        "--status",
        type=int,
        default=None,
        help="Status code (default: taken from the final status line)",
    )
    source_group.add_argument(
        "--redirects",
        type=int,
        default=None,
        help="Redirect count (default: number of 3xx exchanges)",
    )
    source_group.add_argument(
        "--fetch",
        metavar="URL",
        default=None,
        help="Fetch URL with requests instead of reading files",
    )
    source_group.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Timeout in seconds for --fetch (default: 30)",
    )

    decode_group = parser.add_argument_group("decoding")
    decode_group.add_argument("--config", type=Path, default=None, help="YAML config file")
    decode_group.add_argument(
        "--default-charset",
        default=None,
        help="Charset to assume when Content-Type declares none",
    )
    decode_group.add_argument(
        "--target",
        default=None,
        help="Encoding decoded text must fit in (default: utf-8)",
    )
    decode_group.add_argument(
        "--show-body",
        action="store_true",
        help="Print the decoded body (lossy if strict decoding fails)",
    )

    output_group = parser.add_argument_group("output")
    output_group.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    output_group.add_argument("--quiet", "-q", action="store_true", help="Only report errors")
    output_group.add_argument("--log-file", type=Path, default=None, help="Log file path")

    return parser


def _load_config(args: argparse.Namespace) -> DecodeConfig:
    base = DecodeConfig.from_yaml_file(args.config) if args.config else DecodeConfig()
    overrides: dict = {}
    if args.default_charset:
        overrides["default_charset"] = args.default_charset
    if args.target:
        overrides["target_encoding"] = args.target
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    elif args.quiet:
        overrides["log_level"] = "ERROR"
    if args.log_file:
        overrides["log_file"] = args.log_file
    return DecodeConfig.model_validate({**base.model_dump(), **overrides})


def _record_from_files(args: argparse.Namespace, config: DecodeConfig) -> ResponseRecord:
    raw_headers = args.headers_file.read_bytes()
    body = args.body.read_bytes() if args.body else None

    exchanges = parse_header_block(raw_headers)
    status = args.status
    if status is None:
        status = exchanges[-1].status if exchanges else 0
    redirects = args.redirects
    if redirects is None:
        redirects = sum(1 for ex in exchanges if 300 <= ex.status < 400)

    return build_response(args.url, status, redirects, raw_headers, body, config.default_charset)


def _record_from_fetch(args: argparse.Namespace, config: DecodeConfig) -> ResponseRecord:
    import requests

    from .adapters import record_from_requests

    response = requests.get(args.fetch, timeout=args.timeout)
    return record_from_requests(response, default_charset=config.default_charset)


def _print_record(console: Console, record: ResponseRecord) -> None:
    chain = Table(title="Exchanges")
    chain.add_column("#", justify="right")
    chain.add_column("Status line")
    chain.add_column("Headers", justify="right")
    for index, exchange in enumerate(record.exchanges, start=1):
        chain.add_row(str(index), exchange.status_line, str(len(exchange.header_lines)))
    console.print(chain)

    headers = Table(title="Final headers")
    headers.add_column("Name")
    headers.add_column("Value")
    for name, value in record.headers.items():
        values = value if isinstance(value, tuple) else [value]
        for item in values:
            headers.add_row(name, item if isinstance(item, str) else repr(item))
    console.print(headers)

    console.print(f"URL: {record.url or '-'}")
    console.print(f"Status: {record.status} ({'ok' if record.ok else 'error'})")
    console.print(f"Redirects: {record.redirect_count}")
    declared = charset_from_content_type(record.get_header("Content-Type"))
    console.print(f"Declared charset: {declared or '-'}")
    console.print(f"Effective charset: {record.charset or 'binary'}")
    if record.body is not None:
        console.print(f"Sniffed charset: {detect_charset(record.body) or '-'}")
    console.print(f"Body: {'streamed' if record.body is None else f'{len(record.body)} bytes'}")


def run_inspect(args: argparse.Namespace) -> int:
    """Inspect a header dump (or fetched URL) and report on decoding."""
    console = Console()

    if not args.fetch and args.headers_file is None:
        console.print("[red]Error:[/red] a headers file or --fetch URL is required")
        return EXIT_BAD_INPUT

    try:
        config = _load_config(args)
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return EXIT_BAD_INPUT

    logger = setup_logging(
        config.log_level,
        log_file=str(config.log_file) if config.log_file else None,
    )

    try:
        if args.fetch:
            record = _record_from_fetch(args, config)
        else:
            record = _record_from_files(args, config)
    except ResponseError as e:
        console.print(f"[red]Malformed headers:[/red] {render_message(e)}")
        return EXIT_BAD_INPUT
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return EXIT_BAD_INPUT

    if not args.quiet:
        _print_record(console, record)

    target = config.target_encoding
    try:
        text = record.decoded_body(target)
    except ResponseError as e:
        logger.debug("Strict decoding failed", exc_info=True)
        console.print(f"[red]Not decodable into {target}:[/red] {render_message(e)}")
        if args.show_body and e.kind is ErrorKind.NON_REPRESENTABLE_BODY:
            console.print(record.inspectable_body(target, config.placeholder), markup=False)
        return EXIT_DECODE_ERROR

    if not args.quiet:
        console.print(f"[green]Body decodes losslessly into {target}[/green]")
    if args.show_body and text is not None:
        console.print(text, markup=False, highlight=False)
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    return run_inspect(args)


if __name__ == "__main__":
    sys.exit(main())
