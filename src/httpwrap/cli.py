"""Command-line interface for httpwrap."""

import argparse
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console

from . import __version__
from .files import image_from_bytes, write_file
from .http import BlockingHttpClient, NetworkError
from .http.types import METHODS
from .logging_config import setup_logging
from .models.config import ClientConfig

EXIT_OK = 0
EXIT_REQUEST_FAILED = 1
EXIT_USAGE = 2


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="httpwrap",
        description="Send a single HTTP request and print the response body",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Simple GET
  httpwrap GET https://api.example.com/items

  # JSON POST with a bearer token from the environment
  httpwrap POST https://api.example.com/items -H "Content-Type: application/json" \\
      -d '{"name": "x"}' -b '$API_TOKEN'

  # Trust a private CA and save the body to a file
  httpwrap GET https://internal.example/report.pdf --cacert ca.pem -o report.pdf
        """,
    )

    parser.add_argument(
        "method",
        type=str.upper,
        choices=METHODS,
        help="HTTP method",
    )
    parser.add_argument("url", help="Request URL")

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="YAML client configuration file",
    )

    # Request settings
    request_group = parser.add_argument_group("request settings")
    request_group.add_argument(
        "--header",
        "-H",
        action="append",
        default=[],
        metavar="'NAME: VALUE'",
        help="Extra header (repeatable)",
    )
    body_group = request_group.add_mutually_exclusive_group()
    body_group.add_argument("--data", "-d", default=None, help="Request body")
    body_group.add_argument("--data-file", type=Path, default=None, help="Read request body from file")
    request_group.add_argument(
        "--bearer",
        "-b",
        default=None,
        metavar="TOKEN",
        help="Bearer token ($VAR and ${VAR} are expanded)",
    )

    # Network settings
    network_group = parser.add_argument_group("network settings")
    network_group.add_argument("--cacert", type=Path, default=None, help="Extra root CA certificate (PEM or DER)")
    network_group.add_argument("--timeout", "-t", type=float, default=None, help="Total timeout in seconds")
    network_group.add_argument("--proxy", default=None, help="HTTP/HTTPS proxy URL")
    network_group.add_argument("--user-agent", default=None, help="Custom User-Agent")

    # Output settings
    output_group = parser.add_argument_group("output settings")
    output_group.add_argument("--output", "-o", type=Path, default=None, help="Write body to file")
    output_group.add_argument(
        "--image",
        action="store_true",
        help="Decode the body as an image and print its format and size",
    )
    output_group.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    output_group.add_argument("--quiet", "-q", action="store_true", help="Only print errors")
    output_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (overrides --verbose and --quiet)",
    )

    return parser


def parse_header(raw: str) -> tuple[str, str]:
    """Split a 'Name: value' header argument."""
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise ValueError(f"Invalid header {raw!r}, expected 'Name: value'")
    return name.strip(), value.strip()


def build_config(args: argparse.Namespace) -> ClientConfig:
    """Merge the optional YAML config with command-line overrides."""
    base = ClientConfig.from_yaml_file(args.config) if args.config else ClientConfig()
    config_kwargs = base.model_dump(exclude_none=True)

    headers = dict(config_kwargs.get("headers", {}))
    for raw in args.header:
        name, value = parse_header(raw)
        for key in [k for k in headers if k.lower() == name.lower()]:
            del headers[key]
        headers[name] = value
    config_kwargs["headers"] = headers

    if args.bearer is not None:
        config_kwargs["bearer_token"] = args.bearer
    if args.cacert is not None:
        config_kwargs["root_ca"] = args.cacert
    if args.timeout is not None:
        config_kwargs["timeout"] = args.timeout
    if args.proxy:
        config_kwargs["proxy"] = args.proxy
    if args.user_agent:
        config_kwargs["user_agent"] = args.user_agent

    if args.log_level:
        config_kwargs["log_level"] = args.log_level
    elif args.verbose:
        config_kwargs["log_level"] = "DEBUG"
    elif args.quiet:
        config_kwargs["log_level"] = "ERROR"

    return ClientConfig(**config_kwargs)


def run_request(args: argparse.Namespace) -> int:
    """Send the request described by the arguments."""
    console = Console(stderr=True)

    try:
        config = build_config(args)
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return EXIT_USAGE

    setup_logging(level=config.log_level, log_file=config.log_file)

    data: Optional[bytes] = None
    if args.data is not None:
        data = args.data.encode("utf-8")
    elif args.data_file is not None:
        try:
            data = args.data_file.read_bytes()
        except OSError as e:
            console.print(f"[red]Cannot read body:[/red] {e}")
            return EXIT_USAGE

    try:
        client = BlockingHttpClient(config)
    except NetworkError as e:
        console.print(f"[red]Certificate error:[/red] {e.message}")
        return EXIT_USAGE

    with client:
        result = client.request(args.method, args.url, data)

    if not result.ok:
        console.print(f"[red]Request failed[/red] (status {result.status_code}): {result.message}")
        return EXIT_REQUEST_FAILED

    if not args.quiet:
        console.print(f"[green]{result.status_code}[/green] {args.method} {args.url} ({len(result.content)} bytes)")

    if args.image:
        image = image_from_bytes(result.content)
        if image is None:
            console.print("[red]Response body is not a decodable image[/red]")
            return EXIT_REQUEST_FAILED
        console.print(f"Image: {image.format} {image.width}x{image.height}")

    if args.output:
        if not write_file(args.output, result.content):
            console.print(f"[red]Could not write[/red] {args.output}")
            return EXIT_REQUEST_FAILED
        if not args.quiet:
            console.print(f"Saved to {args.output}")
    elif not args.image:
        sys.stdout.buffer.write(result.content)
        sys.stdout.flush()

    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    return run_request(args)


if __name__ == "__main__":
    sys.exit(main())
