"""CLI entrypoint for the EIP.tools site."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from lookup_table import build_lookup_table, lookup_table_path, write_lookup_table
from renderer import render_proposal


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Serve and render EIP/ERC proposal pages")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the web server")
    serve.add_argument("--host", default=os.getenv("SERVER_HOST", "127.0.0.1"), help="Bind address")
    serve.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")), help="Bind port")
    serve.add_argument("--reload", action="store_true", help="Reload on source changes")

    build = subparsers.add_parser(
        "build-lookup",
        help="Regenerate the static proposal lookup table from GitHub",
    )
    build.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to write the table (default: the table the server loads)",
    )

    render = subparsers.add_parser("render", help="Render one proposal page to HTML")
    render.add_argument("proposal", help="Proposal reference, e.g. 1559, eip-1559 or erc-20.md")
    render.add_argument("--output", type=Path, default=None, help="Output file (default: stdout)")

    return parser.parse_args(argv)


def serve(host: str, port: int, reload: bool) -> None:
    import uvicorn  # noqa: PLC0415

    logging.info("Serving on http://%s:%s", host, port)
    uvicorn.run("web_app:app", host=host, port=port, reload=reload)


def build_lookup(output: Path | None) -> Path:
    """Rebuild the lookup table and write it to ``output``."""
    entries = build_lookup_table()
    return write_lookup_table(entries, output or lookup_table_path())


def render(proposal: str, output: Path | None) -> None:
    html = render_proposal(proposal)
    if output is None:
        sys.stdout.write(html)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    logging.info("Wrote %s to %s", proposal, output)


def main(argv: list[str] | None = None) -> None:
    """Initialize config and dispatch the selected command."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)

    if args.command == "serve":
        serve(args.host, args.port, args.reload)
    elif args.command == "build-lookup":
        path = build_lookup(args.output)
        logging.info("Lookup table written to %s", path)
    else:
        render(args.proposal, args.output)


if __name__ == "__main__":
    main()
