"""
Launch the report parsing API:

    python -m battle_report.web.serve --port 8000

Probes for a free port starting at ``--port`` and runs the FastAPI app under
uvicorn.
"""
from __future__ import annotations

import argparse
import logging
import socket
import sys

from battle_report.options import ParserOptions
from battle_report.web.main import create_app

logger = logging.getLogger(__name__)


def find_available_port(host: str, start_port: int, *, max_tries: int = 50) -> tuple[int, bool]:
    """
    Probe sequential ports starting from start_port.
    Returns (port, did_fallback).
    """
    if max_tries < 1:
        raise ValueError("max_tries must be >= 1")

    last_error: OSError | None = None
    for offset in range(max_tries):
        port = start_port + offset
        try:
            with socket.create_server((host, port), reuse_port=False):
                return port, offset != 0
        except OSError as exc:
            last_error = exc
            continue

    msg = f"No available port found starting at {start_port} after {max_tries} attempts"
    if last_error is not None:
        msg = f"{msg} (last error: {last_error})"
    raise RuntimeError(msg)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m battle_report.web.serve",
        description="Serve the battle report parsing API.",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Host to listen on (default: %(default)s).")
    parser.add_argument("--port", type=int, default=8000, help="Starting port (default: %(default)s).")
    parser.add_argument(
        "--allow-empty-tables",
        action="store_true",
        help="Accept tables that declare 0 rows.",
    )
    parser.add_argument("--reload", action="store_true", help="Enable uvicorn --reload (default options only).")
    args = parser.parse_args(argv)
    if args.reload and args.allow_empty_tables:
        parser.error("--reload serves the default app and cannot be combined with --allow-empty-tables")

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        chosen_port, did_fallback = find_available_port(args.host, args.port, max_tries=50)
    except (RuntimeError, ValueError) as exc:
        print(f"Failed to select a free port: {exc}", file=sys.stderr)
        return 2

    if did_fallback:
        logger.info("Serving on %s:%d (selected because %d was in use)", args.host, chosen_port, args.port)
    else:
        logger.info("Serving on %s:%d", args.host, chosen_port)

    import uvicorn

    try:
        if args.reload:
            uvicorn.run("battle_report.web.main:app", host=args.host, port=chosen_port, reload=True)
        else:
            app = create_app(ParserOptions(allow_empty_tables=args.allow_empty_tables))
            uvicorn.run(app, host=args.host, port=chosen_port)
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
