from __future__ import annotations

import argparse
import asyncio
import json
import logging
from dataclasses import asdict

from .bench import run_probe
from .config import SizeConfig
from .constants import DEFAULT_SIZE
from .server import serve


def cmd_serve(args: argparse.Namespace) -> int:
    serve(args.host, args.port, SizeConfig.from_env(), base_path=args.base_path)
    return 0


def cmd_probe(args: argparse.Namespace) -> int:
    results = asyncio.run(run_probe(args.url, size_bytes=args.size_bytes))
    for r in results:
        payload = {"role": "probe", **asdict(r)}
        print(json.dumps(payload, indent=2) if args.json else payload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="speedprobe", description="HTTP download/upload throughput probe."
    )
    p.add_argument(
        "--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    srv = sub.add_parser(
        "serve",
        help="serve /download and /upload (limits from DEFAULT_SIZE, MAX_DOWNLOAD, MAX_UPLOAD)",
    )
    srv.add_argument("--host", default="0.0.0.0")
    srv.add_argument("--port", type=int, default=8080)
    srv.add_argument("--base-path", default="", help="mount prefix, e.g. /speed")
    srv.set_defaults(func=cmd_serve)

    probe = sub.add_parser("probe", help="measure download and upload throughput against a server")
    probe.add_argument("url", help="server base url, e.g. http://127.0.0.1:8080/speed")
    probe.add_argument("--size-bytes", type=int, default=DEFAULT_SIZE)
    probe.add_argument("--json", action="store_true")
    probe.set_defaults(func=cmd_probe)

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
