from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, List, Optional

from .. import __version__
from ..errors import ClientError
from ..httpclient import HttpRequestError
from ..pineconeclient import ClientEventType, Metric, PineconeClient, PineconeSettings
from .app import AppOptions, ClientFactory, run_app

log = logging.getLogger("pineconekit.cli")

OPTIONS = AppOptions(
    name="pineconekit",
    version=__version__,
    description="Manage Pinecone indexes from the command line.",
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="pineconekit", description=OPTIONS.description)
    p.add_argument("--debug", action="store_true", help="Verbose debug logging to stderr")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List index names")

    d = sub.add_parser("describe", help="Describe an index")
    d.add_argument("name")

    c = sub.add_parser("create", help="Create an index and wait until it is ready")
    c.add_argument("name")
    c.add_argument("--dimension", type=int, default=None, help="Vector dimension (default: PINECONE_DEF_DIM)")
    c.add_argument("--metric", choices=[m.value for m in Metric], default=None)
    c.add_argument("--no-wait", action="store_true", help="Return right after the create request")

    r = sub.add_parser("delete", help="Delete an index")
    r.add_argument("name")

    return p.parse_args(argv)


def _log_event(event) -> None:
    log.info("event %s", event.to_dict())


async def _dispatch(args: argparse.Namespace, client: PineconeClient) -> Any:
    for event_type in ClientEventType:
        client.on(event_type, _log_event)

    if args.command == "list":
        return await client.list_indexes()
    if args.command == "describe":
        return await client.describe_index(args.name)
    if args.command == "create":
        metric = Metric(args.metric) if args.metric else None
        await client.create_index(args.name, args.dimension, metric, wait=not args.no_wait)
        return {"index": args.name, "created": True, "ready": not args.no_wait}
    if args.command == "delete":
        await client.delete_index(args.name)
        return {"index": args.name, "deleted": True}
    raise ValueError(f"unknown command {args.command!r}")


def main(
    argv: Optional[List[str]] = None,
    *,
    settings: Optional[PineconeSettings] = None,
    client_factory: ClientFactory = PineconeClient,
) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )

    try:
        result = asyncio.run(
            run_app(OPTIONS, lambda client: _dispatch(args, client), settings, client_factory=client_factory)
        )
    except ClientError as e:
        print(json.dumps(e.to_payload()), file=sys.stderr)
        return 1
    except HttpRequestError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, default=str))
    return 0
