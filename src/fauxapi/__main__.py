from __future__ import annotations

import argparse
import json
import time
from pathlib import Path

from .config import Settings, configure_logging
from .fixtures import schema_from_fixtures
from .runtime.server import run


def main() -> None:
    settings = Settings.from_env()

    p = argparse.ArgumentParser(prog="fauxapi", description="fauxapi: in-memory mock REST backend")
    p.add_argument("--fixtures", type=Path, help="JSON file mapping collection names to lists of records")
    p.add_argument("--host", default=settings.host)
    p.add_argument("--port", type=int, default=settings.port or 8000)
    p.add_argument("--namespace", default=settings.namespace)
    p.add_argument("--log-level", default=settings.log_level)
    args = p.parse_args()

    configure_logging(args.log_level)

    data = {}
    if args.fixtures is not None:
        data = json.loads(args.fixtures.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            p.error("--fixtures must contain a JSON object of collections")

    schema = schema_from_fixtures(data)
    srv = run(schema, host=args.host, port=args.port, namespace=args.namespace, log_level=args.log_level)
    print(srv.url)

    # Block forever (so it behaves like a normal CLI server)
    try:
        while True:
            time.sleep(3600)
    except KeyboardInterrupt:
        srv.stop()


if __name__ == "__main__":
    main()
