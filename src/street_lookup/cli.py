import argparse
import json
import sys

from street_lookup.app.build import build
from street_lookup.config.models import LookupModel
from street_lookup.domain.indexes.spatial_indexes import EmptyIndexError, NonFiniteQueryError
from street_lookup.io.lookup_logging import _default_json_logger


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="street-lookup",
        description="Nearest-vertex and place-name lookups over a preloaded street graph",
    )
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--config", help="JSON file holding a lookup config")
    src.add_argument("--graph", help="Graph file (osmnx-style x/y/name node attributes)")
    ap.add_argument(
        "--fmt",
        choices=["pickle", "graphml", "json"],
        help="Format of --graph, pickle unless given (ignored with --config)",
    )
    ap.add_argument("--verbose", action="store_true", help="Emit JSON build/query logs on stderr")

    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("closest", help="Id of the connected vertex nearest LON LAT")
    p.add_argument("lon", type=float)
    p.add_argument("lat", type=float)

    p = sub.add_parser("prefix", help="Location names starting with TEXT")
    p.add_argument("text")

    p = sub.add_parser("locate", help="Records for every location named NAME")
    p.add_argument("name")

    p = sub.add_parser("serve", help="Serve the lookups over HTTP")
    p.add_argument("--host")
    p.add_argument("--port", type=int)
    return ap


def _load_config(args) -> dict:
    if args.config:
        with open(args.config, encoding="utf-8") as f:
            return json.load(f)
    ref = {"file": args.graph}
    if args.fmt:
        ref["fmt"] = args.fmt
    return {"graph": ref}


def _stderr_logger(model: LookupModel):
    # stdout carries the JSON result only
    logger = _default_json_logger(
        "street_lookup.cli",
        level="DEBUG" if model.log.debug else model.log.level,
        stream=sys.stderr,
    )
    logger.propagate = False
    return logger


def run_cli(args) -> int:
    model = LookupModel.model_validate(_load_config(args))
    use_logging = args.verbose or args.command == "serve"
    app = build(
        model, use_logging=use_logging, logger=_stderr_logger(model) if use_logging else None
    )
    lookup = app.lookup

    if args.command == "closest":
        try:
            out = {"id": lookup.closest(args.lon, args.lat)}
        except (EmptyIndexError, NonFiniteQueryError) as e:
            print(f"[cli] {e}", file=sys.stderr)
            return 1
    elif args.command == "prefix":
        out = {"names": lookup.locations_by_prefix(args.text)}
    elif args.command == "locate":
        out = {"locations": [r.as_dict() for r in lookup.locations_by_exact_name(args.name)]}
    elif args.command == "serve":
        import uvicorn

        from street_lookup.app.http import create_app

        uvicorn.run(
            create_app(lookup),
            host=args.host or app.config.serve.host,
            port=args.port or app.config.serve.port,
        )
        return 0
    else:
        raise ValueError(f"Unknown command {args.command!r}")

    print(json.dumps(out))
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return run_cli(args)
    except FileNotFoundError as e:
        print(f"ERROR: graph not found: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
