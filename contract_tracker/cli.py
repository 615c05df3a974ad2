"""Command line entry point: serve the contracts API or list contracts."""
import argparse
import json
import sys
from typing import List, Optional

from contract_tracker.core.config import load_store_config
from contract_tracker.core.errors import ContractTrackerError
from contract_tracker.core.headers import COLUMN_MAP
from contract_tracker.core.logging import configure_logging
from contract_tracker.store.records import ContractStore
from contract_tracker.store.tables import MemoryTable, sheets_opener


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI entry point."""

    parser = argparse.ArgumentParser(description="Spreadsheet-backed contract tracker")
    parser.add_argument("--log-level", help="Override LOG_LEVEL for this run")
    subcommands = parser.add_subparsers(dest="command", required=True)

    serve = subcommands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    serve.add_argument("--port", type=int, default=8000, help="Port to listen on")
    serve.add_argument(
        "--memory",
        action="store_true",
        help="Serve an empty in-memory table instead of the configured Google Sheet",
    )

    listing = subcommands.add_parser("list", help="Print contracts from the configured sheet")
    listing.add_argument("--json", action="store_true", help="Emit JSON instead of a summary table")
    return parser


def build_store(memory: bool = False) -> ContractStore:
    """Open the configured sheet, or an empty in-memory table for local runs."""

    config = load_store_config()
    if memory:
        return ContractStore(MemoryTable(list(COLUMN_MAP)).opener(), config)
    return ContractStore(sheets_opener(config), config)


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from contract_tracker.api.app import create_app

    uvicorn.run(create_app(build_store(memory=args.memory)), host=args.host, port=args.port)
    return 0


def _list(args: argparse.Namespace) -> int:
    contracts = build_store().list_all()
    if args.json:
        print(json.dumps([contract.to_dict() for contract in contracts], ensure_ascii=False, indent=2))
        return 0
    for contract in contracts:
        print(
            f"{contract.cui}\t{contract.status}\t{contract.execution_progress:g}%\t"
            f"{contract.contractor}\t{contract.educational_institution}"
        )
    print(f"{len(contracts)} contracts")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint for running the tracker from the command line."""

    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    handlers = {"serve": _serve, "list": _list}
    try:
        return handlers[args.command](args)
    except ContractTrackerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
