"""Command-line admin tool for inspecting and wiping a document store."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import Settings, get_settings
from .constants import COLLECTION_KEYS
from .services import clear_all_data, collection_counts, reset_database
from .storage import DocumentStore, StoreWriteError, open_store


def _resolve_settings(args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    if args.backend:
        overrides["storage_backend"] = args.backend
    if args.database_url:
        overrides["database_url"] = args.database_url
    if args.data_dir:
        overrides["storage_dir"] = Path(args.data_dir)
    settings = get_settings()
    return settings.model_copy(update=overrides) if overrides else settings


def _run_stats(store: DocumentStore, args: argparse.Namespace) -> int:
    for name, count in collection_counts(store).items():
        print(f"{name:<16}{count}")
    return 0


def _run_dump(store: DocumentStore, args: argparse.Namespace) -> int:
    print(json.dumps(store.get_collection(args.collection), indent=4, ensure_ascii=False))
    return 0


def _run_clear(store: DocumentStore, args: argparse.Namespace) -> int:
    removed = clear_all_data(store)
    print(f"Cleared {len(removed)} keys: {', '.join(removed) or '(none)'}")
    return 0


def _run_reset(store: DocumentStore, args: argparse.Namespace) -> int:
    if not args.yes:
        print("Refusing to wipe every key without --yes.", file=sys.stderr)
        return 2
    removed = reset_database(store)
    print(f"Reset storage, removed {removed} keys")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect or wipe the local document store.")
    parser.add_argument("--backend", choices=["sql", "file", "memory"], help="Override STORAGE_BACKEND.")
    parser.add_argument("--database-url", help="Override DATABASE_URL for the sql backend.")
    parser.add_argument("--data-dir", help="Override STORAGE_DIR for the file backend.")
    subcommands = parser.add_subparsers(dest="command", required=True)

    stats = subcommands.add_parser("stats", help="Print the record count of every collection.")
    stats.set_defaults(func=_run_stats)

    dump = subcommands.add_parser("dump", help="Print one collection as JSON.")
    dump.add_argument("collection", choices=COLLECTION_KEYS)
    dump.set_defaults(func=_run_dump)

    clear = subcommands.add_parser("clear", help="Remove the app collections and the session record.")
    clear.set_defaults(func=_run_clear)

    reset = subcommands.add_parser("reset", help="Remove every key in the backend.")
    reset.add_argument("--yes", action="store_true", help="Confirm the wipe.")
    reset.set_defaults(func=_run_reset)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = _resolve_settings(args)
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    with open_store(settings) as store:
        try:
            return args.func(store, args)
        except StoreWriteError as exc:
            print(f"Storage write failed: {exc}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    raise SystemExit(main())
