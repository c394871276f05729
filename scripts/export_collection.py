#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from firebase_crud.firebase_app import configure_firebase
from firebase_crud.settings import load_settings
from firebase_crud.storage.firestore_model import FirestoreModel


LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export every document of a Firestore collection as JSON.")
    parser.add_argument("collection", help="Base collection name.")
    parser.add_argument(
        "--nested",
        nargs="*",
        default=[],
        help="Alternating document id / sub-collection name segments below the collection.",
    )
    parser.add_argument("--recursive", action="store_true", help="Descend into sub-collections.")
    parser.add_argument("--indent", type=int, default=2)
    return parser.parse_args(argv)


async def export_collection(model: FirestoreModel, *, recursive: bool) -> dict[str, Any]:
    return (await model.read_all(recursive=recursive)).unwrap()


def main(argv: list[str] | None = None, *, client: Any | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    args = parse_args(argv)
    if client is None:
        client = configure_firebase(load_settings()).firestore

    model = FirestoreModel(args.collection, None, args.nested, client=client)
    LOGGER.info("Exporting %s (recursive=%s)", model.path.document_path(), args.recursive)
    try:
        documents = asyncio.run(export_collection(model, recursive=args.recursive))
    except Exception as exc:
        LOGGER.error("Export failed: %s", exc)
        return 1

    json.dump(documents, sys.stdout, ensure_ascii=False, indent=args.indent, default=str)
    sys.stdout.write("\n")
    LOGGER.info("Exported %d documents", len(documents))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
