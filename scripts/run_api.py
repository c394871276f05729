#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging

import uvicorn

from firebase_crud.api.app import create_app
from firebase_crud.firebase_app import configure_firebase
from firebase_crud.settings import load_settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the Firestore document API.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8100)
    parser.add_argument("--log-level", default="info")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    settings = load_settings()
    services = configure_firebase(settings)
    app = create_app(firestore_client=services.firestore, settings=settings)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
