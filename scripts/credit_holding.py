"""Credit an external ledger holding so its owner can fund escrows.

Usage::

    python scripts/credit_holding.py alice 1000
    python scripts/credit_holding.py alice 500 --mint FORGEmint111...
"""
from __future__ import annotations

import argparse
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

from forge_escrow.core.logging import setup_logging  # noqa: E402
from forge_escrow.config import get_settings  # noqa: E402
from forge_escrow.db import get_sessionmaker, init_engine  # noqa: E402
from forge_escrow.services.assets import parse_asset  # noqa: E402
from forge_escrow.services.holdings import credit_holding  # noqa: E402


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Credit an external holding on the escrow ledger.")
    parser.add_argument("owner", help="address owning the holding")
    parser.add_argument("amount", type=int, help="units to add (positive integer)")
    parser.add_argument("--mint", default=None, help="token mint; omit for the native coin")
    parser.add_argument("--actor", default="script:credit_holding", help="actor recorded in the audit log")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    asset = parse_asset("token" if args.mint else "native", args.mint)
    init_engine()
    db = get_sessionmaker()()
    try:
        holding = credit_holding(db, args.owner, asset, args.amount, actor=args.actor)
        print(f"Credited {args.amount} to {holding.owner} [{holding.asset_key}]; balance is now {holding.balance}")
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
