#!/usr/bin/env python3
"""
Expire stale match requests.

Moves PENDING matches with no activity for N days to EXPIRED, after which
neither couple can send messages in them. Meant to run from cron.

Example usage:
    python scripts/expire_matches.py
    python scripts/expire_matches.py --days 14
    python scripts/expire_matches.py --config /etc/matchrimoney/config.yaml
"""
import argparse
import logging
import sys
from pathlib import Path

# Ensure we can import from the project root
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from core.config_loader import load_config
from database.database import DatabaseManager
from database.uow import marketplace_uow
from web.backend.services.match_service import MatchService

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Expire stale PENDING matches")
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Inactivity threshold in days (default: matching.pending_expiry_days)"
    )
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = load_config(args.config)
    db_manager = DatabaseManager(config.database)

    try:
        with marketplace_uow(db_manager) as repos:
            count = MatchService(repos.db, config.matching).expire_stale_matches(args.days)
    finally:
        db_manager.dispose()

    logger.info(f"Expired {count} stale matches")
    return 0


if __name__ == "__main__":
    sys.exit(main())
