"""Standalone cron runner for the email outbox.

Drains queued emails (conflict escalations to league managers) outside the
request path, so API responses never wait on the email provider.

Usage:
    python -m app.cli.send_emails [--batch-size N]

Exit codes:
    0 - Success
    1 - Failure (check logs for details)
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone

from app.services.email_worker import send_pending_emails
from app.utils.db_async import SessionLocal, dispose_engine

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("send_emails")


async def main(batch_size: int) -> int:
    """Send one batch of pending emails.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    start_time = datetime.now(timezone.utc)
    logger.info("Draining email outbox (batch size %d)", batch_size)

    try:
        async with SessionLocal() as db:
            sent = await send_pending_emails(db, batch_size=batch_size)

        elapsed = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.info(f"Outbox run complete in {elapsed:.1f}s: {sent} sent")
        return 0

    except Exception as e:
        elapsed = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.error(f"Outbox run failed after {elapsed:.1f}s: {e}", exc_info=True)
        return 1

    finally:
        await dispose_engine()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Send pending outbox emails")
    parser.add_argument("--batch-size", type=int, default=50)
    return parser.parse_args(argv)


if __name__ == "__main__":
    args = parse_args()
    exit_code = asyncio.run(main(args.batch_size))
    sys.exit(exit_code)
