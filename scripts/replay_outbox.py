"""Replay pending index_outbox rows through the index synchronizer.

Usage:
    python -m scripts.replay_outbox [--limit N] [--until-empty]
Rows stay pending when the process stopped between commit and index write,
or when the index write failed. Each pass publishes them in sequence order.

This process has its own synchronizer, so it does not see deletes the API
is applying at the same time. The relay covers that: after upserting a
created item it checks the item still exists and removes the document if
not. A delete committed after that check publishes its own ItemDeleted,
which lands after the upsert.
"""

import argparse
import asyncio
import sys

import app.infrastructure.persistence.database as database
from app.core.config import get_settings
from app.infrastructure.container import build_container
from app.infrastructure.search.elasticsearch_store import ElasticsearchIndexStore
from app.shared.telemetry.logging import setup_logging


async def main(limit: int, until_empty: bool) -> int:
    """Run one replay pass (or passes until nothing is left). Return a process exit code."""
    settings = get_settings()
    setup_logging()
    index_store = ElasticsearchIndexStore.from_settings(settings)
    dispatched = failed = skipped = 0
    try:
        container = build_container(settings, database.get_session_factory(), index_store)
        while True:
            result = await container.outbox_relay.replay_pending(limit)
            dispatched += result.dispatched
            failed += result.failed
            skipped += result.skipped
            settled = result.dispatched + result.skipped
            # A pass that failed anything would pick the same rows up again
            if not until_empty or result.failed or settled < limit:
                break
    finally:
        await index_store.close()
        await database.dispose_engine()
    print(f"Done. Dispatched {dispatched}, skipped {skipped}, failed {failed}")
    return 1 if failed else 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--limit", type=int, default=100)
    parser.add_argument("--until-empty", action="store_true")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.limit, args.until_empty)))
