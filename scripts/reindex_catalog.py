"""Rebuild the search index from the catalog_item table.

Usage:
    python -m scripts.reindex_catalog [--batch-size N]
Creates the index with its mapping if it does not exist, then upserts a
document for every catalog item. Existing documents are overwritten.
"""

import argparse
import asyncio
import sys

import app.infrastructure.persistence.database as database
from app.core.config import get_settings
from app.domain.exceptions import CatalogException
from app.infrastructure.container import build_container
from app.infrastructure.search.elasticsearch_store import ElasticsearchIndexStore
from app.shared.telemetry.logging import setup_logging


async def main(batch_size: int) -> int:
    """Reindex every item. Return a process exit code."""
    settings = get_settings()
    setup_logging()
    index_store = ElasticsearchIndexStore.from_settings(settings)
    try:
        await index_store.ensure_index()
        container = build_container(settings, database.get_session_factory(), index_store)
        container.reindex_service.batch_size = batch_size
        written = await container.reindex_service.reindex_all()
    except CatalogException as e:
        print(f"Reindex failed: {e.message} {e.details}", file=sys.stderr)
        return 1
    finally:
        await index_store.close()
        await database.dispose_engine()
    print(f"Done. Indexed {written} item(s) into {settings.elasticsearch_index}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--batch-size", type=int, default=500)
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.batch_size)))
