"""Search index store backed by Elasticsearch."""

from app.infrastructure.search.elasticsearch_store import ElasticsearchIndexStore
from app.infrastructure.search.index_mapping import INDEX_MAPPINGS, INDEX_SETTINGS

__all__ = ["ElasticsearchIndexStore", "INDEX_MAPPINGS", "INDEX_SETTINGS"]
