"""Index settings and mapping for catalog search documents.

name carries a search_as_you_type sub-field (name.auto_complete, with
its _2gram and _3gram shingles) for suggestions; category carries a
keyword sub-field (category.raw) for exact filtering.
"""

from typing import Any

from app.core.constants import FIELD_CATEGORY, FIELD_DESCRIPTION, FIELD_NAME, FIELD_PRICE, FIELD_RATING

NAME_ANALYZER = "products_name_analyzer"
DESCRIPTION_ANALYZER = "products_description_analyzer"
CATEGORY_ANALYZER = "products_category_analyzer"

_TEXT_FILTERS = ["lowercase", "asciifolding"]

INDEX_SETTINGS: dict[str, Any] = {
    "number_of_shards": 1,
    "number_of_replicas": 0,
    "analysis": {
        "analyzer": {
            NAME_ANALYZER: {
                "type": "custom",
                "tokenizer": "standard",
                "filter": _TEXT_FILTERS,
            },
            DESCRIPTION_ANALYZER: {
                "type": "custom",
                "tokenizer": "standard",
                "filter": [*_TEXT_FILTERS, "stop"],
            },
            CATEGORY_ANALYZER: {
                "type": "custom",
                "tokenizer": "standard",
                "filter": _TEXT_FILTERS,
            },
        }
    },
}

INDEX_MAPPINGS: dict[str, Any] = {
    "properties": {
        "id": {"type": "keyword"},
        FIELD_NAME: {
            "type": "text",
            "analyzer": NAME_ANALYZER,
            "fields": {
                "auto_complete": {"type": "search_as_you_type", "analyzer": NAME_ANALYZER},
            },
        },
        FIELD_DESCRIPTION: {"type": "text", "analyzer": DESCRIPTION_ANALYZER},
        FIELD_PRICE: {"type": "integer"},
        FIELD_RATING: {"type": "double"},
        FIELD_CATEGORY: {
            "type": "text",
            "analyzer": CATEGORY_ANALYZER,
            "fields": {"raw": {"type": "keyword"}},
        },
    }
}
