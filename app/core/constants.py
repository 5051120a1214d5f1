"""Core constants: search field names, paging limits, and shared literal values.

Single source of truth for the index field layout and the defaults used
when resolving search and listing parameters.
"""

# Paging
DEFAULT_PAGE = 1
SEARCH_DEFAULT_SIZE = 5
LISTING_DEFAULT_SIZE = 10
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100
SUGGEST_SIZE = 5
# Elasticsearch index.max_result_window: from + size may not exceed it
SEARCH_MAX_WINDOW = 10_000
# Listing offsets stay well inside a signed 64-bit SQL OFFSET
LISTING_MAX_WINDOW = 2_147_483_647

# Prices are 32-bit signed in the index mapping and the catalog_item table
MAX_PRICE = 2_147_483_647

# Price filter defaults (smallest currency unit)
DEFAULT_MIN_PRICE = 0.0
DEFAULT_MAX_PRICE = 1_000_000_000.0

# Documents rated strictly above this get a relevance boost
RATING_BOOST_THRESHOLD = 4.0

# Index fields
FIELD_NAME = "name"
FIELD_DESCRIPTION = "description"
FIELD_CATEGORY = "category"
FIELD_CATEGORY_RAW = "category.raw"
FIELD_PRICE = "price"
FIELD_RATING = "rating"
FIELD_NAME_AUTOCOMPLETE = "name.auto_complete"

# (field, boost) pairs for the full-text multi_match
SEARCH_FIELD_BOOSTS: tuple[tuple[str, int], ...] = (
    (FIELD_NAME, 3),
    (FIELD_DESCRIPTION, 1),
    (FIELD_CATEGORY, 2),
)

# search_as_you_type root plus its generated shingle sub-fields
SUGGEST_FIELDS: tuple[str, ...] = (
    FIELD_NAME_AUTOCOMPLETE,
    f"{FIELD_NAME_AUTOCOMPLETE}._2gram",
    f"{FIELD_NAME_AUTOCOMPLETE}._3gram",
)

FUZZINESS_AUTO = "AUTO"
