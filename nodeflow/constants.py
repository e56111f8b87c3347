"""Centralized constants for the node catalog and execution context."""

# =============================================================================
# MANIFEST CACHE
# =============================================================================

MANIFEST_CACHE_KEY = "node_manifest"
MANIFEST_CACHE_TTL = 3600  # seconds

# Keys of every manifest entry, in order
MANIFEST_FIELDS = (
    "id",
    "name",
    "version",
    "category",
    "icon",
    "description",
    "properties",
    "inputs",
    "outputs",
    "tags",
    "supports_async",
    "max_execution_time",
)

# =============================================================================
# CATALOG QUERIES
# =============================================================================

RECOMMENDATION_LIMIT = 5

# =============================================================================
# EXECUTION CONTEXT
# =============================================================================

DEFAULT_EXECUTION_TIMEOUT = 300  # seconds
DEFAULT_CONNECTION_INDEX = "0"
