# src/pinecone_kit/observability/names.py

"""Standard metric names for pinecone-kit.

Duration metrics are in milliseconds.
"""

# ============================================================================
# Data plane
# ============================================================================

# Duration
PINECONE_UPSERT_DURATION = "pinecone_upsert_duration"
PINECONE_QUERY_DURATION = "pinecone_query_duration"
PINECONE_FETCH_DURATION = "pinecone_fetch_duration"
PINECONE_UPDATE_DURATION = "pinecone_update_duration"
PINECONE_DELETE_DURATION = "pinecone_delete_duration"
PINECONE_DESCRIBE_INDEX_STATS_DURATION = "pinecone_describe_index_stats_duration"

# Gauges
PINECONE_UPSERT_BATCH_SIZE = "pinecone_upsert_batch_size"


# ============================================================================
# Control plane
# ============================================================================

# Duration
PINECONE_CREATE_INDEX_DURATION = "pinecone_create_index_duration"
PINECONE_DELETE_INDEX_DURATION = "pinecone_delete_index_duration"


# ============================================================================
# Shared counters
# ============================================================================

PINECONE_OPERATIONS_TOTAL = "pinecone_operations_total"
PINECONE_ERRORS_TOTAL = "pinecone_errors_total"
