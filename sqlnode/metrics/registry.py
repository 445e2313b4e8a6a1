from prometheus_client import Counter, Histogram

STATEMENT_TOTAL = Counter(
    "sqlnode_statement_total",
    "Statements dispatched to the database",
    ["table", "op_type", "status"],
)

STATEMENT_LATENCY_SECONDS = Histogram(
    "sqlnode_statement_latency_seconds",
    "Latency of a single dispatched statement",
    ["table", "op_type"],
)

ROWS_AFFECTED_TOTAL = Counter(
    "sqlnode_rows_affected_total",
    "Rows reported affected by dispatched statements",
    ["table", "op_type"],
)
