from prometheus_client import Counter, Gauge, Histogram

GATEWAY_EXECUTIONS_TOTAL = Counter(
    "querygate_executions_total",
    "Gateway calls by operation and outcome",
    ["operation", "outcome"],
)

GATEWAY_EXECUTION_LATENCY_SECONDS = Histogram(
    "querygate_execution_latency_seconds",
    "Gateway call latency in seconds, including pool acquisition",
    ["operation"],
)

POOL_CONNECTIONS_IN_USE = Gauge(
    "querygate_pool_in_use",
    "Connections currently checked out of the pool",
)
