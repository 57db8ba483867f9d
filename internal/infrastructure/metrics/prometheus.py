"""
Prometheus Metrics for Product Catalog Service.

Defines all metrics for monitoring service performance and health.
"""

from prometheus_client import Counter, Histogram

# API metrics
HTTP_REQUESTS_TOTAL = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status_code']
)

HTTP_REQUEST_DURATION = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Product use case metrics
PRODUCT_OPERATIONS_TOTAL = Counter(
    'product_operations_total',
    'Product use case executions by outcome',
    ['operation', 'outcome']  # save: created, rejected; update: updated, not_found
)

# DB metrics
DB_QUERY_DURATION = Histogram(
    'db_query_duration_seconds',
    'Database query duration',
    ['operation'],  # select, insert, update, commit
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0]
)

HEALTH_CHECK_STATUS = Counter(
    'health_checks_total',
    'Health check results',
    ['status']  # healthy, unhealthy
)
