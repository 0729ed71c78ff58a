"""Prometheus metrics for monitoring"""
from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry

registry = CollectorRegistry()

request_count = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status'],
    registry=registry
)

request_duration = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    registry=registry
)

guard_decisions = Counter(
    'guard_decisions_total',
    'Admin guard decisions',
    ['decision', 'kind'],
    registry=registry
)

session_refreshes = Counter(
    'session_refresh_total',
    'Session refresh outcomes',
    ['outcome'],
    registry=registry
)

login_attempts = Counter(
    'admin_login_attempts_total',
    'Admin login attempts',
    ['outcome'],
    registry=registry
)

redis_connected = Gauge(
    'redis_connected',
    'Redis connection status (1=connected, 0=disconnected)',
    registry=registry
)


def get_metrics_text() -> str:
    """Generate Prometheus metrics in text format"""
    from prometheus_client import generate_latest
    return generate_latest(registry).decode('utf-8')
