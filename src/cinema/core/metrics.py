"""
Prometheus metrics for monitoring
"""
import time
from functools import wraps

from prometheus_client import Counter, Histogram, generate_latest

# ==================== HTTP Metrics ====================

http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

# ==================== Reservation Metrics ====================

reservations_created_total = Counter(
    'reservations_created_total',
    'Total reservations created'
)

reservations_cancelled_total = Counter(
    'reservations_cancelled_total',
    'Total reservations cancelled'
)

reservation_failures_total = Counter(
    'reservation_failures_total',
    'Reservation transactions that aborted',
    ['operation', 'reason']
)

reservation_conflicts_total = Counter(
    'reservation_conflicts_total',
    'Concurrent modifications detected on a screening',
    ['operation']
)

reservation_transaction_duration_seconds = Histogram(
    'reservation_transaction_duration_seconds',
    'Time to run a reservation transaction, retries included',
    ['operation'],
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0]
)

# ==================== Helper Functions ====================


def track_time(operation: str):
    """Decorator to track transaction time per operation"""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return func(*args, **kwargs)
            finally:
                reservation_transaction_duration_seconds.labels(
                    operation=operation
                ).observe(time.time() - start_time)
        return wrapper
    return decorator


def record_reservation_failure(operation: str, error: Exception):
    reservation_failures_total.labels(
        operation=operation,
        reason=type(error).__name__,
    ).inc()


def get_metrics():
    """Get current metrics in Prometheus format"""
    return generate_latest()
