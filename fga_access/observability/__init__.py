"""
Observability components.

Provides store-bound logging and metrics collection for requests sent to
the OpenFGA server.
"""

from .logging import AuthzLoggerAdapter, get_logger, log_operation
from .metrics import (
    MetricsCollector,
    OperationMetrics,
    get_metrics_collector,
    record_operation,
)

__all__ = [
    # Metrics
    "MetricsCollector",
    "OperationMetrics",
    "get_metrics_collector",
    "record_operation",
    # Logging
    "AuthzLoggerAdapter",
    "get_logger",
    "log_operation",
]
