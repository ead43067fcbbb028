"""Prometheus metrics instrumentation for the translation relay.

Exposes metrics for monitoring latency, throughput, and error rates
of the relay. Metrics are exposed via HTTP on port 8001 (configurable).

Metrics exported:
- relay_stage_latency_seconds: Histogram of processing time per stage
- relay_turns_total: Counter of completed turns by status
- relay_active_sessions: Gauge of currently connected clients
- relay_active_streams: Gauge of currently open recognition streams

Usage:
    from speech_relay.services.metrics import start_metrics_server, turns_processed

    start_metrics_server(port=8001)
    turns_processed.labels(status='success').inc()
"""

from prometheus_client import Histogram, Counter, Gauge, start_http_server
import logging

logger = logging.getLogger(__name__)

# Latency tracking per stage
stage_latency = Histogram(
    'relay_stage_latency_seconds',
    'Time spent in each processing stage',
    labelnames=['stage']  # stage: transcribe, translate, synthesize
)

# Turn counters
turns_processed = Counter(
    'relay_turns_total',
    'Total translation turns processed',
    labelnames=['status']  # status: success, degraded, error, stale
)

# Connected clients
active_sessions_gauge = Gauge(
    'relay_active_sessions',
    'Number of currently connected relay sessions'
)

# Open recognition streams
active_streams_gauge = Gauge(
    'relay_active_streams',
    'Number of currently open recognition streams'
)


def start_metrics_server(port: int = 8001):
    """Start Prometheus metrics HTTP server."""
    try:
        start_http_server(port)
        logger.info(f"✅ Metrics server started on port {port}")
    except OSError as e:
        logger.error(f"❌ Failed to start metrics server: {e}")
