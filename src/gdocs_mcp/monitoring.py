"""
Health monitoring for gdocs-mcp server.

Provides HealthMonitor, which combines psutil process/system memory readings
with the DocsStore request counters into a single status report.

Status logic:
- UNHEALTHY: System memory above threshold, or the store failure rate is at or
  above the failure-rate limit (once enough requests have been made to judge)
- DEGRADED: System memory within 10 points of the threshold, or any store failure
- HEALTHY: Otherwise
"""

from typing import Dict, List

import psutil

from .docs_store import DocsStore
from .logging_config import get_logger

logger = get_logger(__name__)

MIN_REQUESTS_FOR_RATE = 10


class HealthMonitor:
    """Health monitor with configurable thresholds."""

    def __init__(
        self,
        store: DocsStore,
        memory_threshold_percent: float = 80.0,
        failure_rate_limit: float = 0.5,
    ):
        """
        Args:
            store: The server's DocsStore, source of request counters
            memory_threshold_percent: System memory % threshold for unhealthy (default: 80%)
            failure_rate_limit: Failed/total request ratio for unhealthy (default: 0.5)
        """
        self.store = store
        self.memory_threshold_percent = memory_threshold_percent
        self.failure_rate_limit = failure_rate_limit

    def check_health(self) -> Dict:
        """
        Check server health and return metrics.

        Returns:
            Dictionary with keys:
            - status: "healthy" | "degraded" | "unhealthy"
            - process_memory_mb: Current process memory usage in MB
            - system_memory_percent: System-wide memory usage percentage
            - store: Dict with total_requests, total_failed
            - alerts: List of actionable alert messages (empty if healthy)
        """
        process_memory_mb = psutil.Process().memory_info().rss / (1024 * 1024)
        system_memory_percent = psutil.virtual_memory().percent
        store_metrics = self.store.get_metrics()

        total = store_metrics["total_requests"]
        failed = store_metrics["total_failed"]

        alerts: List[str] = []
        status = "healthy"

        if system_memory_percent > self.memory_threshold_percent:
            status = "unhealthy"
            alerts.append(
                f"System memory at {system_memory_percent:.1f}% "
                f"(threshold: {self.memory_threshold_percent:.1f}%)"
            )

        if total >= MIN_REQUESTS_FOR_RATE and failed / total >= self.failure_rate_limit:
            status = "unhealthy"
            alerts.append(
                f"Google API failure rate at {failed / total:.0%} "
                f"(limit: {self.failure_rate_limit:.0%})"
            )

        if status == "healthy":
            degraded_threshold = self.memory_threshold_percent - 10
            if system_memory_percent > degraded_threshold:
                status = "degraded"
                alerts.append(
                    f"System memory at {system_memory_percent:.1f}% "
                    f"(warning threshold: {degraded_threshold:.1f}%)"
                )

            if failed > 0:
                status = "degraded"
                alerts.append(f"Google API failures detected: {failed} (check logs for details)")

        if status != "healthy":
            logger.warning(
                "health_check_warning",
                status=status,
                process_memory_mb=process_memory_mb,
                system_memory_percent=system_memory_percent,
                store_requests=total,
                store_failed=failed,
                alerts=alerts,
            )

        return {
            "status": status,
            "process_memory_mb": process_memory_mb,
            "system_memory_percent": system_memory_percent,
            "store": dict(store_metrics),
            "alerts": alerts,
        }
