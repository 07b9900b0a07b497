"""
Monitoring MCP tool for gdocs-mcp server.

Provides get_server_health() function that returns a formatted health report
for consumption by MCP clients.
"""

from ..monitoring import HealthMonitor


def get_server_health(monitor: HealthMonitor) -> str:
    """
    Get server health metrics and status.

    Returns formatted health report showing:
    - Status (HEALTHY/DEGRADED/UNHEALTHY)
    - Process memory usage
    - System memory percentage
    - Google API request and failure counts
    - Active alerts (if any)
    """
    metrics = monitor.check_health()

    lines = [
        f"Server Health: {metrics['status'].upper()}",
        "",
        f"Process Memory: {metrics['process_memory_mb']:.1f} MB",
        f"System Memory: {metrics['system_memory_percent']:.1f}%",
        "",
        "Google API:",
        f"  Total requests: {metrics['store']['total_requests']}",
        f"  Total failed: {metrics['store']['total_failed']}",
    ]

    if metrics['alerts']:
        lines.append("")
        lines.append("Alerts:")
        for alert in metrics['alerts']:
            lines.append(f"  - {alert}")

    return "\n".join(lines)
