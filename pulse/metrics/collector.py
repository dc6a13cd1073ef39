"""Metrics collection for monitoring sends"""
from dataclasses import dataclass
from typing import Dict
from threading import Lock
import time


@dataclass
class DestinationMetrics:
    """Metrics for a specific destination"""
    message_count: int = 0
    total_bytes: int = 0
    error_count: int = 0
    last_message_time: float = 0.0

    def record_message(self, size: int) -> None:
        """Record a successful send"""
        self.message_count += 1
        self.total_bytes += size
        self.last_message_time = time.time()

    def record_error(self) -> None:
        """Record an error"""
        self.error_count += 1


class MetricsCollector:
    """Thread-safe metrics collector"""

    def __init__(self):
        self._destination_metrics: Dict[str, DestinationMetrics] = {}
        self._lock = Lock()
        self._start_time = time.time()

    def record_sent(self, destination: str, size: int) -> None:
        """Record a message published to a destination"""
        with self._lock:
            if destination not in self._destination_metrics:
                self._destination_metrics[destination] = DestinationMetrics()
            self._destination_metrics[destination].record_message(size)

    def record_error(self, destination: str) -> None:
        """Record a failed send to a destination"""
        with self._lock:
            if destination not in self._destination_metrics:
                self._destination_metrics[destination] = DestinationMetrics()
            self._destination_metrics[destination].record_error()

    def get_metrics(self) -> Dict:
        """Get all metrics"""
        with self._lock:
            uptime = time.time() - self._start_time
            return {
                'uptime_seconds': uptime,
                'destination_metrics': {
                    destination: {
                        'message_count': metrics.message_count,
                        'total_bytes': metrics.total_bytes,
                        'error_count': metrics.error_count,
                        'last_message_time': metrics.last_message_time,
                        'rate_per_second': metrics.message_count / uptime if uptime > 0 else 0
                    }
                    for destination, metrics in self._destination_metrics.items()
                }
            }

    def reset(self) -> None:
        """Reset all metrics"""
        with self._lock:
            self._destination_metrics.clear()
            self._start_time = time.time()
