"""OpenTelemetry metrics integration for pulse"""
from typing import Optional

try:
    from opentelemetry.sdk.metrics import MeterProvider
    from opentelemetry.sdk.metrics.export import (
        MetricExporter,
        PeriodicExportingMetricReader,
    )
    _OTEL_AVAILABLE = True
except ImportError:  # pragma: no cover
    _OTEL_AVAILABLE = False


class OTelMetricsCollector:
    """
    Metrics collector that publishes sender metrics via OpenTelemetry.

    Usage::

        from opentelemetry.sdk.metrics.export import ConsoleMetricExporter
        collector = OTelMetricsCollector(exporter=ConsoleMetricExporter())
        sender = Sender(transport, metrics=collector)

    Shares the recording interface of :class:`~pulse.metrics.collector.MetricsCollector`.
    """

    def __init__(
        self,
        exporter: Optional["MetricExporter"] = None,
        export_interval_millis: int = 30_000,
        meter_name: str = "pulse",
        meter_provider: Optional["MeterProvider"] = None,
    ):
        if not _OTEL_AVAILABLE:
            raise ImportError(
                "OpenTelemetry packages are required for OTelMetricsCollector. "
                "Install them with: pip install pulse-pubsub[opentelemetry]"
            )

        if meter_provider is not None:
            self._provider = meter_provider
        elif exporter is not None:
            reader = PeriodicExportingMetricReader(
                exporter, export_interval_millis=export_interval_millis
            )
            self._provider = MeterProvider(metric_readers=[reader])
        else:
            self._provider = MeterProvider()

        meter = self._provider.get_meter(meter_name)

        self._messages = meter.create_counter(
            name="pulse.sender.messages",
            description="Number of messages published per destination",
            unit="1",
        )
        self._bytes = meter.create_counter(
            name="pulse.sender.bytes",
            description="Encoded bytes published per destination",
            unit="By",
        )
        self._errors = meter.create_counter(
            name="pulse.sender.errors",
            description="Number of failed sends per destination",
            unit="1",
        )

    def record_sent(self, destination: str, size: int) -> None:
        """Record a message published to a destination"""
        attrs = {"destination": destination}
        self._messages.add(1, attrs)
        self._bytes.add(size, attrs)

    def record_error(self, destination: str) -> None:
        """Record a failed send to a destination"""
        self._errors.add(1, {"destination": destination})

    def shutdown(self) -> None:
        """Flush pending metrics and shut down the meter provider"""
        self._provider.shutdown()
