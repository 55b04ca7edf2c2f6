"""
Analytics sinks for fired rules.

The emit layer forwards every fired rule to a sink. The HTTP sink buffers
scrubbed events and a background thread posts them in batches, so the
validation path never waits on the network. A failing endpoint only costs
the batch.
"""

import threading
from abc import ABC, abstractmethod
from collections import deque
from typing import Any

import httpx
import structlog

from rules_audit.core.config.sink_config import SinkConfig
from rules_audit.rules.models import RuleSeverity
from rules_audit.telemetry.models import utcnow
from rules_audit.telemetry.scrub import LIMITS, redact_tokens, scrub_data, truncate

logger = structlog.get_logger()

RULE_FIRED_EVENT_TYPE = "rules.rule_fired"
MAX_PENDING_EVENTS = 1000


class TelemetrySink(ABC):
    """Destination for fired-rule analytics."""

    @abstractmethod
    def track_rule_fired(
        self,
        rule_id: str,
        severity: RuleSeverity,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        pass

    def flush(self) -> int:
        """Deliver anything buffered. Returns the number of events delivered."""
        return 0

    def start(self) -> None:
        """Begin background delivery."""
        return None

    def stop(self) -> int:
        """Stop background delivery and deliver what is left."""
        return self.flush()


class NullSink(TelemetrySink):
    """Sink used when no analytics endpoint is configured."""

    def track_rule_fired(
        self,
        rule_id: str,
        severity: RuleSeverity,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        return None


class HttpTelemetrySink(TelemetrySink):
    """
    Buffers ``rules.rule_fired`` events and posts them as JSON batches.

    ``track_rule_fired`` only appends to the buffer. Batches are delivered by
    a background flusher thread every ``flush_interval`` seconds (sooner once
    ``batch_size`` events are queued), or explicitly through ``flush()``.
    The buffer holds at most ``max_pending`` events; the oldest are dropped.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 5.0,
        batch_size: int = 100,
        flush_interval: float = 2.0,
        max_pending: int = MAX_PENDING_EVENTS,
        client: httpx.Client | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self.batch_size = min(batch_size, LIMITS["MAX_EVENTS_PER_REQUEST"])
        self.flush_interval = flush_interval
        self._client = client
        self._buffer: deque[dict[str, Any]] = deque(maxlen=max(max_pending, self.batch_size))
        self._lock = threading.Lock()
        self._wake = threading.Event()
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    @classmethod
    def from_config(cls, sink_config: SinkConfig) -> "HttpTelemetrySink":
        if not sink_config.url:
            raise ValueError("TELEMETRY_SINK_URL is required for the HTTP telemetry sink")
        return cls(
            url=sink_config.url,
            timeout=sink_config.timeout,
            batch_size=sink_config.batch_size,
            flush_interval=sink_config.flush_interval,
        )

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._buffer)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def track_rule_fired(
        self,
        rule_id: str,
        severity: RuleSeverity,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        event = {
            "event_type": RULE_FIRED_EVENT_TYPE,
            "severity": RuleSeverity(severity).value,
            "rule_id": rule_id,
            "message": truncate(redact_tokens(message), LIMITS["MESSAGE_MAX_LENGTH"]),
            "timestamp": utcnow().isoformat(),
            **scrub_data({k: v for k, v in (context or {}).items() if v is not None}),
        }
        with self._lock:
            self._buffer.append(event)
            full = len(self._buffer) >= self.batch_size

        if full:
            self._wake.set()

    def flush(self) -> int:
        with self._lock:
            batch = [self._buffer.popleft() for _ in range(min(self.batch_size, len(self._buffer)))]

        if not batch:
            return 0

        try:
            if self._client is not None:
                response = self._client.post(self.url, json={"events": batch}, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(self.url, json={"events": batch})
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("telemetry_sink_flush_failed", url=self.url, dropped=len(batch), error=str(e))
            return 0

        logger.debug("telemetry_sink_flushed", url=self.url, count=len(batch))
        return len(batch)

    def drain(self) -> int:
        """Flush batch after batch until the buffer is empty."""
        sent = 0
        while self.pending:
            sent += self.flush()
        return sent

    def start(self) -> None:
        if self.running:
            return

        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, name="telemetry-sink-flusher", daemon=True)
        self._thread.start()
        logger.info("telemetry_sink_started", url=self.url, flush_interval=self.flush_interval)

    def stop(self) -> int:
        if self._thread is not None:
            self._stopped.set()
            self._wake.set()
            self._thread.join(timeout=self.timeout + self.flush_interval)
            self._thread = None
        return self.drain()

    def _run(self) -> None:
        while True:
            self._wake.wait(self.flush_interval)
            self._wake.clear()
            if self._stopped.is_set():
                break
            try:
                self.drain()
            except Exception as e:
                logger.error("telemetry_sink_flusher_error", url=self.url, error=str(e))


def create_sink(sink_config: SinkConfig) -> TelemetrySink:
    """HTTP sink when an endpoint is configured, otherwise a null sink."""
    if sink_config.enabled:
        return HttpTelemetrySink.from_config(sink_config)
    return NullSink()
