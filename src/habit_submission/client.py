"""
Event Submission Client.

Sends each logged health event to the webhook as one best-effort JSON POST.
Outcomes are logged and handed back as a SubmissionResult; nothing is
retried, queued or persisted.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional, Set, Union

import httpx

from habit_events import (
    DrinkEvent,
    FoodEvent,
    PayloadEncodingError,
    ToiletAction,
    ToiletEvent,
    build_payload,
    encode_payload,
)

from .config import get_settings
from .errors import (
    InvalidEndpoint,
    NonSuccessStatus,
    SerializationError,
    SubmissionError,
    TransportError,
)

logger = logging.getLogger(__name__)

AnyEvent = Union[FoodEvent, DrinkEvent, ToiletEvent]


class SubmissionStatus(str, Enum):
    """Outcome of a single submission attempt."""

    SENT = "sent"
    INVALID_ENDPOINT = "invalid_endpoint"
    SERIALIZATION_ERROR = "serialization_error"
    TRANSPORT_ERROR = "transport_error"
    NON_SUCCESS_STATUS = "non_success_status"


@dataclass
class SubmissionResult:
    """The logged outcome of one submission."""

    event_type: str
    status: SubmissionStatus
    status_code: Optional[int] = None
    error: Optional[str] = None
    payload: Optional[Dict[str, str]] = None
    elapsed_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status == SubmissionStatus.SENT

    def to_dict(self) -> dict:
        """Convert to dictionary for printing."""
        return {
            "event_type": self.event_type,
            "status": self.status.value,
            "status_code": self.status_code,
            "error": self.error,
            "payload": self.payload,
            "elapsed_seconds": self.elapsed_seconds,
        }


def _status_for(error: SubmissionError) -> SubmissionStatus:
    """Map a failure to its status; unnamed failures count as transport errors."""
    try:
        return SubmissionStatus(error.kind)
    except ValueError:
        return SubmissionStatus.TRANSPORT_ERROR


class EventSubmissionClient:
    """
    One-shot webhook client for health events.

    Every call builds the event payload, encodes it as JSON and POSTs it once
    to the configured webhook. Only status 200 counts as success. Failures
    of any kind are logged and returned, never raised to the caller.

    The presentation entry points (submit_food_event and friends) are
    fire-and-forget: they schedule the submission and return immediately.
    """

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_complete: Optional[Callable[[SubmissionResult], Any]] = None,
    ):
        """
        Initialize the submission client.

        Args:
            webhook_url: Endpoint receiving the events (default from settings)
            timeout: Request timeout in seconds (default from settings)
            transport: Optional httpx transport, e.g. httpx.MockTransport
            on_complete: Optional callback invoked with every result
        """
        settings = get_settings()
        self.webhook_url = webhook_url or settings.webhook_url
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.transport = transport
        self.on_complete = on_complete

        # Dispatched submissions still running, kept so callers can wait on them
        self._pending_tasks: Set[asyncio.Task] = set()
        self._pending_threads: Set[threading.Thread] = set()
        self._lock = threading.Lock()

        logger.debug(f"[SUBMIT] Client ready for {self.webhook_url}")

    async def submit(self, event: AnyEvent) -> SubmissionResult:
        """
        Submit one event to the webhook.

        Args:
            event: The event to send

        Returns:
            SubmissionResult describing what happened
        """
        result = SubmissionResult(event_type=event.kind, status=SubmissionStatus.SENT)
        start_time = datetime.now(timezone.utc)

        try:
            url = self._endpoint()
            result.payload = build_payload(event)
            try:
                body = encode_payload(result.payload)
            except PayloadEncodingError as e:
                raise SerializationError(str(e)) from e

            result.status_code = await self._post(url, body)

        except SubmissionError as e:
            result.status = _status_for(e)
            result.error = str(e)
            if isinstance(e, NonSuccessStatus):
                result.status_code = e.status_code

        finally:
            result.elapsed_seconds = (
                datetime.now(timezone.utc) - start_time
            ).total_seconds()

        self._complete(result)
        return result

    def _endpoint(self) -> httpx.URL:
        """Parse and check the configured webhook URL."""
        try:
            url = httpx.URL(self.webhook_url)
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise InvalidEndpoint(f"Invalid URL {self.webhook_url!r}: {e}") from e

        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidEndpoint(f"Invalid URL {self.webhook_url!r}")
        try:
            port = url.port
        except ValueError as e:
            raise InvalidEndpoint(f"Invalid URL {self.webhook_url!r}: {e}") from e
        if port is not None and not 1 <= port <= 65535:
            raise InvalidEndpoint(f"Invalid port {port} in {self.webhook_url!r}")
        return url

    async def _post(self, url: httpx.URL, body: bytes) -> int:
        """POST the encoded payload once and return the status code."""
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout), transport=self.transport
        ) as client:
            try:
                response = await client.post(
                    url,
                    content=body,
                    headers={"Content-Type": "application/json"},
                )
            except httpx.HTTPError as e:
                raise TransportError(f"{type(e).__name__}: {e}") from e
            except Exception as e:
                # Socket-level failures can surface outside httpx's exception tree
                raise TransportError(f"{type(e).__name__}: {e}") from e

        if response.status_code != 200:
            raise NonSuccessStatus(response.status_code, response.reason_phrase)
        return response.status_code

    def _complete(self, result: SubmissionResult) -> None:
        """Log the outcome and notify the optional callback."""
        if result.status == SubmissionStatus.SENT:
            logger.info(f"[SUBMIT] {result.event_type} data sent successfully")
        elif result.status == SubmissionStatus.NON_SUCCESS_STATUS:
            logger.warning(
                f"[SUBMIT REJECTED] {result.event_type}: {result.error}"
            )
        elif result.status == SubmissionStatus.TRANSPORT_ERROR:
            logger.error(
                f"[SUBMIT FAILED] {result.event_type}: failed to send data: {result.error}"
            )
        else:
            logger.error(
                f"[SUBMIT ERROR] {result.event_type} ({result.status.value}): {result.error}"
            )

        if self.on_complete is None:
            return
        try:
            self.on_complete(result)
        except Exception as e:
            logger.error(f"[SUBMIT] Completion callback failed: {e}")

    # ------------------------------------------------------------------
    # Fire-and-forget dispatch
    # ------------------------------------------------------------------

    def dispatch(self, event: AnyEvent) -> None:
        """
        Schedule a submission without waiting for it.

        Inside a running event loop the submission becomes a task on that
        loop; otherwise it runs on a background daemon thread.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            task = loop.create_task(self.submit(event))
            with self._lock:
                self._pending_tasks.add(task)
            task.add_done_callback(self._forget_task)
            return

        def run_submission():
            try:
                asyncio.run(self.submit(event))
            except Exception as e:
                logger.error(f"[SUBMIT] Background submission crashed: {e}")
            finally:
                with self._lock:
                    self._pending_threads.discard(threading.current_thread())

        thread = threading.Thread(
            target=run_submission, name=f"submit-{event.kind}", daemon=True
        )
        with self._lock:
            self._pending_threads.add(thread)
        thread.start()

    def _forget_task(self, task: asyncio.Task) -> None:
        with self._lock:
            self._pending_tasks.discard(task)

    def submit_food_event(self, item: str, amount: str, time: datetime) -> None:
        """Log a food intake in the background."""
        self.dispatch(FoodEvent(item=item, amount=amount, occurred_at=time))

    def submit_drink_event(self, item: str, amount: str, time: datetime) -> None:
        """Log a drink intake in the background."""
        self.dispatch(DrinkEvent(item=item, amount=amount, occurred_at=time))

    def submit_toilet_event(
        self, action: Union[ToiletAction, str], time: datetime
    ) -> None:
        """Log a toilet visit in the background."""
        self.dispatch(ToiletEvent(action=action, occurred_at=time))

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending_tasks) + len(self._pending_threads)

    async def wait_pending(self) -> None:
        """Wait for submissions dispatched onto the current event loop."""
        with self._lock:
            tasks = list(self._pending_tasks)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def join_pending(self, timeout: Optional[float] = None) -> None:
        """Wait for submissions dispatched onto background threads."""
        with self._lock:
            threads = list(self._pending_threads)
        for thread in threads:
            thread.join(timeout)
