"""In-process telemetry bus with replay and captured subscriber failures."""

from __future__ import annotations

import logging
import math
import threading
from collections import deque
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Final

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]

_MAX_JSON_DEPTH: Final[int] = 8
_DEFAULT_ERROR_BUFFER: Final[int] = 256

logger = logging.getLogger(__name__)


class TelemetryKind(StrEnum):
    EVENT = "event"
    EXCEPTION = "exception"


@dataclass(frozen=True, slots=True)
class TelemetryEvent:
    """One named telemetry record."""

    name: str
    kind: TelemetryKind
    message: str | None = None
    properties: Mapping[str, JSONValue] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("TelemetryEvent.name: must be a non-empty string")
        object.__setattr__(self, "name", self.name.strip())
        object.__setattr__(self, "kind", TelemetryKind(self.kind))
        object.__setattr__(
            self, "properties", _as_json_object(self.properties, "TelemetryEvent.properties")
        )


@dataclass(frozen=True, slots=True)
class DispatchError:
    """Subscriber failure captured without interrupting the sender."""

    event_name: str
    target: str
    error_type: str
    message: str


TelemetrySubscriber = Callable[[TelemetryEvent], object]


class TelemetryService:
    """Fire-and-forget telemetry sink.

    Sending never raises because of a subscriber; failures are recorded and
    exposed through :meth:`dispatch_errors`.
    """

    def __init__(self, *, buffer_size: int = 256, enabled: bool = True) -> None:
        if not isinstance(buffer_size, int) or isinstance(buffer_size, bool):
            raise ValueError(f"buffer_size must be an integer, got {type(buffer_size).__name__}")
        if buffer_size <= 0:
            raise ValueError("buffer_size must be > 0")
        self._enabled = enabled
        self._buffer = deque[TelemetryEvent](maxlen=buffer_size)
        self._dispatch_errors = deque[DispatchError](maxlen=_DEFAULT_ERROR_BUFFER)
        self._subscribers: dict[int, TelemetrySubscriber] = {}
        self._next_token = 1
        self._lock = threading.RLock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def subscribe(self, callback: TelemetrySubscriber) -> int:
        if not callable(callback):
            raise ValueError("callback must be callable")
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._subscribers[token] = callback
        return token

    def unsubscribe(self, token: int) -> bool:
        with self._lock:
            return self._subscribers.pop(token, None) is not None

    def send_exception(self, name: str, message: str) -> tuple[DispatchError, ...]:
        """Record a named exception."""

        return self._publish(
            TelemetryEvent(name=name, kind=TelemetryKind.EXCEPTION, message=message)
        )

    def send_event(
        self, name: str, properties: Mapping[str, object] | None = None
    ) -> tuple[DispatchError, ...]:
        return self._publish(
            TelemetryEvent(name=name, kind=TelemetryKind.EVENT, properties=dict(properties or {}))
        )

    def replay(
        self, *, kind: TelemetryKind | str | None = None, limit: int | None = None
    ) -> tuple[TelemetryEvent, ...]:
        """Replay buffered events in send order."""

        with self._lock:
            events = tuple(self._buffer)
        if kind is not None:
            wanted = TelemetryKind(kind)
            events = tuple(event for event in events if event.kind is wanted)
        if limit is not None:
            if limit <= 0:
                return ()
            events = events[-limit:]
        return events

    def dispatch_errors(self) -> tuple[DispatchError, ...]:
        with self._lock:
            return tuple(self._dispatch_errors)

    def _publish(self, event: TelemetryEvent) -> tuple[DispatchError, ...]:
        if not self._enabled:
            return ()
        with self._lock:
            self._buffer.append(event)
            subscribers = tuple(self._subscribers.values())

        logger.debug(
            "telemetry %s %s", event.kind.value, event.name, extra={"telemetry_message": event.message}
        )

        errors: list[DispatchError] = []
        for callback in subscribers:
            try:
                callback(event)
            except Exception as exc:  # noqa: BLE001
                errors.append(
                    DispatchError(
                        event_name=event.name,
                        target=_callback_name(callback),
                        error_type=exc.__class__.__name__,
                        message=str(exc),
                    )
                )

        if errors:
            with self._lock:
                self._dispatch_errors.extend(errors)
        return tuple(errors)


def _callback_name(callback: object) -> str:
    name = getattr(callback, "__name__", None)
    if isinstance(name, str) and name:
        return name
    return callback.__class__.__name__


def _as_json_object(value: object, path: str) -> dict[str, JSONValue]:
    parsed = _as_json_value(value, path)
    if not isinstance(parsed, dict):
        raise ValueError(f"{path}: expected object")
    return parsed


def _as_json_value(value: object, path: str, *, depth: int = 0) -> JSONValue:
    if depth > _MAX_JSON_DEPTH:
        raise ValueError(f"{path}: JSON nesting too deep")

    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"{path}: float value must be finite")
        return value
    if isinstance(value, (list, tuple)):
        return [
            _as_json_value(item, f"{path}[{index}]", depth=depth + 1)
            for index, item in enumerate(value)
        ]
    if isinstance(value, Mapping):
        out: dict[str, JSONValue] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise ValueError(f"{path}: object keys must be strings")
            out[key] = _as_json_value(item, f"{path}.{key}", depth=depth + 1)
        return out

    raise ValueError(f"{path}: value is not JSON-serializable ({type(value).__name__})")


__all__ = [
    "DispatchError",
    "TelemetryEvent",
    "TelemetryKind",
    "TelemetryService",
    "TelemetrySubscriber",
]
