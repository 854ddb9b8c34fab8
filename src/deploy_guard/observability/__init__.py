"""Public observability primitives: structured logging, telemetry and the output channel."""

from deploy_guard.observability.channel import ChannelService
from deploy_guard.observability.logging import (
    LoggingConfig,
    LogRedactor,
    StructuredLoggingHandle,
    correlation_scope,
    default_log_redactor,
    get_active_logging_handle,
    get_correlation_context,
    setup_logging,
    setup_structured_logging,
    shutdown_logging,
)
from deploy_guard.observability.telemetry import (
    DispatchError,
    TelemetryEvent,
    TelemetryKind,
    TelemetryService,
)

__all__ = [
    "ChannelService",
    "DispatchError",
    "LogRedactor",
    "LoggingConfig",
    "StructuredLoggingHandle",
    "TelemetryEvent",
    "TelemetryKind",
    "TelemetryService",
    "correlation_scope",
    "default_log_redactor",
    "get_active_logging_handle",
    "get_correlation_context",
    "setup_logging",
    "setup_structured_logging",
    "shutdown_logging",
]
