"""Logging configuration utilities.

Stdout carries the adapter's output (manifests, credentials, caller-facing
errors), so operator diagnostics always go to stderr.
"""

import logging
import sys
from typing import IO, Any, Optional

import structlog
from structlog.contextvars import bind_contextvars

REDACTED = "[REDACTED]"

# Credential fields the adapter handles: the Redis password, the
# config-store secret and the per-binding ``secret_pass``.
CREDENTIAL_KEYS = frozenset({"password", "secret", "secret_pass", "generated_secret"})


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: REDACTED if str(k).lower() in CREDENTIAL_KEYS else _redact(v) for k, v in value.items()}
    return value


def redact_credentials(_, __, event_dict: dict) -> dict:
    """Mask credential fields, including ones nested in logged mappings."""
    return _redact(event_dict)


def _renderer(log_format: str):
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(log_level: str = "INFO", log_format: str = "console", stream: Optional[IO[str]] = None) -> None:
    """Send structured adapter logs to ``stream`` (stderr by default)."""
    stream = stream or sys.stderr
    level = getattr(logging, log_level.upper())

    logging.basicConfig(format="%(message)s", stream=stream, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_credentials,
            _renderer(log_format),
        ],
        context_class=dict,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )


def bind_request_context(deployment_name: Optional[str] = None, binding_id: Optional[str] = None) -> None:
    """Bind the deployment and binding being worked on to every later log line."""
    if deployment_name:
        bind_contextvars(deployment=deployment_name)
    if binding_id:
        bind_contextvars(binding_id=binding_id)
