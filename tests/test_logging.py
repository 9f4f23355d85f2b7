import io
import json

import structlog
from structlog.contextvars import clear_contextvars

from redis_adapter.utils.logging import bind_request_context, setup_logging


def test_logs_go_to_configured_stream_as_json():
    stream = io.StringIO()
    setup_logging("INFO", "json", stream=stream)

    structlog.get_logger().info("manifest_log", deployment="d1")

    data = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert data["event"] == "manifest_log"
    assert data["deployment"] == "d1"
    assert data["level"] == "info"


def test_sensitive_keys_redacted():
    stream = io.StringIO()
    setup_logging("INFO", "json", stream=stream)

    structlog.get_logger().info("bind_log", password="hunter2", SECRET="shh", generated_secret="x")

    data = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert data["password"] == "[REDACTED]"
    assert data["SECRET"] == "[REDACTED]"
    assert data["generated_secret"] == "[REDACTED]"
    assert "hunter2" not in stream.getvalue()


def test_nested_credentials_redacted_and_other_keys_kept():
    stream = io.StringIO()
    setup_logging("INFO", "json", stream=stream)

    structlog.get_logger().info(
        "properties_log",
        redis={"password": "hunter2", "maxclients": 100},
        token="t-1",
    )

    data = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert data["redis"] == {"password": "[REDACTED]", "maxclients": 100}
    assert data["token"] == "t-1"


def test_level_filtering():
    stream = io.StringIO()
    setup_logging("WARNING", "console", stream=stream)

    structlog.get_logger().info("quiet")
    structlog.get_logger().warning("loud")

    assert "quiet" not in stream.getvalue()
    assert "loud" in stream.getvalue()


def test_request_context_bound():
    stream = io.StringIO()
    setup_logging("INFO", "json", stream=stream)
    bind_request_context("service-instance_abc", "binding-1")
    try:
        structlog.get_logger().info("with_context")
    finally:
        clear_contextvars()

    data = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert data["deployment"] == "service-instance_abc"
    assert data["binding_id"] == "binding-1"
