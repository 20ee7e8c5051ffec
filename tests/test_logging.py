from __future__ import annotations

from structlog.testing import capture_logs

from brewbook.logging import get_logger, get_request_id, request_id_ctx_var


def test_get_logger_emits_key_value_events() -> None:
    with capture_logs() as logs:
        get_logger().info("recipe_created", recipe_id="r1", entries=2)
    assert len(logs) == 1
    assert logs[0]["event"] == "recipe_created"
    assert logs[0]["recipe_id"] == "r1"
    assert logs[0]["entries"] == 2
    assert logs[0]["log_level"] == "info"


def test_request_id_context() -> None:
    assert get_request_id() is None
    token = request_id_ctx_var.set("abc")
    try:
        assert get_request_id() == "abc"
    finally:
        request_id_ctx_var.reset(token)
