"""
Tests for structured generation logging.
"""

import json
import logging

from app.ai.monitoring import AILogger, configure_logging

from tests.conftest import make_response


def last_payload(caplog) -> dict:
    message = caplog.records[-1].getMessage()
    return json.loads(message.split(": ", 1)[1])


class TestAILogger:

    def test_request_logs_preview_not_full_prompt(self, caplog):
        caplog.set_level(logging.INFO, logger="obrix.ai.events")
        prompt = "Project Name: Moon Cat\n" + "x" * 500

        AILogger().log_request("req-1", 1, "primary", prompt, "openai", "gpt-test")

        payload = last_payload(caplog)
        assert payload["event"] == "ai_request"
        assert payload["attempt"] == 1
        assert payload["prompt_length"] == len(prompt)
        assert payload["prompt_preview"].endswith("...")
        assert len(payload["prompt_preview"]) == 103

    def test_failed_response_is_a_warning(self, caplog):
        caplog.set_level(logging.INFO, logger="obrix.ai.events")

        AILogger().log_response("req-1", 2, make_response(success=False, error="timeout"))

        assert caplog.records[-1].levelno == logging.WARNING
        assert last_payload(caplog)["error"] == "timeout"

    def test_validation_failure_carries_rule_and_reason(self, caplog):
        caplog.set_level(logging.INFO, logger="obrix.ai.events")

        AILogger().log_validation("req-1", 1, passed=False, rule="structural", reason="bad")

        payload = last_payload(caplog)
        assert payload["event"] == "validation_failed"
        assert payload["rule"] == "structural"
        assert payload["reason"] == "bad"


class TestConfigureLogging:

    def test_sets_level(self):
        configure_logging("debug")
        assert logging.getLogger("obrix").level == logging.DEBUG

        configure_logging("INFO")
        assert logging.getLogger("obrix").level == logging.INFO

    def test_unknown_level_falls_back_to_info(self):
        configure_logging("chatty")

        assert logging.getLogger("obrix").level == logging.INFO
