"""Redaction rules and the leveled stderr logger."""

import io
import json
import logging

import pytest

from perplexica.logger import CIRCULAR, REDACTED, configure_logging, logger, redact


@pytest.fixture
def restore_perplexica_logger():
    target = logging.getLogger("perplexica")
    handlers, level = list(target.handlers), target.level
    yield
    target.handlers[:] = handlers
    target.setLevel(level)


class TestRedact:
    def test_secret_shaped_keys_are_replaced(self):
        safe = redact({
            "apiKey": "sk-1",
            "Authorization": "Bearer abc",
            "refresh_token": "t",
            "clientSecret": "s",
            "PASSWORD": "p",
            "query": "weather in Oslo",
        })
        assert safe == {
            "apiKey": REDACTED,
            "Authorization": REDACTED,
            "refresh_token": REDACTED,
            "clientSecret": REDACTED,
            "PASSWORD": REDACTED,
            "query": "weather in Oslo",
        }

    def test_nested_custom_key_is_replaced(self):
        args = {"chatModel": {"provider": "custom_openai", "customOpenAIKey": "sk-live-999"}}
        safe = redact(args)
        assert safe["chatModel"]["customOpenAIKey"] == REDACTED
        assert safe["chatModel"]["provider"] == "custom_openai"
        assert "sk-live-999" not in json.dumps(safe)

    def test_history_is_replaced_by_its_length(self):
        safe = redact({"payload": {"history": [["human", "hi"], ["assistant", "hello"]]}})
        assert safe["payload"]["history"] == "len=2"

    def test_secrets_inside_lists_are_replaced(self):
        safe = redact([{"token": "x"}, {"name": "ok"}])
        assert safe == [{"token": REDACTED}, {"name": "ok"}]

    def test_input_is_not_mutated(self):
        original = {"apiKey": "sk-1", "history": [["human", "hi"]]}
        redact(original)
        assert original == {"apiKey": "sk-1", "history": [["human", "hi"]]}

    def test_circular_reference_is_marked(self):
        loop = {"name": "outer"}
        loop["self"] = loop
        safe = redact(loop)
        assert safe == {"name": "outer", "self": CIRCULAR}

    def test_shared_but_acyclic_values_are_kept(self):
        shared = {"v": 1}
        assert redact({"a": shared, "b": shared}) == {"a": {"v": 1}, "b": {"v": 1}}

    def test_scalars_pass_through(self):
        assert redact("plain") == "plain"
        assert redact(42) == 42
        assert redact(None) is None


class TestRedactingLogger:
    def test_meta_is_redacted_before_emission(self, caplog):
        caplog.set_level(logging.DEBUG, logger="perplexica")
        logger.debug("invoked", {"args": {"customOpenAIKey": "sk-leak", "history": [["human", "x"]]}})
        assert "sk-leak" not in caplog.text
        assert "len=1" in caplog.text
        assert "invoked ::" in caplog.text

    def test_circular_meta_does_not_crash(self, caplog):
        caplog.set_level(logging.INFO, logger="perplexica")
        meta = {}
        meta["me"] = meta
        logger.info("cyclic", meta)
        assert CIRCULAR in caplog.text

    def test_threshold_drops_lower_levels(self, caplog):
        caplog.set_level(logging.WARNING, logger="perplexica")
        logger.info("quiet")
        logger.debug("quieter")
        logger.warn("loud")
        messages = [r.getMessage() for r in caplog.records]
        assert messages == ["loud"]

    def test_configure_logging_writes_to_stream(self, restore_perplexica_logger):
        stream = io.StringIO()
        configure_logging("warn", stream=stream)
        logger.info("not shown")
        logger.error("shown", {"password": "hunter2"})
        output = stream.getvalue()
        assert "not shown" not in output
        assert "[MCP] ERROR shown ::" in output
        assert "hunter2" not in output

    def test_configure_logging_twice_keeps_one_handler(self, restore_perplexica_logger):
        configure_logging("info", stream=io.StringIO())
        configure_logging("debug", stream=io.StringIO())
        assert len(logging.getLogger("perplexica").handlers) == 1
        assert logging.getLogger("perplexica").level == logging.DEBUG
