import json
import logging

import pytest

from qrframe.logging import AUDIT, ConsoleFormatter, JsonFormatter, audit, get_logger, trace


@pytest.fixture
def records(caplog):
    caplog.set_level(logging.DEBUG, logger="qrframe")
    return caplog


class TestAudit:
    def test_emits_structured_record(self, records):
        audit("layout.planned", logger=get_logger("test"), canvas="300x300")
        [record] = [r for r in records.records if getattr(r, "event", None) == "layout.planned"]
        assert record.levelno == AUDIT
        assert record.ctx == {"canvas": "300x300"}
        assert record.name == "qrframe.test"

    def test_formatters(self, records):
        audit("grid.encoded", logger=get_logger("test"), modules="25x25")
        record = next(r for r in records.records if getattr(r, "event", None) == "grid.encoded")
        entry = json.loads(JsonFormatter().format(record))
        assert entry["event"] == "grid.encoded"
        assert entry["ctx"] == {"modules": "25x25"}
        assert "modules=25x25" in ConsoleFormatter().format(record)


class TestTrace:
    def test_sync_function(self, records):
        @trace(logger_name="test")
        def double(x):
            return x * 2

        assert double(4) == 8
        events = [getattr(r, "event", None) for r in records.records]
        assert "double.enter" in events and "double.done" in events

    async def test_async_function_and_error(self, records):
        @trace(logger_name="test")
        async def explode():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await explode()
        [record] = [r for r in records.records if getattr(r, "event", None) == "explode.error"]
        assert record.levelno == logging.ERROR
        assert record.exc_info is not None
