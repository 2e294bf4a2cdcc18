# tests/test_logger.py
import logging

import pytest

from util.logger import ColoredFormatter, RedactSecretsFilter


def _record(msg: str, *args) -> logging.LogRecord:
    return logging.LogRecord("httpx", logging.INFO, __file__, 1, msg, args, None)


class TestRedactSecretsFilter:
    @pytest.mark.parametrize(
        "msg, args, expected",
        [
            (
                "HTTP Request: POST https://g.test/v1beta/models/m:embedContent?key=%s",
                ("AIzaSecret123",),
                "HTTP Request: POST https://g.test/v1beta/models/m:embedContent?key=***",
            ),
            ("headers Bearer %s", ("svc.jwt-token",), "headers Bearer ***"),
            ("{'apikey': 'svc-key'}", (), "{'apikey': '***'}"),
        ],
    )
    def test_masks_keys(self, msg, args, expected):
        record = _record(msg, *args)
        assert RedactSecretsFilter().filter(record) is True
        assert record.getMessage() == expected

    def test_leaves_clean_messages_alone(self):
        record = _record("batch.done ok=%d/%d ms=%d", 2, 3, 120)
        RedactSecretsFilter().filter(record)
        assert record.args == (2, 3, 120)
        assert record.getMessage() == "batch.done ok=2/3 ms=120"


class TestColoredFormatter:
    def test_colours_copy_only(self):
        record = _record("x")
        out = ColoredFormatter("%(levelname)s %(message)s").format(record)
        assert out.startswith("\033[32mINFO")
        assert record.levelname == "INFO"
