import logging
from unittest.mock import patch

from app.logging.logger import ContextFormatter, Log


def _record(**extra: object) -> logging.LogRecord:
    record = logging.makeLogRecord({"msg": "Document promoted", "levelname": "INFO"})
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestContextFormatter:
    def test_plain_message_is_unchanged(self) -> None:
        formatter = ContextFormatter("%(levelname)s %(message)s")
        assert formatter.format(_record()) == "INFO Document promoted"

    def test_extra_fields_are_appended_sorted(self) -> None:
        formatter = ContextFormatter("%(message)s")
        line = formatter.format(_record(owner_id="user-1", document_id="doc-1"))
        assert line == "Document promoted | document_id=doc-1 owner_id=user-1"


class TestLog:
    def test_keyword_arguments_become_record_extras(self) -> None:
        with patch.object(Log, "_logger") as mock_logger:
            Log.warning("Access denied", document_id="doc-1")
        mock_logger.warning.assert_called_once_with(
            "Access denied", extra={"document_id": "doc-1"}
        )

    def test_configure_attaches_one_handler(self) -> None:
        logger = logging.getLogger("docinsight-test")
        with patch.object(Log, "_logger", logger):
            Log.configure("debug")
            Log.configure("info")
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, ContextFormatter)
        logger.handlers.clear()
