import logging

import pytest

from meshforge.log import (
    LoggerSettings,
    dump_stack_trace,
    get_logger,
    init_logging,
    log_assert,
    log_error,
    uninitialize,
)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    uninitialize()


def test_settings_defaults():
    settings = LoggerSettings()
    assert settings.output_to_file is False
    assert settings.output_to_console is True
    assert settings.log_file_name == "logs.txt"


def test_init_twice_does_not_duplicate_handlers():
    init_logging()
    init_logging()
    assert len(get_logger().handlers) == 1


def test_uninitialize_removes_handlers():
    init_logging(LoggerSettings(output_to_console=True))
    uninitialize()
    assert get_logger().handlers == []


def test_file_output(tmp_path):
    path = tmp_path / "out.txt"
    init_logging(LoggerSettings(output_to_file=True, output_to_console=False, log_file_name=str(path)))
    log_error("Failed {}", "badly")
    uninitialize()
    content = path.read_text(encoding="utf-8")
    assert "Failed badly" in content
    assert "Location:" in content


def test_log_error_records_message_and_location(caplog):
    caplog.set_level(logging.DEBUG, logger="meshforge")
    log_error("Shader failed to link:\n{}", "oops")
    messages = [record.getMessage() for record in caplog.records]
    assert messages[0] == "Shader failed to link:\noops"
    assert messages[1].startswith("Location: \n")
    assert all(record.levelno == logging.ERROR for record in caplog.records)


def test_log_assert_failure_raises(caplog):
    caplog.set_level(logging.DEBUG, logger="meshforge")
    with pytest.raises(AssertionError, match="Must attach both"):
        log_assert(False, "Must attach both a vertex and fragment shader!")
    assert caplog.records[0].getMessage() == "Must attach both a vertex and fragment shader!"


def test_log_assert_success_logs_nothing(caplog):
    caplog.set_level(logging.DEBUG, logger="meshforge")
    log_assert(True, "never {}", "shown")
    assert caplog.records == []


def test_dump_stack_trace_names_caller():
    trace = dump_stack_trace()
    assert "test_dump_stack_trace_names_caller" in trace