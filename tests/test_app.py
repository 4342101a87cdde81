import logging

import pytest

from meshforge.app import (
    GL_DEBUG_SEVERITY_HIGH,
    GL_DEBUG_SEVERITY_LOW,
    GL_DEBUG_SEVERITY_MEDIUM,
    GL_DEBUG_SEVERITY_NOTIFICATION,
    GL_DEBUG_SOURCE_API,
    GL_DEBUG_SOURCE_APPLICATION,
    GL_DEBUG_SOURCE_OTHER,
    GL_DEBUG_SOURCE_SHADER_COMPILER,
    GL_DEBUG_SOURCE_THIRD_PARTY,
    GL_DEBUG_SOURCE_WINDOW_SYSTEM,
    RotationToggle,
    gl_debug_message,
    source_label,
)


@pytest.mark.parametrize(
    "source, label",
    [
        (GL_DEBUG_SOURCE_API, "DEBUG"),
        (GL_DEBUG_SOURCE_WINDOW_SYSTEM, "WINDOW"),
        (GL_DEBUG_SOURCE_SHADER_COMPILER, "SHADER"),
        (GL_DEBUG_SOURCE_THIRD_PARTY, "THIRD PARTY"),
        (GL_DEBUG_SOURCE_APPLICATION, "APP"),
        (GL_DEBUG_SOURCE_OTHER, "OTHER"),
    ],
)
def test_source_label(source, label):
    assert source_label(source) == label


def test_unknown_source_is_other():
    assert source_label(12345) == "OTHER"


@pytest.mark.parametrize(
    "severity, level",
    [
        (GL_DEBUG_SEVERITY_LOW, logging.INFO),
        (GL_DEBUG_SEVERITY_MEDIUM, logging.WARNING),
        (GL_DEBUG_SEVERITY_NOTIFICATION, logging.INFO),
    ],
)
def test_debug_message_levels(caplog, severity, level):
    with caplog.at_level(logging.DEBUG, logger="meshforge"):
        result = gl_debug_message(GL_DEBUG_SOURCE_SHADER_COMPILER, severity, "hello")
    assert result == level
    assert [r.levelno for r in caplog.records] == [level]
    assert caplog.records[0].getMessage() == "[SHADER] hello"


def test_high_severity_logs_error_with_location(caplog):
    with caplog.at_level(logging.DEBUG, logger="meshforge"):
        result = gl_debug_message(GL_DEBUG_SOURCE_APPLICATION, GL_DEBUG_SEVERITY_HIGH, "broken {x}")
    assert result == logging.ERROR
    assert caplog.records[0].getMessage() == "[APP] broken {x}"
    assert caplog.records[1].getMessage().startswith("Location: \n")
    assert all(r.levelno == logging.ERROR for r in caplog.records)


def test_unknown_severity_is_dropped(caplog):
    with caplog.at_level(logging.DEBUG, logger="meshforge"):
        result = gl_debug_message(GL_DEBUG_SOURCE_API, 0, "ignored")
    assert result is None
    assert caplog.records == []


def test_toggle_starts_rotating():
    toggle = RotationToggle()
    assert toggle.update(False) is True


def test_toggle_flips_once_per_press():
    toggle = RotationToggle()
    assert toggle.update(True) is False
    assert toggle.update(True) is False
    assert toggle.update(False) is False
    assert toggle.update(True) is True
    assert toggle.update(False) is True


def test_toggle_two_presses_round_trip():
    toggle = RotationToggle()
    states = [toggle.update(p) for p in (True, False, True, False)]
    assert states[-1] == RotationToggle().rotating
    assert toggle.pressed is False