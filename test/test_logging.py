"""
Tests for the package logger hierarchy.
"""

import logging

import strategyconditions
from strategyconditions import package_logger, set_package_logger_name
from strategyconditions import condition as condition_module


def test_package_logger_names():
    assert package_logger("strategyconditions.grammar").name == "strategyconditions.grammar"
    assert package_logger("somewhere.else").name == "strategyconditions"


def test_rebinding_logger_root():
    try:
        set_package_logger_name("editor")
        assert condition_module.logger.name == "editor.condition"
        assert package_logger("strategyconditions.cli").name == "editor.cli"
    finally:
        set_package_logger_name("strategyconditions")
    assert condition_module.logger.name == "strategyconditions.condition"


def test_rejected_paste_is_logged(make_condition, caplog):
    condition = make_condition("p")
    with caplog.at_level(logging.INFO, logger="strategyconditions"):
        condition.insert_at(1, " and ???")
    assert any("Rejected pasted text" in record.message for record in caplog.records)
    assert strategyconditions.__version__
