# tests/test_cli.py
"""
Tests for the better-casts command line interface.
"""

import json
import logging

import pytest

from better_casts import __version__
from better_casts.__main__ import EXIT_OK, EXIT_USAGE, EXIT_VIOLATION, main


@pytest.fixture(autouse=True)
def _restore_logger():
    logger = logging.getLogger("better_casts")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestClassifyCommand:

    def test_text(self, capsys):
        assert main(["classify", "int8_t", "int"]) == EXIT_OK
        assert capsys.readouterr().out.strip() == "int -> int8_t: narrow_cast"

    def test_json(self, capsys):
        assert main(["classify", "--json", "void*", "int*"]) == EXIT_OK
        data = json.loads(capsys.readouterr().out)
        assert data["category"] == "void_cast"
        assert data["needs_validation"] is False
        assert data["matches"] == ["void_cast"]

    def test_undefined_pair(self, capsys):
        assert main(["classify", "int8_t", "unsigned int"]) == EXIT_USAGE
        assert "no cast category" in capsys.readouterr().err

    def test_bad_spelling(self, capsys):
        assert main(["classify", "long double", "int"]) == EXIT_USAGE
        assert "error:" in capsys.readouterr().err


class TestCastCommand:

    def test_checked_success(self, capsys):
        assert main(["cast", "--checked", "int8_t", "int", "100"]) == EXIT_OK
        assert capsys.readouterr().out.strip() == "100"

    def test_checked_violation(self, capsys):
        assert main(["cast", "--checked", "int8_t", "int", "300"]) == EXIT_VIOLATION
        captured = capsys.readouterr()
        assert "narrow_cast failed" in captured.err
        assert captured.out == ""

    def test_unchecked_wraps(self, capsys):
        assert main(["cast", "--unchecked", "int8_t", "int", "300"]) == EXIT_OK
        assert capsys.readouterr().out.strip() == "44"

    def test_negative_value(self, capsys):
        assert main(["cast", "--checked", "unsigned int", "int", "-1"]) == EXIT_VIOLATION
        assert "negative number" in capsys.readouterr().err

    def test_hex_value(self, capsys):
        assert main(["cast", "--unchecked", "uint8_t", "uint32_t", "0x1ff"]) == EXIT_OK
        assert capsys.readouterr().out.strip() == "255"

    def test_rounding(self, capsys):
        argv = ["cast", "--checked", "--rounding", "ceiling", "int", "double", "3.7"]
        assert main(argv) == EXIT_OK
        assert capsys.readouterr().out.strip() == "4"

    def test_float_result(self, capsys):
        assert main(["cast", "--checked", "double", "int", "3"]) == EXIT_OK
        assert capsys.readouterr().out.strip() == "3.0"

    def test_unparseable_value(self, capsys):
        assert main(["cast", "--checked", "int8_t", "int", "ten"]) == EXIT_USAGE

    @pytest.mark.parametrize("text, expected", [("true", "1"), ("NO", "0"), ("1", "1")])
    def test_bool_source(self, capsys, text, expected):
        assert main(["cast", "--checked", "int", "bool", text]) == EXIT_OK
        assert capsys.readouterr().out.strip() == expected

    @pytest.mark.parametrize("text", ["2", "maybe", ""])
    def test_unrecognised_bool_source(self, capsys, text):
        assert main(["cast", "--checked", "int", "bool", text]) == EXIT_USAGE
        assert "is not a bool" in capsys.readouterr().err

    def test_checked_and_unchecked_exclusive(self):
        with pytest.raises(SystemExit):
            main(["cast", "--checked", "--unchecked", "int8_t", "int", "1"])


class TestInfoCommand:

    def test_json(self, capsys):
        assert main(["info", "--json"]) == EXIT_OK
        data = json.loads(capsys.readouterr().out)
        assert data["version"] == __version__
        assert "check_casts" in data

    def test_text(self, capsys):
        assert main(["info"]) == EXIT_OK
        assert "data_model:" in capsys.readouterr().out


class TestTopLevel:

    def test_no_command_prints_help(self, capsys):
        assert main([]) == EXIT_OK
        assert "better-casts" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])
        assert excinfo.value.code == 0
        assert __version__ in capsys.readouterr().out
