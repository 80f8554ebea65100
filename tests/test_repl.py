"""Tests for the interactive calculator loop (caldi/repl.py)."""

from __future__ import annotations

import io
import logging

from caldi.repl import DEFAULT_PROMPT, approximate_int, evaluate_line, format_value, run_repl


class TestFormatValue:
    def test_integer(self):
        assert format_value(42) == "42"
        assert format_value(-3) == "-3"

    def test_float_keeps_decimal_point(self):
        assert format_value(10.0) == "10.0"
        assert format_value(4.5) == "4.5"

    def test_special_floats(self):
        assert format_value(float("inf")) == "inf"
        assert format_value(float("-inf")) == "-inf"
        assert format_value(float("nan")) == "nan"

    def test_integer_too_long_for_str(self):
        text = format_value(3 * 10**5000)
        assert text.startswith("3.0")
        assert text.endswith("e+5000")

    def test_negative_integer_too_long_for_str(self):
        text = format_value(-3 * 10**5000)
        assert text.startswith("-3.0")
        assert text.endswith("e+5000")

    def test_mantissa_rounding_carries_into_exponent(self):
        assert format_value(99999996 * 10**4992) == "1.000000e+5000"
        assert format_value(10**5000 - 1) == "1.000000e+5000"

    def test_approximate_int_stays_normalized(self):
        assert approximate_int(99999996 * 10**4992) == (1.0, 5000)
        mantissa, exponent = approximate_int(-7 * 10**6000)
        assert 1 <= mantissa < 10
        assert (round(mantissa), exponent) == (7, 6000)


class TestEvaluateLine:
    def test_result(self):
        assert evaluate_line("9 / 2") == "4.5"
        assert evaluate_line("6 times 7") == "42"

    def test_error_is_rendered(self):
        assert evaluate_line("2 +") == "2 +\n   ^ unexpected end of expression encountered at position 3"

    def test_logs_parse_failure(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="caldi.repl"):
            evaluate_line("* 2")
        assert "Failed to parse" in caplog.text


class TestRunRepl:
    def test_evaluates_each_line(self):
        stdin = io.StringIO("1 + 1\n2 times 3\n")
        stdout = io.StringIO()

        count = run_repl(stdin, stdout)

        assert count == 2
        assert stdout.getvalue() == f"{DEFAULT_PROMPT}2\n{DEFAULT_PROMPT}6\n{DEFAULT_PROMPT}"

    def test_blank_lines_are_skipped(self):
        stdin = io.StringIO("\n   \n4 over 2\n")
        stdout = io.StringIO()

        assert run_repl(stdin, stdout, prompt="") == 1
        assert stdout.getvalue() == "2.0\n"

    def test_exit_word_stops_loop(self):
        stdin = io.StringIO("1\nQuit\n2\n")
        stdout = io.StringIO()

        assert run_repl(stdin, stdout, prompt="") == 1
        assert stdout.getvalue() == "1\n"

    def test_errors_do_not_stop_loop(self):
        stdin = io.StringIO("* 2\n3\n")
        stdout = io.StringIO()

        assert run_repl(stdin, stdout, prompt="") == 2
        lines = stdout.getvalue().splitlines()
        assert lines == ["* 2", "^ unexpected token Times at position 0", "3"]

    def test_windows_line_endings(self):
        stdin = io.StringIO("5 - 2\r\n")
        stdout = io.StringIO()

        run_repl(stdin, stdout, prompt="")

        assert stdout.getvalue() == "3\n"
