"""Tests for helper functions."""

import gzip
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from srfmon_utilities.utilities import get_srfmon_version, log, open_text, parse_periods


class TestParsePeriods:

    def test_lists_and_commas(self):
        assert parse_periods(["170", "340,42", "170"]) == [42, 170, 340]

    def test_ints(self):
        assert parse_periods([170, 42]) == [42, 170]

    def test_empty(self):
        assert parse_periods([]) == []
        assert parse_periods([","]) == []

    def test_not_an_int(self):
        with pytest.raises(ValueError):
            parse_periods(["170", "1.5"])


class TestOpenText:

    def test_plain_and_gzip(self, tmp_path):
        for name in ("a.txt", "a.txt.gz"):
            fn = str(tmp_path / name)
            with open_text(fn, "w") as f:
                f.write("hello\n")
            with open_text(fn) as f:
                assert f.read() == "hello\n"

        with gzip.open(str(tmp_path / "a.txt.gz"), "rt") as f:
            assert f.read() == "hello\n"

    def test_bad_mode(self, tmp_path):
        with pytest.raises(ValueError):
            open_text(str(tmp_path / "a.txt"), "a")


def test_log(capsys):
    log("INFO", "Goodbye")
    assert capsys.readouterr().err.endswith(" --- INFO: Goodbye\n")


def test_version():
    assert get_srfmon_version().startswith("v")
