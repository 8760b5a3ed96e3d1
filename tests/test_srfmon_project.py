"""End to end tests for 'srfmon.py project'."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import srfmon_project
from srfmon_utilities.PeriodicityFilter import PeriodicityFilter

PAF = [
    "cen1\t1000\t0\t500\t+\tchr1\t100000\t1000\t1500\t495\t500\t60\ttp:A:P\tcg:Z:500M",
    "cen1\t1000\t0\t25\t-\tchr2\t5000\t100\t120\t20\t25\t60\ttp:A:S\tcg:Z:10M5I10M",
    "cen2\t800\t0\t100\t+\tchr1\t100000\t5000\t5100\t100\t100\t60\tcg:Z:10Q",
    "cen1\t1000\t0\t500\t+\tchr3\t9000\t0\t400\t400\t500\t60\tcg:Z:500M",
    "cen3\t300\t0\t300\t+\tchr1\t100000\t9000\t9300\t300\t300\t60\tcg:Z:300M",
]

MONOMERS = [
    "cen1\t200\t400\t170\tBBB",
    "cen1\t50\t220\t170\tAAA",
    "cen1\t600\t770\t170\tCCC",
    "cen1\t0\t42\t.\tDDD",
    "cen1\t5\t15\t100\tEEE",
    "cen1\tx\t10\t170\tZZZ",
    "cen1\t0\t20\t.\tGGG",
]

EXPECTED = [
    "chr1\t1000\t1400\tDDD,GGG,AAA,BBB\t0\t+\t1000\t1400\t0,0,0",
    "chr2\t100\t115\tGGG\t0\t-\t100\t115\t0,0,0",
]


@pytest.fixture
def inputs(tmp_path):
    paf = tmp_path / "srf.paf"
    paf.write_text("\n".join(PAF) + "\n")
    monomers = tmp_path / "monomers.tsv"
    monomers.write_text("\n".join(MONOMERS) + "\n")
    return str(paf), str(monomers)


def read_lines(fn):
    with open(fn) as f:
        return f.read().splitlines()


class TestProject:

    def test_output(self, inputs, tmp_path):
        out = str(tmp_path / "out.bed")
        reader, catalog, writer = srfmon_project.project(inputs[0], inputs[1], PeriodicityFilter([170, 42, 20], 0.02), out_file=out)
        assert read_lines(out) == EXPECTED
        assert reader.num_skipped == 2
        assert catalog.num_skipped == 1
        assert writer.num_records == 2

    def test_primary_only(self, inputs, tmp_path):
        out = str(tmp_path / "out.bed")
        srfmon_project.project(inputs[0], inputs[1], PeriodicityFilter([170, 42, 20], 0.02), out_file=out, primary_only=True)
        assert read_lines(out) == EXPECTED[:1]

    def test_idempotent(self, inputs, tmp_path):
        period_filter = PeriodicityFilter([170, 42, 20], 0.02)
        outputs = []
        for i, threads in enumerate([1, 1, 2]):
            out = str(tmp_path / ("out%d.bed" % i))
            srfmon_project.project(inputs[0], inputs[1], period_filter, out_file=out, num_threads=threads)
            with open(out, "rb") as f:
                outputs.append(f.read())
        assert outputs[0] == outputs[1] == outputs[2]


class TestMain:

    def _run(self, monkeypatch, args):
        monkeypatch.setattr(sys, "argv", ["srfmon_project.py"] + args)
        srfmon_project.main()

    def test_main(self, inputs, tmp_path, monkeypatch):
        out = str(tmp_path / "out.bed")
        self._run(monkeypatch, ["-p", inputs[0], "-m", inputs[1], "-o", out, "-s", "170", "42,20"])
        assert read_lines(out) == EXPECTED

    def test_default_sizes(self, inputs, tmp_path, monkeypatch):
        out = str(tmp_path / "out.bed")
        self._run(monkeypatch, ["-p", inputs[0], "-m", inputs[1], "-o", out])
        assert read_lines(out) == ["chr1\t1000\t1400\tDDD,AAA,BBB\t0\t+\t1000\t1400\t0,0,0"]

    def test_empty_periods(self, inputs, tmp_path, monkeypatch):
        out = tmp_path / "out.bed"
        with pytest.raises(SystemExit) as e:
            self._run(monkeypatch, ["-p", inputs[0], "-m", inputs[1], "-o", str(out), "-s", ","])
        assert e.value.code == 1
        assert not out.exists()

    def test_negative_tolerance(self, inputs, tmp_path, monkeypatch):
        out = tmp_path / "out.bed"
        with pytest.raises(SystemExit) as e:
            self._run(monkeypatch, ["-p", inputs[0], "-m", inputs[1], "-o", str(out), "-d", "-0.5"])
        assert e.value.code == 1
        assert not out.exists()

    def test_nan_tolerance(self, inputs, tmp_path, monkeypatch):
        out = tmp_path / "out.bed"
        with pytest.raises(SystemExit) as e:
            self._run(monkeypatch, ["-p", inputs[0], "-m", inputs[1], "-o", str(out), "-d", "nan"])
        assert e.value.code == 1
        assert not out.exists()

    def test_infinite_tolerance_keeps_every_period(self, inputs, tmp_path, monkeypatch):
        out = str(tmp_path / "out.bed")
        self._run(monkeypatch, ["-p", inputs[0], "-m", inputs[1], "-o", out, "-d", "inf"])
        assert read_lines(out) == [
            "chr1\t1000\t1400\tDDD,GGG,EEE,AAA,BBB\t0\t+\t1000\t1400\t0,0,0",
            "chr2\t100\t115\tGGG,EEE\t0\t-\t100\t115\t0,0,0",
        ]

    def test_missing_input(self, inputs, tmp_path, monkeypatch):
        with pytest.raises(SystemExit):
            self._run(monkeypatch, ["-p", str(tmp_path / "nope.paf"), "-m", inputs[1]])
