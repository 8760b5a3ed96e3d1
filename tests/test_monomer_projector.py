"""Tests for projecting monomers onto alignment blocks and grouping them."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from srfmon_utilities.AlignmentReader import AlignmentBlock
from srfmon_utilities.MonomerCatalog import ConsensusMonomer, MonomerCatalog
from srfmon_utilities.MonomerProjector import MonomerGroup, MonomerProjector, TargetInterval
from srfmon_utilities.PeriodicityFilter import PeriodicityFilter


def make_block(query, cigar, q_start, q_end, ref, r_start, r_end, strand="+"):
    return AlignmentBlock(query, 1000, q_start, q_end, strand, ref, 100000, r_start, r_end, 0, 0, 60, cigar)


@pytest.fixture
def catalog():
    return MonomerCatalog([
        ConsensusMonomer("cen1", 200, 400, "BBB", in_period=170),
        ConsensusMonomer("cen1", 50, 220, "AAA", in_period=170),
        ConsensusMonomer("cen1", 450, 620, "CCC", in_period=170),
        ConsensusMonomer("cen1", 10, 30, "SHORT", in_period=20),
        ConsensusMonomer("cen2", 0, 42, "DDD"),
    ])


@pytest.fixture
def projector(catalog):
    return MonomerProjector(catalog, PeriodicityFilter([170, 340, 42], 0.02))


class TestMonomerProjector:

    def test_overlapping_monomers_are_merged(self, projector):
        block = make_block("cen1", "500M", 0, 500, "chr1", 1000, 1500)
        group = projector.project(block)
        assert group.interval == TargetInterval("chr1", 1050, 1400, "+")
        assert group.sequences == ("AAA", "BBB")
        assert group.intervals == (
            TargetInterval("chr1", 1050, 1220, "+"),
            TargetInterval("chr1", 1200, 1400, "+"),
        )

    def test_monomers_beyond_block_are_dropped(self, projector):
        block = make_block("cen1", "300M", 100, 400, "chr1", 0, 300)
        group = projector.project(block)
        assert group.sequences == ("BBB",)
        assert group.interval == TargetInterval("chr1", 100, 300, "+")

    def test_no_monomers_retained(self, projector):
        assert projector.project(make_block("cen1", "100M", 0, 100, "chr1", 0, 100)) is None

    def test_unknown_consensus(self, projector):
        assert projector.project(make_block("cen9", "500M", 0, 500, "chr1", 0, 500)) is None

    def test_period_filter(self, catalog):
        projector = MonomerProjector(catalog, PeriodicityFilter([20], 0))
        group = projector.project(make_block("cen1", "500M", 0, 500, "chr1", 0, 500))
        assert group.sequences == ("SHORT",)

    def test_gapped_projection(self, projector):
        block = make_block("cen2", "10M5I10M5D20M", 0, 45, "chr5", 100, 145, strand="-")
        group = projector.project(block)
        # 42 maps to a position after the deletion: 100 + 10 + 10 + 5 + 17
        assert group.interval == TargetInterval("chr5", 100, 142, "-")
        assert group.sequences == ("DDD",)

    def test_zero_width_projection_is_dropped(self):
        catalog = MonomerCatalog([ConsensusMonomer("cen1", 11, 14, "INS", in_period=3)])
        projector = MonomerProjector(catalog, PeriodicityFilter([3], 0))
        assert projector.project(make_block("cen1", "10M5I10M", 0, 25, "chr1", 100, 120)) is None

    def test_blocks_are_not_merged(self, projector):
        blocks = [
            make_block("cen1", "500M", 0, 500, "chr1", 1000, 1500),
            make_block("cen1", "500M", 0, 500, "chr1", 1010, 1510),
        ]
        groups = list(projector.project_all(blocks))
        assert len(groups) == 2
        assert groups[0].interval == TargetInterval("chr1", 1050, 1400, "+")
        assert groups[1].interval == TargetInterval("chr1", 1060, 1410, "+")

    def test_project_all_keeps_order(self, projector):
        blocks = [
            make_block("cen1", "500M", 0, 500, "chr2", 0, 500),
            make_block("cen9", "500M", 0, 500, "chr1", 0, 500),
            make_block("cen2", "42M", 0, 42, "chr1", 7, 49, strand="-"),
            make_block("cen1", "500M", 0, 500, "chr1", 0, 500),
        ]
        groups = list(projector.project_all(blocks))
        assert [(g.ref_header, g.query_header) for g in groups] == [("chr2", "cen1"), ("chr1", "cen2"), ("chr1", "cen1")]

    def test_parallel_matches_serial(self, projector):
        blocks = []
        for i in range(40):
            blocks.append(make_block("cen1", "500M", 0, 500, "chr%d" % i, i * 10, i * 10 + 500))
            blocks.append(make_block("cen2", "20M2I20M", 0, 42, "chr%d" % i, i, i + 40, strand="-"))
            blocks.append(make_block("cen9", "20M", 0, 20, "chr%d" % i, i, i + 20))

        serial = [(g.interval, g.sequences) for g in projector.project_all(blocks)]
        parallel = [(g.interval, g.sequences) for g in projector.project_all(blocks, num_threads=2, chunk_size=7)]
        assert len(serial) == 80
        assert serial == parallel

    def test_parallel_reads_blocks_in_batches(self, projector):
        consumed = []

        def blocks():
            for i in range(50):
                consumed.append(i)
                yield make_block("cen1", "500M", 0, 500, "chr%d" % i, 0, 500)

        groups = projector.project_all(blocks(), num_threads=2, chunk_size=3)
        first = next(groups)
        assert first.ref_header == "chr0"
        assert len(consumed) == 6

        rest = list(groups)
        assert [g.ref_header for g in rest] == ["chr%d" % i for i in range(1, 50)]
        assert len(consumed) == 50


class TestMonomerGroup:

    def test_add_and_finalize(self):
        group = MonomerGroup(make_block("cen1", "10M", 0, 10, "chr1", 0, 10, strand="-"))
        assert group.interval is None
        group.add(TargetInterval("chr1", 5, 8, "-"), "B")
        group.add(TargetInterval("chr1", 2, 6, "-"), "A")
        group.add(TargetInterval("chr1", 3, 3, "-"), "EMPTY")
        group.finalize()
        assert group.sequences == ("B", "A")
        assert group.interval == TargetInterval("chr1", 2, 8, "-")
        with pytest.raises(RuntimeError):
            group.add(TargetInterval("chr1", 0, 1, "-"), "C")

    def test_target_interval(self):
        assert len(TargetInterval("chr1", 5, 8, "+")) == 3
        assert TargetInterval("chr1", 5, 5, "+").is_empty()
        with pytest.raises(ValueError):
            TargetInterval("chr1", 8, 5, "+")
