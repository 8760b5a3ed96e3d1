#!/usr/bin/env python

"""
MIT License

Copyright (c) 2024 The SRFmon developers

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.
"""

import itertools
from concurrent.futures import ProcessPoolExecutor


class TargetInterval:
    """ A half-open interval on a target (assembly) sequence. Coordinates are always forward strand. """

    __slots__ = ("ref_header", "start", "end", "strand")

    def __init__(self, in_ref_header, in_start, in_end, in_strand):
        if in_start > in_end:
            raise ValueError("Start coordinates should always be <= end coordinates")

        self.ref_header = in_ref_header
        self.start = in_start
        self.end = in_end
        self.strand = in_strand

    def __repr__(self):
        return "TargetInterval(%s:%d-%d(%s))" % (self.ref_header, self.start, self.end, self.strand)

    def __eq__(self, other):
        if not isinstance(other, TargetInterval):
            return NotImplemented
        return (self.ref_header, self.start, self.end, self.strand) == (other.ref_header, other.start, other.end, other.strand)

    def __len__(self):
        return self.end - self.start

    def is_empty(self):
        return self.start == self.end


class MonomerGroup:
    """
    The monomers retained for a single alignment block.

    Monomers are added in discovery order. The group interval is the smallest interval containing every monomer
    interval. Groups are never merged across alignment blocks, even if the blocks overlap on the target. Once
    finalized, a group can't be changed.
    """

    def __init__(self, in_block):
        self.ref_header = in_block.ref_header
        self.strand = in_block.strand
        self.query_header = in_block.query_header
        self.intervals = []
        self.sequences = []
        self._is_final = False

    def __len__(self):
        return len(self.sequences)

    def add(self, interval, sequence):
        if self._is_final:
            raise RuntimeError("Can't add monomers to a finalized MonomerGroup")
        if interval.is_empty():
            return

        self.intervals.append(interval)
        self.sequences.append(sequence)

    def finalize(self):
        self._is_final = True
        self.intervals = tuple(self.intervals)
        self.sequences = tuple(self.sequences)
        return self

    @property
    def interval(self):
        """ The merged target interval. None if the group is empty. """
        if not self.intervals:
            return None

        return TargetInterval(
            self.ref_header,
            min(i.start for i in self.intervals),
            max(i.end for i in self.intervals),
            self.strand
        )


class MonomerProjector:
    """
    Project catalog monomers onto the target sequences of srf alignments.

    For each alignment block, the monomers of the aligned consensus are filtered by period, and those lying entirely
    within the aligned part of the consensus are mapped to the target through the block's CIGAR. Everything else is
    silently ignored.
    """

    def __init__(self, in_catalog, in_period_filter):
        self.catalog = in_catalog
        self.period_filter = in_period_filter

    def project(self, block):
        """
        Project the monomers of one alignment block.
        :return: A finalized MonomerGroup, or None if no monomers were retained
        """
        group = MonomerGroup(block)
        for m in self.catalog.contained(block.query_header, block.query_start, block.query_end):
            if not self.period_filter.accepts(m.period):
                continue

            projection = block.project_interval(m.start, m.end)
            if projection is None:
                continue

            group.add(TargetInterval(block.ref_header, projection[0], projection[1], block.strand), m.sequence)

        if not len(group):
            return None
        return group.finalize()

    def project_all(self, blocks, num_threads=1, chunk_size=64):
        """
        Generator yielding the MonomerGroup of each alignment block that retains monomers, in the order of 'blocks'.

        With num_threads > 1, blocks are processed in separate worker processes. Every worker gets its own copy of
        the catalog and period filter when it starts.
        Blocks are read and dispatched chunk_size * num_threads at a time, so the alignment file is never held in
        memory all at once.
        """
        if num_threads <= 1:
            for block in blocks:
                group = self.project(block)
                if group is not None:
                    yield group
            return

        with ProcessPoolExecutor(max_workers=num_threads, initializer=_init_worker, initargs=(self.catalog, self.period_filter)) as executor:
            blocks = iter(blocks)
            batch_size = chunk_size * num_threads
            while True:
                batch = list(itertools.islice(blocks, batch_size))
                if not batch:
                    break

                # map() returns results in submission order
                for group in executor.map(_project_in_worker, batch, chunksize=chunk_size):
                    if group is not None:
                        yield group


_worker_projector = None


def _init_worker(catalog, period_filter):
    global _worker_projector
    _worker_projector = MonomerProjector(catalog, period_filter)


def _project_in_worker(block):
    return _worker_projector.project(block)
