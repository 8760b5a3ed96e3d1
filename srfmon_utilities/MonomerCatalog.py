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

from collections import defaultdict

from intervaltree import IntervalTree

from srfmon_utilities.utilities import log, open_text
from srfmon_utilities.exceptions import MalformedMonomerRow


class ConsensusMonomer:
    """ A trf monomer found within an srf repeat consensus. Coordinates are 0-based, half-open. """

    __slots__ = ("consensus", "start", "end", "period", "sequence", "copy_num")

    def __init__(self, in_consensus, in_start, in_end, in_sequence, in_period=None, in_copy_num=None):
        if in_start >= in_end:
            raise MalformedMonomerRow("Monomer start (%d) should be < end (%d)" % (in_start, in_end))

        if in_period is None:
            in_period = in_end - in_start
        if in_period <= 0:
            raise MalformedMonomerRow("Monomer period should be > 0. Got %d" % in_period)

        self.consensus = in_consensus
        self.start = in_start
        self.end = in_end
        self.period = in_period
        self.sequence = in_sequence
        self.copy_num = in_copy_num

    def __repr__(self):
        return "ConsensusMonomer(%s:%d-%d, period=%d, %s)" % (self.consensus, self.start, self.end, self.period, self.sequence)

    def __eq__(self, other):
        if not isinstance(other, ConsensusMonomer):
            return NotImplemented
        return all(getattr(self, a) == getattr(other, a) for a in self.__slots__)

    def __hash__(self):
        return hash((self.consensus, self.start, self.end, self.period, self.sequence))


def parse_monomer_row(fields):
    """
    Parse a row of a monomer table. Two layouts are accepted:

    5 columns:  consensus, start, end, period, sequence
        An empty period (or '.') means end - start.

    11 columns (trf run on srf motifs):
        chrom, motif, start, end, period, copyNum, fracMatch, fracGap, score, entropy, pattern
        'motif' is the srf consensus name and 'pattern' is the monomer sequence.
    """
    if len(fields) not in {5, 11}:
        raise MalformedMonomerRow("Monomer rows should have 5 or 11 tab delimited fields. Got %d" % len(fields))

    copy_num = None
    try:
        if len(fields) == 5:
            name, start, end, period, seq = fields
            start, end = int(start), int(end)
            period = None if period in {"", "."} else int(period)
        else:
            name, start, end, period, copy_num, seq = fields[1], int(fields[2]), int(fields[3]), int(fields[4]), float(fields[5]), fields[10]
    except ValueError as e:
        raise MalformedMonomerRow("Could not parse numeric field: %s" % e)

    if not name or not seq:
        raise MalformedMonomerRow("detected empty consensus name or monomer sequence")

    return ConsensusMonomer(name, start, end, seq, in_period=period, in_copy_num=copy_num)


class TRFReader:
    """ Read monomers from a trf monomer table (gzip allowed). Malformed rows are logged and skipped. """

    def __init__(self, monomer_file):
        self.monomer_file = monomer_file
        self.num_skipped = 0

    def parse_monomers(self):
        """ Generator yielding ConsensusMonomers in file order. """
        with open_text(self.monomer_file) as f:
            for line_number, line in enumerate(f, 1):
                line = line.rstrip("\n")
                if not line.strip() or line.startswith("#"):
                    continue

                try:
                    yield parse_monomer_row(line.split("\t"))
                except MalformedMonomerRow as e:
                    self.num_skipped += 1
                    log("WARNING", "%s line %d: %s. Skipping this monomer." % (self.monomer_file, line_number, e))


class MonomerCatalog:
    """
    All monomers, indexed by srf consensus name.

    The monomers of each consensus are ordered by start position (ties keep the input order). An interval tree per
    consensus answers containment queries. The catalog is not modified after it is built, so it can be shared by all
    alignment blocks.
    """

    def __init__(self, monomers=()):
        by_name = defaultdict(list)
        for m in monomers:
            by_name[m.consensus].append(m)

        self.num_skipped = 0
        self._monomers = dict()
        self._trees = dict()
        for name, name_monomers in by_name.items():
            # sort() is stable
            name_monomers.sort(key=lambda x: x.start)
            self._monomers[name] = tuple(name_monomers)
            self._trees[name] = IntervalTree.from_tuples((m.start, m.end, i) for i, m in enumerate(name_monomers))

    @classmethod
    def from_file(cls, monomer_file):
        reader = TRFReader(monomer_file)
        catalog = cls(reader.parse_monomers())
        catalog.num_skipped = reader.num_skipped
        return catalog

    def __len__(self):
        return sum(len(i) for i in self._monomers.values())

    def __contains__(self, name):
        return name in self._monomers

    def names(self):
        return sorted(self._monomers)

    def get(self, name):
        """ All monomers of a consensus. Unknown consensus names get an empty tuple. """
        return self._monomers.get(name, ())

    def contained(self, name, start, end):
        """ The monomers of a consensus that are entirely within [start, end), in catalog order. """
        if name not in self._trees or start >= end:
            return ()

        hits = sorted(i.data for i in self._trees[name].envelop(start, end))
        return tuple(self._monomers[name][i] for i in hits)
