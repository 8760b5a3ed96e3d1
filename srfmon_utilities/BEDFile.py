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

import sys

from srfmon_utilities.utilities import open_text


class BED9Record:
    """ One BED9 line: a target interval annotated with the monomer sequences projected onto it. """

    score = 0
    color = "0,0,0"

    def __init__(self, in_chrom, in_start, in_end, in_names, in_strand):
        if in_start > in_end:
            raise ValueError("Start coordinates should always be <= end coordinates")

        self.chrom = in_chrom
        self.start = in_start
        self.end = in_end
        self.names = tuple(in_names)
        self.strand = in_strand

    @classmethod
    def from_group(cls, group):
        itv = group.interval
        return cls(itv.ref_header, itv.start, itv.end, group.sequences, itv.strand)

    @property
    def thick_start(self):
        return self.start

    @property
    def thick_end(self):
        return self.end

    @property
    def name(self):
        return ",".join(self.names)

    def __str__(self):
        return "\t".join([
            self.chrom,
            str(self.start),
            str(self.end),
            self.name,
            str(self.score),
            self.strand,
            str(self.thick_start),
            str(self.thick_end),
            self.color
        ])


class BEDWriter:
    """ Write BED9 records to a file (gzipped if the name ends in .gz) or to stdout if no file name is given. """

    def __init__(self, out_file=None):
        self.out_file = out_file
        self.num_records = 0
        self._fh = None

    def __enter__(self):
        if self.out_file:
            self._fh = open_text(self.out_file, "w")
        else:
            self._fh = sys.stdout
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._fh is sys.stdout:
            self._fh.flush()
        else:
            self._fh.close()
        self._fh = None

    def write(self, record):
        if self._fh is None:
            raise RuntimeError("BEDWriter must be used as a context manager")

        self._fh.write(str(record) + "\n")
        self.num_records += 1

    def write_group(self, group):
        self.write(BED9Record.from_group(group))
