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

import numpy as np

from srfmon_utilities.utilities import log, open_text
from srfmon_utilities.exceptions import SRFmonError, MalformedAlignment, MalformedCigar, InconsistentSpan
from srfmon_utilities.Cigar import Cigar, CigarOpKind


class AlignmentBlock:
    """
    A single srf alignment (one PAF line) of a repeat consensus (query) to an assembly sequence (target),
    along with its CIGAR operations.

    An AlignmentBlock maps query consensus coordinates to target coordinates. The CIGAR is replayed once and a
    checkpoint (query offset, target offset, operation) is recorded at every operation boundary. A query offset is
    mapped with a binary search for the last checkpoint at or before it:

        - within a match/mismatch run, the offset into the run is added to the checkpoint's target offset
        - within an insertion, the checkpoint's target offset is used (the target base before the insertion)
        - a deletion shares its query offset with the next checkpoint, which wins, so deletions are skipped over

    Target coordinates are always forward strand coordinates. The strand is reported, never used to flip intervals.
    """

    def __init__(self, in_query_header, in_query_len, in_query_start, in_query_end, in_strand, in_ref_header, in_ref_len, in_ref_start, in_ref_end, in_num_match, in_aln_len, in_mapq, in_cigar, in_tags=None):
        self.query_header = in_query_header
        self.query_len = in_query_len
        self.query_start = in_query_start
        self.query_end = in_query_end
        self.strand = in_strand
        self.ref_header = in_ref_header
        self.ref_len = in_ref_len
        self.ref_start = in_ref_start
        self.ref_end = in_ref_end
        self.num_match = in_num_match
        self.aln_len = in_aln_len
        self.mapq = in_mapq
        self.tags = dict(in_tags) if in_tags else dict()

        if not isinstance(in_cigar, Cigar):
            in_cigar = Cigar(in_cigar)
        self.cigar = in_cigar

        # Start positions should be before end positions for both query and target
        if self.query_start > self.query_end or self.ref_start > self.ref_end:
            raise MalformedAlignment("Start coordinates should always be <= end coordinates")

        if self.strand not in {"+", "-"}:
            raise MalformedAlignment("Strand must be '+' or '-'. Got '%s'" % self.strand)

        self.validate()

        self._cp_query = None
        self._cp_ref = None
        self._cp_kinds = None
        self._build_checkpoints()

    def __str__(self):
        fields = [
            self.query_header,
            str(self.query_len),
            str(self.query_start),
            str(self.query_end),
            self.strand,
            self.ref_header,
            str(self.ref_len),
            str(self.ref_start),
            str(self.ref_end),
            str(self.num_match),
            str(self.aln_len),
            str(self.mapq)
        ]
        fields += [":".join((k,) + v) for k, v in self.tags.items() if k != "cg"]
        fields.append("cg:Z:" + str(self.cigar))
        return "\t".join(fields)

    def validate(self):
        """ Check that the CIGAR spans agree with the declared query and target coordinates. """
        q_span = self.cigar.query_span()
        r_span = self.cigar.target_span()
        if q_span != self.query_end - self.query_start:
            raise InconsistentSpan(
                "CIGAR query span (%d) does not match query coordinates %d-%d" % (q_span, self.query_start, self.query_end)
            )
        if r_span != self.ref_end - self.ref_start:
            raise InconsistentSpan(
                "CIGAR target span (%d) does not match target coordinates %d-%d" % (r_span, self.ref_start, self.ref_end)
            )

    def _build_checkpoints(self):
        """ Replay the CIGAR and record cumulative query/target offsets at each operation boundary. """
        q_pos, r_pos = self.query_start, self.ref_start
        q_cps, r_cps, kinds = [], [], []
        for op in self.cigar:
            if op.kind is CigarOpKind.CLIP:
                continue

            q_cps.append(q_pos)
            r_cps.append(r_pos)
            kinds.append(op.kind)
            if op.kind.consumes_query:
                q_pos += op.length
            if op.kind.consumes_target:
                r_pos += op.length

        # Terminal checkpoint, used to map the exclusive end of an interval
        q_cps.append(q_pos)
        r_cps.append(r_pos)
        kinds.append(None)

        self._cp_query = np.array(q_cps, dtype=np.int64)
        self._cp_ref = np.array(r_cps, dtype=np.int64)
        self._cp_kinds = kinds

    def _lookup(self, pos, positions, other_positions):
        i = int(np.searchsorted(positions, pos, side="right")) - 1
        kind = self._cp_kinds[i]
        if kind is not None and kind.is_aligned:
            return int(other_positions[i]) + pos - int(positions[i])
        return int(other_positions[i])

    def query_to_target(self, pos):
        """
        Map a query position to a target position.
        :return: The target position, or None if the query position is not within the aligned query interval
        """
        if not self.query_start <= pos < self.query_end:
            return None
        return self._lookup(pos, self._cp_query, self._cp_ref)

    def target_to_query(self, pos):
        """
        Map a target position back to a query position. Positions within deletions snap to the query position
        before the deletion.
        :return: The query position, or None if the target position is not within the aligned target interval
        """
        if not self.ref_start <= pos < self.ref_end:
            return None
        return self._lookup(pos, self._cp_ref, self._cp_query)

    def project_interval(self, start, end):
        """
        Project a half-open query interval onto the target.
        :return: A (start, end) tuple of target coordinates, or None if the query interval is not entirely within the
        aligned query interval or if it projects onto an empty target interval.
        """
        if start >= end or start < self.query_start or end > self.query_end:
            return None

        r_start = self._lookup(start, self._cp_query, self._cp_ref)
        r_end = self._lookup(end, self._cp_query, self._cp_ref)
        if r_end <= r_start:
            return None
        return r_start, r_end

    def is_primary(self):
        """ Alignments without a 'tp' tag are assumed to be primary. """
        return self.tags.get("tp", ("A", "P"))[1] == "P"


def parse_tags(fields):
    """ Convert SAM-like 'TAG:TYPE:VALUE' fields to a dictionary (TAG -> (TYPE, VALUE)). """
    tags = dict()
    for field in fields:
        parts = field.split(":", 2)
        if len(parts) != 3:
            raise MalformedAlignment("Invalid optional field: '%s'" % field)
        tags[parts[0]] = (parts[1], parts[2])
    return tags


def parse_paf_line(line):
    """
    Parse a single PAF line into an AlignmentBlock.
    :param line: The tab delimited PAF line. The line must carry a 'cg:Z:' CIGAR string.
    """
    fields = line.rstrip("\n").split("\t")
    if len(fields) < 12:
        raise MalformedAlignment("PAF lines should have at least 12 tab delimited fields. Got %d" % len(fields))

    try:
        int_fields = [int(fields[i]) for i in (1, 2, 3, 6, 7, 8, 9, 10, 11)]
    except ValueError:
        raise MalformedAlignment("Expected integer PAF fields in columns 2-4 and 7-12")

    tags = parse_tags(fields[12:])
    if "cg" not in tags:
        raise MalformedCigar("Alignment has no CIGAR string (cg:Z:). Align with e.g. 'minimap2 -c --eqx'")

    q_len, q_start, q_end, r_len, r_start, r_end, num_match, aln_len, mapq = int_fields
    return AlignmentBlock(
        fields[0],
        q_len,
        q_start,
        q_end,
        fields[4],
        fields[5],
        r_len,
        r_start,
        r_end,
        num_match,
        aln_len,
        mapq,
        tags["cg"][1],
        in_tags=tags
    )


class PAFReader:
    """
    Read srf alignments from a PAF file (gzip allowed). Lines that can't be turned into an AlignmentBlock are
    logged and skipped.
    """

    def __init__(self, aln_file, primary_only=False):
        self.aln_file = aln_file
        self.primary_only = primary_only
        self.num_skipped = 0
        self.num_filtered = 0

    def parse_alignments(self):
        """ Generator yielding individual AlignmentBlocks of a PAF file, in file order. """
        with open_text(self.aln_file) as f:
            for line_number, line in enumerate(f, 1):
                if not line.strip() or line.startswith("#"):
                    continue

                try:
                    block = parse_paf_line(line)
                except SRFmonError as e:
                    self.num_skipped += 1
                    log("WARNING", "%s line %d: %s: %s. Skipping this alignment." % (self.aln_file, line_number, type(e).__name__, e))
                    continue

                if self.primary_only and not block.is_primary():
                    self.num_filtered += 1
                    continue

                yield block
