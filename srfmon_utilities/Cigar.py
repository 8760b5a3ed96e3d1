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

import re
import enum
from collections import namedtuple

from srfmon_utilities.exceptions import MalformedCigar


class CigarOpKind(enum.Enum):
    """ The closed set of alignment operations SRFmon understands. """
    MATCH = "M"
    MISMATCH = "X"
    INSERTION = "I"
    DELETION = "D"
    CLIP = "S"

    @property
    def consumes_query(self):
        return self in (CigarOpKind.MATCH, CigarOpKind.MISMATCH, CigarOpKind.INSERTION)

    @property
    def consumes_target(self):
        return self in (CigarOpKind.MATCH, CigarOpKind.MISMATCH, CigarOpKind.DELETION)

    @property
    def is_aligned(self):
        return self.consumes_query and self.consumes_target


# "=" is an extended CIGAR match. Hard and soft clips are both unmapped.
OPCODES = {
    "M": CigarOpKind.MATCH,
    "=": CigarOpKind.MATCH,
    "X": CigarOpKind.MISMATCH,
    "I": CigarOpKind.INSERTION,
    "D": CigarOpKind.DELETION,
    "S": CigarOpKind.CLIP,
    "H": CigarOpKind.CLIP,
}

CigarOp = namedtuple("CigarOp", "kind length")

_re_token = re.compile(r'(\d*)(\D?)')


def parse_cigar(cg):
    """
    Generator yielding the CIGAR operations of a CIGAR string, in order.
    :param cg: A CIGAR string, optionally prefixed with the PAF tag 'cg:Z:'
    """
    if cg.startswith("cg:Z:"):
        cg = cg[5:]

    if not cg:
        raise MalformedCigar("empty CIGAR string")

    pos = 0
    while pos < len(cg):
        m = _re_token.match(cg, pos)
        length, code = m.group(1), m.group(2)
        if not length:
            raise MalformedCigar("missing operation length at position %d of '%s'" % (pos, cg))
        if not code:
            raise MalformedCigar("operation length without an operation code at the end of '%s'" % cg)
        if code not in OPCODES:
            raise MalformedCigar("unrecognized operation code '%s' in '%s'" % (code, cg))

        yield CigarOp(OPCODES[code], int(length))
        pos = m.end()


class Cigar:
    """
    A parsed CIGAR string. Iterating over a Cigar object always yields the same sequence of CigarOps.

    Clips are only permitted at either end of the alignment. They are not part of the aligned query span.
    """

    def __init__(self, in_cigar):
        self.cigar_string = in_cigar[5:] if in_cigar.startswith("cg:Z:") else in_cigar
        self.ops = tuple(parse_cigar(self.cigar_string))
        self._check_clips()

    def __iter__(self):
        return iter(self.ops)

    def __len__(self):
        return len(self.ops)

    def __str__(self):
        return self.cigar_string

    def _check_clips(self):
        aligned = [i for i, op in enumerate(self.ops) if op.kind is not CigarOpKind.CLIP]
        if not aligned:
            return

        for i in range(aligned[0], aligned[-1] + 1):
            if self.ops[i].kind is CigarOpKind.CLIP:
                raise MalformedCigar("clipping is only allowed at the ends of an alignment: '%s'" % self.cigar_string)

    def query_span(self):
        """ Number of query bases in the aligned portion of the alignment. """
        return sum(op.length for op in self.ops if op.kind.consumes_query)

    def target_span(self):
        """ Number of target bases in the aligned portion of the alignment. """
        return sum(op.length for op in self.ops if op.kind.consumes_target)

    def cursor(self):
        return CigarCursor(self)


class CigarCursor:
    """
    Walk the query and target coordinates of a CIGAR together.

    Positions are offsets from the start of the aligned portion of the alignment (clips excluded).
    Insertions contribute no target bases ("snap left") and deletions are absorbed as soon as the cursor
    reaches them, so a query position directly after a deletion lands on the first target base after it.

    This is the standalone, incremental walker API. AlignmentBlock does not use it. It maps positions with checkpoint
    arrays built from the same rules, and the two always agree.
    """

    def __init__(self, in_cigar):
        self.ops = [op for op in in_cigar if op.kind is not CigarOpKind.CLIP]
        self.query_pos = 0
        self.target_pos = 0

        # The operation under the cursor and how much of it has been consumed
        self._op_idx = 0
        self._op_used = 0
        self._absorb_deletions()

    def _absorb_deletions(self):
        while self._op_idx < len(self.ops):
            op = self.ops[self._op_idx]
            remaining = op.length - self._op_used
            if op.kind is CigarOpKind.DELETION:
                self.target_pos += remaining
            elif remaining:
                break
            self._op_idx += 1
            self._op_used = 0

    def at_end(self):
        return self._op_idx >= len(self.ops)

    def advance(self, query_delta):
        """
        Move the cursor forward by query_delta query bases.
        :return: The number of target bases consumed along the way
        """
        if query_delta < 0:
            raise ValueError("The CIGAR cursor can only move forward")

        start_target = self.target_pos
        while query_delta:
            if self.at_end():
                raise ValueError("Cannot advance past the end of the alignment")

            op = self.ops[self._op_idx]
            step = min(query_delta, op.length - self._op_used)
            if op.kind.consumes_target:
                self.target_pos += step
            self.query_pos += step
            self._op_used += step
            query_delta -= step
            self._absorb_deletions()

        return self.target_pos - start_target
