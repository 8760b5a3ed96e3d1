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

""" Errors raised while reading srf alignments and trf monomers. """


class SRFmonError(ValueError):
    """ Base class. Bad input is a ValueError, as it is everywhere else in SRFmon. """
    pass


class MalformedCigar(SRFmonError):
    """ A CIGAR string (or its absence) that cannot be parsed. Fatal for one alignment record. """
    pass


class InconsistentSpan(SRFmonError):
    """ The CIGAR implied query/target span disagrees with the declared PAF coordinates. """
    pass


class MalformedAlignment(SRFmonError):
    """ A PAF line that cannot be parsed into an alignment block. """
    pass


class MalformedMonomerRow(SRFmonError):
    """ A trf monomer table row that cannot be parsed. """
    pass


class EmptyPeriodicitySet(SRFmonError):
    """ No target monomer periods were given. Raised before any input is read. """
    pass


class InvalidTolerance(SRFmonError):
    """ A negative period tolerance. Raised before any input is read. """
    pass
