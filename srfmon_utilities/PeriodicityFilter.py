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

import math

from srfmon_utilities.exceptions import EmptyPeriodicitySet, InvalidTolerance


def matches(period, targets, tolerance):
    """
    Check if a monomer period is close enough to any of the target periods.

    The tolerance is a fraction of the target period (not the observed period) and the bound is inclusive, e.g. with
    a tolerance of 0.02, periods 167 to 173 (inclusive) all match 170. A period equal to a target always matches.

    :param period: Observed monomer period
    :param targets: Target periods
    :param tolerance: Allowed relative difference
    """
    for t in targets:
        if period == t:
            return True
        if abs(period - t) / t <= tolerance:
            return True
    return False


class PeriodicityFilter:
    """
    The target monomer periods and period tolerance for one run.

    Construction fails if the configuration is unusable, so a PeriodicityFilter should be made before any input is
    read.
    """

    def __init__(self, targets, tolerance):
        targets = set(targets)
        if not targets:
            raise EmptyPeriodicitySet("At least one monomer period is required")

        for t in targets:
            if isinstance(t, bool) or not isinstance(t, int) or t <= 0:
                raise ValueError("Monomer periods must be positive integers. Got %r" % (t,))

        if math.isnan(tolerance) or tolerance < 0:
            raise InvalidTolerance("The period tolerance must be >= 0. Got %r" % (tolerance,))

        self.targets = tuple(sorted(targets))
        self.tolerance = tolerance

    def __str__(self):
        return "\n".join("    {}: {}-{}".format(t, lo, hi) for t, (lo, hi) in zip(self.targets, self.ranges()))

    def __call__(self, period):
        return self.accepts(period)

    def accepts(self, period):
        return matches(period, self.targets, self.tolerance)

    def ranges(self):
        """ The (min, max) accepted integer period for each target period. An infinite tolerance has no upper bound (math.inf). """
        ranges = []
        for t in self.targets:
            diff = t * self.tolerance
            if math.isinf(diff):
                ranges.append((1, math.inf))
                continue

            lo = max(1, math.ceil(t - diff))
            hi = math.floor(t + diff)

            # Rounding can leave the bounds just outside the inclusive range
            while lo > 1 and matches(lo - 1, [t], self.tolerance):
                lo -= 1
            while not matches(lo, [t], self.tolerance):
                lo += 1
            while matches(hi + 1, [t], self.tolerance):
                hi += 1
            while not matches(hi, [t], self.tolerance):
                hi -= 1
            ranges.append((lo, hi))
        return ranges
