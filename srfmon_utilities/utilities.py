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

import gzip
import time
import sys

""" A collection of various helper functions"""


def get_srfmon_version():
    return 'v0.1.0'


def log(level, message):
    """ Log messages to standard error. """
    sys.stderr.write(time.ctime() + ' --- ' + level + ': ' + message + "\n")
    sys.stderr.flush()


def open_text(fn, mode="r"):
    """
    Open a plain text or gzipped (.gz) file in text mode.
    :param fn: File name
    :param mode: "r" or "w"
    :return: A text file object
    """
    if mode not in {"r", "w"}:
        raise ValueError("mode must be 'r' or 'w'")

    if fn.endswith(".gz"):
        return gzip.open(fn, mode + "t")
    return open(fn, mode)


def parse_periods(values):
    """
    Convert a list of (possibly comma separated) period strings to a sorted list of unique integers.
    :param values: e.g. ["170", "340,42"]
    :return: e.g. [42, 170, 340]
    """
    periods = set()
    for value in values:
        for p in str(value).split(","):
            p = p.strip()
            if not p:
                continue
            try:
                periods.add(int(p))
            except ValueError:
                raise ValueError("Monomer periods must be integers. Got '%s'" % p)

    return sorted(periods)
