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
import subprocess

from srfmon_utilities.utilities import get_srfmon_version


def main():
    VERSION = get_srfmon_version()
    CITATION = """
SRFmon has not been published. If you use it, please cite srf and TRF:

Zhang, Yujie, Justin Chu, Haoyu Cheng, and Heng Li. "De novo reconstruction of satellite repeat units from
sequence data." Genome Research 33.11 (2023): 1994-2001.

Benson, Gary. "Tandem repeats finder: a program to analyze DNA sequences."
Nucleic Acids Research 27.2 (1999): 573-580.
    """

    description = """
SRFmon: Project tandem repeat monomers onto satellite repeat alignments.
Version: %s

usage: srfmon.py <command> [options]

    monomer projection:
      project         project trf monomers onto srf alignments (BED9)

    options:
      -c, --citation
      -v, --version""" % VERSION

    arg_len = len(sys.argv)
    if arg_len == 1:
        print(description)

    if arg_len > 1:
        cmd = sys.argv[1]

        if cmd == "-h" or cmd == "--help":
            print(description)

        elif cmd == "-v" or cmd == "--version":
            print(VERSION)

        elif cmd == "-c" or cmd == "--citation":
            print(CITATION)

        elif cmd == "project":
            subcmd = ["srfmon_project.py"] + sys.argv[2:]
            sys.exit(subprocess.call(subcmd))

        else:
            print(description)
            print("\n** unrecognized command: %s **" % cmd)


if __name__ == "__main__":
    main()
