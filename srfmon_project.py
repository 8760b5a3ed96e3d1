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

import os
import sys
import argparse

from srfmon_utilities.utilities import log, get_srfmon_version, parse_periods
from srfmon_utilities.AlignmentReader import PAFReader
from srfmon_utilities.MonomerCatalog import MonomerCatalog
from srfmon_utilities.PeriodicityFilter import PeriodicityFilter
from srfmon_utilities.MonomerProjector import MonomerProjector
from srfmon_utilities.BEDFile import BEDWriter


def project(paf_file, monomer_file, period_filter, out_file=None, num_threads=1, primary_only=False):
    """
    Project the monomers in 'monomer_file' onto the srf alignments in 'paf_file' and write BED9 records.
    :return: The PAFReader, MonomerCatalog and BEDWriter used, for reporting
    """
    catalog = MonomerCatalog.from_file(monomer_file)
    log("INFO", "Loaded %d monomers for %d srf repeats" % (len(catalog), len(catalog.names())))

    reader = PAFReader(paf_file, primary_only=primary_only)
    projector = MonomerProjector(catalog, period_filter)
    with BEDWriter(out_file) as writer:
        for group in projector.project_all(reader.parse_alignments(), num_threads=num_threads):
            writer.write_group(group)

    return reader, catalog, writer


def main():
    parser = argparse.ArgumentParser(description="Project trf monomers of a given periodicity onto srf alignments and write a BED9 file", usage="srfmon.py project -p <srf.paf> -m <monomers.tsv> [options]")
    parser.add_argument("-p", "--paf", metavar="<srf.paf>", default="", type=str, help="PAF file of srf motifs aligned to an assembly. Requires the 'cg' CIGAR tag (e.g. 'minimap2 -c --eqx'). gzip allowed.")
    parser.add_argument("-m", "--monomers", metavar="<monomers.tsv>", default="", type=str, help="trf monomer table for the srf motifs. gzip allowed.")
    parser.add_argument("-o", "--outfile", metavar="PATH", default="", type=str, help="output BED9 file path [stdout]")
    parser.add_argument("-s", "--sizes", metavar="INT", nargs="+", default=["170", "340", "42"], type=str, help="monomer periods in bp to search for [170 340 42]")
    parser.add_argument("-d", "--diff", metavar="FLOAT", default=0.02, type=float, help="allowed period difference as a fraction of each monomer period, e.g. 0.02 accepts 167-173 for 170 [0.02]")
    parser.add_argument("-t", metavar="INT", type=int, default=1, help="number of worker processes [1]")
    parser.add_argument("--primary", action="store_true", default=False, help="only use primary alignments (tp:A:P)")

    args = parser.parse_args()

    if not args.paf or not args.monomers:
        parser.print_help()
        print("\n** The PAF and monomer files are required **")
        sys.exit(1)

    log("VERSION", "SRFmon " + get_srfmon_version())
    log("CMD", "srfmon.py project " + " ".join(sys.argv[1:]))

    # Validate the configuration before touching any input or output
    try:
        period_filter = PeriodicityFilter(parse_periods(args.sizes), args.diff)
    except ValueError as e:
        log("ERROR", "%s: %s" % (type(e).__name__, e))
        sys.exit(1)

    paf_file = os.path.abspath(args.paf)
    monomer_file = os.path.abspath(args.monomers)
    out_file = os.path.abspath(args.outfile) if args.outfile else None
    for fn in (paf_file, monomer_file):
        if not os.path.isfile(fn):
            log("ERROR", "Could not find file: %s" % fn)
            sys.exit(1)

    if args.t < 1:
        log("ERROR", "The number of worker processes must be >= 1")
        sys.exit(1)

    log("INFO", "Using monomer period ranges:\n" + str(period_filter))

    reader, catalog, writer = project(paf_file, monomer_file, period_filter, out_file=out_file, num_threads=args.t, primary_only=args.primary)

    if catalog.num_skipped:
        log("WARNING", "Skipped %d malformed monomer rows" % catalog.num_skipped)
    if reader.num_skipped:
        log("WARNING", "Skipped %d malformed alignments" % reader.num_skipped)
    if reader.num_filtered:
        log("INFO", "Ignored %d non-primary alignments" % reader.num_filtered)
    log("INFO", "Wrote %d BED9 records" % writer.num_records)
    log("INFO", "Goodbye")


if __name__ == "__main__":
    main()
