#!/usr/bin/env python3
#
# File: defendertest.py
#
# Description:
#
# Create a large number of 1 byte files (inodes) under PATH to test how
# file scanners, antivirus and defender engines cope with them.
#
# The files are spread evenly over a chain of DEPTH nested directories:
# PATH/defendertest_data/<dir1>/<dir2>/.../<dirDEPTH>, every level holding
# TOTAL/DEPTH files. The remainder of the division is not created.
# File and directory names are random uuid4 strings.
#
# The -h parameter produces this output:
# usage: defendertest [-h] [-p PATH] [-t TOTAL_INODES] [-d DEPTH]
#                     [--delay DELAY] [--seed SEED] [-q] [PATH]
# positional arguments:
#   PATH      path to create the test data at
# optional arguments:
#   -t, --total-inodes TOTAL_INODES
#             total number of 1B inodes to create (default: 1000000)
#   -d, --depth DEPTH
#             how deep to create subdirectories (default: 20)
#   --delay DELAY
#             seconds to pause after each directory (default: 0)
#   --seed SEED
#             seed the name generator for a repeatable tree
#   -q, --quiet
#             no progress bar
#

import os
import sys
import time
import datetime
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from .errors import DefenderTestError, InvalidRootPathError, InvalidTargetError
from .names import NameSupplier
from .tree import extend_and_fill, make_workdir

TOTAL_INODES = 1000000
DEPTH = 20


@dataclass
class RunResult:
    inodes: int
    directories: int
    elapsed: float  # seconds
    chain: List[Path] = field(default_factory=list)
    rejected: int = 0  # name collisions retried

    @property
    def ms_per_inode(self) -> float:
        if not self.inodes:
            return 0.0
        return self.elapsed * 1000.0 / self.inodes


def inodes_per_dir(total_inodes: int, depth: int) -> int:
    """files for every level, the remainder is dropped
    """
    if depth < 1:
        raise InvalidTargetError('Depth must be at least 1, got {}'.format(depth))
    if total_inodes < 1:
        raise InvalidTargetError('Total inodes must be at least 1, got {}'.format(total_inodes))
    per_dir = total_inodes // depth
    if per_dir == 0:
        raise InvalidTargetError(
            'Cannot spread {} inodes over {} directories, use a smaller depth'.format(
                total_inodes, depth))
    return per_dir


def validate(path, total_inodes: int, depth: int, delay: float = 0) -> int:
    """check everything before touching the disk,
    returns the number of files per directory
    """
    if not os.path.exists(path):
        raise InvalidRootPathError(path)
    if delay < 0:
        raise InvalidTargetError('Delay must not be negative, got {}'.format(delay))
    return inodes_per_dir(total_inodes, depth)


def build(path, total_inodes: int = TOTAL_INODES, depth: int = DEPTH,
          names: Optional[NameSupplier] = None, delay: float = 0,
          quiet: bool = False) -> RunResult:
    """
    Create the test data under path.

    Params:
    path - existing folder, defendertest_data is created inside
    total_inodes - files requested, depth * (total_inodes // depth) are made
    depth - number of chained directories
    names - NameSupplier, seed it for a repeatable tree
    delay - pause in seconds after each directory, only to pace the bar
    quiet - hide the progress bar
    """
    per_dir = validate(path, total_inodes, depth, delay)
    if names is None:
        names = NameSupplier()

    next_dir = make_workdir(path)
    chain = []
    current_inodes = 0

    start = time.time()
    with tqdm(total=per_dir * depth, unit="inode", file=sys.stdout,
              disable=quiet) as pb:
        for _ in range(depth):
            next_dir = extend_and_fill(next_dir, per_dir, names, pb.update)
            chain.append(next_dir)
            current_inodes += per_dir
            if delay:
                time.sleep(delay)
    elapsed = time.time() - start

    if not quiet:
        print("Process complete")
    return RunResult(current_inodes, len(chain), elapsed, chain, names.rejected)


def human_time(seconds: float) -> str:
    return "%s sec [%s]" % (round(seconds, 2), datetime.timedelta(seconds=seconds))


def report(result: RunResult):
    print("Total inodes created: %s" % result.inodes)
    print("Elapsed time: %s" % human_time(result.elapsed))
    print("Time per inode: %.8fms" % result.ms_per_inode)
    if result.rejected:
        print("Name collisions retried: %s" % result.rejected)


def get_param(argv=None):
    """handle command line parameters, test using -h parameter...
    """
    import argparse
    parser = argparse.ArgumentParser(
        prog='defendertest',
        description='Creates test data for defender testing',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    parser.add_argument('PATH', nargs='?', help='path to create the test data at')
    parser.add_argument('-p', '--path', dest='path_opt', metavar='PATH',
                        help='same as the positional PATH')
    parser.add_argument('-t', '--total-inodes', type=int, default=TOTAL_INODES,
                        help='total number of 1B inodes to create')
    parser.add_argument('-d', '--depth', type=int, default=DEPTH,
                        help='how deep to create subdirectories')
    parser.add_argument('--delay', type=float, default=0,
                        help='seconds to pause after each directory')
    parser.add_argument('--seed', type=int, default=None,
                        help='seed the name generator for a repeatable tree')
    parser.add_argument('-q', '--quiet', action='store_true', default=False,
                        help='no progress bar')
    args = parser.parse_args(argv)
    if args.path_opt and args.PATH and args.path_opt != args.PATH:
        parser.error('PATH given twice: {} and {}'.format(args.PATH, args.path_opt))
    PATH = args.path_opt or args.PATH
    if not PATH:
        parser.error('PATH is required')
    return (PATH, args.total_inodes, args.depth, args.delay, args.seed, args.quiet)


def main(argv=None):
    PATH, TOTAL, LEVELS, DELAY, SEED, QUIET = get_param(argv)
    try:
        result = build(PATH, TOTAL, LEVELS, NameSupplier(SEED), DELAY, QUIET)
    except DefenderTestError as ex:
        print('Error: {}'.format(ex), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print('Interrupted, partial data left in {}'.format(PATH), file=sys.stderr)
        return 130
    report(result)
    return 0


if __name__ == '__main__':
    sys.exit(main())
