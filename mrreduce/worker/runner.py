"""
Reduce Task Runner

Runs a single reduce task on this machine:
1. Reads the intermediate files of all map tasks for one partition
2. Applies a reduce function once per key
3. Writes the partition's output file for the merge stage

Usage:
    python -m mrreduce.worker.runner wcjob 0 3
    python -m mrreduce.worker.runner wcjob 0 3 --function count --sorted
    python -m mrreduce.worker.runner wcjob 0 3 -f mypkg.jobs:reduce -d /tmp/mr
"""

import argparse
import os
import sys
from datetime import datetime

from mrreduce.exceptions import ReduceTaskError
from mrreduce.framework.reducer import REDUCE_FUNCTIONS, resolve_reduce_function
from mrreduce.utils.naming import merge_name
from mrreduce.worker.executor import ReduceTaskExecutor


def build_parser():
    parser = argparse.ArgumentParser(description='Run one MapReduce reduce task')
    parser.add_argument('job_name', help='Name of the MapReduce job')
    parser.add_argument('reduce_task', type=int, help='Index of this reduce task')
    parser.add_argument('n_map', type=int, help='Number of map tasks that produced input')
    parser.add_argument('--output', '-o', type=str, default=None,
                        help='Output file (default: mrtmp.<job>-res-<reduce_task>)')
    parser.add_argument('--work-dir', '-d', type=str, default=None,
                        help='Directory holding intermediate files (default: $MR_WORK_DIR or .)')
    parser.add_argument('--function', '-f', type=str, default='word_count',
                        help=f"Reduce function: one of {', '.join(sorted(REDUCE_FUNCTIONS))} "
                             f"or package.module:attr (default: word_count)")
    parser.add_argument('--sorted', action='store_true',
                        help='Write output sorted by key')
    parser.add_argument('--workers', '-w', type=int, default=1,
                        help='Threads used to read intermediate files (default: 1)')
    parser.add_argument('--no-atomic', action='store_true',
                        help='Write output in place instead of via a temporary file')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Do not print progress')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.n_map < 0:
        parser.error('n_map must not be negative')
    if args.workers < 1:
        parser.error('--workers must be at least 1')

    try:
        reduce_f = resolve_reduce_function(args.function)
    except ValueError as e:
        parser.error(str(e))

    work_dir = args.work_dir or os.environ.get('MR_WORK_DIR')
    out_file = args.output or merge_name(args.job_name, args.reduce_task)

    executor = ReduceTaskExecutor(
        work_dir=work_dir,
        sort_keys=args.sorted,
        atomic_output=not args.no_atomic,
        read_workers=args.workers,
        verbose=not args.quiet,
    )

    try:
        executor.execute(args.job_name, args.reduce_task, out_file, args.n_map, reduce_f)
    except ReduceTaskError as e:
        print(f"[{datetime.now()}] Reduce task {args.reduce_task} failed: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
