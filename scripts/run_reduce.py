#!/usr/bin/env python3
"""
Run one reduce task from a job file.

Usage:
    python3 scripts/run_reduce.py --job-name wc --reduce-task 0 --n-map 3 \
        --job-file examples/wordcount.py [--out-file out.txt] [--intermediate-dir DIR]

Settings not given on the command line are read from REDUCE_STRICT,
REDUCE_SORT_KEYS, INTERMEDIATE_DIR and LOG_LEVEL.
"""

import sys
import json
import logging
import argparse

from reduce_worker import ReduceExecutor, ReduceSettings, merge_name

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_OUTPUT_UNAVAILABLE = 2


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run a single MapReduce reduce task")
    parser.add_argument('--job-name', required=True, help='Name of the MapReduce job')
    parser.add_argument('--reduce-task', type=int, required=True, help='Reduce partition index')
    parser.add_argument('--n-map', type=int, required=True, help='Number of map tasks that ran')
    parser.add_argument('--job-file', required=True, help='Python file defining reduce_function')
    parser.add_argument('--out-file', help='Output path (default: merge name for the partition)')
    parser.add_argument('--intermediate-dir', help='Directory holding intermediate files')
    parser.add_argument('--strict', action='store_true', default=None,
                        help='Fail on missing or malformed intermediate data')
    parser.add_argument('--unsorted', action='store_true',
                        help='Emit keys in first-seen order instead of sorted')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.reduce_task < 0 or args.n_map < 0:
        print("--reduce-task and --n-map must be >= 0", file=sys.stderr)
        return EXIT_FAILED

    settings = ReduceSettings.from_env()
    if args.strict is not None:
        settings.strict = True
    if args.unsorted:
        settings.sort_keys = False
    if args.intermediate_dir:
        settings.intermediate_dir = args.intermediate_dir

    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    out_file = args.out_file or merge_name(args.job_name, args.reduce_task, settings.intermediate_dir)
    executor = ReduceExecutor(
        task_id=args.reduce_task,
        job_name=args.job_name,
        n_map=args.n_map,
        map_reduce_file=args.job_file,
        out_file=out_file,
        settings=settings,
    )
    result = executor.execute()
    print(json.dumps(result, indent=2))

    if result['fatal']:
        return EXIT_OUTPUT_UNAVAILABLE
    return EXIT_OK if result['success'] else EXIT_FAILED


if __name__ == '__main__':
    sys.exit(main())
