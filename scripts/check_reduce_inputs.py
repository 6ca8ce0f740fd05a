#!/usr/bin/env python3
"""
Check that every map task produced a readable intermediate file for a
reduce partition before the reduce task is scheduled.

Usage:
    python3 scripts/check_reduce_inputs.py --job-name wc --reduce-task 0 --n-map 3 \
        [--intermediate-dir /path/to/shared/intermediate]
"""

import os
import sys
import argparse
from typing import List, Optional

from reduce_worker.naming import reduce_name
from reduce_worker.records import iter_records


def check_partition_inputs(job_name: str, reduce_task: int, n_map: int,
                           intermediate_dir: Optional[str] = None) -> List[dict]:
    """
    Inspect the intermediate files of one partition.

    Returns:
        One dict per map task with 'map_task', 'path', 'exists', 'records'
        and 'malformed' fields
    """
    report = []
    for map_task in range(n_map):
        path = reduce_name(job_name, map_task, reduce_task, intermediate_dir)
        entry = {'map_task': map_task, 'path': path, 'exists': False,
                 'records': 0, 'malformed': 0}
        try:
            with open(path, 'rb') as f:
                entry['exists'] = True
                for _, record, error in iter_records(f):
                    if error is None:
                        entry['records'] += 1
                    else:
                        entry['malformed'] += 1
        except OSError as e:
            entry['error'] = str(e)
        report.append(entry)
    return report


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Check reduce task inputs")
    parser.add_argument('--job-name', required=True)
    parser.add_argument('--reduce-task', type=int, required=True)
    parser.add_argument('--n-map', type=int, required=True)
    parser.add_argument('--intermediate-dir', default=os.environ.get('INTERMEDIATE_DIR'))
    args = parser.parse_args(argv)

    report = check_partition_inputs(args.job_name, args.reduce_task, args.n_map,
                                    args.intermediate_dir)
    ok = True
    for entry in report:
        if not entry['exists']:
            ok = False
            print(f"❌ map {entry['map_task']}: {entry['path']} missing ({entry.get('error', '')})")
        elif entry['malformed']:
            ok = False
            print(f"⚠️  map {entry['map_task']}: {entry['path']} {entry['records']} records, "
                  f"{entry['malformed']} malformed")
        else:
            print(f"✅ map {entry['map_task']}: {entry['path']} {entry['records']} records")

    total = sum(e['records'] for e in report)
    print(f"\nPartition {args.reduce_task}: {total} records across {args.n_map} map tasks")
    return 0 if ok else 1


if __name__ == '__main__':
    sys.exit(main())
