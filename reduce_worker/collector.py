"""
Collect phase of a reduce task: read every map task's intermediate file for
one partition and group the decoded values by key.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from reduce_worker.config import ReduceSettings
from reduce_worker.errors import MissingIntermediateError, MalformedRecordError
from reduce_worker.naming import reduce_name
from reduce_worker.records import iter_records

logger = logging.getLogger(__name__)


@dataclass
class CollectStats:
    """Counters for one collect pass"""
    files_read: int = 0
    files_missing: int = 0
    records_read: int = 0
    records_skipped: int = 0
    missing_files: List[str] = field(default_factory=list)


def collect(job_name: str, reduce_task: int, n_map: int,
            settings: Optional[ReduceSettings] = None
            ) -> Tuple[Dict[str, List[str]], CollectStats]:
    """
    Read and group the intermediate records of one reduce partition.

    Files are read in map task order, and values keep the order in which they
    were decoded, so grouped[key] lists values by map task index and then by
    position within the file.

    Args:
        job_name: Name of the MapReduce job
        reduce_task: Partition index this task reduces
        n_map: Number of map tasks that ran (M)
        settings: Reduce settings; defaults to best-effort mode

    Returns:
        (grouped, stats) where grouped maps each key to its values

    Raises:
        ValueError: If reduce_task or n_map is negative
        MissingIntermediateError: strict mode, an intermediate file can't be opened
        MalformedRecordError: strict mode, a record can't be decoded
    """
    if reduce_task < 0:
        raise ValueError(f"reduce_task must be >= 0, got {reduce_task}")
    if n_map < 0:
        raise ValueError(f"n_map must be >= 0, got {n_map}")
    settings = settings or ReduceSettings()

    grouped: Dict[str, List[str]] = {}
    stats = CollectStats()

    for map_task in range(n_map):
        path = reduce_name(job_name, map_task, reduce_task, settings.intermediate_dir)
        try:
            f = open(path, 'rb')
        except OSError as e:
            if settings.strict:
                raise MissingIntermediateError(path, map_task, e) from e
            logger.warning(f"Reduce task {reduce_task}: cannot open intermediate file {path}: {e}")
            stats.files_missing += 1
            stats.missing_files.append(path)
            continue

        with f:
            stats.files_read += 1
            for line_no, record, error in iter_records(f):
                if error is not None:
                    if settings.strict:
                        raise MalformedRecordError(path, line_no, error)
                    logger.warning(f"Reduce task {reduce_task}: skipping malformed record "
                                   f"in {path} at line {line_no}: {error}")
                    stats.records_skipped += 1
                    continue

                grouped.setdefault(record.key, []).append(record.value)
                stats.records_read += 1

        logger.debug(f"Reduce task {reduce_task}: read {path}")

    logger.info(f"Reduce task {reduce_task}: read {stats.files_read}/{n_map} files, "
                f"{stats.records_read} records, {stats.records_skipped} malformed, "
                f"{len(grouped)} unique keys")
    return grouped, stats
