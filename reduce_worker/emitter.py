"""
Emit phase of a reduce task: apply the reduce function to each grouped key
and write the results to the partition output file.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from reduce_worker.config import ReduceSettings
from reduce_worker.errors import OutputUnavailableError, EncodeError, ReduceFunctionError
from reduce_worker.records import KeyValue, encode_record

logger = logging.getLogger(__name__)

ReduceFunction = Callable[[str, List[str]], str]


@dataclass
class EmitStats:
    """
    Counters for one emit pass

    records_written counts lines handed to the output buffer. When the final
    flush fails write_failed is set and some of those lines may be missing
    from disk.
    """
    keys_total: int = 0
    records_written: int = 0
    records_skipped: int = 0
    write_failed: bool = False


def emit(grouped: Dict[str, List[str]], out_file: str, reduce_fn: ReduceFunction,
         settings: Optional[ReduceSettings] = None) -> EmitStats:
    """
    Reduce every key in `grouped` once and write the results to `out_file`.

    The output file is truncated first. A record whose reduced value can't be
    encoded is skipped. A failing write stops the loop and leaves whatever was
    written before it in place.

    Args:
        grouped: Mapping of key to its ordered values
        out_file: Path of the partition output file
        reduce_fn: Function (key, values) -> reduced value string
        settings: Reduce settings; defaults to best-effort mode, sorted keys

    Returns:
        EmitStats for the pass

    Raises:
        OutputUnavailableError: If out_file can't be opened for writing
        ReduceFunctionError: If reduce_fn raises
        EncodeError: strict mode, a reduced value can't be encoded
    """
    settings = settings or ReduceSettings()
    stats = EmitStats(keys_total=len(grouped))

    try:
        f = open(out_file, 'w', encoding='utf-8')
    except OSError as e:
        raise OutputUnavailableError(out_file, e) from e

    keys = sorted(grouped) if settings.sort_keys else list(grouped)
    try:
        for key in keys:
            try:
                result = reduce_fn(key, grouped[key])
            except Exception as e:
                raise ReduceFunctionError(key, e) from e

            try:
                line = encode_record(KeyValue(key, result))
            except ValueError as e:
                if settings.strict:
                    raise EncodeError(key, str(e)) from e
                logger.warning(f"Skipping reduced record for key {key!r}: {e}")
                stats.records_skipped += 1
                continue

            try:
                f.write(line)
            except OSError as e:
                # sink is gone, later writes would fail the same way
                logger.error(f"Write to {out_file} failed after {stats.records_written} records: {e}")
                stats.write_failed = True
                break
            except ValueError as e:
                if not getattr(f, 'closed', False):
                    raise
                logger.error(f"Output {out_file} closed after {stats.records_written} records: {e}")
                stats.write_failed = True
                break
            stats.records_written += 1
    finally:
        try:
            f.close()
        except OSError as e:
            logger.error(f"Flushing {out_file} failed: {e}")
            stats.write_failed = True

    logger.info(f"Wrote {stats.records_written}/{stats.keys_total} reduced records to {out_file}")
    return stats
