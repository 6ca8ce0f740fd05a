"""
Reduce-side worker for the MapReduce framework.
Collects intermediate key/value records for one partition, groups them by
key, applies the job's reduce function and writes the partition output.
"""

from reduce_worker.config import ReduceSettings
from reduce_worker.errors import (
    ReduceTaskError,
    OutputUnavailableError,
    MissingIntermediateError,
    MalformedRecordError,
    EncodeError,
    ReduceFunctionError,
)
from reduce_worker.records import KeyValue
from reduce_worker.naming import reduce_name, merge_name
from reduce_worker.collector import collect, CollectStats
from reduce_worker.emitter import emit, EmitStats
from reduce_worker.reduce_executor import do_reduce, ReduceExecutor, ReduceReport

__all__ = [
    'ReduceSettings',
    'ReduceTaskError',
    'OutputUnavailableError',
    'MissingIntermediateError',
    'MalformedRecordError',
    'EncodeError',
    'ReduceFunctionError',
    'KeyValue',
    'reduce_name',
    'merge_name',
    'collect',
    'CollectStats',
    'emit',
    'EmitStats',
    'do_reduce',
    'ReduceExecutor',
    'ReduceReport',
]
