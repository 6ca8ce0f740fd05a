#!/usr/bin/env python3
"""
Reduce Task Executor
Executes reduce tasks by reading intermediate data, grouping by key,
applying reduce functions, and writing final output
"""

import time
import logging
import psutil
from dataclasses import dataclass
from typing import Optional

from reduce_worker.collector import collect, CollectStats
from reduce_worker.config import ReduceSettings
from reduce_worker.emitter import emit, EmitStats, ReduceFunction
from reduce_worker.errors import OutputUnavailableError
from reduce_worker.function_loader import FunctionLoader

logger = logging.getLogger(__name__)


@dataclass
class ReduceReport:
    """What happened during one reduce task"""
    collect: CollectStats
    emit: EmitStats

    @property
    def complete(self) -> bool:
        """True when no input or output record was lost"""
        return (self.collect.files_missing == 0
                and self.collect.records_skipped == 0
                and self.emit.records_skipped == 0
                and not self.emit.write_failed)


def do_reduce(job_name: str, reduce_task: int, out_file: str, n_map: int,
              reduce_fn: ReduceFunction,
              settings: Optional[ReduceSettings] = None) -> ReduceReport:
    """
    Run one reduce task: collect the partition's intermediate records from
    all n_map map tasks, group them by key, reduce each key once and write
    the results to out_file.

    Raises:
        OutputUnavailableError: If out_file can't be opened for writing
        ReduceFunctionError: If reduce_fn raises
        ReduceTaskError: strict mode, on any lost input or output record
    """
    settings = settings or ReduceSettings()
    grouped, collect_stats = collect(job_name, reduce_task, n_map, settings)
    emit_stats = emit(grouped, out_file, reduce_fn, settings)
    return ReduceReport(collect=collect_stats, emit=emit_stats)


class ReduceExecutor:
    """Executes a single reduce task for a worker"""

    def __init__(self, task_id: int, job_name: str, n_map: int,
                 map_reduce_file: str, out_file: str,
                 settings: Optional[ReduceSettings] = None):
        """
        Initialize the reduce executor

        Args:
            task_id: Reduce partition this task is responsible for
            job_name: Name of the MapReduce job
            n_map: Number of map tasks that produced intermediate files
            map_reduce_file: Path to user's job file defining reduce_function
            out_file: Path where the partition output should be written
            settings: Reduce settings; defaults to best-effort mode
        """
        self.task_id = task_id
        self.job_name = job_name
        self.n_map = n_map
        self.map_reduce_file = map_reduce_file
        self.out_file = out_file
        self.settings = settings or ReduceSettings()
        self.loader = FunctionLoader(map_reduce_file)
        self.process = psutil.Process()
        self.state = "PENDING"

    def get_state(self) -> str:
        """Current progress state of the task"""
        return self.state

    def get_memory_usage(self) -> int:
        """Get current memory usage of the worker process in bytes"""
        return self.process.memory_info().rss

    def execute(self) -> dict:
        """
        Execute the reduce task

        Returns:
            Dictionary with 'success', 'fatal', 'execution_time_ms',
            'error_message', 'complete', 'stats' and 'memory_bytes' fields
        """
        start_time = time.time()
        result = {
            'success': False,
            'fatal': False,
            'execution_time_ms': 0,
            'error_message': '',
            'complete': False,
            'stats': {},
            'memory_bytes': 0,
        }

        try:
            self.state = "STARTING"
            logger.info(f"Reduce task {self.task_id}: loading reduce function from {self.map_reduce_file}")
            reduce_fn = self.loader.get_reduce_function()

            self.state = "COLLECTING"
            grouped, collect_stats = collect(self.job_name, self.task_id, self.n_map, self.settings)

            self.state = "EMITTING"
            emit_stats = emit(grouped, self.out_file, reduce_fn, self.settings)
            report = ReduceReport(collect=collect_stats, emit=emit_stats)

            self.state = "COMPLETED"
            result['success'] = True
            result['complete'] = report.complete
            result['stats'] = {
                'files_read': collect_stats.files_read,
                'files_missing': collect_stats.files_missing,
                'records_read': collect_stats.records_read,
                'records_skipped': collect_stats.records_skipped,
                'keys': emit_stats.keys_total,
                'records_written': emit_stats.records_written,
                'records_unencodable': emit_stats.records_skipped,
                'write_failed': emit_stats.write_failed,
            }
            if not report.complete:
                logger.warning(f"Reduce task {self.task_id}: output written with lost records")

        except OutputUnavailableError as e:
            self.state = "FAILED"
            result['fatal'] = True
            result['error_message'] = str(e)
            logger.error(f"Reduce task {self.task_id} aborted: {e}")

        except Exception as e:
            self.state = "FAILED"
            result['error_message'] = str(e)
            logger.error(f"Reduce task {self.task_id} failed - Job: {self.job_name}. Error: {e}")

        finally:
            result['execution_time_ms'] = int((time.time() - start_time) * 1000)
            result['memory_bytes'] = self.get_memory_usage()

        logger.info(f"Reduce task {self.task_id}: finished in {result['execution_time_ms']}ms "
                    f"with state {self.state}")
        return result
