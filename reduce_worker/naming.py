"""
File naming shared by map tasks, reduce tasks and the merge step.
"""

import os
from typing import Optional


def reduce_name(job_name: str, map_task: int, reduce_task: int,
                base_dir: Optional[str] = None) -> str:
    """
    Path of the intermediate file map task `map_task` wrote for partition
    `reduce_task`.
    """
    name = f"mrtmp.{job_name}-{map_task}-{reduce_task}"
    return os.path.join(base_dir, name) if base_dir else name


def merge_name(job_name: str, reduce_task: int,
               base_dir: Optional[str] = None) -> str:
    """Path of the output file for partition `reduce_task`."""
    name = f"mrtmp.{job_name}-res-{reduce_task}"
    return os.path.join(base_dir, name) if base_dir else name
