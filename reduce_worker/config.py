"""
Settings for a reduce task.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

_TRUE = ('1', 'true', 'yes', 'on')
_FALSE = ('0', 'false', 'no', 'off', '')


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    raw = raw.strip().lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


@dataclass
class ReduceSettings:
    """Behaviour switches for a reduce task"""
    # Fail on a missing intermediate file, malformed record or unencodable
    # result instead of logging and skipping it.
    strict: bool = False
    # Emit keys in sorted order; otherwise in first-seen order.
    sort_keys: bool = True
    # Directory holding intermediate files; None means the working directory.
    intermediate_dir: Optional[str] = None
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls) -> 'ReduceSettings':
        """Build settings from the worker process environment"""
        log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"LOG_LEVEL must be a logging level name, got {log_level!r}")

        return cls(
            strict=_env_flag('REDUCE_STRICT', False),
            sort_keys=_env_flag('REDUCE_SORT_KEYS', True),
            intermediate_dir=os.environ.get('INTERMEDIATE_DIR') or None,
            log_level=log_level,
        )
