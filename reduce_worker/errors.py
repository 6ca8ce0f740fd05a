"""
Exceptions raised by a reduce task.

Only OutputUnavailableError and ReduceFunctionError are raised in the default
best-effort mode. The others are raised when ReduceSettings.strict is set.
"""


class ReduceTaskError(RuntimeError):
    """Base class for reduce task failures"""


class OutputUnavailableError(ReduceTaskError):
    """The partition output file could not be opened for writing"""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"Cannot open reduce output {path}: {cause}")
        self.path = path
        self.cause = cause


class MissingIntermediateError(ReduceTaskError):
    """An intermediate file could not be opened"""

    def __init__(self, path: str, map_task: int, cause: Exception):
        super().__init__(f"Cannot open intermediate file {path} (map task {map_task}): {cause}")
        self.path = path
        self.map_task = map_task
        self.cause = cause


class MalformedRecordError(ReduceTaskError):
    """A record in an intermediate file could not be decoded"""

    def __init__(self, path: str, line_no: int, reason: str):
        super().__init__(f"Malformed record in {path} at line {line_no}: {reason}")
        self.path = path
        self.line_no = line_no
        self.reason = reason


class EncodeError(ReduceTaskError):
    """A reduced record could not be serialized"""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Cannot encode reduced record for key {key!r}: {reason}")
        self.key = key
        self.reason = reason


class ReduceFunctionError(ReduceTaskError):
    """The user reduce function raised for a key"""

    def __init__(self, key: str, cause: Exception):
        super().__init__(f"Reduce function failed for key {key!r}: {cause}")
        self.key = key
        self.cause = cause
