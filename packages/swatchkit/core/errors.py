"""Error taxonomy for SwatchKit.

Parsing and validation problems are reported as structured results across the
public API; these exceptions are raised internally and by the few operations
whose contract is to raise (``parse_color``, ``build_swatch``, executor futures).
"""

from __future__ import annotations


class SwatchKitError(Exception):
    """Base exception for all SwatchKit errors."""


class FormatError(SwatchKitError, ValueError):
    """Raised when a color input is neither a 3/6-digit hex nor a known name.

    Attributes:
        value: The offending input.
    """

    def __init__(self, value: object, message: str | None = None) -> None:
        self.value = value
        super().__init__(message or f"Unable to parse color: {value!r}")


class RangeError(SwatchKitError, ValueError):
    """Raised when a swatch arity or color count falls outside its bounds.

    Attributes:
        actual: The value that was out of range.
        minimum: Inclusive lower bound.
        maximum: Inclusive upper bound.
    """

    def __init__(self, actual: int, minimum: int, maximum: int, what: str = "color count") -> None:
        self.actual = actual
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(f"{what.capitalize()} must be between {minimum} and {maximum}, got {actual}")


class DuplicateError(SwatchKitError, ValueError):
    """Raised when a swatch contains the same canonical color more than once."""

    def __init__(self, duplicates: list[str]) -> None:
        self.duplicates = duplicates
        super().__init__(f"Swatch cannot contain duplicate colors: {', '.join(duplicates)}")


class RuleError(SwatchKitError):
    """Raised (and captured) when a validation rule fails internally.

    Attributes:
        rule_id: Identifier of the rule that raised.
        cause: Original exception.
    """

    def __init__(self, rule_id: str, cause: BaseException) -> None:
        self.rule_id = rule_id
        self.cause = cause
        super().__init__(f"Rule {rule_id} failed: {cause}")


class ExecutorTerminatedError(SwatchKitError, RuntimeError):
    """Raised for tasks submitted after shutdown or still queued at shutdown."""


class ExecutorNotInitializedError(ExecutorTerminatedError):
    """Raised for tasks submitted before the pool was initialized."""


class TaskExecutionError(SwatchKitError, RuntimeError):
    """Raised to the submitter when a task body fails.

    Attributes:
        task_id: Id of the failed task.
        task_type: Type of the failed task.
        error_type: Class name of the underlying exception.
    """

    def __init__(self, task_id: str, task_type: str, message: str, error_type: str | None = None):
        self.task_id = task_id
        self.task_type = task_type
        self.error_type = error_type
        super().__init__(f"Task {task_id} ({task_type}) failed: {message}")


class CacheIOError(SwatchKitError, OSError):
    """Raised when the durable cache store cannot be read or written."""


__all__ = [
    "CacheIOError",
    "DuplicateError",
    "ExecutorNotInitializedError",
    "ExecutorTerminatedError",
    "FormatError",
    "RangeError",
    "RuleError",
    "SwatchKitError",
    "TaskExecutionError",
]
