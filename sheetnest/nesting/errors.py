"""Exceptions raised by the nesting engine.

Unplaceable parts are not errors: they are reported in
``NestingResult.unplaced`` and the run completes normally.
"""


class NestingError(Exception):
    """Base class for nesting failures."""


class InvalidInputError(NestingError):
    """Raised when the sheet or a part definition is unusable."""


class ConfigurationError(NestingError):
    """Raised when the nesting configuration is out of range."""


class NestingTimeoutError(NestingError):
    """Raised when a run exceeds its configured time limit."""

    def __init__(self, elapsed: float, processed: int, total: int):
        self.elapsed = elapsed
        self.processed = processed
        self.total = total
        super().__init__(
            f"Nesting aborted after {elapsed:.2f}s ({processed}/{total} part units processed)"
        )
