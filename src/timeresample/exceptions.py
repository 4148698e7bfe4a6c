"""Custom exceptions for the timeresample package."""


class TimeResampleError(ValueError):
    """Base error for date normalization and resampling."""


class UnsupportedOperationError(TimeResampleError):
    """Raised when an aggregation or date operation name is not known."""

    def __init__(self, operation: str, supported: "list[str] | tuple[str, ...]") -> None:
        self.operation = operation
        self.supported = tuple(supported)
        super().__init__(
            f"Unsupported operation {operation!r}. "
            f"Supported: {', '.join(self.supported)}"
        )
