"""Exceptions raised by pairflow."""

__all__ = ["PipelineConsumedError"]


class PipelineConsumedError(RuntimeError):
    """Raised when an operation is invoked on a pipeline or sequence that has
    already been used by another operation.

    A pipeline may be traversed once. Every intermediate operation hands its
    source over to the new handle, and every terminal operation drains it.
    """

    def __init__(self, kind: str, operation: str):
        self.kind = kind
        self.operation = operation
        super().__init__(
            f"{kind} has already been consumed; cannot call '{operation}'."
        )
