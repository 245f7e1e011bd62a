class ReduceTaskError(RuntimeError):
    """Base class for errors that abort a reduce task.

    A reduce task that raises one of these produced no valid output; the
    caller is expected to run the whole task again.

    """


class InputReadError(ReduceTaskError):
    """Raised when an intermediate file is missing, unreadable, or does not
    decode as a stream of key/value records.

    The underlying :class:`OSError` or decode error is available as
    ``__cause__``.

    """

    def __init__(self, message, path=None, map_task=None):
        super().__init__(message)
        self.path = path
        self.map_task = map_task


class OutputWriteError(ReduceTaskError):
    """Raised when the reduce output cannot be created, written, or closed."""

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path
