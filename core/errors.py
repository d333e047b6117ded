class SortVizError(Exception):
    """Base class for every error raised by the visualizer."""


class IndexOutOfRange(SortVizError, IndexError):
    """An index passed to a model mutator lies outside ``[0, N)``."""

    def __init__(self, index, size):
        super().__init__(f"Index {index} out of range for array of length {size}")
        self.index = index
        self.size = size


class InvalidRange(SortVizError, ValueError):
    """Malformed randomize bounds; the request is rejected untouched."""


class InvalidStateTransition(SortVizError, RuntimeError):
    """The requested operation is not allowed in the current session state."""


class UnknownAlgorithm(SortVizError, KeyError):
    def __str__(self):
        return f"Unknown algorithm: {self.args[0]!r}"
