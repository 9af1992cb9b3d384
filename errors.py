class ViewerError(Exception):
    """Base class for everything the viewer core raises on purpose."""


class MetadataMissing(ViewerError):
    pass


class ShapeMismatch(ViewerError):
    pass


class StoreUnavailable(ViewerError):
    pass


class ProjectionError(ViewerError):
    """A single projection could not be produced; the view keeps its state."""


class IndexOutOfRange(ProjectionError, IndexError):
    pass


class AxesNotDistinct(ProjectionError, ValueError):
    pass


class RaggedGrid(ProjectionError):
    pass


class StoreReadError(ProjectionError):
    """The store could not hand back a numeric slice (I/O failure or non-numeric data)."""
