"""
Custom exceptions for Text Placement Analyzer
"""


class PlacementError(Exception):
    """
    Base class for data conditions that prevent a text placement.

    These are recoverable: the analyzer catches them, reports the message
    through its notifier and returns an empty result instead of crashing.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidInputError(PlacementError):
    """
    Raised when the pixel buffer or grid has a zero dimension.

    No statistics are computed in this case.
    """

    def __init__(self, width: int, height: int, rows: int, cols: int, message: str = None):
        self.width = width
        self.height = height
        self.rows = rows
        self.cols = cols
        super().__init__(
            message or f"Cannot analyze {width}x{height} image with a {rows}x{cols} grid"
        )


class NoCandidateShapesError(PlacementError):
    """
    Raised when no rectangle shape satisfies the target area within the
    grid bounds left after border exclusion.
    """

    def __init__(self, target_area: int, max_rows: int, max_cols: int, message: str = None):
        self.target_area = target_area
        self.max_rows = max_rows
        self.max_cols = max_cols
        super().__init__(
            message or (
                "Could not generate valid shapes. "
                "Try reducing border exclusion or increasing grid/target area."
            )
        )


class NoCandidateRectangleError(PlacementError):
    """
    Raised when every generated shape failed to fit the bounded grid.
    """

    def __init__(self, num_shapes: int, message: str = None):
        self.num_shapes = num_shapes
        super().__init__(
            message or "Could not find a suitable area with current settings. Try different parameters."
        )
