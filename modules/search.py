"""
Rectangle Search Module - Find the calmest placement for each shape
"""

import math
from typing import Iterable, Optional

from loguru import logger

from modules.models import RGB, GridStats, RectCandidate, ShapeCandidate


def find_best_rect_for_shape(
    shape: ShapeCandidate,
    grid: GridStats,
    border_exclusion: int = 0
) -> Optional[RectCandidate]:
    """
    Slide one shape over the grid and keep the lowest-busyness position

    Positions are scanned row-major; on exact ties the first position wins.

    Args:
        shape: Shape to place
        grid: Per-cell statistics
        border_exclusion: Cells kept free along every edge

    Returns:
        Best placement, or None if the shape does not fit
    """
    rows, cols = grid.grid_config.rows, grid.grid_config.cols

    if shape.rows + 2 * border_exclusion > rows or shape.cols + 2 * border_exclusion > cols:
        return None

    busyness = grid.busyness_grid
    colors = grid.color_grid
    cell_count = shape.rows * shape.cols

    max_r_start = rows - shape.rows - border_exclusion
    max_c_start = cols - shape.cols - border_exclusion

    best_rect = None
    min_avg_busyness = math.inf

    for r_start in range(border_exclusion, max_r_start + 1):
        for c_start in range(border_exclusion, max_c_start + 1):
            r_end = r_start + shape.rows
            c_end = c_start + shape.cols

            avg_busyness = float(busyness[r_start:r_end, c_start:c_end].sum() / cell_count)

            if avg_busyness < min_avg_busyness:
                min_avg_busyness = avg_busyness
                color_sums = colors[r_start:r_end, c_start:c_end].reshape(-1, 3).sum(axis=0)
                best_rect = RectCandidate(
                    x=math.floor(c_start * grid.cell_width_px),
                    y=math.floor(r_start * grid.cell_height_px),
                    width=math.floor(shape.cols * grid.cell_width_px),
                    height=math.floor(shape.rows * grid.cell_height_px),
                    avg_color=RGB(
                        float(color_sums[0] / cell_count),
                        float(color_sums[1] / cell_count),
                        float(color_sums[2] / cell_count),
                    ),
                    r_start=r_start,
                    c_start=c_start,
                    avg_busyness=avg_busyness,
                    shape=shape,
                )

    return best_rect


def find_best_rect(
    shapes: Iterable[ShapeCandidate],
    grid: GridStats,
    border_exclusion: int = 0
) -> Optional[RectCandidate]:
    """
    Pick the lowest-busyness placement across all shapes

    Shapes are tested in the given order; on exact ties the earlier
    shape wins.

    Args:
        shapes: Candidate shapes, in generation order
        grid: Per-cell statistics
        border_exclusion: Cells kept free along every edge

    Returns:
        Overall best placement, or None if no shape fits
    """
    overall_best = None

    for shape in shapes:
        rect = find_best_rect_for_shape(shape, grid, border_exclusion)
        if rect is None:
            logger.debug(f"Shape {shape.rows}x{shape.cols} does not fit the bounded grid")
            continue

        logger.debug(
            f"Shape {shape.rows}x{shape.cols} ({shape.name}): "
            f"best at ({rect.r_start}, {rect.c_start}), busyness={rect.avg_busyness:.2f}"
        )

        if overall_best is None or rect.avg_busyness < overall_best.avg_busyness:
            overall_best = rect

    return overall_best
