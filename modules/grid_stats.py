"""
Grid Statistics Module - Per-cell average color and busyness
"""

import math
from typing import List

import numpy as np
from loguru import logger

from modules.models import RGB, CellStat, GridConfig, GridStats, PixelBuffer
from utils.color_utils import LUMA_WEIGHTS_MILLI
from utils.exceptions import InvalidInputError

# Sentinel for cells that cover no pixels; never picked by the search
EMPTY_CELL = CellStat(avg_color=RGB(0.0, 0.0, 0.0), busyness=math.inf)

# Luminance is summed in thousandths; variance scales by the square
LUMA_SCALE_SQ = 1000 * 1000


def _cell_boundaries(length: int, cells: int) -> List[int]:
    """
    Pixel offsets of cell edges along one axis

    Edges are floor-sampled from fractional cell sizes so neighbouring
    cells differ by at most one pixel. The last edge is pinned to the
    buffer size so the cells always cover every pixel.
    """
    cell_size = length / cells
    edges = [math.floor(index * cell_size) for index in range(cells)]
    edges.append(length)
    return edges


def compute_grid_stats(pixels: PixelBuffer, grid_config: GridConfig) -> GridStats:
    """
    Partition a pixel buffer into cells and score each one

    Busyness is the variance of per-pixel luminance within the cell.

    Args:
        pixels: Image to analyze
        grid_config: Number of rows and columns

    Returns:
        GridStats with a row-major CellStat for every cell

    Raises:
        InvalidInputError: If the image or the grid has a zero dimension
    """
    width, height = pixels.width, pixels.height
    rows, cols = grid_config.rows, grid_config.cols

    if width == 0 or height == 0 or rows == 0 or cols == 0:
        raise InvalidInputError(width, height, rows, cols)

    cell_width_px = width / cols
    cell_height_px = height / rows
    x_edges = _cell_boundaries(width, cols)
    y_edges = _cell_boundaries(height, rows)

    # Integer channels and luminance (scaled by 1000) keep the sums exact,
    # so a uniform cell scores exactly zero
    rgb = pixels.data[:, :, :3].astype(np.int64)
    w_r, w_g, w_b = LUMA_WEIGHTS_MILLI
    lum = w_r * rgb[:, :, 0] + w_g * rgb[:, :, 1] + w_b * rgb[:, :, 2]

    stats = []
    empty_cells = 0

    for r in range(rows):
        y0, y1 = y_edges[r], y_edges[r + 1]
        for c in range(cols):
            x0, x1 = x_edges[c], x_edges[c + 1]

            count = (y1 - y0) * (x1 - x0)
            if count <= 0:
                stats.append(EMPTY_CELL)
                empty_cells += 1
                continue

            sums = rgb[y0:y1, x0:x1].reshape(-1, 3).sum(axis=0)
            avg_color = RGB(int(sums[0]) / count, int(sums[1]) / count, int(sums[2]) / count)

            cell_lum = lum[y0:y1, x0:x1]
            lum_sum = int(cell_lum.sum())
            lum_sq_sum = int((cell_lum * cell_lum).sum())
            # n * sum(L^2) - sum(L)^2 in Python ints, scaled back once
            busyness = (count * lum_sq_sum - lum_sum * lum_sum) / (count * count * LUMA_SCALE_SQ)

            stats.append(CellStat(avg_color=avg_color, busyness=busyness))

    if empty_cells:
        logger.debug(f"{empty_cells} cell(s) cover no pixels ({rows}x{cols} grid on {width}x{height})")

    logger.debug(
        f"Computed stats for {rows}x{cols} grid on {width}x{height} image "
        f"(cell {cell_width_px:.1f}x{cell_height_px:.1f}px)"
    )

    return GridStats(
        stats=tuple(stats),
        grid_config=grid_config,
        cell_width_px=cell_width_px,
        cell_height_px=cell_height_px,
        canvas_width=width,
        canvas_height=height,
    )
