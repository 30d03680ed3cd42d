"""
Shape Candidates Module - Rectangle sizes worth testing for a target area
"""

import math
from typing import Dict, List, Tuple

from loguru import logger

from modules.models import ShapeCandidate
from utils.color_utils import round_half_up

AREA_TOLERANCE = 0.8  # Shapes may undershoot the target area by up to 20%
LANDSCAPE_BIAS = 1.8  # Width:height cell ratio for the landscape attempt


def classify_aspect(rows: int, cols: int) -> str:
    """
    Qualitative aspect ratio name of a shape

    Args:
        rows: Shape height in cells
        cols: Shape width in cells

    Returns:
        'square', 'landscape', 'portrait' or 'near-square'
    """
    if abs(rows - cols) <= max(1, min(rows, cols) * 0.25):
        return "square"
    if cols > rows * 1.25:
        return "landscape"
    if rows > cols * 1.25:
        return "portrait"
    return "near-square"


def generate_shapes(target_area: int, max_rows: int, max_cols: int) -> List[ShapeCandidate]:
    """
    Generate deduplicated rectangle shapes close to the target area

    Order matters: the search keeps the first shape on busyness ties.

    Args:
        target_area: Desired number of cells
        max_rows: Rows available after border exclusion
        max_cols: Columns available after border exclusion

    Returns:
        Shapes in generation order (may be empty)
    """
    shapes: Dict[Tuple[int, int], ShapeCandidate] = {}

    def add_shape(rows: int, cols: int) -> None:
        if rows <= 0 or cols <= 0 or rows > max_rows or cols > max_cols:
            return
        if rows * cols < target_area * AREA_TOLERANCE:
            return
        if (rows, cols) not in shapes:
            shapes[(rows, cols)] = ShapeCandidate(classify_aspect(rows, cols), rows, cols)

    # Square-ish and its transpose
    rows_sq = max(1, round_half_up(math.sqrt(target_area)))
    cols_sq = max(1, math.ceil(target_area / rows_sq))
    add_shape(rows_sq, cols_sq)
    add_shape(cols_sq, rows_sq)

    # Landscape
    rows_ls = max(1, round_half_up(math.sqrt(target_area / LANDSCAPE_BIAS)))
    cols_ls = max(1, math.ceil(target_area / rows_ls))
    if rows_ls * cols_ls < target_area and cols_ls < max_cols:
        cols_ls += 1
    add_shape(rows_ls, cols_ls)

    # Portrait
    cols_pt = max(1, round_half_up(math.sqrt(target_area / LANDSCAPE_BIAS)))
    rows_pt = max(1, math.ceil(target_area / cols_pt))
    if rows_pt * cols_pt < target_area and rows_pt < max_rows:
        rows_pt += 1
    add_shape(rows_pt, cols_pt)

    # Single row / single column
    if target_area <= max_cols:
        add_shape(1, min(max_cols, target_area))
    if target_area <= max_rows:
        add_shape(min(max_rows, target_area), 1)

    # One cell larger than square
    add_shape(rows_sq + 1, cols_sq)
    add_shape(rows_sq, cols_sq + 1)

    result = list(shapes.values())

    logger.debug(
        f"Generated {len(result)} shape(s) for area {target_area} "
        f"within {max_rows}x{max_cols}: {[f'{s.rows}x{s.cols}' for s in result]}"
    )

    return result
