"""
FastAPI Application for Text Placement Analyzer
"""

import io
import json
import sys
from typing import List, Optional, Tuple

import numpy as np
from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from loguru import logger
from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel

from config import settings
from modules import (
    AnalysisOutcome,
    AnalysisResult,
    GridConfig,
    ImageAnalyzer,
    PillowSurface,
    Renderer,
)
from utils.image_utils import (
    cover_crop,
    encode_png,
    fit_to_display,
    image_to_array,
    pixel_buffer_from_image,
)

# Configure logging
logger.remove()
logger.add(sys.stderr, level=settings.LOG_LEVEL)
if settings.LOG_FILE:
    logger.add(settings.LOG_FILE, rotation="500 MB", retention="10 days", level="DEBUG")

# Initialize FastAPI app
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description="Find the calmest region of an image and render legible text over it"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, replace with specific origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response Models
class StatusResponse(BaseModel):
    """Status response model"""
    status: str
    message: str


class AnalyzeResponse(BaseModel):
    """Response model for image analysis"""
    success: bool
    result: Optional[dict] = None
    warnings: List[str] = []
    hover: Optional[dict] = None


# ============================================================================
# Helpers
# ============================================================================
async def _read_image(file: UploadFile) -> np.ndarray:
    """
    Decode an uploaded image into an RGB array

    Raises:
        HTTPException: 400 if the upload is not a readable image
    """
    data = await file.read()
    try:
        with Image.open(io.BytesIO(data)) as image:
            return image_to_array(image)
    except (UnidentifiedImageError, OSError) as e:
        logger.error(f"Failed to decode upload {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=f"Could not decode image: {file.filename}")


def _prepare_canvas(
    image: np.ndarray,
    viewport_width: Optional[int],
    viewport_height: Optional[int]
) -> np.ndarray:
    """
    Size the image the way it will be shown

    With a viewport the image is cover-cropped to fill it (fullscreen);
    otherwise it is scaled down to the display box.
    """
    if viewport_width and viewport_height:
        try:
            return cover_crop(image, viewport_width, viewport_height)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    return fit_to_display(image, settings.MAX_CANVAS_WIDTH, settings.MAX_CANVAS_HEIGHT)


def _run_analysis(
    canvas: np.ndarray,
    rows: int,
    cols: int,
    target_area: int,
    border_exclusion: int,
    prefer_cell_color: bool
) -> Tuple[AnalysisOutcome, List[str]]:
    """
    Analyze a prepared canvas, collecting warnings for the response

    Raises:
        HTTPException: 400 for invalid parameters
    """
    warnings: List[str] = []
    analyzer = ImageAnalyzer(notifier=warnings.append)

    try:
        outcome = analyzer.analyze(
            pixel_buffer_from_image(canvas),
            grid_config=GridConfig(rows, cols),
            target_area=target_area,
            prefer_cell_color=prefer_cell_color,
            border_exclusion=border_exclusion,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return outcome, warnings


def _png_response(surface: PillowSurface) -> Response:
    return Response(content=encode_png(surface.to_image()), media_type="image/png")


# ============================================================================
# API Endpoints
# ============================================================================
@app.get("/health", response_model=StatusResponse)
async def health():
    """Health check endpoint"""
    return StatusResponse(
        status="healthy",
        message="All systems operational"
    )


@app.post("/analyze", response_model=AnalyzeResponse)
async def analyze_image(
    file: UploadFile = File(...),
    rows: int = Form(settings.GRID_ROWS),
    cols: int = Form(settings.GRID_COLS),
    target_area: int = Form(settings.TARGET_AREA),
    border_exclusion: int = Form(settings.BORDER_EXCLUSION_CELLS),
    prefer_cell_color: bool = Form(settings.PREFER_CELL_COLOR),
    viewport_width: Optional[int] = Form(None),
    viewport_height: Optional[int] = Form(None),
    include_hover: bool = Form(False)
):
    """
    Find the best text placement in an uploaded image

    Returns:
        Analysis result (or warnings when no placement was found)
    """
    image = await _read_image(file)
    canvas = _prepare_canvas(image, viewport_width, viewport_height)
    outcome, warnings = _run_analysis(canvas, rows, cols, target_area, border_exclusion, prefer_cell_color)

    return AnalyzeResponse(
        success=outcome.success,
        result=outcome.result.to_dict() if outcome.result else None,
        warnings=warnings,
        hover=outcome.hover_data.to_dict() if include_hover and outcome.hover_data else None,
    )


@app.post("/render")
async def render_text(
    file: UploadFile = File(...),
    text: str = Form(settings.DEFAULT_TEXT),
    rows: int = Form(settings.GRID_ROWS),
    cols: int = Form(settings.GRID_COLS),
    target_area: int = Form(settings.TARGET_AREA),
    border_exclusion: int = Form(settings.BORDER_EXCLUSION_CELLS),
    prefer_cell_color: bool = Form(settings.PREFER_CELL_COLOR),
    viewport_width: Optional[int] = Form(None),
    viewport_height: Optional[int] = Form(None),
    analysis_json: Optional[str] = Form(None)
):
    """
    Render text onto an uploaded image at the best placement

    A previously returned analysis result can be passed as analysis_json to
    re-render new text without analyzing again.

    Returns:
        PNG image
    """
    image = await _read_image(file)
    canvas = _prepare_canvas(image, viewport_width, viewport_height)

    if analysis_json:
        try:
            result = AnalysisResult.from_dict(json.loads(analysis_json))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid analysis_json: {e}")
    else:
        outcome, warnings = _run_analysis(canvas, rows, cols, target_area, border_exclusion, prefer_cell_color)
        if outcome.result is None:
            raise HTTPException(
                status_code=422,
                detail={"message": "No suitable placement found", "warnings": warnings}
            )
        result = outcome.result

    height, width = canvas.shape[:2]
    surface = PillowSurface(Image.fromarray(canvas))
    layout = Renderer().render_text(surface, text, result, width, height)

    logger.info(f"Rendered {len(layout.lines)} line(s) at {layout.font_size}px into {width}x{height} image")

    return _png_response(surface)


@app.post("/overlay")
async def render_overlay(
    file: UploadFile = File(...),
    rows: int = Form(settings.GRID_ROWS),
    cols: int = Form(settings.GRID_COLS),
    target_area: int = Form(settings.TARGET_AREA),
    border_exclusion: int = Form(settings.BORDER_EXCLUSION_CELLS),
    prefer_cell_color: bool = Form(settings.PREFER_CELL_COLOR),
    hover_x: Optional[float] = Form(None),
    hover_y: Optional[float] = Form(None)
):
    """
    Render the per-cell busyness diagnostics over an uploaded image

    Returns:
        PNG image
    """
    image = await _read_image(file)
    canvas = _prepare_canvas(image, None, None)
    outcome, warnings = _run_analysis(canvas, rows, cols, target_area, border_exclusion, prefer_cell_color)

    grid = outcome.hover_data
    if grid is None:
        raise HTTPException(
            status_code=422,
            detail={"message": "Image could not be analyzed", "warnings": warnings}
        )

    hovered_cell = None
    if hover_x is not None and hover_y is not None:
        hovered_cell = grid.cell_at(hover_x, hover_y)

    surface = PillowSurface(Image.fromarray(canvas))
    Renderer().draw_hover_overlay(surface, grid, outcome.result, hovered_cell)

    return _png_response(surface)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=True
    )
