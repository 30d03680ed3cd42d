"""
Configuration settings for Text Placement Analyzer
"""

from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Project paths
    PROJECT_ROOT: Path = Path(__file__).parent
    ASSETS_DIR: Path = PROJECT_ROOT / "assets"
    FONTS_DIR: Path = ASSETS_DIR / "fonts"

    # Grid analysis defaults
    GRID_ROWS: int = 10
    GRID_COLS: int = 10
    TARGET_AREA: int = 12  # Desired rectangle size in cells
    BORDER_EXCLUSION_CELLS: int = 0  # Cells kept free along every edge
    PREFER_CELL_COLOR: bool = False  # Try a cell's average color before black/white

    # Display sizing (images larger than this are scaled down before analysis)
    MAX_CANVAS_WIDTH: int = 800
    MAX_CANVAS_HEIGHT: int = 600

    # Text settings
    FONT_FILE: str = "DejaVuSans.ttf"  # Looked up in FONTS_DIR first, then system fonts
    FONT_FAMILY: str = "DejaVuSans"
    DEFAULT_TEXT: str = "Your Awesome Text Here"
    TEXT_PADDING: int = 10  # Inset on all sides of the placement rectangle
    LINE_HEIGHT_MULTIPLIER: float = 1.2
    MIN_RENDER_FONT_SIZE: int = 8

    # Scrim settings (translucent box behind text)
    CONTRAST_THRESHOLD_FOR_SCRIM: float = 4.0  # Below this contrast ratio -> scrim
    BUSYNESS_THRESHOLD_FOR_SCRIM: float = 500.0  # Above this busyness -> scrim

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""  # Empty = stderr only

    # FastAPI settings
    API_TITLE: str = "Text Placement Analyzer API"
    API_VERSION: str = "1.0.0"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
