"""
Configuration & Path Management
===============================
This module serves as the central registry for file paths and global constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents hardcoded paths and magic numbers (camera placement,
   light rig, thumbnail size) from being scattered throughout the code.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find assets (the chart data JSON) when the app is frozen into an .exe.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    DEFAULT_DATA_PATH (str): Absolute path to the bundled chart data file.
"""
import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # Development mode: resolve relative to this file
    # config.py is in src/factchart/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# --- Paths ---
ASSETS_PATH: str = get_resource_path("assets")
DEFAULT_DATA_PATH: str = os.path.join(ASSETS_PATH, "fact-data.json")

if not os.path.exists(ASSETS_PATH):
    logger.warning(f"Assets path not found at {ASSETS_PATH}")

# --- Thumbnails ---
THUMB_WIDTH: int = 128
THUMB_HEIGHT: int = 128
THUMB_BACKGROUND: str = "white"
# Number of entries rendered between two cooperative yields to the event loop
THUMBNAIL_YIELD_EVERY: int = 8

# --- Cameras (perspective, vertical field of view in degrees) ---
CAMERA_FOV: float = 50.0
CAMERA_NEAR: float = 0.1
CAMERA_FAR: float = 100.0
CAMERA_FOCAL_POINT: tuple[float, float, float] = (0.0, 0.0, 0.0)
CAMERA_UP: tuple[float, float, float] = (0.0, 1.0, 0.0)
THUMB_CAMERA_POSITION: tuple[float, float, float] = (0.0, 1.0, 4.0)
MODAL_CAMERA_POSITION: tuple[float, float, float] = (0.0, 1.5, 5.0)

# --- Modal viewer ---
MODAL_BACKGROUND: str = "#ddeeff"
MODAL_FRAME_INTERVAL_MS: int = 16

# --- Standard light rig ---
AMBIENT_LIGHT_COLOR: str = "white"
AMBIENT_LIGHT_INTENSITY: float = 0.7
DIRECTIONAL_LIGHT_COLOR: str = "white"
DIRECTIONAL_LIGHT_INTENSITY: float = 0.3
DIRECTIONAL_LIGHT_POSITION: tuple[float, float, float] = (2.0, 5.0, 5.0)
