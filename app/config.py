"""
Configuration settings for the portfolio app.

Storage location and logging can be overridden through the environment
(or a .env file). The admin key is a plain constant on purpose: it ships
with the running client and only hides the editor, it protects nothing.
"""

from dotenv import load_dotenv
load_dotenv()          # ← must be before os.getenv(...)
import logging
import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Local storage: one JSON file per key inside this directory
STORAGE_DIR = Path(os.getenv("PORTFOLIO_STORAGE_DIR", _PROJECT_ROOT / ".storage"))

# Name of the persisted snapshot entry
SNAPSHOT_KEY = os.getenv("PORTFOLIO_SNAPSHOT_KEY", "aeju_portfolio_data")

LOG_LEVEL = os.getenv("PORTFOLIO_LOG_LEVEL", "INFO").upper()

# Admin editor key, compared verbatim. Not a security boundary.
ADMIN_KEY = "0818"


def get_log_level() -> int:
    """Map PORTFOLIO_LOG_LEVEL to a logging level, defaulting to INFO."""
    level = logging.getLevelName(LOG_LEVEL)
    return level if isinstance(level, int) else logging.INFO
