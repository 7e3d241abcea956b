"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = PROJECT_ROOT / "data" / "db" / "availability.db"
OUTPUT_DIR = PROJECT_ROOT / "output"

# =============================================================================
# AVAILABILITY DEFAULTS
# =============================================================================

DEFAULT_WEEKDAY_START = os.environ.get("DEFAULT_WEEKDAY_START", "09:00")
DEFAULT_WEEKDAY_END = os.environ.get("DEFAULT_WEEKDAY_END", "17:00")
DEFAULT_WEEKEND_START = os.environ.get("DEFAULT_WEEKEND_START", "10:00")
DEFAULT_WEEKEND_END = os.environ.get("DEFAULT_WEEKEND_END", "18:00")
DEFAULT_TIMEZONE = os.environ.get("DEFAULT_TIMEZONE", "UTC")
DEFAULT_TIME_BUFFER_FACTOR = float(os.environ.get("DEFAULT_TIME_BUFFER_FACTOR", "0.8"))
DEFAULT_RANGE_DAYS = int(os.environ.get("DEFAULT_RANGE_DAYS", "7"))

# Task-calendar events whose summary contains any of these (case-insensitive) are ignored
BLOCK_KEYWORDS = [
    keyword.strip().lower()
    for keyword in os.environ.get("BLOCK_KEYWORDS", "block,new event").split(",")
    if keyword.strip()
]

# =============================================================================
# DISPLAY
# =============================================================================

PROJECT_COLORS = [
    "#FF6384", "#36A2EB", "#FFCE56", "#4BC0C0", "#9966FF", "#FF9F40",
    "#E74C3C", "#8E44AD", "#2ECC71", "#F1C40F", "#3498DB", "#1ABC9C",
]

UNNAMED_EVENT = "Unnamed Event"
UNNAMED_TASK = "Unnamed Task"
UNASSIGNED_PROJECT = "Unassigned"
UNKNOWN_CALENDAR = "Unknown Calendar"

DAILY_HEADERS = [
    "Date", "Day", "Capacity Hours", "Fungible Hours",
    "Task Hours", "Total After Fungible", "Available Hours",
]
PROJECT_TASK_HEADERS = ["Project", "Task", "Hours", "Color"]
PROJECT_SUMMARY_HEADERS = ["Project", "Total Hours", "Color"]
FUNGIBLE_HEADERS = ["Calendar", "Total Hours", "Color"]
DETAIL_HEADERS = [
    "Date", "Summary", "Calendar", "Category",
    "Start", "End", "Duration (h)", "Impact",
]

# =============================================================================
# MS GRAPH CREDENTIALS (from environment)
# =============================================================================

GRAPH_TENANT_ID = os.environ.get("MICROSOFT_GRAPH_TENANT_ID", "")
GRAPH_APP_ID = os.environ.get("MICROSOFT_GRAPH_APP_ID", "")
GRAPH_CLIENT_SECRET = os.environ.get("MICROSOFT_GRAPH_CLIENT_SECRET", "")
GRAPH_PAGE_SIZE = 250

# =============================================================================
# API CONFIGURATION
# =============================================================================

AVAILABILITY_API_KEY = os.environ.get("AVAILABILITY_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
