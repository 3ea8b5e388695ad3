"""
Centralized constants for remember-cursor.

Timing values are in milliseconds, matching the units of the settings file.
"""

# =============================================================================
# FILES & DIRECTORIES
# =============================================================================

# Private directory inside the workspace root
PRIVATE_DIR_NAME = ".remember-cursor"

DEFAULT_DB_FILE_NAME = f"{PRIVATE_DIR_NAME}/cursor-positions.json"
SETTINGS_FILE_NAME = f"{PRIVATE_DIR_NAME}/data.json"
LOG_FILE_NAME = f"{PRIVATE_DIR_NAME}/remember-cursor.log"

# Environment variable overriding the workspace root used by the CLI
ROOT_ENV_VAR = "REMEMBER_CURSOR_ROOT"

# =============================================================================
# TIMING (milliseconds)
# =============================================================================

SAFE_DB_FLUSH_INTERVAL_MS = 5000  # Floor for the periodic flush

DEFAULT_DELAY_AFTER_FILE_OPENING_MS = 100
MIN_DELAY_AFTER_FILE_OPENING_MS = 0
MAX_DELAY_AFTER_FILE_OPENING_MS = 300

# Wait between the indicator check and applying a restored state
INDICATOR_SETTLE_DELAY_MS = 10

# How long a heading jump stays highlighted in the editor
NAVIGATION_HIGHLIGHT_SECONDS = 1.0
