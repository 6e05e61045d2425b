"""
Default configuration values for ngdriver.
"""

# Synchronization defaults
DEFAULT_ROOT_ELEMENT = "body"
DEFAULT_IGNORE_SYNCHRONIZATION = False
DEFAULT_SCRIPT_TIMEOUT = None

# Framework detection defaults
DEFAULT_DETECTION_ATTEMPTS = 5
DEFAULT_DETECTION_INTERVAL = 1.0
DEFAULT_NG12_HYBRID = False

# Navigation defaults
DEFAULT_BLANK_URL = "about:blank"
DEFAULT_TRACK_OUTSTANDING_TIMEOUTS = True

# File config defaults
DEFAULT_CONFIG_FILENAME = "ngdriver.config"
DEFAULT_CONFIG_EXTENSIONS = [".json", ".yaml", ".yml", ".toml"]
DEFAULT_CONFIG_SEARCH_PATHS = [
    ".",
    "~/.config/ngdriver",
]

# Section name used when options are nested in a shared config file
CONFIG_SECTION = "ngdriver"

# Environment variable prefix
ENV_PREFIX = "NGDRIVER_"
