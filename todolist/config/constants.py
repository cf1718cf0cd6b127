"""
Application constants
"""

# Storage
DEFAULT_DATA_FILE = "data/data.json"
JSON_INDENT = 4


# Display labels (also indexed by the search trie)
STATUS_LABELS = {1: "To-Do", 2: "In Progress", 3: "Completed"}
PRIORITY_LABELS = {1: "Low", 2: "Medium", 3: "High"}

# Accepted user input for statuses and priorities
STATUS_ALIASES = {
    "1": 1,
    "todo": 1,
    "to-do": 1,
    "2": 2,
    "inprogress": 2,
    "in-progress": 2,
    "in_progress": 2,
    "3": 3,
    "completed": 3,
    "done": 3,
}
PRIORITY_ALIASES = {
    "1": 1,
    "low": 1,
    "2": 2,
    "medium": 2,
    "3": 3,
    "high": 3,
}

# Table layout
TABLE_ID_WIDTH = 4
TABLE_NAME_WIDTH = 35
TABLE_STATUS_WIDTH = 12
TABLE_PRIORITY_WIDTH = 10
TABLE_DUE_WIDTH = 15
DISPLAY_DATE_FORMAT = "%Y-%m-%d"
DISPLAY_DATETIME_FORMAT = "%Y-%m-%d %H:%M"

# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Application
APP_NAME = "todolist"
APP_VERSION = "2.0.0"
