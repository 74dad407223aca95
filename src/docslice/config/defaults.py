"""Default configuration values for docslice."""

from pathlib import Path

# Default configuration file name
DEFAULT_CONFIG_FILENAME = "docslice.config.json"

# Search paths for configuration file (in order of priority)
CONFIG_SEARCH_PATHS = [
    Path.cwd() / DEFAULT_CONFIG_FILENAME,
    Path.home() / ".config" / "docslice" / "config.json",
]

# Files that hold runnable examples
DEFAULT_TEST_PATTERNS = ["test_*.py", "*_test.py"]

# Example functions are named with this prefix
DEFAULT_EXAMPLE_PREFIX = "example_"

# Character that ends a sentence in doc text
DEFAULT_TERMINATOR = "."

# One level of indentation in captured example code
DEFAULT_INDENT_UNIT = "    "
