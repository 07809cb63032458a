import os

# Defaults for local runs; DATABASE_URL and LOG_LEVEL in the environment take precedence.
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./weekplan.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Patterns created on first run when the catalog has none
DEFAULT_PATTERN_NAMES = ("Week A", "Week B")
