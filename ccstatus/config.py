"""ccstatus configuration."""
import os


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default

# Logging
LOG_LEVEL = os.getenv("CCSTATUS_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"

# Recency caps applied after a full transcript scan
MAX_RUNNING_TOOLS = 10
MAX_AGENTS = 5
MAX_SKILLS = 3

# Renderer limits
MAX_COMPLETED_TOOLS_SHOWN = 5
MAX_RUNNING_TOOLS_SHOWN = 3

# Watch mode
WATCH_DEBOUNCE_MS = _env_int("CCSTATUS_WATCH_DEBOUNCE_MS", 50)

# Observability
OTEL_ENABLED = _env_bool("CCSTATUS_OTEL_ENABLED", False)
OTEL_ENDPOINT = os.getenv("CCSTATUS_OTEL_ENDPOINT", "http://localhost:4318")
OTEL_SERVICE_NAME = os.getenv("CCSTATUS_OTEL_SERVICE_NAME", "ccstatus")
PROM_PORT = _env_int("CCSTATUS_PROM_PORT", 0)
