"""memcheck: available-memory check plugin."""

PLUGIN_NAME = "check_available_memory"
PLUGIN_VERSION = "1.0"
