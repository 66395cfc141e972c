# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TRACKER_APP_NAME": "App display name (default: task-tracker).",
    "TRACKER_LOG_LEVEL": "Console logging level (default: INFO).",
    # Switches
    "TRACKER_PERSIST": "Keep tasks in the data file (true/false, default: true).",
    "TRACKER_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    # Paths (gitignored)
    "TRACKER_DATA_DIR": "Local data directory for logs and data (default: .local/tracker).",
    "TRACKER_TASKS_FILE": "Data file path (default: <data_dir>/tasks.csv).",
}
