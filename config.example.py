# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit a real .env. Use:
- .env (local, gitignored)

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKMGR_APP_NAME": "App display name (default: task-manager).",
    "TASKMGR_LOG_LEVEL": "Console logging level (default: INFO).",
    "TASKMGR_DATA_DIR": "Local data directory, holds tasks.log (default: .local/task-manager).",
    # Connectors
    "TASKMGR_CONSOLE_ENABLED": "Enable console connector (true/false, default: true).",
    # Expiry sweep
    "TASKMGR_SWEEPER_ENABLED": "Run the background expiry sweeper (true/false, default: true).",
    "TASKMGR_SWEEP_INTERVAL_SECONDS": "Seconds between sweeps (default: 3600).",
    "TASKMGR_SWEEP_RETENTION_SECONDS": (
        "Done tasks untouched for longer than this are removed (default: 86400)."
    ),
    # Store tuning
    "TASKMGR_STORE_MAX_OPTIMISTIC_RETRIES": (
        "Commit conflicts tolerated before an update is applied under the store lock (default: 64)."
    ),
}
